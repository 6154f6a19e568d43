"""Generate the lessons JSON file from a documentation directory."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any

from .content_loader import OPTIONAL_LESSON_FIELDS
from .models import Chapter, Lesson, ParsedContent
from .parser import parse_all_html_files

logger = logging.getLogger(__name__)

DEFAULT_DOCS_DIR = Path("docs")
DEFAULT_OUTPUT_FILE = Path("lib") / "content" / "lessons.json"


def generate_content(
    docs_dir: Path | str = DEFAULT_DOCS_DIR,
    output_file: Path | str = DEFAULT_OUTPUT_FILE,
) -> ParsedContent:
    """Parse a docs directory and write the result as JSON."""
    logger.info("Parsing HTML files from: %s", docs_dir)
    content = parse_all_html_files(docs_dir)

    logger.info("Found %d chapters", len(content.chapters))
    for chapter in content.chapters:
        logger.info("  - %s (%d lessons)", chapter.title, len(chapter.lessons))
    for lesson_id, chapter_ids in find_duplicate_lesson_ids(content).items():
        logger.warning("Lesson id '%s' is not unique (chapters: %s)", lesson_id, ", ".join(chapter_ids))

    write_content(content, output_file)
    logger.info("Content generated successfully: %s", output_file)
    return content


def write_content(content: ParsedContent, path: Path | str) -> None:
    """Write content as pretty-printed JSON, creating parent directories."""
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(render_content(content), encoding="utf-8")


def render_content(content: ParsedContent) -> str:
    """Serialize content deterministically."""
    return json.dumps(content_to_dict(content), indent=2, ensure_ascii=False) + "\n"


def content_to_dict(content: ParsedContent) -> dict[str, Any]:
    """Convert content to the JSON document shape read by the site."""
    return {"chapters": [_chapter_to_dict(chapter) for chapter in content.chapters]}


def find_duplicate_lesson_ids(content: ParsedContent) -> dict[str, list[str]]:
    """Return lesson ids used more than once, mapped to the chapters using them."""
    seen: dict[str, list[str]] = {}
    for chapter in content.chapters:
        for lesson in chapter.lessons:
            seen.setdefault(lesson.id, []).append(chapter.id)
    return {lesson_id: chapter_ids for lesson_id, chapter_ids in seen.items() if len(chapter_ids) > 1}


def _chapter_to_dict(chapter: Chapter) -> dict[str, Any]:
    return {
        "id": chapter.id,
        "title": chapter.title,
        "description": chapter.description,
        "lessons": [_lesson_to_dict(lesson) for lesson in chapter.lessons],
        "order": chapter.order,
    }


def _lesson_to_dict(lesson: Lesson) -> dict[str, Any]:
    raw: dict[str, Any] = {"id": lesson.id, "title": lesson.title, "content": lesson.content}
    for key, attribute in OPTIONAL_LESSON_FIELDS.items():
        value = getattr(lesson, attribute)
        if value is not None:
            raw[key] = value
    if lesson.validation is not None:
        raw["validation"] = asdict(lesson.validation)
    raw["order"] = lesson.order
    return raw
