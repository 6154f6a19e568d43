"""Load generated lesson content back into typed records."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .models import VALIDATION_TYPES, Chapter, Lesson, ParsedContent, ValidationRule

# JSON key -> Lesson attribute for optional string fields.
OPTIONAL_LESSON_FIELDS = {
    "codeExample": "code_example",
    "initialCode": "initial_code",
    "hint": "hint",
    "arc": "arc",
    "story": "story",
    "continueFrom": "continue_from",
    "checkpointMessage": "checkpoint_message",
}


def validation_from_dict(raw: Any, owner: str) -> ValidationRule:
    """Build a validation rule from raw JSON content."""
    if not isinstance(raw, dict):
        raise ValueError(f"Validation for '{owner}' must be an object.")
    rule_type = str(raw.get("type", ""))
    if rule_type not in VALIDATION_TYPES:
        raise ValueError(f"Validation for '{owner}' has unknown type '{rule_type}'.")
    return ValidationRule(type=rule_type, pattern=str(raw.get("pattern", "")), message=str(raw.get("message", "")))


def _lesson_from_dict(chapter_id: str, raw: Any) -> Lesson:
    """Build a lesson from raw JSON content."""
    if not isinstance(raw, dict):
        raise ValueError(f"Lesson in chapter '{chapter_id}' must be an object.")
    if "id" not in raw or "title" not in raw:
        raise ValueError(f"Lesson in chapter '{chapter_id}' is missing 'id' or 'title'.")
    lesson_id = str(raw["id"])
    optional = {
        attribute: str(raw[key]) for key, attribute in OPTIONAL_LESSON_FIELDS.items() if raw.get(key) is not None
    }
    validation = raw.get("validation")
    return Lesson(
        id=lesson_id,
        title=str(raw["title"]),
        content=str(raw.get("content", "")),
        order=_order(raw, f"Lesson '{lesson_id}'"),
        validation=validation_from_dict(validation, lesson_id) if validation is not None else None,
        **optional,
    )


def _chapter_from_dict(raw: Any) -> Chapter:
    """Build a chapter from raw JSON content."""
    if not isinstance(raw, dict):
        raise ValueError("Chapter must be a JSON object.")
    if "id" not in raw or "title" not in raw:
        raise ValueError("Chapter is missing 'id' or 'title'.")
    chapter_id = str(raw["id"])
    raw_lessons = raw.get("lessons", [])
    if not isinstance(raw_lessons, list):
        raise ValueError(f"Chapter '{chapter_id}' has a non-list 'lessons' field.")
    lessons = [_lesson_from_dict(chapter_id, lesson) for lesson in raw_lessons]
    lessons.sort(key=lambda item: item.order)
    return Chapter(
        id=chapter_id,
        title=str(raw["title"]),
        description=str(raw.get("description", "")),
        lessons=lessons,
        order=_order(raw, f"Chapter '{chapter_id}'"),
    )


def _order(raw: dict[str, Any], owner: str) -> int:
    value = raw.get("order", 0)
    # bool is an int subclass but never a valid order.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{owner} has a non-integer 'order': {value!r}.")
    return value


def content_from_dict(raw: Any) -> ParsedContent:
    """Build parsed content from the decoded JSON document."""
    if not isinstance(raw, dict):
        raise ValueError("Content root must be a JSON object.")
    raw_chapters = raw.get("chapters")
    if not isinstance(raw_chapters, list):
        raise ValueError("Content is missing a 'chapters' list.")

    chapters: list[Chapter] = []
    seen: set[str] = set()
    for item in raw_chapters:
        chapter = _chapter_from_dict(item)
        if chapter.id in seen:
            raise ValueError(f"Duplicate chapter id: {chapter.id}")
        seen.add(chapter.id)
        chapters.append(chapter)
    chapters.sort(key=lambda item: item.order)
    return ParsedContent(chapters=chapters)


def load_content(path: Path | str) -> ParsedContent:
    """Load a generated content file."""
    raw = json.loads(Path(path).read_text(encoding="utf-8-sig"))
    return content_from_dict(raw)
