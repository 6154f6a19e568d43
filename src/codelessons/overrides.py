"""Apply hand-authored lesson fields on top of generated content."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from .content_loader import OPTIONAL_LESSON_FIELDS, load_content, validation_from_dict
from .generator import write_content
from .models import Chapter, Lesson, ParsedContent, ValidationRule

logger = logging.getLogger(__name__)

# codeExample always comes from the source HTML.
OVERRIDABLE_FIELDS = {key: attribute for key, attribute in OPTIONAL_LESSON_FIELDS.items() if key != "codeExample"}
TARGET_KEYS = {"chapter", "lesson"}


@dataclass(frozen=True)
class LessonOverride:
    """Field replacements for one lesson, addressed by id or position."""

    chapter: str | int
    lesson: str | int
    fields: dict[str, str | None]
    validation: ValidationRule | None = None


def load_overrides(path: Path | str) -> list[LessonOverride]:
    """Load and validate an overrides file."""
    raw = json.loads(Path(path).read_text(encoding="utf-8-sig"))
    if not isinstance(raw, list):
        raise ValueError("Overrides file root must be a JSON list.")
    return [_override_from_dict(index, item) for index, item in enumerate(raw)]


def _override_from_dict(index: int, raw: Any) -> LessonOverride:
    """Build one override from raw JSON content."""
    if not isinstance(raw, dict):
        raise ValueError(f"Override #{index} must be an object.")
    missing = TARGET_KEYS - raw.keys()
    if missing:
        raise ValueError(f"Override #{index} is missing {', '.join(sorted(missing))}.")
    unknown = raw.keys() - TARGET_KEYS - OVERRIDABLE_FIELDS.keys() - {"validation"}
    if unknown:
        raise ValueError(f"Override #{index} has unknown fields: {', '.join(sorted(unknown))}.")

    chapter = _target(index, raw["chapter"])
    lesson = _target(index, raw["lesson"])
    fields = {
        attribute: _field_value(index, key, raw[key]) for key, attribute in OVERRIDABLE_FIELDS.items() if key in raw
    }

    validation = None
    if "validation" in raw:
        validation = validation_from_dict(raw["validation"], f"override #{index}")
        if validation.type == "regex":
            try:
                re.compile(validation.pattern)
            except re.error as exc:
                raise ValueError(f"Override #{index} has an invalid regex pattern: {exc}") from exc
    return LessonOverride(chapter=chapter, lesson=lesson, fields=fields, validation=validation)


def _field_value(index: int, key: str, value: Any) -> str | None:
    # null clears the field.
    if value is not None and not isinstance(value, str):
        raise ValueError(f"Override #{index} field '{key}' must be a string or null.")
    return value


def _target(index: int, value: Any) -> str | int:
    # bool is an int subclass but never a valid position.
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise ValueError(f"Override #{index} target must be an id or a position.")
    return value


def apply_overrides(content: ParsedContent, overrides: list[LessonOverride]) -> ParsedContent:
    """Return content with override fields applied; unknown targets are skipped."""
    chapters = list(content.chapters)
    for override in overrides:
        chapter_index = _locate(chapters, override.chapter)
        if chapter_index is None:
            logger.warning("Skipping override: no chapter %r", override.chapter)
            continue
        chapter = chapters[chapter_index]
        lesson_index = _locate(chapter.lessons, override.lesson)
        if lesson_index is None:
            logger.warning("Skipping override: no lesson %r in chapter '%s'", override.lesson, chapter.id)
            continue

        lessons = list(chapter.lessons)
        lessons[lesson_index] = _apply(lessons[lesson_index], override)
        chapters[chapter_index] = replace(chapter, lessons=lessons)
    return ParsedContent(chapters=chapters)


def _apply(lesson: Lesson, override: LessonOverride) -> Lesson:
    changes: dict[str, Any] = dict(override.fields)
    if override.validation is not None:
        changes["validation"] = override.validation
    return replace(lesson, **changes)


def _locate(items: list[Chapter] | list[Lesson], target: str | int) -> int | None:
    """Resolve an id or a zero-based position to a list index."""
    if isinstance(target, int):
        return target if 0 <= target < len(items) else None
    for index, item in enumerate(items):
        if item.id == target:
            return index
    return None


def annotate_content(content_file: Path | str, overrides_file: Path | str) -> int:
    """Apply an overrides file to a content file in place and return lessons changed."""
    content = load_content(content_file)
    updated = apply_overrides(content, load_overrides(overrides_file))
    changed = sum(
        1
        for before, after in zip(content.chapters, updated.chapters)
        for old, new in zip(before.lessons, after.lessons)
        if old != new
    )
    write_content(updated, content_file)
    logger.info("Applied overrides to %d lessons in %s", changed, content_file)
    return changed
