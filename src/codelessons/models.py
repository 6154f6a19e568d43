"""Core domain models for generated lesson content."""

from __future__ import annotations

from dataclasses import dataclass

VALIDATION_TYPES = frozenset({"contains", "notContains", "exact", "regex"})


@dataclass(frozen=True)
class CodeBlock:
    """One preformatted code snippet found in a section."""

    language: str
    code: str


@dataclass(frozen=True)
class Section:
    """Heading-delimited span of a source document."""

    heading: str
    level: int
    content: str
    code_blocks: list[CodeBlock]


@dataclass(frozen=True)
class ValidationRule:
    """Pattern a learner's code is checked against."""

    type: str
    pattern: str
    message: str


@dataclass(frozen=True)
class Lesson:
    """One instructional unit derived from a section."""

    id: str
    title: str
    content: str
    order: int
    code_example: str | None = None
    initial_code: str | None = None
    hint: str | None = None
    validation: ValidationRule | None = None
    arc: str | None = None
    story: str | None = None
    continue_from: str | None = None
    checkpoint_message: str | None = None


@dataclass(frozen=True)
class Chapter:
    """Top-level content unit derived from one source file."""

    id: str
    title: str
    description: str
    lessons: list[Lesson]
    order: int


@dataclass(frozen=True)
class ParsedContent:
    """Root of the generated content document."""

    chapters: list[Chapter]
