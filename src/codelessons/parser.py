"""Convert structured HTML documentation into chapters and lessons."""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from pathlib import Path

from bs4 import BeautifulSoup, ParserRejectedMarkup, Tag
from bs4.element import CData, NavigableString, Script, Stylesheet, TemplateString

from .models import Chapter, CodeBlock, Lesson, ParsedContent, Section

logger = logging.getLogger(__name__)

HTML_SUFFIX = ".html"
HEADING_LEVELS = {"h1": 1, "h2": 2, "h3": 3}
CODE_SELECTOR = "pre code, .code code"
STRIP_SELECTOR = "pre, .code"
DEFAULT_LANGUAGE = "kotlin"
INITIAL_CODE_PLACEHOLDER = "// Write your code here\n"

_LANGUAGE_PATTERN = re.compile(r"language-(\w+)", re.ASCII)
_SLUG_PATTERN = re.compile(r"[^a-z0-9가-힣]+")
# Script, style and template text count as text content, comments do not.
TEXT_TYPES = (NavigableString, CData, Script, Stylesheet, TemplateString)


def parse_all_html_files(directory: Path | str) -> ParsedContent:
    """Parse every HTML file under a directory into chapters."""
    chapters: list[Chapter] = []
    for index, file_path in enumerate(find_html_files(directory)):
        try:
            chapter = parse_html_file(file_path)
        except (OSError, ValueError, ParserRejectedMarkup) as exc:
            logger.warning("Failed to parse %s: %s", file_path, exc)
            continue
        chapters.append(replace(chapter, order=index))
    return ParsedContent(chapters=chapters)


def find_html_files(directory: Path | str) -> list[Path]:
    """Return HTML files depth-first, visiting entries in sorted name order."""
    root = Path(directory)
    if not root.is_dir():
        return []

    files: list[Path] = []
    for entry in sorted(root.iterdir(), key=lambda item: item.name):
        # Symlinks are not followed, so link cycles cannot recurse.
        if entry.is_symlink():
            continue
        if entry.is_dir():
            files.extend(find_html_files(entry))
        elif entry.is_file() and entry.name.endswith(HTML_SUFFIX):
            files.append(entry)
    return files


def parse_html_file(path: Path | str) -> Chapter:
    """Read one HTML file and parse it into a chapter."""
    file_path = Path(path)
    html = file_path.read_text(encoding="utf-8-sig")
    return parse_html_document(html, file_path.name.removesuffix(HTML_SUFFIX))


def parse_html_document(html: str, file_name: str) -> Chapter:
    """Build a chapter from document markup; `order` is left at 0."""
    soup = _soup(html)
    title = _first_text(soup, ".page-title") or _first_text(soup, "h1") or file_name
    description = _first_text(soup, ".page-description") or _first_text(soup, "p")
    lessons = [convert_to_lesson(section, index) for index, section in enumerate(extract_sections(html))]
    return Chapter(
        id=slugify(file_name),
        title=title,
        description=description,
        lessons=lessons,
        order=0,
    )


def extract_sections(html: str) -> list[Section]:
    """Split markup into one section per h1-h3 heading, in document order."""
    soup = _soup(html)
    siblings_by_parent: dict[int, list[Tag]] = {}
    sections: list[Section] = []

    for heading in soup.find_all(list(HEADING_LEVELS)):
        parent = heading.parent
        siblings = siblings_by_parent.get(id(parent))
        if siblings is None:
            siblings = _element_children(parent)
            siblings_by_parent[id(parent)] = siblings

        level = HEADING_LEVELS[heading.name]
        start = next(index for index, node in enumerate(siblings) if node is heading)
        content = "".join(str(node) for node in _section_span(siblings, start, level))
        sections.append(
            Section(
                heading=_text(heading),
                level=level,
                content=content,
                code_blocks=extract_code_blocks(content),
            )
        )
    return sections


def extract_code_blocks(html: str) -> list[CodeBlock]:
    """Return non-empty code blocks with their detected language."""
    blocks: list[CodeBlock] = []
    for element in _soup(html).select(CODE_SELECTOR):
        code = _text(element)
        if code:
            blocks.append(CodeBlock(language=_detect_language(element), code=code))
    return blocks


def convert_to_lesson(section: Section, order: int) -> Lesson:
    """Turn a section into a lesson at the given position."""
    soup = _soup(section.content)
    # Code is shown separately from the prose.
    for element in soup.select(STRIP_SELECTOR):
        element.extract()

    code_example = section.code_blocks[0].code if section.code_blocks else None
    return Lesson(
        id=f"{slugify(section.heading)}-{order}",
        title=section.heading,
        content=_text(soup),
        order=order,
        code_example=code_example,
        initial_code=INITIAL_CODE_PLACEHOLDER if code_example else None,
    )


def slugify(text: str) -> str:
    """Lowercase, hyphen-delimited identifier; Hangul syllables are kept."""
    return _SLUG_PATTERN.sub("-", text.lower()).strip("-")


def _section_span(siblings: list[Tag], start: int, level: int) -> list[Tag]:
    """Siblings after `start` up to the next heading of the same or higher level."""
    end = start + 1
    while end < len(siblings):
        sibling_level = HEADING_LEVELS.get(siblings[end].name)
        if sibling_level is not None and sibling_level <= level:
            break
        end += 1
    return siblings[start + 1 : end]


def _element_children(parent: Tag) -> list[Tag]:
    return [child for child in parent.children if isinstance(child, Tag)]


def _detect_language(element: Tag) -> str:
    classes = element.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    match = _LANGUAGE_PATTERN.search(" ".join(classes))
    return match.group(1) if match else DEFAULT_LANGUAGE


def _first_text(soup: BeautifulSoup, selector: str) -> str:
    element = soup.select_one(selector)
    return _text(element) if element is not None else ""


def _text(element: Tag) -> str:
    return element.get_text(types=TEXT_TYPES).strip()


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")
