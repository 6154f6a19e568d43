import json
from pathlib import Path

import pytest

from codelessons.content_loader import content_from_dict, load_content
from codelessons.generator import generate_content
from codelessons.models import ValidationRule


def test_load_content_round_trips_generated_file(docs_dir: Path, tmp_path: Path) -> None:
    output = tmp_path / "lessons.json"
    generated = generate_content(docs_dir, output)

    loaded = load_content(output)

    assert loaded == generated


def test_load_content_reads_optional_fields(tmp_path: Path) -> None:
    path = tmp_path / "lessons.json"
    payload = {
        "chapters": [
            {
                "id": "coroutines",
                "title": "Coroutines",
                "lessons": [
                    {"id": "b-1", "title": "B", "content": "", "order": 1},
                    {
                        "id": "a-0",
                        "title": "A",
                        "content": "text",
                        "order": 0,
                        "story": "Once upon a time",
                        "continueFrom": "prev-lesson",
                        "checkpointMessage": "Saved",
                        "validation": {"type": "regex", "pattern": "fun\\s+main", "message": "ok"},
                    },
                ],
                "order": 0,
            }
        ]
    }
    path.write_text("\ufeff" + json.dumps(payload), encoding="utf-8")

    chapter = load_content(path).chapters[0]

    assert chapter.description == ""
    assert [lesson.id for lesson in chapter.lessons] == ["a-0", "b-1"]
    first = chapter.lessons[0]
    assert first.story == "Once upon a time"
    assert first.continue_from == "prev-lesson"
    assert first.checkpoint_message == "Saved"
    assert first.validation == ValidationRule(type="regex", pattern="fun\\s+main", message="ok")
    assert first.arc is None


def test_chapters_are_sorted_by_order() -> None:
    content = content_from_dict(
        {"chapters": [{"id": "late", "title": "L", "order": 3}, {"id": "early", "title": "E", "order": 1}]}
    )

    assert [chapter.id for chapter in content.chapters] == ["early", "late"]


@pytest.mark.parametrize(
    ("raw", "message"),
    [
        ([], "root must be a JSON object"),
        ({}, "missing a 'chapters' list"),
        ({"chapters": ["x"]}, "Chapter must be a JSON object"),
        ({"chapters": [{"title": "No id"}]}, "Chapter is missing 'id' or 'title'"),
        ({"chapters": [{"id": "c", "title": "C", "lessons": [{"id": "l"}]}]}, "missing 'id' or 'title'"),
        ({"chapters": [{"id": "c", "title": "C", "lessons": [3]}]}, "must be an object"),
        ({"chapters": [{"id": "c", "title": "C", "order": None}]}, "Chapter 'c' has a non-integer 'order'"),
        ({"chapters": [{"id": "c", "title": "C", "order": [1]}]}, "non-integer 'order'"),
        ({"chapters": [{"id": "c", "title": "C", "lessons": None}]}, "Chapter 'c' has a non-list 'lessons'"),
        (
            {"chapters": [{"id": "c", "title": "C", "lessons": [{"id": "l", "title": "L", "order": None}]}]},
            "Lesson 'l' has a non-integer 'order'",
        ),
        (
            {"chapters": [{"id": "c", "title": "C"}, {"id": "c", "title": "Again"}]},
            "Duplicate chapter id: c",
        ),
        (
            {
                "chapters": [
                    {
                        "id": "c",
                        "title": "C",
                        "lessons": [{"id": "l", "title": "L", "validation": {"type": "startsWith", "pattern": "x"}}],
                    }
                ]
            },
            "unknown type 'startsWith'",
        ),
    ],
)
def test_malformed_content_raises_value_error(raw: object, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        content_from_dict(raw)
