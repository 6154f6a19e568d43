from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

FIXTURE_DOCS = Path(__file__).resolve().parent / "fixtures" / "docs"


@pytest.fixture
def docs_dir() -> Path:
    """Checked-in HTML docs tree: advanced/flow-basics.html and coroutines.html."""
    return FIXTURE_DOCS
