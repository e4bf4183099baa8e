import json
import sys
from pathlib import Path

import pytest

# Add tools to sys.path so we can import wfdscore and the scripts
TOOLS_PATH = Path(__file__).resolve().parent.parent / "tools"
if TOOLS_PATH.as_posix() not in sys.path:
    sys.path.insert(0, TOOLS_PATH.as_posix())


@pytest.fixture(autouse=True)
def _default_missing_item_policy(monkeypatch):
    monkeypatch.delenv("MISSING_ITEM_POLICY", raising=False)


@pytest.fixture
def deck_records():
    """Practice items shaped like the web app's documents."""
    return [
        {
            "id": "wfd-1",
            "text": "The library will be closed on public holidays.",
            "occurrence": 12,
            "questionType": "New",
            "topic": "Education & Learning",
            "createdAt": {"seconds": 1700000300, "nanoseconds": 0},
            "isHidden": False,
        },
        {
            "id": "wfd-2",
            "text": "Students must submit their assignments before the deadline.",
            "occurrence": 30,
            "questionType": "Still Important",
            "createdAt": {"seconds": 1700000100, "nanoseconds": 0},
            "isHidden": False,
            "vietnameseTranslation": "Sinh viên phải nộp bài trước hạn chót.",
        },
        {
            "id": "wfd-3",
            "text": "Climate change affects every region.",
            "occurrence": 5,
            "questionType": "New",
            "topic": "Environment & Nature",
            "createdAt": {"seconds": 1700000200, "nanoseconds": 0},
            "isHidden": False,
        },
        {
            "id": "wfd-4",
            "text": "This sentence is hidden.",
            "occurrence": 50,
            "questionType": "New",
            "createdAt": {"seconds": 1700000400, "nanoseconds": 0},
            "isHidden": True,
        },
    ]


@pytest.fixture
def deck_json(tmp_path: Path, deck_records):
    path = tmp_path / "items.json"
    path.write_text(json.dumps(deck_records, ensure_ascii=False), encoding="utf-8")
    return path
