from __future__ import annotations

import json
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd
from rapidfuzz import fuzz, process, utils

from .config import ScoringConfig

DEFAULT_TOPICS = (
    "All",
    "Business & Work",
    "Education & Learning",
    "Technology & Science",
    "Daily Life & Routine",
    "Health & Medicine",
    "Travel & Tourism",
    "Food & Cooking",
    "Sports & Recreation",
    "Environment & Nature",
    "Arts & Humanities",
    "General",
)

QUESTION_TYPE_FILTERS = ("New", "Still Important")
SORT_OPTIONS = ("alphabetical", "occurrence", "newest", "easyToDifficult")


@dataclass(frozen=True)
class PracticeItem:
    item_id: str
    text: str
    occurrence: int = 0
    question_type: str = ""
    topic: Optional[str] = None
    created_at: float = 0.0
    is_hidden: bool = False
    translation: Optional[str] = None

    def topic_or(self, default: str) -> str:
        return self.topic or default


def _is_blank(v: Any) -> bool:
    if v is None:
        return True
    if isinstance(v, float) and math.isnan(v):
        return True
    return isinstance(v, str) and not v.strip()


def _opt_str(v: Any) -> Optional[str]:
    return None if _is_blank(v) else str(v).strip()


def _to_int(v: Any) -> int:
    if _is_blank(v):
        return 0
    try:
        return int(float(v))
    except (TypeError, ValueError):
        return 0


def _to_seconds(v: Any) -> float:
    # Firestore timestamps arrive as {"seconds": ..., "nanoseconds": ...}
    if isinstance(v, dict):
        v = v.get("seconds", v.get("_seconds"))
    if _is_blank(v):
        return 0.0
    try:
        return float(v)
    except (TypeError, ValueError):
        return 0.0


def _to_bool(v: Any) -> bool:
    if _is_blank(v):
        return False
    if isinstance(v, str):
        return v.strip().lower() in {"1", "true", "yes", "y"}
    return bool(v)


def item_from_record(rec: Dict[str, Any], fallback_id: str) -> Optional[PracticeItem]:
    text = _opt_str(rec.get("text"))
    if text is None:
        return None
    return PracticeItem(
        item_id=_opt_str(rec.get("id")) or fallback_id,
        text=text,
        occurrence=_to_int(rec.get("occurrence")),
        question_type=_opt_str(rec.get("questionType")) or "",
        topic=_opt_str(rec.get("topic")),
        created_at=_to_seconds(rec.get("createdAt")),
        is_hidden=_to_bool(rec.get("isHidden")),
        translation=_opt_str(rec.get("vietnameseTranslation")),
    )


def read_records(path: Path) -> List[Dict[str, Any]]:
    """
    Read a JSON array of objects or a CSV file into plain dict records.
    """
    if not path.exists():
        raise FileNotFoundError(f"Missing file: {path}")
    suffix = path.suffix.lower()
    if suffix == ".json":
        data = json.loads(path.read_text(encoding="utf-8"))
        if isinstance(data, dict):
            data = data.get("items", [])
        return [r for r in data if isinstance(r, dict)]
    if suffix == ".csv":
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
        return df.to_dict(orient="records")
    raise ValueError(f"Unsupported file type: {path.suffix}")


def load_items(path: Path, include_hidden: bool = False) -> List[PracticeItem]:
    items: List[PracticeItem] = []
    for i, rec in enumerate(read_records(path)):
        item = item_from_record(rec, fallback_id=str(i))
        if item is None:
            continue
        if item.is_hidden and not include_hidden:
            continue
        items.append(item)
    return items


def filter_items(
    items: Sequence[PracticeItem],
    question_type: str = "All",
    topic: str = "All",
    cfg: Optional[ScoringConfig] = None,
) -> List[PracticeItem]:
    cfg = cfg or ScoringConfig()
    out = list(items)
    if question_type in QUESTION_TYPE_FILTERS:
        out = [it for it in out if it.question_type == question_type]
    if topic != "All":
        out = [it for it in out if it.topic_or(cfg.default_topic) == topic]
    return out


def sort_items(items: Sequence[PracticeItem], option: str = "occurrence") -> List[PracticeItem]:
    if option == "alphabetical":
        return sorted(items, key=lambda it: it.text.casefold())
    if option == "newest":
        return sorted(items, key=lambda it: it.created_at, reverse=True)
    if option == "easyToDifficult":
        return sorted(items, key=lambda it: len(it.text))
    return sorted(items, key=lambda it: it.occurrence, reverse=True)


def list_topics(items: Sequence[PracticeItem], cfg: Optional[ScoringConfig] = None) -> List[str]:
    cfg = cfg or ScoringConfig()
    seen = {it.topic_or(cfg.default_topic) for it in items}
    known = [t for t in DEFAULT_TOPICS if t == "All" or t in seen]
    return known + sorted(seen - set(DEFAULT_TOPICS))


def find_item(items: Sequence[PracticeItem], key: str, cfg: Optional[ScoringConfig] = None) -> Optional[PracticeItem]:
    """
    Resolve an attempt's item reference:
    - exact item_id
    - exact text (case-insensitive)
    - fuzzy text match (WRatio) above cfg.item_match_threshold
    """
    cfg = cfg or ScoringConfig()
    key = (key or "").strip()
    if not key or not items:
        return None

    for it in items:
        if it.item_id == key:
            return it

    folded = key.casefold()
    for it in items:
        if it.text.casefold() == folded:
            return it

    choices = [it.text for it in items]
    best = process.extractOne(
        key,
        choices,
        scorer=fuzz.WRatio,
        processor=utils.default_process,
        score_cutoff=cfg.item_match_threshold,
    )
    if best is None:
        return None
    _, _, idx = best
    return items[idx]
