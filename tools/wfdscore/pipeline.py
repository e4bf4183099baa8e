from __future__ import annotations

import json
import os
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

import pandas as pd
from tqdm import tqdm

from .config import ScoringConfig
from .items import PracticeItem, find_item, load_items, read_records
from .scoring import evaluate
from .tokens import build_display_tokens, count_status, render_answer

PIPELINE_VERSION = "2026-10-19-wfd-multiset"
REPORT_VERSION = 1

METRICS_COLUMNS = [
    "attempt_id",
    "item_id",
    "submitted_at",
    "processed_at_utc",
    "reference",
    "answer",
    "score",
    "max_score",
    "incorrect_count",
    "accuracy",
    "missing_word_count",
    "extra_word_count",
    "answer_display",
]


class ItemNotFoundError(LookupError):
    pass


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def _jsonify(obj: Any) -> Any:
    if obj is None:
        return None
    if isinstance(obj, (str, int, float, bool)):
        return obj
    if isinstance(obj, Path):
        return str(obj)
    if isinstance(obj, (set, frozenset)):
        return sorted(_jsonify(x) for x in obj)
    if isinstance(obj, (tuple, list)):
        return [_jsonify(x) for x in obj]
    if isinstance(obj, dict):
        return {str(k): _jsonify(v) for k, v in obj.items()}
    return str(obj)


def _parse_iso(ts: Optional[str]) -> datetime:
    if not ts:
        return datetime.fromtimestamp(0, tz=timezone.utc)
    try:
        dt = datetime.fromisoformat(ts)
    except ValueError:
        return datetime.fromtimestamp(0, tz=timezone.utc)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _missing_item_policy() -> str:
    v = (os.getenv("MISSING_ITEM_POLICY", "skip") or "skip").strip().lower()
    return v if v in {"skip", "fail"} else "skip"


def _str_field(rec: Dict[str, Any], key: str) -> str:
    v = rec.get(key)
    if v is None or (isinstance(v, float) and v != v):
        return ""
    return str(v).strip()


def _load_existing_full(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {"version": REPORT_VERSION, "generated_at_utc": None, "config": {}, "items": [], "skipped": []}
    data = json.loads(path.read_text(encoding="utf-8"))
    data.setdefault("items", [])
    data.setdefault("skipped", [])
    return data


def _dedupe_items(items: List[Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    """
    Collapse duplicates by attempt_id, keeping the latest processed_at_utc.
    """
    out: Dict[str, Dict[str, Any]] = {}
    for it in items:
        aid = it.get("attempt_id")
        if not isinstance(aid, str) or not aid:
            continue
        prev = out.get(aid)
        if prev is None or _parse_iso(it.get("processed_at_utc")) >= _parse_iso(prev.get("processed_at_utc")):
            out[aid] = it
    return out


def resolve_reference(
    attempt: Dict[str, Any],
    items: Sequence[PracticeItem],
    cfg: ScoringConfig,
) -> Tuple[str, Optional[str]]:
    """
    Return (reference_text, item_id) for an attempt.
    An explicit "reference" field wins over the deck lookup.
    """
    explicit = _str_field(attempt, "reference")
    item_key = _str_field(attempt, "item")
    if explicit:
        return explicit, item_key or None

    item = find_item(items, item_key, cfg)
    if item is None:
        raise ItemNotFoundError(f"no practice item matches {item_key!r}")
    return item.text, item.item_id


def score_attempt(
    attempt: Dict[str, Any],
    items: Sequence[PracticeItem],
    cfg: ScoringConfig,
) -> Dict[str, Any]:
    reference, item_id = resolve_reference(attempt, items, cfg)
    answer = _str_field(attempt, "answer")

    result = evaluate(reference, answer, cfg)
    tokens = build_display_tokens(result.reference_words, result.candidate_words)

    return {
        "attempt_id": _str_field(attempt, "attempt_id"),
        "item_id": item_id,
        "submitted_at": _str_field(attempt, "submitted_at") or None,
        "processed_at_utc": _utc_now_iso(),
        "pipeline_version": PIPELINE_VERSION,
        "reference": reference,
        "answer": answer,
        "score": result.score,
        "max_score": result.max_score,
        "incorrect_count": result.incorrect_count,
        "accuracy": round(result.accuracy, 6),
        "missing_word_count": count_status(tokens, "missing"),
        "extra_word_count": count_status(tokens, "incorrect"),
        "answer_display": render_answer(tokens, cfg),
    }


def _write_scores_json(public_dir: Path, items: List[Dict[str, Any]]) -> None:
    minimal = [
        {
            "attempt_id": it["attempt_id"],
            "item_id": it.get("item_id"),
            "score": it["score"],
            "max_score": it["max_score"],
            "incorrect_count": it["incorrect_count"],
        }
        for it in items
    ]
    (public_dir / "scores.json").write_text(json.dumps(minimal, ensure_ascii=False, indent=2), encoding="utf-8")


def _write_full_json(public_dir: Path, cfg: ScoringConfig, items: List[Dict[str, Any]], skipped: List[Dict[str, Any]]) -> None:
    payload = {
        "version": REPORT_VERSION,
        "generated_at_utc": _utc_now_iso(),
        "pipeline_version": PIPELINE_VERSION,
        "config": _jsonify(asdict(cfg)),
        "items": _jsonify(items),
        "skipped": _jsonify(skipped),
    }
    (public_dir / "scores.full.json").write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")


def _write_metrics_csv(public_dir: Path, items: List[Dict[str, Any]]) -> None:
    df = pd.DataFrame(items, columns=METRICS_COLUMNS)
    df.to_csv(public_dir / "metrics.csv", index=False, encoding="utf-8")


def run_pipeline(
    attempts_path: Path,
    public_dir: Path,
    items_path: Optional[Path] = None,
    max_new_attempts: int = 0,
    cfg: Optional[ScoringConfig] = None,
) -> List[Dict[str, Any]]:
    cfg = cfg or ScoringConfig()
    public_dir.mkdir(parents=True, exist_ok=True)

    print(f"[pipeline] version={PIPELINE_VERSION}")
    print(f"[pipeline] attempts={attempts_path} items={items_path} max_new_attempts={max_new_attempts}")

    deck: List[PracticeItem] = load_items(items_path, include_hidden=True) if items_path else []
    attempts = read_records(attempts_path)

    full_path = public_dir / "scores.full.json"
    existing_full = _load_existing_full(full_path)
    items_by_id = _dedupe_items(list(existing_full.get("items", [])))
    skipped: List[Dict[str, Any]] = list(existing_full.get("skipped", []))
    policy = _missing_item_policy()

    candidates = []
    seen: Set[str] = set()
    for i, rec in enumerate(attempts):
        aid = _str_field(rec, "attempt_id") or f"row-{i}"
        if aid in seen:
            print(f"[skip] attempt_id='{aid}' => repeated in {attempts_path.name}")
            continue
        seen.add(aid)
        rec = {**rec, "attempt_id": aid}
        if aid not in items_by_id:
            candidates.append(rec)
    if max_new_attempts > 0:
        candidates = candidates[:max_new_attempts]

    retried = {rec["attempt_id"] for rec in candidates}
    skipped = [s for s in skipped if s.get("attempt_id") not in retried]

    scored = 0
    for rec in tqdm(candidates, desc="WFD scoring"):
        aid = rec["attempt_id"]
        try:
            items_by_id[aid] = score_attempt(rec, deck, cfg)
            scored += 1
        except ItemNotFoundError as e:
            if policy == "fail":
                raise
            print(f"[skip] attempt_id='{aid}' => {e}")
            skipped.append(
                {
                    "attempt_id": aid,
                    "item": _str_field(rec, "item"),
                    "reason": "no_item_match",
                    "at_utc": _utc_now_iso(),
                }
            )

    items_sorted = sorted(items_by_id.values(), key=lambda it: (str(it.get("item_id") or ""), it.get("attempt_id", "")))

    # always rewrite outputs from deduped items (no append)
    _write_full_json(public_dir, cfg, items_sorted, skipped)
    _write_scores_json(public_dir, items_sorted)
    _write_metrics_csv(public_dir, items_sorted)

    print(f"[pipeline] scored={scored} total={len(items_sorted)} skipped={len(skipped)}")
    return items_sorted
