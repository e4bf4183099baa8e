"""
Score a single Write-From-Dictation attempt.

Example:
  python tools/score_attempt.py --reference "I like big cats." --answer "i like small cats"

Prints key=value lines (sorted), like the batch reports' columns.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

_THIS_DIR = Path(__file__).resolve().parent
sys.path.insert(0, str(_THIS_DIR))

from wfdscore.config import ScoringConfig  # noqa: E402
from wfdscore.scoring import evaluate  # noqa: E402
from wfdscore.tokens import build_display_tokens, render_answer  # noqa: E402


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser()
    ap.add_argument("--reference", required=True, help="Reference sentence")
    ap.add_argument("--answer", default="", help="User transcription")
    ap.add_argument("--ascii_only", action="store_true", help="Keep only [a-z0-9] when stripping punctuation")
    return ap.parse_args(argv)


def score_one(reference: str, answer: str, cfg: ScoringConfig) -> Dict[str, Any]:
    result = evaluate(reference, answer, cfg)
    tokens = build_display_tokens(result.reference_words, result.candidate_words)
    return {
        "score": result.score,
        "max_score": result.max_score,
        "incorrect_count": result.incorrect_count,
        "accuracy": round(result.accuracy, 6),
        "answer": render_answer(tokens, cfg),
    }


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    cfg = ScoringConfig(ascii_only=bool(args.ascii_only))

    out = score_one(args.reference, args.answer, cfg)
    for k in sorted(out.keys()):
        print(f"{k}={out[k]}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
