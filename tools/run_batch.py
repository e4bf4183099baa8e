"""
Run batch WFD scoring.

Env:
- ATTEMPTS_PATH (required; .json array or .csv with attempt_id,item,reference,answer,submitted_at)
- ITEMS_PATH (optional; practice deck .json/.csv used to resolve "item")
- PUBLIC_DIR (default: public)
- MAX_NEW_ATTEMPTS (default: 0 = all)
- ASCII_ONLY (default: 0)
- MISSING_ITEM_POLICY (default: skip; skip|fail)
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

_THIS_DIR = Path(__file__).resolve().parent
sys.path.insert(0, str(_THIS_DIR))

from wfdscore.config import ScoringConfig  # noqa: E402
from wfdscore.pipeline import run_pipeline  # noqa: E402


def main() -> int:
    attempts = (os.getenv("ATTEMPTS_PATH") or "").strip()
    if not attempts:
        raise SystemExit("ATTEMPTS_PATH is required")
    attempts_path = Path(attempts).resolve()
    if not attempts_path.exists():
        raise SystemExit(f"Missing attempts file: {attempts_path}")

    items = (os.getenv("ITEMS_PATH") or "").strip()
    items_path = Path(items).resolve() if items else None
    if items_path is not None and not items_path.exists():
        raise SystemExit(f"Missing items file: {items_path}")

    public_dir = Path(os.getenv("PUBLIC_DIR", "public")).resolve()
    max_new_attempts = int(os.getenv("MAX_NEW_ATTEMPTS", "0"))
    cfg = ScoringConfig(ascii_only=(os.getenv("ASCII_ONLY", "0") or "0").strip() == "1")

    run_pipeline(
        attempts_path=attempts_path,
        public_dir=public_dir,
        items_path=items_path,
        max_new_attempts=max_new_attempts,
        cfg=cfg,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
