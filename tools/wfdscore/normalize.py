from __future__ import annotations

import re
import unicodedata
from typing import Dict, Iterable, List, Optional

from .config import ScoringConfig

_PUNCT_RE = re.compile(r"[^\w\s]|_", re.UNICODE)
_PUNCT_ASCII_RE = re.compile(r"[^a-z0-9\s]")


def remove_punctuation(text: str, ascii_only: bool = False) -> str:
    pattern = _PUNCT_ASCII_RE if ascii_only else _PUNCT_RE
    return pattern.sub("", text)


def normalize_words(text: str, cfg: Optional[ScoringConfig] = None) -> List[str]:
    """
    NFC-compose, lowercase, strip punctuation, split on whitespace runs.
    Composing first keeps decomposed accents (e + U+0301) as part of the letter.
    Empty tokens never appear in the result.
    """
    cfg = cfg or ScoringConfig()
    composed = unicodedata.normalize("NFC", text or "")
    return remove_punctuation(composed.lower(), ascii_only=cfg.ascii_only).split()


def count_words(words: Iterable[str]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for w in words:
        counts[w] = counts.get(w, 0) + 1
    return counts
