from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class ScoringConfig:
    """
    Tunables for scoring.

    Notes:
    - ascii_only=False keeps non-ASCII letters/digits when stripping punctuation
    - ascii_only=True keeps only [a-z0-9] and whitespace (web app behaviour)
    """

    # Normalization
    ascii_only: bool = False

    # Answer line rendering
    missing_wrap: Tuple[str, str] = ("(", ")")
    incorrect_wrap: Tuple[str, str] = ("~~", "~~")
    terminal_punct: str = "."
    empty_answer_text: str = "(no answer)"

    # Deck lookup
    default_topic: str = "General"
    item_match_threshold: float = 86.0

    # Placement test
    placement_wfd_questions: Tuple[int, ...] = (10, 11, 12)
    placement_strip_chars: str = ".,!?;:'\""
