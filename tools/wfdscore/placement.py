from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from .config import ScoringConfig

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class QuestionScore:
    correct: int
    total: int


def _clean_words(text: str, cfg: ScoringConfig) -> List[str]:
    table = str.maketrans("", "", cfg.placement_strip_chars)
    return (text or "").lower().translate(table).split()


def _question_number(question_id: str) -> Optional[int]:
    # leading integer, "10a" -> 10
    m = _LEADING_INT_RE.match(str(question_id))
    return int(m.group(1)) if m else None


def _pair_count(user_words: List[str], reference_words: List[str]) -> int:
    used = [False] * len(reference_words)
    pairs = 0
    for uw in user_words:
        for i, rw in enumerate(reference_words):
            if not used[i] and uw == rw:
                used[i] = True
                pairs += 1
                break
    return pairs


def calculate_wfd_score(
    answers: Mapping[str, Mapping[str, Any]],
    questions: Optional[Mapping[str, str]] = None,
    cfg: Optional[ScoringConfig] = None,
) -> QuestionScore:
    """
    Aggregate WFD score over the dictation questions of one placement-test
    submission.

    answers: question id -> {"answer": ..., "text"/"content": ...}
    questions: question id -> reference text (takes precedence over the answer's own text)

    Only . , ! ? ; : ' " are stripped here, so hyphenated words and other
    symbols must match exactly.
    """
    cfg = cfg or ScoringConfig()
    questions = questions or {}
    wanted = set(cfg.placement_wfd_questions)

    correct = 0
    total = 0
    for qid, answer in answers.items():
        num = _question_number(qid)
        if num is None or num not in wanted:
            continue
        reference = questions.get(qid) or answer.get("text") or answer.get("content") or ""
        reference_words = _clean_words(str(reference), cfg)
        user_words = _clean_words(str(answer.get("answer") or ""), cfg)

        correct += _pair_count(user_words, reference_words)
        total += len(reference_words)

    return QuestionScore(correct=correct, total=total)
