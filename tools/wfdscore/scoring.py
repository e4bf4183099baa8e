from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .config import ScoringConfig
from .normalize import count_words, normalize_words
from .tokens import AnswerToken


@dataclass(frozen=True)
class ScoringResult:
    score: int
    max_score: int
    incorrect_count: int
    reference_words: Tuple[str, ...]
    candidate_words: Tuple[str, ...]
    # (word, count) pairs sorted by word
    reference_counts: Tuple[Tuple[str, int], ...] = ()
    matched_counts: Tuple[Tuple[str, int], ...] = ()

    @property
    def accuracy(self) -> float:
        if self.max_score <= 0:
            return 0.0
        return self.score / self.max_score

    def reference_count(self, word: str) -> int:
        return dict(self.reference_counts).get(word, 0)

    def matched_count(self, word: str) -> int:
        return dict(self.matched_counts).get(word, 0)


def evaluate(reference_text: str, candidate_text: str, cfg: Optional[ScoringConfig] = None) -> ScoringResult:
    """
    Score a dictation attempt against its reference sentence.

    Each reference occurrence can credit at most one candidate occurrence of
    the same word, so typing "the" three times against a reference with two
    "the" scores two points. Total over all strings.
    """
    cfg = cfg or ScoringConfig()
    reference_words = normalize_words(reference_text, cfg)
    candidate_words = normalize_words(candidate_text, cfg)
    reference_counts = count_words(reference_words)
    matched_counts: Dict[str, int] = {}

    score = 0
    for word in candidate_words:
        allowed = reference_counts.get(word, 0)
        current = matched_counts.get(word, 0)
        if current < allowed:
            matched_counts[word] = current + 1
            score += 1

    max_score = len(reference_words)
    return ScoringResult(
        score=score,
        max_score=max_score,
        incorrect_count=max(max_score - score, 0),
        reference_words=tuple(reference_words),
        candidate_words=tuple(candidate_words),
        reference_counts=tuple(sorted(reference_counts.items())),
        matched_counts=tuple(sorted(matched_counts.items())),
    )


def map_input_word_statuses(candidate_words: Iterable[str], reference_counts: Mapping[str, int]) -> List[AnswerToken]:
    matched: Dict[str, int] = {}
    out: List[AnswerToken] = []
    for word in candidate_words:
        current = matched.get(word, 0)
        if current < reference_counts.get(word, 0):
            matched[word] = current + 1
            out.append(AnswerToken(word=word, status="correct"))
        else:
            out.append(AnswerToken(word=word, status="incorrect"))
    return out
