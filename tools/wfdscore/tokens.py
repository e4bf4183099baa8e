from __future__ import annotations

from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Deque, Dict, List, Literal, Optional, Sequence, Tuple

from .config import ScoringConfig


TokenStatus = Literal["correct", "incorrect", "missing"]


@dataclass(frozen=True)
class AnswerToken:
    word: str
    status: TokenStatus


def build_display_tokens(reference_words: Sequence[str], candidate_words: Sequence[str]) -> List[AnswerToken]:
    """
    Merge typed words and never-matched reference words into one display order.

    - typed words keep their order, tagged correct/incorrect
    - each typed match consumes the earliest unused reference index of that word
    - a missing reference word goes right after the rightmost typed match whose
      reference index is smaller, or at the front when there is none
    Greedy and positional, not a minimal-edit alignment.
    """
    queues: Dict[str, Deque[int]] = defaultdict(deque)
    for idx, word in enumerate(reference_words):
        queues[word].append(idx)

    matches: List[Tuple[str, Optional[int]]] = []
    for word in candidate_words:
        queue = queues.get(word)
        if queue:
            matches.append((word, queue.popleft()))
        else:
            matches.append((word, None))

    missing = sorted(i for q in queues.values() for i in q)

    # -1 means "before the first typed word"
    inserts: Dict[int, List[str]] = defaultdict(list)
    for m in missing:
        pos = -1
        for i, (_, ref_idx) in enumerate(matches):
            if ref_idx is not None and ref_idx < m:
                pos = i
        inserts[pos].append(reference_words[m])

    tokens: List[AnswerToken] = [AnswerToken(word=w, status="missing") for w in inserts.get(-1, [])]
    for i, (word, ref_idx) in enumerate(matches):
        tokens.append(AnswerToken(word=word, status="correct" if ref_idx is not None else "incorrect"))
        tokens.extend(AnswerToken(word=w, status="missing") for w in inserts.get(i, []))
    return tokens


def count_status(tokens: Sequence[AnswerToken], status: TokenStatus) -> int:
    return sum(1 for t in tokens if t.status == status)


def render_answer(tokens: Sequence[AnswerToken], cfg: Optional[ScoringConfig] = None) -> str:
    cfg = cfg or ScoringConfig()
    if not tokens:
        return cfg.empty_answer_text

    parts: List[str] = []
    last = len(tokens) - 1
    for i, tok in enumerate(tokens):
        word = tok.word
        if tok.status == "missing":
            word = f"{cfg.missing_wrap[0]}{word}{cfg.missing_wrap[1]}"
        if i == 0:
            word = word[:1].upper() + word[1:]
        if i == last:
            word = f"{word}{cfg.terminal_punct}"
        if tok.status == "incorrect":
            word = f"{cfg.incorrect_wrap[0]}{word}{cfg.incorrect_wrap[1]}"
        parts.append(word)
    return " ".join(parts)
