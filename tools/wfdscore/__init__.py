"""
wfdscore

Write-From-Dictation scoring for PTE practice:
- Case/punctuation-insensitive word-multiset matching (each reference occurrence credits at most one typed word)
- Display tokens: typed words as correct/incorrect, unmatched reference words spliced in as missing
- Practice deck loading/filtering/sorting, placement-test aggregate, batch reports (JSON + CSV)
"""
from .config import ScoringConfig
from .items import PracticeItem, filter_items, find_item, load_items, sort_items
from .pipeline import ItemNotFoundError, run_pipeline
from .placement import QuestionScore, calculate_wfd_score
from .scoring import ScoringResult, evaluate, map_input_word_statuses
from .tokens import AnswerToken, build_display_tokens, render_answer

__all__ = [
    "AnswerToken",
    "ItemNotFoundError",
    "PracticeItem",
    "QuestionScore",
    "ScoringConfig",
    "ScoringResult",
    "build_display_tokens",
    "calculate_wfd_score",
    "evaluate",
    "filter_items",
    "find_item",
    "load_items",
    "map_input_word_statuses",
    "render_answer",
    "run_pipeline",
    "sort_items",
]
