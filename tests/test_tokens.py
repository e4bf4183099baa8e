"""
Unit tests for display tokens (build_display_tokens) and answer-line rendering.
"""

from wfdscore.config import ScoringConfig
from wfdscore.scoring import evaluate
from wfdscore.tokens import AnswerToken, build_display_tokens, count_status, render_answer


def _pairs(tokens):
    return [(t.word, t.status) for t in tokens]


def _tokens_for(reference, candidate):
    r = evaluate(reference, candidate)
    return build_display_tokens(r.reference_words, r.candidate_words)


class TestBuildDisplayTokens:
    def test_empty_candidate_gives_all_missing_in_order(self):
        tokens = _tokens_for("word one two", "")
        assert _pairs(tokens) == [("word", "missing"), ("one", "missing"), ("two", "missing")]

    def test_empty_reference_gives_all_incorrect(self):
        tokens = _tokens_for("", "some typed words")
        assert _pairs(tokens) == [("some", "incorrect"), ("typed", "incorrect"), ("words", "incorrect")]

    def test_both_empty(self):
        assert build_display_tokens([], []) == []

    def test_exact_match_is_all_correct(self):
        tokens = _tokens_for("the quick fox", "the quick fox")
        assert _pairs(tokens) == [("the", "correct"), ("quick", "correct"), ("fox", "correct")]

    def test_missing_word_goes_after_last_preceding_match(self):
        tokens = _tokens_for("I like big cats", "I like small cats")
        assert _pairs(tokens) == [
            ("i", "correct"),
            ("like", "correct"),
            ("big", "missing"),
            ("small", "incorrect"),
            ("cats", "correct"),
        ]
        words = [t.word for t in tokens]
        assert words.index("like") < words.index("big") < words.index("cats")

    def test_missing_before_every_match_goes_first(self):
        tokens = _tokens_for("very good work", "good work")
        assert _pairs(tokens) == [("very", "missing"), ("good", "correct"), ("work", "correct")]

    def test_missing_words_at_same_point_keep_reference_order(self):
        tokens = _tokens_for("one two three four", "one four")
        assert _pairs(tokens) == [
            ("one", "correct"),
            ("two", "missing"),
            ("three", "missing"),
            ("four", "correct"),
        ]

    def test_trailing_missing_words_follow_last_match(self):
        tokens = _tokens_for("a b c", "a")
        assert _pairs(tokens) == [("a", "correct"), ("b", "missing"), ("c", "missing")]

    def test_repeated_words_consume_earliest_reference_index(self):
        tokens = _tokens_for("the cat sat on the mat", "the the the cat sat")
        assert _pairs(tokens) == [
            ("the", "correct"),
            ("the", "correct"),
            ("the", "incorrect"),
            ("cat", "correct"),
            ("sat", "correct"),
            ("on", "missing"),
            ("mat", "missing"),
        ]

    def test_reordered_input_uses_positional_heuristic(self):
        # missing "c" (ref 2) lands after the rightmost typed word whose
        # reference index is below 2, which is "a" at the end
        tokens = _tokens_for("a b c d", "d b a")
        assert _pairs(tokens) == [
            ("d", "correct"),
            ("b", "correct"),
            ("a", "correct"),
            ("c", "missing"),
        ]

    def test_correct_tokens_equal_score(self):
        r = evaluate("the cat sat on the mat", "the mat the cat dog")
        tokens = build_display_tokens(r.reference_words, r.candidate_words)
        assert count_status(tokens, "correct") == r.score
        assert count_status(tokens, "missing") == r.max_score - r.score
        assert count_status(tokens, "incorrect") == len(r.candidate_words) - r.score


class TestRenderAnswer:
    def test_empty_tokens_render_placeholder(self):
        assert render_answer([]) == "(no answer)"

    def test_capitalizes_first_and_adds_period(self):
        tokens = _tokens_for("the quick fox", "the quick fox")
        assert render_answer(tokens) == "The quick fox."

    def test_missing_wrapped_and_incorrect_struck(self):
        tokens = _tokens_for("I like big cats", "I like small cats")
        assert render_answer(tokens) == "I like (big) ~~small~~ cats."

    def test_missing_first_word_keeps_parenthesis_first(self):
        tokens = [AnswerToken(word="very", status="missing"), AnswerToken(word="good", status="correct")]
        assert render_answer(tokens) == "(very) good."

    def test_incorrect_last_word_wraps_period(self):
        tokens = [AnswerToken(word="go", status="correct"), AnswerToken(word="now", status="incorrect")]
        assert render_answer(tokens) == "Go ~~now.~~"

    def test_custom_markers(self):
        cfg = ScoringConfig(missing_wrap=("[", "]"), incorrect_wrap=("", ""), terminal_punct="", empty_answer_text="-")
        tokens = _tokens_for("a b", "x b")
        assert render_answer(tokens, cfg) == "[a] x b"
        assert render_answer([], cfg) == "-"
