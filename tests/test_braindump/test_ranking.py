"""Unit tests for braindump.ranking."""

import pytest

from braindump.note import new_note
from braindump.ranking import match_preview, rank_notes, rank_results, score


def _note(title: str, content: str):
    return new_note("misc", title, content)


# ---------------------------------------------------------------------------
# score()
# ---------------------------------------------------------------------------


class TestScore:
    @pytest.mark.parametrize(
        "title, content, expected",
        [
            ("Stripe Key", "x", 100),
            ("STRIPE KEY", "stripe key first", 130),
            ("My Stripe Key", "x", 50),
            ("x", "stripe key details", 30),
            ("x", "the stripe key", 10),
            ("Key", "stripe", 0),
        ],
    )
    def test_components(self, title, content, expected):
        assert score(_note(title, content), "stripe key") == expected


# ---------------------------------------------------------------------------
# rank_results()
# ---------------------------------------------------------------------------


class TestRankResults:
    def test_exact_title_first(self):
        exact = _note("Stripe Key", "x")
        content = _note("x", "stripe key details")
        other = _note("Key", "stripe")
        ranked = rank_notes([other, content, exact], "stripe key")
        assert ranked[0] is exact
        scores = [s.score for s in rank_results([other, content, exact], "stripe key")]
        assert scores == sorted(scores, reverse=True)
        assert scores[0] > scores[1]

    def test_ties_keep_input_order(self):
        a, b, c = _note("a", "none"), _note("b", "none"), _note("c", "none")
        assert rank_notes([b, c, a], "zzz") == [b, c, a]

    def test_empty(self):
        assert rank_results([], "q") == []


# ---------------------------------------------------------------------------
# match_preview()
# ---------------------------------------------------------------------------


class TestMatchPreview:
    def test_short_content_without_hit(self):
        assert match_preview("short", "zzz") == "short"

    def test_long_content_without_hit_truncated(self):
        content = "a" * 100
        assert match_preview(content, "zzz") == "a" * 80 + "..."

    def test_window_around_hit(self):
        content = "x" * 50 + "NEEDLE" + "y" * 50
        preview = match_preview(content, "needle")
        assert preview == "..." + "x" * 20 + "NEEDLE" + "y" * 40 + "..."

    def test_newlines_flattened(self):
        assert match_preview("one\ntwo needle", "needle") == "one two needle"
