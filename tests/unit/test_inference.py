"""Tests for context-based mood inference."""

import pytest

from soundsmith.mood.inference import MIN_CONFIDENCE, infer_mood, infer_moods


class TestInferMoods:
    """Tests for ranked inference."""

    def test_no_cues(self):
        """No context infers nothing."""
        assert infer_moods() == []
        assert infer_mood() is None

    def test_genre_alone_below_minimum(self):
        """A single weak genre cue does not reach the confidence floor."""
        # 0.6 * 0.15 = 0.09
        assert infer_moods(genre="rock") == []

    def test_strong_genre_cue(self):
        """Metal alone suggests aggressive moods."""
        ranked = infer_moods(genre="metal")
        assert {mood for mood, _ in ranked} == {"aggressive", "dark", "energetic"}
        assert ranked[0][1] == pytest.approx(0.135)

    def test_keywords_accumulate(self):
        """Theme keywords add to genre cues."""
        ranked = infer_moods(genre="metal", keywords=["storm"])
        assert ranked[0][0] in ("aggressive", "dark", "energetic")
        assert ranked[0][1] == pytest.approx(0.285)

    def test_keyword_phrases_and_plurals(self):
        """Phrases are split into words and simple plurals match."""
        ranked = dict(infer_moods(keywords=["Shadows of the city"]))
        assert ranked["dark"] == pytest.approx(0.3)

    def test_temporal_cues(self):
        """Time of day and season phase combine."""
        ranked = dict(infer_moods(keywords=["night"], time_of_day="midnight", season="winter_introspection"))
        assert ranked["dark"] == pytest.approx(0.15 + 0.08 + 0.06)

    def test_avoid_keywords(self):
        """Avoided keywords push their moods down."""
        ranked = dict(infer_moods(keywords=["love", "night"], avoid_keywords=["night"]))
        assert "dark" not in ranked
        assert "romantic" not in ranked
        assert "uplifting" in ranked

    def test_all_scores_above_minimum(self):
        """Every returned confidence meets the floor and ranking is descending."""
        ranked = infer_moods(genre="blues", keywords=["memory", "water"], tempo="slow", key="minor")
        confidences = [c for _, c in ranked]
        assert all(c >= MIN_CONFIDENCE for c in confidences)
        assert confidences == sorted(confidences, reverse=True)
        assert ranked[0][0] == "melancholic"


class TestInferMood:
    """Tests for single-mood inference."""

    def test_top_mood(self):
        """Returns the highest-ranked mood."""
        assert infer_mood(genre="folk", keywords=["memory"]) == "nostalgic"

    def test_unknown_values_ignored(self):
        """Unknown genres and times contribute nothing."""
        assert infer_mood(genre="polka", time_of_day="teatime") is None
