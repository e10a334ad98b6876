"""Tests for genre compatibility and genre vocabulary."""

import pytest

from soundsmith.genre.compatibility import (
    FUSION_STYLES,
    GENRE_PROFILES,
    GenreCompatibilityModel,
    normalize_genre,
)
from soundsmith.genre.vocabulary import (
    GENRE_KEYWORDS,
    GENRE_VOCABULARIES,
    get_blend_rule,
    get_vocabulary,
)


@pytest.fixture(scope="module")
def model():
    return GenreCompatibilityModel()


class TestNormalizeGenre:
    """Tests for genre name normalization."""

    def test_hip_hop_aliases(self):
        """Hip-hop spellings collapse to one key."""
        for value in ("hiphop", "Hip Hop", "hip_hop", "rap"):
            assert normalize_genre(value) == "hip-hop"

    def test_empty(self):
        """Empty values normalize to None."""
        assert normalize_genre("") is None
        assert normalize_genre(None) is None


class TestCompatibilityModel:
    """Tests for pair compatibility."""

    def test_all_pairs_computed(self, model):
        """Every unordered pair of the eleven genres has an entry."""
        genres = model.genres
        assert len(genres) == 11
        for i, a in enumerate(genres):
            for b in genres[i + 1:]:
                assert model.get_compatibility(a, b) is not None

    def test_symmetric(self, model):
        """Compatibility does not depend on argument order."""
        for a in GENRE_PROFILES:
            for b in GENRE_PROFILES:
                if a != b:
                    assert model.get_compatibility(a, b) is model.get_compatibility(b, a)

    def test_scores_and_styles_valid(self, model):
        """Scores are in [0, 1] and styles are known."""
        for a in GENRE_PROFILES:
            for b in GENRE_PROFILES:
                entry = model.get_compatibility(a, b)
                if entry is None:
                    continue
                assert 0.0 <= entry.score <= 1.0
                assert entry.fusion_style in FUSION_STYLES

    def test_same_or_unknown_genre(self, model):
        """Identical or unknown genres have no entry."""
        assert model.get_compatibility("rock", "Rock") is None
        assert model.get_compatibility("rock", "polka") is None

    def test_electronic_jazz_bonus(self, model):
        """The curated bonus pushes electronic-jazz to the ceiling."""
        entry = model.get_compatibility("electronic", "jazz")
        assert entry.score == 1.0
        assert "Electronic-jazz fusion creates sophisticated innovation" in entry.synergies
        assert "Improvisation meets technology" in entry.best_aspects

    def test_shared_roots_make_evolution(self, model):
        """Shared cultural roots mark the pair as an evolution."""
        # rock and country both list folk among their roots
        assert model.get_compatibility("rock", "country").fusion_style == "evolution"

    def test_ratio_oriented(self, model):
        """ratio_for puts the primary genre's share first."""
        entry = model.get_compatibility("classical", "pop")
        forward = entry.ratio_for("classical")
        backward = entry.ratio_for("pop")
        assert forward == (backward[1], backward[0])
        assert sum(forward) == pytest.approx(1.0)

    def test_most_compatible(self, model):
        """Ranking excludes the genre itself and is descending."""
        ranked = model.most_compatible("jazz", limit=4)
        assert len(ranked) == 4
        assert all(genre != "jazz" for genre, _ in ranked)
        assert ranked[0][1] == model.get_compatibility("jazz", "electronic").score
        scores = [s for _, s in ranked]
        assert scores == sorted(scores, reverse=True)

    def test_fusion_rules(self, model):
        """Curated rules are found in either order."""
        rule = model.get_fusion_rule("jazz", "electronic")
        assert rule.name == "ElectroJazz Fusion"
        assert model.get_fusion_rule("rap", "jazz").name == "Jazz Hop Fusion"
        assert model.get_fusion_rule("pop", "metal") is None

    def test_multi_genre_recommendations(self, model):
        """Pairs are ranked and can be narrowed by style."""
        recs = model.multi_genre_recommendations(["rock", "jazz", "electronic"])
        assert len(recs) == 3
        assert [r["compatibility"] for r in recs] == sorted((r["compatibility"] for r in recs), reverse=True)
        styles = {r["fusion_style"] for r in recs}
        narrowed = model.multi_genre_recommendations(["rock", "jazz", "electronic"], style=styles.pop())
        assert 1 <= len(narrowed) <= 3

    def test_fusion_worthy(self, model):
        """Threshold checks fall back to the model default."""
        assert model.is_fusion_worthy("electronic", "jazz")
        assert not model.is_fusion_worthy("electronic", "jazz", threshold=1.01)
        assert not model.is_fusion_worthy("rock", "polka")

    def test_to_dict(self, model):
        """Serialized entries sort genre names."""
        data = model.get_compatibility("rock", "metal").to_dict()
        assert data["genres"] == ["metal", "rock"]


class TestGenreVocabulary:
    """Tests for per-genre vocabularies and blend rules."""

    def test_every_genre_has_vocabulary(self):
        """Each profiled genre has a vocabulary and keywords."""
        assert set(GENRE_VOCABULARIES) == set(GENRE_PROFILES)
        assert set(GENRE_KEYWORDS) == set(GENRE_PROFILES)

    def test_terms_are_single_tokens(self):
        """Every term is one lowercase word."""
        for vocabulary in GENRE_VOCABULARIES.values():
            for term in vocabulary.all_terms():
                assert term == term.lower()
                assert " " not in term

    def test_noun_and_adjective_views(self):
        """Views are deduplicated and non-empty."""
        vocabulary = get_vocabulary("Jazz")
        nouns = vocabulary.nouns()
        assert nouns and len(nouns) == len(set(nouns))
        assert vocabulary.adjectives()
        assert get_vocabulary("polka") is None

    def test_blend_rules(self):
        """Blend rules match unordered pairs."""
        rule = get_blend_rule("jazz", "electronic")
        assert rule.strategy == "synthesize"
        assert rule.weights == (0.6, 0.4)
        assert get_blend_rule("hiphop", "jazz").name == "Jazz Hop Vocabulary Fusion"
        assert get_blend_rule("pop", "folk") is None
