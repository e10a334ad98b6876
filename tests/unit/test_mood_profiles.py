"""Tests for mood profiles and emotional vectors."""

import pytest

from soundsmith.mood.profiles import (
    COMPLEX_MOODS,
    MOOD_MODIFIERS,
    PRIMARY_MOODS,
    EmotionalVector,
    all_mood_names,
    apply_modifier,
    blend,
    closest_moods,
    find_by_dimensions,
    get_mood,
    is_known_mood,
    mood_summary,
    resolve_mood,
    similarity,
)


class TestEmotionalVector:
    """Tests for EmotionalVector arithmetic."""

    def test_values_clamped(self):
        """from_array clamps every axis to 0-100."""
        vector = EmotionalVector.from_array([-10, 50, 150, 0, 100, 42])
        assert vector.energy == 0.0
        assert vector.complexity == 100.0
        assert vector.mystery == 42.0

    def test_shifted_clamps(self):
        """Shifts are scaled and clamped."""
        vector = EmotionalVector(energy=90).shifted({"energy": 40, "mystery": -10}, scale=0.5)
        assert vector.energy == 100.0
        assert vector.mystery == 45.0

    def test_blended_weight(self):
        """blended is base*(1-w) + other*w."""
        a = EmotionalVector(energy=0)
        b = EmotionalVector(energy=100)
        assert a.blended(b, 0.25).energy == pytest.approx(25.0)

    def test_dominant_traits(self):
        """Only axes above neutral count as dominant."""
        vector = EmotionalVector(energy=90, darkness=80)
        assert vector.dominant_traits() == ["energy", "darkness"]
        assert EmotionalVector().dominant_traits() == []


class TestMoodFunctions:
    """Tests for similarity, blending and lookups."""

    def test_similarity_bounds(self):
        """Identical vectors score 1; opposite corners score 0."""
        low = EmotionalVector(0, 0, 0, 0, 0, 0)
        high = EmotionalVector(100, 100, 100, 100, 100, 100)
        assert similarity(low, low) == 1.0
        assert similarity(low, high) == 0.0

    def test_blend_normalizes_weights(self):
        """Weights are normalized before averaging."""
        result = blend([EmotionalVector(energy=0), EmotionalVector(energy=100)], [1, 3])
        assert result.energy == pytest.approx(75.0)

    def test_blend_errors(self):
        """Empty inputs or mismatched weights raise."""
        with pytest.raises(ValueError):
            blend([])
        with pytest.raises(ValueError):
            blend([EmotionalVector()], [1, 2])

    def test_known_moods(self):
        """Ten primary and four complex moods."""
        assert len(PRIMARY_MOODS) == 10
        assert len(COMPLEX_MOODS) == 4
        assert len(all_mood_names()) == 14
        assert is_known_mood("Bittersweet")
        assert is_known_mood("triumphant melancholy")
        assert not is_known_mood("grumpy")
        assert get_mood("bittersweet") is None
        assert get_mood("DARK").name == "dark"

    def test_resolve_complex_mood(self):
        """Complex moods resolve to a blend of their components."""
        vector = resolve_mood("bittersweet")
        expected = blend(
            [PRIMARY_MOODS["nostalgic"].vector, PRIMARY_MOODS["melancholic"].vector, PRIMARY_MOODS["uplifting"].vector],
            [0.5, 0.3, 0.2],
        )
        assert vector == expected
        assert resolve_mood("unknown") is None
        assert resolve_mood(None) is None

    def test_modifier_only_on_applicable_moods(self):
        """Modifiers skip moods they do not apply to."""
        modifier = MOOD_MODIFIERS["midnight_amplifier"]
        base = PRIMARY_MOODS["euphoric"].vector
        assert apply_modifier(base, "euphoric", modifier) == base
        mysterious = PRIMARY_MOODS["mysterious"].vector
        shifted = apply_modifier(mysterious, "mysterious", modifier)
        assert shifted.darkness > mysterious.darkness

    def test_resolve_with_modifiers(self):
        """resolve_mood applies known modifiers and ignores unknown ones."""
        base = resolve_mood("dark")
        modified = resolve_mood("dark", ["urban_intensity", "no_such_modifier"])
        assert modified.energy > base.energy
        assert modified.intensity > base.intensity

    def test_find_by_dimensions(self):
        """Tolerance window matches every specified axis."""
        matches = find_by_dimensions({"energy": 90, "intensity": 90})
        assert "aggressive" in matches
        assert "peaceful" not in matches

    def test_closest_moods(self):
        """A primary mood's own vector ranks itself first."""
        ranked = closest_moods(PRIMARY_MOODS["romantic"].vector, limit=3)
        assert ranked[0] == ("romantic", 1.0)
        assert len(ranked) == 3

    def test_mood_summary(self):
        """Summaries describe primary and complex moods."""
        primary = mood_summary("melancholic")
        assert primary["kind"] == "primary"
        assert primary["genres"][0] in ("classical", "blues")
        complex_summary = mood_summary("dark_euphoria")
        assert complex_summary["kind"] == "complex"
        assert complex_summary["components"]["euphoric"] == 0.5
        assert mood_summary("grumpy") is None
