"""Tests for text helpers."""

import random

from soundsmith.utils.text import (
    capitalize,
    count_words,
    looks_like_adjective,
    pick,
    significant_words,
    singularize,
    split_words,
    stem,
    syllable_count,
    title_case,
    to_gerund,
    unique,
)


class TestCasing:
    """Tests for capitalization helpers."""

    def test_capitalize_keeps_rest(self):
        """Only the first letter changes."""
        assert capitalize("mcQueen") == "McQueen"
        assert capitalize("") == ""

    def test_title_case(self):
        """Every word is capitalized."""
        assert title_case("the hollow  lanterns") == "The Hollow Lanterns"


class TestMorphology:
    """Tests for suffix-based word forms."""

    def test_singularize(self):
        """Common plural patterns reduce to singular."""
        assert singularize("stories") == "story"
        assert singularize("wolves") == "wolf"
        assert singularize("embers") == "ember"
        assert singularize("glass") == "glass"

    def test_gerund(self):
        """Gerunds follow e-dropping and consonant doubling rules."""
        assert to_gerund("burn") == "burning"
        assert to_gerund("chase") == "chasing"
        assert to_gerund("run") == "running"
        assert to_gerund("die") == "dying"

    def test_adjective_heuristic(self):
        """Adjective detection is suffix-only."""
        assert looks_like_adjective("electric")
        assert looks_like_adjective("restless")
        assert not looks_like_adjective("river")
        assert not looks_like_adjective("blue note")

    def test_syllables(self):
        """Vowel groups approximate syllables."""
        assert syllable_count("echo") == 2
        assert syllable_count("fire") == 1
        assert syllable_count("x") == 1


class TestWords:
    """Tests for word splitting and significance."""

    def test_split_words(self):
        """Names split on spaces, hyphens and underscores."""
        assert split_words("Neo-Soul Riders_Of Dawn") == ["neo", "soul", "riders", "of", "dawn"]

    def test_count_words(self):
        """Count is whitespace-based."""
        assert count_words("  The Black  Keys ") == 3

    def test_significant_words_skip_function_words(self):
        """Function words and short words are ignored."""
        assert significant_words("The River Of Fire") == ["river", "fire"]

    def test_stem_groups_plurals(self):
        """Porter stems merge simple inflections."""
        assert stem("Storms") == stem("storm")

    def test_pick_and_unique(self):
        """pick falls back to the default; unique keeps first spelling."""
        assert pick(random.Random(0), [], "x") == "x"
        assert unique(["Echo", "echo", "Tide"]) == ["Echo", "Tide"]
