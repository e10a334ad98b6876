"""Tests for word source normalization."""

import pytest

from soundsmith.errors import MalformedWordSource
from soundsmith.vocabulary.word_source import (
    DEFAULT_POOLS,
    STANDARD_CATEGORIES,
    WordSource,
    default_word_source,
    normalize_word_list,
    normalize_word_source,
)


class TestNormalizeWordList:
    """Tests for single-category normalization."""

    def test_raw_is_lowercased_and_unique(self):
        """Raw keeps first occurrences, lowercased and stripped."""
        word_list, stats = normalize_word_list("nouns", [" River", "river", "TIDE", ""])
        assert word_list.raw == ("river", "tide")
        assert stats.duplicates_removed == 1
        assert stats.rejected["empty"] == 1

    def test_filtered_is_subset_of_raw(self):
        """Quality tier drops bad characters, lengths and jargon."""
        values = ["ok", "thunder", "rock and roll", "supercalifragilistic", "data", "ember"]
        word_list, stats = normalize_word_list("nouns", values)
        assert set(word_list.filtered) <= set(word_list.raw)
        assert word_list.filtered == ("thunder", "ember")
        assert stats.rejected["length"] == 2
        assert stats.rejected["characters"] == 1
        assert stats.rejected["jargon"] == 1

    def test_stem_duplicates_filtered(self):
        """Inflections of one stem survive only once in the filtered tier."""
        word_list, _ = normalize_word_list("nouns", ["storm", "storms"])
        assert word_list.raw == ("storm", "storms")
        assert word_list.filtered == ("storm",)

    def test_hyphenated_word_allowed(self):
        """A single hyphen joining two parts is a valid token."""
        word_list, _ = normalize_word_list("adjectives", ["star-lit"])
        assert word_list.filtered == ("star-lit",)

    def test_none_is_empty(self):
        """A missing category normalizes to an empty list."""
        word_list, stats = normalize_word_list("verbs", None)
        assert word_list.raw == ()
        assert stats.words_seen == 0

    def test_rejects_non_list(self):
        """A bare string is malformed."""
        with pytest.raises(MalformedWordSource) as exc_info:
            normalize_word_list("nouns", "river")
        assert exc_info.value.category == "nouns"

    def test_rejects_non_string_entries(self):
        """Non-string entries are malformed."""
        with pytest.raises(MalformedWordSource) as exc_info:
            normalize_word_list("nouns", ["river", 3])
        assert exc_info.value.offending == [3]


class TestWordSource:
    """Tests for the WordSource container."""

    def test_standard_categories_always_present(self):
        """Absent standard categories exist as empty lists, never None."""
        source, _ = normalize_word_source({"nouns": ["river"]})
        for category in STANDARD_CATEGORIES:
            assert category in source.categories()
        assert source.filtered("verbs") == []
        assert source.raw("unknown") == []

    def test_unknown_category_kept(self):
        """Unknown categories are kept as-is."""
        source, _ = normalize_word_source({"colors": ["teal"]})
        assert source.filtered("colors") == ["teal"]

    def test_pool_falls_back_to_defaults(self):
        """Empty filtered pools fall back to the built-in pools at lookup time."""
        source, _ = normalize_word_source({})
        assert source.is_empty()
        assert source.filtered("nouns") == []
        assert source.pool("nouns") == list(DEFAULT_POOLS["nouns"])

    def test_merged_does_not_mutate(self):
        """Merging returns a new source with extra words in front."""
        source, _ = normalize_word_source({"nouns": ["river"]})
        merged = source.merged({"nouns": ["synth"], "verbs": ["groove"]})
        assert merged.filtered("nouns") == ["synth", "river"]
        assert merged.filtered("verbs") == ["groove"]
        assert source.filtered("nouns") == ["river"]

    def test_rejects_non_mapping(self):
        """The root must be a mapping."""
        with pytest.raises(MalformedWordSource):
            normalize_word_source(["river"])

    def test_default_source_is_populated(self):
        """Built-in pools produce a non-empty source."""
        source = default_word_source()
        assert isinstance(source, WordSource)
        assert not source.is_empty()
        assert source.size() > 50

    def test_stats_to_dict(self):
        """Aggregate stats serialize for logging."""
        _, stats = normalize_word_source({"nouns": ["river", "river"], "verbs": ["burn"]})
        data = stats.to_dict()
        assert data["words_seen"] == 3
        assert data["duplicates_removed"] == 1
