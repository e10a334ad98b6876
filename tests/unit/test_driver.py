"""Tests for request parsing and the generation driver."""

import pytest

from soundsmith.config import Config, GenerationConfig
from soundsmith.generation import (
    FALLBACK_NAMES,
    GenerationDriver,
    GenerationRequest,
    GenerationSession,
    curated_names,
    dynamic_phrase,
)
from soundsmith.models import NameType
from soundsmith.utils.text import count_words


@pytest.fixture(scope="module")
def driver():
    return GenerationDriver()


def _session(request, seed=7):
    return GenerationSession.create(request, seed=seed)


class TestGenerationRequest:
    """Tests for request parsing."""

    def test_defaults(self):
        """Missing fields use the defaults."""
        request = GenerationRequest.from_dict({})
        assert request.name_type is NameType.BAND
        assert request.word_count_range == (2, 2)
        assert request.count == 4
        assert not request.is_fusion

    def test_open_word_count(self):
        """'4+' resolves to the configured open range."""
        request = GenerationRequest.from_dict({"word_count": "4+"})
        assert request.word_count_range == (4, 6)
        assert request.is_open_length
        config = Config(generation=GenerationConfig(open_word_count_range=[5, 7]))
        assert GenerationRequest.from_dict({"word_count": "4+"}, config).word_count_range == (5, 7)

    def test_fields_lowercased(self):
        """String fields are trimmed and lowercased."""
        request = GenerationRequest.from_dict({
            "type": "Song", "genre": " Rock ", "secondary_genre": "Jazz", "mood": "DARK", "word_count": "3",
        })
        assert request.name_type is NameType.SONG
        assert request.genre == "rock"
        assert request.mood == "dark"
        assert request.word_count_range == (3, 3)
        assert request.is_fusion

    @pytest.mark.parametrize("data", [
        {"type": "album"},
        {"count": 0},
        {"count": -2},
        {"count": "many"},
        {"count": True},
        {"word_count": 0},
        {"word_count": "several"},
        {"word_count": False},
    ])
    def test_invalid_requests(self, data):
        """Bad types, counts and word counts raise ValueError."""
        with pytest.raises(ValueError):
            GenerationRequest.from_dict(data)

    def test_atmosphere_parsed(self):
        """Atmosphere mappings become an AtmosphericContext."""
        request = GenerationRequest.from_dict({"atmosphere": {"time_of_day": "Midnight"}})
        assert request.atmosphere.time_of_day == "midnight"

    def test_to_dict(self):
        """Open ranges serialize back to '4+'."""
        assert GenerationRequest.from_dict({"word_count": "4+"}).to_dict()["word_count"] == "4+"
        assert GenerationRequest.from_dict({"word_count": 3}).to_dict()["word_count"] == 3

    @pytest.mark.parametrize("data", [
        {"intensity": "extreme"},
        {"creativity_level": "wild"},
        {"genre": "rock", "secondary_genre": "jazz", "intensity": "extreme"},
        {"genre": "rock", "secondary_genre": "jazz", "creativity_level": "wild"},
        {"genre": "rock", "secondary_genre": "jazz", "intensity": "gentle"},
        {"genre": "rock", "secondary_genre": "jazz", "creativity_level": "safe"},
    ])
    def test_unknown_labels_rejected(self, data):
        """Intensity and creativity labels are checked against the path they will drive."""
        with pytest.raises(ValueError):
            GenerationRequest.from_dict(data)

    def test_known_labels_accepted(self):
        """Each path accepts its own labels and aliases."""
        plain = GenerationRequest.from_dict({"intensity": "Gentle", "creativity_level": "safe"})
        assert plain.intensity == "gentle"
        assert plain.creativity_level == "safe"
        fusion = GenerationRequest.from_dict({
            "genre": "rock", "secondary_genre": "jazz", "intensity": "high", "creativity_level": "revolutionary",
        })
        assert fusion.intensity == "high"
        assert fusion.creativity_level == "revolutionary"
        plain_high = GenerationRequest.from_dict({"intensity": "high", "creativity_level": "experimental"})
        assert plain_high.intensity == "high"

    def test_avoid_categories_forms(self):
        """A bare string names one category; lists are trimmed and lowercased."""
        assert GenerationRequest.from_dict({"avoid_categories": "Abstract"}).avoid_categories == ("abstract",)
        request = GenerationRequest.from_dict({"avoid_categories": [" Abstract ", "nature", ""]})
        assert request.avoid_categories == ("abstract", "nature")
        assert GenerationRequest.from_dict({"avoid_categories": None}).avoid_categories == ()

    @pytest.mark.parametrize("value", [5, {"abstract": True}, ["abstract", 3]])
    def test_avoid_categories_invalid(self, value):
        """Non-string categories raise ValueError."""
        with pytest.raises(ValueError):
            GenerationRequest.from_dict({"avoid_categories": value})


class TestGenerationSession:
    """Tests for request sessions."""

    def test_remaining_and_accept(self):
        """Remaining slots shrink as names are accepted."""
        from soundsmith.models import GeneratedName

        session = _session(GenerationRequest(count=2))
        assert session.remaining == 2
        session.accept(GeneratedName("Velvet Thunder"))
        assert session.remaining == 1
        assert session.names == ["Velvet Thunder"]

    def test_next_word_count_in_range(self):
        """Open-length sessions draw within the range."""
        session = _session(GenerationRequest(word_count_range=(4, 6)))
        counts = {session.next_word_count() for _ in range(50)}
        assert counts <= {4, 5, 6}
        assert len(counts) > 1

    def test_shares_guard_with_selection(self):
        """The selection session works against the same guard."""
        session = _session(GenerationRequest())
        assert session.selection.guard is session.guard
        assert session.selection.rng is session.rng


class TestPlainPath:
    """Tests for template-based generation."""

    @pytest.mark.parametrize("word_count", [1, 2, 3, 5])
    def test_exact_word_counts(self, driver, word_source, word_count):
        """Every name has exactly the requested number of words."""
        request = GenerationRequest.from_dict({"genre": "rock", "word_count": word_count, "count": 4})
        results = driver.generate(request, word_source, _session(request))
        assert len(results) == 4
        for result in results:
            assert count_words(result.name) == word_count
            assert result.metadata["path"] in ("template", "dynamic")
            assert 0.0 <= result.quality_score <= 1.0

    def test_open_length(self, driver, word_source):
        """'4+' names have four to six words."""
        request = GenerationRequest.from_dict({"type": "song", "word_count": "4+", "count": 3})
        for result in driver.generate(request, word_source, _session(request)):
            assert 4 <= count_words(result.name) <= 6

    def test_names_distinct(self, driver, word_source):
        """A request never returns the same name twice."""
        request = GenerationRequest.from_dict({"word_count": 2, "count": 6, "mood": "dark"})
        names = [r.name.lower() for r in driver.generate(request, word_source, _session(request, seed=3))]
        assert len(names) == len(set(names))

    def test_template_metadata(self, driver, word_source):
        """Template results record their template and selection score."""
        request = GenerationRequest.from_dict({"genre": "jazz", "word_count": 3, "count": 2})
        results = driver.generate(request, word_source, _session(request))
        template_results = [r for r in results if r.metadata["path"] == "template"]
        assert template_results
        for result in template_results:
            assert result.metadata["template_id"]
            assert result.metadata["genre"] == "jazz"

    def test_raw_mapping_word_source(self, driver):
        """A plain mapping is normalized before use."""
        request = GenerationRequest.from_dict({"word_count": 2, "count": 2})
        results = driver.generate(request, {"nouns": ["Harbor", "harbor", "", "Comet"]}, _session(request))
        assert len(results) == 2

    def test_shared_guard_across_requests(self, word_source):
        """Names from an earlier request are not repeated by a later one."""
        driver = GenerationDriver()
        request = GenerationRequest.from_dict({"word_count": 2, "count": 4, "seed": 5})
        first = {r.name.lower() for r in driver.generate(request, word_source)}
        second = {r.name.lower() for r in driver.generate(request, word_source)}
        assert not first & second

    def test_only_accepted_templates_recorded(self, driver, word_source):
        """Templates count as used only when a name built from them is returned."""
        request = GenerationRequest.from_dict({"genre": "rock", "word_count": 2, "count": 4})
        session = _session(request, seed=11)
        results = driver.generate(request, word_source, session)
        template_ids = sorted(r.metadata["template_id"] for r in results if r.metadata["path"] == "template")
        assert template_ids
        assert session.guard.stats.templates_recorded == len(template_ids)
        assert sorted(record.template_id for record in session.selection.history) == template_ids


class TestFallback:
    """Tests for recoverable failures."""

    def test_malformed_word_source(self, driver):
        """A malformed category yields curated names tagged with the reason."""
        request = GenerationRequest.from_dict({"count": 3})
        results = driver.generate(request, {"nouns": "thunder"}, _session(request))
        assert len(results) == 3
        for result in results:
            assert result.metadata["path"] == "fallback"
            assert result.metadata["fallback_reason"] == "MalformedWordSource"
            assert result.name in FALLBACK_NAMES[NameType.BAND]

    def test_unknown_fusion_pair(self, driver, word_source):
        """An unknown secondary genre falls back to curated names."""
        request = GenerationRequest.from_dict({"genre": "rock", "secondary_genre": "polka", "count": 2})
        results = driver.generate(request, word_source, _session(request))
        assert [r.metadata["fallback_reason"] for r in results] == ["IncompatibleGenres"] * 2

    def test_curated_names(self, rng):
        """Curated names come from the fixed list without repeats."""
        names = curated_names(NameType.SONG, 5, rng, reason="Test")
        assert len({n.name for n in names}) == 5
        assert all(n.name in FALLBACK_NAMES[NameType.SONG] for n in names)
        assert all(n.metadata["quality_score"] == 0.5 for n in names)

    @pytest.mark.parametrize("word_count", [1, 2, 3, 4, 7])
    def test_dynamic_phrase_length(self, word_source, rng, word_count):
        """Dynamic phrases have exactly the requested word count."""
        for name_type in (NameType.BAND, NameType.SONG):
            phrase = dynamic_phrase(word_source, word_count, rng, name_type)
            assert count_words(phrase) == word_count


class TestFusionPath:
    """Tests for fusion requests through the driver."""

    def test_fusion_results(self, driver, word_source):
        """A secondary genre routes through the fusion engine."""
        request = GenerationRequest.from_dict({
            "genre": "electronic", "secondary_genre": "jazz", "count": 3, "intensity": "high",
        })
        results = driver.generate(request, word_source, _session(request, seed=10))
        assert len(results) == 3
        for result in results:
            assert result.metadata["path"] == "fusion"
            assert result.metadata["primary_genre"] == "electronic"
            assert "fusion_rationale" in result.metadata["explanations"]

    def test_top_up_with_curated_names(self, driver):
        """Short result lists are padded with unused curated names."""
        from soundsmith.models import GeneratedName

        request = GenerationRequest(count=3)
        session = _session(request)
        session.accept(GeneratedName(FALLBACK_NAMES[NameType.BAND][0]))
        driver._top_up(request, session)
        assert session.remaining == 0
        assert len({n.lower() for n in session.names}) == 3
        assert all(n.metadata["fallback_reason"] == "insufficient_variety" for n in session.accepted[1:])
