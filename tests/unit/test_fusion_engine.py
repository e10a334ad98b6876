"""Tests for the fusion engine."""

from dataclasses import replace
from itertools import combinations

import pytest

from soundsmith.config import Config, RepetitionConfig
from soundsmith.errors import FusionExhausted, IncompatibleGenres
from soundsmith.fusion import FusionEngine, FusionRequest, FusionResult
from soundsmith.selection import SelectionSession
from soundsmith.utils.text import count_words, significant_words, stem


def _stems(name):
    return {stem(w) for w in significant_words(name)}


def _compatible_pairs(engine):
    return [
        (a, b) for a, b in combinations(engine.compatibility.genres, 2)
        if engine.compatibility.get_compatibility(a, b) is not None
    ]


@pytest.fixture(scope="module")
def engine():
    return FusionEngine()


class TestFusionRequest:
    """Tests for request validation."""

    def test_aliases(self):
        """Legacy intensity and creativity labels map onto the fusion scale."""
        request = FusionRequest("Electronic", "Hip Hop", intensity="high", creativity_level="experimental")
        assert request.primary_genre == "electronic"
        assert request.secondary_genre == "hip-hop"
        assert request.intensity == "bold"
        assert request.creativity_level == "innovative"
        assert FusionRequest("rock", "pop", intensity="low").intensity == "subtle"
        assert FusionRequest("rock", "pop", intensity="medium").intensity == "moderate"

    def test_invalid_values(self):
        """Unknown labels and non-positive counts raise ValueError."""
        with pytest.raises(ValueError):
            FusionRequest("rock", "pop", intensity="extreme")
        with pytest.raises(ValueError):
            FusionRequest("rock", "pop", creativity_level="wild")
        with pytest.raises(ValueError):
            FusionRequest("rock", "pop", count=0)
        with pytest.raises(ValueError):
            FusionRequest("rock", "pop", word_count=0)


class TestAnalysis:
    """Tests for fusion potential analysis."""

    def test_analysis_bounds(self, engine):
        """All potential scores lie in [0, 1]."""
        analysis = engine.analyze(FusionRequest("folk", "electronic"))
        for value in (analysis.vocabulary_potential, analysis.cultural_synergy,
                      analysis.innovation_opportunity, analysis.market_viability, analysis.artistic_merit):
            assert 0.0 <= value <= 1.0
        assert analysis.recommended_approach["blend_strategy"] in ("synthesize", "merge", "alternate", "dominant")

    def test_strong_pair_recommends_bold(self, engine):
        """Very compatible pairs get a bold synthesize recommendation."""
        approach = engine.analyze(FusionRequest("electronic", "jazz")).recommended_approach
        assert approach["blend_strategy"] == "synthesize"
        assert approach["fusion_intensity"] == "bold"
        assert "Keep recognizable musical vocabulary" in approach["focus_areas"]

    def test_unknown_genre(self, engine):
        """Unknown genres raise IncompatibleGenres."""
        with pytest.raises(IncompatibleGenres) as exc_info:
            engine.analyze(FusionRequest("rock", "polka"))
        assert exc_info.value.genres == ("rock", "polka")

    def test_to_dict(self, engine):
        """Serialized analysis carries the compatibility entry."""
        data = engine.analyze(FusionRequest("rock", "classical")).to_dict()
        assert data["compatibility"]["genres"] == ["classical", "rock"]


class TestScoring:
    """Tests for authenticity and validation."""

    def test_authenticity(self, engine):
        """Synthetic affixes cost 0.1 each; musical terms add 0.1."""
        assert engine.authenticity("Velvet Harbor") == pytest.approx(0.7)
        assert engine.authenticity("Cyber Rhythm") == pytest.approx(0.7)
        assert engine.authenticity("Neo Cyber Synth") == pytest.approx(0.4)
        assert engine.authenticity("Midnight Melody") == pytest.approx(0.8)

    def test_quality_spans_range(self, engine):
        """Exact-length names score well above the gate; off-length names on weak pairs fall below it."""
        request = FusionRequest("rock", "pop", word_count=2)
        analysis = engine.analyze(request)
        assert engine.quality("Neon Harbor", request, analysis, 0.5) >= 0.7
        weak = replace(analysis, compatibility=replace(analysis.compatibility, score=0.2))
        assert engine.quality("Neon Harbor Circuit", request, weak, 0.5) == pytest.approx(0.275)
        assert engine.quality("Neon Harbor Circuit Static", request, weak, 0.5) < 0.2

    def test_weak_candidate_fails_default_gate(self, engine):
        """A name one word off on a low-compatibility pair is rejected at min_quality 0.3."""
        request = FusionRequest("rock", "pop", word_count=2)
        analysis = engine.analyze(request)
        weak = replace(analysis, compatibility=replace(analysis.compatibility, score=0.2))
        name = "Neon Harbor Circuit"
        result = FusionResult(
            name=name,
            fusion_metadata={"authenticity_score": 0.7},
            quality_score=engine.quality(name, request, weak, 0.5),
        )
        assert engine.config.fusion.min_quality == 0.3
        assert not engine.validate(result, request)

        strong = FusionResult(
            name="Neon Harbor",
            fusion_metadata={"authenticity_score": 0.7},
            quality_score=engine.quality("Neon Harbor", request, weak, 0.5),
        )
        assert engine.validate(strong, request)

    def test_repeat_penalty(self):
        """Names the engine returned before lose quality."""
        engine = FusionEngine()
        request = FusionRequest("electronic", "jazz", count=2)
        analysis = engine.analyze(request)
        results = engine.fuse(request, session=SelectionSession.create(seed=3))
        name = results[0].name
        fresh = FusionEngine().quality(name, request, analysis, 0.5)
        assert engine.quality(name, request, analysis, 0.5) == pytest.approx(max(0.0, fresh - 0.15))


class TestFuse:
    """Tests for generating fused names."""

    def test_electronic_jazz_three_names(self, engine):
        """Three results, each carrying the pair's compatibility score."""
        session = SelectionSession.create(seed=21)
        results = engine.fuse(FusionRequest("electronic", "jazz", count=3), session=session)
        assert len(results) == 3
        expected = engine.compatibility.get_compatibility("electronic", "jazz").score
        for result in results:
            assert result.fusion_metadata["compatibility_score"] == expected
            assert result.fusion_metadata["primary_genre"] == "electronic"
            assert 0.0 <= result.quality_score <= 1.0
            assert set(result.explanations) == {
                "fusion_rationale", "genre_influences", "creative_elements", "market_appeal",
            }

    def test_results_do_not_reject_each_other(self, engine):
        """Names returned together are distinct and recorded in the session guard."""
        session = SelectionSession.create(seed=8)
        results = engine.fuse(FusionRequest("rock", "classical", count=3), session=session)
        names = [r.name.lower() for r in results]
        assert len(set(names)) == len(names)
        for result in results:
            assert session.guard.should_reject(result.name)

    def test_reverse_order(self, engine):
        """Swapping the genres still fuses, with the primary genre first."""
        results = engine.fuse(FusionRequest("jazz", "electronic", count=2), session=SelectionSession.create(seed=4))
        assert results
        assert all(r.fusion_metadata["primary_genre"] == "jazz" for r in results)

    def test_word_count_tolerance(self, engine):
        """Accepted names are within one word of the target."""
        request = FusionRequest("folk", "electronic", word_count=3, count=3, intensity="subtle")
        for result in engine.fuse(request, session=SelectionSession.create(seed=12)):
            assert abs(count_words(result.name) - 3) <= 1

    def test_sorted_by_quality(self, engine):
        """Results come best first."""
        results = engine.fuse(FusionRequest("hip-hop", "jazz", count=3), session=SelectionSession.create(seed=2))
        scores = [r.quality_score for r in results]
        assert scores == sorted(scores, reverse=True)

    def test_exhausted(self):
        """Impossible validation thresholds exhaust the attempt budget."""
        from soundsmith.config import Config, FusionConfig

        strict = FusionEngine(config=Config(fusion=FusionConfig(min_quality=1.01)))
        with pytest.raises(FusionExhausted) as exc_info:
            strict.fuse(FusionRequest("rock", "pop", count=2), session=SelectionSession.create(seed=1))
        assert exc_info.value.attempts == 16

    def test_unknown_pair_raises(self, engine):
        """Unknown genres raise before any attempt."""
        with pytest.raises(IncompatibleGenres):
            engine.fuse(FusionRequest("rock", "polka"))

    def test_full_batch_for_every_pair(self, engine):
        """Every compatible pair yields a full batch of four names."""
        pairs = _compatible_pairs(engine)
        assert pairs
        for primary, secondary in pairs:
            session = SelectionSession.create(seed=17)
            results = engine.fuse(FusionRequest(primary, secondary, count=4), session=session)
            assert len(results) == 4, f"{primary}+{secondary}"

    @pytest.mark.parametrize("word_count", [1, 2, 3])
    def test_complement_pair_full_batch(self, engine, word_count):
        """Complement pairs fall through to other methods once synergy words are used up."""
        assert engine.compatibility.get_compatibility("rock", "indie").fusion_style == "complement"
        request = FusionRequest("rock", "indie", word_count=word_count, count=4)
        results = engine.fuse(request, session=SelectionSession.create(seed=9))
        assert len(results) == 4
        assert len({r.name.lower() for r in results}) == 4

    def test_batch_names_share_no_significant_word(self, engine):
        """A four-name batch passes the repetition guard in any order."""
        results = engine.fuse(FusionRequest("rock", "indie", count=4), session=SelectionSession.create(seed=23))
        assert len(results) == 4
        for first, second in combinations(results, 2):
            assert not _stems(first.name) & _stems(second.name)

    def test_only_returned_templates_recorded(self, engine):
        """Template draws count in the session only when their name is returned."""
        session = SelectionSession.create(seed=31)
        results = engine.fuse(FusionRequest("folk", "electronic", count=3, intensity="subtle"), session=session)
        returned_sources = [
            source for r in results for source in r.fusion_metadata["pattern_sources"]
            if r.fusion_metadata["fusion_method"] in ("gentle_infusion", "pattern_interweaving")
        ]
        assert session.guard.stats.templates_recorded == len(returned_sources)
        assert [record.template_id for record in session.history] == returned_sources


class TestAnalytics:
    """Tests for engine analytics."""

    def test_analytics_accumulate(self):
        """Attempts and successes are tracked per unordered pair."""
        engine = FusionEngine()
        engine.fuse(FusionRequest("electronic", "jazz", count=2), session=SelectionSession.create(seed=5))
        engine.fuse(FusionRequest("jazz", "electronic", count=2), session=SelectionSession.create(seed=6))
        analytics = engine.get_analytics()
        assert list(analytics["pairs"]) == ["electronic+jazz"]
        assert analytics["total_successes"] >= 2
        assert 0.0 < analytics["success_rate"] <= 1.0

    def test_empty_analytics(self):
        """A fresh engine reports no activity."""
        analytics = FusionEngine().get_analytics()
        assert analytics["total_attempts"] == 0
        assert analytics["success_rate"] == 0.0

    def test_produced_names_bounded(self):
        """The engine remembers at most name_memory returned names."""
        engine = FusionEngine(config=Config(repetition=RepetitionConfig(name_memory=2)))
        assert engine._produced.maxlen == 2
        results = []
        for seed in (1, 2, 3):
            session = SelectionSession.create(seed=seed)
            results = engine.fuse(FusionRequest("electronic", "jazz", count=2), session=session)
        assert len(engine._produced) <= 2
        assert results[-1].name.lower() in engine._produced
