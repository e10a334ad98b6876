"""Cross-genre fusion engine.

Blends two genres into hybrid names. The flow per request:

1. Look up the pair's compatibility (fail with IncompatibleGenres if absent)
2. Analyse fusion potential and fuse the two vocabularies
3. Run the ordered fusion strategies for the requested intensity, many
   times over, scoring and validating every candidate
4. Rank survivors by quality and accept them through a call-local
   repetition guard so the returned names never reject each other

Usage:
    engine = FusionEngine()
    results = engine.fuse(FusionRequest("electronic", "jazz", word_count=2, count=3))
    for result in results:
        print(result.name, result.quality_score)
"""

import threading
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..config import Config
from ..errors import FusionExhausted, IncompatibleGenres
from ..genre.compatibility import CompatibilityEntry, GenreCompatibilityModel, normalize_genre
from ..genre.vocabulary import GENRE_KEYWORDS
from ..models import NameType
from ..selection.engine import SelectionEngine
from ..selection.scoring import SelectionCriteria, TemplateScore
from ..selection.session import SelectionSession
from ..utils.logging import get_logger
from ..utils.text import count_words, significant_words, stem
from ..vocabulary.repetition_guard import RepetitionGuard
from ..vocabulary.word_source import WordSource, default_word_source
from .strategies import FusionCandidate, FusionInputs, methods_for, run_strategies
from .vocabulary_fusion import FusedVocabulary, VocabularyFusion

logger = get_logger(__name__)

FUSION_INTENSITIES = ("subtle", "moderate", "bold", "experimental")
CREATIVITY_LEVELS = ("conservative", "balanced", "innovative", "revolutionary")

_INTENSITY_ALIASES = {"low": "subtle", "medium": "moderate", "high": "bold"}
_CREATIVITY_ALIASES = {"experimental": "innovative"}

POPULAR_GENRES = ("pop", "rock", "electronic", "hip-hop", "indie")
SYNTHETIC_AFFIXES = ("cyber", "neo", "synth", "hyper", "ultra", "meta", "proto")
MUSICAL_TERMS = ("harmony", "rhythm", "melody", "beat", "chord", "scale")

_CREATIVITY_INNOVATION = {"revolutionary": 0.3, "innovative": 0.2, "balanced": 0.1}
_STYLE_INNOVATION = {"contrast": 0.15, "hybrid": 0.1}
_CREATIVITY_FACTOR = {"revolutionary": 0.2, "innovative": 0.1}
_AUDIENCE_ADJUSTMENT = {"mainstream": 0.2, "experimental": -0.1}

QUALITY_WEIGHTS = {"structure": 0.45, "compatibility": 0.3, "innovation": 0.25}
STRUCTURAL_FIT = {0: 1.0, 1: 0.2}
REPEAT_PENALTY = 0.15


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def normalize_fusion_intensity(value: Optional[str]) -> Optional[str]:
    """Fusion intensity for a label or alias; None if unknown. Empty means moderate."""
    key = (value or "moderate").strip().lower()
    key = _INTENSITY_ALIASES.get(key, key)
    return key if key in FUSION_INTENSITIES else None


def normalize_fusion_creativity(value: Optional[str]) -> Optional[str]:
    """Creativity level for a label or alias; None if unknown. Empty means balanced."""
    key = (value or "balanced").strip().lower()
    key = _CREATIVITY_ALIASES.get(key, key)
    return key if key in CREATIVITY_LEVELS else None


@dataclass
class FusionRequest:
    """Parameters of a fusion call.

    Intensity accepts low, medium and high as aliases for subtle, moderate
    and bold; creativity accepts experimental as an alias for innovative.
    """
    primary_genre: str
    secondary_genre: str
    mood: Optional[str] = None
    word_count: int = 2
    count: int = 3
    intensity: str = "moderate"
    creativity_level: str = "balanced"
    preserve_authenticity: bool = True
    cultural_sensitivity: bool = False
    target_audience: str = "general"
    name_type: NameType = NameType.BAND

    def __post_init__(self):
        self.primary_genre = normalize_genre(self.primary_genre) or ""
        self.secondary_genre = normalize_genre(self.secondary_genre) or ""
        intensity = normalize_fusion_intensity(self.intensity)
        if intensity is None:
            raise ValueError(f"Unknown fusion intensity: {self.intensity}")
        creativity = normalize_fusion_creativity(self.creativity_level)
        if creativity is None:
            raise ValueError(f"Unknown creativity level: {self.creativity_level}")
        self.intensity = intensity
        self.creativity_level = creativity
        if isinstance(self.name_type, str):
            self.name_type = NameType.parse(self.name_type)
        if self.word_count < 1:
            raise ValueError("word_count must be at least 1")
        if self.count < 1:
            raise ValueError("count must be at least 1")


@dataclass
class FusionAnalysis:
    """Fusion potential of a genre pair for a request."""
    compatibility: CompatibilityEntry
    vocabulary_potential: float
    cultural_synergy: float
    innovation_opportunity: float
    market_viability: float
    artistic_merit: float
    recommended_approach: Dict = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return {
            "compatibility": self.compatibility.to_dict(),
            "vocabulary_potential": round(self.vocabulary_potential, 4),
            "cultural_synergy": round(self.cultural_synergy, 4),
            "innovation_opportunity": round(self.innovation_opportunity, 4),
            "market_viability": round(self.market_viability, 4),
            "artistic_merit": round(self.artistic_merit, 4),
            "recommended_approach": dict(self.recommended_approach),
        }


@dataclass
class FusionResult:
    """A fused name with its metadata, quality and explanations."""
    name: str
    fusion_metadata: Dict
    quality_score: float
    explanations: Dict = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return {
            "name": self.name,
            "fusion_metadata": dict(self.fusion_metadata),
            "quality_score": round(self.quality_score, 4),
            "explanations": dict(self.explanations),
        }


class FusionEngine:
    """Generate names that blend two genres.

    Analytics are shared across calls and protected by a lock; everything
    else that changes per call lives in the session passed to ``fuse``.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        compatibility: Optional[GenreCompatibilityModel] = None,
        selection: Optional[SelectionEngine] = None,
    ):
        self.config = config or Config()
        self.compatibility = compatibility or GenreCompatibilityModel(
            fusion_threshold=self.config.fusion.fusion_worthy_threshold,
        )
        self.selection = selection or SelectionEngine(config=self.config)
        self.vocabulary_fusion = VocabularyFusion()
        self._lock = threading.Lock()
        self._metrics: Dict[str, Dict[str, float]] = {}
        # Names returned before, oldest first; bounded like the guard's name memory
        self._produced: deque = deque(maxlen=self.config.repetition.name_memory)
        logger.info("Fusion engine initialized")

    # Analysis

    def _entry(self, request: FusionRequest) -> CompatibilityEntry:
        entry = self.compatibility.get_compatibility(request.primary_genre, request.secondary_genre)
        if entry is None:
            raise IncompatibleGenres(request.primary_genre, request.secondary_genre)
        return entry

    def analyze(self, request: FusionRequest) -> FusionAnalysis:
        """Score the fusion potential of the request's genre pair.

        Raises:
            IncompatibleGenres: If the pair is not in the compatibility model.
        """
        entry = self._entry(request)
        a = self.compatibility.get_profile(request.primary_genre)
        b = self.compatibility.get_profile(request.secondary_genre)

        vocabulary_potential = 0.5
        vocabulary_potential += 0.1 * len(set(a.cultural_roots) & set(b.cultural_roots))
        if a.instrumentation != b.instrumentation:
            vocabulary_potential += 0.15
        if 0.3 < abs(a.complexity - b.complexity) < 0.7:
            vocabulary_potential += 0.1
        vocabulary_potential = _clamp(vocabulary_potential)

        cultural_synergy = 0.5 + (0.2 if a.era == b.era else 0.1)
        cultural_synergy += 0.05 * len(set(a.emotional_range) & set(b.emotional_range))
        cultural_synergy = _clamp(cultural_synergy)

        innovation = entry.score * 0.5
        innovation += _CREATIVITY_INNOVATION.get(request.creativity_level, 0.0)
        innovation += _STYLE_INNOVATION.get(entry.fusion_style, 0.0)
        innovation = _clamp(innovation)

        market = 0.5 + 0.1 * sum(1 for g in (a.name, b.name) if g in POPULAR_GENRES)
        market += _AUDIENCE_ADJUSTMENT.get(request.target_audience, 0.0)
        market = _clamp(market)

        merit = entry.score * 0.4 + vocabulary_potential * 0.3 + cultural_synergy * 0.3

        return FusionAnalysis(
            compatibility=entry,
            vocabulary_potential=vocabulary_potential,
            cultural_synergy=cultural_synergy,
            innovation_opportunity=innovation,
            market_viability=market,
            artistic_merit=merit,
            recommended_approach=self._recommended_approach(entry, request),
        )

    def _recommended_approach(self, entry: CompatibilityEntry, request: FusionRequest) -> Dict:
        if entry.score > 0.8:
            blend, intensity = "synthesize", "bold"
        elif entry.score > 0.6:
            blend = "alternate" if entry.fusion_style == "contrast" else "merge"
            intensity = "moderate"
        else:
            blend, intensity = "dominant", "subtle"

        focus = list(entry.best_aspects[:3]) or list(entry.synergies[:2])
        cautions = list(entry.challenges[:2])
        if not self.compatibility.is_fusion_worthy(request.primary_genre, request.secondary_genre):
            cautions.append(f"Low compatibility: keep {request.primary_genre} dominant")
        if request.preserve_authenticity:
            focus.append("Keep recognizable musical vocabulary")
        return {
            "blend_strategy": blend,
            "fusion_intensity": intensity,
            "focus_areas": focus,
            "cautions": cautions,
        }

    # Scoring

    def authenticity(self, name: str) -> float:
        """Base 0.7, minus 0.1 per synthetic affix, plus 0.1 for a musical term."""
        lower = name.lower()
        score = 0.7
        score -= 0.1 * sum(1 for affix in SYNTHETIC_AFFIXES if affix in lower)
        if any(term in lower for term in MUSICAL_TERMS):
            score += 0.1
        return _clamp(score)

    def innovation_factor(self, candidate: FusionCandidate, request: FusionRequest,
                          vocabulary: FusedVocabulary) -> float:
        lower = candidate.name.lower()
        score = 0.5
        score += 0.1 * sum(1 for h in vocabulary.hybrid_terms if h.lower() in lower)
        score += 0.15 * sum(1 for b in vocabulary.conceptual_blends if b.lower() in lower)
        score += _CREATIVITY_FACTOR.get(request.creativity_level, 0.0)
        return _clamp(score)

    def quality(self, name: str, request: FusionRequest, analysis: FusionAnalysis,
                innovation: float) -> float:
        """Weighted blend of structural fit, pair compatibility and innovation.

        Structural fit is 1.0 for the exact word count, 0.2 for one word off
        and 0 beyond that. Names this engine has returned before lose 0.15.
        """
        off_by = abs(count_words(name) - request.word_count)
        structural = STRUCTURAL_FIT.get(off_by, 0.0)
        score = (QUALITY_WEIGHTS["structure"] * structural
                 + QUALITY_WEIGHTS["compatibility"] * analysis.compatibility.score
                 + QUALITY_WEIGHTS["innovation"] * innovation)
        with self._lock:
            if name.lower() in self._produced:
                score -= REPEAT_PENALTY
        return _clamp(score)

    def validate(self, result: FusionResult, request: FusionRequest) -> bool:
        """Length, word count, quality and optional authenticity checks."""
        cfg = self.config.fusion
        if len(result.name) < cfg.min_name_length:
            return False
        if abs(count_words(result.name) - request.word_count) > 1:
            return False
        if result.quality_score < cfg.min_quality:
            return False
        if request.preserve_authenticity and result.fusion_metadata["authenticity_score"] < cfg.min_authenticity:
            return False
        return True

    # Explanations

    def _explanations(self, candidate: FusionCandidate, request: FusionRequest,
                      analysis: FusionAnalysis, vocabulary: FusedVocabulary) -> Dict:
        entry = analysis.compatibility
        strength = "strong" if entry.score > 0.7 else "moderate"
        rationale = (
            f"This name blends {request.primary_genre} and {request.secondary_genre} "
            f"using a {entry.fusion_style} approach, leveraging their {strength} compatibility."
        )
        if entry.synergies:
            rationale += f" {'; '.join(entry.synergies[:2])}."

        creative = [f"Hybrid term: {h}" for h in candidate.hybrid_elements]
        creative.append(f"Built by {candidate.method.replace('_', ' ')}")
        if vocabulary.strategy == "synthesize":
            creative.append("Synthesized vocabulary")

        if analysis.market_viability > 0.7:
            appeal = "High market appeal with broad audience potential"
        elif analysis.market_viability > 0.4:
            appeal = "Moderate market appeal with niche audience strength"
        else:
            appeal = "Artistic focus with experimental audience appeal"

        return {
            "fusion_rationale": rationale,
            "genre_influences": {
                request.primary_genre: self._genre_influence(candidate.name, request.primary_genre),
                request.secondary_genre: self._genre_influence(candidate.name, request.secondary_genre),
            },
            "creative_elements": creative,
            "market_appeal": appeal,
        }

    def _genre_influence(self, name: str, genre: str) -> str:
        lower = name.lower()
        found = [k for k in GENRE_KEYWORDS.get(genre, ()) if k in lower]
        if found:
            return f"{genre.capitalize()} influence through {', '.join(found)}"
        return f"Subtle {genre} influence in overall character"

    # Generation

    def _build_result(self, candidate: FusionCandidate, request: FusionRequest,
                      analysis: FusionAnalysis, vocabulary: FusedVocabulary) -> FusionResult:
        innovation = self.innovation_factor(candidate, request, vocabulary)
        entry = analysis.compatibility
        metadata = {
            "primary_genre": request.primary_genre,
            "secondary_genre": request.secondary_genre,
            "compatibility_score": entry.score,
            "fusion_style": entry.fusion_style,
            "fusion_method": candidate.method,
            "pattern_sources": list(candidate.pattern_sources),
            "hybrid_elements": list(candidate.hybrid_elements),
            "vocabulary_strategy": vocabulary.strategy,
            "blend_ratio": list(vocabulary.blend_ratio),
            "innovation_factor": innovation,
            "authenticity_score": self.authenticity(candidate.name),
        }
        return FusionResult(
            name=candidate.name,
            fusion_metadata=metadata,
            quality_score=self.quality(candidate.name, request, analysis, innovation),
            explanations=self._explanations(candidate, request, analysis, vocabulary),
        )

    def _accept(self, results: List[FusionResult], count: int, session_guard: RepetitionGuard) -> List[FusionResult]:
        """Best-quality names that pass the session guard and each other.

        ``results`` is in pooling order and its first ``count`` entries share
        no significant word, so they always make a full batch when ranking
        by quality alone falls short.
        """
        ranked = self._ranked_batch(sorted(results, key=lambda r: r.quality_score, reverse=True), count, session_guard)
        if len(ranked) < count:
            pooled = self._ranked_batch(results[:count], count, session_guard)
            if len(pooled) > len(ranked):
                return sorted(pooled, key=lambda r: r.quality_score, reverse=True)
        return ranked

    def _ranked_batch(self, results: List[FusionResult], count: int,
                      session_guard: RepetitionGuard) -> List[FusionResult]:
        local = RepetitionGuard(self.config.repetition)
        accepted = []
        for result in results:
            if local.should_reject(result.name) or session_guard.should_reject(result.name):
                continue
            local.accept(result.name)
            accepted.append(result)
            if len(accepted) == count:
                break
        return accepted

    def fuse(
        self,
        request: FusionRequest,
        word_source: Optional[WordSource] = None,
        session: Optional[SelectionSession] = None,
    ) -> List[FusionResult]:
        """Generate up to ``request.count`` fused names.

        Args:
            request: Fusion parameters.
            word_source: Base vocabulary; fused terms are merged into a copy.
            session: Selection session providing the random source and the
                session repetition guard. Returned names are recorded in it.

        Returns:
            Results ordered by quality, best first.

        Raises:
            IncompatibleGenres: If the pair is not in the compatibility model.
            FusionExhausted: If no candidate survives validation.
        """
        session = session or SelectionSession.create(repetition_config=self.config.repetition)
        analysis = self.analyze(request)
        entry = analysis.compatibility
        rng = session.rng

        vocabulary = self.vocabulary_fusion.fuse(
            request.primary_genre,
            request.secondary_genre,
            entry,
            rng,
            mood=request.mood,
            creativity=request.creativity_level,
        )
        fused_source = vocabulary.to_word_source(word_source or default_word_source())

        # Templates are recorded in the session only once a name built from them is returned
        drawn: Dict[str, TemplateScore] = {}

        def select_template(genre: str, word_count: int):
            criteria = SelectionCriteria(word_count=word_count, name_type=request.name_type,
                                         genre=genre, creativity="balanced")
            scored = self.selection.select_scored(criteria, fused_source, session, record=False)
            if scored is None:
                return None
            drawn[scored.template.id] = scored
            return scored.template

        inputs = FusionInputs(
            primary_genre=request.primary_genre,
            secondary_genre=request.secondary_genre,
            word_count=request.word_count,
            name_type=request.name_type,
            vocabulary=vocabulary,
            word_source=fused_source,
            compatibility=entry,
            rng=rng,
            library=self.selection.library,
            select_template=select_template,
            mood=request.mood,
            cultural_sensitivity=request.cultural_sensitivity,
        )
        methods = methods_for(request.intensity, entry.fusion_style)

        cfg = self.config.fusion
        budget = max(request.count * cfg.attempt_multiplier, cfg.min_attempts)
        max_attempts = max(request.count * cfg.max_attempt_multiplier, budget)
        attempts = 0
        seen = set()
        valid: List[FusionResult] = []
        pool_guard = RepetitionGuard(self.config.repetition)
        pooled_stems: set = set()

        def stems(name: str) -> set:
            return {stem(w) for w in significant_words(name, self.config.repetition.min_significant_length)}

        def fresh(candidate: FusionCandidate) -> bool:
            # Stale candidates fall through to the next strategy
            if candidate.name.lower() in seen:
                return False
            # Until a full batch is pooled, pooled names share no significant word
            if len(valid) < request.count and stems(candidate.name) & pooled_stems:
                return False
            return not (pool_guard.should_reject(candidate.name) or session.guard.should_reject(candidate.name))

        while True:
            while attempts < budget:
                attempts += 1
                candidate = run_strategies(methods, inputs, cfg.min_name_length, accept=fresh)
                if candidate is None:
                    continue
                seen.add(candidate.name.lower())
                result = self._build_result(candidate, request, analysis, vocabulary)
                if self.validate(result, request):
                    if len(valid) < request.count:
                        pooled_stems.update(stems(result.name))
                    valid.append(result)
                    pool_guard.accept(result.name)
                else:
                    logger.debug(f"Fusion candidate '{candidate.name}' failed validation")

            accepted = self._accept(valid, request.count, session.guard)
            if len(accepted) >= request.count or budget >= max_attempts:
                break
            budget = min(budget + request.count * cfg.attempt_multiplier, max_attempts)

        self._update_metrics(request, attempts, accepted)
        if not accepted:
            raise FusionExhausted(request.primary_genre, request.secondary_genre, attempts)

        for result in accepted:
            session.guard.accept(result.name)
            for source in result.fusion_metadata["pattern_sources"]:
                scored = drawn.get(source)
                if scored is not None:
                    session.record(scored.template, scored.score, scored.context_match, scored.mode)
        logger.info(
            f"Fused {len(accepted)} names for {request.primary_genre}+{request.secondary_genre}",
            extra_data={"attempts": attempts, "valid": len(valid), "strategy": vocabulary.strategy},
        )
        return accepted

    # Analytics

    def _update_metrics(self, request: FusionRequest, attempts: int, accepted: List[FusionResult]) -> None:
        key = "+".join(sorted((request.primary_genre, request.secondary_genre)))
        with self._lock:
            metrics = self._metrics.setdefault(key, {"attempts": 0, "successes": 0, "avg_quality": 0.0})
            previous = metrics["successes"]
            metrics["attempts"] += attempts
            metrics["successes"] += len(accepted)
            if accepted:
                batch_total = sum(r.quality_score for r in accepted)
                metrics["avg_quality"] = (metrics["avg_quality"] * previous + batch_total) / metrics["successes"]
            for result in accepted:
                name = result.name.lower()
                if name not in self._produced:
                    self._produced.append(name)

    def get_analytics(self) -> Dict:
        """Per-pair attempts, successes and average quality."""
        with self._lock:
            pairs = {k: dict(v) for k, v in self._metrics.items()}
        total_attempts = sum(m["attempts"] for m in pairs.values())
        total_successes = sum(m["successes"] for m in pairs.values())
        return {
            "pairs": pairs,
            "total_attempts": total_attempts,
            "total_successes": total_successes,
            "success_rate": total_successes / total_attempts if total_attempts else 0.0,
        }
