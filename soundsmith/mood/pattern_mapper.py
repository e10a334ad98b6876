"""Score how well a template fits a mood.

Each template gets an inherent emotional vector derived from its category,
subcategory, slot pattern, prior weight and length. Alignment with a mood
combines per-axis closeness with four reasoning factors (structural,
vocabulary, cultural, semantic). Confidence says how decisive and
consistent those factors are; the selection engine ignores mood alignment
when confidence is low.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from ..templates.catalog import ALL_TEMPLATES, Template
from ..utils.logging import get_logger
from .atmosphere import AtmosphereModel, AtmosphericContext
from .profiles import (
    COMPLEX_MOODS,
    DIMENSIONS,
    PRIMARY_MOODS,
    EmotionalVector,
    MoodProfile,
    all_mood_names,
    normalize_mood_name,
    resolve_mood,
)

logger = get_logger(__name__)


# Target values per category; axes not listed stay neutral
CATEGORY_TENDENCIES: Dict[str, Dict[str, float]] = {
    "conceptual": {"complexity": 80, "mystery": 70, "energy": 40},
    "descriptive": {"valence": 70, "energy": 60, "complexity": 50},
    "narrative": {"complexity": 70, "energy": 55, "valence": 60},
    "fusion": {"energy": 75, "complexity": 85, "mystery": 60},
    "temporal": {"complexity": 75, "mystery": 65, "valence": 45},
    "symbolic": {"mystery": 90, "complexity": 85, "darkness": 60},
    "linguistic": {"complexity": 80, "energy": 65, "mystery": 50},
    "emotional": {"intensity": 75, "valence": 70, "energy": 60},
    "vocabulary": {"complexity": 60, "mystery": 40, "valence": 60},
    "traditional": {"energy": 65, "valence": 60, "complexity": 35},
    "interrogative": {"mystery": 80, "complexity": 70, "valence": 45},
    "spatial": {"energy": 60, "mystery": 60, "complexity": 55},
    "sensory": {"intensity": 70, "valence": 60, "energy": 55},
    "poetic": {"complexity": 75, "valence": 60, "mystery": 60},
    "philosophical": {"complexity": 90, "mystery": 70, "energy": 35},
    "conditional": {"complexity": 85, "mystery": 65, "darkness": 55},
}

# Additive nudges per subcategory
SUBCATEGORY_MODIFIERS: Dict[str, Dict[str, float]] = {
    "abstract": {"mystery": 20, "complexity": 15},
    "compound": {"energy": 15, "complexity": 10},
    "morphology": {"complexity": 20, "mystery": 10},
    "numeric": {"mystery": 15, "darkness": 10},
    "rare": {"complexity": 10, "mystery": 15},
    "quality": {"energy": 10, "valence": 15},
    "contrast": {"intensity": 20, "complexity": 15},
    "action": {"energy": 25, "intensity": 15},
    "tech_nature": {"mystery": 15, "complexity": 20},
    "perception": {"intensity": 15, "valence": 10},
    "wisdom": {"complexity": 25, "mystery": 20},
    "journey": {"energy": 15, "valence": 10},
    "question": {"mystery": 20, "complexity": 15},
    "time": {"mystery": 15, "complexity": 10},
    "landscape": {"valence": 20, "darkness": -15},
    "place_action": {"energy": 20, "intensity": 15},
    "progression": {"intensity": 10, "complexity": 10},
    "if_then": {"complexity": 15, "mystery": 10},
}

# First matching pattern fragment wins
PATTERN_SIGNATURES: Tuple[Tuple[str, Dict[str, float]], ...] = (
    ("{action", {"energy": 25, "intensity": 15}),
    ("{element1}", {"complexity": 15, "mystery": 10}),
    ("{question", {"mystery": 20, "complexity": 15}),
    ("{time_start}", {"energy": 15, "valence": 10}),
    ("{time", {"mystery": 10, "complexity": 15}),
    ("{sense}", {"intensity": 15, "valence": 10}),
    ("{prefix}", {"energy": 15, "complexity": 10}),
    ("{concept}", {"mystery": 15, "complexity": 10}),
    ("adjective}", {"energy": 10, "valence": 10}),
)

FACTOR_WEIGHTS: Dict[str, float] = {
    "structural": 0.30,
    "vocabulary": 0.25,
    "cultural": 0.20,
    "semantic": 0.25,
}

DIMENSIONAL_SHARE = 0.6
REASONING_SHARE = 0.4

COLLECTION_THRESHOLDS: Tuple[Tuple[str, float, float], ...] = (
    ("primary", 0.8, 1.2),
    ("secondary", 0.6, 1.0),
    ("emergency", 0.4, 0.8),
)
AVOID_WEIGHT = 0.3


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


@dataclass
class MoodAlignment:
    """Alignment of one template with one mood.

    Attributes:
        template_id: Scored template.
        mood: Normalized mood name.
        score: Overall alignment in [0, 1].
        confidence: How decisive the score is, in [0, 1].
        dimensional: Per-axis closeness, each in [0, 1].
        factors: Reasoning factors, each in [0, 1].
        atmospheric_adjustment: Bonus or penalty from matched atmospheric profiles.
        explanation: Human-readable summary.
    """
    template_id: str
    mood: str
    score: float
    confidence: float
    dimensional: Dict[str, float] = field(default_factory=dict)
    factors: Dict[str, float] = field(default_factory=dict)
    atmospheric_adjustment: float = 0.0
    explanation: str = ""

    @property
    def level(self) -> str:
        if self.score >= 0.8:
            return "excellent"
        if self.score >= 0.6:
            return "good"
        if self.score >= 0.4:
            return "moderate"
        return "poor"

    def to_dict(self) -> Dict:
        return {
            "template_id": self.template_id,
            "mood": self.mood,
            "score": round(self.score, 4),
            "confidence": round(self.confidence, 4),
            "level": self.level,
            "dimensional": {k: round(v, 4) for k, v in self.dimensional.items()},
            "factors": {k: round(v, 4) for k, v in self.factors.items()},
            "atmospheric_adjustment": self.atmospheric_adjustment,
            "explanation": self.explanation,
        }


class PatternMoodMapper:
    """Map templates to moods.

    Template vectors are cached per template id. Scores for an atmosphere
    are not cached since the context varies per request.
    """

    def __init__(self, atmosphere_model: Optional[AtmosphereModel] = None):
        self.atmosphere_model = atmosphere_model or AtmosphereModel()
        self._vector_cache: Dict[str, EmotionalVector] = {}

    def template_vector(self, template: Template) -> EmotionalVector:
        """Inherent emotional vector of a template."""
        cached = self._vector_cache.get(template.id)
        if cached is not None:
            return cached

        values = {d: 50.0 for d in DIMENSIONS}
        values.update(CATEGORY_TENDENCIES.get(template.category, {}))

        for dim, delta in SUBCATEGORY_MODIFIERS.get(template.subcategory, {}).items():
            values[dim] += delta

        for fragment, deltas in PATTERN_SIGNATURES:
            if fragment in template.pattern:
                for dim, delta in deltas.items():
                    values[dim] += delta
                break

        weight_influence = (template.weight - 0.5) * 20
        values["intensity"] += weight_influence
        values["complexity"] += weight_influence * 0.5
        values["complexity"] += (template.max_word_count - 1) * 10

        vector = EmotionalVector.from_dict(values)
        self._vector_cache[template.id] = vector
        return vector

    def _reference_profile(self, mood: str) -> Optional[MoodProfile]:
        if mood in PRIMARY_MOODS:
            return PRIMARY_MOODS[mood]
        if mood in COMPLEX_MOODS:
            first = COMPLEX_MOODS[mood].components[0][0]
            return PRIMARY_MOODS[first]
        return None

    def score(
        self,
        template: Template,
        mood: str,
        atmosphere: Optional[AtmosphericContext] = None,
        genre: Optional[str] = None,
        modifiers: Iterable[str] = (),
    ) -> MoodAlignment:
        """Alignment of ``template`` with ``mood``.

        Args:
            template: Template to score.
            mood: Primary or complex mood name.
            atmosphere: Optional context blended into the mood vector.
            genre: Requested genre; used when the template is genre-agnostic.
            modifiers: Mood modifier names applied before blending.

        Returns:
            MoodAlignment. Unknown moods score 0.5 with zero confidence.
        """
        key = normalize_mood_name(mood) or ""
        mood_vector = resolve_mood(key, modifiers)
        profile = self._reference_profile(key)
        if mood_vector is None or profile is None:
            return MoodAlignment(
                template_id=template.id,
                mood=key,
                score=0.5,
                confidence=0.0,
                explanation=f"Unknown mood '{mood}'.",
            )

        mood_vector = self.atmosphere_model.apply(mood_vector, atmosphere)
        template_vec = self.template_vector(template).to_array()
        diffs = np.abs(template_vec - mood_vector.to_array())
        dimensional = {d: float(1.0 - diff / 100.0) for d, diff in zip(DIMENSIONS, diffs)}
        dimensional_score = float(np.mean(list(dimensional.values())))

        factors = {
            "structural": self._structural_factor(template, mood_vector),
            "vocabulary": self._vocabulary_factor(template, profile),
            "cultural": self._cultural_factor(template, profile, genre, atmosphere),
            "semantic": self._semantic_factor(template, profile),
        }
        reasoning = sum(factors[name] * weight for name, weight in FACTOR_WEIGHTS.items())

        adjustment = self.atmosphere_model.mood_adjustment(key, atmosphere)
        overall = _clamp(DIMENSIONAL_SHARE * dimensional_score + REASONING_SHARE * reasoning + adjustment)

        consistency = 1.0 - float(np.std(list(factors.values())))
        confidence = _clamp((abs(overall - 0.5) * 2 + consistency) / 2)

        alignment = MoodAlignment(
            template_id=template.id,
            mood=key,
            score=overall,
            confidence=confidence,
            dimensional=dimensional,
            factors=factors,
            atmospheric_adjustment=adjustment,
        )
        alignment.explanation = self._explain(alignment)
        return alignment

    def _structural_factor(self, template: Template, mood_vector: EmotionalVector) -> float:
        expected_complexity = template.max_word_count * 25
        value = 0.5 + (1.0 - abs(mood_vector.complexity - expected_complexity) / 100.0) * 0.3
        if mood_vector.mystery > 70 and "{concept}" in template.pattern:
            value += 0.2
        if mood_vector.energy > 70 and "{action" in template.pattern:
            value += 0.2
        return _clamp(value)

    def _vocabulary_factor(self, template: Template, profile: MoodProfile) -> float:
        value = 0.5
        if template.id in profile.pattern_preferences:
            value += 0.3
        preferred_categories = {
            t.category for t in _catalog_lookup(profile.pattern_preferences)
        }
        if template.category in preferred_categories:
            value += 0.2
        if profile.syllable_preference:
            distance = abs(template.max_word_count - profile.syllable_preference[0])
            value += max(0.0, 1.0 - distance / 3.0) * 0.2
        return _clamp(value)

    def _cultural_factor(
        self,
        template: Template,
        profile: MoodProfile,
        genre: Optional[str],
        atmosphere: Optional[AtmosphericContext],
    ) -> float:
        genres = list(template.applicable_genres or ())
        if not genres and genre:
            genres = [genre.lower()]
        best = max((profile.genre_affinity.get(g, 0.0) for g in genres), default=0.0)
        value = 0.5 + best * 0.4
        if atmosphere is not None and atmosphere.season:
            value += 0.1
        return _clamp(value)

    def _semantic_factor(self, template: Template, profile: MoodProfile) -> float:
        description = f"{template.description} {template.pattern}".lower()
        value = 0.5
        if profile.keywords:
            matches = sum(1 for k in profile.keywords if k in description)
            value += matches / len(profile.keywords) * 0.3
        for opposite in profile.opposites:
            if opposite in description:
                value -= 0.1
        return _clamp(value)

    def _explain(self, alignment: MoodAlignment) -> str:
        parts = [f"{alignment.level.capitalize()} fit for {alignment.mood} mood."]
        if alignment.dimensional:
            strongest = max(alignment.dimensional, key=alignment.dimensional.get)
            parts.append(f"Strongest alignment: {strongest}.")
            weakest = min(alignment.dimensional, key=alignment.dimensional.get)
            if alignment.dimensional[weakest] < 0.5:
                parts.append(f"Potential concern: {weakest}.")
        if alignment.atmospheric_adjustment > 0:
            parts.append("Atmosphere favours this mood.")
        elif alignment.atmospheric_adjustment < 0:
            parts.append("Atmosphere conflicts with this mood.")
        return " ".join(parts)

    def collection(
        self,
        mood: str,
        templates: Iterable[Template],
        atmosphere: Optional[AtmosphericContext] = None,
    ) -> Dict[str, List[Dict]]:
        """Bucket templates into primary, secondary, emergency and avoid for a mood.

        Each entry carries the template id, its score and a weight
        adjustment callers can multiply into a prior.
        """
        buckets: Dict[str, List[Dict]] = {"primary": [], "secondary": [], "emergency": [], "avoid": []}
        for template in templates:
            alignment = self.score(template, mood, atmosphere)
            bucket, adjustment = "avoid", AVOID_WEIGHT
            for name, threshold, weight in COLLECTION_THRESHOLDS:
                if alignment.score >= threshold:
                    bucket, adjustment = name, weight
                    break
            buckets[bucket].append({
                "template_id": template.id,
                "score": alignment.score,
                "weight_adjustment": adjustment,
            })
        for entries in buckets.values():
            entries.sort(key=lambda e: e["score"], reverse=True)
        return buckets

    def versatile_templates(self, templates: Iterable[Template], limit: int = 5) -> List[Tuple[str, float]]:
        """Templates that score well across many moods.

        Versatility is the mean score over moods scoring at least 0.5,
        scaled by the share of moods that do.
        """
        moods = all_mood_names()
        ranked = []
        for template in templates:
            scores = [self.score(template, mood).score for mood in moods]
            valid = [s for s in scores if s >= 0.5]
            if not valid:
                continue
            versatility = float(np.mean(valid)) * len(valid) / len(moods)
            ranked.append((template.id, versatility))
        ranked.sort(key=lambda item: item[1], reverse=True)
        return ranked[:limit]


def _catalog_lookup(template_ids: Iterable[str]) -> List[Template]:
    wanted = set(template_ids)
    return [t for t in ALL_TEMPLATES if t.id in wanted]
