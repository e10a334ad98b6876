"""Template scoring factors.

Each factor is a pure function of a template, the selection criteria and,
for freshness, the selection session. Every factor lies in [0, 1].
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from ..config import MoodDrivenWeights, SelectionConfig, TraditionalWeights
from ..models import NameType
from ..mood.atmosphere import AtmosphericContext
from ..mood.pattern_mapper import MoodAlignment
from ..templates.catalog import Template
from ..vocabulary.word_source import ADJECTIVES, VERBS, WordSource
from .context_maps import (
    CREATIVITY_CATEGORIES,
    GENRE_CATEGORIES,
    INTENSITY_CATEGORIES,
    MOOD_CATEGORIES,
    TYPE_CATEGORIES,
    normalize_creativity,
    normalize_intensity,
)

MODE_TRADITIONAL = "traditional"
MODE_MOOD = "mood"


@dataclass
class SelectionCriteria:
    """What the caller wants from a template draw.

    Attributes:
        word_count: Exact output length.
        name_type: Band or song.
        genre: Optional genre tag.
        mood: Optional mood name.
        intensity: low, medium or high.
        creativity: conservative, balanced or experimental.
        avoid_categories: Categories never to draw.
        prefer_categories: Categories to restrict to when any are eligible.
        atmosphere: Optional atmospheric context for mood scoring.
        mood_driven: Score against an inferred mood when no mood is given.
        theme: Free-text theme, used for mood inference.
    """
    word_count: int
    name_type: NameType = NameType.BAND
    genre: Optional[str] = None
    mood: Optional[str] = None
    intensity: Optional[str] = None
    creativity: Optional[str] = None
    avoid_categories: Tuple[str, ...] = ()
    prefer_categories: Tuple[str, ...] = ()
    atmosphere: Optional[AtmosphericContext] = None
    mood_driven: bool = False
    theme: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.name_type, str):
            self.name_type = NameType.parse(self.name_type)
        self.genre = self.genre.strip().lower() if self.genre else None
        self.mood = self.mood.strip().lower() if self.mood else None
        self.intensity = normalize_intensity(self.intensity)
        self.creativity = normalize_creativity(self.creativity)
        self.avoid_categories = tuple(c.lower() for c in self.avoid_categories)
        self.prefer_categories = tuple(c.lower() for c in self.prefer_categories)


@dataclass
class TemplateScore:
    """Score of one template for one draw, with its factor breakdown."""
    template: Template
    score: float
    context_match: float
    quality: float
    freshness: float
    prior: float
    mode: str = MODE_TRADITIONAL
    mood_alignment: Optional[MoodAlignment] = None
    reasons: List[str] = field(default_factory=list)

    @property
    def template_id(self) -> str:
        return self.template.id

    def to_dict(self) -> Dict:
        data = {
            "template_id": self.template.id,
            "category": self.template.category,
            "score": round(self.score, 4),
            "mode": self.mode,
            "factors": {
                "context_match": round(self.context_match, 4),
                "quality": round(self.quality, 4),
                "freshness": round(self.freshness, 4),
                "prior": round(self.prior, 4),
            },
            "reasons": list(self.reasons),
        }
        if self.mood_alignment is not None:
            data["factors"]["mood"] = round(self.mood_alignment.score, 4)
            data["mood_confidence"] = round(self.mood_alignment.confidence, 4)
        return data


def context_match(template: Template, criteria: SelectionCriteria) -> float:
    """Category alignment with genre, mood, intensity, creativity and name type."""
    score = 0.5
    category = template.category

    if criteria.genre and category in GENRE_CATEGORIES.get(criteria.genre, ()):
        score += 0.3
    if criteria.mood and category in MOOD_CATEGORIES.get(criteria.mood, ()):
        score += 0.2
    if criteria.intensity and category in INTENSITY_CATEGORIES.get(criteria.intensity, ()):
        score += 0.15
    if criteria.creativity and category in CREATIVITY_CATEGORIES.get(criteria.creativity, ()):
        score += 0.15
    if category in TYPE_CATEGORIES.get(criteria.name_type.value, ()):
        score += 0.1

    return min(score, 1.0)


def quality_score(template: Template, word_source: WordSource) -> float:
    """Intrinsic quality: documentation, vocabulary depth and prior weight band."""
    score = 0.5
    if len(template.examples) >= 3:
        score += 0.2
    if template.category == "descriptive" and len(word_source.pool(ADJECTIVES)) > 20:
        score += 0.15
    if template.category == "narrative" and len(word_source.pool(VERBS)) > 15:
        score += 0.15
    if 0.1 <= template.weight <= 0.3:
        score += 0.1
    return min(score, 1.0)


def freshness_score(template: Template, guard, config: SelectionConfig) -> float:
    """Penalize recent templates and overused categories."""
    score = 0.5
    if guard.is_recent_template(template.id):
        score -= 0.3
    if guard.category_count(template.category) > config.category_usage_threshold:
        score -= 0.2
    if guard.subcategory_count(template.subcategory) > config.subcategory_usage_threshold:
        score -= 0.15
    return max(score, 0.0)


def diversity_bonus(
    template: Template,
    used_categories: Iterable[str],
    used_subcategories: Iterable[str],
    config: SelectionConfig,
) -> float:
    """Boost for categories and subcategories not yet drawn in a batch."""
    bonus = 0.0
    if template.category not in set(used_categories):
        bonus += config.category_diversity_boost
    if template.subcategory not in set(used_subcategories):
        bonus += config.subcategory_diversity_boost
    return bonus


def combine_traditional(context: float, quality: float, freshness: float, prior: float,
                        weights: TraditionalWeights) -> float:
    return (
        context * weights.context
        + quality * weights.quality
        + freshness * weights.freshness
        + prior * weights.prior
    )


def combine_mood(context: float, mood: float, quality: float, freshness: float, prior: float,
                 weights: MoodDrivenWeights) -> float:
    return (
        context * weights.context
        + mood * weights.mood
        + quality * weights.quality
        + freshness * weights.freshness
        + prior * weights.prior
    )


def score_reasons(score: TemplateScore) -> List[str]:
    """Human-readable reasons for a score."""
    reasons = []
    if score.context_match > 0.7:
        reasons.append("Excellent context match")
    elif score.context_match > 0.5:
        reasons.append("Good context match")
    if score.quality > 0.7:
        reasons.append("High quality pattern")
    if score.freshness > 0.4:
        reasons.append("Fresh selection")
    if score.template.weight > 0.2:
        reasons.append("Reliable pattern")
    if len(score.template.examples) > 3:
        reasons.append("Well-documented pattern")

    alignment = score.mood_alignment
    if score.mode == MODE_MOOD and alignment is not None:
        if alignment.score > 0.8:
            reasons.append("Excellent mood alignment")
        elif alignment.score > 0.6:
            reasons.append("Good mood alignment")
        elif alignment.score < 0.4:
            reasons.append("Poor mood alignment")
        if alignment.confidence > 0.8:
            reasons.append("High emotional confidence")
    return reasons
