"""Template selection: context maps, scoring, sessions and the engine."""

from .context_maps import (
    GENRE_CATEGORIES,
    MOOD_CATEGORIES,
    INTENSITY_CATEGORIES,
    CREATIVITY_CATEGORIES,
    normalize_intensity,
    normalize_creativity,
)
from .scoring import (
    MODE_MOOD,
    MODE_TRADITIONAL,
    SelectionCriteria,
    TemplateScore,
    context_match,
    quality_score,
    freshness_score,
    diversity_bonus,
)
from .session import SelectionRecord, SelectionSession
from .engine import SelectionEngine

__all__ = [
    # Context maps
    "GENRE_CATEGORIES",
    "MOOD_CATEGORIES",
    "INTENSITY_CATEGORIES",
    "CREATIVITY_CATEGORIES",
    "normalize_intensity",
    "normalize_creativity",
    # Scoring
    "MODE_MOOD",
    "MODE_TRADITIONAL",
    "SelectionCriteria",
    "TemplateScore",
    "context_match",
    "quality_score",
    "freshness_score",
    "diversity_bonus",
    # Session
    "SelectionRecord",
    "SelectionSession",
    # Engine
    "SelectionEngine",
]
