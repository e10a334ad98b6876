"""Mood profiles, atmospheric context and template mood alignment."""

from .profiles import (
    DIMENSIONS,
    NEUTRAL,
    EmotionalVector,
    MoodProfile,
    ComplexMood,
    MoodModifier,
    PRIMARY_MOODS,
    COMPLEX_MOODS,
    MOOD_MODIFIERS,
    normalize_mood_name,
    get_mood,
    is_known_mood,
    all_mood_names,
    similarity,
    blend,
    apply_modifier,
    resolve_mood,
    find_by_dimensions,
    closest_moods,
    mood_summary,
)
from .atmosphere import (
    AtmosphericContext,
    AtmosphericProfile,
    AtmosphericReading,
    AtmosphereModel,
    ATMOSPHERIC_PROFILES,
)
from .pattern_mapper import MoodAlignment, PatternMoodMapper
from .inference import infer_moods, infer_mood

__all__ = [
    # Profiles
    "DIMENSIONS",
    "NEUTRAL",
    "EmotionalVector",
    "MoodProfile",
    "ComplexMood",
    "MoodModifier",
    "PRIMARY_MOODS",
    "COMPLEX_MOODS",
    "MOOD_MODIFIERS",
    "normalize_mood_name",
    "get_mood",
    "is_known_mood",
    "all_mood_names",
    "similarity",
    "blend",
    "apply_modifier",
    "resolve_mood",
    "find_by_dimensions",
    "closest_moods",
    "mood_summary",
    # Atmosphere
    "AtmosphericContext",
    "AtmosphericProfile",
    "AtmosphericReading",
    "AtmosphereModel",
    "ATMOSPHERIC_PROFILES",
    # Alignment
    "MoodAlignment",
    "PatternMoodMapper",
    # Inference
    "infer_moods",
    "infer_mood",
]
