"""Curated context-to-category lookups used by context matching."""

from typing import Dict, Optional, Tuple

GENRE_CATEGORIES: Dict[str, Tuple[str, ...]] = {
    "rock": ("traditional", "narrative", "emotional", "fusion"),
    "jazz": ("poetic", "temporal", "sensory", "philosophical"),
    "electronic": ("symbolic", "linguistic", "fusion", "conceptual"),
    "folk": ("traditional", "narrative", "temporal", "spatial"),
    "pop": ("emotional", "descriptive", "traditional"),
    "indie": ("poetic", "conceptual", "interrogative"),
    "classical": ("temporal", "philosophical", "poetic"),
    "punk": ("descriptive", "narrative", "symbolic"),
    "blues": ("emotional", "narrative", "traditional"),
    "country": ("narrative", "traditional", "emotional", "spatial"),
    "metal": ("symbolic", "descriptive", "conceptual"),
    "hip-hop": ("narrative", "linguistic", "symbolic"),
}

MOOD_CATEGORIES: Dict[str, Tuple[str, ...]] = {
    "energetic": ("descriptive", "narrative", "fusion"),
    "melancholic": ("emotional", "temporal", "poetic", "conditional"),
    "peaceful": ("spatial", "poetic", "emotional"),
    "aggressive": ("descriptive", "narrative", "symbolic"),
    "mysterious": ("conceptual", "symbolic", "interrogative"),
    "uplifting": ("emotional", "descriptive", "narrative"),
    "romantic": ("emotional", "poetic", "sensory"),
    "nostalgic": ("temporal", "narrative", "conditional"),
    "euphoric": ("descriptive", "emotional", "sensory"),
    "dark": ("conceptual", "symbolic", "philosophical"),
}

INTENSITY_CATEGORIES: Dict[str, Tuple[str, ...]] = {
    "low": ("poetic", "conceptual", "spatial"),
    "medium": ("descriptive", "traditional", "temporal"),
    "high": ("descriptive", "narrative", "symbolic"),
}

CREATIVITY_CATEGORIES: Dict[str, Tuple[str, ...]] = {
    "conservative": ("traditional", "descriptive", "narrative"),
    "balanced": ("emotional", "temporal", "poetic", "spatial"),
    "experimental": ("linguistic", "conceptual", "fusion", "symbolic", "philosophical"),
}

# Name type bonus categories
TYPE_CATEGORIES: Dict[str, Tuple[str, ...]] = {
    "band": ("traditional",),
    "song": ("narrative", "poetic", "emotional"),
}

_INTENSITY_ALIASES = {
    "subtle": "low",
    "gentle": "low",
    "moderate": "medium",
    "bold": "high",
    "experimental": "high",
}

_CREATIVITY_ALIASES = {
    "innovative": "experimental",
    "revolutionary": "experimental",
    "safe": "conservative",
}


def normalize_intensity(value: Optional[str]) -> Optional[str]:
    """Map an intensity or fusion-intensity label onto low, medium or high."""
    if not value:
        return None
    key = value.strip().lower()
    key = _INTENSITY_ALIASES.get(key, key)
    return key if key in INTENSITY_CATEGORIES else None


def normalize_creativity(value: Optional[str]) -> Optional[str]:
    """Map a creativity label onto conservative, balanced or experimental."""
    if not value:
        return None
    key = value.strip().lower()
    key = _CREATIVITY_ALIASES.get(key, key)
    return key if key in CREATIVITY_CATEGORIES else None
