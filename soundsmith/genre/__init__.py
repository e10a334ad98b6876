"""Genre compatibility model and genre vocabularies."""

from .compatibility import (
    FUSION_STYLES,
    GENRE_PROFILES,
    FUSION_RULES,
    GenreProfile,
    CompatibilityEntry,
    FusionRule,
    GenreCompatibilityModel,
    normalize_genre,
)
from .vocabulary import (
    GENRE_VOCABULARIES,
    BLEND_RULES,
    GENRE_KEYWORDS,
    GenreVocabulary,
    BlendRule,
    get_vocabulary,
    get_blend_rule,
)

__all__ = [
    # Compatibility
    "FUSION_STYLES",
    "GENRE_PROFILES",
    "FUSION_RULES",
    "GenreProfile",
    "CompatibilityEntry",
    "FusionRule",
    "GenreCompatibilityModel",
    "normalize_genre",
    # Vocabulary
    "GENRE_VOCABULARIES",
    "BLEND_RULES",
    "GENRE_KEYWORDS",
    "GenreVocabulary",
    "BlendRule",
    "get_vocabulary",
    "get_blend_rule",
]
