"""Vocabulary handling: word source normalization and repetition tracking."""

from .word_source import (
    WordSource,
    WordList,
    NormalizationStats,
    normalize_word_list,
    normalize_word_source,
    default_word_source,
    DEFAULT_POOLS,
    STANDARD_CATEGORIES,
)
from .repetition_guard import RepetitionGuard, GuardStats

__all__ = [
    "WordSource",
    "WordList",
    "NormalizationStats",
    "normalize_word_list",
    "normalize_word_source",
    "default_word_source",
    "DEFAULT_POOLS",
    "STANDARD_CATEGORIES",
    "RepetitionGuard",
    "GuardStats",
]
