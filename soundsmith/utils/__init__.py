"""Utility modules shared by the generation components."""

from .logging import (
    get_logger,
    setup_logging,
    set_request_id,
    get_request_id,
    log_generation,
)
from .text import (
    FUNCTION_WORDS,
    capitalize,
    title_case,
    singularize,
    to_gerund,
    split_words,
    count_words,
    stem,
    significant_words,
    looks_like_adjective,
    syllable_count,
    pick,
    unique,
)

__all__ = [
    # Logging
    "get_logger",
    "setup_logging",
    "set_request_id",
    "get_request_id",
    "log_generation",
    # Text
    "FUNCTION_WORDS",
    "capitalize",
    "title_case",
    "singularize",
    "to_gerund",
    "split_words",
    "count_words",
    "stem",
    "significant_words",
    "looks_like_adjective",
    "syllable_count",
    "pick",
    "unique",
]
