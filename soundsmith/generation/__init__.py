"""Generation driver and fallbacks."""

from .driver import (
    GenerationRequest,
    GenerationSession,
    GenerationDriver,
)
from .fallback import (
    FALLBACK_NAMES,
    curated_names,
    dynamic_phrase,
)

__all__ = [
    # Driver
    "GenerationRequest",
    "GenerationSession",
    "GenerationDriver",
    # Fallbacks
    "FALLBACK_NAMES",
    "curated_names",
    "dynamic_phrase",
]
