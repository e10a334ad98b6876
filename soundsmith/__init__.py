"""soundsmith: band and song name generation.

Template selection steered by genre, mood and atmosphere, cross-genre
fusion, and session-level repetition control.
"""

from .config import Config, load_config
from .errors import (
    GenerationError,
    NoEligibleTemplates,
    IncompatibleGenres,
    FusionExhausted,
    MalformedWordSource,
)
from .models import GeneratedName, GenerationContext, NameType
from .generation import GenerationDriver, GenerationRequest, GenerationSession
from .fusion import FusionEngine, FusionRequest, FusionResult
from .selection import SelectionCriteria, SelectionEngine, SelectionSession
from .templates import TemplateLibrary
from .vocabulary import RepetitionGuard, WordSource, normalize_word_source

__version__ = "0.1.0"

__all__ = [
    # Config
    "Config",
    "load_config",
    # Errors
    "GenerationError",
    "NoEligibleTemplates",
    "IncompatibleGenres",
    "FusionExhausted",
    "MalformedWordSource",
    # Models
    "GeneratedName",
    "GenerationContext",
    "NameType",
    # Engines
    "GenerationDriver",
    "GenerationRequest",
    "GenerationSession",
    "FusionEngine",
    "FusionRequest",
    "FusionResult",
    "SelectionCriteria",
    "SelectionEngine",
    "SelectionSession",
    "TemplateLibrary",
    "RepetitionGuard",
    "WordSource",
    "normalize_word_source",
]
