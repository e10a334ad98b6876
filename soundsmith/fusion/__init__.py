"""Cross-genre fusion: vocabulary blending, strategies and the fusion engine."""

from .vocabulary_fusion import (
    STRATEGIES as BLEND_STRATEGIES,
    FusedVocabulary,
    VocabularyFusion,
    choose_strategy,
)
from .strategies import (
    FUSION_PATTERNS,
    STRATEGIES,
    FusionCandidate,
    FusionInputs,
    methods_for,
    run_strategies,
)
from .engine import (
    FUSION_INTENSITIES,
    CREATIVITY_LEVELS,
    FusionAnalysis,
    FusionEngine,
    FusionRequest,
    FusionResult,
    normalize_fusion_creativity,
    normalize_fusion_intensity,
)

__all__ = [
    # Vocabulary
    "BLEND_STRATEGIES",
    "FusedVocabulary",
    "VocabularyFusion",
    "choose_strategy",
    # Strategies
    "FUSION_PATTERNS",
    "STRATEGIES",
    "FusionCandidate",
    "FusionInputs",
    "methods_for",
    "run_strategies",
    # Engine
    "FUSION_INTENSITIES",
    "CREATIVITY_LEVELS",
    "FusionAnalysis",
    "FusionEngine",
    "FusionRequest",
    "FusionResult",
    "normalize_fusion_creativity",
    "normalize_fusion_intensity",
]
