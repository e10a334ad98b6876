"""Configuration management for the name generator."""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class TraditionalWeights:
    """Scoring weights when mood-driven selection is off."""
    context: float = 0.40
    quality: float = 0.25
    freshness: float = 0.20
    prior: float = 0.15


@dataclass
class MoodDrivenWeights:
    """Scoring weights when mood-driven selection is active.

    The mood term takes over part of the context weight instead of stacking
    on top of it.
    """
    context: float = 0.25
    mood: float = 0.30
    quality: float = 0.20
    freshness: float = 0.15
    prior: float = 0.10


@dataclass
class SelectionConfig:
    """Configuration for template scoring and sampling."""
    traditional: TraditionalWeights = field(default_factory=TraditionalWeights)
    mood_driven: MoodDrivenWeights = field(default_factory=MoodDrivenWeights)
    score_floor: float = 0.1  # Keeps zero-score templates reachable
    category_diversity_boost: float = 0.3
    subcategory_diversity_boost: float = 0.2
    category_usage_threshold: int = 3
    subcategory_usage_threshold: int = 2


@dataclass
class AtmosphereWeights:
    """Blend weight per atmospheric contributor."""
    time: float = 0.5
    season: float = 0.5
    weather: float = 0.5
    culture: float = 0.5


@dataclass
class MoodConfig:
    """Configuration for mood and atmosphere scoring."""
    confidence_threshold: float = 0.35  # Below this, selection ignores mood alignment
    blend_weight: float = 0.5
    atmosphere: AtmosphereWeights = field(default_factory=AtmosphereWeights)
    compatible_bonus: float = 0.1
    conflicting_penalty: float = 0.15


@dataclass
class RepetitionConfig:
    """Configuration for the repetition guard."""
    word_capacity: int = 30
    template_capacity: int = 20
    name_window: int = 10
    overlap_fraction: float = 0.3
    min_significant_length: int = 4
    decay_interval_seconds: float = 300.0
    name_memory: int = 300


@dataclass
class FusionConfig:
    """Configuration for cross-genre fusion."""
    attempt_multiplier: int = 3
    min_attempts: int = 10
    max_attempt_multiplier: int = 8
    min_name_length: int = 3
    min_quality: float = 0.3
    min_authenticity: float = 0.5
    fusion_worthy_threshold: float = 0.6


@dataclass
class GenerationConfig:
    """Configuration for the generation driver."""
    default_count: int = 4
    candidate_multiplier: int = 3
    max_rounds: int = 4
    open_word_count_range: List[int] = field(default_factory=lambda: [4, 6])
    seed: Optional[int] = None


@dataclass
class Config:
    """Main configuration container."""
    selection: SelectionConfig = field(default_factory=SelectionConfig)
    mood: MoodConfig = field(default_factory=MoodConfig)
    repetition: RepetitionConfig = field(default_factory=RepetitionConfig)
    fusion: FusionConfig = field(default_factory=FusionConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    log_level: str = "INFO"
    log_json: bool = False


def _resolve_env_vars(value: Any) -> Any:
    """Resolve environment variables in string values."""
    if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
        env_var = value[2:-1]
        resolved = os.environ.get(env_var, "")
        if not resolved:
            logger.warning(f"Environment variable {env_var} not set")
        return resolved
    elif isinstance(value, dict):
        return {k: _resolve_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_resolve_env_vars(v) for v in value]
    return value


def _parse_selection_config(data: Dict) -> SelectionConfig:
    """Parse the selection section."""
    trad = data.get("traditional", {})
    mood = data.get("mood_driven", {})
    return SelectionConfig(
        traditional=TraditionalWeights(
            context=trad.get("context", 0.40),
            quality=trad.get("quality", 0.25),
            freshness=trad.get("freshness", 0.20),
            prior=trad.get("prior", 0.15),
        ),
        mood_driven=MoodDrivenWeights(
            context=mood.get("context", 0.25),
            mood=mood.get("mood", 0.30),
            quality=mood.get("quality", 0.20),
            freshness=mood.get("freshness", 0.15),
            prior=mood.get("prior", 0.10),
        ),
        score_floor=data.get("score_floor", 0.1),
        category_diversity_boost=data.get("category_diversity_boost", 0.3),
        subcategory_diversity_boost=data.get("subcategory_diversity_boost", 0.2),
        category_usage_threshold=data.get("category_usage_threshold", 3),
        subcategory_usage_threshold=data.get("subcategory_usage_threshold", 2),
    )


def _parse_mood_config(data: Dict) -> MoodConfig:
    """Parse the mood section."""
    blend_weight = data.get("blend_weight", 0.5)
    atmosphere = data.get("atmosphere", {})
    return MoodConfig(
        confidence_threshold=data.get("confidence_threshold", 0.35),
        blend_weight=blend_weight,
        atmosphere=AtmosphereWeights(
            time=atmosphere.get("time", blend_weight),
            season=atmosphere.get("season", blend_weight),
            weather=atmosphere.get("weather", blend_weight),
            culture=atmosphere.get("culture", blend_weight),
        ),
        compatible_bonus=data.get("compatible_bonus", 0.1),
        conflicting_penalty=data.get("conflicting_penalty", 0.15),
    )


def load_config(config_path: str = "config.json") -> Config:
    """Load configuration from a JSON file.

    Args:
        config_path: Path to the configuration file.

    Returns:
        Parsed configuration object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config file is invalid.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(
            f"Configuration file not found: {config_path}\n"
            "Please copy config.json.sample to config.json and configure it."
        )

    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file: {e}")

    data = _resolve_env_vars(data)
    config = Config()

    if "selection" in data:
        config.selection = _parse_selection_config(data["selection"])

    if "mood" in data:
        config.mood = _parse_mood_config(data["mood"])

    if "repetition" in data:
        rep = data["repetition"]
        config.repetition = RepetitionConfig(
            word_capacity=rep.get("word_capacity", 30),
            template_capacity=rep.get("template_capacity", 20),
            name_window=rep.get("name_window", 10),
            overlap_fraction=rep.get("overlap_fraction", 0.3),
            min_significant_length=rep.get("min_significant_length", 4),
            decay_interval_seconds=rep.get("decay_interval_seconds", 300.0),
            name_memory=rep.get("name_memory", 300),
        )

    if "fusion" in data:
        fus = data["fusion"]
        config.fusion = FusionConfig(
            attempt_multiplier=fus.get("attempt_multiplier", 3),
            min_attempts=fus.get("min_attempts", 10),
            max_attempt_multiplier=fus.get("max_attempt_multiplier", 8),
            min_name_length=fus.get("min_name_length", 3),
            min_quality=fus.get("min_quality", 0.3),
            min_authenticity=fus.get("min_authenticity", 0.5),
            fusion_worthy_threshold=fus.get("fusion_worthy_threshold", 0.6),
        )

    if "generation" in data:
        gen = data["generation"]
        seed = gen.get("seed")
        config.generation = GenerationConfig(
            default_count=gen.get("default_count", 4),
            candidate_multiplier=gen.get("candidate_multiplier", 3),
            max_rounds=gen.get("max_rounds", 4),
            open_word_count_range=list(gen.get("open_word_count_range", [4, 6])),
            seed=int(seed) if seed not in (None, "") else None,
        )

    config.log_level = data.get("log_level", "INFO")
    config.log_json = data.get("log_json", False)

    _validate_config(config)
    return config


def _validate_config(config: Config) -> None:
    """Reject configurations the engines cannot run with."""
    low, high = config.generation.open_word_count_range
    if low < 4 or high < low:
        raise ValueError(f"Invalid open_word_count_range: {[low, high]}")
    rep = config.repetition
    if min(rep.word_capacity, rep.template_capacity, rep.name_memory) < 1:
        raise ValueError("Repetition capacities must be positive")
    if not 0.0 <= rep.overlap_fraction <= 1.0:
        raise ValueError("overlap_fraction must be between 0 and 1")
    if config.selection.score_floor <= 0:
        raise ValueError("score_floor must be positive")


def create_default_config() -> Dict:
    """Create a default configuration dictionary."""
    return {
        "selection": {
            "traditional": {
                "context": 0.40,
                "quality": 0.25,
                "freshness": 0.20,
                "prior": 0.15,
            },
            "mood_driven": {
                "context": 0.25,
                "mood": 0.30,
                "quality": 0.20,
                "freshness": 0.15,
                "prior": 0.10,
            },
            "score_floor": 0.1,
            "category_diversity_boost": 0.3,
            "subcategory_diversity_boost": 0.2,
            "category_usage_threshold": 3,
            "subcategory_usage_threshold": 2,
        },
        "mood": {
            "confidence_threshold": 0.35,
            "blend_weight": 0.5,
            "atmosphere": {
                "time": 0.5,
                "season": 0.5,
                "weather": 0.5,
                "culture": 0.5,
            },
            "compatible_bonus": 0.1,
            "conflicting_penalty": 0.15,
        },
        "repetition": {
            "word_capacity": 30,
            "template_capacity": 20,
            "name_window": 10,
            "overlap_fraction": 0.3,
            "min_significant_length": 4,
            "decay_interval_seconds": 300,
            "name_memory": 300,
        },
        "fusion": {
            "attempt_multiplier": 3,
            "min_attempts": 10,
            "max_attempt_multiplier": 8,
            "min_name_length": 3,
            "min_quality": 0.3,
            "min_authenticity": 0.5,
            "fusion_worthy_threshold": 0.6,
        },
        "generation": {
            "default_count": 4,
            "candidate_multiplier": 3,
            "max_rounds": 4,
            "open_word_count_range": [4, 6],
            "seed": None,
        },
        "log_level": "INFO",
        "log_json": False,
    }
