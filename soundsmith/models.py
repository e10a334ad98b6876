"""Data models shared across the generation components."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class NameType(Enum):
    """Kind of name being generated."""
    BAND = "band"
    SONG = "song"

    @classmethod
    def parse(cls, value: str) -> "NameType":
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unknown name type: {value!r} (expected 'band' or 'song')")


class Intensity(Enum):
    """Intensity axis used for context matching."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Creativity(Enum):
    """Creativity axis used for context matching."""
    CONSERVATIVE = "conservative"
    BALANCED = "balanced"
    EXPERIMENTAL = "experimental"


@dataclass(frozen=True)
class GenerationContext:
    """Read-only context handed to template generators.

    Attributes:
        word_count: Exact number of words the output must contain.
        name_type: Band or song.
        genre: Optional genre tag.
        mood: Optional mood name.
        theme: Optional free-text theme.
        intensity: Optional intensity level (low, medium, high).
    """
    word_count: int
    name_type: NameType = NameType.BAND
    genre: Optional[str] = None
    mood: Optional[str] = None
    theme: Optional[str] = None
    intensity: Optional[str] = None


@dataclass
class GeneratedName:
    """A generated name plus path-specific metadata.

    Metadata always includes a ``quality_score`` in [0, 1].
    """
    name: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def quality_score(self) -> float:
        return float(self.metadata.get("quality_score", 0.0))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serialisable dict."""
        return {"name": self.name, "metadata": dict(self.metadata)}
