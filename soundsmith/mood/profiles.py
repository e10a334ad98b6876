"""Mood profiles and emotional vectors.

A mood maps to a six-axis emotional vector (energy, valence, complexity,
intensity, darkness, mystery), each axis 0-100. Complex moods are weighted
blends of primary moods; mood modifiers nudge a vector for the moods they
apply to.
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from ..utils.logging import get_logger

logger = get_logger(__name__)

DIMENSIONS: Tuple[str, ...] = ("energy", "valence", "complexity", "intensity", "darkness", "mystery")

# Largest possible L1 distance between two vectors
MAX_DISTANCE = 100.0 * len(DIMENSIONS)


@dataclass(frozen=True)
class EmotionalVector:
    """Six-axis emotional vector, each axis clamped to 0-100."""
    energy: float = 50.0
    valence: float = 50.0
    complexity: float = 50.0
    intensity: float = 50.0
    darkness: float = 50.0
    mystery: float = 50.0

    def to_array(self) -> np.ndarray:
        return np.array([getattr(self, d) for d in DIMENSIONS], dtype=float)

    @classmethod
    def from_array(cls, values: Sequence[float]) -> "EmotionalVector":
        clipped = np.clip(np.asarray(values, dtype=float), 0.0, 100.0)
        return cls(**{d: float(v) for d, v in zip(DIMENSIONS, clipped)})

    @classmethod
    def from_dict(cls, values: Mapping[str, float], base: float = 50.0) -> "EmotionalVector":
        return cls.from_array([values.get(d, base) for d in DIMENSIONS])

    def to_dict(self) -> Dict[str, float]:
        return {d: round(getattr(self, d), 2) for d in DIMENSIONS}

    def shifted(self, delta: Mapping[str, float], scale: float = 1.0) -> "EmotionalVector":
        """Add ``delta * scale`` per axis and clamp."""
        arr = self.to_array()
        for i, dim in enumerate(DIMENSIONS):
            arr[i] += delta.get(dim, 0.0) * scale
        return EmotionalVector.from_array(arr)

    def blended(self, other: "EmotionalVector", weight: float = 0.5) -> "EmotionalVector":
        """Weighted average: ``self * (1 - weight) + other * weight``."""
        return EmotionalVector.from_array(self.to_array() * (1.0 - weight) + other.to_array() * weight)

    def dominant_traits(self, limit: int = 2) -> List[str]:
        """Axes furthest above the neutral midpoint."""
        arr = self.to_array()
        order = np.argsort(-arr, kind="stable")
        return [DIMENSIONS[i] for i in order[:limit] if arr[i] > 50.0]


NEUTRAL = EmotionalVector()


@dataclass(frozen=True)
class MoodProfile:
    """A named primary mood."""
    name: str
    vector: EmotionalVector
    keywords: Tuple[str, ...] = ()
    opposites: Tuple[str, ...] = ()
    genre_affinity: Dict[str, float] = field(default_factory=dict, compare=False, hash=False)
    pattern_preferences: Tuple[str, ...] = ()
    syllable_preference: Tuple[int, ...] = (2, 3)

    def affinity_for(self, genre: Optional[str]) -> float:
        if not genre:
            return 0.5
        return self.genre_affinity.get(genre.lower(), 0.5)


@dataclass(frozen=True)
class ComplexMood:
    """A mood defined as a weighted blend of primary moods."""
    name: str
    components: Tuple[Tuple[str, float], ...]
    description: str = ""


@dataclass(frozen=True)
class MoodModifier:
    """An additive nudge applied only to the listed moods."""
    name: str
    effect: Dict[str, float] = field(compare=False, hash=False)
    applicable_moods: FrozenSet[str] = frozenset()
    strength: float = 0.5


def _mood(name, vector, keywords, opposites, affinity, prefs, syllables=(2, 3)) -> MoodProfile:
    return MoodProfile(
        name=name,
        vector=EmotionalVector(*vector),
        keywords=tuple(keywords),
        opposites=tuple(opposites),
        genre_affinity=dict(affinity),
        pattern_preferences=tuple(prefs),
        syllable_preference=tuple(syllables),
    )


PRIMARY_MOODS: Dict[str, MoodProfile] = {m.name: m for m in (
    _mood("euphoric", (95, 90, 60, 85, 10, 30),
          ["ecstatic", "blissful", "elated", "rapturous", "transcendent"],
          ["melancholic", "depressed", "somber"],
          {"electronic": 0.9, "pop": 0.8, "rock": 0.7, "classical": 0.6},
          ["dynamic_adjective_noun", "action_object"]),
    _mood("aggressive", (90, 30, 70, 95, 70, 40),
          ["fierce", "violent", "forceful", "confrontational", "intense"],
          ["peaceful", "gentle", "serene"],
          {"metal": 1.0, "punk": 0.95, "rock": 0.8, "hip-hop": 0.75},
          ["action_object", "dynamic_adjective_noun", "contrasting_elements"],
          (1, 2)),
    _mood("energetic", (85, 75, 50, 70, 20, 25),
          ["vibrant", "dynamic", "lively", "spirited", "kinetic"],
          ["lethargic", "sluggish", "weary"],
          {"electronic": 0.9, "pop": 0.85, "rock": 0.8, "hip-hop": 0.8},
          ["dynamic_adjective_noun", "action_object", "techno_organic"]),
    _mood("melancholic", (25, 20, 80, 60, 75, 70),
          ["sad", "wistful", "sorrowful", "pensive", "mournful"],
          ["euphoric", "joyful", "cheerful"],
          {"classical": 0.9, "folk": 0.85, "indie": 0.8, "blues": 0.9},
          ["emotional_journey", "temporal_concept", "emotional_landscape"],
          (2, 3, 4)),
    _mood("peaceful", (30, 80, 40, 25, 15, 30),
          ["serene", "tranquil", "calm", "harmonious", "gentle"],
          ["aggressive", "chaotic", "turbulent"],
          {"classical": 0.8, "folk": 0.7, "jazz": 0.6, "electronic": 0.55},
          ["emotional_landscape", "poetic_sequence"]),
    _mood("mysterious", (45, 50, 90, 65, 80, 95),
          ["enigmatic", "cryptic", "secretive", "occult", "hidden"],
          ["obvious", "plain", "transparent"],
          {"electronic": 0.8, "indie": 0.75, "jazz": 0.7, "metal": 0.7},
          ["abstract_concept", "numeric_mystique", "question_format"],
          (2, 3, 4)),
    _mood("romantic", (55, 85, 70, 60, 25, 50),
          ["passionate", "tender", "intimate", "loving", "affectionate"],
          ["cold", "detached", "hostile"],
          {"classical": 0.9, "jazz": 0.8, "folk": 0.75, "pop": 0.7},
          ["emotional_journey", "poetic_sequence"]),
    _mood("nostalgic", (40, 60, 75, 55, 45, 60),
          ["reminiscent", "wistful", "sentimental", "retrospective", "yearning"],
          ["futuristic", "progressive", "modern"],
          {"folk": 0.9, "country": 0.85, "indie": 0.8, "blues": 0.7},
          ["temporal_concept", "temporal_journey"],
          (2, 3, 4)),
    _mood("uplifting", (75, 90, 55, 70, 10, 25),
          ["inspiring", "hopeful", "encouraging", "elevating", "empowering"],
          ["depressing", "discouraging", "bleak"],
          {"pop": 0.9, "rock": 0.8, "electronic": 0.75, "folk": 0.6},
          ["emotional_journey", "narrative_sequence"]),
    _mood("dark", (60, 25, 80, 75, 95, 80),
          ["brooding", "ominous", "sinister", "foreboding", "grim"],
          ["bright", "cheerful", "optimistic"],
          {"metal": 0.95, "electronic": 0.7, "indie": 0.6, "blues": 0.6},
          ["contrasting_elements", "abstract_concept"],
          (1, 2)),
)}

COMPLEX_MOODS: Dict[str, ComplexMood] = {m.name: m for m in (
    ComplexMood("bittersweet", (("nostalgic", 0.5), ("melancholic", 0.3), ("uplifting", 0.2)),
                "Sweet memories tinged with sadness"),
    ComplexMood("triumphant_melancholy", (("uplifting", 0.4), ("melancholic", 0.35), ("nostalgic", 0.25)),
                "Victory carrying the weight of loss"),
    ComplexMood("gentle_power", (("peaceful", 0.5), ("uplifting", 0.3), ("mysterious", 0.2)),
                "Quiet strength"),
    ComplexMood("dark_euphoria", (("euphoric", 0.5), ("dark", 0.3), ("mysterious", 0.2)),
                "Ecstasy with an edge"),
)}

MOOD_MODIFIERS: Dict[str, MoodModifier] = {m.name: m for m in (
    MoodModifier("vintage_filter", {"complexity": 10, "darkness": 5, "mystery": 15},
                 frozenset({"nostalgic", "romantic", "melancholic"}), 0.3),
    MoodModifier("urban_intensity", {"energy": 15, "intensity": 20, "darkness": 10},
                 frozenset({"aggressive", "energetic", "dark"}), 0.4),
    MoodModifier("seasonal_autumn", {"energy": -10, "valence": -5, "complexity": 10, "darkness": 15},
                 frozenset({"nostalgic", "melancholic", "peaceful"}), 0.25),
    MoodModifier("midnight_amplifier", {"darkness": 20, "mystery": 25, "intensity": 10},
                 frozenset({"mysterious", "dark", "romantic"}), 0.5),
)}


def normalize_mood_name(name: Optional[str]) -> Optional[str]:
    if not name:
        return None
    return name.strip().lower().replace(" ", "_").replace("-", "_")


def get_mood(name: Optional[str]) -> Optional[MoodProfile]:
    """Primary mood profile by name, or None."""
    return PRIMARY_MOODS.get(normalize_mood_name(name) or "")


def is_known_mood(name: Optional[str]) -> bool:
    key = normalize_mood_name(name)
    return bool(key) and (key in PRIMARY_MOODS or key in COMPLEX_MOODS)


def all_mood_names() -> List[str]:
    return list(PRIMARY_MOODS) + list(COMPLEX_MOODS)


def similarity(a: EmotionalVector, b: EmotionalVector) -> float:
    """1 minus the normalized L1 distance; 1.0 for identical vectors."""
    distance = float(np.abs(a.to_array() - b.to_array()).sum())
    return 1.0 - distance / MAX_DISTANCE


def blend(vectors: Sequence[EmotionalVector], weights: Optional[Sequence[float]] = None) -> EmotionalVector:
    """Weighted average of vectors; weights are normalized to sum to 1.

    Raises:
        ValueError: If no vectors are given or weights do not match.
    """
    if not vectors:
        raise ValueError("blend() needs at least one vector")
    if weights is None:
        weights = [1.0] * len(vectors)
    if len(weights) != len(vectors):
        raise ValueError("blend() needs one weight per vector")
    w = np.asarray(weights, dtype=float)
    if w.sum() <= 0:
        raise ValueError("blend() weights must sum to a positive value")
    stacked = np.vstack([v.to_array() for v in vectors])
    return EmotionalVector.from_array(np.average(stacked, axis=0, weights=w))


def apply_modifier(vector: EmotionalVector, mood: str, modifier: MoodModifier) -> EmotionalVector:
    """Apply a modifier if it is applicable to ``mood``; otherwise return ``vector``."""
    if normalize_mood_name(mood) not in modifier.applicable_moods:
        return vector
    return vector.shifted(modifier.effect, modifier.strength)


def resolve_mood(name: Optional[str], modifiers: Iterable[str] = ()) -> Optional[EmotionalVector]:
    """Resolve a primary or complex mood name to its vector.

    Args:
        name: Mood name.
        modifiers: Names of mood modifiers to apply; unknown names are ignored.

    Returns:
        The resolved vector, or None for an unknown mood.
    """
    key = normalize_mood_name(name)
    if not key:
        return None

    if key in PRIMARY_MOODS:
        vector = PRIMARY_MOODS[key].vector
        base_moods = [key]
    elif key in COMPLEX_MOODS:
        complex_mood = COMPLEX_MOODS[key]
        parts = [(PRIMARY_MOODS[m].vector, ratio) for m, ratio in complex_mood.components]
        vector = blend([p[0] for p in parts], [p[1] for p in parts])
        base_moods = [m for m, _ in complex_mood.components]
    else:
        return None

    for modifier_name in modifiers:
        modifier = MOOD_MODIFIERS.get(modifier_name)
        if modifier is None:
            logger.debug(f"Ignoring unknown mood modifier '{modifier_name}'")
            continue
        # A complex mood takes a modifier if any component accepts it
        target = next((m for m in base_moods if m in modifier.applicable_moods), None)
        if target:
            vector = apply_modifier(vector, target, modifier)
    return vector


def find_by_dimensions(target: Mapping[str, float], tolerance: float = 15.0) -> List[str]:
    """Primary moods whose every specified axis is within ``tolerance`` of ``target``."""
    matches = []
    for name, profile in PRIMARY_MOODS.items():
        if all(abs(getattr(profile.vector, dim) - value) <= tolerance
               for dim, value in target.items() if dim in DIMENSIONS):
            matches.append(name)
    return matches


def closest_moods(vector: EmotionalVector, limit: int = 3) -> List[Tuple[str, float]]:
    """Primary moods ranked by similarity to ``vector``."""
    ranked = sorted(
        ((name, similarity(vector, profile.vector)) for name, profile in PRIMARY_MOODS.items()),
        key=lambda item: item[1],
        reverse=True,
    )
    return ranked[:limit]


def mood_summary(name: str) -> Optional[Dict]:
    """Describe a mood for display."""
    key = normalize_mood_name(name)
    if key in PRIMARY_MOODS:
        profile = PRIMARY_MOODS[key]
        return {
            "name": profile.name,
            "kind": "primary",
            "vector": profile.vector.to_dict(),
            "keywords": list(profile.keywords),
            "opposites": list(profile.opposites),
            "genres": sorted(profile.genre_affinity, key=profile.genre_affinity.get, reverse=True),
        }
    if key in COMPLEX_MOODS:
        mood = COMPLEX_MOODS[key]
        return {
            "name": mood.name,
            "kind": "complex",
            "vector": resolve_mood(mood.name).to_dict(),
            "components": {m: r for m, r in mood.components},
            "description": mood.description,
        }
    return None
