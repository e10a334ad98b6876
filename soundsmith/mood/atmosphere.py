"""Atmospheric context: time of day, season, weather and culture.

Each contributor independently nudges an emotional vector with the blend
``base * (1 - w) + contributor * w``, where ``w`` comes from
``MoodConfig.atmosphere`` (default 0.5). Time of day only touches energy and
mystery. A small library of named atmospheric profiles supplies compatible
and conflicting moods used as a scoring bonus or penalty.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..config import MoodConfig
from ..utils.logging import get_logger
from .profiles import NEUTRAL, EmotionalVector, normalize_mood_name

logger = get_logger(__name__)


@dataclass(frozen=True)
class TimeOfDay:
    name: str
    energy: float
    mystery: float
    primary_moods: Tuple[str, ...]


@dataclass(frozen=True)
class SeasonPhase:
    moods: Tuple[str, ...]
    intensity: float
    characteristics: Tuple[str, ...]


@dataclass(frozen=True)
class WeatherProfile:
    name: str
    vector: EmotionalVector
    moods: Tuple[str, ...]


@dataclass(frozen=True)
class CulturalProfile:
    name: str
    vector: EmotionalVector
    expressiveness: float
    preferred_moods: Tuple[str, ...]
    communication_style: str


@dataclass(frozen=True)
class AtmosphericProfile:
    """A named atmosphere with moods it supports and moods it clashes with."""
    id: str
    name: str
    category: str
    resonance: EmotionalVector
    compatible_moods: Tuple[str, ...]
    conflicting_moods: Tuple[str, ...]
    preferred_tones: Tuple[str, ...] = ()
    semantic_fields: Tuple[str, ...] = ()
    enhancement_factors: Tuple[str, ...] = ()


TIMES_OF_DAY: Dict[str, TimeOfDay] = {t.name: t for t in (
    TimeOfDay("dawn", 40, 60, ("peaceful", "hopeful", "awakening")),
    TimeOfDay("morning", 75, 20, ("energetic", "optimistic", "active")),
    TimeOfDay("afternoon", 65, 25, ("balanced", "steady", "focused")),
    TimeOfDay("evening", 55, 45, ("relaxing", "reflective", "social")),
    TimeOfDay("night", 35, 80, ("mysterious", "intimate", "contemplative")),
    TimeOfDay("midnight", 25, 95, ("dark", "profound", "solitary")),
)}

SEASONS: Dict[str, Dict[str, SeasonPhase]] = {
    "spring": {
        "early": SeasonPhase(("hopeful", "gentle", "awakening"), 40, ("tender", "emerging", "fragile")),
        "peak": SeasonPhase(("uplifting", "energetic", "romantic"), 70, ("vibrant", "blooming", "passionate")),
        "late": SeasonPhase(("abundant", "warm", "fulfilled"), 65, ("rich", "mature", "satisfied")),
    },
    "summer": {
        "early": SeasonPhase(("energetic", "bright", "celebratory"), 75, ("vibrant", "active", "social")),
        "peak": SeasonPhase(("euphoric", "intense", "passionate"), 90, ("blazing", "overwhelming", "peak")),
        "late": SeasonPhase(("nostalgic", "bittersweet", "reflective"), 60, ("golden", "fading", "precious")),
    },
    "autumn": {
        "early": SeasonPhase(("nostalgic", "contemplative", "bittersweet"), 55, ("changing", "golden", "reflective")),
        "peak": SeasonPhase(("melancholic", "deep", "transformative"), 70, ("rich", "complex", "profound")),
        "late": SeasonPhase(("stark", "accepting", "preparing"), 45, ("bare", "honest", "transitional")),
    },
    "winter": {
        "early": SeasonPhase(("introspective", "quiet", "crystalline"), 50, ("sharp", "clear", "inward")),
        "peak": SeasonPhase(("deep", "meditative", "stark"), 40, ("profound", "still", "essential")),
        "late": SeasonPhase(("anticipatory", "restless", "emerging"), 45, ("stirring", "subtle", "promising")),
    },
}

_PHASE_WORDS = {
    "awakening": "early",
    "beginning": "early",
    "early": "early",
    "peak": "peak",
    "height": "peak",
    "reflection": "late",
    "introspection": "late",
    "end": "late",
    "late": "late",
}

# (energy, valence, mystery) per seasonal characteristic
_CHARACTERISTIC_MAP: Dict[str, Tuple[float, float, float]] = {
    "tender": (30, 70, 40), "emerging": (40, 75, 60), "fragile": (25, 60, 70),
    "vibrant": (80, 85, 30), "blooming": (70, 90, 25), "passionate": (85, 80, 35),
    "rich": (60, 75, 45), "mature": (55, 70, 40), "satisfied": (50, 80, 30),
    "changing": (55, 50, 70), "golden": (60, 80, 50), "reflective": (40, 55, 75),
    "complex": (50, 45, 85), "profound": (45, 50, 90), "bare": (35, 40, 60),
    "sharp": (60, 45, 55), "clear": (65, 60, 30), "inward": (30, 50, 80),
    "still": (20, 60, 70), "essential": (25, 55, 85), "stirring": (45, 65, 65),
}

WEATHER: Dict[str, WeatherProfile] = {w.name: w for w in (
    WeatherProfile("sunny", EmotionalVector(80, 90, 40, 60, 10, 20), ("uplifting", "energetic", "optimistic")),
    WeatherProfile("cloudy", EmotionalVector(45, 50, 60, 40, 55, 60), ("contemplative", "subdued", "introspective")),
    WeatherProfile("rainy", EmotionalVector(35, 40, 70, 55, 60, 65), ("melancholic", "peaceful", "nostalgic")),
    WeatherProfile("stormy", EmotionalVector(90, 35, 80, 95, 75, 70), ("dramatic", "intense", "powerful")),
    WeatherProfile("foggy", EmotionalVector(30, 45, 85, 50, 70, 95), ("mysterious", "ethereal", "uncertain")),
    WeatherProfile("snowy", EmotionalVector(25, 65, 55, 40, 30, 50), ("peaceful", "pure", "crystalline")),
)}

CULTURES: Dict[str, CulturalProfile] = {c.name: c for c in (
    CulturalProfile("mediterranean", EmotionalVector(70, 80, 60, 65, 20, 45), 80,
                    ("romantic", "passionate", "warm", "celebratory"), "expressive"),
    CulturalProfile("nordic", EmotionalVector(45, 55, 75, 40, 50, 70), 45,
                    ("contemplative", "melancholic", "peaceful", "minimalist"), "understated"),
    CulturalProfile("eastern", EmotionalVector(50, 60, 85, 55, 40, 80), 55,
                    ("harmonious", "balanced", "wise", "flowing"), "contextual"),
    CulturalProfile("urban_modern", EmotionalVector(80, 55, 90, 75, 45, 60), 70,
                    ("energetic", "complex", "diverse", "electric"), "direct"),
)}

ATMOSPHERIC_PROFILES: Dict[str, AtmosphericProfile] = {p.id: p for p in (
    AtmosphericProfile(
        "storm_passage", "Storm Passage", "environmental", EmotionalVector(85, 40, 75, 90, 70, 60),
        ("aggressive", "energetic", "mysterious", "dark"), ("peaceful", "gentle", "serene"),
        ("powerful", "dramatic", "intense"), ("weather", "power", "change", "nature"),
        ("intensity", "drama", "natural power"),
    ),
    AtmosphericProfile(
        "midnight_solitude", "Midnight Solitude", "temporal", EmotionalVector(30, 35, 80, 60, 85, 90),
        ("melancholic", "mysterious", "contemplative", "dark"), ("euphoric", "energetic", "uplifting"),
        ("contemplative", "mysterious", "isolated"), ("darkness", "solitude", "time", "thought"),
        ("introspection", "mystery", "solitude"),
    ),
    AtmosphericProfile(
        "spring_awakening", "Spring Awakening", "seasonal", EmotionalVector(70, 85, 60, 65, 15, 40),
        ("uplifting", "peaceful", "romantic", "hopeful"), ("dark", "aggressive", "melancholic"),
        ("hopeful", "fresh", "growing"), ("growth", "renewal", "hope", "nature"),
        ("renewal", "growth", "hope"),
    ),
    AtmosphericProfile(
        "urban_nightscape", "Urban Nightscape", "cultural", EmotionalVector(75, 50, 85, 80, 60, 70),
        ("energetic", "mysterious", "aggressive", "electric"), ("peaceful", "rural", "natural"),
        ("modern", "electric", "vibrant"), ("technology", "people", "energy", "movement"),
        ("modernity", "energy", "complexity"),
    ),
    AtmosphericProfile(
        "sacred_grove", "Sacred Grove", "spiritual", EmotionalVector(40, 75, 70, 45, 25, 80),
        ("peaceful", "mysterious", "contemplative", "spiritual"), ("aggressive", "urban", "technological"),
        ("reverent", "ancient", "mystical"), ("nature", "spirit", "ancient", "sacred"),
        ("spirituality", "nature", "timelessness"),
    ),
)}

# Time/season pairs that sit naturally together; anything else scores 0.5
_TIME_SEASON_COMPATIBILITY: Dict[str, Dict[str, float]] = {
    "dawn": {"spring_awakening": 0.9, "summer_peak": 0.6, "autumn_reflection": 0.7, "winter_introspection": 0.5},
    "night": {"spring_awakening": 0.4, "summer_peak": 0.7, "autumn_reflection": 0.8, "winter_introspection": 0.9},
    "midnight": {"spring_awakening": 0.3, "summer_peak": 0.5, "autumn_reflection": 0.9, "winter_introspection": 1.0},
}

_CATEGORY_MOOD_AFFINITIES: Dict[str, Tuple[str, ...]] = {
    "conceptual": ("mysterious", "complex", "abstract"),
    "descriptive": ("clear", "bright", "accessible"),
    "narrative": ("engaging", "flowing", "temporal"),
    "atmospheric": ("mysterious", "deep", "environmental"),
    "emotional": ("passionate", "intense", "expressive"),
}


@dataclass(frozen=True)
class AtmosphericContext:
    """Orthogonal descriptors that nudge a mood vector.

    Attributes:
        time_of_day: dawn, morning, afternoon, evening, night or midnight.
        season: Season with optional phase, e.g. "autumn_reflection" or "winter".
        weather: sunny, cloudy, rainy, stormy, foggy or snowy.
        culture: mediterranean, nordic, eastern or urban_modern.
        profile: Explicit atmospheric profile id, e.g. "storm_passage".
    """
    time_of_day: Optional[str] = None
    season: Optional[str] = None
    weather: Optional[str] = None
    culture: Optional[str] = None
    profile: Optional[str] = None

    def is_empty(self) -> bool:
        return not any((self.time_of_day, self.season, self.weather, self.culture, self.profile))

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> Optional["AtmosphericContext"]:
        if not data:
            return None
        return cls(
            time_of_day=_lower(data.get("time_of_day") or data.get("time")),
            season=_lower(data.get("season")),
            weather=_lower(data.get("weather")),
            culture=_lower(data.get("culture")),
            profile=_lower(data.get("profile")),
        )


def _lower(value: Optional[str]) -> Optional[str]:
    return value.strip().lower() if isinstance(value, str) and value.strip() else None


@dataclass
class AtmosphericReading:
    """Result of analysing an atmospheric context."""
    vector: EmotionalVector
    moods: List[str] = field(default_factory=list)
    cultural_resonance: float = 0.5
    temporal_alignment: float = 0.5
    profiles: List[AtmosphericProfile] = field(default_factory=list)
    recommendations: Dict[str, List[str]] = field(default_factory=dict)


def _split_season(season: str) -> Tuple[str, str]:
    parts = season.split("_", 1)
    phase = _PHASE_WORDS.get(parts[1], "peak") if len(parts) > 1 else "peak"
    return parts[0], phase


def season_vector(season: str) -> Tuple[EmotionalVector, Tuple[str, ...]]:
    """Emotional vector and moods for a season phase; neutral if unknown."""
    name, phase = _split_season(season)
    phases = SEASONS.get(name)
    if phases is None:
        return NEUTRAL, ()
    data = phases[phase]

    def averaged(index: int) -> float:
        values = [_CHARACTERISTIC_MAP[c][index] for c in data.characteristics if c in _CHARACTERISTIC_MAP]
        if not values:
            return 50.0
        return (50.0 + sum(values)) / (len(values) + 1)

    vector = EmotionalVector(
        energy=averaged(0),
        valence=averaged(1),
        complexity=data.intensity,
        intensity=data.intensity,
        darkness=100.0 - data.intensity,
        mystery=averaged(2),
    )
    return vector, data.moods


class AtmosphereModel:
    """Blend atmospheric descriptors into emotional vectors and score templates.

    Read-only after construction; safe to share across sessions.
    """

    def __init__(self, config: Optional[MoodConfig] = None):
        self.config = config or MoodConfig()

    def get_profile(self, profile_id: str) -> Optional[AtmosphericProfile]:
        return ATMOSPHERIC_PROFILES.get(profile_id)

    def analyze(self, context: AtmosphericContext, base: EmotionalVector = NEUTRAL) -> AtmosphericReading:
        """Blend each contributor into ``base`` in order: time, season, weather, culture.

        Args:
            context: Atmospheric descriptors; unknown values are skipped.
            base: Starting vector, usually the resolved mood.

        Returns:
            AtmosphericReading with the blended vector and derived scores.
        """
        weights = self.config.atmosphere
        vector = base
        moods: List[str] = []
        cultural_resonance = 0.5

        if context.time_of_day in TIMES_OF_DAY:
            time = TIMES_OF_DAY[context.time_of_day]
            w = weights.time
            vector = EmotionalVector(
                energy=vector.energy * (1 - w) + time.energy * w,
                valence=vector.valence,
                complexity=vector.complexity,
                intensity=vector.intensity,
                darkness=vector.darkness,
                mystery=vector.mystery * (1 - w) + time.mystery * w,
            )
            moods.extend(time.primary_moods)

        if context.season:
            season, season_moods = season_vector(context.season)
            if season_moods:
                vector = vector.blended(season, weights.season)
                moods.extend(season_moods)

        if context.weather in WEATHER:
            weather = WEATHER[context.weather]
            vector = vector.blended(weather.vector, weights.weather)
            moods.extend(weather.moods)

        if context.culture in CULTURES:
            culture = CULTURES[context.culture]
            vector = vector.blended(culture.vector, weights.culture)
            moods.extend(culture.preferred_moods)
            cultural_resonance = culture.expressiveness / 100.0

        unique_moods = list(dict.fromkeys(moods))
        return AtmosphericReading(
            vector=vector,
            moods=unique_moods,
            cultural_resonance=cultural_resonance,
            temporal_alignment=self.temporal_alignment(context),
            profiles=self.matching_profiles(context),
            recommendations=self._recommendations(context),
        )

    def apply(self, vector: EmotionalVector, context: Optional[AtmosphericContext]) -> EmotionalVector:
        """Blend an atmospheric context into a mood vector."""
        if context is None or context.is_empty():
            return vector
        return self.analyze(context, base=vector).vector

    def temporal_alignment(self, context: AtmosphericContext) -> float:
        alignment = 0.5
        if context.time_of_day and context.season:
            compat = _TIME_SEASON_COMPATIBILITY.get(context.time_of_day, {}).get(context.season, 0.5)
            alignment += compat * 0.3
        return max(0.0, min(1.0, alignment))

    def matching_profiles(self, context: AtmosphericContext) -> List[AtmosphericProfile]:
        """Profiles matching the context, most nuanced first.

        An explicit ``profile`` id always matches. Otherwise each provided
        descriptor adds 0.3 to profiles of the corresponding category, and
        profiles reaching 0.3 are kept.
        """
        matches = []
        for profile in ATMOSPHERIC_PROFILES.values():
            if context.profile == profile.id:
                matches.append(profile)
                continue
            score = 0.0
            if context.time_of_day and profile.category == "temporal":
                score += 0.3
            if context.season and profile.category == "seasonal":
                score += 0.3
            if context.culture and profile.category == "cultural":
                score += 0.3
            if context.weather and profile.category == "environmental":
                score += 0.3
            if score >= 0.3:
                matches.append(profile)
        return sorted(matches, key=lambda p: p.resonance.complexity, reverse=True)

    def mood_adjustment(self, mood: Optional[str], context: Optional[AtmosphericContext]) -> float:
        """Bonus if a matched profile lists the mood as compatible, penalty if conflicting."""
        key = normalize_mood_name(mood)
        if not key or context is None or context.is_empty():
            return 0.0
        profiles = self.matching_profiles(context)
        if any(key in p.conflicting_moods for p in profiles):
            return -self.config.conflicting_penalty
        if any(key in p.compatible_moods for p in profiles):
            return self.config.compatible_bonus
        return 0.0

    def coherence(self, template, context: AtmosphericContext) -> Dict[str, float]:
        """How well a template sits in an atmosphere.

        Returns:
            Dict with coherence_score and its four components.
        """
        reading = self.analyze(context)
        template_moods = template.applicable_moods or frozenset()

        alignment = 0.3 * sum(1 for m in template_moods if m in reading.moods)
        affinities = _CATEGORY_MOOD_AFFINITIES.get(template.category, ())
        category_fit = min(1.0, 0.2 * sum(1 for m in reading.moods if any(a in m for a in affinities)))
        alignment += category_fit * 0.4
        alignment += (1.0 - abs(template.weight - reading.vector.intensity / 100.0)) * 0.3
        alignment = max(0.0, min(1.0, alignment))

        cultural_fit = 0.5
        culture = CULTURES.get(context.culture or "")
        if culture:
            if culture.communication_style == "contextual" and template.category == "conceptual":
                cultural_fit += 0.2
            if culture.communication_style == "direct" and template.max_word_count <= 2:
                cultural_fit += 0.2
            cultural_fit += 0.15 * sum(1 for m in template_moods if m in culture.preferred_moods)
        cultural_fit = max(0.0, min(1.0, cultural_fit))

        temporal = 0.5
        time = TIMES_OF_DAY.get(context.time_of_day or "")
        if time:
            temporal += 0.2 * sum(1 for m in template_moods if m in time.primary_moods)
        temporal = max(0.0, min(1.0, temporal))

        sensory = 0.5
        text = f"{template.pattern} {template.description}".lower()
        if any(f in text for p in reading.profiles for f in p.semantic_fields + p.preferred_tones):
            sensory += 0.2

        score = alignment * 0.3 + cultural_fit * 0.25 + temporal * 0.25 + sensory * 0.2
        return {
            "coherence_score": score,
            "atmospheric_alignment": alignment,
            "cultural_fit": cultural_fit,
            "temporal_consistency": temporal,
            "sensory_harmony": sensory,
        }

    def word_characteristics(self, context: AtmosphericContext) -> Dict[str, List[str]]:
        """Preferred tones and semantic fields of matching profiles."""
        tones: List[str] = []
        fields: List[str] = []
        for profile in self.matching_profiles(context):
            tones.extend(profile.preferred_tones)
            fields.extend(profile.semantic_fields)
        return {
            "preferred_tones": list(dict.fromkeys(tones)),
            "semantic_fields": list(dict.fromkeys(fields)),
        }

    def _recommendations(self, context: AtmosphericContext) -> Dict[str, List[str]]:
        enhance: List[str] = []
        avoid: List[str] = []
        modifiers: List[str] = []
        if context.weather == "stormy":
            enhance += ["intensity", "power", "drama"]
            avoid += ["gentleness", "subtlety"]
            modifiers.append("urban_intensity")
        if context.time_of_day == "midnight":
            enhance += ["mystery", "depth", "solitude"]
            avoid += ["brightness", "obviousness"]
            modifiers.append("midnight_amplifier")
        if context.season and context.season.startswith("autumn"):
            enhance += ["reflection", "change"]
            modifiers.append("seasonal_autumn")
        if context.season and context.season.startswith("spring"):
            enhance += ["renewal", "growth", "hope"]
            avoid += ["death", "ending", "darkness"]
        if context.culture == "mediterranean":
            enhance += ["warmth", "passion", "life"]
            avoid += ["coldness", "isolation"]
        return {
            "enhance": list(dict.fromkeys(enhance)),
            "avoid": list(dict.fromkeys(avoid)),
            "mood_modifiers": list(dict.fromkeys(modifiers)),
        }
