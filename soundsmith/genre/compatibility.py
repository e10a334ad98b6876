"""Pairwise genre compatibility.

Each genre has a characteristic profile. Compatibility for every unordered
pair is computed once at construction from energy, complexity,
instrumentation, rhythm, improvisation, cultural roots and emotional range,
plus hand-picked bonuses for combinations with a track record.
"""

from dataclasses import dataclass, field
from itertools import combinations
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

from ..utils.logging import get_logger

logger = get_logger(__name__)

FUSION_STYLES = ("complement", "contrast", "hybrid", "evolution")


@dataclass(frozen=True)
class GenreProfile:
    """Characteristics of a genre; numeric fields are in [0, 1]."""
    name: str
    energy: float
    complexity: float
    traditionalism: float
    instrumentation: str
    rhythm: str
    improvisation: float
    commerciality: float
    emotional_range: Tuple[str, ...]
    cultural_roots: Tuple[str, ...]
    era: str
    key_elements: Tuple[str, ...]


@dataclass(frozen=True)
class CompatibilityEntry:
    """Compatibility of an unordered genre pair.

    Attributes:
        genres: The two genres.
        score: Compatibility in [0, 1].
        fusion_style: complement, contrast, hybrid or evolution.
        synergies: What works well together; also used as vocabulary hints.
        challenges: What needs care.
        ratio: Recommended weight of each genre, in the order of ``genres``.
        best_aspects: Aspects worth emphasising.
    """
    genres: FrozenSet[str]
    score: float
    fusion_style: str
    synergies: Tuple[str, ...] = ()
    challenges: Tuple[str, ...] = ()
    ratio: Tuple[float, float] = (0.5, 0.5)
    best_aspects: Tuple[str, ...] = ()
    first: str = ""

    def ratio_for(self, primary: str) -> Tuple[float, float]:
        """Ratio oriented so the first value belongs to ``primary``."""
        if primary == self.first:
            return self.ratio
        return self.ratio[1], self.ratio[0]

    def to_dict(self) -> Dict:
        return {
            "genres": sorted(self.genres),
            "score": round(self.score, 4),
            "fusion_style": self.fusion_style,
            "synergies": list(self.synergies),
            "challenges": list(self.challenges),
            "ratio": list(self.ratio),
            "best_aspects": list(self.best_aspects),
        }


@dataclass(frozen=True)
class FusionRule:
    """Curated rule for a well-known genre combination."""
    name: str
    description: str
    genres: Tuple[str, str]
    vocabulary_strategy: str
    pattern_strategy: str
    examples: Tuple[str, ...] = field(default=())


def _g(name, energy, complexity, traditionalism, instrumentation, rhythm, improvisation,
       commerciality, emotional_range, roots, era, elements) -> GenreProfile:
    return GenreProfile(
        name=name,
        energy=energy,
        complexity=complexity,
        traditionalism=traditionalism,
        instrumentation=instrumentation,
        rhythm=rhythm,
        improvisation=improvisation,
        commerciality=commerciality,
        emotional_range=tuple(emotional_range),
        cultural_roots=tuple(roots),
        era=era,
        key_elements=tuple(elements),
    )


GENRE_PROFILES: Dict[str, GenreProfile] = {p.name: p for p in (
    _g("rock", 0.8, 0.6, 0.7, "electric", "steady", 0.4, 0.7,
       ["dark", "bright", "varied"], ["blues", "folk", "country"], "1950s",
       ["guitar", "drums", "bass", "vocals", "power", "rebellion"]),
    _g("electronic", 0.7, 0.8, 0.2, "electronic", "complex", 0.6, 0.6,
       ["bright", "dark", "neutral"], ["experimental", "dance", "ambient"], "1970s",
       ["synthesizer", "sampling", "beats", "digital", "futuristic", "technology"]),
    _g("jazz", 0.6, 0.9, 0.8, "acoustic", "syncopated", 0.9, 0.4,
       ["neutral", "dark", "bright"], ["blues", "ragtime", "swing"], "1910s",
       ["improvisation", "harmony", "swing", "sophistication", "artistic", "complex"]),
    _g("hip-hop", 0.7, 0.7, 0.3, "electronic", "steady", 0.8, 0.8,
       ["dark", "bright", "varied"], ["funk", "soul", "disco"], "1970s",
       ["rhythm", "lyrics", "culture", "beats", "sampling", "expression"]),
    _g("folk", 0.4, 0.3, 0.9, "acoustic", "steady", 0.5, 0.3,
       ["neutral", "dark"], ["traditional", "storytelling", "cultural"], "ancient",
       ["storytelling", "acoustic", "tradition", "simplicity", "heritage", "community"]),
    _g("classical", 0.5, 1.0, 1.0, "acoustic", "complex", 0.2, 0.2,
       ["varied", "neutral"], ["european", "formal", "academic"], "medieval",
       ["orchestration", "composition", "technique", "sophistication", "formal", "artistic"]),
    _g("indie", 0.6, 0.6, 0.4, "mixed", "variable", 0.6, 0.4,
       ["dark", "bright", "neutral"], ["alternative", "underground", "diy"], "1980s",
       ["creativity", "independence", "artistic", "alternative", "experimental", "authentic"]),
    _g("blues", 0.5, 0.4, 0.9, "acoustic", "steady", 0.7, 0.5,
       ["dark", "neutral"], ["african-american", "work songs", "spirituals"], "1860s",
       ["emotion", "storytelling", "guitar", "vocals", "expression", "soul"]),
    _g("country", 0.6, 0.4, 0.8, "acoustic", "steady", 0.5, 0.7,
       ["bright", "neutral", "dark"], ["folk", "western", "rural"], "1920s",
       ["storytelling", "rural", "guitar", "vocals", "tradition", "americana"]),
    _g("metal", 0.9, 0.7, 0.6, "electric", "complex", 0.4, 0.5,
       ["dark", "bright"], ["rock", "blues", "classical"], "1960s",
       ["intensity", "power", "technical", "heavy", "guitar", "aggression"]),
    _g("pop", 0.7, 0.4, 0.3, "mixed", "steady", 0.2, 1.0,
       ["bright", "neutral"], ["various", "mainstream", "commercial"], "1950s",
       ["catchy", "accessible", "commercial", "melody", "mainstream", "popular"]),
)}

RHYTHM_COMPATIBILITY: Dict[str, Dict[str, float]] = {
    "steady": {"steady": 1.0, "syncopated": 0.7, "complex": 0.6, "variable": 0.8},
    "syncopated": {"steady": 0.7, "syncopated": 1.0, "complex": 0.8, "variable": 0.9},
    "complex": {"steady": 0.6, "syncopated": 0.8, "complex": 1.0, "variable": 0.7},
    "variable": {"steady": 0.8, "syncopated": 0.9, "complex": 0.7, "variable": 1.0},
}

# (bonus, synergy, best aspects) per pair
SPECIAL_BONUSES: Dict[FrozenSet[str], Tuple[float, str, Tuple[str, ...]]] = {
    frozenset({"electronic", "jazz"}): (
        0.15, "Electronic-jazz fusion creates sophisticated innovation",
        ("Improvisation meets technology", "Complex harmonies with electronic textures")),
    frozenset({"folk", "electronic"}): (
        0.12, "Traditional meets futuristic, a compelling dichotomy",
        ("Organic storytelling with digital soundscapes",)),
    frozenset({"hip-hop", "jazz"}): (
        0.10, "Hip-hop jazz fusion has strong historical precedent",
        ("Improvisational flow", "Complex rhythmic interplay")),
    frozenset({"rock", "classical"}): (
        0.10, "Rock power meets classical sophistication",
        ("Dynamic range", "Compositional complexity with raw energy")),
}

FUSION_RULES: Tuple[FusionRule, ...] = (
    FusionRule("ElectroJazz Fusion",
               "Sophisticated electronic textures with jazz improvisation and harmony",
               ("electronic", "jazz"), "synthesize", "interweave",
               ("Digital Saxophone", "Quantum Bebop", "Synthesized Improvisation")),
    FusionRule("TechnoFolk Fusion",
               "Traditional storytelling enhanced with modern electronic elements",
               ("folk", "electronic"), "alternate", "layer",
               ("Digital Folklore", "Electronic Ballad", "Cyber Folk Tales")),
    FusionRule("Symphonic Rock Fusion",
               "Rock energy with classical composition and orchestration",
               ("rock", "classical"), "merge", "blend",
               ("Electric Symphony", "Orchestral Thunder", "Classical Storm")),
    FusionRule("Jazz Hop Fusion",
               "Hip-hop rhythm and culture with jazz improvisation and complexity",
               ("hip-hop", "jazz"), "merge", "interweave",
               ("Jazz Flow Collective", "Bebop Beats", "Improvisational Cipher")),
)


def normalize_genre(genre: Optional[str]) -> Optional[str]:
    if not genre:
        return None
    key = genre.strip().lower().replace("_", "-").replace(" ", "-")
    if key in ("hiphop", "hip-hop", "rap"):
        return "hip-hop"
    return key


def _pair_compatibility(a: GenreProfile, b: GenreProfile) -> CompatibilityEntry:
    score = 0.5
    synergies: List[str] = []
    challenges: List[str] = []
    best_aspects: List[str] = []
    style = "hybrid"
    ratio = (0.5, 0.5)

    energy_diff = abs(a.energy - b.energy)
    if energy_diff < 0.3:
        score += 0.2
        synergies.append("Similar energy levels create natural flow")
    elif energy_diff > 0.6:
        score += 0.1
        synergies.append("Contrasting energy levels create dynamic tension")
        style = "contrast"
    else:
        challenges.append("Moderate energy differences may create balance issues")

    if abs(a.complexity - b.complexity) < 0.4:
        score += 0.15
        synergies.append("Compatible complexity levels facilitate fusion")
    else:
        score += 0.05
        challenges.append("Different complexity levels require careful balancing")
        ratio = (0.6, 0.4) if a.complexity > b.complexity else (0.4, 0.6)

    instruments = {a.instrumentation, b.instrumentation}
    if a.instrumentation == b.instrumentation:
        score += 0.15
        synergies.append("Shared instrumentation creates natural cohesion")
    elif "mixed" in instruments or instruments == {"acoustic", "electric"}:
        score += 0.1
        synergies.append("Complementary instrumentation adds textural richness")
        style = "complement"
    else:
        score += 0.05
        challenges.append("Contrasting instrumentation requires creative integration")

    rhythm = RHYTHM_COMPATIBILITY.get(a.rhythm, {}).get(b.rhythm, 0.5)
    score += rhythm * 0.1
    if rhythm > 0.7:
        synergies.append("Rhythmic elements blend naturally")

    if abs(a.improvisation - b.improvisation) < 0.3:
        score += 0.1
        best_aspects.append("Balanced improvisational elements")

    shared_roots = [r for r in a.cultural_roots if r in b.cultural_roots]
    if shared_roots:
        score += 0.1
        synergies.append(f"Shared cultural roots: {', '.join(shared_roots)}")
        style = "evolution"

    if set(a.emotional_range) & set(b.emotional_range):
        score += 0.05
        synergies.append("Overlapping emotional territories")

    bonus = SPECIAL_BONUSES.get(frozenset({a.name, b.name}))
    if bonus:
        amount, synergy, aspects = bonus
        score += amount
        synergies.append(synergy)
        best_aspects.extend(aspects)

    return CompatibilityEntry(
        genres=frozenset({a.name, b.name}),
        score=max(0.0, min(1.0, score)),
        fusion_style=style,
        synergies=tuple(synergies),
        challenges=tuple(challenges),
        ratio=ratio,
        best_aspects=tuple(best_aspects),
        first=a.name,
    )


class GenreCompatibilityModel:
    """Read-only compatibility lookup over all genre pairs."""

    def __init__(self, profiles: Optional[Dict[str, GenreProfile]] = None,
                 fusion_threshold: float = 0.6):
        self.profiles = dict(profiles if profiles is not None else GENRE_PROFILES)
        self.fusion_threshold = fusion_threshold
        self._entries: Dict[FrozenSet[str], CompatibilityEntry] = {}
        for a, b in combinations(self.profiles.values(), 2):
            self._entries[frozenset({a.name, b.name})] = _pair_compatibility(a, b)
        logger.info(f"Genre compatibility computed for {len(self._entries)} pairs")

    @property
    def genres(self) -> List[str]:
        return list(self.profiles)

    def get_profile(self, genre: str) -> Optional[GenreProfile]:
        return self.profiles.get(normalize_genre(genre) or "")

    def get_compatibility(self, genre_a: str, genre_b: str) -> Optional[CompatibilityEntry]:
        """Entry for an unordered pair, or None if either genre is unknown or they match."""
        a, b = normalize_genre(genre_a), normalize_genre(genre_b)
        if not a or not b or a == b:
            return None
        return self._entries.get(frozenset({a, b}))

    def get_fusion_rule(self, genre_a: str, genre_b: str) -> Optional[FusionRule]:
        pair = {normalize_genre(genre_a), normalize_genre(genre_b)}
        for rule in FUSION_RULES:
            if set(rule.genres) == pair:
                return rule
        return None

    def most_compatible(self, genre: str, limit: int = 5) -> List[Tuple[str, float]]:
        """Other genres ranked by compatibility with ``genre``."""
        ranked = []
        for other in self.profiles:
            entry = self.get_compatibility(genre, other)
            if entry is not None:
                ranked.append((other, entry.score))
        ranked.sort(key=lambda item: item[1], reverse=True)
        return ranked[:limit]

    def multi_genre_recommendations(self, genres: Sequence[str],
                                    style: Optional[str] = None) -> List[Dict]:
        """Every pair from ``genres``, optionally narrowed to a fusion style, best first."""
        recommendations = []
        for a, b in combinations(genres, 2):
            entry = self.get_compatibility(a, b)
            if entry is None or (style and entry.fusion_style != style):
                continue
            recommendations.append({
                "combination": [normalize_genre(a), normalize_genre(b)],
                "compatibility": entry.score,
                "fusion_style": entry.fusion_style,
                "description": "; ".join(entry.synergies),
            })
        recommendations.sort(key=lambda r: r["compatibility"], reverse=True)
        return recommendations

    def is_fusion_worthy(self, genre_a: str, genre_b: str, threshold: Optional[float] = None) -> bool:
        entry = self.get_compatibility(genre_a, genre_b)
        if entry is None:
            return False
        return entry.score >= (self.fusion_threshold if threshold is None else threshold)
