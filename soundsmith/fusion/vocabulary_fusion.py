"""Blend the vocabularies of two genres.

A fused vocabulary holds primary and secondary single-word pools, hybrid
terms (portmanteaus, prefixed cores, adjective + noun compounds), conceptual
blend phrases and cultural fusion phrases. How the two genres are weighted
depends on the blend strategy:

- merge: both genres contribute equally
- alternate: the genres' terms are interleaved
- dominant: one genre leads, the other adds accents
- synthesize: bridges and invented hybrids lead
"""

import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..genre.compatibility import CompatibilityEntry, normalize_genre
from ..genre.vocabulary import BlendRule, GenreVocabulary, get_blend_rule, get_vocabulary
from ..mood.profiles import get_mood
from ..utils.logging import get_logger
from ..utils.text import capitalize, looks_like_adjective, pick, title_case
from ..vocabulary.word_source import (
    ADJECTIVES,
    GENRE_TERMS,
    MUSICAL_TERMS,
    NOUNS,
    WordSource,
    default_word_source,
)

logger = get_logger(__name__)

STRATEGIES = ("merge", "alternate", "dominant", "synthesize")

HYBRID_PREFIXES = ("neo", "meta", "proto", "ultra", "hyper")
BRIDGE_WORDS = ("meets", "fusion", "synthesis", "blend", "hybrid", "crossing", "bridge")

STRATEGY_CREATIVITY = {"synthesize": 0.3, "alternate": 0.1}
STYLE_CREATIVITY = {"contrast": 0.1, "hybrid": 0.2}


@dataclass
class FusedVocabulary:
    """Vocabulary produced by blending two genres."""
    primary_genre: str
    secondary_genre: str
    strategy: str
    primary_words: List[str] = field(default_factory=list)
    secondary_words: List[str] = field(default_factory=list)
    hybrid_terms: List[str] = field(default_factory=list)
    conceptual_blends: List[str] = field(default_factory=list)
    cultural_fusions: List[str] = field(default_factory=list)
    avoid_words: List[str] = field(default_factory=list)
    dominant_genre: str = ""
    blend_ratio: Tuple[float, float] = (0.5, 0.5)
    compatibility_score: float = 0.0
    creativity_level: float = 0.5

    def all_words(self) -> List[str]:
        return list(dict.fromkeys(self.primary_words + self.secondary_words))

    def to_word_source(self, base: Optional[WordSource] = None) -> WordSource:
        """Merge the fused single words into a word source.

        Adjectives are told apart from nouns by suffix only. Multi-word
        hybrids stay out of the source so template slots keep one word each.
        """
        base = base or default_word_source()
        singles = [w for w in self.primary_words + self.secondary_words + self.hybrid_terms if " " not in w]
        adjectives = [w for w in singles if looks_like_adjective(w)]
        nouns = [w for w in singles if not looks_like_adjective(w)]
        hybrids = [w for w in self.hybrid_terms if " " not in w]
        return base.merged(
            {
                ADJECTIVES: adjectives,
                NOUNS: nouns,
                MUSICAL_TERMS: [w for w in self.primary_words if " " not in w],
                GENRE_TERMS: hybrids,
            },
            name=f"{base.name}+{self.primary_genre}-{self.secondary_genre}",
        )

    def to_dict(self) -> Dict:
        return {
            "primary_genre": self.primary_genre,
            "secondary_genre": self.secondary_genre,
            "strategy": self.strategy,
            "dominant_genre": self.dominant_genre,
            "blend_ratio": list(self.blend_ratio),
            "compatibility_score": round(self.compatibility_score, 4),
            "creativity_level": round(self.creativity_level, 4),
            "primary_words": list(self.primary_words),
            "secondary_words": list(self.secondary_words),
            "hybrid_terms": list(self.hybrid_terms),
            "conceptual_blends": list(self.conceptual_blends),
            "cultural_fusions": list(self.cultural_fusions),
        }


def choose_strategy(
    entry: CompatibilityEntry,
    rule: Optional[BlendRule],
    creativity: Optional[str] = None,
) -> str:
    """Pick a blend strategy from compatibility, curated rules and creativity."""
    if entry.score < 0.6:
        return "dominant"
    if creativity in ("innovative", "revolutionary") and entry.score > 0.7:
        return "synthesize"
    if rule is not None:
        return rule.strategy
    if entry.fusion_style == "complement":
        return "synthesize" if entry.score > 0.7 else "alternate"
    if entry.fusion_style == "contrast":
        return "alternate" if entry.score > 0.6 else "dominant"
    if entry.fusion_style == "hybrid":
        return "merge"
    return "synthesize"


def creativity_level(entry: CompatibilityEntry, strategy: str) -> float:
    level = 0.5 + STRATEGY_CREATIVITY.get(strategy, 0.0)
    level += entry.score * 0.2
    level += STYLE_CREATIVITY.get(entry.fusion_style, 0.0)
    return max(0.0, min(1.0, level))


def _interleave(a, b) -> List[str]:
    merged: List[str] = []
    for i in range(max(len(a), len(b))):
        if i < len(a):
            merged.append(a[i])
        if i < len(b):
            merged.append(b[i])
    return merged


class VocabularyFusion:
    """Build fused vocabularies for genre pairs.

    All randomness comes from the ``random.Random`` passed to ``fuse``.
    """

    def fuse(
        self,
        primary: str,
        secondary: str,
        entry: CompatibilityEntry,
        rng: random.Random,
        mood: Optional[str] = None,
        creativity: Optional[str] = None,
        strategy: Optional[str] = None,
    ) -> FusedVocabulary:
        """Fuse the vocabularies of two genres.

        Args:
            primary: Primary genre.
            secondary: Secondary genre.
            entry: Compatibility entry for the pair.
            rng: Random source.
            mood: Optional mood; its keywords join the primary pool and its
                opposites are removed.
            creativity: Creativity level (conservative, balanced, innovative,
                revolutionary).
            strategy: Force a strategy instead of choosing one.

        Returns:
            The fused vocabulary.

        Raises:
            ValueError: If either genre has no vocabulary profile or the
                strategy is unknown.
        """
        primary, secondary = normalize_genre(primary), normalize_genre(secondary)
        vocab1, vocab2 = get_vocabulary(primary), get_vocabulary(secondary)
        if vocab1 is None or vocab2 is None:
            raise ValueError(f"No vocabulary profile for {primary} or {secondary}")

        rule = get_blend_rule(primary, secondary)
        strategy = strategy or choose_strategy(entry, rule, creativity)
        if strategy not in STRATEGIES:
            raise ValueError(f"Unknown blend strategy: {strategy}")

        ratio = entry.ratio_for(primary)
        dominant = primary if ratio[0] >= ratio[1] else secondary

        if strategy == "merge":
            fused = self._merge(vocab1, vocab2)
        elif strategy == "alternate":
            fused = self._alternate(vocab1, vocab2)
        elif strategy == "dominant":
            lead, accent = (vocab1, vocab2) if dominant == primary else (vocab2, vocab1)
            fused = self._dominant(lead, accent)
        else:
            fused = self._synthesize(vocab1, vocab2, rule, rng)

        fused.primary_genre = primary
        fused.secondary_genre = secondary
        fused.strategy = strategy
        fused.dominant_genre = dominant
        fused.blend_ratio = ratio
        fused.compatibility_score = entry.score
        fused.creativity_level = creativity_level(entry, strategy)

        if strategy != "synthesize":
            fused.hybrid_terms = self.hybrid_terms(vocab1, vocab2, rng)
            fused.conceptual_blends = self.conceptual_blends(vocab1, vocab2, rng)
        fused.cultural_fusions = self.cultural_fusions(vocab1, vocab2, rng)
        self._apply_mood(fused, mood)

        logger.debug(
            f"Fused vocabularies for {primary}+{secondary} using {strategy} strategy",
            extra_data={"primary": len(fused.primary_words), "hybrids": len(fused.hybrid_terms)},
        )
        return fused

    # Strategies

    def _merge(self, v1: GenreVocabulary, v2: GenreVocabulary) -> FusedVocabulary:
        primary = v1.core_terms + v2.core_terms + v1.characteristic_adjectives[:5] + v2.characteristic_adjectives[:5]
        secondary = (
            v1.instrumental_terms + v2.instrumental_terms
            + v1.cultural_terms + v2.cultural_terms
            + v1.emotional_terms + v2.emotional_terms
        )
        return FusedVocabulary(
            primary_genre=v1.genre, secondary_genre=v2.genre, strategy="merge",
            primary_words=list(dict.fromkeys(primary)),
            secondary_words=list(dict.fromkeys(secondary)),
        )

    def _alternate(self, v1: GenreVocabulary, v2: GenreVocabulary) -> FusedVocabulary:
        primary = _interleave(v1.core_terms, v2.core_terms)
        primary += _interleave(v1.characteristic_adjectives[:4], v2.characteristic_adjectives[:4])
        secondary = _interleave(v1.instrumental_terms, v2.instrumental_terms)[:10]
        return FusedVocabulary(
            primary_genre=v1.genre, secondary_genre=v2.genre, strategy="alternate",
            primary_words=list(dict.fromkeys(primary)),
            secondary_words=list(dict.fromkeys(secondary)),
        )

    def _dominant(self, lead: GenreVocabulary, accent: GenreVocabulary) -> FusedVocabulary:
        primary = lead.core_terms + lead.characteristic_adjectives[:6] + accent.core_terms[:3]
        secondary = (
            lead.instrumental_terms + lead.cultural_terms
            + accent.characteristic_adjectives[:3] + accent.emotional_terms[:3]
        )
        return FusedVocabulary(
            primary_genre=lead.genre, secondary_genre=accent.genre, strategy="dominant",
            primary_words=list(dict.fromkeys(primary)),
            secondary_words=list(dict.fromkeys(secondary)),
        )

    def _synthesize(
        self,
        v1: GenreVocabulary,
        v2: GenreVocabulary,
        rule: Optional[BlendRule],
        rng: random.Random,
    ) -> FusedVocabulary:
        bridges = list(rule.bridges) if rule else []
        prefixes = rule.prefixes if rule else HYBRID_PREFIXES
        prefix_fusions = []
        for _ in range(4):
            core = pick(rng, v1.core_terms + v2.core_terms, "")
            if core:
                prefix_fusions.append(pick(rng, prefixes, "neo") + core)

        compounds = []
        for _ in range(5):
            first = pick(rng, v1.core_terms + v1.characteristic_adjectives, "")
            second = pick(rng, v2.core_terms + v2.instrumental_terms, "")
            if first and second and len(first) + len(second) <= 12:
                compounds.append(first + second)

        primary = bridges + list(v1.core_terms[:4]) + list(v2.core_terms[:4])
        secondary = compounds + list(v1.characteristic_adjectives[:4]) + list(v2.characteristic_adjectives[:4])

        synthesis = []
        concepts1 = v1.metaphorical_terms + v1.cultural_terms
        concepts2 = v2.metaphorical_terms + v2.cultural_terms
        for _ in range(3):
            c1, c2 = pick(rng, concepts1, ""), pick(rng, concepts2, "")
            if c1 and c2:
                synthesis.append(f"The {capitalize(c1)} of {capitalize(c2)}")
                synthesis.append(f"{capitalize(c1)}-{capitalize(c2)} Synthesis")

        return FusedVocabulary(
            primary_genre=v1.genre, secondary_genre=v2.genre, strategy="synthesize",
            primary_words=list(dict.fromkeys(primary)),
            secondary_words=list(dict.fromkeys(secondary)),
            hybrid_terms=list(dict.fromkeys(prefix_fusions + self.hybrid_terms(v1, v2, rng))),
            conceptual_blends=list(dict.fromkeys(synthesis + self.conceptual_blends(v1, v2, rng))),
        )

    # Hybrid vocabulary

    def hybrid_terms(self, v1: GenreVocabulary, v2: GenreVocabulary, rng: random.Random) -> List[str]:
        """Portmanteaus, adjective + core compounds and prefixed cores."""
        hybrids: List[str] = []
        for _ in range(3):
            a, b = pick(rng, v1.core_terms, ""), pick(rng, v2.core_terms, "")
            if len(a) > 3 and len(b) > 3:
                hybrids.append(a[:(len(a) + 1) // 2] + b[len(b) // 2:])
        for _ in range(4):
            adjective, noun = pick(rng, v1.characteristic_adjectives, ""), pick(rng, v2.core_terms, "")
            if adjective and noun:
                hybrids.append(f"{adjective} {noun}")
        for _ in range(3):
            core = pick(rng, v1.core_terms + v2.core_terms, "")
            if core:
                hybrids.append(pick(rng, HYBRID_PREFIXES, "neo") + core)
        return list(dict.fromkeys(hybrids))

    def conceptual_blends(self, v1: GenreVocabulary, v2: GenreVocabulary, rng: random.Random) -> List[str]:
        blends = []
        for _ in range(3):
            c1 = pick(rng, v1.metaphorical_terms or v1.core_terms, "")
            c2 = pick(rng, v2.metaphorical_terms or v2.core_terms, "")
            if c1 and c2:
                blends.append(f"{capitalize(c1)} {pick(rng, BRIDGE_WORDS, 'fusion')} {capitalize(c2)}")
        return list(dict.fromkeys(blends))

    def cultural_fusions(self, v1: GenreVocabulary, v2: GenreVocabulary, rng: random.Random) -> List[str]:
        fusions = []
        for _ in range(3):
            c1, c2 = pick(rng, v1.cultural_terms, ""), pick(rng, v2.cultural_terms, "")
            if c1 and c2 and c1 != c2:
                fusions.append(title_case(f"{c1} {c2} collective"))
                fusions.append(f"Cross-{capitalize(c1)} {capitalize(c2)}")
        return list(dict.fromkeys(fusions))

    def _apply_mood(self, fused: FusedVocabulary, mood: Optional[str]) -> None:
        profile = get_mood(mood)
        if profile is None:
            return
        keywords = [k for k in profile.keywords if " " not in k]
        fused.primary_words = list(dict.fromkeys(fused.primary_words + keywords[:3]))
        fused.avoid_words = list(profile.opposites)
        avoid = set(fused.avoid_words)
        fused.primary_words = [w for w in fused.primary_words if w not in avoid]
        fused.secondary_words = [w for w in fused.secondary_words if w not in avoid]
