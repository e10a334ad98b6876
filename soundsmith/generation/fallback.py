"""Fallbacks used when template selection or fusion cannot produce names.

Two tiers:
- ``dynamic_phrase`` assembles a phrase straight from the word source when no
  template fits the requested shape.
- ``curated_names`` returns hand-picked names when generation failed outright.
"""

import random
from typing import Dict, List, Optional, Tuple

from ..models import GeneratedName, NameType
from ..utils.text import pick, title_case, to_gerund
from ..vocabulary.word_source import WordSource

FALLBACK_NAMES: Dict[NameType, Tuple[str, ...]] = {
    NameType.BAND: (
        "Velvet Static",
        "The Hollow Lanterns",
        "Echo Cartel",
        "Paper Satellites",
        "Midnight Foundry",
        "Glass Orchard",
        "Sundial",
        "The Quiet Engines",
    ),
    NameType.SONG: (
        "Chasing the Last Light",
        "Ember Season",
        "Where the River Forgets",
        "Static Hearts",
        "Northbound",
        "Letters to the Tide",
        "Slow Burning Summer",
        "Halfway Home",
    ),
}

FALLBACK_QUALITY = 0.5
DYNAMIC_QUALITY = 0.4


def dynamic_phrase(
    word_source: WordSource,
    word_count: int,
    rng: random.Random,
    name_type: NameType = NameType.BAND,
) -> str:
    """Assemble a phrase of exactly ``word_count`` words without a template.

    The shape cycles adjective/noun pairs and links longer phrases with a
    gerund and a preposition, e.g. "Hollow Lights Drifting Through Embers".
    """
    adjectives = word_source.pool("adjectives")
    nouns = word_source.pool("nouns")
    verbs = word_source.pool("verbs")

    if word_count <= 1:
        return title_case(pick(rng, nouns, "echo"))
    if word_count == 2:
        return title_case(f"{pick(rng, adjectives, 'silent')} {pick(rng, nouns, 'echo')}")
    if word_count == 3:
        if name_type is NameType.BAND:
            return title_case(f"the {pick(rng, adjectives, 'silent')} {pick(rng, nouns, 'echoes')}")
        return title_case(f"{to_gerund(pick(rng, verbs, 'chase'))} {pick(rng, adjectives, 'silent')} {pick(rng, nouns, 'light')}")

    words = [pick(rng, adjectives, "silent"), pick(rng, nouns, "echo"),
             to_gerund(pick(rng, verbs, "drift")), rng.choice(("through", "beyond", "beneath", "into"))]
    while len(words) < word_count:
        words.append(pick(rng, adjectives if len(words) % 2 == 0 else nouns, "light"))
    if len(words) > word_count:
        words = words[:word_count]
    if words[-1] in ("through", "beyond", "beneath", "into"):
        words[-1] = pick(rng, nouns, "light")
    return title_case(" ".join(words))


def curated_names(
    name_type: NameType,
    count: int,
    rng: Optional[random.Random] = None,
    reason: Optional[str] = None,
) -> List[GeneratedName]:
    """Up to ``count`` hand-picked names, tagged with why they were used.

    Args:
        name_type: Band or song.
        count: Names wanted; capped at the size of the curated pool.
        rng: Optional random source for the draw order.
        reason: Error class name recorded as ``fallback_reason``.
    """
    pool = list(FALLBACK_NAMES[name_type])
    if rng is not None:
        rng.shuffle(pool)
    return [
        GeneratedName(
            name=name,
            metadata={
                "path": "fallback",
                "quality_score": FALLBACK_QUALITY,
                "fallback_reason": reason,
            },
        )
        for name in pool[:max(0, count)]
    ]
