"""Infer likely moods from indirect context.

Used when a request carries a genre, theme keywords or an atmosphere but no
explicit mood. Each cue adds ``rule_confidence * cue_weight`` to the moods it
suggests; totals below ``MIN_CONFIDENCE`` are dropped.
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

from ..utils.logging import get_logger
from ..utils.text import split_words
from .profiles import is_known_mood

logger = get_logger(__name__)

MIN_CONFIDENCE = 0.1

CUE_WEIGHTS: Dict[str, float] = {
    "keywords": 0.25,
    "musical": 0.15,
    "temporal": 0.10,
}

KEYWORD_CONFIDENCE = 0.6
# Key signatures count for less than genre or tempo
KEY_DISCOUNT = 0.7

# (moods, confidence) per cue value
GENRE_RULES: Dict[str, Tuple[Tuple[str, ...], float]] = {
    "classical": (("peaceful", "romantic", "nostalgic"), 0.7),
    "electronic": (("energetic", "mysterious", "dark"), 0.6),
    "folk": (("nostalgic", "peaceful", "romantic"), 0.8),
    "metal": (("aggressive", "dark", "energetic"), 0.9),
    "jazz": (("romantic", "melancholic", "mysterious"), 0.7),
    "ambient": (("peaceful", "mysterious"), 0.8),
    "rock": (("energetic", "aggressive", "uplifting"), 0.6),
    "pop": (("uplifting", "euphoric", "romantic"), 0.6),
    "blues": (("melancholic", "nostalgic", "romantic"), 0.8),
    "country": (("nostalgic", "peaceful", "romantic"), 0.7),
    "hip-hop": (("energetic", "aggressive", "dark"), 0.6),
    "punk": (("aggressive", "energetic"), 0.8),
    "indie": (("nostalgic", "melancholic", "mysterious"), 0.5),
}

TEMPO_RULES: Dict[str, Tuple[Tuple[str, ...], float]] = {
    "slow": (("melancholic", "peaceful", "romantic"), 0.6),
    "fast": (("energetic", "aggressive", "euphoric"), 0.7),
}

KEY_RULES: Dict[str, Tuple[Tuple[str, ...], float]] = {
    "major": (("uplifting", "euphoric", "peaceful"), 0.5),
    "minor": (("melancholic", "dark", "mysterious"), 0.6),
}

TIME_RULES: Dict[str, Tuple[Tuple[str, ...], float]] = {
    "dawn": (("peaceful", "uplifting"), 0.7),
    "morning": (("energetic", "uplifting"), 0.5),
    "evening": (("romantic", "nostalgic"), 0.5),
    "night": (("mysterious", "dark", "romantic"), 0.6),
    "midnight": (("dark", "mysterious", "melancholic"), 0.8),
}

SEASON_RULES: Dict[str, Tuple[Tuple[str, ...], float]] = {
    "spring": (("uplifting", "romantic", "energetic"), 0.6),
    "summer": (("energetic", "euphoric", "uplifting"), 0.7),
    "autumn": (("nostalgic", "melancholic"), 0.7),
    "winter": (("melancholic", "peaceful", "dark"), 0.6),
}

KEYWORD_MOODS: Dict[str, Tuple[str, ...]] = {
    "love": ("romantic", "uplifting", "peaceful"),
    "night": ("dark", "mysterious", "romantic"),
    "storm": ("aggressive", "dark", "energetic"),
    "dream": ("peaceful", "mysterious", "romantic"),
    "fire": ("aggressive", "energetic"),
    "water": ("peaceful", "melancholic"),
    "light": ("uplifting", "euphoric", "peaceful"),
    "shadow": ("dark", "mysterious", "melancholic"),
    "dance": ("energetic", "euphoric", "uplifting"),
    "memory": ("nostalgic", "melancholic"),
    "future": ("mysterious", "uplifting", "energetic"),
    "silence": ("peaceful", "mysterious"),
    "thunder": ("aggressive", "energetic", "dark"),
    "garden": ("peaceful", "romantic", "uplifting"),
    "city": ("energetic", "dark", "aggressive"),
    "mountain": ("peaceful", "uplifting"),
    "ocean": ("peaceful", "mysterious", "melancholic"),
    "forest": ("peaceful", "mysterious"),
    "star": ("mysterious", "romantic", "uplifting"),
    "moon": ("romantic", "mysterious", "peaceful"),
}


def _apply_rule(scores: Dict[str, float], rule: Optional[Tuple[Tuple[str, ...], float]], weight: float) -> None:
    if rule is None:
        return
    moods, confidence = rule
    for mood in moods:
        scores[mood] += confidence * weight


def _keyword_tokens(keywords: Iterable[str]) -> List[str]:
    tokens: List[str] = []
    for keyword in keywords:
        for token in split_words(keyword):
            token = token.lower()
            tokens.append(token)
            if token.endswith("s") and token[:-1] in KEYWORD_MOODS:
                tokens.append(token[:-1])
    return tokens


def infer_moods(
    genre: Optional[str] = None,
    keywords: Iterable[str] = (),
    time_of_day: Optional[str] = None,
    season: Optional[str] = None,
    tempo: Optional[str] = None,
    key: Optional[str] = None,
    avoid_keywords: Iterable[str] = (),
) -> List[Tuple[str, float]]:
    """Rank moods suggested by context cues.

    Args:
        genre: Genre tag.
        keywords: Theme words or phrases; each word is matched separately.
        time_of_day: Time-of-day descriptor.
        season: Season, optionally with a phase suffix ("autumn_reflection").
        tempo: "slow" or "fast".
        key: "major" or "minor".
        avoid_keywords: Keywords whose moods are pushed down by 0.3.

    Returns:
        ``(mood, confidence)`` pairs, highest confidence first.
    """
    scores: Dict[str, float] = defaultdict(float)

    musical = CUE_WEIGHTS["musical"]
    if genre:
        _apply_rule(scores, GENRE_RULES.get(genre.lower()), musical)
    if tempo:
        _apply_rule(scores, TEMPO_RULES.get(tempo.lower()), musical)
    if key:
        _apply_rule(scores, KEY_RULES.get(key.lower()), musical * KEY_DISCOUNT)

    temporal = CUE_WEIGHTS["temporal"]
    if time_of_day:
        _apply_rule(scores, TIME_RULES.get(time_of_day.lower()), temporal)
    if season:
        _apply_rule(scores, SEASON_RULES.get(season.lower().split("_", 1)[0]), temporal)

    keyword_weight = CUE_WEIGHTS["keywords"]
    for token in _keyword_tokens(keywords):
        for mood in KEYWORD_MOODS.get(token, ()):
            scores[mood] += KEYWORD_CONFIDENCE * keyword_weight

    for token in _keyword_tokens(avoid_keywords):
        for mood in KEYWORD_MOODS.get(token, ()):
            scores[mood] = max(0.0, scores[mood] - 0.3)

    ranked = sorted(
        ((mood, round(score, 4)) for mood, score in scores.items()
         if score >= MIN_CONFIDENCE and is_known_mood(mood)),
        key=lambda item: item[1],
        reverse=True,
    )
    if ranked:
        logger.debug(f"Inferred moods: {ranked[:3]}")
    return ranked


def infer_mood(
    genre: Optional[str] = None,
    keywords: Iterable[str] = (),
    time_of_day: Optional[str] = None,
    season: Optional[str] = None,
) -> Optional[str]:
    """The single most likely mood, or None if no cue reaches the minimum."""
    ranked = infer_moods(genre=genre, keywords=keywords, time_of_day=time_of_day, season=season)
    return ranked[0][0] if ranked else None
