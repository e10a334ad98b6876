"""Word source normalization.

Turns a raw ``category -> list of strings`` mapping into a ``WordSource``
holding, per category, a case-normalized raw list and a quality-filtered
list. Filtered lists are always subsets of the raw lists.

Usage:
    source, stats = normalize_word_source({"nouns": ["Storm", "storms", "Fire"]})
    source.filtered("nouns")   # ["storm", "fire"]
    source.pool("verbs")       # built-in defaults; the category was empty
"""

import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from ..errors import MalformedWordSource
from ..utils.logging import get_logger
from ..utils.text import stem

logger = get_logger(__name__)


ADJECTIVES = "adjectives"
NOUNS = "nouns"
VERBS = "verbs"
MUSICAL_TERMS = "musical_terms"
GENRE_TERMS = "genre_terms"
CONTEXTUAL_WORDS = "contextual_words"
LONG_WORDS = "long_words"

STANDARD_CATEGORIES = (
    ADJECTIVES,
    NOUNS,
    VERBS,
    MUSICAL_TERMS,
    GENRE_TERMS,
    CONTEXTUAL_WORDS,
    LONG_WORDS,
)

MIN_WORD_LENGTH = 3
MAX_WORD_LENGTH = 12

_VALID_WORD_RE = re.compile(r"^[a-z]+(-[a-z]+)?$")

# Never appropriate in a band or song name
INAPPROPRIATE_WORDS = frozenset({
    "bosom", "breast", "buttock", "groin", "loin", "nipple", "genital", "bowel",
    "intestine", "colon", "rectum", "bladder", "uterus", "ovary", "testicle",
    "meat", "beef", "pork", "chicken", "bacon", "sausage", "cheese", "butter",
    "yogurt", "custard", "pudding", "gravy", "broth",
    "disease", "syndrome", "disorder", "infection", "inflammation",
    "diarrhea", "constipation", "nausea", "vomit", "mucus", "phlegm", "pus",
    "hither", "thither", "whither", "betwixt", "erstwhile", "heretofore",
    "henceforth", "wherefore", "aforesaid", "notwithstanding", "inasmuch",
    "moist", "ooze", "fester", "excrete", "secrete", "perspire", "belch",
})

# Technical vocabulary that reads as jargon rather than music
JARGON_WORDS = frozenset({
    "data", "system", "user", "file", "test", "admin", "config", "error",
    "null", "undefined", "function", "object", "array", "string", "boolean",
    "default", "example", "sample", "temp", "tmp", "var", "const", "mgmt",
    "misc", "util", "src", "dst", "ref", "ptr", "idx",
    "electron", "proton", "neutron", "molecule", "isotope", "enzyme", "protein",
    "bacteria", "coefficient", "algorithm", "database", "interface", "protocol",
    "bandwidth", "megabyte", "kilobyte", "decimal", "hexadecimal", "configure",
    "initialize", "parameter", "variable", "constant", "compile", "execute",
    "debug", "optimize", "validate", "authenticate", "scalar", "tensor",
    "gradient", "derivative", "integral", "polynomial", "exponential",
    "logarithm", "factorial", "permutation", "probability", "statistics",
    "asymptote", "orthogonal",
})

# Used when a category is missing or filters down to nothing
DEFAULT_POOLS: Dict[str, Tuple[str, ...]] = {
    ADJECTIVES: (
        "electric", "silent", "wild", "golden", "broken", "crimson", "hollow",
        "velvet", "restless", "burning", "distant", "frozen", "savage", "gentle",
        "neon", "midnight", "silver", "fading", "radiant", "lonely",
    ),
    NOUNS: (
        "storm", "echo", "shadow", "river", "heart", "fire", "dream", "mountain",
        "thunder", "ocean", "lantern", "mirror", "horizon", "ember", "garden",
        "signal", "harbor", "compass", "canyon", "wolf",
    ),
    VERBS: (
        "burn", "rise", "fall", "run", "break", "shine", "drift", "call", "wander",
        "ignite", "chase", "howl", "fade", "bloom", "roar", "echo",
    ),
    MUSICAL_TERMS: (
        "rhythm", "melody", "harmony", "chord", "tempo", "groove", "cadence",
        "chorus", "refrain", "anthem", "ballad", "overture", "crescendo", "riff",
    ),
    GENRE_TERMS: (
        "rock", "jazz", "folk", "soul", "blues", "wave", "core", "punk", "funk",
        "pop", "metal", "disco",
    ),
    CONTEXTUAL_WORDS: (
        "highway", "city", "desert", "forest", "harbor", "valley", "skyline",
        "prairie", "island", "alley", "coast", "meadow",
    ),
    LONG_WORDS: (
        "wanderer", "labyrinth", "avalanche", "sanctuary", "lightning",
        "afterglow", "starlight", "heartland", "undertow", "moonrise",
    ),
}


@dataclass
class NormalizationStats:
    """Statistics from word source normalization."""
    words_seen: int = 0
    raw_kept: int = 0
    filtered_kept: int = 0
    duplicates_removed: int = 0
    rejected: Counter = field(default_factory=Counter)

    def merge(self, other: "NormalizationStats") -> None:
        self.words_seen += other.words_seen
        self.raw_kept += other.raw_kept
        self.filtered_kept += other.filtered_kept
        self.duplicates_removed += other.duplicates_removed
        self.rejected.update(other.rejected)

    def to_dict(self) -> Dict:
        return {
            "words_seen": self.words_seen,
            "raw_kept": self.raw_kept,
            "filtered_kept": self.filtered_kept,
            "duplicates_removed": self.duplicates_removed,
            "rejected": dict(self.rejected),
        }


@dataclass(frozen=True)
class WordList:
    """Raw and quality-filtered variants of one category."""
    raw: Tuple[str, ...] = ()
    filtered: Tuple[str, ...] = ()


def _rejection_reason(word: str) -> Optional[str]:
    """Reason a raw word is excluded from the filtered tier, if any."""
    if not _VALID_WORD_RE.match(word):
        return "characters"
    if len(word) < MIN_WORD_LENGTH or len(word) > MAX_WORD_LENGTH:
        return "length"
    if word in INAPPROPRIATE_WORDS:
        return "inappropriate"
    if word in JARGON_WORDS:
        return "jargon"
    return None


def normalize_word_list(
    category: str,
    values: Iterable,
) -> Tuple[WordList, NormalizationStats]:
    """Normalize one category.

    Args:
        category: Category name, used in errors and logs.
        values: Raw entries. Must be a list (or tuple) of strings.

    Returns:
        Tuple of (word list, stats).

    Raises:
        MalformedWordSource: If ``values`` is not a list of strings.
    """
    if values is None:
        return WordList(), NormalizationStats()
    if isinstance(values, (str, bytes)) or not isinstance(values, (list, tuple)):
        raise MalformedWordSource(category, f"expected a list, got {type(values).__name__}")

    bad = [v for v in values if not isinstance(v, str)]
    if bad:
        raise MalformedWordSource(category, "entries must be strings", offending=bad[:5])

    stats = NormalizationStats(words_seen=len(values))

    raw: List[str] = []
    seen = set()
    for value in values:
        word = value.strip().lower()
        if not word:
            stats.rejected["empty"] += 1
            continue
        if word in seen:
            stats.duplicates_removed += 1
            continue
        seen.add(word)
        raw.append(word)

    filtered: List[str] = []
    stems_seen = set()
    for word in raw:
        reason = _rejection_reason(word)
        if reason:
            stats.rejected[reason] += 1
            continue
        key = stem(word)
        if key in stems_seen:
            stats.duplicates_removed += 1
            continue
        stems_seen.add(key)
        filtered.append(word)

    stats.raw_kept = len(raw)
    stats.filtered_kept = len(filtered)
    return WordList(raw=tuple(raw), filtered=tuple(filtered)), stats


class WordSource:
    """Named, categorized vocabulary available to templates.

    Instances are read-only once built. Lookups of absent categories return
    empty lists, never None.
    """

    def __init__(self, lists: Optional[Mapping[str, WordList]] = None, name: str = "default"):
        self.name = name
        self._lists: Dict[str, WordList] = dict(lists or {})

    def categories(self) -> List[str]:
        return sorted(self._lists)

    def raw(self, category: str) -> List[str]:
        word_list = self._lists.get(category)
        return list(word_list.raw) if word_list else []

    def filtered(self, category: str) -> List[str]:
        word_list = self._lists.get(category)
        return list(word_list.filtered) if word_list else []

    def pool(self, category: str) -> List[str]:
        """Filtered words for a category, or the built-in defaults when empty."""
        words = self.filtered(category)
        if words:
            return words
        return list(DEFAULT_POOLS.get(category, ()))

    def is_empty(self) -> bool:
        return not any(wl.filtered for wl in self._lists.values())

    def size(self) -> int:
        return sum(len(wl.filtered) for wl in self._lists.values())

    def merged(self, extra: Mapping[str, Iterable[str]], name: Optional[str] = None) -> "WordSource":
        """Return a new source with ``extra`` words added in front of each category.

        Args:
            extra: Category to additional raw words.
            name: Name for the new source.

        Returns:
            New WordSource; this one is left untouched.
        """
        combined: Dict[str, List[str]] = {c: self.raw(c) for c in self._lists}
        for category, words in extra.items():
            combined[category] = list(words) + combined.get(category, [])
        source, _ = normalize_word_source(combined, name=name or self.name)
        return source

    def to_dict(self, filtered: bool = True) -> Dict[str, List[str]]:
        if filtered:
            return {c: self.filtered(c) for c in self._lists}
        return {c: self.raw(c) for c in self._lists}

    def __repr__(self) -> str:
        return f"WordSource(name={self.name!r}, categories={len(self._lists)}, words={self.size()})"


def normalize_word_source(
    mapping: Optional[Mapping[str, Iterable]],
    name: str = "default",
) -> Tuple[WordSource, NormalizationStats]:
    """Normalize a ``category -> words`` mapping into a WordSource.

    Standard categories missing from the mapping are created empty so that
    lookups never need a None check.

    Args:
        mapping: Raw mapping. None is treated as empty.
        name: Name of the resulting source.

    Returns:
        Tuple of (word source, aggregate stats).

    Raises:
        MalformedWordSource: If the mapping itself or any category is malformed.
    """
    if mapping is None:
        mapping = {}
    if not isinstance(mapping, Mapping):
        raise MalformedWordSource("<root>", f"expected a mapping, got {type(mapping).__name__}")

    lists: Dict[str, WordList] = {}
    total = NormalizationStats()
    for category, values in mapping.items():
        word_list, stats = normalize_word_list(str(category), values)
        lists[str(category)] = word_list
        total.merge(stats)

    for category in STANDARD_CATEGORIES:
        lists.setdefault(category, WordList())

    if total.words_seen:
        logger.debug(
            f"Normalized word source '{name}': {total.filtered_kept}/{total.words_seen} words kept",
            extra_data={"rejected": dict(total.rejected), "duplicates": total.duplicates_removed},
        )
    return WordSource(lists, name=name), total


def default_word_source() -> WordSource:
    """Word source built from the built-in default pools."""
    source, _ = normalize_word_source({c: list(words) for c, words in DEFAULT_POOLS.items()}, name="builtin")
    return source
