"""Text helpers shared by templates, the repetition guard and fusion."""

import random
import re
from functools import lru_cache
from typing import Iterable, List, Optional, Sequence, TypeVar

from nltk.stem import PorterStemmer

T = TypeVar("T")

_stemmer = PorterStemmer()

# Words that never count toward repetition checks
FUNCTION_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "from", "up", "about", "into", "through", "during",
    "before", "after", "above", "below", "between", "among", "under", "over",
    "is", "are", "was", "were", "be", "been", "being", "have", "has", "had",
    "do", "does", "did", "will", "would", "could", "should", "may", "might",
    "can", "must", "shall", "this", "that", "these", "those", "i", "you",
    "he", "she", "it", "we", "they", "me", "him", "her", "us", "them",
    "my", "your", "his", "its", "our", "their", "than", "when", "where",
    "what", "who", "why", "how", "if", "while", "meets",
})

IRREGULAR_PLURALS = {
    "men": "man",
    "women": "woman",
    "children": "child",
    "teeth": "tooth",
    "feet": "foot",
    "mice": "mouse",
    "geese": "goose",
    "people": "person",
    "criteria": "criterion",
    "phenomena": "phenomenon",
    "media": "medium",
    "crises": "crisis",
    "vertices": "vertex",
    "matrices": "matrix",
    "indices": "index",
    "nebulae": "nebula",
    "radii": "radius",
    "fungi": "fungus",
    "cacti": "cactus",
    "nuclei": "nucleus",
}

# Words ending in "s" that are not plurals
_SINGULAR_S = frozenset({
    "bass", "blues", "chaos", "cosmos", "genesis", "lotus", "nexus", "canvas",
    "bias", "atlas", "abyss", "glass", "moss", "kiss", "focus", "chorus",
    "status", "virus", "iris", "oasis", "analysis", "synthesis", "paradox",
    "always", "perhaps", "news", "physics", "vibes", "ours",
})

_ADJECTIVE_SUFFIXES = ("ing", "ed", "ive", "al", "ic", "ous", "ful", "less", "ish", "ary", "able", "ible", "ent", "ant")

_TOKEN_RE = re.compile(r"[\s\-_]+")
_NON_ALPHA_RE = re.compile(r"[^a-z']")
_VOWEL_GROUP_RE = re.compile(r"[aeiouy]+")


def capitalize(word: str) -> str:
    """Capitalize the first letter, leave the rest untouched."""
    if not word:
        return ""
    return word[0].upper() + word[1:]


def title_case(phrase: str) -> str:
    """Capitalize every whitespace-separated word of a phrase."""
    return " ".join(capitalize(w) for w in phrase.split())


def singularize(word: str) -> str:
    """Reduce a plural noun to its singular form using suffix rules."""
    if not word:
        return word
    lower = word.lower()
    if lower in IRREGULAR_PLURALS:
        single = IRREGULAR_PLURALS[lower]
        return capitalize(single) if word[0].isupper() else single
    if lower in _SINGULAR_S:
        return word
    if lower.endswith("ies") and len(lower) > 4:
        return word[:-3] + "y"
    if lower.endswith("ves") and len(lower) > 4:
        return word[:-3] + "f"
    if lower.endswith(("ches", "shes", "sses", "xes", "zes")) and len(lower) > 4:
        return word[:-2]
    if lower.endswith("s") and not lower.endswith(("ss", "us", "is")) and len(lower) > 3:
        return word[:-1]
    return word


def to_gerund(verb: str) -> str:
    """Build the "-ing" form of a verb."""
    if not verb:
        return verb
    lower = verb.lower()
    if lower.endswith("ing") and len(lower) > 5:
        return verb
    if lower.endswith("ie"):
        return verb[:-2] + "ying"
    if lower.endswith("e") and not lower.endswith(("ee", "ye", "oe")) and len(lower) > 2:
        return verb[:-1] + "ing"
    # Double the final consonant for short consonant-vowel-consonant verbs
    if (
        len(lower) == 3
        and lower[-1] not in "aeiouwxy"
        and lower[-2] in "aeiou"
        and lower[-3] not in "aeiou"
    ):
        return verb + verb[-1] + "ing"
    return verb + "ing"


def split_words(name: str) -> List[str]:
    """Split a name into lowercase alphabetic words of length >= 2."""
    words = []
    for raw in _TOKEN_RE.split(name.lower()):
        word = _NON_ALPHA_RE.sub("", raw).strip("'")
        if len(word) >= 2:
            words.append(word)
    return words


def count_words(name: str) -> int:
    """Count whitespace-separated words in a name."""
    return len([w for w in name.split() if w])


@lru_cache(maxsize=4096)
def stem(word: str) -> str:
    """Porter stem of a lowercase word."""
    return _stemmer.stem(word.lower())


def significant_words(name: str, min_length: int = 4) -> List[str]:
    """Words that matter for repetition: long enough and not function words."""
    return [
        w for w in split_words(name)
        if len(w) >= min_length and w not in FUNCTION_WORDS
    ]


def looks_like_adjective(word: str) -> bool:
    """Suffix heuristic for adjectives; no grammatical parsing."""
    lower = word.lower()
    if " " in lower:
        return False
    return len(lower) > 4 and lower.endswith(_ADJECTIVE_SUFFIXES)


def syllable_count(word: str) -> int:
    """Approximate syllables by counting vowel groups."""
    lower = word.lower()
    groups = _VOWEL_GROUP_RE.findall(lower)
    count = len(groups)
    if lower.endswith("e") and count > 1 and not lower.endswith(("le", "ee")):
        count -= 1
    return max(1, count)


def pick(rng: random.Random, items: Sequence[T], default: Optional[T] = None) -> Optional[T]:
    """Pick a random item, or ``default`` when the sequence is empty."""
    if not items:
        return default
    return items[rng.randrange(len(items))]


def unique(items: Iterable[str]) -> List[str]:
    """De-duplicate case-insensitively, keeping the first spelling."""
    seen = set()
    result = []
    for item in items:
        key = item.lower()
        if key not in seen:
            seen.add(key)
            result.append(item)
    return result
