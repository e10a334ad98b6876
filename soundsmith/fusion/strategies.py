"""Fusion name strategies.

Every strategy has the same signature, ``(FusionInputs) -> Optional[FusionCandidate]``,
and returns None when it cannot produce a name. The engine tries the
strategies returned by ``methods_for`` in order until one yields a usable name.
"""

import random
from dataclasses import dataclass, field
from typing import Callable, Dict, FrozenSet, List, Optional, Sequence, Tuple

from ..genre.compatibility import CompatibilityEntry
from ..genre.vocabulary import get_vocabulary
from ..models import GenerationContext, NameType
from ..templates.library import TemplateLibrary
from ..utils.logging import get_logger
from ..utils.text import capitalize, pick, split_words, title_case
from ..vocabulary.word_source import WordSource
from .vocabulary_fusion import FusedVocabulary

logger = get_logger(__name__)

# Keywords per synergy concept named in compatibility entries
SYNERGY_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "energy": ("power", "electric", "dynamic", "vibrant"),
    "rhythm": ("beat", "pulse", "flow", "groove"),
    "harmony": ("chord", "melody", "harmonic", "tonal"),
    "innovation": ("new", "modern", "creative", "fresh"),
    "tradition": ("classic", "heritage", "authentic", "original"),
}

CONTRAST_PAIRS: Tuple[Tuple[str, str], ...] = (
    ("organic", "synthetic"),
    ("traditional", "futuristic"),
    ("acoustic", "electronic"),
    ("simple", "complex"),
    ("raw", "refined"),
)

# Stand-in words when the fused vocabulary has nothing for a contrast concept
CONTRAST_TERMS: Dict[str, Tuple[str, ...]] = {
    "organic": ("organic", "wooden", "earthen", "natural"),
    "synthetic": ("synthetic", "digital", "circuit", "chrome"),
    "traditional": ("traditional", "ancestral", "heritage", "vintage"),
    "futuristic": ("futuristic", "orbital", "quantum", "neon"),
    "acoustic": ("acoustic", "unplugged", "hollow", "wooden"),
    "electronic": ("electronic", "wired", "modular", "voltage"),
    "simple": ("simple", "plain", "bare", "humble"),
    "complex": ("complex", "intricate", "fractal", "labyrinth"),
    "raw": ("raw", "rough", "gritty", "feral"),
    "refined": ("refined", "polished", "velvet", "gilded"),
}


@dataclass
class FusionInputs:
    """Everything a strategy may draw on for one attempt."""
    primary_genre: str
    secondary_genre: str
    word_count: int
    name_type: NameType
    vocabulary: FusedVocabulary
    word_source: WordSource
    compatibility: CompatibilityEntry
    rng: random.Random
    library: TemplateLibrary
    select_template: Callable[[str, int], Optional[object]]
    mood: Optional[str] = None
    cultural_sensitivity: bool = False


@dataclass
class FusionCandidate:
    """A name produced by one strategy."""
    name: str
    method: str
    pattern_sources: List[str] = field(default_factory=list)
    hybrid_elements: List[str] = field(default_factory=list)


Strategy = Callable[[FusionInputs], Optional[FusionCandidate]]


def _fit(words: List[str], target: int, pool: Sequence[str], rng: random.Random) -> List[str]:
    """Trim to ``target`` words or pad from ``pool`` without repeating a word."""
    words = list(words[:target])
    used = {w.lower() for w in words}
    candidates = [w for w in pool if " " not in w and w.lower() not in used]
    rng.shuffle(candidates)
    while len(words) < target and candidates:
        word = candidates.pop()
        if word.lower() not in used:
            words.append(word)
            used.add(word.lower())
    return words


def _hybrids_in(name: str, vocabulary: FusedVocabulary) -> List[str]:
    lower = name.lower()
    return [h for h in vocabulary.hybrid_terms if h.lower() in lower]


def _candidate(words: List[str], method: str, inputs: FusionInputs,
               sources: Optional[List[str]] = None) -> Optional[FusionCandidate]:
    if not words:
        return None
    name = title_case(" ".join(words))
    return FusionCandidate(
        name=name,
        method=method,
        pattern_sources=sources or [method],
        hybrid_elements=_hybrids_in(name, inputs.vocabulary),
    )


# Pair-specific fusion patterns

def _matching(words: Sequence[str], fragments: Sequence[str]) -> List[str]:
    return [w for w in words if any(f in w.lower() for f in fragments)]


def _electronic_jazz_improvisation(vocab: FusedVocabulary, rng: random.Random) -> List[str]:
    electronic = pick(rng, _matching(vocab.all_words() + vocab.hybrid_terms,
                                     ("digital", "cyber", "synth", "electro", "virtual")), "digital")
    jazz = pick(rng, _matching(vocab.all_words(), ("jazz", "swing", "bebop", "harmon", "groove")), "swing")
    hybrid = pick(rng, [h for h in vocab.hybrid_terms if " " not in h], "fusion")
    return [electronic, jazz, hybrid]


def _electro_harmonic_fusion(vocab: FusedVocabulary, rng: random.Random) -> List[str]:
    harmonic = pick(rng, ("harmonic", "chord", "modal", "tonal", "melodic"))
    process = pick(rng, ("synthesis", "processing", "modulation", "algorithm"))
    return [harmonic, process]


def _digital_folklore(vocab: FusedVocabulary, rng: random.Random) -> List[str]:
    digital = pick(rng, ("digital", "electronic", "cyber", "virtual", "synthetic"))
    tradition = pick(rng, ("folk", "heritage", "tradition", "ballad", "tale"))
    return [digital, tradition]


def _organic_synthetic_bridge(vocab: FusedVocabulary, rng: random.Random) -> List[str]:
    organic = pick(rng, ("organic", "natural", "acoustic", "wooden", "earthen"))
    bridge = pick(rng, ("bridge", "fusion", "synthesis", "meeting", "crossing"))
    synthetic = pick(rng, ("synthetic", "digital", "circuit", "algorithm", "code"))
    return [organic, bridge, synthetic]


def _symphonic_power(vocab: FusedVocabulary, rng: random.Random) -> List[str]:
    form = pick(rng, ("symphonic", "orchestral", "operatic", "baroque"))
    power = pick(rng, _matching(vocab.all_words(), ("thunder", "storm", "fire", "steel", "power")), "thunder")
    return [form, power]


def _rock_concerto(vocab: FusedVocabulary, rng: random.Random) -> List[str]:
    energy = pick(rng, ("electric", "amplified", "thunderous", "blazing"))
    form = pick(rng, ("concerto", "overture", "sonata", "suite", "requiem"))
    return [energy, form]


def _bebop_cipher(vocab: FusedVocabulary, rng: random.Random) -> List[str]:
    technique = pick(rng, ("bebop", "swing", "modal", "smooth", "blue"))
    culture = pick(rng, ("cipher", "flow", "beats", "breaks", "crew"))
    return [technique, culture]


def _improvised_flow(vocab: FusedVocabulary, rng: random.Random) -> List[str]:
    concept = pick(rng, ("improvised", "syncopated", "freestyle", "late-night"))
    flow = pick(rng, _matching(vocab.all_words(), ("flow", "groove", "rhythm", "beat")), "flow")
    return [concept, flow, pick(rng, ("session", "collective", "sessions", "theory"))]


FUSION_PATTERNS: Dict[FrozenSet[str], Tuple[Tuple[str, Callable], ...]] = {
    frozenset({"electronic", "jazz"}): (
        ("electronic_jazz_improvisation", _electronic_jazz_improvisation),
        ("electro_harmonic_fusion", _electro_harmonic_fusion),
    ),
    frozenset({"folk", "electronic"}): (
        ("digital_folklore", _digital_folklore),
        ("organic_synthetic_bridge", _organic_synthetic_bridge),
    ),
    frozenset({"rock", "classical"}): (
        ("symphonic_power", _symphonic_power),
        ("rock_concerto", _rock_concerto),
    ),
    frozenset({"hip-hop", "jazz"}): (
        ("bebop_cipher", _bebop_cipher),
        ("improvised_flow", _improvised_flow),
    ),
}


# Strategies

def pattern_synthesis(inputs: FusionInputs) -> Optional[FusionCandidate]:
    """Use a pre-authored fusion pattern for the genre pair."""
    patterns = FUSION_PATTERNS.get(frozenset({inputs.primary_genre, inputs.secondary_genre}))
    if not patterns:
        return None
    pattern_id, build = pick(inputs.rng, patterns)
    words = build(inputs.vocabulary, inputs.rng)
    if len(words) > inputs.word_count + 1 or len(words) < inputs.word_count - 1:
        words = _fit(words, inputs.word_count, inputs.vocabulary.primary_words, inputs.rng)
    return _candidate(words, "pattern_synthesis", inputs, [pattern_id])


def pattern_interweaving(inputs: FusionInputs) -> Optional[FusionCandidate]:
    """Generate from one template per genre and interleave the words."""
    part_count = max(1, inputs.word_count - 1)
    parts = []
    sources = []
    for genre in (inputs.primary_genre, inputs.secondary_genre):
        template = inputs.select_template(genre, part_count)
        if template is None:
            return None
        context = GenerationContext(word_count=part_count, name_type=inputs.name_type,
                                    genre=genre, mood=inputs.mood)
        phrase = inputs.library.generate(template, inputs.word_source, context, inputs.rng)
        words = phrase.split()
        if not words:
            return None
        parts.append(words)
        sources.append(template.id)

    first, second = parts
    woven: List[str] = []
    for i in range(max(len(first), len(second))):
        if i < len(first):
            woven.append(first[i])
        if i < len(second):
            woven.append(second[i])
    return _candidate(woven[:inputs.word_count], "pattern_interweaving", inputs, sources)


def vocabulary_fusion(inputs: FusionInputs) -> Optional[FusionCandidate]:
    """Assemble a name straight from the fused vocabulary."""
    vocab = inputs.vocabulary
    rng = inputs.rng
    words: List[str] = []
    used_hybrids: List[str] = []

    if vocab.hybrid_terms and rng.random() < 0.6:
        hybrid = pick(rng, vocab.hybrid_terms)
        if len(hybrid.split()) <= inputs.word_count:
            words.extend(hybrid.split())
            used_hybrids.append(hybrid)

    while len(words) < inputs.word_count:
        pool = vocab.primary_words if not words else vocab.primary_words + vocab.secondary_words
        options = [w for w in pool if w not in words and " " not in w]
        if not options:
            break
        words.append(pick(rng, options))

    candidate = _candidate(words, "vocabulary_fusion", inputs)
    if candidate is not None:
        candidate.hybrid_elements = list(dict.fromkeys(used_hybrids + candidate.hybrid_elements))
    return candidate


def synergistic_terms(entry: CompatibilityEntry, vocab: FusedVocabulary) -> List[str]:
    """Vocabulary words that echo the concepts named in the pair's synergies."""
    text = " ".join(entry.synergies).lower()
    keywords = [k for concept, words in SYNERGY_KEYWORDS.items() if concept in text for k in words]
    if not keywords:
        return []
    pool = vocab.all_words() + [h for h in vocab.hybrid_terms if " " not in h]
    return [w for w in dict.fromkeys(pool) if any(k in w.lower() for k in keywords)]


def complementary_fusion(inputs: FusionInputs) -> Optional[FusionCandidate]:
    """Favour words matching the pair's synergy keywords."""
    terms = synergistic_terms(inputs.compatibility, inputs.vocabulary)
    if not terms:
        return default_fusion(inputs)
    terms = list(terms)
    inputs.rng.shuffle(terms)
    words = _fit(terms, inputs.word_count, inputs.vocabulary.primary_words, inputs.rng)
    return _candidate(words, "complementary_fusion", inputs)


def contrasting_fusion(inputs: FusionInputs) -> Optional[FusionCandidate]:
    """Pair words from opposite ends of a semantic contrast."""
    rng = inputs.rng
    side_a, side_b = pick(rng, CONTRAST_PAIRS)
    pool = inputs.vocabulary.all_words()
    first = pick(rng, [w for w in pool if side_a in w.lower()]) or pick(rng, CONTRAST_TERMS[side_a])
    second = pick(rng, [w for w in pool if side_b in w.lower()]) or pick(rng, CONTRAST_TERMS[side_b])
    words = _fit([first, second], inputs.word_count, inputs.vocabulary.primary_words, rng)
    return _candidate(words, "contrasting_fusion", inputs, [f"{side_a}_{side_b}"])


def hybrid_construction(inputs: FusionInputs) -> Optional[FusionCandidate]:
    """Use a conceptual blend, or a cultural fusion phrase, as the whole name."""
    def fits(phrase: str) -> bool:
        return abs(len(phrase.split()) - inputs.word_count) <= 1

    blends = [b for b in inputs.vocabulary.conceptual_blends if fits(b)]
    if blends:
        blend = pick(inputs.rng, blends)
        return FusionCandidate(name=title_case(blend), method="hybrid_construction",
                               pattern_sources=["conceptual_construction"], hybrid_elements=[blend])

    if inputs.cultural_sensitivity:
        return None
    fusions = [f for f in inputs.vocabulary.cultural_fusions if fits(f)]
    if fusions:
        fusion = pick(inputs.rng, fusions)
        return FusionCandidate(name=fusion, method="hybrid_construction",
                               pattern_sources=["cultural_construction"], hybrid_elements=[fusion])
    return None


def gentle_infusion(inputs: FusionInputs) -> Optional[FusionCandidate]:
    """Primary-genre template with a single secondary-genre word swapped in."""
    template = inputs.select_template(inputs.primary_genre, inputs.word_count)
    if template is None:
        return None
    context = GenerationContext(word_count=inputs.word_count, name_type=inputs.name_type,
                                genre=inputs.primary_genre, mood=inputs.mood)
    words = inputs.library.generate(template, inputs.word_source, context, inputs.rng).split()
    secondary = get_vocabulary(inputs.secondary_genre)
    if not words or secondary is None:
        return None
    accent = pick(inputs.rng, secondary.core_terms + secondary.characteristic_adjectives)
    words[-1] = capitalize(accent)
    return _candidate(words, "gentle_infusion", inputs, [template.id])


def default_fusion(inputs: FusionInputs) -> Optional[FusionCandidate]:
    """Two words from the fused vocabulary; always produces a name."""
    vocab = inputs.vocabulary
    rng = inputs.rng
    first = pick(rng, vocab.primary_words) or pick(rng, vocab.secondary_words) or "fusion"
    words = [first]
    if inputs.word_count > 1:
        rest = [w for w in vocab.primary_words if w != first] or [w for w in vocab.secondary_words if w != first]
        words.append(pick(rng, rest, "blend"))
    words = _fit(words, inputs.word_count, vocab.all_words(), rng)
    return _candidate(words, "default_fusion", inputs)


STRATEGIES: Dict[str, Strategy] = {
    "pattern_synthesis": pattern_synthesis,
    "pattern_interweaving": pattern_interweaving,
    "vocabulary_fusion": vocabulary_fusion,
    "complementary_fusion": complementary_fusion,
    "contrasting_fusion": contrasting_fusion,
    "hybrid_construction": hybrid_construction,
    "gentle_infusion": gentle_infusion,
    "default_fusion": default_fusion,
}

INTENSITY_METHODS: Dict[str, Tuple[str, ...]] = {
    "experimental": ("pattern_synthesis", "vocabulary_fusion", "hybrid_construction"),
    "bold": ("pattern_interweaving", "vocabulary_fusion", "hybrid_construction"),
    "moderate": ("pattern_interweaving", "vocabulary_fusion", "pattern_synthesis"),
    "subtle": ("gentle_infusion", "vocabulary_fusion"),
}


def methods_for(intensity: str, fusion_style: str) -> List[str]:
    """Ordered strategy names for a fusion intensity and pair style."""
    methods = list(INTENSITY_METHODS.get(intensity, INTENSITY_METHODS["moderate"]))
    if fusion_style == "complement":
        methods.insert(0, "complementary_fusion")
    elif fusion_style == "contrast":
        methods.insert(0, "contrasting_fusion")
    methods.append("default_fusion")
    return methods


def run_strategies(
    methods: Sequence[str],
    inputs: FusionInputs,
    min_length: int = 3,
    accept: Optional[Callable[[FusionCandidate], bool]] = None,
) -> Optional[FusionCandidate]:
    """First usable candidate, trying methods in order.

    A candidate is usable when it has at least ``min_length`` characters and,
    if ``accept`` is given, the predicate returns True for it. Otherwise the
    next method gets its turn.
    """
    for method in methods:
        candidate = STRATEGIES[method](inputs)
        if candidate is None or len(candidate.name) < min_length or not split_words(candidate.name):
            logger.debug(f"Fusion method {method} produced nothing usable")
            continue
        if accept is not None and not accept(candidate):
            logger.debug(f"Fusion method {method} produced stale '{candidate.name}'")
            continue
        return candidate
    return None
