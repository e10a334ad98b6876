"""Phrase generators, one per template id.

Every generator is a pure function of ``(vocab, context, rng)`` returning the
list of words of the phrase. ``generate`` is the single entry point and
dispatches on ``template.id``. All randomness comes from the injected
``random.Random``, so output is reproducible under a fixed seed.
"""

import random
from typing import Callable, Dict, List, Sequence

from ..models import GenerationContext
from ..utils.logging import get_logger
from ..utils.text import capitalize, pick, singularize, to_gerund
from ..vocabulary.word_source import (
    ADJECTIVES,
    CONTEXTUAL_WORDS,
    DEFAULT_POOLS,
    GENRE_TERMS,
    LONG_WORDS,
    MUSICAL_TERMS,
    NOUNS,
    VERBS,
    WordSource,
)
from .catalog import GENRE_MODIFIERS, Template

logger = get_logger(__name__)

GeneratorFn = Callable[["Vocabulary", GenerationContext, random.Random], List[str]]

_GENERATORS: Dict[str, GeneratorFn] = {}

# Padding phrases keyed by word count; every entry has exactly that many words
_TAILS: Dict[int, Sequence[str]] = {
    1: ("Tonight", "Again", "Alone", "Together", "Still", "Anew"),
    2: ("In Silence", "Under Starlight", "Through Midnight", "Like Thunder", "At Dawn", "Once More"),
    3: ("Beyond The Horizon", "Into The Night", "Across The Water", "Under Broken Skies", "Before The Dawn"),
}


class Vocabulary:
    """Word pools for one generation call.

    Combines the word source with genre modifiers when the context names a
    genre that has them. Empty categories fall back to built-in defaults.
    """

    def __init__(self, word_source: WordSource, genre: str = None):
        self.source = word_source
        self.modifiers = GENRE_MODIFIERS.get((genre or "").lower(), {})

    def words(self, category: str) -> List[str]:
        extra = self.modifiers.get(category, [])
        base = self.source.filtered(category)
        if not base:
            base = list(DEFAULT_POOLS.get(category, ()))
        return list(extra) + base

    def choose(self, rng: random.Random, curated: Sequence[str], *categories: str, fallback: str = "") -> str:
        """Pick from curated words plus the given pools."""
        candidates = list(curated)
        for category in categories:
            candidates.extend(self.words(category))
        return pick(rng, candidates, fallback) or fallback


def generator(template_id: str):
    """Register a generator function for a template id."""
    def register(fn: GeneratorFn) -> GeneratorFn:
        _GENERATORS[template_id] = fn
        return fn
    return register


def has_generator(template_id: str) -> bool:
    return template_id in _GENERATORS


def generate(
    template: Template,
    word_source: WordSource,
    context: GenerationContext,
    rng: random.Random,
) -> str:
    """Generate a phrase from a template.

    Args:
        template: Template to run.
        word_source: Vocabulary to draw from; never mutated.
        context: Requested shape and steering axes.
        rng: Random source.

    Returns:
        The generated phrase.

    Raises:
        KeyError: If no generator is registered for ``template.id``.
    """
    fn = _GENERATORS[template.id]
    vocab = Vocabulary(word_source, context.genre)
    words = [w for w in fn(vocab, context, rng) if w]
    return " ".join(words)


def _target(template_min: int, template_max: int, context: GenerationContext) -> int:
    return max(template_min, min(template_max, context.word_count))


def third_person(verb: str) -> str:
    """Present-tense third-person form ("burn" -> "burns")."""
    lower = verb.lower()
    if lower.endswith(("s", "sh", "ch", "x", "z", "o")):
        return verb + "es"
    if lower.endswith("y") and len(lower) > 1 and lower[-2] not in "aeiou":
        return verb[:-1] + "ies"
    return verb + "s"


def fit_to_length(words: List[str], target: int, rng: random.Random, droppable: Sequence[int] = ()) -> List[str]:
    """Trim or pad a word list to exactly ``target`` words.

    Droppable positions are removed first when trimming; padding appends
    short closing phrases.
    """
    words = list(words)
    for idx in sorted(droppable, reverse=True):
        if len(words) <= target:
            break
        if idx < len(words):
            del words[idx]
    while len(words) > target:
        words.pop(-2 if len(words) > 1 else -1)
    missing = target - len(words)
    while missing > 0:
        size = min(missing, 3)
        words.extend(pick(rng, _TAILS[size]).split())
        missing -= size
    return words


# Single word

@generator("abstract_concept")
def _abstract_concept(vocab, context, rng):
    concepts = ["Paradox", "Nexus", "Zenith", "Void", "Prism", "Echo", "Flux", "Cipher",
                "Apex", "Vortex", "Enigma", "Spectrum", "Resonance", "Catalyst", "Synthesis"]
    return [capitalize(vocab.choose(rng, concepts, MUSICAL_TERMS, fallback="Echo"))]


@generator("compound_creation")
def _compound_creation(vocab, context, rng):
    prefixes = ["neo", "hyper", "ultra", "meta", "proto", "omni", "anti", "poly", "multi", "pseudo"]
    prefix = pick(rng, prefixes, "neo")
    base = vocab.choose(rng, [], NOUNS, GENRE_TERMS, MUSICAL_TERMS, fallback="wave")
    return [capitalize(prefix + base.lower())]


@generator("suffix_evolution")
def _suffix_evolution(vocab, context, rng):
    suffixes = ["ism", "ology", "esque", "onic", "atic", "morphic", "core", "wave", "sphere", "verse"]
    bases = [n for n in vocab.words(NOUNS) if len(n) < 8] + vocab.words(GENRE_TERMS)
    base = pick(rng, bases, "rhythm")
    suffix = pick(rng, suffixes, "core")
    return [capitalize(base.lower() + suffix)]


@generator("numeric_mystique")
def _numeric_mystique(vocab, context, rng):
    numbers = ["Zero", "Seven", "Eleven", "XIII", "XXIV", "404", "808", "Binary", "Infinite", "Omega", "Alpha"]
    return [pick(rng, numbers, "808")]


@generator("rare_singular")
def _rare_singular(vocab, context, rng):
    rare_words = ["Lumina", "Tempest", "Aurora", "Cosmos", "Ethereal", "Nebula", "Solaris",
                  "Vesper", "Celeste", "Astral", "Phantom", "Mirage", "Radiant", "Sublime"]
    long_words = [w for w in vocab.words(LONG_WORDS) if len(w) < 9]
    return [capitalize(pick(rng, rare_words + long_words, "Aurora"))]


# Two words

@generator("dynamic_adjective_noun")
def _dynamic_adjective_noun(vocab, context, rng):
    dynamic_adjs = ["Electric", "Sonic", "Primal", "Vital", "Raw", "Pure", "Fierce", "Wild",
                    "Blazing", "Liquid", "Crystalline", "Volatile", "Kinetic", "Magnetic"]
    powerful_nouns = ["Storm", "Bloom", "Echo", "Fire", "Wave", "Force", "Energy", "Pulse",
                      "Surge", "Rhythm", "Current", "Flow", "Impact", "Resonance"]
    adj = pick(rng, dynamic_adjs + [a for a in vocab.words(ADJECTIVES) if len(a) > 5], "Electric")
    noun = vocab.choose(rng, powerful_nouns, NOUNS, fallback="Storm")
    return [capitalize(adj), capitalize(singularize(noun))]


@generator("contrasting_elements")
def _contrasting_elements(vocab, context, rng):
    contrasts = [
        ("Fire", "Ice"), ("Silent", "Thunder"), ("Dark", "Light"), ("Smooth", "Edge"),
        ("Gentle", "Storm"), ("Bright", "Shadow"), ("Fast", "Slow"), ("High", "Low"),
        ("Ancient", "Future"), ("Natural", "Digital"), ("Warm", "Cold"), ("Soft", "Steel"),
    ]
    first, second = pick(rng, contrasts, ("Fire", "Ice"))
    return [first, second]


@generator("action_object")
def _action_object(vocab, context, rng):
    actions = ["Chasing", "Breaking", "Riding", "Crossing", "Climbing", "Diving", "Flying",
               "Dancing", "Singing", "Burning", "Flowing", "Rising", "Falling", "Spinning"]
    targets = ["Shadows", "Chains", "Thunder", "Dreams", "Stars", "Waves", "Mountains",
               "Rivers", "Clouds", "Fire", "Light", "Time", "Space", "Hearts"]
    action = pick(rng, actions + [to_gerund(v) for v in vocab.words(VERBS)], "Chasing")
    target = vocab.choose(rng, targets, NOUNS, fallback="Shadows")
    return [capitalize(action), capitalize(target)]


@generator("techno_organic")
def _techno_organic(vocab, context, rng):
    tech = ["Digital", "Cyber", "Neon", "Pixel", "Binary", "Quantum", "Neural",
            "Virtual", "Hologram", "Laser", "Circuit", "Data", "Code", "Signal"]
    organic = ["Forest", "Rain", "Garden", "Ocean", "Mountain", "River", "Desert",
               "Valley", "Meadow", "Grove", "Lake", "Storm", "Wind", "Earth"]
    return [pick(rng, tech, "Digital"), capitalize(vocab.choose(rng, organic, CONTEXTUAL_WORDS, fallback="Forest"))]


@generator("emotional_landscape")
def _emotional_landscape(vocab, context, rng):
    emotions = ["Melancholy", "Euphoric", "Restless", "Serene", "Passionate", "Nostalgic",
                "Turbulent", "Peaceful", "Intense", "Gentle", "Fierce", "Tender"]
    landscapes = ["Hills", "Valleys", "Seas", "Plains", "Peaks", "Shores", "Fields",
                  "Cliffs", "Canyons", "Meadows", "Horizons", "Depths", "Heights", "Paths"]
    emotion = pick(rng, emotions, "Melancholy")
    landscape = vocab.choose(rng, landscapes, CONTEXTUAL_WORDS, fallback="Hills")
    return [emotion, capitalize(landscape)]


@generator("temporal_concept")
def _temporal_concept(vocab, context, rng):
    times = ["Forever", "Yesterday", "Tomorrow", "Midnight", "Dawn", "Twilight",
             "Eternal", "Timeless", "Ancient", "Future", "Present", "Infinite"]
    concepts = ["Young", "Dreams", "Calling", "Memories", "Hopes", "Echoes", "Shadows",
                "Light", "Love", "Peace", "Fire", "Storm", "Rain", "Sun"]
    return [pick(rng, times, "Forever"), capitalize(vocab.choose(rng, concepts, NOUNS, fallback="Young"))]


@generator("numbered_concept")
def _numbered_concept(vocab, context, rng):
    numbers = ["Zero", "One", "Seven", "Thirteen", "Hundred", "Thousand", "Million", "First", "Last"]
    concepts = ["Sins", "Moons", "Hour", "Stars", "Dreams", "Hearts", "Souls", "Lives",
                "Chances", "Wishes", "Tears", "Smiles", "Songs", "Stories"]
    return [pick(rng, numbers, "Seven"), capitalize(vocab.choose(rng, concepts, NOUNS, fallback="Stars"))]


# Three words

@generator("classic_the_adjective_noun")
def _classic_the_adjective_noun(vocab, context, rng):
    adj = pick(rng, vocab.words(ADJECTIVES), "electric")
    noun = pick(rng, vocab.words(NOUNS), "storm")
    return ["The", capitalize(adj), capitalize(singularize(noun))]


@generator("narrative_sequence")
def _narrative_sequence(vocab, context, rng):
    subjects = ["Hearts", "Dreams", "Fire", "Stars", "Waves", "Winds", "Souls", "Eyes", "Hands", "Voices"]
    verbs = ["Beat", "Come", "Burn", "Shine", "Flow", "Dance", "Sing", "Rise", "Fall", "Call"]
    objects = ["Fast", "True", "Bright", "High", "Deep", "Strong", "Free", "Wild", "Pure", "Bold"]
    subject = vocab.choose(rng, subjects, NOUNS, fallback="Hearts")
    verb = vocab.choose(rng, verbs, VERBS, fallback="Beat")
    obj = vocab.choose(rng, objects, ADJECTIVES, fallback="Fast")
    return [capitalize(subject), capitalize(verb), capitalize(obj)]


@generator("question_format")
def _question_format(vocab, context, rng):
    question_words = ["Who", "What", "Where", "When", "Why", "How"]
    verbs = ["Are", "Is", "Were", "Was", "Do", "Did", "Can", "Will", "Should"]
    nouns = ["You", "Love", "Serious", "This", "That", "We", "They", "Time", "Life", "Hope"]
    noun = vocab.choose(rng, nouns, NOUNS, fallback="You")
    return [pick(rng, question_words, "Who"), pick(rng, verbs, "Are"), capitalize(noun)]


@generator("location_action")
def _location_action(vocab, context, rng):
    prepositions = ["Beyond", "Under", "Through", "Above", "Below", "Within", "Behind", "Across"]
    locations = ["Horizons", "Starlight", "Fire", "Water", "Mountains", "Valleys", "Skies", "Seas"]
    actions = ["Dancing", "Walking", "Running", "Flying", "Singing", "Dreaming", "Waiting", "Calling"]
    location = vocab.choose(rng, locations, CONTEXTUAL_WORDS, fallback="Starlight")
    action = pick(rng, actions + [to_gerund(v) for v in vocab.words(VERBS)], "Dancing")
    return [pick(rng, prepositions, "Beyond"), capitalize(location), capitalize(action)]


@generator("emotional_journey")
def _emotional_journey(vocab, context, rng):
    emotions = ["Love", "Joy", "Hope", "Fear", "Pain", "Peace", "Rage", "Calm", "Doubt", "Faith"]
    transitions = ["Becomes", "Turns", "Finds", "Meets", "Brings", "Takes", "Makes", "Gives"]
    outcomes = ["Pain", "Sorrow", "Light", "Dark", "Peace", "War", "Life", "Death", "Truth", "Lies"]
    emotion = pick(rng, emotions, "Love")
    outcome = vocab.choose(rng, [o for o in outcomes if o != emotion], NOUNS, fallback="Light")
    return [emotion, pick(rng, transitions, "Becomes"), capitalize(outcome)]


@generator("compound_modifier")
def _compound_modifier(vocab, context, rng):
    compounds = ["Firelight", "Moonbeam", "Stardust", "Sunlight", "Rainfall", "Snowfall", "Windstorm"]
    modifiers = ["Dancing", "Silver", "Golden", "Crystal", "Diamond", "Velvet", "Silk", "Steel"]
    nouns = ["Shadows", "Dreams", "Rain", "Snow", "Wind", "Fire", "Water", "Earth", "Sky", "Stars"]
    modifier = vocab.choose(rng, modifiers, ADJECTIVES, fallback="Silver")
    noun = vocab.choose(rng, nouns, NOUNS, fallback="Dreams")
    return [pick(rng, compounds, "Firelight"), capitalize(modifier), capitalize(noun)]


@generator("sensory_experience")
def _sensory_experience(vocab, context, rng):
    senses = ["Taste", "Feel", "Hear", "See", "Touch", "Smell", "Sense", "Know"]
    intensities = ["Sweet", "Deep", "Silent", "Loud", "Soft", "Hard", "Sharp", "Smooth"]
    experiences = ["Victory", "Rhythm", "Screams", "Colors", "Music", "Love", "Pain", "Joy"]
    intensity = vocab.choose(rng, intensities, ADJECTIVES, fallback="Deep")
    experience = vocab.choose(rng, experiences, NOUNS, fallback="Rhythm")
    return [pick(rng, senses, "Feel"), capitalize(intensity), capitalize(experience)]


# Four or more words

@generator("complete_narrative")
def _complete_narrative(vocab, context, rng):
    articles = ["The", "A", "This", "That", "Every", "Each"]
    adverbs = ["Forever", "Always", "Never", "Sometimes", "Often", "Rarely", "Softly", "Loudly"]
    adj = pick(rng, vocab.words(ADJECTIVES), "wild")
    noun = pick(rng, vocab.words(NOUNS), "heart")
    verb = pick(rng, vocab.words(VERBS), "beat")
    words = [
        pick(rng, articles, "The"),
        capitalize(adj),
        capitalize(singularize(noun)),
        capitalize(third_person(verb)),
        pick(rng, adverbs, "Forever"),
    ]
    return fit_to_length(words, _target(4, 8, context), rng, droppable=(0,))


@generator("poetic_sequence")
def _poetic_sequence(vocab, context, rng):
    prepositions = ["Through", "In", "On", "Under", "Over", "Beside", "Beyond", "Within"]
    nouns = vocab.words(NOUNS)
    first = pick(rng, nouns, "dreams")
    second = pick(rng, [n for n in nouns if n != first], "night")
    verb = pick(rng, vocab.words(VERBS), "flow")
    words = [
        capitalize(first),
        capitalize(verb),
        pick(rng, prepositions, "Through"),
        "The",
        capitalize(singularize(second)),
    ]
    target = _target(4, 6, context)
    if target > len(words):
        adj = pick(rng, vocab.words(ADJECTIVES), "silent")
        words.insert(4, capitalize(adj))
    return fit_to_length(words, target, rng, droppable=(3,))


@generator("philosophical_statement")
def _philosophical_statement(vocab, context, rng):
    concepts = ["Truth", "Love", "Hope", "Faith", "Peace", "Joy", "Light", "Time", "Life", "Death"]
    verbs = ["Speaks", "Grows", "Shines", "Burns", "Flows", "Rises", "Falls", "Lives", "Dies", "Wins"]
    modifiers = ["Louder", "Stronger", "Brighter", "Deeper", "Higher", "Faster", "Slower", "Better"]
    comparisons = ["Words", "Fear", "Darkness", "Hate", "War", "Pain", "Sorrow", "Death", "Time"]
    concept = vocab.choose(rng, concepts, NOUNS, fallback="Truth")
    verb = pick(rng, verbs + [third_person(v) for v in vocab.words(VERBS)], "Speaks")
    comparison = vocab.choose(rng, [c for c in comparisons if c != concept], NOUNS, fallback="Words")
    words = [capitalize(concept), capitalize(verb), pick(rng, modifiers, "Louder"), "Than", capitalize(comparison)]
    return fit_to_length(words, _target(5, 8, context), rng)


@generator("temporal_journey")
def _temporal_journey(vocab, context, rng):
    starts = ["Yesterday", "Dawn", "Midnight", "Twilight", "Morning", "Evening", "Today"]
    connectors = ["Breaks Into", "Flows Into", "Turns Into", "Leads To", "Fades Into", "Becomes"]
    ends = ["Tomorrow's", "Endless", "Eternal", "Infinite", "Golden", "Silver", "Crystal"]
    outcomes = ["Dream", "Day", "Night", "Light", "Hope", "Peace", "Love", "Song", "Dance"]
    outcome = vocab.choose(rng, outcomes, NOUNS, fallback="Dream")
    words = [pick(rng, starts, "Dawn")]
    words.extend(pick(rng, connectors, "Becomes").split())
    words.extend([pick(rng, ends, "Endless"), capitalize(singularize(outcome))])
    return fit_to_length(words, _target(5, 7, context), rng)


@generator("conditional_narrative")
def _conditional_narrative(vocab, context, rng):
    conditions = ["When Hearts Stop Beating", "If Dreams Could Fly", "Should Time Stand Still",
                  "Where Love Goes Deep", "While Stars Keep Shining"]
    short_outcomes = ["Love Remains", "Hope Lives", "Silence Falls", "Peace Comes"]
    long_outcomes = ["We'd Touch Stars", "We'd Dance Forever", "Hope Lives On", "Peace Will Come"]
    target = _target(6, 10, context)
    words = pick(rng, conditions, conditions[0]).split()
    outcomes = short_outcomes if target - len(words) < 3 else long_outcomes
    words.extend(pick(rng, outcomes, outcomes[0]).split())
    return fit_to_length(words, target, rng)
