"""Template catalog.

Templates are immutable records. The phrase-building logic for each one
lives in ``generators.py`` and is looked up by template id.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Tuple


@dataclass(frozen=True)
class Template:
    """A parameterized phrase-generation rule.

    Attributes:
        id: Unique identifier; also the generator dispatch key.
        category: Semantic category used for context matching.
        subcategory: Finer-grained tag used for diversity tracking.
        weight: Prior probability mass.
        min_word_count: Smallest output length this template can produce.
        max_word_count: Largest output length this template can produce.
        pattern: Human-readable slot pattern.
        description: One-line description.
        examples: Documented example outputs.
        applicable_genres: Genres this template is restricted to; None means universal.
        applicable_moods: Moods this template is restricted to; None means universal.
    """
    id: str
    category: str
    subcategory: str
    weight: float
    min_word_count: int
    max_word_count: int
    pattern: str
    description: str
    examples: Tuple[str, ...] = ()
    applicable_genres: Optional[FrozenSet[str]] = None
    applicable_moods: Optional[FrozenSet[str]] = None

    def covers(self, word_count: int) -> bool:
        return self.min_word_count <= word_count <= self.max_word_count

    @property
    def is_range(self) -> bool:
        return self.min_word_count != self.max_word_count

    @property
    def word_count_key(self) -> str:
        if self.is_range:
            return f"{self.min_word_count}-{self.max_word_count}"
        return str(self.min_word_count)

    def allows_genre(self, genre: Optional[str]) -> bool:
        return not genre or self.applicable_genres is None or genre.lower() in self.applicable_genres

    def allows_mood(self, mood: Optional[str]) -> bool:
        return not mood or self.applicable_moods is None or mood.lower() in self.applicable_moods


def _t(id, category, subcategory, weight, min_wc, max_wc, pattern, description, examples,
       genres=None, moods=None) -> Template:
    return Template(
        id=id,
        category=category,
        subcategory=subcategory,
        weight=weight,
        min_word_count=min_wc,
        max_word_count=max_wc,
        pattern=pattern,
        description=description,
        examples=tuple(examples),
        applicable_genres=frozenset(genres) if genres else None,
        applicable_moods=frozenset(moods) if moods else None,
    )


SINGLE_WORD_TEMPLATES: Tuple[Template, ...] = (
    _t("abstract_concept", "conceptual", "abstract", 0.25, 1, 1,
       "{concept}", "Single abstract concept words",
       ["Paradox", "Nexus", "Zenith", "Void"]),
    _t("compound_creation", "linguistic", "compound", 0.3, 1, 1,
       "{prefix}{base}", "Created compound words with prefixes",
       ["Neowave", "Hypercore", "Metasound"]),
    _t("suffix_evolution", "linguistic", "morphology", 0.2, 1, 1,
       "{base}{suffix}", "Words with evolved suffixes",
       ["Beatology", "Soundism", "Rhythmcore"]),
    _t("numeric_mystique", "symbolic", "numeric", 0.15, 1, 1,
       "{number}", "Meaningful numbers and codes",
       ["XIII", "808", "Binary", "Infinite"],
       genres=["electronic", "metal", "hip-hop", "indie", "rock", "punk", "pop"]),
    _t("rare_singular", "vocabulary", "rare", 0.1, 1, 1,
       "{rare_word}", "Rare but accessible words",
       ["Lumina", "Tempest", "Aurora", "Cosmos"]),
)

TWO_WORD_TEMPLATES: Tuple[Template, ...] = (
    _t("dynamic_adjective_noun", "descriptive", "quality", 0.2, 2, 2,
       "{dynamic_adjective} {powerful_noun}", "Dynamic adjectives with powerful nouns",
       ["Electric Storm", "Sonic Bloom", "Primal Echo"]),
    _t("contrasting_elements", "conceptual", "contrast", 0.15, 2, 2,
       "{element1} {element2}", "Contrasting or complementary elements",
       ["Fire Ice", "Silent Thunder", "Dark Light"]),
    _t("action_object", "narrative", "action", 0.18, 2, 2,
       "{action_verb} {target_noun}", "Action verbs with target objects",
       ["Chasing Shadows", "Breaking Chains", "Riding Thunder"]),
    _t("techno_organic", "fusion", "tech_nature", 0.12, 2, 2,
       "{tech_element} {organic_element}", "Technology fused with nature",
       ["Digital Forest", "Cyber Rain", "Neon Garden"],
       genres=["electronic", "indie", "pop", "rock", "jazz", "folk", "hip-hop", "metal"]),
    _t("emotional_landscape", "emotional", "landscape", 0.15, 2, 2,
       "{emotion} {landscape}", "Emotions paired with landscapes",
       ["Melancholy Hills", "Euphoric Valleys", "Restless Seas"]),
    _t("temporal_concept", "temporal", "time", 0.1, 2, 2,
       "{time_element} {concept}", "Time-based concepts",
       ["Forever Young", "Yesterday Dreams", "Tomorrow Calling"]),
    _t("numbered_concept", "symbolic", "enumerated", 0.1, 2, 2,
       "{number} {concept}", "Numbers with meaningful concepts",
       ["Seven Sins", "Thirteen Moons", "Zero Hour"]),
)

THREE_WORD_TEMPLATES: Tuple[Template, ...] = (
    _t("classic_the_adjective_noun", "traditional", "band_classic", 0.25, 3, 3,
       "The {adjective} {noun}", 'Classic "The [Adjective] [Noun]" band pattern',
       ["The Electric Storm", "The Broken Hearts", "The Rising Sun"]),
    _t("narrative_sequence", "narrative", "story", 0.2, 3, 3,
       "{subject} {verb} {object}", "Simple narrative sequences",
       ["Hearts Beat Fast", "Dreams Come True", "Fire Burns Bright"]),
    _t("question_format", "interrogative", "question", 0.15, 3, 3,
       "{question_word} {verb} {noun}", "Question-based patterns",
       ["Who Are You", "Where Is Love", "Why So Serious"]),
    _t("location_action", "spatial", "place_action", 0.15, 3, 3,
       "{preposition} {location} {action}", "Location-based actions",
       ["Beyond Horizons Dancing", "Under Starlight Dancing", "Through Fire Walking"]),
    _t("emotional_journey", "emotional", "progression", 0.12, 3, 3,
       "{emotion} {transition} {outcome}", "Emotional progression patterns",
       ["Love Becomes Pain", "Joy Turns Sorrow", "Hope Finds Light"]),
    _t("compound_modifier", "linguistic", "compound", 0.08, 3, 3,
       "{compound_word} {modifier} {noun}", "Compound words with modifiers",
       ["Firelight Dancing Shadows", "Moonbeam Silver Dreams", "Stardust Golden Rain"]),
    _t("sensory_experience", "sensory", "perception", 0.05, 3, 3,
       "{sense} {intensity} {experience}", "Sensory perception patterns",
       ["Taste Sweet Victory", "Feel Deep Rhythm", "Hear Silent Screams"]),
)

FOUR_PLUS_WORD_TEMPLATES: Tuple[Template, ...] = (
    _t("complete_narrative", "narrative", "story", 0.3, 4, 8,
       "{article} {adjective} {noun} {verb} {adverb}", "Complete narrative sentences",
       ["The Wild Heart Beats Forever", "A Broken Dream Shines Bright"]),
    _t("poetic_sequence", "poetic", "verse", 0.25, 4, 6,
       "{noun} {verb} {preposition} {article} {noun}", "Poetic sequences with natural flow",
       ["Dreams Flow Through the Night", "Love Burns in the Dark"]),
    _t("philosophical_statement", "philosophical", "wisdom", 0.2, 5, 8,
       "{concept} {verb} {modifier} Than {comparison}", "Philosophical or wisdom-based statements",
       ["Truth Speaks Louder Than Words", "Love Grows Stronger Than Fear"]),
    _t("temporal_journey", "temporal", "journey", 0.15, 5, 7,
       "{time_start} {connector} {time_end} {outcome}", "Temporal journey patterns",
       ["Yesterday Becomes Tomorrow's Dream", "Dawn Breaks Into Endless Day"]),
    _t("conditional_narrative", "conditional", "if_then", 0.1, 6, 10,
       "{condition} {outcome}", "Conditional narrative structures",
       ["When Hearts Stop Beating Love Remains", "If Dreams Could Fly We'd Touch Stars"],
       moods=["melancholic", "romantic", "nostalgic", "peaceful", "uplifting", "mysterious", "dark"]),
)

ALL_TEMPLATES: Tuple[Template, ...] = (
    SINGLE_WORD_TEMPLATES
    + TWO_WORD_TEMPLATES
    + THREE_WORD_TEMPLATES
    + FOUR_PLUS_WORD_TEMPLATES
)


# Genre-flavoured words merged into the word pools when a genre is requested
GENRE_MODIFIERS: Dict[str, Dict[str, List[str]]] = {
    "rock": {
        "adjectives": ["raw", "wild", "electric", "fierce", "bold", "heavy", "hard", "rough", "loud", "strong"],
        "nouns": ["thunder", "storm", "fire", "steel", "stone", "mountain", "lightning", "power", "force", "energy"],
        "verbs": ["rock", "roll", "smash", "crash", "bang", "roar", "scream", "shake", "break", "burn"],
        "themes": ["rebellion", "freedom", "power", "energy", "raw_emotion"],
    },
    "jazz": {
        "adjectives": ["smooth", "cool", "blue", "mellow", "sweet", "sophisticated", "elegant", "rich", "deep", "velvet"],
        "nouns": ["note", "rhythm", "harmony", "melody", "tempo", "groove", "soul", "spirit", "heart", "blues"],
        "verbs": ["swing", "flow", "improvise", "glide", "weave", "dance", "sing", "play", "feel", "express"],
        "themes": ["improvisation", "sophistication", "emotion", "soul", "expression"],
    },
    "electronic": {
        "adjectives": ["digital", "synthetic", "electric", "neon", "cyber", "virtual", "binary", "quantum", "neural", "holographic"],
        "nouns": ["code", "signal", "frequency", "wave", "pulse", "circuit", "system", "matrix", "network", "grid"],
        "verbs": ["process", "generate", "transmit", "upload", "download", "stream", "sync", "connect", "pulse", "loop"],
        "themes": ["technology", "future", "digital", "synthetic", "artificial"],
    },
    "folk": {
        "adjectives": ["ancient", "wise", "simple", "pure", "natural", "gentle", "peaceful", "earthy", "rustic", "traditional"],
        "nouns": ["story", "tale", "song", "ballad", "legend", "myth", "memory", "heritage", "root", "branch"],
        "verbs": ["tell", "sing", "remember", "share", "pass", "keep", "honor", "preserve", "celebrate", "cherish"],
        "themes": ["tradition", "storytelling", "heritage", "nature", "simplicity"],
    },
    "pop": {
        "adjectives": ["bright", "catchy", "fun", "happy", "upbeat", "colorful", "sparkling", "shining", "glowing", "radiant"],
        "nouns": ["star", "dream", "love", "heart", "life", "world", "sky", "sun", "moon", "rainbow"],
        "verbs": ["shine", "glow", "sparkle", "dance", "sing", "love", "dream", "hope", "wish", "celebrate"],
        "themes": ["accessibility", "mainstream", "catchy", "memorable", "uplifting"],
    },
}
