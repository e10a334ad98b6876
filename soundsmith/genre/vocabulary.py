"""Per-genre vocabulary profiles and pair blend rules.

Every term is a single lowercase token so that fused names can be counted
word by word.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .compatibility import normalize_genre


@dataclass(frozen=True)
class GenreVocabulary:
    """Characteristic vocabulary of one genre."""
    genre: str
    core_terms: Tuple[str, ...]
    instrumental_terms: Tuple[str, ...]
    cultural_terms: Tuple[str, ...]
    emotional_terms: Tuple[str, ...]
    technical_terms: Tuple[str, ...]
    metaphorical_terms: Tuple[str, ...]
    intensity_modifiers: Tuple[str, ...]
    characteristic_adjectives: Tuple[str, ...]

    def nouns(self) -> List[str]:
        """Concrete and figurative nouns: core, instrumental, technical, metaphorical."""
        return list(dict.fromkeys(
            self.core_terms + self.instrumental_terms + self.technical_terms + self.metaphorical_terms
        ))

    def adjectives(self) -> List[str]:
        return list(dict.fromkeys(
            self.characteristic_adjectives + self.emotional_terms + self.cultural_terms + self.intensity_modifiers
        ))

    def all_terms(self) -> List[str]:
        return list(dict.fromkeys(self.nouns() + self.adjectives()))


def _v(genre, core, instrumental, cultural, emotional, technical, metaphorical, intensity, adjectives):
    return GenreVocabulary(
        genre=genre,
        core_terms=tuple(core.split()),
        instrumental_terms=tuple(instrumental.split()),
        cultural_terms=tuple(cultural.split()),
        emotional_terms=tuple(emotional.split()),
        technical_terms=tuple(technical.split()),
        metaphorical_terms=tuple(metaphorical.split()),
        intensity_modifiers=tuple(intensity.split()),
        characteristic_adjectives=tuple(adjectives.split()),
    )


GENRE_VOCABULARIES: Dict[str, GenreVocabulary] = {v.genre: v for v in (
    _v("electronic",
       "synth digital pulse wave circuit voltage frequency signal",
       "synthesizer sequencer sampler vocoder oscillator",
       "futuristic virtual synthetic artificial automated",
       "hypnotic transcendent euphoric ethereal cold",
       "waveform modulation compression reverb delay",
       "machine android mainframe neon grid",
       "deep minimal progressive ambient hard",
       "pulsing rhythmic processed filtered layered"),
    _v("rock",
       "stone thunder power energy storm fire steel iron",
       "guitar drums bass amplifier feedback",
       "rebellion freedom youth revolution anthem legend outlaw",
       "passionate raw intense explosive restless",
       "riff solo chord tempo rhythm",
       "highway engine locomotive wildfire",
       "heavy hard classic loud",
       "driving pounding soaring crushing blazing thunderous"),
    _v("jazz",
       "swing bebop harmony rhythm groove session",
       "saxophone trumpet piano vibes brass",
       "sophisticated artistic refined elegant",
       "smooth cool mellow nuanced expressive soulful",
       "improvisation syncopation modulation polyrhythm",
       "conversation dialogue journey exploration",
       "smooth free hot",
       "swinging flowing improvised harmonic melodic"),
    _v("hip-hop",
       "flow beats rhythm groove cipher culture movement",
       "turntables sampler mic scratch loop",
       "street urban real underground conscious",
       "raw honest chill hard",
       "sampling breaks freestyle mixing",
       "battle kingdom empire tribe crew collective",
       "rough clean smooth",
       "flowing percussive lyrical dynamic"),
    _v("folk",
       "roots heritage ballad hearth community story",
       "banjo fiddle harmonica mandolin dulcimer",
       "traditional ancestral rural generational",
       "nostalgic peaceful reflective intimate heartfelt",
       "fingerpicking strumming modal pentatonic",
       "river mountain valley forest meadow campfire",
       "gentle quiet soft",
       "acoustic organic natural homespun"),
    _v("classical",
       "symphony chamber opera concerto sonata composition",
       "orchestra violin cello flute oboe",
       "refined elegant formal academic",
       "dramatic romantic triumphant contemplative",
       "orchestration counterpoint fugue overture",
       "cathedral palace garden landscape",
       "grand majestic lyrical",
       "orchestral symphonic structured baroque"),
    _v("indie",
       "bedroom tape static garage basement",
       "guitar keys cassette pedal",
       "independent alternative underground authentic",
       "wistful awkward tender bittersweet",
       "lofi reverb fuzz jangle",
       "postcard polaroid suburb lighthouse",
       "quiet hazy loose",
       "dreamy fuzzy jangly shimmering"),
    _v("blues",
       "crossroads delta soul shuffle levee",
       "harmonica slide dobro juke",
       "southern rural weary",
       "lonesome mournful aching soulful",
       "turnaround bend vamp",
       "railroad midnight whiskey river",
       "low slow deep",
       "smoky gritty dusty worn"),
    _v("country",
       "honky twang prairie ranch frontier",
       "fiddle steel banjo dobro",
       "rural western southern hometown",
       "lonesome proud heartsick",
       "twostep yodel harmony",
       "highway porch tailgate rodeo",
       "easy slow",
       "dusty golden rugged backroad"),
    _v("metal",
       "iron doom steel chaos abyss inferno",
       "riff blastbeat distortion",
       "apocalyptic ancient forbidden",
       "furious brutal relentless grim",
       "breakdown tremolo shred",
       "fortress serpent throne tempest",
       "heavy extreme",
       "crushing searing molten savage"),
    _v("pop",
       "melody hook chorus sparkle spotlight",
       "synth keys vocals",
       "mainstream catchy popular",
       "bright sweet dizzy giddy",
       "anthem refrain bridge",
       "heartbeat starlight candy glitter",
       "light bubbly",
       "shiny glossy radiant electric"),
)}


@dataclass(frozen=True)
class BlendRule:
    """Curated vocabulary blend for one genre pair."""
    name: str
    genres: Tuple[str, str]
    strategy: str
    weights: Tuple[float, float]
    bridges: Tuple[str, ...]
    prefixes: Tuple[str, ...]
    suffixes: Tuple[str, ...]
    examples: Tuple[str, ...] = ()


BLEND_RULES: Tuple[BlendRule, ...] = (
    BlendRule("ElectroJazz Vocabulary Fusion", ("electronic", "jazz"), "synthesize", (0.6, 0.4),
              ("improvisation", "complexity", "sophistication", "modulation", "harmony"),
              ("electro", "cyber", "digital", "neo", "synthetic"),
              ("jazz", "swing", "bebop", "fusion", "flow"),
              ("Digital Bebop", "Cyber Swing", "Synthetic Jazz")),
    BlendRule("TechnoFolk Vocabulary Fusion", ("folk", "electronic"), "alternate", (0.5, 0.5),
              ("storytelling", "tradition", "culture", "community", "heritage", "roots"),
              ("digital", "cyber", "electronic", "synthetic", "virtual"),
              ("folk", "tales", "stories", "roots", "heritage", "tradition"),
              ("Digital Folk", "Electronic Heritage", "Cyber Ballad")),
    BlendRule("Symphonic Rock Vocabulary Fusion", ("rock", "classical"), "merge", (0.55, 0.45),
              ("power", "drama", "intensity", "composition", "orchestration", "dynamics"),
              ("symphonic", "orchestral", "classical", "neo", "progressive"),
              ("rock", "symphony", "concerto", "opera", "suite", "movement"),
              ("Symphonic Thunder", "Orchestral Storm", "Rock Symphony")),
    BlendRule("Jazz Hop Vocabulary Fusion", ("hip-hop", "jazz"), "merge", (0.5, 0.5),
              ("improvisation", "rhythm", "flow", "expression", "culture", "artistry"),
              ("jazz", "smooth", "neo", "contemporary", "fusion"),
              ("hop", "flow", "beats", "rhythm", "groove", "cipher"),
              ("Jazz Flow", "Smooth Cipher", "Bebop Beats")),
)

# Keywords a genre lends to explanations and synergy matching
GENRE_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    "rock": ("power", "energy", "electric", "thunder"),
    "electronic": ("digital", "synth", "pulse", "circuit"),
    "jazz": ("swing", "improvisation", "harmony", "bebop"),
    "hip-hop": ("flow", "beats", "rhythm", "cipher"),
    "folk": ("roots", "heritage", "acoustic", "story"),
    "classical": ("symphony", "orchestral", "composition", "elegant"),
    "indie": ("alternative", "independent", "authentic", "dreamy"),
    "blues": ("soul", "delta", "crossroads", "lonesome"),
    "country": ("prairie", "twang", "highway", "western"),
    "metal": ("iron", "doom", "steel", "inferno"),
    "pop": ("melody", "hook", "bright", "catchy"),
}


def get_vocabulary(genre: Optional[str]) -> Optional[GenreVocabulary]:
    return GENRE_VOCABULARIES.get(normalize_genre(genre) or "")


def get_blend_rule(genre_a: str, genre_b: str) -> Optional[BlendRule]:
    """Blend rule for an unordered pair, if one is curated."""
    pair = {normalize_genre(genre_a), normalize_genre(genre_b)}
    for rule in BLEND_RULES:
        if set(rule.genres) == pair:
            return rule
    return None
