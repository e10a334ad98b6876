"""Shared fixtures for soundsmith tests."""

import random
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest

from soundsmith.config import Config, RepetitionConfig
from soundsmith.selection.session import SelectionSession
from soundsmith.vocabulary.repetition_guard import RepetitionGuard
from soundsmith.vocabulary.word_source import normalize_word_source


class FakeClock:
    """Manually advanced clock for decay tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


SAMPLE_WORDS = {
    "adjectives": [
        "electric", "hollow", "crimson", "silent", "golden", "restless", "velvet",
        "frozen", "wild", "distant", "burning", "midnight", "broken", "lunar",
    ],
    "nouns": [
        "thunder", "river", "ember", "shadow", "engine", "orchard", "lantern",
        "signal", "harbor", "comet", "mirror", "canyon", "tide", "wolf",
    ],
    "verbs": ["burn", "drift", "chase", "break", "rise", "fall", "wander", "shine", "howl", "fade"],
    "musical_terms": ["chord", "rhythm", "melody", "tempo", "harmony", "cadence", "riff", "echo"],
    "genre_terms": ["amplifier", "distortion", "backbeat", "overdrive"],
    "contextual_words": ["highway", "neon", "storm", "dawn", "dust", "static"],
    "long_words": ["constellation", "reverberation", "wanderlust", "kaleidoscope"],
}


@pytest.fixture
def rng():
    """Seeded random source."""
    return random.Random(1234)


@pytest.fixture
def config():
    """Default configuration."""
    return Config()


@pytest.fixture
def word_source():
    """Populated word source."""
    source, _ = normalize_word_source(SAMPLE_WORDS, name="fixture")
    return source


@pytest.fixture
def clock():
    """Injectable clock starting at t=1000."""
    return FakeClock()


@pytest.fixture
def guard(clock):
    """Fresh repetition guard on the fake clock."""
    return RepetitionGuard(RepetitionConfig(), clock=clock)


@pytest.fixture
def session(rng, guard):
    """Fresh selection session with a seeded random source."""
    return SelectionSession(rng=rng, guard=guard)
