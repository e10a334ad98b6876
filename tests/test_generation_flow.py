"""End-to-end tests for the generation flow: request mapping in, names out."""

import json
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from soundsmith import GenerationDriver, GenerationRequest
from soundsmith.generation import GenerationSession
from soundsmith.utils.text import count_words

WORDS = {
    "adjectives": ["Electric", "hollow", "crimson", "silent", "golden", "restless", "velvet", "frozen", "wild"],
    "nouns": ["thunder", "river", "ember", "shadow", "engine", "orchard", "lantern", "signal", "harbor", "comet"],
    "verbs": ["burn", "drift", "chase", "break", "rise", "wander", "shine"],
    "musical_terms": ["chord", "rhythm", "melody", "tempo", "cadence"],
}


def _run(data, seed=17):
    driver = GenerationDriver()
    request = GenerationRequest.from_dict(data)
    return driver.generate(request, WORDS, GenerationSession.create(request, seed=seed))


def test_band_names_for_rock():
    """A plain rock request returns the default count of two-word names."""
    results = _run({"type": "band", "genre": "rock"})
    assert len(results) == 4
    assert all(count_words(r.name) == 2 for r in results)
    assert all(r.name == r.name.strip() and r.name for r in results)


def test_song_names_with_mood_and_atmosphere():
    """Mood and atmosphere steer selection without breaking the shape."""
    results = _run({
        "type": "song",
        "mood": "melancholic",
        "word_count": 3,
        "count": 5,
        "atmosphere": {"time_of_day": "midnight", "season": "autumn"},
    })
    assert len(results) == 5
    assert all(count_words(r.name) == 3 for r in results)
    modes = {r.metadata.get("selection_mode") for r in results if r.metadata["path"] == "template"}
    assert modes <= {"mood", "traditional"}


def test_open_length_request():
    """'4+' yields names of four to six words."""
    results = _run({"type": "song", "word_count": "4+", "count": 3})
    assert len(results) == 3
    assert all(4 <= count_words(r.name) <= 6 for r in results)


def test_fusion_request():
    """Fusion requests return names within one word of the target."""
    results = _run({"genre": "rock", "secondary_genre": "classical", "word_count": 2, "count": 3})
    assert len(results) == 3
    for result in results:
        if result.metadata["path"] == "fusion":
            assert abs(count_words(result.name) - 2) <= 1
            assert result.metadata["secondary_genre"] == "classical"


def test_malformed_words_fall_back():
    """A malformed word source still produces names."""
    driver = GenerationDriver()
    request = GenerationRequest.from_dict({"count": 2})
    results = driver.generate(request, {"adjectives": ["ok", 42]})
    assert len(results) == 2
    assert results[0].metadata["fallback_reason"] == "MalformedWordSource"


def test_results_serialize():
    """Results convert to JSON-serialisable dicts."""
    results = _run({"genre": "electronic", "secondary_genre": "jazz", "count": 2})
    payload = json.dumps([r.to_dict() for r in results])
    assert json.loads(payload)[0]["name"] == results[0].name


def test_cli_generate_json(monkeypatch, tmp_path, capsys):
    """The CLI prints generated names as JSON."""
    import cli

    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(sys, "argv", ["soundsmith", "generate", "--genre", "jazz", "--words", "2",
                                      "--count", "3", "--seed", "4", "--json"])
    cli.main()
    output = json.loads(capsys.readouterr().out)
    assert len(output) == 3
    assert all("name" in item and "metadata" in item for item in output)


def test_cli_genres(monkeypatch, capsys):
    """The genres command ranks compatible partners."""
    import cli

    monkeypatch.setattr(sys, "argv", ["soundsmith", "genres", "jazz", "--limit", "3"])
    cli.main()
    out = capsys.readouterr().out
    assert "Most compatible with jazz:" in out
    assert "Mean compatibility" in out
