"""Unit tests for configuration loading."""

import json
import os
import tempfile

import pytest

from soundsmith.config import Config, create_default_config, load_config


def _write_config(data):
    f = tempfile.NamedTemporaryFile(mode="w", suffix=".json", delete=False)
    with f:
        if isinstance(data, str):
            f.write(data)
        else:
            json.dump(data, f)
    return f.name


class TestConfigLoading:
    """Test configuration file loading."""

    def test_load_partial_config(self):
        """Missing sections keep their defaults."""
        path = _write_config({"repetition": {"word_capacity": 12}})
        try:
            config = load_config(path)
            assert config.repetition.word_capacity == 12
            assert config.repetition.template_capacity == 20
            assert config.selection.score_floor == 0.1
            assert config.mood.confidence_threshold == 0.35
        finally:
            os.unlink(path)

    def test_load_full_config(self):
        """The default dictionary round-trips to the default dataclasses."""
        path = _write_config(create_default_config())
        try:
            config = load_config(path)
            defaults = Config()
            assert config.selection == defaults.selection
            assert config.mood == defaults.mood
            assert config.repetition == defaults.repetition
            assert config.fusion == defaults.fusion
            assert config.generation.open_word_count_range == [4, 6]
        finally:
            os.unlink(path)

    def test_missing_file(self):
        """A missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config("/nonexistent/soundsmith.json")

    def test_invalid_json(self):
        """Malformed JSON raises ValueError."""
        path = _write_config("{not json")
        try:
            with pytest.raises(ValueError):
                load_config(path)
        finally:
            os.unlink(path)

    def test_env_var_resolution(self, monkeypatch):
        """${VAR} values are read from the environment."""
        monkeypatch.setenv("SOUNDSMITH_TEST_SEED", "42")
        path = _write_config({"generation": {"seed": "${SOUNDSMITH_TEST_SEED}"}})
        try:
            assert load_config(path).generation.seed == 42
        finally:
            os.unlink(path)

    def test_unset_env_var_gives_no_seed(self, monkeypatch):
        """An unset variable resolves to empty, which means no seed."""
        monkeypatch.delenv("SOUNDSMITH_TEST_SEED", raising=False)
        path = _write_config({"generation": {"seed": "${SOUNDSMITH_TEST_SEED}"}})
        try:
            assert load_config(path).generation.seed is None
        finally:
            os.unlink(path)

    def test_mood_blend_weight_cascades(self):
        """Atmosphere weights default to the mood blend weight."""
        path = _write_config({"mood": {"blend_weight": 0.3, "atmosphere": {"weather": 0.9}}})
        try:
            config = load_config(path)
            assert config.mood.atmosphere.time == 0.3
            assert config.mood.atmosphere.weather == 0.9
        finally:
            os.unlink(path)


class TestConfigValidation:
    """Test rejection of unusable values."""

    @pytest.mark.parametrize("data", [
        {"generation": {"open_word_count_range": [3, 6]}},
        {"generation": {"open_word_count_range": [6, 4]}},
        {"repetition": {"word_capacity": 0}},
        {"repetition": {"name_memory": 0}},
        {"repetition": {"overlap_fraction": 1.5}},
        {"selection": {"score_floor": 0}},
    ])
    def test_invalid_values(self, data):
        """Out-of-range values raise ValueError."""
        path = _write_config(data)
        try:
            with pytest.raises(ValueError):
                load_config(path)
        finally:
            os.unlink(path)
