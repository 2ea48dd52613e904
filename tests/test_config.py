"""Tests for configuration loading."""

import pytest

import botornot.config as config_module
from botornot.config import (
    BotOrNotConfig,
    PixelConfig,
    ScoringConfig,
    get_config,
    load_config,
    reset_config,
)


def test_defaults():
    """Test defaults when there is no file and no environment."""
    config = load_config()

    assert config == BotOrNotConfig()
    assert config.scoring.decision_threshold == 25
    assert config.pixels.sampling_density == 50
    assert config.fetch.max_bytes == 50 * 1024 * 1024


def test_yaml_file(monkeypatch, tmp_path):
    """Test values are read from the first YAML file found."""
    path = tmp_path / "config.yaml"
    path.write_text("scoring:\n  decision_threshold: 40\nparser:\n  max_chunks: 10\n")
    monkeypatch.setattr(config_module, "CONFIG_LOCATIONS", [tmp_path / "absent.yaml", path])

    config = load_config()

    assert config.scoring.decision_threshold == 40
    assert config.parser.max_chunks == 10
    assert config.pixels == PixelConfig()


def test_env_overrides_file(monkeypatch, tmp_path):
    """Test BOTORNOT_* variables win over the file."""
    path = tmp_path / "config.yaml"
    path.write_text("scoring:\n  decision_threshold: 40\n")
    monkeypatch.setattr(config_module, "CONFIG_LOCATIONS", [path])
    monkeypatch.setenv("BOTORNOT_SCORING_DECISION_THRESHOLD", "30")
    monkeypatch.setenv("BOTORNOT_SCORING_CGI_GRADIENT_THRESHOLD", "0.5")
    monkeypatch.setenv("BOTORNOT_SCORING_URL_HOST_POINTS", "12,8,4")
    monkeypatch.setenv("BOTORNOT_FETCH_USER_AGENT", "tester")

    config = load_config()

    assert config.scoring.decision_threshold == 30
    assert config.scoring.cgi_gradient_threshold == 0.5
    assert config.scoring.url_host_points == (12, 8, 4)
    assert config.fetch.user_agent == "tester"


def test_unreadable_file_ignored(monkeypatch, tmp_path):
    """Test a broken YAML file falls back to the defaults."""
    path = tmp_path / "config.yaml"
    path.write_text("scoring: [unclosed\n")
    monkeypatch.setattr(config_module, "CONFIG_LOCATIONS", [path])

    assert load_config() == BotOrNotConfig()


def test_get_config_is_cached(monkeypatch):
    """Test the global config is built once until reset."""
    first = get_config()
    monkeypatch.setenv("BOTORNOT_SCORING_DECISION_THRESHOLD", "60")

    assert get_config() is first
    reset_config()
    assert get_config().scoring.decision_threshold == 60


def test_bands_must_be_monotonic():
    """Test inverted confidence bands are rejected."""
    with pytest.raises(ValueError):
        ScoringConfig(high_band=40, medium_band=50)


@pytest.mark.parametrize("levels", [0, 1, 10, 512])
def test_quantization_levels_validated(levels):
    """Test quantization levels must be a power of two in range."""
    with pytest.raises(ValueError):
        PixelConfig(quantization_levels=levels)


def test_sampling_density_validated():
    """Test the sampling density must be positive."""
    with pytest.raises(ValueError):
        PixelConfig(sampling_density=0)
