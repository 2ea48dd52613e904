"""Pytest configuration and fixtures."""

import os

import numpy as np
import pytest
from loguru import logger

from botornot.config import BotOrNotConfig, reset_config
from botornot.signatures import load_catalog
from media_builders import itxt_chunk, jpeg, png, text_chunk


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keep user config files and BOTORNOT_* variables out of the tests."""
    import botornot.config as config_module

    for key in list(os.environ):
        if key.startswith("BOTORNOT_"):
            monkeypatch.delenv(key)
    monkeypatch.setattr(config_module, "CONFIG_LOCATIONS", [tmp_path / "absent.yaml"])
    reset_config()
    yield
    reset_config()
    # the CLI enables package logging; keep it off between tests
    logger.disable("botornot")


@pytest.fixture
def catalog():
    """The bundled signature catalog."""
    return load_catalog()


@pytest.fixture
def config() -> BotOrNotConfig:
    """Default configuration."""
    return BotOrNotConfig()


@pytest.fixture
def sd_png() -> bytes:
    """PNG with an AUTOMATIC1111-style parameter block."""
    return png(text_chunk("parameters", "Steps: 20, Sampler: Euler a, CFG scale: 7, Seed: 12345"))


@pytest.fixture
def mj_png() -> bytes:
    """PNG with Midjourney command flags in an iTXt chunk."""
    return png(itxt_chunk("Description", "a lighthouse at dusk --ar 16:9 --v 6 --stylize 250"))


@pytest.fixture
def bare_jpeg() -> bytes:
    """JPEG with no metadata segments at all."""
    return jpeg()


@pytest.fixture
def photo_pixels() -> np.ndarray:
    """Noisy, colourful RGBA surface that reads as a photograph."""
    rng = np.random.default_rng(1234)
    rgb = rng.integers(0, 250, size=(300, 300, 3), dtype=np.uint8)
    alpha = np.full((300, 300, 1), 255, dtype=np.uint8)
    return np.concatenate([rgb, alpha], axis=2)


@pytest.fixture
def flat_pixels() -> np.ndarray:
    """Four flat colour blocks: a rendered, low-palette image."""
    surface = np.zeros((300, 300, 4), dtype=np.uint8)
    surface[..., 3] = 255
    surface[:150, :150, :3] = (200, 30, 30)
    surface[:150, 150:, :3] = (30, 200, 30)
    surface[150:, :150, :3] = (30, 30, 200)
    surface[150:, 150:, :3] = (120, 120, 20)
    return surface
