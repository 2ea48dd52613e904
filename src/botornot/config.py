"""Configuration management for botornot.

Supports loading configuration from:
1. Environment variables (BOTORNOT_*)
2. Config file (~/.botornot/config.yaml)
3. Default values

Example config file (~/.botornot/config.yaml):
    fetch:
      max_file_size_mb: 50
      timeout_seconds: 30
    parser:
      header_scan_bytes: 65536
      max_chunks: 1000
    pixels:
      sampling_density: 50
      quantization_levels: 16
    scoring:
      decision_threshold: 25
      cgi_color_threshold: 480
      cgi_gradient_threshold: 0.38
      definitive_color_floor: 50
"""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from loguru import logger

# Config file search locations (in priority order)
CONFIG_LOCATIONS = [
    Path.home() / ".botornot" / "config.yaml",
    Path.home() / ".config" / "botornot" / "config.yaml",
    Path(".botornot.yaml"),
]


@dataclass(frozen=True)
class FetchConfig:
    """Byte source configuration."""

    max_file_size_mb: int = 50
    timeout_seconds: int = 30
    user_agent: str = "botornot"

    @property
    def max_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024


@dataclass(frozen=True)
class ParserConfig:
    """Container traversal limits."""

    header_scan_bytes: int = 65536
    max_chunks: int = 1000
    max_inflate_bytes: int = 1024 * 1024
    max_box_depth: int = 5


@dataclass(frozen=True)
class PixelConfig:
    """Pixel sampling parameters."""

    surface_size: int = 300
    sampling_density: int = 50  # grid points per side, roughly
    quantization_levels: int = 16  # per channel, power of two
    alpha_threshold: int = 128
    white_threshold: int = 250
    smooth_threshold: int = 30  # Manhattan distance
    neutral_unique_colors: int = 1000
    neutral_gradient_ratio: float = 0.3

    def __post_init__(self) -> None:
        levels = self.quantization_levels
        if levels < 2 or levels > 256 or levels & (levels - 1):
            raise ValueError(f"quantization_levels must be a power of two in 2..256, got {levels}")
        if self.sampling_density < 1:
            raise ValueError("sampling_density must be positive")


@dataclass(frozen=True)
class ScoringConfig:
    """Evidence weights, thresholds and confidence bands."""

    high_points: int = 25
    medium_points: int = 15
    low_points: int = 8
    multiplicity_bonus: int = 3
    multiplicity_cap: int = 15
    max_signature_points: int = 80

    max_pixel_points: int = 30
    cgi_color_threshold: int = 480
    cgi_gradient_threshold: float = 0.38
    color_weight: float = 0.6
    definitive_color_floor: int = 50

    max_url_points: int = 20
    url_host_points: tuple[int, int, int] = (15, 10, 5)  # high, medium, low
    url_filename_points: tuple[int, int, int] = (10, 6, 3)

    decision_threshold: int = 25
    high_band: int = 75
    medium_band: int = 50
    low_band: int = 25

    def __post_init__(self) -> None:
        if not self.high_band >= self.medium_band >= self.low_band >= 0:
            raise ValueError("confidence bands must be monotonic (high >= medium >= low >= 0)")


@dataclass(frozen=True)
class BotOrNotConfig:
    """Main configuration for botornot."""

    fetch: FetchConfig = field(default_factory=FetchConfig)
    parser: ParserConfig = field(default_factory=ParserConfig)
    pixels: PixelConfig = field(default_factory=PixelConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)


def _load_yaml_config() -> dict[str, Any]:
    """Load configuration from the first YAML file found."""
    for config_path in CONFIG_LOCATIONS:
        if config_path.exists():
            try:
                with open(config_path) as f:
                    data = yaml.safe_load(f)
                    return data if isinstance(data, dict) else {}
            except (OSError, yaml.YAMLError) as e:
                logger.warning("Ignoring unreadable config file {}: {}", config_path, e)
                continue
    return {}


def _get_env(key: str, default: Any = None) -> Any:
    """Get environment variable with BOTORNOT_ prefix."""
    return os.environ.get(f"BOTORNOT_{key}", default)


def _parse_bool(value: str | None) -> bool | None:
    """Parse boolean from string."""
    if value is None:
        return None
    return value.lower() in ("true", "1", "yes", "on")


def _build_section(cls: type, section: str, file_config: dict[str, Any]) -> Any:
    """Build one config dataclass: env var > file value > default.

    Environment keys are ``BOTORNOT_<SECTION>_<FIELD>``, e.g.
    ``BOTORNOT_SCORING_DECISION_THRESHOLD``.
    """
    values = file_config.get(section) or {}
    kwargs: dict[str, Any] = {}
    for f in dataclasses.fields(cls):
        raw = _get_env(f"{section}_{f.name}".upper())
        if raw is None:
            raw = values.get(f.name)
        if raw is None:
            continue
        default = f.default
        if isinstance(default, bool):
            kwargs[f.name] = raw if isinstance(raw, bool) else _parse_bool(str(raw))
        elif isinstance(default, int):
            kwargs[f.name] = int(raw)
        elif isinstance(default, float):
            kwargs[f.name] = float(raw)
        elif isinstance(default, tuple):
            items = raw.split(",") if isinstance(raw, str) else raw
            kwargs[f.name] = tuple(int(x) for x in items)
        else:
            kwargs[f.name] = str(raw)
    return cls(**kwargs)


def load_config() -> BotOrNotConfig:
    """Load configuration from file and environment variables.

    Priority (highest first):
    1. Environment variables (BOTORNOT_*)
    2. Config file (~/.botornot/config.yaml)
    3. Default values
    """
    file_config = _load_yaml_config()

    return BotOrNotConfig(
        fetch=_build_section(FetchConfig, "fetch", file_config),
        parser=_build_section(ParserConfig, "parser", file_config),
        pixels=_build_section(PixelConfig, "pixels", file_config),
        scoring=_build_section(ScoringConfig, "scoring", file_config),
    )


# Global config instance (lazy loaded)
_config: BotOrNotConfig | None = None


def get_config() -> BotOrNotConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Reset the global configuration (for testing)."""
    global _config
    _config = None
