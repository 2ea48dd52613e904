"""Signature catalog loading."""

from __future__ import annotations

import json
import re
from functools import lru_cache
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator

from botornot.models import PatternEntry, SignatureEntry

DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "signatures.json"

# Entries shorter than this are too ambiguous for substring matching
MIN_PATTERN_LENGTH = 3


def _compile(pattern: str) -> re.Pattern:
    try:
        return re.compile(pattern)
    except re.error as e:
        raise ValueError(f"invalid regular expression {pattern!r}: {e}") from e


class SignatureCatalog(BaseModel):
    """Immutable table of AI-tool fingerprints.

    Attributes:
        entries: Text signatures matched as case-insensitive substrings
        parameter_tokens: Tokens of a Stable Diffusion style parameter block
        parameter_threshold: Distinct tokens needed to call it a parameter block
        midjourney_flags: Regular expressions for Midjourney command flags
        definitive_tools: Tools whose high-confidence match alone is decisive
        c2pa_ai_generators: Claim-generator substrings naming AI tools
        url_hosts: Host suffixes of AI hosting services
        filename_patterns: Regular expressions for generator download names
    """

    model_config = ConfigDict(frozen=True)

    version: int = 1
    entries: tuple[SignatureEntry, ...] = ()
    parameter_tokens: tuple[str, ...] = ()
    parameter_threshold: int = Field(default=2, ge=1)
    midjourney_flags: tuple[str, ...] = ()
    definitive_tools: frozenset[str] = frozenset()
    c2pa_ai_generators: tuple[PatternEntry, ...] = ()
    url_hosts: tuple[PatternEntry, ...] = ()
    filename_patterns: tuple[PatternEntry, ...] = ()

    @field_validator("midjourney_flags")
    @classmethod
    def _check_flag_regexes(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        for pattern in v:
            _compile(pattern)
        return v

    @field_validator("filename_patterns")
    @classmethod
    def _check_filename_regexes(cls, v: tuple[PatternEntry, ...]) -> tuple[PatternEntry, ...]:
        for entry in v:
            _compile(entry.pattern)
        return v

    @property
    def text_entries(self) -> list[SignatureEntry]:
        """Entries long enough to be matched."""
        return [e for e in self.entries if len(e.pattern) >= MIN_PATTERN_LENGTH]

    def is_definitive(self, tool: str) -> bool:
        return tool.lower() in self.definitive_tools


def _read_catalog(path: Path) -> SignatureCatalog:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    catalog = SignatureCatalog.model_validate(data)
    logger.debug("Loaded {} signature entries from {}", len(catalog.entries), path)
    return catalog


@lru_cache(maxsize=None)
def _load_cached(path: str) -> SignatureCatalog:
    return _read_catalog(Path(path))


def load_catalog(path: str | Path | None = None) -> SignatureCatalog:
    """Load a signature catalog (the bundled one by default).

    Each file is read and validated once per process; later calls return
    the same immutable instance.

    Raises:
        OSError: If the file cannot be read
        pydantic.ValidationError: If the file is not a valid catalog
    """
    target = Path(path) if path is not None else DEFAULT_CATALOG_PATH
    return _load_cached(str(target.resolve()))
