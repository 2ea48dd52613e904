"""Signature catalog entries and match results."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator

_RANKS = {
    "error": -2,
    "blocked": -1,
    "none": 0,
    "low": 1,
    "medium": 2,
    "high": 3,
}


class Confidence(str, Enum):
    """Confidence tiers.

    Catalog entries and matches only use LOW/MEDIUM/HIGH; analysis results
    may also be NONE, or ERROR/BLOCKED when analysis could not run.
    """

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    ERROR = "error"
    BLOCKED = "blocked"

    @property
    def rank(self) -> int:
        """Ordinal strength (higher is stronger)."""
        return _RANKS[self.value]


class EntryCategory(str, Enum):
    """What kind of string a catalog entry is."""

    TOOL = "tool"  # explicit generator name, always high
    VENDOR = "vendor"  # company/service names, tier as declared
    GENERIC = "generic"  # "generated", "synthetic"..., always low
    DECLARATION = "declaration"  # standard AI-content markers (IPTC source type)


class MatchMethod(str, Enum):
    """How a match was produced."""

    CATALOG = "catalog"
    PARAMETER_BLOCK = "parameter_block"
    COMMAND_FLAGS = "command_flags"
    C2PA = "c2pa"
    URL = "url"
    FILENAME = "filename"


class SignatureEntry(BaseModel):
    """One text fingerprint of an AI tool."""

    model_config = ConfigDict(frozen=True)

    pattern: str
    tool: str
    confidence: Confidence = Confidence.MEDIUM
    category: EntryCategory = EntryCategory.VENDOR

    @model_validator(mode="after")
    def _apply_category_tier(self) -> SignatureEntry:
        # Tool names are always high and generic tokens always low,
        # whatever tier the catalog declares.
        if self.category is EntryCategory.TOOL:
            object.__setattr__(self, "confidence", Confidence.HIGH)
        elif self.category is EntryCategory.GENERIC:
            object.__setattr__(self, "confidence", Confidence.LOW)
        if self.confidence.rank < Confidence.LOW.rank:
            raise ValueError(f"entry {self.pattern!r} needs a low/medium/high tier")
        return self


class PatternEntry(BaseModel):
    """A URL host or filename pattern (regular expression for filenames)."""

    model_config = ConfigDict(frozen=True)

    pattern: str
    tool: str
    confidence: Confidence = Confidence.MEDIUM


class SignatureMatch(BaseModel):
    """A fingerprint found in one metadata field (or in the media URL)."""

    model_config = ConfigDict(frozen=True)

    tool: str
    matched: str
    confidence: Confidence
    source: str
    explanation: str
    method: MatchMethod = MatchMethod.CATALOG
