"""Pydantic models for botornot."""

from .media import ContainerType, FieldKind, MediaBytes, MetadataField, ParseResult
from .pixels import PixelMetrics
from .result import AnalysisResult, HeaderScan
from .signature import (
    Confidence,
    EntryCategory,
    MatchMethod,
    PatternEntry,
    SignatureEntry,
    SignatureMatch,
)

__all__ = [
    # Media
    "ContainerType",
    "FieldKind",
    "MediaBytes",
    "MetadataField",
    "ParseResult",
    # Signatures
    "Confidence",
    "EntryCategory",
    "MatchMethod",
    "PatternEntry",
    "SignatureEntry",
    "SignatureMatch",
    # Pixels
    "PixelMetrics",
    # Results
    "AnalysisResult",
    "HeaderScan",
]
