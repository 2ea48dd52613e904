"""AI-tool signature catalog and matching."""

from botornot.signatures.catalog import SignatureCatalog, load_catalog
from botornot.signatures.matcher import (
    aggregate_confidence,
    detect_command_flags,
    detect_parameter_block,
    match_fields,
    match_signatures,
)
from botornot.signatures.urls import match_url

__all__ = [
    "SignatureCatalog",
    "aggregate_confidence",
    "detect_command_flags",
    "detect_parameter_block",
    "load_catalog",
    "match_fields",
    "match_signatures",
    "match_url",
]
