"""Match recovered metadata fields against the signature catalog."""

from __future__ import annotations

import re
from collections.abc import Iterable

from loguru import logger

from botornot.models import (
    Confidence,
    ContainerType,
    FieldKind,
    MatchMethod,
    MetadataField,
    SignatureMatch,
)

from .catalog import SignatureCatalog

# Text of these containers is where generator parameter blocks live
PARAMETER_CONTAINERS = (ContainerType.PNG, ContainerType.JPEG, ContainerType.UNKNOWN)

C2PA_PRESENT = "content authenticity metadata present"
C2PA_TOOL = "c2pa"


def _runs_block_detectors(field: MetadataField) -> bool:
    return field.kind is FieldKind.HEADER_SCAN or field.container in PARAMETER_CONTAINERS


def _catalog_matches(field: MetadataField, catalog: SignatureCatalog) -> list[SignatureMatch]:
    text = field.text.lower()
    matches = []
    for entry in catalog.text_entries:
        if entry.pattern.lower() in text:
            matches.append(
                SignatureMatch(
                    tool=entry.tool,
                    matched=entry.pattern,
                    confidence=entry.confidence,
                    source=field.source,
                    explanation=f'"{entry.pattern}" ({entry.category.value}) found in {field.source}',
                )
            )
    return matches


def detect_parameter_block(field: MetadataField, catalog: SignatureCatalog) -> SignatureMatch | None:
    """Detect a Stable Diffusion style parameter block (Steps:, Sampler:, Seed:...)."""
    text = field.text.lower()
    found = [token for token in catalog.parameter_tokens if token in text]
    if len(found) < catalog.parameter_threshold:
        return None
    return SignatureMatch(
        tool="stable-diffusion",
        matched=", ".join(found),
        confidence=Confidence.HIGH,
        source=field.source,
        explanation=f"generation parameter block ({', '.join(found)}) in {field.source}",
        method=MatchMethod.PARAMETER_BLOCK,
    )


def detect_command_flags(field: MetadataField, catalog: SignatureCatalog) -> SignatureMatch | None:
    """Detect Midjourney command flags (--ar 16:9, --v 6, --stylize 250...)."""
    for pattern in catalog.midjourney_flags:
        m = re.search(pattern, field.text, re.IGNORECASE)
        if m:
            return SignatureMatch(
                tool="midjourney",
                matched=m.group(),
                confidence=Confidence.HIGH,
                source=field.source,
                explanation=f"Midjourney command flag {m.group()!r} in {field.source}",
                method=MatchMethod.COMMAND_FLAGS,
            )
    return None


def _c2pa_matches(field: MetadataField, catalog: SignatureCatalog) -> list[SignatureMatch]:
    if field.kind is FieldKind.C2PA_MANIFEST:
        return [
            SignatureMatch(
                tool=C2PA_TOOL,
                matched=C2PA_TOOL,
                confidence=Confidence.MEDIUM,
                source=field.source,
                explanation=f"{C2PA_PRESENT} ({field.source})",
                method=MatchMethod.C2PA,
            )
        ]

    generator = field.text.lower()
    matches = []
    for entry in catalog.c2pa_ai_generators:
        if entry.pattern.lower() in generator:
            matches.append(
                SignatureMatch(
                    tool=entry.tool,
                    matched=entry.pattern,
                    confidence=entry.confidence,
                    source=field.source,
                    explanation=f"C2PA claim generator {field.text!r} names an AI tool",
                    method=MatchMethod.C2PA,
                )
            )
    return matches


def match_signatures(field: MetadataField, catalog: SignatureCatalog) -> list[SignatureMatch]:
    """Find every signature in one field.

    Collects all catalog substring matches (case-insensitive), then the
    parameter-block and command-flag detectors for PNG/JPEG text and header
    scans, then the C2PA rules for manifest and claim-generator fields.

    Args:
        field: Field recovered by the container parser
        catalog: Signature catalog

    Returns:
        Matches in catalog order (empty if nothing matched)
    """
    matches = _catalog_matches(field, catalog)

    if _runs_block_detectors(field):
        for detector in (detect_parameter_block, detect_command_flags):
            match = detector(field, catalog)
            if match is not None:
                matches.append(match)

    if field.kind in (FieldKind.C2PA_MANIFEST, FieldKind.C2PA_CLAIM_GENERATOR):
        matches.extend(_c2pa_matches(field, catalog))

    if matches:
        logger.debug("{}: {} signature match(es)", field.source, len(matches))
    return matches


def match_fields(fields: Iterable[MetadataField], catalog: SignatureCatalog) -> list[SignatureMatch]:
    """Match a sequence of fields, dropping exact duplicates (tool, matched, source)."""
    seen: set[tuple[str, str, str]] = set()
    matches = []
    for field in fields:
        for match in match_signatures(field, catalog):
            key = (match.tool, match.matched, match.source)
            if key in seen:
                continue
            seen.add(key)
            matches.append(match)
    return matches


def aggregate_confidence(matches: Iterable[SignatureMatch]) -> Confidence:
    """Combine match tiers into one confidence.

    High if any match is high or at least two are high/medium; medium if
    any is medium or at least two are low; low for exactly one low match.
    """
    high = medium = low = 0
    for match in matches:
        if match.confidence is Confidence.HIGH:
            high += 1
        elif match.confidence is Confidence.MEDIUM:
            medium += 1
        elif match.confidence is Confidence.LOW:
            low += 1

    if high >= 1 or high + medium >= 2:
        return Confidence.HIGH
    if medium >= 1 or low >= 2:
        return Confidence.MEDIUM
    if low == 1:
        return Confidence.LOW
    return Confidence.NONE
