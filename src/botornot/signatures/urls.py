"""URL and filename evidence."""

from __future__ import annotations

import re

from botornot.models import MatchMethod, SignatureMatch
from botornot.utils.url_parser import parse_location

from .catalog import SignatureCatalog


def _host_matches(host: str, pattern: str) -> bool:
    pattern = pattern.lower()
    return host == pattern or host.endswith("." + pattern)


def match_url(url: str, catalog: SignatureCatalog) -> list[SignatureMatch]:
    """Match a media URL (or path) against AI hosting hosts and filename patterns.

    At most one host match and one filename match are returned, each the
    first catalog entry that applies.
    """
    location = parse_location(url)
    matches = []

    if location.host:
        for entry in catalog.url_hosts:
            if _host_matches(location.host, entry.pattern):
                matches.append(
                    SignatureMatch(
                        tool=entry.tool,
                        matched=location.host,
                        confidence=entry.confidence,
                        source="URL host",
                        explanation=f"served from {location.host}, an AI image host",
                        method=MatchMethod.URL,
                    )
                )
                break

    filename = location.filename.lower()
    if filename:
        for entry in catalog.filename_patterns:
            if re.search(entry.pattern, filename, re.IGNORECASE):
                matches.append(
                    SignatureMatch(
                        tool=entry.tool,
                        matched=location.filename,
                        confidence=entry.confidence,
                        source="URL filename",
                        explanation=f"filename {location.filename!r} follows a generator naming pattern",
                        method=MatchMethod.FILENAME,
                    )
                )
                break
    return matches
