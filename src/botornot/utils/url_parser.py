"""URL and filename parsing for media locations.

A media location is either a remote URL (``https://cdn.example/a.png``)
or a local path / bare filename (``renders/a.png``).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath
from urllib.parse import unquote, urlparse

REMOTE_SCHEMES = ("http", "https")


@dataclass
class ParsedLocation:
    """Result of location parsing."""

    original: str
    host: str | None  # lower-cased, None for local paths
    path: str
    filename: str


def is_remote_url(location: str) -> bool:
    """Check if a location is an http(s) URL."""
    return urlparse(location).scheme.lower() in REMOTE_SCHEMES


def parse_location(location: str) -> ParsedLocation:
    """Split a URL or path into host, path and filename.

    Examples:
        >>> parse_location("https://CDN.Midjourney.com/x/grid_0.png").host
        'cdn.midjourney.com'

        >>> parse_location("/tmp/00012-3456.png").filename
        '00012-3456.png'
    """
    parsed = urlparse(location)
    if parsed.scheme.lower() in REMOTE_SCHEMES:
        path = unquote(parsed.path)
        return ParsedLocation(
            original=location,
            host=(parsed.hostname or "").lower() or None,
            path=path,
            filename=PurePosixPath(path).name,
        )

    path = location.replace("\\", "/")
    return ParsedLocation(
        original=location,
        host=None,
        path=path,
        filename=PurePosixPath(path).name,
    )
