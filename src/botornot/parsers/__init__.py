"""Container parsers for botornot."""

from __future__ import annotations

import struct

from loguru import logger

from botornot.config import ParserConfig, get_config
from botornot.errors import MalformedContainer
from botornot.models import ContainerType, MediaBytes, ParseResult
from botornot.parsers.base import BaseParser
from botornot.parsers.c2pa import is_c2pa, parse_c2pa
from botornot.parsers.generic import HEADER_SCAN_SOURCE, scan_header_text
from botornot.parsers.gif import GifParser
from botornot.parsers.isobmff import IsoBmffParser
from botornot.parsers.jpeg import JpegParser
from botornot.parsers.png import PngParser
from botornot.parsers.riff import AviParser, WebpParser
from botornot.parsers.tiff import TiffParser, parse_exif
from botornot.parsers.webm import WebmParser

# All parser classes, looked up by container type
_PARSERS: list[type[BaseParser]] = [
    JpegParser,
    PngParser,
    GifParser,
    WebpParser,
    TiffParser,
    IsoBmffParser,
    AviParser,
    WebmParser,
]


def detect_container_type(data: bytes) -> ContainerType:
    """Detect the container type from magic bytes (never raises)."""
    return ContainerType.detect(data)


def get_parser(container_type: ContainerType, config: ParserConfig | None = None) -> BaseParser | None:
    """Get a parser instance for a container type, or None if unsupported."""
    for parser_cls in _PARSERS:
        if parser_cls.handles(container_type):
            return parser_cls(config)
    return None


def parse_container(media: MediaBytes | bytes, config: ParserConfig | None = None) -> ParseResult:
    """Recover every text-bearing metadata field from media bytes.

    Never raises on malformed input: a structural problem ends the walk,
    is recorded in ``warnings``, and the fields recovered so far are kept.
    When the walk recovers nothing (or the container is unknown) the
    leading bytes are scanned as text instead.

    Args:
        media: MediaBytes, or raw bytes
        config: Parser limits (defaults to the global configuration)

    Returns:
        ParseResult with the container type, fields and warnings
    """
    if isinstance(media, MediaBytes):
        data, truncated = media.data, media.truncated
    else:
        data, truncated = bytes(media), False
    config = config or get_config().parser

    result = ParseResult(container_type=detect_container_type(data))
    if truncated:
        result.warn("input truncated at the size limit; trailing structures not examined")

    parser = get_parser(result.container_type, config)
    if parser is None:
        result.warn("unsupported container, scanning header text")
    else:
        logger.debug("Parsing {} bytes with {!r}", len(data), parser)
        try:
            parser.parse(data, result)
        except (MalformedContainer, struct.error) as e:
            result.warn(f"{parser.name} traversal stopped: {e}")

    if not result.fields:
        scan_header_text(data, result, config.header_scan_bytes)
    return result


__all__ = [
    # Base class
    "BaseParser",
    # Parsers
    "AviParser",
    "GifParser",
    "IsoBmffParser",
    "JpegParser",
    "PngParser",
    "TiffParser",
    "WebmParser",
    "WebpParser",
    # Functions
    "HEADER_SCAN_SOURCE",
    "detect_container_type",
    "get_parser",
    "is_c2pa",
    "parse_c2pa",
    "parse_container",
    "parse_exif",
    "scan_header_text",
]
