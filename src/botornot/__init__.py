"""botornot - AI-generated media detection.

Combines metadata signatures, pixel statistics and URL patterns into one
verdict per image or video.

Usage:
    from botornot import analyze_file, analyze_url

    # Analyze a local file
    result = analyze_file("image.png")

    # Check AI generation
    if result.is_ai:
        print(f"AI tool: {result.detected_tool} ({result.confidence.value})")

    # The rationale, strongest evidence first
    for line in result.details:
        print(line)

    # Export as JSON
    print(result.model_dump_json())

    # Header-only scan of bytes you already have
    from botornot import scan_headers
    scan = scan_headers(data)
"""

from loguru import logger

from botornot._version import __version__
from botornot.analyze import (
    aanalyze_url,
    analyze,
    analyze_file,
    analyze_files,
    analyze_url,
    scan_headers,
)
from botornot.errors import (
    BotOrNotError,
    FetchError,
    MalformedContainer,
    PixelAccessDenied,
    PixelDecodeError,
    PixelSourceError,
)
from botornot.fetch import afetch_bytes, fetch_bytes, read_file
from botornot.formatters import format_default, format_json, format_quiet, to_dict
from botornot.models import (
    AnalysisResult,
    Confidence,
    ContainerType,
    HeaderScan,
    MediaBytes,
    MetadataField,
    ParseResult,
    PixelMetrics,
    SignatureEntry,
    SignatureMatch,
)
from botornot.parsers import parse_container
from botornot.pixels import ArraySource, ImageBytesSource, PillowImageSource, sample
from botornot.scoring import score
from botornot.signatures import (
    SignatureCatalog,
    aggregate_confidence,
    load_catalog,
    match_fields,
    match_signatures,
    match_url,
)

# Library etiquette: silent unless the application enables it
logger.disable("botornot")

__all__ = [
    # Version
    "__version__",
    # Main functions
    "analyze",
    "analyze_file",
    "analyze_files",
    "analyze_url",
    "aanalyze_url",
    "scan_headers",
    # Pipeline stages
    "parse_container",
    "match_signatures",
    "match_fields",
    "match_url",
    "aggregate_confidence",
    "sample",
    "score",
    "load_catalog",
    # Byte sources
    "fetch_bytes",
    "afetch_bytes",
    "read_file",
    # Pixel sources
    "ArraySource",
    "ImageBytesSource",
    "PillowImageSource",
    # Models
    "AnalysisResult",
    "Confidence",
    "ContainerType",
    "HeaderScan",
    "MediaBytes",
    "MetadataField",
    "ParseResult",
    "PixelMetrics",
    "SignatureCatalog",
    "SignatureEntry",
    "SignatureMatch",
    # Errors
    "BotOrNotError",
    "FetchError",
    "MalformedContainer",
    "PixelAccessDenied",
    "PixelDecodeError",
    "PixelSourceError",
    # Formatters
    "format_default",
    "format_json",
    "format_quiet",
    "to_dict",
]
