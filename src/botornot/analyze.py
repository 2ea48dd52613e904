"""Core analysis functions."""

from __future__ import annotations

import asyncio
import warnings
from pathlib import Path

import httpx
from loguru import logger

from botornot.config import BotOrNotConfig, get_config
from botornot.errors import FetchError
from botornot.fetch import afetch_bytes, fetch_bytes, read_file
from botornot.models import (
    AnalysisResult,
    Confidence,
    HeaderScan,
    MediaBytes,
    PixelMetrics,
)
from botornot.parsers import detect_container_type, parse_container
from botornot.pixels import ImageBytesSource, PixelSource, sample
from botornot.scoring import score
from botornot.signatures import SignatureCatalog, aggregate_confidence, load_catalog, match_fields
from botornot.utils import is_remote_url


def scan_headers(
    media: MediaBytes | bytes,
    catalog: SignatureCatalog | None = None,
    config: BotOrNotConfig | None = None,
) -> HeaderScan:
    """Quick header-only scan: parse the container and match signatures.

    No pixels are sampled and no score is computed.

    Args:
        media: Media bytes
        catalog: Signature catalog (defaults to the bundled one)
        config: Configuration (defaults to the global one)

    Returns:
        HeaderScan with fields, matches and their aggregate confidence
    """
    catalog = catalog or load_catalog()
    config = config or get_config()

    parsed = parse_container(media, config.parser)
    matches = match_fields(parsed.fields, catalog)
    return HeaderScan(
        container_type=parsed.container_type,
        fields=parsed.fields,
        signatures=matches,
        confidence=aggregate_confidence(matches),
        warnings=parsed.warnings,
    )


def analyze(
    source: MediaBytes | FetchError,
    pixels: PixelSource | PixelMetrics | None = None,
    url: str | None = None,
    *,
    catalog: SignatureCatalog | None = None,
    config: BotOrNotConfig | None = None,
) -> AnalysisResult:
    """Analyze one piece of media.

    This is the main entry point. It:
    1. Turns a failed fetch into an ERROR/BLOCKED result
    2. Parses the container and matches every recovered field
    3. Samples pixels (when a pixel source is given)
    4. Scores all evidence, including the URL or filename

    Args:
        source: Fetched media, or the FetchError that prevented fetching it
        pixels: Pixel source to sample, precomputed metrics, or None
        url: URL or filename of the media (defaults to ``source.name``)
        catalog: Signature catalog (defaults to the bundled one)
        config: Configuration (defaults to the global one)

    Returns:
        AnalysisResult; never raises for anticipated failures
    """
    if isinstance(source, FetchError):
        confidence = Confidence.BLOCKED if source.blocked else Confidence.ERROR
        logger.info("Analysis not possible ({}): {}", confidence.value, source.reason)
        return AnalysisResult.failed(source.reason, confidence, name=url)

    catalog = catalog or load_catalog()
    config = config or get_config()

    header = scan_headers(source, catalog, config)

    if isinstance(pixels, PixelMetrics) or pixels is None:
        metrics = pixels
    else:
        metrics = sample(pixels, config.pixels)

    name = url if url is not None else source.name
    result = score(
        header.signatures,
        metrics,
        name,
        catalog=catalog,
        config=config.scoring,
    )
    return result.model_copy(
        update={
            "name": name,
            "container_type": header.container_type,
            "warnings": header.warnings,
        }
    )


def _pixel_source(media: MediaBytes, enabled: bool) -> PixelSource | None:
    if not enabled:
        return None
    if not detect_container_type(media.data).is_raster_image:
        return None
    return ImageBytesSource(media.data)


def analyze_file(
    path: str | Path,
    pixels: bool = True,
    *,
    catalog: SignatureCatalog | None = None,
    config: BotOrNotConfig | None = None,
) -> AnalysisResult:
    """Analyze a local file.

    Args:
        path: Path to the media file
        pixels: Sample pixels (raster images only)

    Returns:
        AnalysisResult (ERROR when the file cannot be read)
    """
    config = config or get_config()
    try:
        media = read_file(path, config.fetch)
    except FetchError as e:
        return analyze(e, url=str(path))
    return analyze(
        media, _pixel_source(media, pixels), str(path), catalog=catalog, config=config
    )


def analyze_url(
    url: str,
    pixels: bool = True,
    *,
    catalog: SignatureCatalog | None = None,
    config: BotOrNotConfig | None = None,
    client: httpx.Client | None = None,
) -> AnalysisResult:
    """Fetch and analyze remote media.

    Returns:
        AnalysisResult (BLOCKED/ERROR when the fetch fails)
    """
    config = config or get_config()
    try:
        media = fetch_bytes(url, config.fetch, client=client)
    except FetchError as e:
        return analyze(e, url=url)
    return analyze(media, _pixel_source(media, pixels), url, catalog=catalog, config=config)


async def aanalyze_url(
    url: str,
    pixels: bool = True,
    *,
    catalog: SignatureCatalog | None = None,
    config: BotOrNotConfig | None = None,
    client: httpx.AsyncClient | None = None,
) -> AnalysisResult:
    """Async variant of :func:`analyze_url`.

    The fetch is awaited; parsing, sampling and scoring run in a worker
    thread so many URLs can be analyzed concurrently with ``asyncio.gather``.
    """
    config = config or get_config()
    catalog = catalog or load_catalog()
    try:
        media = await afetch_bytes(url, config.fetch, client=client)
    except FetchError as e:
        return analyze(e, url=url)
    return await asyncio.to_thread(
        analyze, media, _pixel_source(media, pixels), url, catalog=catalog, config=config
    )


def analyze_files(paths: list[str], pixels: bool = True) -> list[AnalysisResult]:
    """Analyze multiple files or URLs.

    Args:
        paths: Local paths and/or http(s) URLs
        pixels: Sample pixels for raster images

    Returns:
        One AnalysisResult per input, in order
    """
    catalog = load_catalog()
    results = []
    for path in paths:
        if is_remote_url(path):
            result = analyze_url(path, pixels=pixels, catalog=catalog)
        else:
            result = analyze_file(path, pixels=pixels, catalog=catalog)
        if not result.analyzed:
            warnings.warn(f"Failed to analyze {path}: {result.details[0]}", stacklevel=2)
        results.append(result)
    return results
