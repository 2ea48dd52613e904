"""Byte sources: HTTP fetch and local files.

Both apply the same size ceiling. Oversized media is truncated, not
rejected: metadata lives near the start of a file, so the prefix is still
worth parsing.
"""

from __future__ import annotations

from pathlib import Path

import httpx
from loguru import logger

from botornot._version import __version__
from botornot.config import FetchConfig, get_config
from botornot.errors import FetchError
from botornot.models import MediaBytes

# Status codes meaning "the source refused us", as opposed to "it failed"
BLOCKED_STATUS_CODES = (401, 403, 451)


def _headers(config: FetchConfig) -> dict[str, str]:
    return {"User-Agent": f"{config.user_agent}/{__version__}"}


def _check_status(response: httpx.Response, url: str) -> None:
    if response.status_code in BLOCKED_STATUS_CODES:
        raise FetchError(f"access denied (HTTP {response.status_code}) for {url}", blocked=True)
    try:
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise FetchError(f"HTTP {response.status_code} for {url}") from e


def _finish(url: str, body: bytearray, truncated: bool, limit: int) -> MediaBytes:
    if truncated:
        logger.warning("{} exceeds {} bytes, keeping the first {}", url, limit, limit)
    return MediaBytes(data=bytes(body[:limit]), name=url, truncated=truncated)


def fetch_bytes(
    url: str,
    config: FetchConfig | None = None,
    client: httpx.Client | None = None,
) -> MediaBytes:
    """Download media, truncating at ``max_file_size_mb``.

    Args:
        url: http(s) URL
        config: Fetch settings (defaults to the global configuration)
        client: Optional httpx client (for connection reuse and tests)

    Returns:
        MediaBytes named after the URL

    Raises:
        FetchError: On network errors, timeouts and error status codes;
            ``blocked`` is set for 401/403/451
    """
    config = config or get_config().fetch
    limit = config.max_bytes
    own_client = client is None
    if client is None:
        client = httpx.Client(timeout=config.timeout_seconds, follow_redirects=True)

    body = bytearray()
    truncated = False
    try:
        with client.stream("GET", url, headers=_headers(config)) as response:
            _check_status(response, url)
            for chunk in response.iter_bytes():
                body.extend(chunk)
                if len(body) > limit:
                    truncated = True
                    break
    except httpx.TimeoutException as e:
        raise FetchError(f"timed out fetching {url}") from e
    except httpx.HTTPError as e:
        raise FetchError(f"could not fetch {url}: {e}") from e
    finally:
        if own_client:
            client.close()

    logger.debug("Fetched {} bytes from {}", len(body), url)
    return _finish(url, body, truncated, limit)


async def afetch_bytes(
    url: str,
    config: FetchConfig | None = None,
    client: httpx.AsyncClient | None = None,
) -> MediaBytes:
    """Async variant of :func:`fetch_bytes`."""
    config = config or get_config().fetch
    limit = config.max_bytes
    own_client = client is None
    if client is None:
        client = httpx.AsyncClient(timeout=config.timeout_seconds, follow_redirects=True)

    body = bytearray()
    truncated = False
    try:
        async with client.stream("GET", url, headers=_headers(config)) as response:
            _check_status(response, url)
            async for chunk in response.aiter_bytes():
                body.extend(chunk)
                if len(body) > limit:
                    truncated = True
                    break
    except httpx.TimeoutException as e:
        raise FetchError(f"timed out fetching {url}") from e
    except httpx.HTTPError as e:
        raise FetchError(f"could not fetch {url}: {e}") from e
    finally:
        if own_client:
            await client.aclose()

    logger.debug("Fetched {} bytes from {}", len(body), url)
    return _finish(url, body, truncated, limit)


def read_file(path: str | Path, config: FetchConfig | None = None) -> MediaBytes:
    """Read a local file, truncating at ``max_file_size_mb``.

    Raises:
        FetchError: If the file is missing or unreadable
    """
    config = config or get_config().fetch
    limit = config.max_bytes
    path = Path(path)
    try:
        with open(path, "rb") as f:
            data = f.read(limit + 1)
    except FileNotFoundError as e:
        raise FetchError(f"file not found: {path}") from e
    except PermissionError as e:
        raise FetchError(f"permission denied: {path}", blocked=True) from e
    except OSError as e:
        raise FetchError(f"could not read {path}: {e}") from e

    truncated = len(data) > limit
    if truncated:
        logger.warning("{} exceeds {} bytes, keeping the first {}", path, limit, limit)
    return MediaBytes(data=data[:limit], name=str(path), truncated=truncated)
