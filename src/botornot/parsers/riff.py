"""RIFF chunk walks for WebP and AVI."""

from __future__ import annotations

from loguru import logger

from botornot.models import ContainerType, ParseResult
from botornot.utils.binary import ByteReader, decode_text

from .base import BaseParser
from .tiff import parse_exif

RIFF_HEADER_SIZE = 12

# AVI INFO list entries worth keeping
AVI_INFO_TAGS: dict[str, str] = {
    "IDIT": "DateTimeOriginal",
    "ISFT": "Software",
    "ICMT": "Comment",
    "IART": "Artist",
    "INAM": "Title",
    "ISBJ": "Subject",
}


def iter_chunks(reader: ByteReader, start: int, end: int, limit: int, result: ParseResult):
    """Yield (fourcc, body offset, body size) for RIFF chunks in [start, end).

    Chunks are padded to even sizes. An overrunning chunk raises
    ``MalformedContainer`` from the reader.
    """
    pos = start
    count = 0
    while pos + 8 <= end:
        if count >= limit:
            result.warn(f"stopped after {count} chunks")
            return
        count += 1
        fourcc = reader.fourcc(pos)
        size = reader.u32(pos + 4, little=True)
        body = pos + 8
        reader.slice(body, size)  # bounds check
        yield fourcc, body, size
        pos = body + size + (size & 1)


class WebpParser(BaseParser):
    """Parser for WebP (``RIFF....WEBP``) files."""

    name = "webp"
    container_types = (ContainerType.WEBP,)

    def parse(self, data: bytes, result: ParseResult) -> None:
        reader = ByteReader(data, little_endian=True)
        for fourcc, offset, size in iter_chunks(
            reader, RIFF_HEADER_SIZE, len(data), self.config.max_chunks, result
        ):
            body = data[offset : offset + size]
            if fourcc == "EXIF":
                parse_exif(body, result, "WebP EXIF")
            elif fourcc == "XMP ":
                result.add_field("WebP XMP", decode_text(body))


class AviParser(BaseParser):
    """Parser for AVI (``RIFF....AVI ``) files.

    Descends into ``LIST`` chunks (skipping the ``movi`` payload list) and
    records the INFO entries.
    """

    name = "avi"
    container_types = (ContainerType.AVI,)

    def parse(self, data: bytes, result: ParseResult) -> None:
        reader = ByteReader(data, little_endian=True)
        self.walk(reader, RIFF_HEADER_SIZE, len(data), result, depth=0)

    def walk(self, reader: ByteReader, start: int, end: int, result: ParseResult, depth: int) -> None:
        for fourcc, offset, size in iter_chunks(reader, start, end, self.config.max_chunks, result):
            if fourcc == "LIST":
                list_type = reader.fourcc(offset)
                if list_type == "movi":
                    logger.debug("AVI: skipping movi list ({} bytes)", size)
                    continue
                if depth < self.config.max_box_depth:
                    self.walk(reader, offset + 4, offset + size, result, depth + 1)
            elif fourcc in AVI_INFO_TAGS:
                text = decode_text(reader.slice(offset, size))
                result.add_field(f"AVI {fourcc} ({AVI_INFO_TAGS[fourcc]})", text)
