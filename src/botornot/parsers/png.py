"""PNG chunk walk."""

from __future__ import annotations

import zlib

from loguru import logger

from botornot.errors import MalformedContainer
from botornot.models import ContainerType, ParseResult
from botornot.utils.binary import ByteReader, decode_text, split_nul

from .base import BaseParser
from .c2pa import parse_c2pa
from .tiff import parse_exif

PNG_SIGNATURE_SIZE = 8
C2PA_CHUNKS = ("caBX", "c2pa")


def inflate(data: bytes, limit: int) -> bytes:
    """Inflate a zlib stream, keeping at most ``limit`` bytes of output."""
    inflater = zlib.decompressobj()
    return inflater.decompress(data, limit)


class PngParser(BaseParser):
    """Walk PNG chunks and decode the text-bearing ones.

    CRCs are not validated; text chunks are what generators write
    (``parameters``, ``prompt``, ``workflow``, ``Software``...).
    """

    name = "png"
    container_types = (ContainerType.PNG,)

    def parse(self, data: bytes, result: ParseResult) -> None:
        reader = ByteReader(data)
        pos = PNG_SIGNATURE_SIZE
        chunks = 0

        while pos + 8 <= len(data):
            if chunks >= self.config.max_chunks:
                result.warn(f"stopped after {chunks} chunks")
                return
            chunks += 1

            length = reader.u32(pos)
            chunk_type = reader.fourcc(pos + 4)
            remaining = len(data) - pos - 12
            if length > remaining:
                raise MalformedContainer(
                    f"chunk {chunk_type!r} at offset {pos} declares {length} bytes, "
                    f"{max(remaining, 0)} remain"
                )
            body = reader.slice(pos + 8, length)
            pos += 12 + length

            if chunk_type == "IEND":
                logger.debug("PNG: IEND after {} chunks", chunks)
                return
            with result.recover(f"{chunk_type} chunk"):
                self.parse_chunk(chunk_type, body, result)

    def parse_chunk(self, chunk_type: str, body: bytes, result: ParseResult) -> None:
        if chunk_type == "tEXt":
            keyword, offset = split_nul(body)
            keyword_text = keyword.decode("latin-1")
            result.add_field(f"PNG tEXt keyword={keyword_text}", decode_text(body[offset:], "latin-1"))
        elif chunk_type == "zTXt":
            self.parse_ztxt(body, result)
        elif chunk_type == "iTXt":
            self.parse_itxt(body, result)
        elif chunk_type == "eXIf":
            parse_exif(body, result, "PNG EXIF")
        elif chunk_type in C2PA_CHUNKS:
            parse_c2pa(body, result, f"PNG {chunk_type}")

    def parse_ztxt(self, body: bytes, result: ParseResult) -> None:
        keyword, offset = split_nul(body)
        keyword_text = keyword.decode("latin-1")
        source = f"PNG zTXt keyword={keyword_text}"
        # offset points at the compression method byte
        compressed = body[offset + 1 :]
        try:
            text = inflate(compressed, self.config.max_inflate_bytes)
        except zlib.error as e:
            result.warn(f"zTXt {keyword_text!r} could not be inflated: {e}")
            result.add_field(source, f"{keyword_text} (compressed, unreadable)")
            return
        result.add_field(source, decode_text(text, "latin-1"))

    def parse_itxt(self, body: bytes, result: ParseResult) -> None:
        keyword, offset = split_nul(body)
        keyword_text = keyword.decode("latin-1")
        if offset + 2 > len(body):
            raise MalformedContainer(f"iTXt {keyword_text!r} truncated")
        compressed = body[offset] == 1
        offset += 2  # flag, method
        _language, offset = split_nul(body, offset)
        _translated, offset = split_nul(body, offset)
        text = body[offset:]

        source = f"PNG iTXt keyword={keyword_text}"
        if compressed:
            try:
                text = inflate(text, self.config.max_inflate_bytes)
            except zlib.error as e:
                result.warn(f"iTXt {keyword_text!r} could not be inflated: {e}")
                result.add_field(source, f"{keyword_text} (compressed, unreadable)")
                return
        result.add_field(source, decode_text(text))
