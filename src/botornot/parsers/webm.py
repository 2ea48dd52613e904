"""Shallow EBML walk for WebM/Matroska."""

from __future__ import annotations

from botornot.errors import MalformedContainer
from botornot.models import ContainerType, ParseResult
from botornot.utils.binary import decode_text

from .base import BaseParser

EBML_HEADER = 0x1A45DFA3
SEGMENT = 0x18538067
INFO = 0x1549A966
TAGS = 0x1254C367
TAG = 0x7373
SIMPLE_TAG = 0x67C8
TAG_NAME = 0x45A3
TAG_STRING = 0x4487
CLUSTER = 0x1F43B675

TITLE = 0x7BA9
MUXING_APP = 0x4D80
WRITING_APP = 0x5741

INFO_STRINGS = {TITLE: "Title", MUXING_APP: "MuxingApp", WRITING_APP: "WritingApp"}
MASTER_ELEMENTS = {SEGMENT, INFO, TAGS, TAG, SIMPLE_TAG}

UNKNOWN_SIZE = -1


def read_vint(data: bytes, pos: int, keep_marker: bool) -> tuple[int, int]:
    """Read an EBML variable-length integer.

    Element ids keep their length marker bit; sizes drop it. An all-ones
    size means "unknown" and is returned as ``UNKNOWN_SIZE``.

    Returns:
        Tuple of (value, offset past the integer)
    """
    if pos >= len(data):
        raise MalformedContainer(f"vint at offset {pos} past end of data")
    first = data[pos]
    if first == 0:
        raise MalformedContainer(f"invalid vint at offset {pos}")
    length = 1
    mask = 0x80
    while not first & mask:
        mask >>= 1
        length += 1
    if pos + length > len(data):
        raise MalformedContainer(f"vint at offset {pos} truncated")

    value = first if keep_marker else first & (mask - 1)
    for b in data[pos + 1 : pos + length]:
        value = (value << 8) | b
    if not keep_marker and value == (1 << (7 * length)) - 1:
        return UNKNOWN_SIZE, pos + length
    return value, pos + length


class WebmParser(BaseParser):
    """Walk Segment -> Info/Tags -> Tag -> SimpleTag; stop at the first Cluster."""

    name = "webm"
    container_types = (ContainerType.WEBM,)

    def parse(self, data: bytes, result: ParseResult) -> None:
        self.walk(data, 0, len(data), result, depth=0)

    def walk(self, data: bytes, start: int, end: int, result: ParseResult, depth: int) -> bool:
        """Walk elements in [start, end). Returns False once a Cluster is reached."""
        pos = start
        tag_name: str | None = None
        while pos < end:
            element_id, pos = read_vint(data, pos, keep_marker=True)
            size, pos = read_vint(data, pos, keep_marker=False)
            if element_id == CLUSTER:
                return False

            body_end = end if size == UNKNOWN_SIZE else pos + size
            if body_end > end:
                raise MalformedContainer(
                    f"element 0x{element_id:X} at offset {pos} overruns its parent"
                )

            if element_id in MASTER_ELEMENTS and depth < self.config.max_box_depth:
                if not self.walk(data, pos, body_end, result, depth + 1):
                    return False
            elif element_id == EBML_HEADER:
                pass
            elif element_id in INFO_STRINGS:
                result.add_field(f"WebM {INFO_STRINGS[element_id]}", decode_text(data[pos:body_end]))
            elif element_id == TAG_NAME:
                tag_name = decode_text(data[pos:body_end])
            elif element_id == TAG_STRING:
                value = decode_text(data[pos:body_end])
                label = tag_name or "tag"
                result.add_field(f"WebM Tag {label}", f"{label}={value}")
            pos = body_end
        return True
