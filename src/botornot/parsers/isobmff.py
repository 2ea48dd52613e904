"""ISO base media file format (MP4, MOV, AVIF) box walk."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from botornot.errors import MalformedContainer
from botornot.models import ContainerType, ParseResult
from botornot.utils.binary import ByteReader, decode_text, printable_strings

from .base import BaseParser
from .c2pa import is_c2pa, parse_c2pa

CONTAINER_BOXES = {
    "moov",
    "trak",
    "mdia",
    "minf",
    "udta",
    "meta",
    "ilst",
    "iprp",
    "ipco",
}

# uuid box identifiers
XMP_UUID = bytes.fromhex("be7acfcb97a942e89c71999491e3afac")
C2PA_UUID = bytes.fromhex("d8fec3d61b0e483c92975828877ec481")

# iTunes-style ilst item names
ILST_ITEMS: dict[str, str] = {
    "\xa9too": "Encoder",
    "\xa9swr": "Software",
    "\xa9cmt": "Comment",
    "\xa9nam": "Title",
    "\xa9ART": "Artist",
    "\xa9day": "Date",
    "\xa9des": "Description",
    "desc": "Description",
    "ldes": "Long description",
    "----": "Freeform",
}


@dataclass
class BoxInfo:
    """Location of one box inside the buffer."""

    type: str
    offset: int
    size: int
    header_size: int

    @property
    def body_start(self) -> int:
        return self.offset + self.header_size

    @property
    def end(self) -> int:
        return self.offset + self.size


def iter_boxes(reader: ByteReader, start: int, end: int):
    """Yield the boxes laid out in [start, end).

    Handles the 64-bit extended size and size 0 (box runs to the end of its
    parent). A size below the header size raises ``MalformedContainer``.
    """
    pos = start
    while pos + 8 <= end:
        size = reader.u32(pos)
        box_type = reader.fourcc(pos + 4)
        header_size = 8

        # Handle extended size
        if size == 1:
            size = reader.u64(pos + 8)
            header_size = 16
        elif size == 0:
            size = end - pos

        if size < header_size:
            raise MalformedContainer(f"box {box_type!r} at offset {pos} has size {size}")
        if pos + size > end:
            raise MalformedContainer(
                f"box {box_type!r} at offset {pos} overruns its parent by {pos + size - end} bytes"
            )
        yield BoxInfo(type=box_type, offset=pos, size=size, header_size=header_size)
        pos += size


class IsoBmffParser(BaseParser):
    """Walk MP4/MOV/AVIF boxes collecting user data, XMP and C2PA."""

    name = "isobmff"
    container_types = (ContainerType.MP4, ContainerType.MOV, ContainerType.AVIF)

    def parse(self, data: bytes, result: ParseResult) -> None:
        reader = ByteReader(data)
        self.label = result.container_type.value
        self.parse_boxes(reader, 0, len(data), 0, result, parent=None)

    def parse_boxes(
        self,
        reader: ByteReader,
        start: int,
        end: int,
        depth: int,
        result: ParseResult,
        parent: str | None,
    ) -> None:
        for box in iter_boxes(reader, start, end):
            body_start = box.body_start

            if parent == "ilst":
                self.parse_ilst_item(reader, box, result)
                continue

            if box.type in CONTAINER_BOXES:
                if box.type == "meta":
                    if result.container_type is ContainerType.AVIF:
                        self.scan_meta(reader, box, result)
                    # Full box in ISO files, plain box in QuickTime
                    if reader.fourcc(body_start + 4) != "hdlr":
                        body_start += 4  # skip version/flags
                if depth < self.config.max_box_depth:
                    with result.recover(f"{box.type} box at offset {box.offset}"):
                        self.parse_boxes(reader, body_start, box.end, depth + 1, result, box.type)
                else:
                    logger.debug("{}: not descending into {} at depth {}", self.label, box.type, depth)
            elif box.type == "uuid":
                self.parse_uuid(reader, box, result)
            elif box.type == "xml ":
                # Full box: version/flags then the document
                body = reader.slice(body_start + 4, box.end - body_start - 4)
                result.add_field(f"{self.label} xml", decode_text(body))
            elif parent == "udta" and box.type.startswith("\xa9"):
                self.parse_quicktime_string(reader, box, result)

    def parse_ilst_item(self, reader: ByteReader, item: BoxInfo, result: ParseResult) -> None:
        name = ILST_ITEMS.get(item.type)
        if name is None:
            return
        values = []
        for child in iter_boxes(reader, item.body_start, item.end):
            if child.type == "data":
                # type indicator (4) + locale (4)
                value = reader.slice(child.body_start + 8, child.end - child.body_start - 8)
                values.append(decode_text(value))
            elif child.type == "name":
                values.append(decode_text(reader.slice(child.body_start + 4, child.end - child.body_start - 4)))
        result.add_field(f"{self.label} ilst {name}", "=".join(v for v in values if v))

    def parse_quicktime_string(self, reader: ByteReader, box: BoxInfo, result: ParseResult) -> None:
        # 16-bit length, 16-bit language, then text
        length = reader.u16(box.body_start)
        text = reader.slice(box.body_start + 4, min(length, box.end - box.body_start - 4))
        result.add_field(f"{self.label} udta {box.type}", decode_text(text))

    def parse_uuid(self, reader: ByteReader, box: BoxInfo, result: ParseResult) -> None:
        uuid = reader.slice(box.body_start, 16)
        payload = reader.slice(box.body_start + 16, box.end - box.body_start - 16)
        if uuid == XMP_UUID:
            result.add_field(f"{self.label} uuid XMP", decode_text(payload))
        elif uuid == C2PA_UUID or is_c2pa(payload):
            parse_c2pa(payload, result, f"{self.label} uuid")

    def scan_meta(self, reader: ByteReader, box: BoxInfo, result: ParseResult) -> None:
        body = reader.slice(box.body_start, box.size - box.header_size)
        strings = printable_strings(body)
        if strings:
            result.add_field(f"{self.label} meta strings", "\n".join(strings))
