"""TIFF and EXIF parsing.

EXIF is a TIFF structure, so the same IFD walk serves bare TIFF files,
JPEG APP1 ``Exif`` payloads, PNG ``eXIf`` chunks and WebP ``EXIF`` chunks.
"""

from __future__ import annotations

from loguru import logger

from botornot.errors import MalformedContainer
from botornot.models import ContainerType, ParseResult
from botornot.utils.binary import ByteReader, decode_text, printable_strings

from .base import BaseParser

EXIF_PREFIX = b"Exif\x00\x00"
EXIF_IFD_POINTER = 0x8769

ASCII = 2
UNDEFINED = 7
BYTE = 1

# Tag id -> name of the text-bearing tags we keep
TEXT_TAGS: dict[int, str] = {
    0x010E: "ImageDescription",
    0x010F: "Make",
    0x0110: "Model",
    0x0131: "Software",
    0x0132: "DateTime",
    0x013B: "Artist",
    0x013C: "HostComputer",
    0x8298: "Copyright",
    0x9003: "DateTimeOriginal",
    0x9004: "DateTimeDigitized",
    0x9286: "UserComment",
}

# Windows Explorer tags, stored as UTF-16LE BYTE arrays
XP_TAGS: dict[int, str] = {
    0x9C9B: "XPTitle",
    0x9C9C: "XPComment",
    0x9C9D: "XPAuthor",
    0x9C9E: "XPKeywords",
    0x9C9F: "XPSubject",
}

# Value size per TIFF field type
TYPE_SIZES = {1: 1, 2: 1, 3: 2, 4: 4, 5: 8, 6: 1, 7: 1, 8: 2, 9: 4, 10: 8, 11: 4, 12: 8}

# UserComment charset prefixes
USER_COMMENT_CODES = {
    b"ASCII\x00\x00\x00": "ascii",
    b"UNICODE\x00": "utf-16",
    b"JIS\x00\x00\x00\x00\x00": "shift_jis",
    b"\x00" * 8: "utf-8",
}

MAX_IFD_ENTRIES = 1000


def decode_user_comment(value: bytes, little_endian: bool = True) -> str:
    """Decode a UserComment, honouring its 8-byte character code prefix."""
    prefix, body = value[:8], value[8:]
    encoding = USER_COMMENT_CODES.get(prefix)
    if encoding is None:
        return decode_text(value)
    if encoding == "utf-16":
        # Byte order follows the enclosing TIFF unless a BOM says otherwise
        if body[:2] in (b"\xff\xfe", b"\xfe\xff"):
            return decode_text(body, "utf-16")
        return decode_text(body, "utf-16-le" if little_endian else "utf-16-be")
    return decode_text(body, encoding)


class ExifWalker:
    """Strict IFD walk over one TIFF/EXIF byte range."""

    def __init__(self, data: bytes, result: ParseResult, label: str) -> None:
        self.data = data
        self.result = result
        self.label = label
        self.visited: set[int] = set()
        self.found: list[str] = []

    def walk(self) -> None:
        if len(self.data) < 8:
            raise MalformedContainer("TIFF header truncated")
        order = self.data[:2]
        if order == b"II":
            reader = ByteReader(self.data, little_endian=True)
        elif order == b"MM":
            reader = ByteReader(self.data, little_endian=False)
        else:
            raise MalformedContainer(f"bad byte order mark {order!r}")
        if reader.u16(2) != 42:
            raise MalformedContainer("bad TIFF magic")
        pending = [reader.u32(4)]
        while pending:
            offset = pending.pop(0)
            if offset in self.visited:
                raise MalformedContainer(f"IFD at offset {offset} visited twice")
            self.visited.add(offset)
            pending.extend(self.walk_ifd(reader, offset))

    def walk_ifd(self, reader: ByteReader, offset: int) -> list[int]:
        """Record the text tags of one IFD and return its sub-IFD offsets."""
        count = reader.u16(offset)
        if count > MAX_IFD_ENTRIES:
            raise MalformedContainer(f"implausible IFD entry count {count}")

        sub_ifds: list[int] = []
        for i in range(count):
            entry = offset + 2 + i * 12
            tag = reader.u16(entry)
            field_type = reader.u16(entry + 2)
            n = reader.u32(entry + 4)

            if tag == EXIF_IFD_POINTER:
                sub_ifds.append(reader.u32(entry + 8))
                continue

            name = TEXT_TAGS.get(tag) or XP_TAGS.get(tag)
            if name is None:
                continue

            size = TYPE_SIZES.get(field_type, 1) * n
            if size <= 4:
                value = reader.slice(entry + 8, size)
            else:
                value = reader.slice(reader.u32(entry + 8), size)

            if tag in XP_TAGS:
                text = decode_text(value, "utf-16-le")
            elif tag == 0x9286:
                text = decode_user_comment(value, reader.little_endian)
            else:
                text = decode_text(value)
            self.record(name, text)

        return sub_ifds

    def record(self, name: str, text: str) -> None:
        if not text:
            return
        self.found.append(text)
        self.result.add_field(f"{self.label} {name}", text)


def parse_exif(data: bytes, result: ParseResult, label: str = "EXIF") -> None:
    """Parse an EXIF/TIFF byte range into fields.

    A leading ``Exif\\0\\0`` is stripped. The strict IFD walk stops at the
    first inconsistency (recorded as a warning); afterwards a permissive
    scan of printable runs records anything the walk did not reach as one
    ``EXIF strings`` field.

    Args:
        data: TIFF-structured bytes
        result: ParseResult to populate
        label: Source label prefix, e.g. "JPEG EXIF"
    """
    if data.startswith(EXIF_PREFIX):
        data = data[len(EXIF_PREFIX) :]

    walker = ExifWalker(data, result, label)
    with result.recover(f"{label} IFD walk"):
        walker.walk()

    known = "\n".join(walker.found)
    extra = [s for s in printable_strings(data) if s.strip() and s not in known]
    if extra:
        logger.debug("{}: {} printable runs outside the IFD walk", label, len(extra))
        result.add_field(f"{label} strings", "\n".join(extra))


class TiffParser(BaseParser):
    """Parser for bare TIFF files."""

    name = "tiff"
    container_types = (ContainerType.TIFF,)

    def parse(self, data: bytes, result: ParseResult) -> None:
        parse_exif(data, result, "TIFF")
