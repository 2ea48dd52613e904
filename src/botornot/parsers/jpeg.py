"""JPEG marker walk."""

from loguru import logger

from botornot.models import ContainerType, ParseResult
from botornot.utils.binary import ByteReader, decode_text

from .base import BaseParser
from .c2pa import is_c2pa, parse_c2pa
from .tiff import EXIF_PREFIX, parse_exif

XMP_NAMESPACE = b"http://ns.adobe.com/xap/1.0/"

SOS = 0xDA
EOI = 0xD9
COM = 0xFE
APP0 = 0xE0
APP1 = 0xE1
APP15 = 0xEF

# Markers without a length field
STANDALONE = {0x01, *range(0xD0, 0xD8)}


class JpegParser(BaseParser):
    """Walk JPEG segments up to the start of scan.

    APP1 carries EXIF, XMP or (rarely) C2PA; APP11 carries C2PA JUMBF
    boxes; other APPn and COM segments are kept as text.
    """

    name = "jpeg"
    container_types = (ContainerType.JPEG,)

    def parse(self, data: bytes, result: ParseResult) -> None:
        reader = ByteReader(data)
        pos = 2
        end = len(data)

        while pos < end:
            if data[pos] != 0xFF:
                # Lost sync: move on one byte at a time
                pos += 1
                continue
            if pos + 1 >= end:
                break
            marker = data[pos + 1]
            if marker == 0xFF:
                pos += 1  # fill byte
                continue
            if marker in STANDALONE:
                pos += 2
                continue
            if marker in (SOS, EOI):
                logger.debug("JPEG: stopping at marker 0x{:02X}, offset {}", marker, pos)
                break

            length = reader.u16(pos + 2)
            if length < 2:
                result.warn(f"segment 0x{marker:02X} at offset {pos} has length {length}")
                break
            payload = reader.slice(pos + 4, length - 2)
            self.parse_segment(marker, payload, result)
            pos += 2 + length

    def parse_segment(self, marker: int, payload: bytes, result: ParseResult) -> None:
        if marker == COM:
            result.add_field("JPEG Comment", decode_text(payload))
            return
        if not APP0 <= marker <= APP15:
            return

        app = f"APP{marker - APP0}"
        if marker == APP1 and payload.startswith(EXIF_PREFIX):
            parse_exif(payload[len(EXIF_PREFIX) :], result, "JPEG EXIF")
        elif marker == APP1 and payload.startswith(XMP_NAMESPACE):
            xmp = payload[len(XMP_NAMESPACE) :].lstrip(b"\x00")
            result.add_field("JPEG XMP", decode_text(xmp))
        elif is_c2pa(payload):
            parse_c2pa(payload, result, f"JPEG {app}")
        else:
            result.add_field(f"JPEG {app}", decode_text(payload, "latin-1"))
