"""GIF comment extension scan."""

from botornot.errors import MalformedContainer
from botornot.models import ContainerType, ParseResult
from botornot.utils.binary import decode_text

from .base import BaseParser

COMMENT_EXTENSION = b"\x21\xfe"


class GifParser(BaseParser):
    """Record every comment extension (``0x21 0xFE``).

    The block structure is not walked; the introducer is searched for and
    its sub-blocks are concatenated up to the zero-length terminator.
    """

    name = "gif"
    container_types = (ContainerType.GIF,)

    def parse(self, data: bytes, result: ParseResult) -> None:
        pos = data.find(COMMENT_EXTENSION)
        while pos >= 0:
            text, end = self.read_sub_blocks(data, pos + 2)
            result.add_field("GIF Comment", decode_text(text, "latin-1"))
            pos = data.find(COMMENT_EXTENSION, end)

    @staticmethod
    def read_sub_blocks(data: bytes, pos: int) -> tuple[bytes, int]:
        chunks = []
        while True:
            if pos >= len(data):
                raise MalformedContainer("comment extension runs past end of data")
            size = data[pos]
            if size == 0:
                return b"".join(chunks), pos + 1
            if pos + 1 + size > len(data):
                raise MalformedContainer(f"comment sub-block of {size} bytes overruns data")
            chunks.append(data[pos + 1 : pos + 1 + size])
            pos += 1 + size
