"""Bounds-checked binary reading helpers."""

from __future__ import annotations

import re
import struct

from botornot.errors import MalformedContainer

# Runs of printable ASCII, used by the permissive text scans
PRINTABLE_RUN = re.compile(rb"[\x20-\x7e]{4,}")


def _printable_run(min_length: int) -> re.Pattern:
    if min_length == 4:
        return PRINTABLE_RUN
    return re.compile(rb"[\x20-\x7e]{%d,}" % max(min_length, 1))


class ByteReader:
    """Read integers and slices out of a byte buffer.

    Every read is bounds-checked and raises ``MalformedContainer`` instead
    of ``IndexError``/``struct.error``, so a parser can treat any overrun as
    a structural problem.
    """

    def __init__(self, data: bytes, little_endian: bool = False) -> None:
        self.data = data
        self.little_endian = little_endian

    def __len__(self) -> int:
        return len(self.data)

    def _unpack(self, fmt: str, offset: int, size: int, little: bool | None) -> int:
        if offset < 0 or offset + size > len(self.data):
            raise MalformedContainer(
                f"read of {size} bytes at offset {offset} outside buffer of {len(self.data)}"
            )
        order = "<" if (self.little_endian if little is None else little) else ">"
        return struct.unpack_from(order + fmt, self.data, offset)[0]

    def u16(self, offset: int, little: bool | None = None) -> int:
        return self._unpack("H", offset, 2, little)

    def u32(self, offset: int, little: bool | None = None) -> int:
        return self._unpack("I", offset, 4, little)

    def u64(self, offset: int, little: bool | None = None) -> int:
        return self._unpack("Q", offset, 8, little)

    def fourcc(self, offset: int) -> str:
        """Four-character code, decoded as Latin-1 so it never fails."""
        return self.slice(offset, 4).decode("latin-1")

    def slice(self, offset: int, length: int) -> bytes:
        """Return exactly ``length`` bytes starting at ``offset``."""
        if offset < 0 or length < 0 or offset + length > len(self.data):
            raise MalformedContainer(
                f"{length} bytes at offset {offset} overrun buffer of {len(self.data)}"
            )
        return self.data[offset : offset + length]


def decode_text(data: bytes, encoding: str = "utf-8") -> str:
    """Decode best-effort: invalid sequences are replaced, NULs stripped at the ends."""
    return data.decode(encoding, errors="replace").strip("\x00").strip()


def printable_strings(data: bytes, min_length: int = 4) -> list[str]:
    """Extract printable ASCII runs (like the ``strings`` utility)."""
    return [m.group().decode("ascii") for m in _printable_run(min_length).finditer(data)]


def split_nul(data: bytes, offset: int = 0) -> tuple[bytes, int]:
    """Read a NUL-terminated byte string.

    Returns:
        Tuple of (value, offset just past the NUL)

    Raises:
        MalformedContainer: If there is no terminator
    """
    end = data.find(b"\x00", offset)
    if end < 0:
        raise MalformedContainer("missing NUL terminator")
    return data[offset:end], end + 1
