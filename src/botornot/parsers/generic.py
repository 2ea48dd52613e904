"""Header-scan fallback."""

from botornot.models import FieldKind, ParseResult
from botornot.utils.binary import decode_text

HEADER_SCAN_SOURCE = "header scan"


def scan_header_text(data: bytes, result: ParseResult, limit: int) -> None:
    """Record the first ``limit`` bytes, decoded as UTF-8, as one field.

    Used for unrecognised containers and for containers whose walk found
    nothing; generator strings often sit in plain text near the start.
    """
    result.add_field(HEADER_SCAN_SOURCE, decode_text(data[:limit]), kind=FieldKind.HEADER_SCAN)
