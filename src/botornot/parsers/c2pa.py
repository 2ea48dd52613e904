"""C2PA Content Credentials sub-parser.

C2PA manifests are JUMBF/CBOR structures embedded in JPEG APP11 segments,
PNG ``caBX`` chunks or ISO-BMFF ``uuid`` boxes. Rather than decode the whole
CBOR tree we look for the text that survives inside it: the claim
generator, assertion labels and ingredient lists.
"""

import re

from botornot.models import FieldKind, ParseResult
from botornot.utils.binary import decode_text, printable_strings

C2PA_TOKEN = b"c2pa"

# JSON form: "claim_generator": "Adobe Firefly 2.0"
CLAIM_GENERATOR_JSON = re.compile(r'"claim_generator"\s*:\s*"([^"]+)"', re.IGNORECASE)
CLAIM_GENERATOR_KEY = b"claim_generator"
ASSERTIONS = re.compile(r'"assertions"\s*:\s*\[([^\]]*)\]', re.IGNORECASE)
INGREDIENTS = re.compile(r'"ingredients"\s*:\s*\[([^\]]*)\]', re.IGNORECASE)

MAX_MANIFEST_CHARS = 64 * 1024


def is_c2pa(data: bytes) -> bool:
    """Check if a byte range carries C2PA tokens ("C2PA", "c2pa", "c2pa.org")."""
    return C2PA_TOKEN in data.lower()


def extract_json_block(text: str) -> str | None:
    """Return the substring from the first '{' to the last '}' (None if absent)."""
    start = text.find("{")
    end = text.rfind("}")
    if start < 0 or end <= start:
        return None
    return text[start : end + 1]


def cbor_text_after(data: bytes, key: bytes) -> str | None:
    """Read the CBOR text string that follows ``key`` (map key, then value).

    Only the text-string headers a claim generator uses are understood:
    short (0x60-0x77), one-byte length (0x78) and two-byte length (0x79).
    """
    pos = data.find(key)
    if pos < 0:
        return None
    pos += len(key)
    if pos >= len(data):
        return None

    head = data[pos]
    if 0x60 <= head <= 0x77:
        length, start = head - 0x60, pos + 1
    elif head == 0x78 and pos + 1 < len(data):
        length, start = data[pos + 1], pos + 2
    elif head == 0x79 and pos + 2 < len(data):
        length, start = int.from_bytes(data[pos + 1 : pos + 3], "big"), pos + 3
    else:
        return None
    return decode_text(data[start : start + length]) or None


def find_claim_generator(data: bytes) -> str | None:
    """Find the claim generator in a JSON manifest or a CBOR claim."""
    match = CLAIM_GENERATOR_JSON.search(data.decode("latin-1"))
    if match:
        return match.group(1).strip() or None
    return cbor_text_after(data, CLAIM_GENERATOR_KEY)


def parse_c2pa(data: bytes, result: ParseResult, label: str) -> None:
    """Record the manifest text and the claim generator of a C2PA block.

    Args:
        data: Bytes of the segment/chunk/box holding the manifest
        result: ParseResult to populate
        label: Source label prefix, e.g. "JPEG APP11"
    """
    text = data.decode("latin-1")

    manifest = extract_json_block(text)
    if manifest is None:
        manifest = "\n".join(printable_strings(data))
    summary = [manifest[:MAX_MANIFEST_CHARS]]

    assertions = ASSERTIONS.search(text)
    if assertions:
        summary.append(f"assertions: {assertions.group(1)[:500]}")
    ingredients = INGREDIENTS.search(text)
    if ingredients:
        summary.append(f"ingredients: {ingredients.group(1)[:500]}")

    # An empty manifest still marks the presence of content credentials
    result.add_field(
        f"{label} C2PA manifest",
        "\n".join(summary).strip() or "C2PA",
        kind=FieldKind.C2PA_MANIFEST,
    )

    generator = find_claim_generator(data)
    if generator:
        result.add_field(
            f"{label} C2PA claim_generator",
            generator,
            kind=FieldKind.C2PA_CLAIM_GENERATOR,
        )
