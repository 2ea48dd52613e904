"""Media bytes, container types and parse results."""

from __future__ import annotations

import contextlib
from collections.abc import Iterator
from enum import Enum

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from botornot.errors import MalformedContainer

FTYP = b"ftyp"


class ContainerType(str, Enum):
    """Container formats recognised from magic bytes."""

    JPEG = "JPEG"
    PNG = "PNG"
    GIF = "GIF"
    WEBP = "WebP"
    TIFF = "TIFF"
    AVIF = "AVIF"
    MP4 = "MP4"
    MOV = "MOV"
    AVI = "AVI"
    WEBM = "WebM"
    UNKNOWN = "Unknown"

    @classmethod
    def detect(cls, data: bytes) -> ContainerType:
        """Detect the container type from the leading bytes.

        Checks run in priority order and the first match wins. Short or
        unrecognised input yields ``UNKNOWN``; this never raises.
        """
        head = bytes(data[:16])

        if head.startswith(b"\xff\xd8\xff"):
            return cls.JPEG
        if head.startswith(b"\x89PNG"):
            return cls.PNG
        if head.startswith(b"GIF8"):
            return cls.GIF
        if head.startswith(b"RIFF") and head[8:12] == b"WEBP":
            return cls.WEBP
        if head[4:8] == FTYP and head[8:12] in (b"avif", b"avis"):
            return cls.AVIF
        if head.startswith((b"II*\x00", b"MM\x00*")):
            return cls.TIFF
        if head[4:8] == FTYP:
            return cls.MOV if head[8:12] == b"qt  " else cls.MP4
        if head.startswith(b"\x1a\x45\xdf\xa3"):
            return cls.WEBM
        if head.startswith(b"RIFF") and head[8:12] == b"AVI ":
            return cls.AVI
        return cls.UNKNOWN

    @property
    def is_raster_image(self) -> bool:
        """True for still-image formats Pillow can rasterize."""
        return self in (ContainerType.JPEG, ContainerType.PNG, ContainerType.GIF,
                        ContainerType.WEBP, ContainerType.TIFF)


class FieldKind(str, Enum):
    """How a recovered field should be treated by the matcher."""

    TEXT = "text"
    C2PA_MANIFEST = "c2pa_manifest"
    C2PA_CLAIM_GENERATOR = "c2pa_claim_generator"
    HEADER_SCAN = "header_scan"


class MediaBytes(BaseModel):
    """Raw media content plus its declared name or URL."""

    model_config = ConfigDict(frozen=True)

    data: bytes
    name: str | None = None
    truncated: bool = False  # cut at the byte source's size ceiling

    @property
    def size(self) -> int:
        return len(self.data)


class MetadataField(BaseModel):
    """One text-bearing field recovered from a container."""

    model_config = ConfigDict(frozen=True)

    source: str  # e.g. "PNG tEXt keyword=parameters"
    text: str
    container: ContainerType = ContainerType.UNKNOWN
    kind: FieldKind = FieldKind.TEXT


class ParseResult(BaseModel):
    """Everything one container walk recovered.

    Parsers populate this in place; fields keep traversal order.
    """

    container_type: ContainerType = ContainerType.UNKNOWN
    fields: list[MetadataField] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    def add_field(self, source: str, text: str, kind: FieldKind = FieldKind.TEXT) -> None:
        """Record a field; empty text is dropped."""
        if not text or not text.strip():
            return
        self.fields.append(
            MetadataField(source=source, text=text, container=self.container_type, kind=kind)
        )
        logger.debug("Recovered field {!r} ({} chars)", source, len(text))

    def warn(self, message: str) -> None:
        """Record a structural warning."""
        self.warnings.append(message)
        logger.warning("{}: {}", self.container_type.value, message)

    @contextlib.contextmanager
    def recover(self, context: str) -> Iterator[None]:
        """Stop the enclosed traversal on a malformed structure, keep going after it."""
        try:
            yield
        except MalformedContainer as e:
            self.warn(f"{context}: {e}")
