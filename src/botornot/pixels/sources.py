"""Pixel sources: where the working surface comes from.

A pixel source has one method, ``surface(size)``, returning a
``size x size x 4`` uint8 RGBA array. Sources raise ``PixelAccessDenied``
when reads are refused and ``PixelDecodeError`` when the media cannot be
turned into pixels.
"""

from __future__ import annotations

import io
from abc import ABC, abstractmethod

import numpy as np
from PIL import Image, UnidentifiedImageError

from botornot.errors import PixelDecodeError


class PixelSource(ABC):
    """Base class for pixel sources."""

    @abstractmethod
    def surface(self, size: int) -> np.ndarray:
        """Return an RGBA surface resized to ``size`` x ``size``."""
        pass


def _to_surface(image: Image.Image, size: int) -> np.ndarray:
    rgba = image.convert("RGBA").resize((size, size), Image.Resampling.BILINEAR)
    return np.asarray(rgba, dtype=np.uint8)


class PillowImageSource(PixelSource):
    """An already-open Pillow image."""

    def __init__(self, image: Image.Image) -> None:
        self.image = image

    def surface(self, size: int) -> np.ndarray:
        try:
            return _to_surface(self.image, size)
        except (OSError, ValueError) as e:
            raise PixelDecodeError(f"could not read image pixels: {e}") from e


class ImageBytesSource(PixelSource):
    """Encoded image bytes (PNG, JPEG, GIF, WebP, TIFF...) decoded with Pillow."""

    def __init__(self, data: bytes) -> None:
        self.data = data

    def surface(self, size: int) -> np.ndarray:
        try:
            with Image.open(io.BytesIO(self.data)) as image:
                image.load()
                return _to_surface(image, size)
        except UnidentifiedImageError as e:
            raise PixelDecodeError("not a decodable image") from e
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            raise PixelDecodeError(f"image decode failed: {e}") from e


class ArraySource(PixelSource):
    """A caller-supplied ``H x W x 4`` (or ``H x W x 3``) uint8 array."""

    def __init__(self, pixels: np.ndarray) -> None:
        self.pixels = pixels

    def surface(self, size: int) -> np.ndarray:
        pixels = np.asarray(self.pixels)
        if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
            raise PixelDecodeError(f"expected H x W x 3 or H x W x 4 pixels, got shape {pixels.shape}")
        image = Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8))
        return _to_surface(image, size)
