"""Pixel statistics engine."""

from botornot.pixels.sampler import compute_metrics, neutral_metrics, sample
from botornot.pixels.sources import ArraySource, ImageBytesSource, PillowImageSource, PixelSource

__all__ = [
    "ArraySource",
    "ImageBytesSource",
    "PillowImageSource",
    "PixelSource",
    "compute_metrics",
    "neutral_metrics",
    "sample",
]
