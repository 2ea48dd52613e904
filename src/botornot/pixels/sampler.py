"""Pixel statistics: colour diversity and gradient smoothness.

Rendered and generated images tend to have fewer distinct colours and
smoother neighbour transitions than camera photographs. Both statistics
are computed on a sparse grid of a fixed-size working surface.
"""

from __future__ import annotations

import numpy as np
from loguru import logger

from botornot.config import PixelConfig, get_config
from botornot.errors import PixelAccessDenied, PixelDecodeError
from botornot.models import PixelMetrics


def neutral_metrics(cors_blocked: bool = False, config: PixelConfig | None = None) -> PixelMetrics:
    """The fallback used when pixels cannot be read.

    The values sit on the photographic side of both thresholds, so they
    contribute no pixel evidence.
    """
    config = config or get_config().pixels
    return PixelMetrics(
        unique_colors=config.neutral_unique_colors,
        gradient_ratio=config.neutral_gradient_ratio,
        sampled_pixels=0,
        cors_blocked=cors_blocked,
    )


def compute_metrics(surface: np.ndarray, config: PixelConfig | None = None) -> PixelMetrics:
    """Compute colour and gradient statistics over an RGBA surface.

    Args:
        surface: ``H x W x 4`` uint8 array
        config: Sampling parameters

    Returns:
        PixelMetrics (sampled_pixels is 0 when every grid pixel was skipped)

    Raises:
        ValueError: If the array is not H x W x 4
    """
    config = config or get_config().pixels
    if surface.ndim != 3 or surface.shape[2] != 4:
        raise ValueError(f"expected an H x W x 4 RGBA array, got shape {surface.shape}")

    height, width = surface.shape[:2]
    step = max(1, min(height, width) // config.sampling_density)
    pixels = surface.astype(np.int32)

    ys = np.arange(0, height - step, step)
    xs = np.arange(0, width - step, step)
    if len(ys) == 0 or len(xs) == 0:
        return PixelMetrics(unique_colors=0, gradient_ratio=0.0, sampled_pixels=0)

    grid = pixels[np.ix_(ys, xs)]
    rgb = grid[..., :3]
    keep = (grid[..., 3] >= config.alpha_threshold) & ~np.all(rgb > config.white_threshold, axis=-1)

    sampled = int(keep.sum())
    if sampled == 0:
        return PixelMetrics(unique_colors=0, gradient_ratio=0.0, sampled_pixels=0)

    shift = 8 - (config.quantization_levels.bit_length() - 1)
    quantized = rgb[keep] >> shift
    keys = (quantized[:, 0] << 16) | (quantized[:, 1] << 8) | quantized[:, 2]
    unique_colors = int(np.unique(keys).size)

    # Right-hand neighbour of every grid pixel, step columns away
    neighbour = pixels[np.ix_(ys, xs + step)]
    comparable = keep & (neighbour[..., 3] >= config.alpha_threshold)
    distance = np.abs(rgb - neighbour[..., :3]).sum(axis=-1)
    comparisons = int(comparable.sum())
    smooth = int((comparable & (distance < config.smooth_threshold)).sum())
    gradient_ratio = round(smooth / comparisons, 3) if comparisons else 0.0

    return PixelMetrics(
        unique_colors=unique_colors,
        gradient_ratio=gradient_ratio,
        sampled_pixels=sampled,
    )


def sample(source, config: PixelConfig | None = None) -> PixelMetrics:
    """Obtain a working surface from a pixel source and measure it.

    Never raises for anticipated failures: refused pixel access yields the
    neutral metrics flagged ``cors_blocked``; undecodable media yields the
    neutral metrics.

    Args:
        source: Object with a ``surface(size)`` method returning RGBA pixels
        config: Sampling parameters
    """
    config = config or get_config().pixels
    try:
        surface = source.surface(config.surface_size)
    except PixelAccessDenied as e:
        logger.info("Pixel access denied, using neutral metrics: {}", e)
        return neutral_metrics(cors_blocked=True, config=config)
    except PixelDecodeError as e:
        logger.warning("Could not decode pixels, using neutral metrics: {}", e)
        return neutral_metrics(config=config)
    return compute_metrics(surface, config)
