"""Pixel statistics model."""

from pydantic import BaseModel, ConfigDict, Field


class PixelMetrics(BaseModel):
    """The visual fingerprint of one sampled image.

    - unique_colors: distinct quantized RGB triples among sampled pixels
    - gradient_ratio: share of right-neighbour comparisons that were smooth
    - sampled_pixels: how many grid pixels survived the alpha/white filter
    - cors_blocked: pixel reads were refused and the values are the
      neutral fallback
    """

    model_config = ConfigDict(frozen=True)

    unique_colors: int = Field(ge=0)
    gradient_ratio: float = Field(ge=0.0, le=1.0)
    sampled_pixels: int = Field(default=0, ge=0)
    cors_blocked: bool = False

    @property
    def has_samples(self) -> bool:
        """True when real pixels were measured."""
        return not self.cors_blocked and self.sampled_pixels > 0
