"""Analysis result models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .media import ContainerType, MetadataField
from .pixels import PixelMetrics
from .signature import Confidence, SignatureMatch


class HeaderScan(BaseModel):
    """Header-only scan: parse and match, no pixels, no scoring."""

    model_config = ConfigDict(frozen=True)

    container_type: ContainerType
    fields: list[MetadataField] = Field(default_factory=list)
    signatures: list[SignatureMatch] = Field(default_factory=list)
    confidence: Confidence = Confidence.NONE
    warnings: list[str] = Field(default_factory=list)

    @property
    def has_signatures(self) -> bool:
        return bool(self.signatures)


class AnalysisResult(BaseModel):
    """Final verdict for one piece of media.

    ``confidence`` separates "nothing detectable" (NONE) from "analysis
    could not run" (ERROR/BLOCKED).
    """

    model_config = ConfigDict(frozen=True)

    is_ai: bool = False
    confidence: Confidence = Confidence.NONE
    ai_score: int = Field(default=0, ge=0, le=100)
    detected_tool: str | None = None
    signatures: list[SignatureMatch] = Field(default_factory=list)
    pixel_metrics: PixelMetrics | None = None
    details: list[str] = Field(default_factory=list)

    name: str | None = None  # file path or URL, when known
    container_type: ContainerType | None = None
    warnings: list[str] = Field(default_factory=list)

    @classmethod
    def failed(
        cls, reason: str, confidence: Confidence = Confidence.ERROR, name: str | None = None
    ) -> AnalysisResult:
        """Build the result for an analysis that could not be attempted."""
        if confidence not in (Confidence.ERROR, Confidence.BLOCKED):
            raise ValueError(f"failed() needs ERROR or BLOCKED, got {confidence.value}")
        return cls(confidence=confidence, details=[f"Analysis not possible: {reason}"], name=name)

    @property
    def analyzed(self) -> bool:
        """True unless the result is an ERROR/BLOCKED placeholder."""
        return self.confidence not in (Confidence.ERROR, Confidence.BLOCKED)
