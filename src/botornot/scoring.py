"""Unified scorer: combine signature, pixel and URL evidence into a verdict."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from loguru import logger

from botornot.config import ScoringConfig, get_config
from botornot.models import (
    AnalysisResult,
    Confidence,
    MatchMethod,
    PixelMetrics,
    SignatureMatch,
)
from botornot.signatures.catalog import SignatureCatalog
from botornot.signatures.matcher import C2PA_TOOL
from botornot.signatures.urls import match_url

CGI_TOOL = "rendered/CGI"


@dataclass(frozen=True)
class ScoreBreakdown:
    """Points contributed by each evidence category."""

    signature: int = 0
    pixel: int = 0
    url: int = 0
    definitive_tool: str | None = None
    low_color_override: bool = False

    @property
    def total(self) -> int:
        if self.low_color_override:
            return 100
        return min(100, self.signature + self.pixel + self.url)


def _tier_points(confidence: Confidence, points: Sequence[int]) -> int:
    high, medium, low = points
    return {Confidence.HIGH: high, Confidence.MEDIUM: medium, Confidence.LOW: low}.get(confidence, 0)


def signature_points(
    matches: Sequence[SignatureMatch], catalog: SignatureCatalog, config: ScoringConfig
) -> tuple[int, str | None]:
    """Points from metadata signatures.

    Returns:
        Tuple of (points, definitive tool or None). A high match naming a
        definitive tool clamps the points to the signature maximum.
    """
    if not matches:
        return 0, None

    tiers = (config.high_points, config.medium_points, config.low_points)
    points = sum(_tier_points(m.confidence, tiers) for m in matches)
    points += min(config.multiplicity_bonus * (len(matches) - 1), config.multiplicity_cap)
    points = min(points, config.max_signature_points)

    for match in matches:
        if match.confidence is Confidence.HIGH and catalog.is_definitive(match.tool):
            return config.max_signature_points, match.tool
    return points, None


def pixel_points(metrics: PixelMetrics | None, config: ScoringConfig) -> int:
    """Points from pixel statistics (0 when there is nothing measured)."""
    if metrics is None or not metrics.has_samples:
        return 0

    color_span = config.cgi_color_threshold - config.definitive_color_floor
    color_strength = (config.cgi_color_threshold - metrics.unique_colors) / color_span
    gradient_strength = (metrics.gradient_ratio - config.cgi_gradient_threshold) / (
        1.0 - config.cgi_gradient_threshold
    )
    color_strength = min(1.0, max(0.0, color_strength))
    gradient_strength = min(1.0, max(0.0, gradient_strength))

    combined = config.color_weight * color_strength + (1.0 - config.color_weight) * gradient_strength
    return round(config.max_pixel_points * combined)


def url_points(url_matches: Sequence[SignatureMatch], config: ScoringConfig) -> int:
    """Points from URL host and filename patterns, capped."""
    points = 0
    for match in url_matches:
        tiers = config.url_host_points if match.method is MatchMethod.URL else config.url_filename_points
        points += _tier_points(match.confidence, tiers)
    return min(points, config.max_url_points)


def confidence_band(ai_score: int, config: ScoringConfig) -> Confidence:
    if ai_score >= config.high_band:
        return Confidence.HIGH
    if ai_score >= config.medium_band:
        return Confidence.MEDIUM
    if ai_score >= config.low_band:
        return Confidence.LOW
    return Confidence.NONE


def _strongest(matches: Sequence[SignatureMatch]) -> SignatureMatch | None:
    best = None
    for match in matches:
        # A bare manifest names a format, not a generator
        if match.method is MatchMethod.C2PA and match.tool == C2PA_TOOL:
            continue
        if best is None or match.confidence.rank > best.confidence.rank:
            best = match
    return best


def _pixel_line(metrics: PixelMetrics | None) -> str | None:
    if metrics is None:
        return None
    if metrics.cors_blocked:
        return "Pixels: access denied, no visual evidence"
    if not metrics.has_samples:
        return "Pixels: no opaque pixels sampled"
    return (
        f"Pixels: {metrics.unique_colors} unique colors, "
        f"{metrics.gradient_ratio:.1%} smooth gradients ({metrics.sampled_pixels} samples)"
    )


def score(
    matches: Sequence[SignatureMatch],
    pixel_metrics: PixelMetrics | None = None,
    url: str | None = None,
    *,
    catalog: SignatureCatalog,
    config: ScoringConfig | None = None,
) -> AnalysisResult:
    """Combine all evidence into an AnalysisResult.

    Args:
        matches: Signature matches from metadata fields
        pixel_metrics: Pixel statistics, if the media was sampled
        url: URL or filename of the media, matched as weak evidence
        catalog: Catalog providing the definitive tool list
        config: Weights and thresholds (defaults to the global configuration)

    Returns:
        AnalysisResult; ``signatures`` holds metadata matches then URL matches
    """
    config = config or get_config().scoring
    url_matches = match_url(url, catalog) if url else []

    sig_points, definitive = signature_points(matches, catalog, config)
    low_color = (
        pixel_metrics is not None
        and pixel_metrics.has_samples
        and pixel_metrics.unique_colors < config.definitive_color_floor
    )
    breakdown = ScoreBreakdown(
        signature=sig_points,
        pixel=pixel_points(pixel_metrics, config),
        url=url_points(url_matches, config),
        definitive_tool=definitive,
        low_color_override=low_color,
    )

    ai_score = breakdown.total
    is_ai = ai_score >= config.decision_threshold
    confidence = Confidence.HIGH if low_color else confidence_band(ai_score, config)

    all_matches = [*matches, *url_matches]
    strongest = _strongest(all_matches)
    if strongest is not None:
        detected_tool = strongest.tool
    elif is_ai and (breakdown.pixel > 0 or low_color):
        detected_tool = CGI_TOOL
    else:
        detected_tool = None

    details = [
        f"Score {ai_score}/100: signatures {breakdown.signature}, "
        f"pixels {breakdown.pixel}, url {breakdown.url}"
    ]
    if definitive:
        details[0] += f" (definitive tool: {definitive})"
    if low_color:
        details[0] += f" (fewer than {config.definitive_color_floor} colors)"
    details.extend(f"{m.confidence.value.upper()}: {m.tool} - {m.explanation}" for m in matches)
    pixel_line = _pixel_line(pixel_metrics)
    if pixel_line:
        details.append(pixel_line)
    if breakdown.url > 0:
        details.append(
            "URL: " + "; ".join(m.explanation for m in url_matches) + f" (+{breakdown.url})"
        )

    logger.debug(
        "Scored {} (signatures={}, pixels={}, url={}, ai={})",
        ai_score,
        breakdown.signature,
        breakdown.pixel,
        breakdown.url,
        is_ai,
    )

    return AnalysisResult(
        is_ai=is_ai,
        confidence=confidence,
        ai_score=ai_score,
        detected_tool=detected_tool,
        signatures=all_matches,
        pixel_metrics=pixel_metrics,
        details=details,
    )
