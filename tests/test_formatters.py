"""Tests for output formatters."""

import json

from botornot.formatters import (
    format_default,
    format_header_scan,
    format_json,
    format_json_list,
    format_quiet,
    format_quiet_list,
    to_dict,
)
from botornot.models import (
    AnalysisResult,
    Confidence,
    ContainerType,
    HeaderScan,
    MetadataField,
    PixelMetrics,
    SignatureMatch,
)


def ai_result() -> AnalysisResult:
    match = SignatureMatch(
        tool="midjourney",
        matched="midjourney",
        confidence=Confidence.HIGH,
        source="JPEG EXIF Software",
        explanation='"midjourney" (tool) found in JPEG EXIF Software',
    )
    return AnalysisResult(
        is_ai=True,
        confidence=Confidence.HIGH,
        ai_score=80,
        detected_tool="midjourney",
        signatures=[match],
        pixel_metrics=PixelMetrics(unique_colors=900, gradient_ratio=0.25, sampled_pixels=2401),
        details=["Score 80/100: signatures 80, pixels 0, url 0 (definitive tool: midjourney)"],
        name="a.jpg",
        container_type=ContainerType.JPEG,
        warnings=["JPEG traversal stopped: something"],
    )


class TestDefault:
    """Test the default report."""

    def test_sections(self):
        """Test every section of an analysed result."""
        text = format_default(ai_result())

        assert text.startswith("=" * 70)
        assert "Media: a.jpg" in text
        assert "  AI:           Yes" in text
        assert "  Score:        80/100" in text
        assert "[high  ] midjourney: 'midjourney'" in text
        assert "  Colors:       900 unique (quantized)" in text
        assert "  Gradients:    25.0% smooth" in text
        assert "## WARNINGS" in text

    def test_blocked_pixels(self):
        """Test blocked pixel access is reported as such."""
        result = ai_result().model_copy(
            update={"pixel_metrics": PixelMetrics(unique_colors=1000, gradient_ratio=0.3, cors_blocked=True)}
        )
        assert "Access:       denied" in format_default(result)

    def test_failed(self):
        """Test an analysis-not-possible result."""
        result = AnalysisResult.failed("access denied (HTTP 403)", Confidence.BLOCKED, name="https://x/a.png")
        text = format_default(result)

        assert "## ANALYSIS NOT POSSIBLE" in text
        assert "Status:       blocked" in text
        assert "## VERDICT" not in text


class TestQuiet:
    """Test one-line summaries."""

    def test_ai(self):
        """Test the summary of an AI result."""
        assert format_quiet(ai_result()) == "a.jpg | JPEG | AI: yes (midjourney) | score 80 | confidence high"

    def test_failed(self):
        """Test the summary of a failed analysis."""
        result = AnalysisResult.failed("timed out", name="https://x/a.png")
        assert format_quiet(result) == "https://x/a.png | ERROR: Analysis not possible: timed out"

    def test_list(self):
        """Test one line per result."""
        assert len(format_quiet_list([ai_result(), ai_result()]).splitlines()) == 2


class TestJson:
    """Test JSON output."""

    def test_single(self):
        """Test a result serializes with enum values."""
        data = json.loads(format_json(ai_result()))

        assert data["confidence"] == "high"
        assert data["container_type"] == "JPEG"
        assert data["signatures"][0]["method"] == "catalog"

    def test_list_and_dict(self):
        """Test the list form and to_dict agree."""
        data = json.loads(format_json_list([ai_result()]))
        assert data == [to_dict(ai_result())]


def test_header_scan_preview_truncated():
    """Test long field values are shortened in the header report."""
    scan = HeaderScan(
        container_type=ContainerType.PNG,
        fields=[MetadataField(source="PNG tEXt keyword=workflow", text="x" * 500, container=ContainerType.PNG)],
    )
    text = format_header_scan(scan, "a.png")

    line = next(line for line in text.splitlines() if "keyword=workflow" in line)
    assert line.endswith("...")
    assert len(line) < 150
    assert "Confidence:   none" in text
