"""Default output formatter - verdict, evidence and rationale."""

from botornot.models import AnalysisResult, HeaderScan

MAX_FIELD_PREVIEW = 100


def format_default(result: AnalysisResult) -> str:
    """Format a result as a readable report.

    Sections:
    - Verdict (AI or not, score, confidence, detected tool)
    - Signatures (one line per match)
    - Pixels (when sampled)
    - Details (the scorer's rationale, in order)
    - Warnings (structural problems met while parsing)
    """
    lines = []

    lines.append("=" * 70)
    lines.append(f"Media: {result.name or '(bytes)'}")
    lines.append("=" * 70)

    if not result.analyzed:
        lines.append("")
        lines.append("## ANALYSIS NOT POSSIBLE")
        lines.append(f"  Status:       {result.confidence.value}")
        for detail in result.details:
            lines.append(f"  {detail}")
        lines.append("")
        lines.append("=" * 70)
        return "\n".join(lines)

    lines.append("")
    lines.append("## VERDICT")
    lines.append(f"  AI:           {'Yes' if result.is_ai else 'No'}")
    lines.append(f"  Score:        {result.ai_score}/100")
    lines.append(f"  Confidence:   {result.confidence.value}")
    if result.detected_tool:
        lines.append(f"  Tool:         {result.detected_tool}")
    if result.container_type:
        lines.append(f"  Container:    {result.container_type.value}")

    if result.signatures:
        lines.append("")
        lines.append("## SIGNATURES")
        for match in result.signatures:
            lines.append(f"  [{match.confidence.value:<6}] {match.tool}: {match.matched!r}")
            lines.append(f"           in {match.source}")

    metrics = result.pixel_metrics
    if metrics is not None:
        lines.append("")
        lines.append("## PIXELS")
        if metrics.cors_blocked:
            lines.append("  Access:       denied (neutral values used)")
        else:
            lines.append(f"  Colors:       {metrics.unique_colors} unique (quantized)")
            lines.append(f"  Gradients:    {metrics.gradient_ratio:.1%} smooth")
            lines.append(f"  Samples:      {metrics.sampled_pixels}")

    if result.details:
        lines.append("")
        lines.append("## DETAILS")
        for detail in result.details:
            lines.append(f"  {detail}")

    if result.warnings:
        lines.append("")
        lines.append("## WARNINGS")
        for warning in result.warnings:
            lines.append(f"  {warning}")

    lines.append("")
    lines.append("=" * 70)

    return "\n".join(lines)


def format_header_scan(scan: HeaderScan, name: str | None = None) -> str:
    """Format a header-only scan: recovered fields and signature matches."""
    lines = []

    lines.append("=" * 70)
    lines.append(f"Media: {name or '(bytes)'}")
    lines.append("=" * 70)
    lines.append("")
    lines.append("## HEADERS")
    lines.append(f"  Container:    {scan.container_type.value}")
    lines.append(f"  Fields:       {len(scan.fields)}")
    lines.append(f"  Confidence:   {scan.confidence.value}")

    if scan.fields:
        lines.append("")
        lines.append("## FIELDS")
        for field in scan.fields:
            text = " ".join(field.text.split())
            if len(text) > MAX_FIELD_PREVIEW:
                text = text[: MAX_FIELD_PREVIEW - 3] + "..."
            lines.append(f"  {field.source}: {text}")

    if scan.signatures:
        lines.append("")
        lines.append("## SIGNATURES")
        for match in scan.signatures:
            lines.append(f"  [{match.confidence.value:<6}] {match.tool}: {match.explanation}")

    if scan.warnings:
        lines.append("")
        lines.append("## WARNINGS")
        for warning in scan.warnings:
            lines.append(f"  {warning}")

    lines.append("")
    lines.append("=" * 70)

    return "\n".join(lines)
