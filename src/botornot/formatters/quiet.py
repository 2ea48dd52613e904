"""Quiet output formatter - one-line summary."""

from botornot.models import AnalysisResult


def format_quiet(result: AnalysisResult) -> str:
    """Format a result as one-line summary.

    Format: name | container | AI: yes/no (tool) | score | confidence
    """
    parts = [result.name or "-"]

    if not result.analyzed:
        parts.append(f"{result.confidence.value.upper()}: {result.details[0]}")
        return " | ".join(parts)

    parts.append(result.container_type.value if result.container_type else "N/A")

    if result.is_ai:
        parts.append(f"AI: yes ({result.detected_tool or 'Unknown'})")
    else:
        parts.append("AI: no")

    parts.append(f"score {result.ai_score}")
    parts.append(f"confidence {result.confidence.value}")
    return " | ".join(parts)


def format_quiet_list(results: list[AnalysisResult]) -> str:
    """Format multiple results as one-line summaries, one per line."""
    return "\n".join(format_quiet(r) for r in results)
