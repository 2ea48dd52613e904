"""JSON output formatter."""

import json
from typing import Any

from botornot.models import AnalysisResult


def format_json(result: AnalysisResult, indent: int = 2) -> str:
    """Format a result as JSON string.

    Args:
        result: AnalysisResult object
        indent: JSON indentation level

    Returns:
        JSON formatted string
    """
    return result.model_dump_json(indent=indent)


def format_json_list(results: list[AnalysisResult], indent: int = 2) -> str:
    """Format multiple results as JSON array.

    Args:
        results: List of AnalysisResult objects
        indent: JSON indentation level

    Returns:
        JSON array formatted string
    """
    data = [r.model_dump(mode="json") for r in results]
    return json.dumps(data, indent=indent, ensure_ascii=False, default=str)


def to_dict(result: AnalysisResult) -> dict[str, Any]:
    """Convert a result to dictionary."""
    return result.model_dump(mode="json")
