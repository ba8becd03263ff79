"""Human-friendly renderings for prompts and summaries."""

from __future__ import annotations

from typing import Any, Optional


def clamp01(x: float) -> float:
    try:
        return max(0.0, min(1.0, float(x)))
    except (TypeError, ValueError):
        return 0.5


def band_label(score01: float) -> str:
    """Convert a 0–1 desirability score into a qualitative label."""
    s = clamp01(score01)
    if s >= 0.75:
        return "strongly positive"
    if s >= 0.60:
        return "moderately positive"
    if s >= 0.45:
        return "mixed"
    if s >= 0.30:
        return "moderately negative"
    return "strongly negative"


def humanize_event(action: str) -> str:
    """``skill_obsolescence`` -> ``skill obsolescence``."""
    return (action or "").replace("_", " ").strip()


def or_unknown(value: Optional[Any], fmt: str = "{}") -> str:
    """Render an optional profile value, ``unknown`` when missing."""
    if value is None or value == "":
        return "unknown"
    return fmt.format(value)
