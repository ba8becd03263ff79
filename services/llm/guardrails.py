"""LLM output guardrails.

Oracle answers are parsed defensively: a score is the first decimal found in
the text, clamped to [0, 1]; structured answers must be a JSON object, possibly
wrapped in code fences.
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict

from services.errors import MalformedOracleOutputError
from utils.humanize import clamp01

_DECIMAL_RE = re.compile(r"\d*\.?\d+")
_JSON_FENCE_RE = re.compile(r"^```(?:json)?\s*|```\s*$", re.IGNORECASE | re.MULTILINE)


def strip_fences(s: str) -> str:
    s = (s or "").strip()
    return _JSON_FENCE_RE.sub("", s).strip()


def parse_score(text: str) -> float:
    """Extract the first decimal in ``text`` and clamp it into [0, 1]."""
    match = _DECIMAL_RE.search(text or "")
    if not match:
        raise MalformedOracleOutputError("no numeric score in oracle output", raw=text)
    return clamp01(float(match.group(0)))


def parse_json_object(text: str) -> Dict[str, Any]:
    """Parse a JSON object out of an oracle answer."""
    try:
        parsed = json.loads(strip_fences(text))
    except json.JSONDecodeError as e:
        raise MalformedOracleOutputError(f"oracle returned invalid JSON: {e.msg}", raw=text) from e
    if not isinstance(parsed, dict):
        raise MalformedOracleOutputError(
            f"expected a JSON object, got {type(parsed).__name__}", raw=text
        )
    return parsed
