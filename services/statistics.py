"""Reductions applied to Monte Carlo outcomes and inputs."""
from __future__ import annotations

import dataclasses
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple

import numpy as np
from pydantic import BaseModel

from models.simulation import (
    ConfidenceInterval,
    ConfidenceLevel,
    DataQuality,
    MetricDefinition,
    OutcomeStats,
    PercentileStats,
)

PERCENTILE_LADDER = (5, 10, 25, 50, 75, 90, 95)

# Substring of the dotted field path -> importance. First match wins.
FIELD_IMPORTANCE: Tuple[Tuple[str, int], ...] = (
    ("salary", 3),
    ("age", 2),
    ("location", 2),
    ("dependents", 2),
    ("savings", 3),
    ("expenses", 3),
    ("industry", 1),
    ("education", 1),
)
DEFAULT_IMPORTANCE = 1


def percentile(sorted_values: Sequence[float], p: float) -> float:
    """Linear interpolation at index ``p/100 * (n-1)`` of an ascending array."""
    if len(sorted_values) == 0:
        raise ValueError("percentile of an empty sample")
    return float(np.percentile(np.asarray(sorted_values, dtype=float), p))


def summarize_metric(values: Iterable[float]) -> Tuple[OutcomeStats, PercentileStats]:
    """Mean, population std, percentile ladder and 95% band for one metric."""
    arr = np.sort(np.asarray(list(values), dtype=float))
    if arr.size == 0:
        raise ValueError("cannot summarize a metric with no values")

    ladder = np.percentile(arr, PERCENTILE_LADDER)
    ladder = np.maximum.accumulate(ladder)
    lower, upper = np.percentile(arr, [2.5, 97.5])

    outcome = OutcomeStats(
        mean=float(np.mean(arr)),
        median=float(np.percentile(arr, 50)),
        std_dev=float(np.std(arr)),
        min=float(arr[0]),
        max=float(arr[-1]),
        confidence95=ConfidenceInterval(lower=float(lower), upper=float(upper)),
    )
    ladder_stats = PercentileStats(**{f"p{p}": float(v) for p, v in zip(PERCENTILE_LADDER, ladder)})
    return outcome, ladder_stats


def threshold_probabilities(values: Sequence[float], metric: MetricDefinition) -> Dict[str, float]:
    """Empirical P(value >= threshold) for every threshold the metric declares."""
    arr = np.asarray(values, dtype=float)
    return {t.name: float(np.mean(arr >= t.value)) for t in metric.thresholds}


def field_importance(path: str) -> int:
    path = path.lower()
    for key, weight in FIELD_IMPORTANCE:
        if key in path:
            return weight
    return DEFAULT_IMPORTANCE


def _as_mapping(obj: Any) -> Mapping[str, Any]:
    """Field view of a params object: mapping, pydantic model, dataclass or plain object."""
    if isinstance(obj, Mapping):
        return obj
    if isinstance(obj, BaseModel):
        return obj.model_dump()
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    if hasattr(obj, "__dict__"):
        return vars(obj)
    raise TypeError(f"cannot assess data quality of {type(obj).__name__} params")


def _is_record(value: Any) -> bool:
    return (
        isinstance(value, (Mapping, BaseModel))
        or (dataclasses.is_dataclass(value) and not isinstance(value, type))
    )


def _leaves(obj: Any, prefix: str = "") -> List[Tuple[str, Any]]:
    leaves: List[Tuple[str, Any]] = []
    for key, value in _as_mapping(obj).items():
        path = f"{prefix}{key}"
        if _is_record(value):
            leaves.extend(_leaves(value, f"{path}."))
        else:
            leaves.append((path, value))
    return leaves


def confidence_level(completeness: float, quality: float) -> ConfidenceLevel:
    score = (completeness + quality) / 2
    if score >= 0.8:
        return ConfidenceLevel.HIGH
    if score >= 0.6:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def assess_data_quality(params: Any) -> DataQuality:
    """
    Score how complete a params object is.

    Nested mappings, pydantic models and dataclasses are walked; every
    other value (lists included) is a leaf field. ``None`` leaves
    count as missing, present leaves add their importance weight.

    Args:
        params: Mapping, pydantic model, dataclass or plain object handed
            to the forward model

    Returns:
        DataQuality verdict

    Raises:
        TypeError: params has no fields to inspect (e.g. a bare number)
    """
    leaves = _leaves({} if params is None else params)
    total = len(leaves)
    if total == 0:
        return DataQuality(
            completeness=0.0, quality=0.0, confidence=ConfidenceLevel.LOW, missing_critical_data=False
        )

    missing = sum(1 for _, value in leaves if value is None)
    score = sum(field_importance(path) for path, value in leaves if value is not None)

    completeness = (total - missing) / total
    raw_quality = score / total
    return DataQuality(
        completeness=completeness,
        quality=min(1.0, raw_quality),
        confidence=confidence_level(completeness, raw_quality),
        missing_critical_data=missing > 0,
    )
