"""Monte Carlo simulation result models."""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Sequence

from pydantic import BaseModel, Field


class ConfidenceLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class Threshold:
    name: str
    value: float


@dataclass(frozen=True)
class MetricDefinition:
    """Named numeric extractor applied to every simulation outcome."""
    name: str
    extract: Callable[[Any], float]
    thresholds: Sequence[Threshold] = field(default_factory=tuple)


class ConfidenceInterval(BaseModel):
    lower: float
    upper: float


class OutcomeStats(BaseModel):
    mean: float
    median: float
    std_dev: float = Field(..., ge=0.0, description="Population standard deviation")
    min: float
    max: float
    confidence95: ConfidenceInterval


class PercentileStats(BaseModel):
    p5: float
    p10: float
    p25: float
    p50: float
    p75: float
    p90: float
    p95: float


class SimulationStatistics(BaseModel):
    outcomes: Dict[str, OutcomeStats] = Field(default_factory=dict)
    percentiles: Dict[str, PercentileStats] = Field(default_factory=dict)
    probabilities: Dict[str, Dict[str, float]] = Field(default_factory=dict)


class DataQuality(BaseModel):
    """How complete the simulation inputs were."""
    completeness: float = Field(..., ge=0.0, le=1.0)
    quality: float = Field(..., ge=0.0, le=1.0)
    confidence: ConfidenceLevel
    missing_critical_data: bool


class SimulationMetadata(BaseModel):
    iterations: int
    duration_ms: float
    timestamp: datetime
    model_version: str
    data_quality: DataQuality


class SimulationResults(BaseModel):
    """Raw outcomes plus their per-metric reduction."""
    results: List[Any]
    statistics: SimulationStatistics
    metadata: SimulationMetadata
