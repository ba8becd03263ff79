"""Monte Carlo simulation engine."""
import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional, Protocol, Sequence, TypeVar

from models.simulation import (
    MetricDefinition,
    SimulationMetadata,
    SimulationResults,
    SimulationStatistics,
)
from services.config import AnalysisSettings
from services.errors import SimulationModelError
from services.random_generator import RandomGenerator
from services.statistics import assess_data_quality, summarize_metric, threshold_probabilities

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SimulationModel(Protocol[T]):
    """Forward model: one sampled outcome per call plus the metrics to reduce."""

    version: str
    metrics: Sequence[MetricDefinition]

    def simulate(self, params: Any, rng: RandomGenerator) -> T:
        ...


class MonteCarloEngine:
    """Runs a forward model repeatedly and reduces its outcomes."""

    def __init__(
        self,
        seed: Optional[int] = None,
        rng: Optional[RandomGenerator] = None,
        iterations: int = 1000,
    ):
        """
        Initialize the engine.

        Args:
            seed: Seed for a fresh generator (time-based when omitted)
            rng: Pre-built generator to share; takes precedence over ``seed``
            iterations: Default run length for ``run_simulation``
        """
        self.random = rng or RandomGenerator(seed)
        self.iterations = iterations

    @classmethod
    def from_settings(cls, settings: Optional[AnalysisSettings] = None) -> "MonteCarloEngine":
        settings = settings or AnalysisSettings.from_env()
        return cls(seed=settings.random_seed, iterations=settings.monte_carlo_iterations)

    def run_simulation(
        self,
        model: SimulationModel[T],
        params: Any,
        iterations: Optional[int] = None,
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> SimulationResults:
        """
        Run the model ``iterations`` times with this engine's generator.

        Any exception from the model aborts the run; no partial results are
        returned.

        Args:
            model: Forward model
            params: Inputs handed unchanged to every ``simulate`` call
            iterations: Number of runs; the engine default when omitted
            progress_callback: Optional callback function(current, total) for progress updates

        Returns:
            SimulationResults with raw outcomes, statistics and metadata
        """
        if iterations is None:
            iterations = self.iterations
        if iterations < 1:
            raise ValueError("iterations must be at least 1")

        data_quality = assess_data_quality(params)
        started = time.perf_counter()
        results: List[T] = []

        for i in range(iterations):
            try:
                results.append(model.simulate(params, self.random))
            except Exception as e:
                logger.error("Model %s failed at iteration %d: %s", model.version, i, e)
                raise SimulationModelError(
                    f"model {model.version} failed at iteration {i}: {type(e).__name__}: {e}", iteration=i
                ) from e

            # Update progress
            if progress_callback and (i + 1) % 100 == 0:
                progress_callback(i + 1, iterations)

        # Final progress update
        if progress_callback and iterations % 100:
            progress_callback(iterations, iterations)

        statistics = self.calculate_statistics(results, model.metrics)
        duration_ms = (time.perf_counter() - started) * 1000.0

        logger.info(
            "Ran %d iterations of %s in %.1f ms (data confidence: %s)",
            iterations,
            model.version,
            duration_ms,
            data_quality.confidence.value,
        )

        return SimulationResults(
            results=results,
            statistics=statistics,
            metadata=SimulationMetadata(
                iterations=iterations,
                duration_ms=duration_ms,
                timestamp=datetime.now(timezone.utc),
                model_version=model.version,
                data_quality=data_quality,
            ),
        )

    @staticmethod
    def calculate_statistics(results: Sequence[Any], metrics: Sequence[MetricDefinition]) -> SimulationStatistics:
        """Reduce raw outcomes to per-metric statistics."""
        stats = SimulationStatistics()
        for metric in metrics:
            values = sorted(float(metric.extract(r)) for r in results)
            outcome, ladder = summarize_metric(values)
            stats.outcomes[metric.name] = outcome
            stats.percentiles[metric.name] = ladder
            if metric.thresholds:
                stats.probabilities[metric.name] = threshold_probabilities(values, metric)
        return stats

