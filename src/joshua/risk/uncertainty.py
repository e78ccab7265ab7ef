"""Deterministic uncertainty quantification.

Instead of random sampling, the quantifier sweeps a linear perturbation
across the factor set: at step ``i`` of ``N`` every factor is shifted by
``(i / N - 0.5) * amplitude``, scaled down by the factor's confidence, and
the composite score is recomputed. Identical inputs therefore always give
bit-identical statistics.
"""

import statistics
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from joshua.core.exceptions import EmptyInputError
from joshua.models.factor import RiskFactor
from joshua.risk.score_aggregator import ScoreAggregator, clamp


@dataclass(frozen=True)
class SimulationStatistics:
    """Summary of the perturbation sweep.

    Attributes:
        mean: Mean simulated composite score.
        std_dev: Population standard deviation of the simulated scores.
        p5: 5th percentile (index-based, no interpolation).
        median: 50th percentile (index-based).
        p95: 95th percentile (index-based).
        iterations: Number of sweep steps.
    """

    mean: float
    std_dev: float
    p5: float
    median: float
    p95: float
    iterations: int

    @property
    def interval(self) -> tuple[float, float]:
        """Confidence interval reported upstream: (p5, p95)."""
        return (self.p5, self.p95)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "mean": self.mean,
            "std_dev": self.std_dev,
            "p5": self.p5,
            "median": self.median,
            "p95": self.p95,
            "iterations": self.iterations,
        }


@dataclass(frozen=True)
class UncertaintyEstimate:
    """Confidence interval with the sweep statistics behind it, if any."""

    interval: tuple[float, float]
    statistics: SimulationStatistics | None = None


class UncertaintyQuantifier:
    """Produces a confidence interval around the adjusted score.

    Attributes:
        aggregator: Aggregator used to rescore perturbed values.
        iterations: Number of sweep steps.
        amplitude: Total spread of the perturbation.
        enabled: Run the sweep; otherwise use the fixed-width fallback.
        fallback_spread: Relative half-width of the fallback interval.
    """

    def __init__(
        self,
        aggregator: ScoreAggregator,
        iterations: int = 1000,
        amplitude: float = 0.2,
        enabled: bool = True,
        fallback_spread: float = 0.1,
    ):
        if iterations < 1:
            raise ValueError(f"iterations must be positive, got {iterations}")
        self.aggregator = aggregator
        self.iterations = iterations
        self.amplitude = amplitude
        self.enabled = enabled
        self.fallback_spread = fallback_spread

    def simulate(self, factors: Sequence[RiskFactor]) -> SimulationStatistics:
        """Run the perturbation sweep.

        Raises:
            EmptyInputError: If no factors are supplied.
        """
        if not factors:
            raise EmptyInputError("simulate")

        n = self.iterations
        inputs = [(f.category, f.value, 1.0 - f.confidence_score) for f in factors]
        scores: list[float] = []
        for i in range(n):
            variation = ((i / n) - 0.5) * self.amplitude
            scores.append(
                self.aggregator.composite_from_values(
                    (category, clamp(value + variation * uncertainty))
                    for category, value, uncertainty in inputs
                )
            )

        scores.sort()
        return SimulationStatistics(
            mean=statistics.fmean(scores),
            std_dev=statistics.pstdev(scores),
            p5=scores[n * 5 // 100],
            median=scores[n // 2],
            p95=scores[n * 95 // 100],
            iterations=n,
        )

    def fallback_interval(self, adjusted_score: float) -> tuple[float, float]:
        """Fixed-width interval used when the sweep is disabled."""
        return (
            clamp(adjusted_score * (1.0 - self.fallback_spread)),
            clamp(adjusted_score * (1.0 + self.fallback_spread)),
        )

    def quantify(
        self, factors: Sequence[RiskFactor], adjusted_score: float
    ) -> UncertaintyEstimate:
        """Confidence interval for an adjusted score.

        Args:
            factors: Factors the score was computed from.
            adjusted_score: Score after Bayesian adjustment.

        Returns:
            The (p5, p95) interval and sweep statistics, or the fallback
            interval without statistics when the sweep is disabled.

        Raises:
            EmptyInputError: If no factors are supplied.
        """
        if not factors:
            raise EmptyInputError("quantify")
        if not self.enabled:
            return UncertaintyEstimate(interval=self.fallback_interval(adjusted_score))

        stats = self.simulate(factors)
        return UncertaintyEstimate(interval=stats.interval, statistics=stats)
