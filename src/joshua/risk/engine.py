"""Risk Calculation Engine.

This module provides the RiskCalculationEngine that:
1. Aggregates risk factors into a weighted composite score
2. Blends the composite with a historical prior (Bayesian adjustment)
3. Quantifies uncertainty with a deterministic perturbation sweep
4. Translates the result onto the bounded scale and classifies it
5. Ranks primary drivers and derives the overall trend
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any

from uuid_utils import UUID, uuid7

from joshua.config.engine import EngineConfig
from joshua.core.logging import get_logger
from joshua.models.factor import RiskFactor
from joshua.models.types import ConfidenceLevel, RiskCategory, RiskLevel, TrendDirection
from joshua.observability.metrics import observe_risk_calculation, record_risk_result
from joshua.risk.bayesian import BayesianAdjuster, average_confidence
from joshua.risk.scale import PrimaryDriver, ScaleTranslator, TrendClassifier, primary_drivers
from joshua.risk.score_aggregator import ScoreAggregator
from joshua.risk.uncertainty import SimulationStatistics, UncertaintyQuantifier
from joshua.risk.weights import CategoryWeightTable

logger = get_logger(__name__)


@dataclass(frozen=True)
class RiskCalculationResult:
    """Complete output of one risk calculation.

    Attributes:
        raw_score: Weighted composite score before adjustment (0.0-1.0).
        adjusted_score: Score after Bayesian adjustment (0.0-1.0).
        scaled_value: Seconds to midnight (0-max_scale).
        confidence_interval: (lower, upper) bounds on the score.
        risk_level: Level classified from the scaled value.
        trend: Overall trend of the factor set.
        primary_drivers: Top factors by weighted contribution.
        category_scores: Mean factor value per category (read-only).
        simulation: Sweep statistics, None when the sweep is disabled.
        factor_count: Number of factors scored.
        average_confidence: Mean factor confidence score.
        result_id: Unique identifier for this result.
        calculated_at: When the result was produced.
    """

    raw_score: float
    adjusted_score: float
    scaled_value: int
    confidence_interval: tuple[float, float]
    risk_level: RiskLevel
    trend: TrendDirection
    primary_drivers: tuple[PrimaryDriver, ...] = ()
    category_scores: Mapping[RiskCategory, float] = field(default_factory=dict)
    simulation: SimulationStatistics | None = None
    factor_count: int = 0
    average_confidence: float = 0.0
    result_id: UUID = field(default_factory=uuid7)
    calculated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        object.__setattr__(self, "category_scores", MappingProxyType(dict(self.category_scores)))

    @property
    def overall_confidence(self) -> ConfidenceLevel:
        """Ordinal confidence derived from the average factor confidence."""
        return ConfidenceLevel.from_score(self.average_confidence)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "result_id": str(self.result_id),
            "raw_score": self.raw_score,
            "adjusted_score": self.adjusted_score,
            "scaled_value": self.scaled_value,
            "confidence_interval": list(self.confidence_interval),
            "risk_level": self.risk_level.value,
            "trend": self.trend.value,
            "primary_drivers": [d.to_dict() for d in self.primary_drivers],
            "category_scores": {
                cat.value: score for cat, score in self.category_scores.items()
            },
            "simulation": self.simulation.to_dict() if self.simulation else None,
            "factor_count": self.factor_count,
            "average_confidence": self.average_confidence,
            "overall_confidence": self.overall_confidence.value,
            "calculated_at": self.calculated_at.isoformat(),
        }


class RiskCalculationEngine:
    """Turns a set of risk factors into one bounded risk metric.

    The engine holds only immutable configuration and may be shared across
    threads and tasks.

    Example:
        engine = create_risk_calculation_engine()
        result = engine.calculate_risk(factors)
        print(f"{result.scaled_value} seconds to midnight ({result.risk_level.value})")
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        weights: CategoryWeightTable | None = None,
    ):
        """Initialize the engine.

        Args:
            config: Engine configuration.
            weights: Category weight table (defaults to the standard table).
        """
        self.config = config or EngineConfig()
        self.weights = weights or CategoryWeightTable.default()
        self.aggregator = ScoreAggregator(self.weights)
        self.adjuster = BayesianAdjuster(
            prior_strength=self.config.prior_strength,
            historical_baseline=self.config.historical_baseline,
        )
        self.quantifier = UncertaintyQuantifier(
            self.aggregator,
            iterations=self.config.simulation_iterations,
            amplitude=self.config.simulation_amplitude,
            enabled=self.config.enable_simulation,
            fallback_spread=self.config.fallback_interval_spread,
        )
        self.translator = ScaleTranslator(self.config.scale)

    def calculate_risk(self, factors: Sequence[RiskFactor]) -> RiskCalculationResult:
        """Calculate the risk metric for a set of factors.

        Args:
            factors: Independently scored risk factors.

        Returns:
            RiskCalculationResult with scores, interval, level and drivers.

        Raises:
            EmptyInputError: If no factors are supplied.
        """
        with observe_risk_calculation():
            aggregated = self.aggregator.aggregate(factors)
            raw_score = aggregated.composite

            if self.config.enable_bayesian:
                adjusted_score = self.adjuster.adjust(raw_score, factors)
            else:
                adjusted_score = raw_score

            estimate = self.quantifier.quantify(factors, adjusted_score)
            scaled_value = self.translator.to_scaled(adjusted_score)

            result = RiskCalculationResult(
                raw_score=raw_score,
                adjusted_score=adjusted_score,
                scaled_value=scaled_value,
                confidence_interval=estimate.interval,
                risk_level=self.translator.risk_level(scaled_value),
                trend=TrendClassifier.classify(factors),
                primary_drivers=tuple(
                    primary_drivers(factors, self.weights, limit=self.config.top_driver_count)
                ),
                category_scores=aggregated.category_scores,
                simulation=estimate.statistics,
                factor_count=len(factors),
                average_confidence=average_confidence(factors),
            )

        record_risk_result(result.scaled_value, result.risk_level.value, result.trend.value)

        logger.debug(
            "risk_calculation_completed",
            factor_count=result.factor_count,
            raw_score=round(raw_score, 4),
            adjusted_score=round(adjusted_score, 4),
            scaled_value=scaled_value,
            risk_level=result.risk_level.value,
            trend=result.trend.value,
        )

        return result


def create_risk_calculation_engine(
    config: EngineConfig | None = None,
    weights: CategoryWeightTable | None = None,
) -> RiskCalculationEngine:
    """Create a risk calculation engine.

    Args:
        config: Optional engine configuration.
        weights: Optional category weight table.

    Returns:
        Configured RiskCalculationEngine.
    """
    return RiskCalculationEngine(config=config, weights=weights)
