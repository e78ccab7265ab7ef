"""Scale translation, risk level classification and trend analysis.

Scores in [0, 1] map onto a bounded integer scale where higher values
mean lower risk ("seconds to midnight"): 0.0 is ``max_scale`` and 1.0 is
0. The same level thresholds serve the engine and the consensus builder.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from joshua.config.engine import ScaleConfig
from joshua.models.factor import RiskFactor
from joshua.models.types import RiskCategory, RiskLevel, TrendDirection
from joshua.risk.score_aggregator import clamp
from joshua.risk.weights import CategoryWeightTable


def round_half_up(value: float) -> int:
    """Round to the nearest integer, rounding halves up."""
    return math.floor(value + 0.5)


class ScaleTranslator:
    """Translates between scores and the bounded scale.

    Example:
        translator = ScaleTranslator()
        translator.to_scaled(0.5)  # 720
        translator.risk_level(150)  # RiskLevel.SEVERE
    """

    def __init__(self, config: ScaleConfig | None = None):
        self.config = config or ScaleConfig()

    @property
    def max_scale(self) -> int:
        return self.config.max_scale

    def to_scaled(self, score: float) -> int:
        """Scaled value of a score, rounded half up."""
        scaled = round_half_up(self.config.max_scale * (1.0 - clamp(score)))
        return max(0, min(self.config.max_scale, scaled))

    def to_score(self, scaled_value: float) -> float:
        """Score corresponding to a scaled value (inverse of to_scaled)."""
        return clamp(1.0 - scaled_value / self.config.max_scale)

    def risk_level(self, scaled_value: float) -> RiskLevel:
        """Risk level of a scaled value.

        Intervals are closed-open: a value equal to a cut point belongs to
        the less severe level.
        """
        cfg = self.config
        if scaled_value < cfg.critical:
            return RiskLevel.CRITICAL
        elif scaled_value < cfg.severe:
            return RiskLevel.SEVERE
        elif scaled_value < cfg.high:
            return RiskLevel.HIGH
        elif scaled_value < cfg.moderate:
            return RiskLevel.MODERATE
        elif scaled_value < cfg.low:
            return RiskLevel.LOW
        else:
            return RiskLevel.MINIMAL


class TrendClassifier:
    """Derives the overall trend from per-factor trend tags."""

    @staticmethod
    def classify(factors: Sequence[RiskFactor]) -> TrendDirection:
        """Classify the overall trend.

        Deteriorating wins when tagged more than twice as often as
        improving, and vice versa. Everything else, including a factor set
        without tags, is stable.
        """
        deteriorating = sum(1 for f in factors if f.trend == TrendDirection.DETERIORATING)
        improving = sum(1 for f in factors if f.trend == TrendDirection.IMPROVING)

        if deteriorating > improving * 2:
            return TrendDirection.DETERIORATING
        if improving > deteriorating * 2:
            return TrendDirection.IMPROVING
        return TrendDirection.STABLE


@dataclass(frozen=True)
class PrimaryDriver:
    """A factor ranked by its weighted contribution.

    Attributes:
        name: Factor name.
        category: Factor category.
        contribution: Factor value times category weight.
    """

    name: str
    category: RiskCategory
    contribution: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "category": self.category.value,
            "contribution": self.contribution,
        }


def primary_drivers(
    factors: Sequence[RiskFactor],
    weights: CategoryWeightTable,
    limit: int = 5,
) -> list[PrimaryDriver]:
    """Top factors by weighted contribution, descending.

    Ties keep input order.
    """
    drivers = [
        PrimaryDriver(
            name=f.name,
            category=f.category,
            contribution=f.weighted_value(weights.weight_for(f.category)),
        )
        for f in factors
    ]
    drivers.sort(key=lambda d: d.contribution, reverse=True)
    return drivers[:limit]


def delta_from_previous(current: int, previous: int | None) -> int | None:
    """Change in scaled value since the previous assessment.

    Negative values mean the risk increased.
    """
    if previous is None:
        return None
    return current - previous


def describe_delta(delta: int | None) -> str:
    """Human readable description of a scaled value change."""
    if delta is None:
        return "no previous assessment"
    if delta < 0:
        return f"{delta} seconds (risk increased)"
    if delta > 0:
        return f"+{delta} seconds (risk decreased)"
    return "0 seconds (unchanged)"
