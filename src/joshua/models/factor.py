"""Risk factor record consumed by the scoring core."""

import math
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Any

from uuid_utils import UUID, uuid7

from joshua.core.exceptions import InvalidFactorValueError
from joshua.models.types import ConfidenceLevel, RiskCategory, TrendDirection


@dataclass(frozen=True, slots=True)
class RiskFactor:
    """An independently scored risk factor.

    Values outside [0.0, 1.0] are rejected at construction so that the
    aggregation stages never need to clamp inputs.

    Attributes:
        category: Risk category the factor belongs to.
        name: Display name.
        value: Risk value (0.0-1.0, higher is riskier).
        confidence: Confidence in the value.
        trend: Optional trend tag relative to the historical baseline.
        data_sources: Names of the sources supporting the factor.
        factor_id: Unique identifier.
        observed_at: When the factor was created.
    """

    category: RiskCategory
    name: str
    value: float
    confidence: ConfidenceLevel = ConfidenceLevel.MODERATE
    trend: TrendDirection | None = None
    data_sources: tuple[str, ...] = ()
    factor_id: UUID = field(default_factory=uuid7)
    observed_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        if (
            isinstance(self.value, bool)
            or not isinstance(self.value, (int, float))
            or not math.isfinite(self.value)
            or not 0.0 <= self.value <= 1.0
        ):
            raise InvalidFactorValueError(self.name, self.value)

    @property
    def confidence_score(self) -> float:
        """Numeric confidence (0.2-1.0)."""
        return self.confidence.score

    def weighted_value(self, weight: float) -> float:
        """Value scaled by a category weight."""
        return self.value * weight

    def with_trend(self, trend: TrendDirection) -> "RiskFactor":
        """Return a copy of this factor tagged with a trend."""
        return replace(self, trend=trend)

    def with_source(self, source: str) -> "RiskFactor":
        """Return a copy of this factor with an additional data source."""
        return replace(self, data_sources=(*self.data_sources, source))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "factor_id": str(self.factor_id),
            "category": self.category.value,
            "name": self.name,
            "value": self.value,
            "confidence": self.confidence.value,
            "trend": self.trend.value if self.trend else None,
            "data_sources": list(self.data_sources),
            "observed_at": self.observed_at.isoformat(),
        }
