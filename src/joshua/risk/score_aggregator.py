"""Score aggregation.

Combines many risk factors into per-category scores and a single
weighted composite score.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from joshua.core.exceptions import EmptyInputError
from joshua.models.factor import RiskFactor
from joshua.models.types import RiskCategory
from joshua.risk.weights import CategoryWeightTable


def clamp(value: float, lower: float = 0.0, upper: float = 1.0) -> float:
    """Clamp a value into [lower, upper]."""
    return max(lower, min(upper, value))


@dataclass(frozen=True)
class AggregatedScore:
    """Composite score with its category breakdown.

    Attributes:
        composite: Weighted composite score (0.0-1.0).
        category_scores: Mean factor value per category, in first-seen order (read-only).
        total_weight: Sum of the weights of the categories present.
    """

    composite: float
    category_scores: Mapping[RiskCategory, float] = field(default_factory=dict)
    total_weight: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "category_scores", MappingProxyType(dict(self.category_scores)))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "composite": self.composite,
            "category_scores": {
                cat.value: score for cat, score in self.category_scores.items()
            },
            "total_weight": self.total_weight,
        }


class ScoreAggregator:
    """Aggregates factor values into a weighted composite.

    The composite is normalized by the weights of the categories actually
    present, so a factor set covering only some categories is not penalized
    for the missing ones.

    Example:
        aggregator = ScoreAggregator(CategoryWeightTable.default())
        score = aggregator.composite_score(factors)
    """

    def __init__(self, weights: CategoryWeightTable | None = None):
        self.weights = weights or CategoryWeightTable.default()

    def category_scores(self, factors: Sequence[RiskFactor]) -> dict[RiskCategory, float]:
        """Mean factor value per category.

        Args:
            factors: Factors to group.

        Returns:
            Mapping of category to mean value clamped to [0, 1].

        Raises:
            EmptyInputError: If no factors are supplied.
        """
        if not factors:
            raise EmptyInputError("category_scores")
        return self._category_scores(factors)

    def composite_score(self, factors: Sequence[RiskFactor]) -> float:
        """Weighted composite score (0.0-1.0).

        Raises:
            EmptyInputError: If no factors are supplied.
        """
        if not factors:
            raise EmptyInputError("composite_score")
        return self._composite(self._category_scores(factors))[0]

    def aggregate(self, factors: Sequence[RiskFactor]) -> AggregatedScore:
        """Composite score together with its category breakdown.

        Raises:
            EmptyInputError: If no factors are supplied.
        """
        if not factors:
            raise EmptyInputError("aggregate")
        category_scores = self._category_scores(factors)
        composite, total_weight = self._composite(category_scores)
        return AggregatedScore(
            composite=composite,
            category_scores=category_scores,
            total_weight=total_weight,
        )

    def composite_from_values(self, values: Iterable[tuple[RiskCategory, float]]) -> float:
        """Composite score of bare (category, value) pairs.

        Used by the uncertainty sweep to rescore perturbed values without
        rebuilding factor records. Returns 0.0 for an empty iterable.
        """
        return self._composite(self._group(values))[0]

    def _category_scores(self, factors: Sequence[RiskFactor]) -> dict[RiskCategory, float]:
        return self._group((f.category, f.value) for f in factors)

    def _group(self, values: Iterable[tuple[RiskCategory, float]]) -> dict[RiskCategory, float]:
        totals: dict[RiskCategory, float] = {}
        counts: dict[RiskCategory, int] = {}
        for category, value in values:
            totals[category] = totals.get(category, 0.0) + value
            counts[category] = counts.get(category, 0) + 1
        return {category: clamp(totals[category] / counts[category]) for category in totals}

    def _composite(self, category_scores: dict[RiskCategory, float]) -> tuple[float, float]:
        weighted_sum = 0.0
        total_weight = 0.0
        for category, score in category_scores.items():
            weight = self.weights.weight_for(category)
            weighted_sum += score * weight
            total_weight += weight

        if total_weight == 0.0:
            return 0.0, 0.0
        return clamp(weighted_sum / total_weight), total_weight
