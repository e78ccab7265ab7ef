"""Category weight table.

Weights express the relative influence of each risk category on the
composite score. A table is validated once at construction and is
immutable afterwards.
"""

import math
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

from joshua.core.exceptions import InvalidWeightError
from joshua.models.types import DEFAULT_CATEGORY_WEIGHTS, RiskCategory

WEIGHT_SUM_TOLERANCE = 0.001


class CategoryWeightTable(Mapping[RiskCategory, float]):
    """Immutable mapping from risk category to weight.

    Every weight lies in [0, 1] and the weights present sum to 1.0 within
    ``WEIGHT_SUM_TOLERANCE``. Categories absent from the table weigh 0.0.

    Example:
        table = CategoryWeightTable.from_mapping({"regional_conflicts": 0.6,
                                                  "technical_incidents": 0.4})
        table.weight_for(RiskCategory.ECONOMIC_PRESSURE)  # 0.0
    """

    __slots__ = ("_weights",)

    def __init__(self, weights: Mapping[RiskCategory, float]):
        """Validate and freeze a weight mapping.

        Args:
            weights: Weight per category.

        Raises:
            InvalidWeightError: If a weight is outside [0, 1] or the total
                differs from 1.0 by more than the tolerance.
        """
        if not weights:
            raise InvalidWeightError(
                "Weight table is empty",
                field="weights",
                value={},
                expected="at least one category",
            )

        checked: dict[RiskCategory, float] = {}
        for category, weight in weights.items():
            if (
                isinstance(weight, bool)
                or not isinstance(weight, (int, float))
                or not math.isfinite(weight)
                or not 0.0 <= weight <= 1.0
            ):
                raise InvalidWeightError(
                    f"Weight for {category.value} is out of range",
                    field=category.value,
                    value=weight,
                    expected="number in [0.0, 1.0]",
                )
            checked[category] = float(weight)

        total = sum(checked.values())
        if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise InvalidWeightError(
                "Category weights must sum to 1.0",
                field="weights",
                value=round(total, 6),
                expected=f"1.0 +/- {WEIGHT_SUM_TOLERANCE}",
            )

        self._weights = MappingProxyType(checked)

    @classmethod
    def default(cls) -> "CategoryWeightTable":
        """Table with the standard category weights."""
        return cls(DEFAULT_CATEGORY_WEIGHTS)

    @classmethod
    def from_mapping(cls, weights: Mapping[Any, float]) -> "CategoryWeightTable":
        """Build a table from category names, aliases or enum members.

        Raises:
            InvalidWeightError: On unknown categories, duplicates after alias
                resolution, or invalid weights.
        """
        resolved: dict[RiskCategory, float] = {}
        for key, weight in weights.items():
            category = RiskCategory.parse(key)
            if category in resolved:
                raise InvalidWeightError(
                    f"Category {category.value} given more than once",
                    field=category.value,
                    value=key,
                    expected="each category at most once",
                )
            resolved[category] = weight
        return cls(resolved)

    def weight_for(self, category: RiskCategory) -> float:
        """Weight of a category, 0.0 when the table does not list it."""
        return self._weights.get(category, 0.0)

    @property
    def total(self) -> float:
        """Sum of all weights in the table."""
        return sum(self._weights.values())

    def to_dict(self) -> dict[str, float]:
        """Convert to dictionary keyed by category value."""
        return {category.value: weight for category, weight in self._weights.items()}

    def __getitem__(self, category: RiskCategory) -> float:
        return self._weights[category]

    def __iter__(self) -> Iterator[RiskCategory]:
        return iter(self._weights)

    def __len__(self) -> int:
        return len(self._weights)

    def __repr__(self) -> str:
        return f"CategoryWeightTable({self.to_dict()!r})"
