"""Per-category analyzers.

Analyzers turn the factors of one category into a category-level analysis.
The registry is keyed by the closed RiskCategory set, so looking up an
analyzer never involves string matching.
"""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from joshua.core.logging import get_logger
from joshua.models.factor import RiskFactor
from joshua.models.types import ConfidenceLevel, RiskCategory
from joshua.risk.score_aggregator import clamp
from joshua.risk.weights import CategoryWeightTable

logger = get_logger(__name__)


@dataclass(frozen=True)
class RiskAnalysis:
    """Result of analyzing one category.

    Attributes:
        category: Category analyzed.
        score: Mean value of the retained factors (0.0-1.0).
        confidence: Confidence derived from the retained factors.
        weight: Category weight applied by the analyzer.
        factors: Factors that contributed to the score.
        dropped: Number of factors discarded for low confidence.
    """

    category: RiskCategory
    score: float
    confidence: ConfidenceLevel
    weight: float
    factors: tuple[RiskFactor, ...] = field(default_factory=tuple)
    dropped: int = 0

    @property
    def weighted_score(self) -> float:
        """Score times category weight."""
        return self.score * self.weight

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "category": self.category.value,
            "score": self.score,
            "confidence": self.confidence.value,
            "weight": self.weight,
            "factor_count": len(self.factors),
            "dropped": self.dropped,
        }


@runtime_checkable
class CategoryAnalyzer(Protocol):
    """Capability set of a category analyzer."""

    @property
    def category(self) -> RiskCategory: ...

    @property
    def weight(self) -> float: ...

    @property
    def min_confidence(self) -> ConfidenceLevel: ...

    def analyze(self, factors: Sequence[RiskFactor]) -> RiskAnalysis | None: ...


class FactorCategoryAnalyzer:
    """Scores a category as the mean of its sufficiently confident factors."""

    def __init__(
        self,
        category: RiskCategory,
        weight: float,
        min_confidence: ConfidenceLevel = ConfidenceLevel.VERY_LOW,
    ):
        self._category = category
        self._weight = weight
        self._min_confidence = min_confidence

    @property
    def category(self) -> RiskCategory:
        return self._category

    @property
    def weight(self) -> float:
        return self._weight

    @property
    def min_confidence(self) -> ConfidenceLevel:
        return self._min_confidence

    def analyze(self, factors: Sequence[RiskFactor]) -> RiskAnalysis | None:
        """Analyze the factors belonging to this analyzer's category.

        Factors of other categories are ignored.

        Returns:
            RiskAnalysis, or None when no factor of the category meets
            ``min_confidence``.
        """
        own = [f for f in factors if f.category == self._category]
        kept = [f for f in own if f.confidence_score >= self._min_confidence.score]
        if not kept:
            if own:
                logger.debug(
                    "category_factors_below_confidence",
                    category=self._category.value,
                    dropped=len(own),
                )
            return None

        mean_value = sum(f.value for f in kept) / len(kept)
        mean_confidence = sum(f.confidence_score for f in kept) / len(kept)
        return RiskAnalysis(
            category=self._category,
            score=clamp(mean_value),
            confidence=ConfidenceLevel.from_score(mean_confidence),
            weight=self._weight,
            factors=tuple(kept),
            dropped=len(own) - len(kept),
        )


class AnalyzerRegistry:
    """Category analyzers indexed by risk category."""

    def __init__(self) -> None:
        self._analyzers: dict[RiskCategory, CategoryAnalyzer] = {}

    def register(self, analyzer: CategoryAnalyzer) -> None:
        """Register an analyzer, replacing any previous one for its category."""
        self._analyzers[analyzer.category] = analyzer

    def get(self, category: RiskCategory) -> CategoryAnalyzer | None:
        """Analyzer for a category, if registered."""
        return self._analyzers.get(category)

    def analyze_all(self, factors: Sequence[RiskFactor]) -> list[RiskAnalysis]:
        """Run every registered analyzer.

        Returns:
            One analysis per category that has data, in registration order.
        """
        results = []
        for analyzer in self._analyzers.values():
            analysis = analyzer.analyze(factors)
            if analysis is not None:
                results.append(analysis)
        return results

    def __contains__(self, category: object) -> bool:
        return category in self._analyzers

    def __iter__(self) -> Iterator[CategoryAnalyzer]:
        return iter(self._analyzers.values())

    def __len__(self) -> int:
        return len(self._analyzers)


def create_default_registry(
    weights: CategoryWeightTable | None = None,
    min_confidence: ConfidenceLevel = ConfidenceLevel.VERY_LOW,
) -> AnalyzerRegistry:
    """Create a registry with one factor analyzer per weighted category.

    Args:
        weights: Category weight table (defaults to the standard table).
        min_confidence: Minimum factor confidence for every analyzer.

    Returns:
        Populated AnalyzerRegistry.
    """
    weights = weights or CategoryWeightTable.default()
    registry = AnalyzerRegistry()
    for category, weight in weights.items():
        registry.register(FactorCategoryAnalyzer(category, weight, min_confidence))
    return registry
