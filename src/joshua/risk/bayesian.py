"""Bayesian-style adjustment of the raw composite score.

Blends the observed score with a historical prior in proportion to the
confidence of the evidence: well-supported factor sets move the result
toward the raw score, weakly supported ones toward the baseline.
"""

from collections.abc import Sequence

from joshua.core.exceptions import EmptyInputError
from joshua.models.factor import RiskFactor
from joshua.risk.score_aggregator import clamp


def average_confidence(factors: Sequence[RiskFactor]) -> float:
    """Mean confidence score of a factor set.

    Raises:
        EmptyInputError: If no factors are supplied.
    """
    if not factors:
        raise EmptyInputError("average_confidence")
    return sum(f.confidence_score for f in factors) / len(factors)


class BayesianAdjuster:
    """Blends a raw score with a historical baseline.

    Attributes:
        prior_strength: Weight of the baseline per unit of missing confidence.
        historical_baseline: Long-run reference risk score (0.0-1.0).
    """

    def __init__(self, prior_strength: float = 0.3, historical_baseline: float = 0.70):
        self.prior_strength = prior_strength
        self.historical_baseline = historical_baseline

    def adjust(self, raw_score: float, factors: Sequence[RiskFactor]) -> float:
        """Adjust a raw composite score toward the baseline.

        Args:
            raw_score: Composite score from the aggregator.
            factors: Factors the raw score was computed from.

        Returns:
            Adjusted score clamped to [0, 1]. The raw score is returned
            unchanged when the baseline carries no weight.

        Raises:
            EmptyInputError: If no factors are supplied.
        """
        confidence_weight = average_confidence(factors)
        baseline_weight = (1.0 - confidence_weight) * self.prior_strength

        if baseline_weight == 0.0:
            return raw_score

        total = confidence_weight + baseline_weight
        adjusted = (
            raw_score * confidence_weight + self.historical_baseline * baseline_weight
        ) / total
        return clamp(adjusted)
