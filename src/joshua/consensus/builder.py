"""Consensus building from multiple independent analyses.

Several analyses of the same situation are reconciled into one consensus:
the median scaled value, per-category means, deduplicated qualitative
findings, a variance-penalized confidence and an agreement score.
"""

import statistics
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from joshua.config.engine import ConsensusConfig
from joshua.core.exceptions import InsufficientAnalysesError, InvalidScaledValueError
from joshua.core.logging import get_logger
from joshua.models.analysis import AnalysisRecord
from joshua.models.types import ConfidenceLevel, RiskCategory, RiskLevel
from joshua.observability.metrics import record_consensus, record_high_divergence
from joshua.risk.scale import ScaleTranslator
from joshua.risk.score_aggregator import clamp

logger = get_logger(__name__)


@dataclass(frozen=True)
class HighDivergence:
    """Signal raised when analyses disagree beyond the configured spread.

    This is an observability record, not an error: the consensus is still
    produced.

    Attributes:
        divergence: Max - min of the scaled values.
        threshold: Configured maximum divergence.
        values: Scaled values of the analyses, in input order.
    """

    divergence: int
    threshold: int
    values: tuple[int, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "divergence": self.divergence,
            "threshold": self.threshold,
            "values": list(self.values),
        }


@dataclass(frozen=True)
class ConsensusAnalysis:
    """Reconciled view of several independent analyses.

    Attributes:
        consensus_value: Median scaled value.
        mean_value: Mean scaled value.
        std_dev: Population standard deviation of the scaled values.
        confidence: Mean analysis confidence less a variance penalty.
        risk_level: Level classified from the median.
        category_scores: Mean score per category over reporting analyses.
        critical_developments: Deduplicated rendered developments.
        warning_indicators: Deduplicated early warning indicators.
        recommendations: Deduplicated recommendations.
        agreement_level: 1.0 for identical values, lower as spread grows.
        divergence: Max - min of the scaled values.
        divergence_signal: Set when divergence exceeded the threshold.
        executive_summary: Summary of the first analysis.
        analyses: The reconciled analyses.
    """

    consensus_value: int
    mean_value: float
    std_dev: float
    confidence: float
    risk_level: RiskLevel
    category_scores: Mapping[RiskCategory, float] = field(default_factory=dict)
    critical_developments: tuple[str, ...] = ()
    warning_indicators: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()
    agreement_level: float = 1.0
    divergence: int = 0
    divergence_signal: HighDivergence | None = None
    executive_summary: str = ""
    analyses: tuple[AnalysisRecord, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "category_scores", MappingProxyType(dict(self.category_scores)))

    @property
    def confidence_level(self) -> ConfidenceLevel:
        """Ordinal confidence of the consensus."""
        return ConfidenceLevel.from_score(self.confidence)

    @property
    def high_divergence(self) -> bool:
        return self.divergence_signal is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "consensus_value": self.consensus_value,
            "mean_value": self.mean_value,
            "std_dev": self.std_dev,
            "confidence": self.confidence,
            "confidence_level": self.confidence_level.value,
            "risk_level": self.risk_level.value,
            "category_scores": {
                cat.value: score for cat, score in self.category_scores.items()
            },
            "critical_developments": list(self.critical_developments),
            "warning_indicators": list(self.warning_indicators),
            "recommendations": list(self.recommendations),
            "agreement_level": self.agreement_level,
            "divergence": self.divergence,
            "divergence_signal": (
                self.divergence_signal.to_dict() if self.divergence_signal else None
            ),
            "executive_summary": self.executive_summary,
            "analysis_count": len(self.analyses),
        }


def dedupe_case_insensitive(items: Iterable[str]) -> list[str]:
    """Drop case-insensitive duplicates, keeping the first spelling seen."""
    seen: set[str] = set()
    unique = []
    for item in items:
        key = item.lower()
        if key not in seen:
            seen.add(key)
            unique.append(item)
    return unique


class ConsensusBuilder:
    """Reconciles independent analyses into a consensus.

    Example:
        builder = ConsensusBuilder()
        consensus = builder.build_consensus([first, second, third])
        if consensus.divergence_signal:
            ...
    """

    def __init__(self, config: ConsensusConfig | None = None):
        self.config = config or ConsensusConfig()
        self.translator = ScaleTranslator(self.config.scale)

    def build_consensus(self, analyses: Sequence[AnalysisRecord]) -> ConsensusAnalysis:
        """Build a consensus from independent analyses.

        Args:
            analyses: Completed analyses, at least ``min_analyses`` of them.

        Returns:
            ConsensusAnalysis. High divergence is reported on the result,
            never raised.

        Raises:
            InsufficientAnalysesError: If fewer than ``min_analyses`` are given.
            InvalidScaledValueError: If a scaled value exceeds the configured scale.
        """
        if len(analyses) < self.config.min_analyses:
            record_consensus("insufficient")
            raise InsufficientAnalysesError(len(analyses), self.config.min_analyses)

        max_scale = self.config.scale.max_scale
        for index, analysis in enumerate(analyses):
            if analysis.scaled_value > max_scale:
                record_consensus("invalid")
                raise InvalidScaledValueError(index, analysis.scaled_value, max_scale)

        values = [a.scaled_value for a in analyses]
        mean_value = statistics.fmean(values)
        std_dev = statistics.pstdev(values)
        median = self.median(values)

        divergence = max(values) - min(values)
        signal = None
        if divergence > self.config.max_divergence:
            signal = HighDivergence(
                divergence=divergence,
                threshold=self.config.max_divergence,
                values=tuple(values),
            )
            logger.warning(
                "high_divergence_detected",
                divergence=divergence,
                threshold=self.config.max_divergence,
                analysis_count=len(analyses),
            )
            record_high_divergence()

        consensus = ConsensusAnalysis(
            consensus_value=median,
            mean_value=mean_value,
            std_dev=std_dev,
            confidence=self._confidence(analyses, std_dev),
            risk_level=self.translator.risk_level(median),
            category_scores=self._category_means(analyses),
            critical_developments=tuple(self._merge_developments(analyses)),
            warning_indicators=tuple(
                dedupe_case_insensitive(i for a in analyses for i in a.warning_indicators)
            ),
            recommendations=tuple(
                dedupe_case_insensitive(r for a in analyses for r in a.recommendations)
            ),
            agreement_level=self._agreement(mean_value, std_dev),
            divergence=divergence,
            divergence_signal=signal,
            executive_summary=analyses[0].executive_summary,
            analyses=tuple(analyses),
        )

        record_consensus("success", divergence=divergence)
        logger.info(
            "consensus_built",
            analysis_count=len(analyses),
            consensus_value=median,
            mean_value=round(mean_value, 2),
            std_dev=round(std_dev, 2),
            agreement_level=round(consensus.agreement_level, 3),
            risk_level=consensus.risk_level.value,
        )
        return consensus

    @staticmethod
    def median(values: Sequence[int]) -> int:
        """Median of the values; the lower-middle element for even counts."""
        ordered = sorted(values)
        return ordered[(len(ordered) - 1) // 2]

    def _confidence(self, analyses: Sequence[AnalysisRecord], std_dev: float) -> float:
        mean_confidence = statistics.fmean(a.confidence_score for a in analyses)
        penalty = min(
            self.config.max_variance_penalty,
            std_dev / self.config.variance_penalty_divisor,
        )
        return clamp(mean_confidence - penalty)

    @staticmethod
    def _agreement(mean_value: float, std_dev: float) -> float:
        # mean 0 means every value is 0
        if mean_value == 0:
            return 1.0
        return 1.0 - min(1.0, std_dev / mean_value)

    @staticmethod
    def _category_means(analyses: Sequence[AnalysisRecord]) -> dict[RiskCategory, float]:
        reported: dict[RiskCategory, list[float]] = {}
        for analysis in analyses:
            for category, score in analysis.category_scores.items():
                reported.setdefault(category, []).append(score)
        return {category: statistics.fmean(scores) for category, scores in reported.items()}

    @staticmethod
    def _merge_developments(analyses: Sequence[AnalysisRecord]) -> list[str]:
        seen: set[str] = set()
        merged = []
        for analysis in analyses:
            for development in analysis.critical_developments:
                key = development.event.lower()
                if key not in seen:
                    seen.add(key)
                    merged.append(development.describe())
        return merged


def create_consensus_builder(config: ConsensusConfig | None = None) -> ConsensusBuilder:
    """Create a consensus builder.

    Args:
        config: Optional consensus configuration.

    Returns:
        Configured ConsensusBuilder.
    """
    return ConsensusBuilder(config=config)
