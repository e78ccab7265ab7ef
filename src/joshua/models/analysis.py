"""Schema of an independently produced risk analysis.

Analyses arrive from external backends (possibly several per run) and are
validated here before consensus building.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from joshua.core.exceptions import InvalidWeightError
from joshua.models.types import ConfidenceLevel, ImpactLevel, RiskCategory, TrendDirection


class CriticalDevelopment(BaseModel):
    """A significant event reported by an analysis."""

    model_config = ConfigDict(frozen=True)

    event: str = Field(min_length=1, description="Short description of the event")
    impact: ImpactLevel = Field(default=ImpactLevel.MEDIUM)
    affected_regions: list[str] = Field(default_factory=list)
    escalation_potential: float = Field(default=0.5, ge=0.0, le=1.0)

    def describe(self) -> str:
        """Render the development as a single line."""
        return (
            f"{self.event} (Impact: {self.impact.value.capitalize()}, "
            f"Escalation: {self.escalation_potential:.2f})"
        )


class AnalysisRecord(BaseModel):
    """One independently produced analysis, the input to consensus building.

    Attributes:
        scaled_value: Seconds to midnight reported by the analysis. The upper
            bound is the consensus scale, checked by ConsensusBuilder.
        confidence: Confidence the analysis reports in itself.
        trend: Overall direction reported by the analysis.
        category_scores: Per-category risk scores (0.0-1.0).
        critical_developments: Significant events identified.
        warning_indicators: Early warning signals.
        recommendations: Suggested actions.
        executive_summary: Short narrative summary.
        detailed_analysis: Long-form narrative.
    """

    model_config = ConfigDict(frozen=True)

    scaled_value: int = Field(ge=0, description="Seconds to midnight")
    confidence: ConfidenceLevel = Field(default=ConfidenceLevel.MODERATE)
    trend: TrendDirection = Field(default=TrendDirection.STABLE)
    category_scores: dict[RiskCategory, float] = Field(default_factory=dict)
    critical_developments: list[CriticalDevelopment] = Field(default_factory=list)
    warning_indicators: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    executive_summary: str = ""
    detailed_analysis: str = ""

    @field_validator("category_scores", mode="before")
    @classmethod
    def resolve_category_keys(cls, value: Any) -> Any:
        """Accept legacy category names as keys."""
        if not isinstance(value, dict):
            return value
        resolved: dict[RiskCategory, Any] = {}
        for key, score in value.items():
            try:
                resolved[RiskCategory.parse(key)] = score
            except InvalidWeightError as e:
                raise ValueError(str(e)) from e
        return resolved

    @field_validator("category_scores")
    @classmethod
    def check_category_score_range(cls, value: dict[RiskCategory, float]) -> dict[RiskCategory, float]:
        """Category scores must lie in [0, 1]."""
        for category, score in value.items():
            if not 0.0 <= score <= 1.0:
                raise ValueError(
                    f"category score for {category.value} must be in [0.0, 1.0], got {score}"
                )
        return value

    @property
    def confidence_score(self) -> float:
        """Numeric confidence (0.2-1.0)."""
        return self.confidence.score
