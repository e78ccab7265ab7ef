"""Domain models for risk factors and analyses."""

from joshua.models.analysis import AnalysisRecord, CriticalDevelopment
from joshua.models.factor import RiskFactor
from joshua.models.types import (
    CATEGORY_ALIASES,
    DEFAULT_CATEGORY_WEIGHTS,
    RISK_LEVEL_ORDER,
    ConfidenceLevel,
    ImpactLevel,
    RiskCategory,
    RiskLevel,
    TrendDirection,
)

__all__ = [
    # Enumerations
    "RiskCategory",
    "ConfidenceLevel",
    "TrendDirection",
    "RiskLevel",
    "ImpactLevel",
    "CATEGORY_ALIASES",
    "DEFAULT_CATEGORY_WEIGHTS",
    "RISK_LEVEL_ORDER",
    # Records
    "RiskFactor",
    "AnalysisRecord",
    "CriticalDevelopment",
]
