"""Risk scoring for JOSHUA.

This package turns independently scored risk factors into a bounded risk
metric (seconds to midnight) with an uncertainty band.

Usage:
    from joshua.risk import create_risk_calculation_engine

    engine = create_risk_calculation_engine()
    result = engine.calculate_risk(factors)
"""

from joshua.risk.analyzer import (
    AnalyzerRegistry,
    CategoryAnalyzer,
    FactorCategoryAnalyzer,
    RiskAnalysis,
    create_default_registry,
)
from joshua.risk.bayesian import BayesianAdjuster, average_confidence
from joshua.risk.engine import (
    RiskCalculationEngine,
    RiskCalculationResult,
    create_risk_calculation_engine,
)
from joshua.risk.scale import (
    PrimaryDriver,
    ScaleTranslator,
    TrendClassifier,
    delta_from_previous,
    describe_delta,
    primary_drivers,
    round_half_up,
)
from joshua.risk.score_aggregator import AggregatedScore, ScoreAggregator, clamp
from joshua.risk.uncertainty import (
    SimulationStatistics,
    UncertaintyEstimate,
    UncertaintyQuantifier,
)
from joshua.risk.weights import WEIGHT_SUM_TOLERANCE, CategoryWeightTable

__all__ = [
    # Weights
    "CategoryWeightTable",
    "WEIGHT_SUM_TOLERANCE",
    # Aggregation
    "ScoreAggregator",
    "AggregatedScore",
    "clamp",
    # Bayesian adjustment
    "BayesianAdjuster",
    "average_confidence",
    # Uncertainty
    "UncertaintyQuantifier",
    "UncertaintyEstimate",
    "SimulationStatistics",
    # Scale and trend
    "ScaleTranslator",
    "TrendClassifier",
    "PrimaryDriver",
    "primary_drivers",
    "delta_from_previous",
    "describe_delta",
    "round_half_up",
    # Engine
    "RiskCalculationEngine",
    "RiskCalculationResult",
    "create_risk_calculation_engine",
    # Analyzers
    "CategoryAnalyzer",
    "FactorCategoryAnalyzer",
    "AnalyzerRegistry",
    "RiskAnalysis",
    "create_default_registry",
]
