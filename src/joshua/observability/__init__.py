"""Observability module for JOSHUA.

Usage:
    from joshua.observability import observe_risk_calculation, record_risk_result

    with observe_risk_calculation():
        result = engine.calculate_risk(factors)
    record_risk_result(result.scaled_value, result.risk_level.value, result.trend.value)
"""

from joshua.observability.metrics import (
    ANALYSIS_RUN_COUNT,
    CONSENSUS_BUILD_COUNT,
    CONSENSUS_DIVERGENCE,
    HIGH_DIVERGENCE_COUNT,
    RISK_CALCULATION_DURATION,
    RISK_LEVEL_COUNT,
    RISK_SCALED_VALUE,
    MetricsConfig,
    MetricsManager,
    create_metrics_manager,
    get_metrics,
    get_metrics_manager,
    observe_risk_calculation,
    record_analysis_run,
    record_consensus,
    record_high_divergence,
    record_risk_result,
)

__all__ = [
    # Configuration
    "MetricsConfig",
    "MetricsManager",
    "create_metrics_manager",
    "get_metrics",
    "get_metrics_manager",
    # Collectors
    "RISK_CALCULATION_DURATION",
    "RISK_SCALED_VALUE",
    "RISK_LEVEL_COUNT",
    "CONSENSUS_BUILD_COUNT",
    "CONSENSUS_DIVERGENCE",
    "HIGH_DIVERGENCE_COUNT",
    "ANALYSIS_RUN_COUNT",
    # Recording helpers
    "observe_risk_calculation",
    "record_risk_result",
    "record_consensus",
    "record_high_divergence",
    "record_analysis_run",
]
