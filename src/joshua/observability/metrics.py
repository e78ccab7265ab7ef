"""Prometheus metrics for JOSHUA observability.

This module provides Prometheus metrics for monitoring:
- Risk calculations (duration, scaled value distribution, level counts)
- Consensus building (outcome counts, divergence, high divergence signals)
- Analysis runs feeding the consensus (success, failure, timeout)
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from prometheus_client import (
    REGISTRY,
    CollectorRegistry,
    Counter,
    Histogram,
    Info,
    generate_latest,
)

from joshua.config.settings import Settings, get_settings

if TYPE_CHECKING:
    from collections.abc import Generator

__all__ = [
    "METRIC_PREFIX",
    "LATENCY_BUCKETS",
    "MetricsConfig",
    "MetricsManager",
    "RISK_CALCULATION_DURATION",
    "RISK_SCALED_VALUE",
    "RISK_LEVEL_COUNT",
    "CONSENSUS_BUILD_COUNT",
    "CONSENSUS_DIVERGENCE",
    "HIGH_DIVERGENCE_COUNT",
    "ANALYSIS_RUN_COUNT",
    "observe_risk_calculation",
    "record_risk_result",
    "record_consensus",
    "record_high_divergence",
    "record_analysis_run",
    "get_metrics",
    "get_metrics_manager",
    "create_metrics_manager",
]


# Collector names and buckets are fixed when this module is imported
METRIC_PREFIX = "joshua"

LATENCY_BUCKETS: tuple[float, ...] = (
    0.0005,
    0.001,
    0.0025,
    0.005,
    0.01,
    0.025,
    0.05,
    0.1,
    0.25,
    0.5,
    1.0,
    2.5,
)


@dataclass
class MetricsConfig:
    """Configuration for Prometheus metrics.

    Attributes:
        enabled: Whether metrics collection is enabled.
    """

    enabled: bool = True

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> MetricsConfig:
        """Create configuration from application settings.

        ``metrics_enabled`` is read through Settings, so both the
        ``JOSHUA_METRICS_ENABLED`` variable and the ``.env`` file apply.
        """
        if settings is None:
            settings = get_settings()
        return cls(enabled=settings.metrics_enabled)


# ============================================================================
# Risk Calculation Metrics
# ============================================================================

RISK_CALCULATION_DURATION = Histogram(
    f"{METRIC_PREFIX}_risk_calculation_duration_seconds",
    "Time to complete a risk calculation",
    ["status"],
    buckets=LATENCY_BUCKETS,
)

RISK_SCALED_VALUE = Histogram(
    f"{METRIC_PREFIX}_risk_scaled_value_seconds",
    "Distribution of scaled risk values (seconds to midnight)",
    buckets=(30, 60, 100, 150, 200, 300, 400, 500, 600, 750, 900, 1200, 1440),
)

RISK_LEVEL_COUNT = Counter(
    f"{METRIC_PREFIX}_risk_level_total",
    "Count of risk calculations by level",
    ["level", "trend"],
)

# ============================================================================
# Consensus Metrics
# ============================================================================

CONSENSUS_BUILD_COUNT = Counter(
    f"{METRIC_PREFIX}_consensus_builds_total",
    "Total number of consensus builds",
    ["status"],
)

CONSENSUS_DIVERGENCE = Histogram(
    f"{METRIC_PREFIX}_consensus_divergence_seconds",
    "Spread (max - min) of scaled values across analyses",
    buckets=(5, 10, 20, 30, 45, 60, 90, 120, 240, 480),
)

HIGH_DIVERGENCE_COUNT = Counter(
    f"{METRIC_PREFIX}_consensus_high_divergence_total",
    "Number of consensus builds whose divergence exceeded the threshold",
)

ANALYSIS_RUN_COUNT = Counter(
    f"{METRIC_PREFIX}_analysis_runs_total",
    "Total number of independent analysis runs",
    ["status"],
)

# Service info
SERVICE_INFO = Info(
    f"{METRIC_PREFIX}_service",
    "Service information",
)


class MetricsManager:
    """Manages Prometheus metrics configuration and export."""

    def __init__(
        self,
        config: MetricsConfig | None = None,
        registry: CollectorRegistry | None = None,
    ) -> None:
        """Initialize the metrics manager.

        Args:
            config: Metrics configuration.
            registry: Optional custom registry for testing.
        """
        self.config = config or MetricsConfig()
        self.registry = registry or REGISTRY
        self._initialized = False

    def initialize(
        self,
        service_name: str = "joshua",
        service_version: str = "0.1.0",
        environment: str = "development",
    ) -> None:
        """Initialize metrics with service information.

        Args:
            service_name: Name of the service.
            service_version: Version of the service.
            environment: Deployment environment.
        """
        if self._initialized or not self.config.enabled:
            return

        SERVICE_INFO.info(
            {
                "name": service_name,
                "version": service_version,
                "environment": environment,
            }
        )

        self._initialized = True

    def get_metrics(self) -> bytes:
        """Generate metrics output in Prometheus format."""
        return generate_latest(self.registry)


# Global metrics manager
_metrics_manager: MetricsManager | None = None


def get_metrics_manager() -> MetricsManager:
    """Get the global metrics manager instance."""
    global _metrics_manager
    if _metrics_manager is None:
        _metrics_manager = MetricsManager(MetricsConfig.from_settings())
    return _metrics_manager


def create_metrics_manager(
    config: MetricsConfig | None = None,
    registry: CollectorRegistry | None = None,
) -> MetricsManager:
    """Create and register a new metrics manager.

    Args:
        config: Optional metrics configuration.
        registry: Optional custom registry.

    Returns:
        The configured MetricsManager instance.
    """
    global _metrics_manager
    _metrics_manager = MetricsManager(config, registry)
    return _metrics_manager


def get_metrics() -> bytes:
    """Get current metrics in Prometheus format."""
    return get_metrics_manager().get_metrics()


def _enabled() -> bool:
    return get_metrics_manager().config.enabled


# ============================================================================
# Convenience Functions for Recording Metrics
# ============================================================================


@contextmanager
def observe_risk_calculation() -> Generator[dict[str, Any], None, None]:
    """Context manager for observing a risk calculation.

    Yields:
        Context dict; ``status`` is set to "error" if the block raises.
    """
    context: dict[str, Any] = {"status": "success"}
    start_time = time.perf_counter()

    try:
        yield context
    except Exception:
        context["status"] = "error"
        raise
    finally:
        if _enabled():
            duration = time.perf_counter() - start_time
            RISK_CALCULATION_DURATION.labels(status=context["status"]).observe(duration)


def record_risk_result(scaled_value: int, level: str, trend: str) -> None:
    """Record the outcome of a risk calculation.

    Args:
        scaled_value: Seconds to midnight.
        level: Risk level.
        trend: Overall trend.
    """
    if not _enabled():
        return
    RISK_SCALED_VALUE.observe(scaled_value)
    RISK_LEVEL_COUNT.labels(level=level, trend=trend).inc()


def record_consensus(status: str, divergence: float | None = None) -> None:
    """Record a consensus build.

    Args:
        status: "success", "insufficient" or "invalid".
        divergence: Max - min spread of the analyses, if built.
    """
    if not _enabled():
        return
    CONSENSUS_BUILD_COUNT.labels(status=status).inc()
    if divergence is not None:
        CONSENSUS_DIVERGENCE.observe(divergence)


def record_high_divergence() -> None:
    """Record a consensus whose divergence exceeded the threshold."""
    if _enabled():
        HIGH_DIVERGENCE_COUNT.inc()


def record_analysis_run(status: str) -> None:
    """Record an independent analysis run.

    Args:
        status: "success", "error" or "timeout".
    """
    if _enabled():
        ANALYSIS_RUN_COUNT.labels(status=status).inc()
