"""Pytest fixtures for JOSHUA tests."""

from collections.abc import Generator
from unittest.mock import patch

import pytest
import structlog

from joshua.config.settings import Settings, get_settings
from joshua.models.analysis import AnalysisRecord, CriticalDevelopment
from joshua.models.factor import RiskFactor
from joshua.models.types import (
    ConfidenceLevel,
    ImpactLevel,
    RiskCategory,
    TrendDirection,
)


# =============================================================================
# Structlog Configuration Fixture
# =============================================================================


@pytest.fixture(scope="function", autouse=True)
def reset_structlog_after_test():
    """Reset structlog configuration after each test.

    This ensures tests that modify structlog global state
    don't affect other tests.
    """
    yield
    structlog.reset_defaults()
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Drop cached settings so environment changes take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def mock_settings() -> Settings:
    """Create settings for testing."""
    return Settings(ENVIRONMENT="testing", log_level="DEBUG", _env_file=None)


@pytest.fixture
def patch_settings(mock_settings: Settings) -> Generator[Settings, None, None]:
    """Patch get_settings to return mock settings."""
    with patch("joshua.core.logging.get_settings", return_value=mock_settings):
        yield mock_settings


# =============================================================================
# Factor Fixtures
# =============================================================================


def make_factor(
    category: RiskCategory = RiskCategory.REGIONAL_CONFLICTS,
    value: float = 0.5,
    confidence: ConfidenceLevel = ConfidenceLevel.MODERATE,
    name: str | None = None,
    trend: TrendDirection | None = None,
) -> RiskFactor:
    """Helper to create a RiskFactor for testing."""
    return RiskFactor(
        category=category,
        name=name or f"{category.value} factor",
        value=value,
        confidence=confidence,
        trend=trend,
    )


@pytest.fixture
def sample_factors() -> list[RiskFactor]:
    """A factor set covering several categories."""
    return [
        make_factor(
            RiskCategory.NUCLEAR_ARSENAL_CHANGES, 0.7, ConfidenceLevel.HIGH, "Warhead modernization"
        ),
        make_factor(
            RiskCategory.ARMS_CONTROL_BREAKDOWN, 0.8, ConfidenceLevel.HIGH, "Treaty suspension"
        ),
        make_factor(
            RiskCategory.REGIONAL_CONFLICTS, 0.9, ConfidenceLevel.VERY_HIGH, "Active conflict"
        ),
        make_factor(RiskCategory.REGIONAL_CONFLICTS, 0.6, ConfidenceLevel.MODERATE, "Border tension"),
        make_factor(
            RiskCategory.LEADERSHIP_INSTABILITY, 0.5, ConfidenceLevel.LOW, "Nuclear rhetoric"
        ),
        make_factor(
            RiskCategory.TECHNICAL_INCIDENTS, 0.3, ConfidenceLevel.MODERATE, "Early warning fault"
        ),
        make_factor(RiskCategory.ECONOMIC_PRESSURE, 0.4, ConfidenceLevel.VERY_LOW, "Sanctions"),
    ]


# =============================================================================
# Analysis Fixtures
# =============================================================================


def make_analysis(
    scaled_value: int,
    confidence: ConfidenceLevel = ConfidenceLevel.HIGH,
    **kwargs,
) -> AnalysisRecord:
    """Helper to create an AnalysisRecord for testing."""
    kwargs.setdefault("executive_summary", "Test summary")
    kwargs.setdefault("detailed_analysis", "Test analysis")
    return AnalysisRecord(scaled_value=scaled_value, confidence=confidence, **kwargs)


@pytest.fixture
def sample_development() -> CriticalDevelopment:
    """A critical development for testing."""
    return CriticalDevelopment(
        event="Missile test over disputed waters",
        impact=ImpactLevel.HIGH,
        affected_regions=["East Asia"],
        escalation_potential=0.75,
    )


@pytest.fixture
def agreeing_analyses() -> list[AnalysisRecord]:
    """Three analyses close to each other."""
    return [make_analysis(90), make_analysis(95), make_analysis(88)]


@pytest.fixture
def diverging_analyses() -> list[AnalysisRecord]:
    """Three analyses spread well beyond the divergence threshold."""
    return [make_analysis(50), make_analysis(150), make_analysis(100)]
