"""Configuration validation for startup checks.

Validates that the engine and consensus configuration is coherent before
any calculation runs.

Usage:
    from joshua.config.validation import validate_configuration

    # During startup
    results = validate_configuration()
    for result in results:
        logger.warning(str(result))
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

from joshua.config.settings import Settings, get_settings
from joshua.core.exceptions import InvalidWeightError
from joshua.risk.weights import CategoryWeightTable
from joshua.utils.exceptions import ConfigurationError

logger = logging.getLogger("joshua.config")

MIN_RECOMMENDED_ITERATIONS = 100


class ValidationSeverity(str, Enum):
    """Severity of configuration validation issues."""

    ERROR = "error"  # Must be fixed, calculations cannot run
    WARNING = "warning"  # Should be fixed, results may be less reliable


@dataclass
class ValidationResult:
    """Result of a configuration validation check."""

    field: str
    severity: ValidationSeverity
    message: str
    suggestion: str | None = None

    def __str__(self) -> str:
        prefix = "ERROR" if self.severity == ValidationSeverity.ERROR else "WARNING"
        result = f"[{prefix}] {self.field}: {self.message}"
        if self.suggestion:
            result += f"\n  Suggestion: {self.suggestion}"
        return result


def validate_configuration(settings: Settings | None = None) -> list[ValidationResult]:
    """Validate application configuration.

    Args:
        settings: Settings to validate (default: global settings)

    Returns:
        List of validation results (empty if all checks pass)
    """
    if settings is None:
        settings = get_settings()

    results: list[ValidationResult] = []

    results.extend(_validate_weights(settings))
    results.extend(_validate_engine(settings))
    results.extend(_validate_consensus(settings))
    results.extend(_validate_environment(settings))

    return results


def validate_or_raise(settings: Settings | None = None) -> None:
    """Validate configuration and raise if errors found.

    Args:
        settings: Settings to validate

    Raises:
        ConfigurationError: If any validation errors are found
    """
    results = validate_configuration(settings)
    errors = [r for r in results if r.severity == ValidationSeverity.ERROR]

    if errors:
        error_messages = "\n".join(str(e) for e in errors)
        raise ConfigurationError(f"Configuration validation failed:\n{error_messages}")

    warnings = [r for r in results if r.severity == ValidationSeverity.WARNING]
    for warning in warnings:
        logger.warning(str(warning))


def load_weight_table(settings: Settings | None = None) -> CategoryWeightTable:
    """Weight table configured in settings, or the default table.

    Raises:
        InvalidWeightError: If the configured weights are invalid.
    """
    if settings is None:
        settings = get_settings()
    if settings.category_weights is None:
        return CategoryWeightTable.default()
    return CategoryWeightTable.from_mapping(settings.category_weights)


# =============================================================================
# Validators
# =============================================================================


def _validate_weights(settings: Settings) -> list[ValidationResult]:
    """Validate the category weight override."""
    results: list[ValidationResult] = []

    if settings.category_weights is None:
        return results

    try:
        CategoryWeightTable.from_mapping(settings.category_weights)
    except InvalidWeightError as e:
        results.append(
            ValidationResult(
                field=f"category_weights.{e.field}",
                severity=ValidationSeverity.ERROR,
                message=str(e.args[0]),
                suggestion=f"Expected {e.expected}",
            )
        )

    return results


def _validate_engine(settings: Settings) -> list[ValidationResult]:
    """Validate risk engine tuning."""
    results: list[ValidationResult] = []
    engine = settings.risk_engine

    if engine.enable_simulation and engine.simulation_iterations < MIN_RECOMMENDED_ITERATIONS:
        results.append(
            ValidationResult(
                field="risk_engine.simulation_iterations",
                severity=ValidationSeverity.WARNING,
                message=(
                    f"{engine.simulation_iterations} iterations give coarse index-based "
                    "percentiles"
                ),
                suggestion=f"Use at least {MIN_RECOMMENDED_ITERATIONS} iterations",
            )
        )

    if engine.enable_bayesian and engine.prior_strength == 0.0:
        results.append(
            ValidationResult(
                field="risk_engine.prior_strength",
                severity=ValidationSeverity.WARNING,
                message="Bayesian adjustment is enabled but the prior carries no weight",
                suggestion="Set enable_bayesian=false or use a positive prior_strength",
            )
        )

    return results


def _validate_consensus(settings: Settings) -> list[ValidationResult]:
    """Validate consensus thresholds against the scale."""
    results: list[ValidationResult] = []
    consensus = settings.consensus

    if consensus.max_divergence >= consensus.scale.max_scale:
        results.append(
            ValidationResult(
                field="consensus.max_divergence",
                severity=ValidationSeverity.ERROR,
                message=(
                    f"Divergence threshold {consensus.max_divergence} can never be exceeded "
                    f"on a scale of {consensus.scale.max_scale}"
                ),
                suggestion="Use a threshold well below the scale maximum",
            )
        )

    if consensus.num_analyses < consensus.min_analyses:
        results.append(
            ValidationResult(
                field="consensus.num_analyses",
                severity=ValidationSeverity.ERROR,
                message=(
                    f"Requesting {consensus.num_analyses} analyses cannot satisfy the minimum "
                    f"of {consensus.min_analyses}"
                ),
                suggestion="Set num_analyses >= min_analyses",
            )
        )
    elif consensus.num_analyses == consensus.min_analyses:
        results.append(
            ValidationResult(
                field="consensus.num_analyses",
                severity=ValidationSeverity.WARNING,
                message="A single failed analysis run will prevent consensus",
                suggestion="Request at least one analysis more than the minimum",
            )
        )

    if consensus.scale != settings.risk_engine.scale:
        results.append(
            ValidationResult(
                field="consensus.scale",
                severity=ValidationSeverity.WARNING,
                message="Engine and consensus use different scales or level cut points",
                suggestion="Configure the same scale for both",
            )
        )

    return results


def _validate_environment(settings: Settings) -> list[ValidationResult]:
    """Validate environment-specific settings."""
    results: list[ValidationResult] = []

    if settings.ENVIRONMENT == "production" and settings.log_json is False:
        results.append(
            ValidationResult(
                field="log_json",
                severity=ValidationSeverity.WARNING,
                message="Console log format in production is hard to aggregate",
                suggestion="Leave log_json unset or set it to true in production",
            )
        )

    if settings.ENVIRONMENT == "production" and settings.log_level == "DEBUG":
        results.append(
            ValidationResult(
                field="log_level",
                severity=ValidationSeverity.WARNING,
                message="DEBUG log level in production logs every calculation",
                suggestion="Use INFO or WARNING for production",
            )
        )

    return results


def get_configuration_summary(settings: Settings | None = None) -> dict[str, Any]:
    """Get a summary of current configuration (safe for logging).

    Args:
        settings: Settings to summarize

    Returns:
        Dictionary with configuration summary
    """
    if settings is None:
        settings = get_settings()

    return {
        "environment": settings.ENVIRONMENT,
        "log_level": settings.log_level,
        "metrics_enabled": settings.metrics_enabled,
        "bayesian_enabled": settings.risk_engine.enable_bayesian,
        "simulation_enabled": settings.risk_engine.enable_simulation,
        "simulation_iterations": settings.risk_engine.simulation_iterations,
        "historical_baseline": settings.risk_engine.historical_baseline,
        "max_divergence": settings.consensus.max_divergence,
        "num_analyses": settings.consensus.num_analyses,
        "custom_weights": settings.category_weights is not None,
    }
