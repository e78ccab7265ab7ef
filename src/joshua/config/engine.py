"""Numeric configuration for the risk calculation engine and consensus builder.

All thresholds and tuning constants live here rather than in module globals so
alternate configurations can be exercised side by side.
"""

from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ScaleConfig(BaseModel):
    """Bounded integer scale and risk level cut points.

    Cut points are lower bounds of closed-open intervals: a scaled value
    below ``critical`` is CRITICAL, one in ``[critical, severe)`` is SEVERE,
    and so on up to ``[low, inf)`` which is MINIMAL.
    """

    model_config = ConfigDict(frozen=True)

    max_scale: int = Field(default=1440, ge=1, description="Scaled value at zero risk")
    critical: int = Field(default=100, ge=1, description="Upper bound (exclusive) of CRITICAL")
    severe: int = Field(default=200, ge=1, description="Upper bound (exclusive) of SEVERE")
    high: int = Field(default=400, ge=1, description="Upper bound (exclusive) of HIGH")
    moderate: int = Field(default=600, ge=1, description="Upper bound (exclusive) of MODERATE")
    low: int = Field(default=900, ge=1, description="Upper bound (exclusive) of LOW")

    @model_validator(mode="after")
    def check_cut_points_ascending(self) -> Self:
        """Cut points must be strictly ascending and inside the scale."""
        cuts = [self.critical, self.severe, self.high, self.moderate, self.low]
        if any(a >= b for a, b in zip(cuts, cuts[1:])):
            raise ValueError(f"risk level cut points must be strictly ascending, got {cuts}")
        if self.low > self.max_scale:
            raise ValueError(
                f"risk level cut point low={self.low} exceeds max_scale={self.max_scale}"
            )
        return self


class EngineConfig(BaseModel):
    """Configuration for the risk calculation engine."""

    model_config = ConfigDict(frozen=True)

    # Bayesian adjustment
    enable_bayesian: bool = Field(default=True, description="Blend with the historical prior")
    prior_strength: float = Field(
        default=0.3, ge=0.0, le=10.0, description="Weight of the prior per unit of missing confidence"
    )
    historical_baseline: float = Field(
        default=0.70, ge=0.0, le=1.0, description="Long-run reference risk score"
    )

    # Uncertainty sweep
    enable_simulation: bool = Field(default=True, description="Run the deterministic sweep")
    simulation_iterations: int = Field(
        default=1000, ge=1, le=1_000_000, description="Number of sweep iterations"
    )
    simulation_amplitude: float = Field(
        default=0.2, ge=0.0, le=2.0, description="Total spread of the perturbation"
    )
    fallback_interval_spread: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        description="Relative half-width of the interval when the sweep is disabled",
    )

    # Output
    top_driver_count: int = Field(default=5, ge=1, le=50, description="Primary drivers retained")
    scale: ScaleConfig = Field(default_factory=ScaleConfig)


class ConsensusConfig(BaseModel):
    """Configuration for consensus building across independent analyses."""

    model_config = ConfigDict(frozen=True)

    num_analyses: int = Field(default=3, ge=2, le=20, description="Analyses to request per run")
    min_analyses: int = Field(default=2, ge=2, description="Minimum analyses to reconcile")
    max_divergence: int = Field(
        default=60, ge=0, description="Max-min spread of scaled values before signalling"
    )
    max_variance_penalty: float = Field(
        default=0.3, ge=0.0, le=1.0, description="Cap on the confidence variance penalty"
    )
    variance_penalty_divisor: float = Field(
        default=100.0, gt=0.0, description="Std-dev units per unit of confidence penalty"
    )

    # Ensemble runs (caller side)
    analysis_timeout_seconds: float = Field(
        default=120.0, gt=0.0, description="Timeout for a single analysis run"
    )
    max_retries: int = Field(default=3, ge=1, le=10, description="Attempts per analysis run")
    max_concurrent_runs: int = Field(default=3, ge=1, le=20, description="Parallel analysis runs")
    scale: ScaleConfig = Field(default_factory=ScaleConfig)
