"""Application settings loaded from environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from joshua.config.engine import ConsensusConfig, EngineConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Nested engine values use a double underscore, e.g.
    ``JOSHUA_RISK_ENGINE__SIMULATION_ITERATIONS=5000``.
    """

    model_config = SettingsConfigDict(
        env_prefix="JOSHUA_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Configuration
    ENVIRONMENT: Literal["development", "testing", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_json: bool | None = None
    metrics_enabled: bool = True

    # Risk Engine Configuration
    risk_engine: EngineConfig = Field(default_factory=EngineConfig)
    consensus: ConsensusConfig = Field(default_factory=ConsensusConfig)

    category_weights: dict[str, float] | None = None
    """Override of the default category weight table, keyed by category name."""


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
