"""Configuration module for JOSHUA."""

from joshua.config.engine import ConsensusConfig, EngineConfig, ScaleConfig
from joshua.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings", "EngineConfig", "ConsensusConfig", "ScaleConfig"]
