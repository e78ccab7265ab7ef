"""Utility modules for JOSHUA."""

from joshua.utils.exceptions import (
    ConfigurationError,
    JoshuaError,
)

__all__ = [
    "JoshuaError",
    "ConfigurationError",
]
