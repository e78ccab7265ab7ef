"""Core services and utilities for JOSHUA."""

from .exceptions import (
    EmptyInputError,
    InsufficientAnalysesError,
    InvalidFactorValueError,
    InvalidScaledValueError,
    InvalidWeightError,
)

__all__ = [
    # Exceptions
    "EmptyInputError",
    "InsufficientAnalysesError",
    "InvalidFactorValueError",
    "InvalidScaledValueError",
    "InvalidWeightError",
]
