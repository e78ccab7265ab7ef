"""Core exceptions for risk scoring and consensus reconciliation."""

from typing import Any

from joshua.utils.exceptions import JoshuaError


class EmptyInputError(JoshuaError):
    """Raised when a scoring operation receives no risk factors.

    No partial or default result is produced.

    Attributes:
        operation: The operation that required input (e.g., "composite_score")
    """

    def __init__(self, operation: str):
        super().__init__(f"No risk factors supplied to {operation}")
        self.operation = operation

    def __str__(self) -> str:
        return f"EmptyInputError: {self.args[0]}"


class InvalidWeightError(JoshuaError):
    """Raised when a weight table or weighted input violates its invariants.

    Attributes:
        field: Name of the offending field (e.g., "weights", "regional_conflicts")
        value: The offending value
        expected: Human readable description of the accepted range
    """

    def __init__(
        self,
        message: str,
        field: str,
        value: Any,
        expected: str,
    ):
        super().__init__(message)
        self.field = field
        self.value = value
        self.expected = expected

    def __str__(self) -> str:
        return (
            f"{type(self).__name__}: {self.args[0]} "
            f"(field={self.field}, value={self.value!r}, expected={self.expected})"
        )


class InvalidFactorValueError(InvalidWeightError):
    """Raised when a risk factor value lies outside [0, 1].

    Factor values are rejected where they enter the core and are never
    clamped silently during aggregation.
    """

    def __init__(self, name: str, value: Any):
        super().__init__(
            f"Risk factor '{name}' has an out-of-range value",
            field="value",
            value=value,
            expected="finite number in [0.0, 1.0]",
        )
        self.name = name


class InvalidScaledValueError(InvalidWeightError):
    """Raised when an analysis reports a scaled value beyond the configured scale.

    Attributes:
        index: Position of the offending analysis in the input
        max_scale: Upper bound of the scale in use
    """

    def __init__(self, index: int, value: int, max_scale: int):
        super().__init__(
            f"Analysis {index} reports a scaled value outside the scale",
            field="scaled_value",
            value=value,
            expected=f"integer in [0, {max_scale}]",
        )
        self.index = index
        self.max_scale = max_scale


class InsufficientAnalysesError(JoshuaError):
    """Raised when too few analyses are supplied to build a consensus.

    Attributes:
        received: Number of analyses supplied
        required: Minimum number of analyses needed
    """

    def __init__(self, received: int, required: int = 2):
        super().__init__(
            f"Need at least {required} analyses for consensus, got {received}"
        )
        self.received = received
        self.required = required

    def __str__(self) -> str:
        return f"InsufficientAnalysesError: {self.args[0]}"
