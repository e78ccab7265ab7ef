"""Custom exceptions for JOSHUA."""


class JoshuaError(Exception):
    """Base exception for all JOSHUA errors."""

    pass


class ConfigurationError(JoshuaError):
    """Error in configuration or settings."""

    pass
