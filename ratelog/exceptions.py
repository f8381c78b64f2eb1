from __future__ import annotations


class RateLogError(RuntimeError):
    """Base ratelog error."""


class InvalidLimitError(RateLogError, ValueError):
    """Raised when a threshold policy is built with an unusable payload."""


class ConfigurationError(RateLogError):
    """Raised when environment configuration cannot produce a working setup."""
