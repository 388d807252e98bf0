from __future__ import annotations


class ConfigurationError(ValueError):
    """Raised when client configuration is missing or invalid."""


class SigningError(ValueError):
    """Raised when a request cannot be signed (e.g. no host in the base URL)."""
