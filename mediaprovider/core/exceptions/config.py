"""
Provider configuration exceptions for the mediaprovider package.
"""

from .base import ConfigurationError, NotFoundError


class ConfigPersistenceError(ConfigurationError):
    """
    Raised when a provider settings file cannot be read or written.

    The in-memory store and the previously persisted file are left untouched,
    so callers may retry or carry on with the current values.
    """

    def __init__(self, provider_id: str, path: str, reason: str):
        self.provider_id = provider_id
        self.path = path
        super().__init__(config_key=provider_id, reason=f"{path}: {reason}")


class ProviderNotFoundError(NotFoundError):
    """Raised when trying to access a provider that was never registered."""

    def __init__(self, provider_id: str):
        self.provider_id = provider_id
        super().__init__("Provider", provider_id)
