"""
Configuration management for metadata providers.

- Core store, persistence, encryption and registry infrastructure
- System-level settings and logging configuration
"""

import threading

# Core infrastructure
from .core import (
    ConfigEntry, ConfigStore, ConfigPersistence, EntryEncryptionCodec,
    ProviderRegistry, ValidationResult, validate_entry_value, get_codec, reset_codec
)

# System domain
from .system import (
    SystemConfig, LoggingConfig, get_system_config, set_system_config,
    set_default_config_dir, reset_system_config, get_default_logging_config
)

_registry = None
_registry_lock = threading.Lock()


def get_provider_registry() -> ProviderRegistry:
    """Get or create the process-wide provider registry."""
    global _registry
    with _registry_lock:
        if _registry is None:
            _registry = ProviderRegistry()
        return _registry


__all__ = [
    # Core infrastructure
    'ConfigEntry',
    'ConfigStore',
    'ConfigPersistence',
    'EntryEncryptionCodec',
    'ProviderRegistry',
    'ValidationResult',
    'validate_entry_value',
    'get_codec',
    'reset_codec',

    # System domain
    'SystemConfig',
    'LoggingConfig',
    'get_system_config',
    'set_system_config',
    'set_default_config_dir',
    'reset_system_config',
    'get_default_logging_config',

    # Convenience functions
    'get_provider_registry'
]
