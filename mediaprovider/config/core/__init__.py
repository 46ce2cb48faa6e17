"""
Core provider configuration components.

- ConfigEntry: declaration of a single setting
- ConfigStore: declared entries plus validated current values
- ConfigPersistence: settings file load/save
- EntryEncryptionCodec: obfuscation of encrypted entries at rest
- ProviderRegistry: registry of provider settings
"""

from .entry import ConfigEntry
from .validator import (
    ValidationResult, EntryValidator, BooleanValidator, TextValidator,
    SelectValidator, SelectIndexValidator, validate_entry_value
)
from .codec import EntryEncryptionCodec, get_codec, reset_codec
from .persistence import ConfigPersistence
from .store import ConfigStore
from .registry import ProviderRegistry

__all__ = [
    # Entries
    'ConfigEntry',

    # Validation
    'ValidationResult',
    'EntryValidator',
    'BooleanValidator',
    'TextValidator',
    'SelectValidator',
    'SelectIndexValidator',
    'validate_entry_value',

    # Encryption
    'EntryEncryptionCodec',
    'get_codec',
    'reset_codec',

    # Store and persistence
    'ConfigPersistence',
    'ConfigStore',

    # Registry
    'ProviderRegistry'
]
