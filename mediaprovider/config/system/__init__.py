"""
System domain configuration.
"""

from .config import (
    SystemConfig,
    get_system_config,
    set_system_config,
    set_default_config_dir,
    reset_system_config,
    default_settings_file,
    ENV_CONFIG_DIR,
    ENV_ENCRYPTION_KEY,
    ENV_LOG_LEVEL,
    ENV_SETTINGS_FILE,
    SETTINGS_FILE_NAME,
    DEFAULT_ENCRYPTION_PASSPHRASE
)
from .logging_config import LoggingConfig, get_default_logging_config

__all__ = [
    'SystemConfig',
    'get_system_config',
    'set_system_config',
    'set_default_config_dir',
    'reset_system_config',
    'default_settings_file',
    'ENV_CONFIG_DIR',
    'ENV_ENCRYPTION_KEY',
    'ENV_LOG_LEVEL',
    'ENV_SETTINGS_FILE',
    'SETTINGS_FILE_NAME',
    'DEFAULT_ENCRYPTION_PASSPHRASE',
    'LoggingConfig',
    'get_default_logging_config'
]
