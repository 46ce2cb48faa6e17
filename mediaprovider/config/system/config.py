"""
System domain configuration classes.

This module defines the package-level settings: where provider settings files
live, how they are named, the passphrase used to obfuscate encrypted entries
and the logging setup. Settings come from an optional YAML file and are then
overridden by environment variables.
"""

import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, Optional

import yaml

from mediaprovider.core.exceptions import ConfigurationError
from .logging_config import LoggingConfig, get_default_logging_config


ENV_CONFIG_DIR = "MEDIAPROVIDER_CONFIG_DIR"
ENV_ENCRYPTION_KEY = "MEDIAPROVIDER_ENCRYPTION_KEY"
ENV_LOG_LEVEL = "MEDIAPROVIDER_LOG_LEVEL"
ENV_SETTINGS_FILE = "MEDIAPROVIDER_SETTINGS_FILE"

SETTINGS_FILE_NAME = "system.yaml"

DEFAULT_ENCRYPTION_PASSPHRASE = "mediaprovider-settings"


@dataclass
class SystemConfig:
    """
    Main system configuration class.

    ``config_dir`` is the process-wide default directory used by the
    zero-argument ``load()``/``save()`` forms of a provider store.
    """

    config_dir: str = "settings"
    file_prefix: str = "scraper_"
    file_suffix: str = ".conf"
    encryption_passphrase: str = DEFAULT_ENCRYPTION_PASSPHRASE
    logging: LoggingConfig = field(default_factory=get_default_logging_config)

    def settings_file_name(self, provider_id: str) -> str:
        """Name of the settings file for a provider id."""
        return f"{self.file_prefix}{provider_id}{self.file_suffix}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            'config_dir': self.config_dir,
            'file_prefix': self.file_prefix,
            'file_suffix': self.file_suffix,
            'encryption_passphrase': self.encryption_passphrase,
            'logging': self.logging.to_dict()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SystemConfig':
        """Create configuration from dictionary."""
        config = cls()

        config.config_dir = str(data.get('config_dir', config.config_dir))
        config.file_prefix = str(data.get('file_prefix', config.file_prefix))
        config.file_suffix = str(data.get('file_suffix', config.file_suffix))
        config.encryption_passphrase = str(
            data.get('encryption_passphrase', config.encryption_passphrase)
        )

        if 'logging' in data:
            config.logging = LoggingConfig.from_dict(data['logging'] or {})

        return config

    @classmethod
    def from_yaml(cls, path) -> 'SystemConfig':
        """
        Load configuration from a YAML file.

        A missing file yields the defaults; a file that is not a YAML mapping
        raises ConfigurationError.
        """
        path = Path(path)
        if not path.exists():
            return cls()

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(config_key=str(path), reason=str(e)) from e

        if not isinstance(data, dict):
            raise ConfigurationError(config_key=str(path), reason="expected a mapping")

        return cls.from_dict(data)

    def apply_env(self, environ: Optional[Dict[str, str]] = None) -> 'SystemConfig':
        """Override settings from environment variables."""
        environ = os.environ if environ is None else environ

        if environ.get(ENV_CONFIG_DIR):
            self.config_dir = environ[ENV_CONFIG_DIR]
        if environ.get(ENV_ENCRYPTION_KEY):
            self.encryption_passphrase = environ[ENV_ENCRYPTION_KEY]
        if environ.get(ENV_LOG_LEVEL):
            self.logging.level = environ[ENV_LOG_LEVEL].upper()

        return self

    @classmethod
    def from_env(cls, yaml_path=None, environ: Optional[Dict[str, str]] = None) -> 'SystemConfig':
        """
        Defaults, then the YAML settings file, then environment overrides.

        Without ``yaml_path`` the file named by ``MEDIAPROVIDER_SETTINGS_FILE``
        is read, falling back to ``system.yaml`` in the configuration directory.
        """
        environ = os.environ if environ is None else environ
        if yaml_path is None:
            yaml_path = default_settings_file(environ)
        return cls.from_yaml(yaml_path).apply_env(environ)


def default_settings_file(environ: Optional[Dict[str, str]] = None) -> Path:
    """Location of the YAML system settings file."""
    environ = os.environ if environ is None else environ
    if environ.get(ENV_SETTINGS_FILE):
        return Path(environ[ENV_SETTINGS_FILE])
    config_dir = environ.get(ENV_CONFIG_DIR) or SystemConfig.config_dir
    return Path(config_dir) / SETTINGS_FILE_NAME


_system_config: Optional[SystemConfig] = None
_system_config_lock = threading.Lock()


def get_system_config() -> SystemConfig:
    """Get or create the process-wide system configuration."""
    global _system_config
    with _system_config_lock:
        if _system_config is None:
            _system_config = SystemConfig.from_env()
        return _system_config


def set_system_config(config: SystemConfig) -> None:
    """Replace the process-wide system configuration."""
    global _system_config
    with _system_config_lock:
        _system_config = config


def set_default_config_dir(directory) -> None:
    """Change the directory used by the zero-argument load()/save() forms."""
    get_system_config().config_dir = str(directory)


def reset_system_config() -> None:
    """
    Drop the cached system configuration.

    This function is primarily useful for testing scenarios.
    """
    global _system_config
    with _system_config_lock:
        _system_config = None
