"""
System logging configuration.
"""

from dataclasses import dataclass
from typing import Dict, Any


@dataclass
class LoggingConfig:
    """Logging settings applied by :func:`mediaprovider.logger.init_logger`."""

    level: str = "INFO"
    json_logs: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'level': self.level,
            'json_logs': self.json_logs
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LoggingConfig':
        config = cls()
        config.level = str(data.get('level', config.level)).upper()
        config.json_logs = bool(data.get('json_logs', config.json_logs))
        return config


def get_default_logging_config() -> LoggingConfig:
    """Get default logging configuration."""
    return LoggingConfig()
