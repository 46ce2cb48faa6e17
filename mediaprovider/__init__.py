from mediaprovider.config import get_system_config, get_provider_registry
from mediaprovider.config import ConfigEntry, ConfigStore, ConfigPersistence, ProviderRegistry
from mediaprovider.core.enums import EntryKind
from mediaprovider.logger import init_logger
from mediaprovider.provider_info import ProviderInfo

# Initialize configuration system and logger
system_config = get_system_config()
logger = init_logger(system_config)

__all__ = [
    'ConfigEntry',
    'ConfigStore',
    'ConfigPersistence',
    'ProviderRegistry',
    'EntryKind',
    'ProviderInfo',
    'get_provider_registry',
    'get_system_config',
    'init_logger'
]
