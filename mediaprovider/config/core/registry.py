"""
Registry of metadata providers.

This module provides a central place where providers register their
ProviderInfo, so their settings can be looked up and loaded or saved in bulk.
"""

import threading
from typing import TYPE_CHECKING, Dict, List, Optional

from mediaprovider.core.exceptions import ConfigPersistenceError, ProviderNotFoundError
from mediaprovider.logger import get_mediaprovider_logger

if TYPE_CHECKING:
    from mediaprovider.provider_info import ProviderInfo


class ProviderRegistry:
    """
    Central registry of provider settings.

    Providers are keyed by their id. The registry itself holds no settings
    values; each provider owns its own store.
    """

    def __init__(self, config_dir: Optional[str] = None):
        """
        Args:
            config_dir: Directory for load_all()/save_all(); the process-wide
                default directory when omitted.
        """
        self.config_dir = config_dir
        self.logger = get_mediaprovider_logger().bind(component="ProviderRegistry")
        self._lock = threading.RLock()
        self._providers: Dict[str, 'ProviderInfo'] = {}

    def register(self, provider: 'ProviderInfo') -> 'ProviderInfo':
        """
        Register a provider, replacing any provider with the same id.

        Returns:
            The registered provider
        """
        with self._lock:
            if provider.id in self._providers:
                self.logger.warning("Provider re-registered", provider_id=provider.id)
            self._providers[provider.id] = provider
            self.logger.info("Provider registered", provider_id=provider.id, name=provider.name)
            return provider

    def unregister(self, provider_id: str) -> None:
        """
        Raises:
            ProviderNotFoundError: If no provider has this id
        """
        with self._lock:
            if provider_id not in self._providers:
                raise ProviderNotFoundError(provider_id)
            del self._providers[provider_id]
            self.logger.info("Provider unregistered", provider_id=provider_id)

    def get(self, provider_id: str) -> 'ProviderInfo':
        """
        Get a registered provider.

        Raises:
            ProviderNotFoundError: If no provider has this id
        """
        with self._lock:
            try:
                return self._providers[provider_id]
            except KeyError:
                raise ProviderNotFoundError(provider_id) from None

    def list_providers(self) -> List[str]:
        """List registered provider ids in registration order."""
        with self._lock:
            return list(self._providers)

    def load_all(self, directory=None) -> Dict[str, ConfigPersistenceError]:
        """
        Load the settings of every provider.

        A provider whose file cannot be read is skipped; the others are still
        loaded. Returns the failures keyed by provider id.
        """
        return self._for_each("load", directory)

    def save_all(self, directory=None) -> Dict[str, ConfigPersistenceError]:
        """Save the settings of every provider; see load_all() for failures."""
        return self._for_each("save", directory)

    def _for_each(self, operation: str, directory) -> Dict[str, ConfigPersistenceError]:
        directory = directory if directory is not None else self.config_dir
        with self._lock:
            providers = list(self._providers.values())

        failures: Dict[str, ConfigPersistenceError] = {}
        for provider in providers:
            try:
                if operation == "load" and directory is None:
                    provider.config.load()
                elif operation == "load":
                    provider.config.load_from_dir(directory)
                elif directory is None:
                    provider.config.save()
                else:
                    provider.config.save_to_dir(directory)
            except ConfigPersistenceError as e:
                self.logger.error(f"Failed to {operation} provider settings",
                                  provider_id=provider.id, error=str(e))
                failures[provider.id] = e

        self.logger.info(f"Bulk {operation} completed",
                         providers=len(providers), failures=len(failures))
        return failures

    def __contains__(self, provider_id: str) -> bool:
        with self._lock:
            return provider_id in self._providers

    def __len__(self) -> int:
        with self._lock:
            return len(self._providers)

    def clear(self) -> None:
        """Remove every provider."""
        with self._lock:
            self._providers.clear()
            self.logger.info("Registry cleared")
