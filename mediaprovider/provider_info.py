"""
Identity of a metadata provider and its settings store.
"""

from mediaprovider.config.core.store import ConfigStore


class ProviderInfo:
    """
    Binds a provider identity to exactly one ConfigStore.

    The id also names the provider's settings file, so it should be stable
    across releases.
    """

    def __init__(self, id: str, name: str, description: str, version: str = ""):
        if not id:
            raise ValueError("Provider id must not be empty")
        self._id = id
        self._name = name
        self._description = description
        self._version = version
        self._config = ConfigStore(id)

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @property
    def version(self) -> str:
        return self._version

    @property
    def config(self) -> ConfigStore:
        return self._config

    def __repr__(self) -> str:
        return f"ProviderInfo(id={self._id!r}, name={self._name!r}, version={self._version!r})"
