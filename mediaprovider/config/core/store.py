"""
Per-provider settings store.

A ConfigStore holds the declared entries of one provider together with the
values that have been accepted for them. Every write is validated; a value
that does not fit the entry is dropped and the previous value stays in place.
"""

import threading
from typing import Any, Dict, Iterable, List, Optional

from mediaprovider.core.enums import EntryKind, BOOLEAN_TOKENS
from mediaprovider.logger import get_mediaprovider_logger
from .entry import ConfigEntry, is_valid_key
from .persistence import ConfigPersistence
from .validator import validate_entry_value

MASK = "*****"


class ConfigStore:
    """
    Ordered entry declarations plus the current values of one provider.

    All operations run under a re-entrant lock, so a store may be shared
    between threads; distinct stores share nothing.

    Keys must fit on a settings file line (see ``is_valid_key``); a
    declaration with any other key is logged and ignored.
    """

    def __init__(self, provider_id: str, persistence: Optional[ConfigPersistence] = None):
        self.provider_id = provider_id
        self.logger = get_mediaprovider_logger().bind(component="ConfigStore", provider_id=provider_id)
        self._lock = threading.RLock()
        self._persistence = persistence or ConfigPersistence()

        # dicts keep insertion order, which is the declaration order
        self._entries: Dict[str, ConfigEntry] = {}
        self._values: Dict[str, str] = {}

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def add_boolean(self, key: str, default: Any) -> Optional[ConfigEntry]:
        """Declare a boolean entry."""
        if isinstance(default, bool):
            default_value = str(default).lower()
        else:
            default_value = str(default).strip().lower()
            if default_value not in BOOLEAN_TOKENS:
                self.logger.warning("Invalid boolean default", key=key, default=default)
                default_value = ""
        return self._declare(ConfigEntry(key, EntryKind.BOOLEAN, default_value))

    def add_text(self, key: str, default: str, encrypted: bool = False) -> Optional[ConfigEntry]:
        """Declare a free text entry; ``encrypted`` only affects the settings file."""
        default_value = "" if default is None else str(default)
        return self._declare(ConfigEntry(key, EntryKind.TEXT, default_value, encrypted=encrypted))

    def add_select(self, key: str, allowed_values: Iterable[str], default: str) -> Optional[ConfigEntry]:
        """
        Declare a single-select entry.

        A default outside ``allowed_values`` still creates the entry, but it
        reads as an empty string until a valid value is set.
        """
        allowed = tuple(str(v) for v in allowed_values)
        default_value = default
        if default not in allowed:
            self.logger.warning("Select default not in allowed values", key=key, default=default)
            default_value = ""
        return self._declare(ConfigEntry(key, EntryKind.SELECT, default_value, allowed))

    def add_select_index(self, key: str, allowed_tokens: Iterable[str],
                         default_token: str) -> Optional[ConfigEntry]:
        """
        Declare a select entry whose value is the index of the chosen token.
        """
        allowed = tuple(str(v) for v in allowed_tokens)
        entry = ConfigEntry(key, EntryKind.SELECT_INDEX, "", allowed)
        default_index = entry.index_of(default_token)
        if default_index is None:
            self.logger.warning("Select index default not in allowed tokens", key=key, default=default_token)
        else:
            entry = ConfigEntry(key, EntryKind.SELECT_INDEX, default_index, allowed)
        return self._declare(entry)

    def _declare(self, entry: ConfigEntry) -> Optional[ConfigEntry]:
        if not is_valid_key(entry.key):
            self.logger.warning("Ignoring declaration with invalid key", key=entry.key)
            return None

        with self._lock:
            previous = self._entries.get(entry.key)
            self._entries[entry.key] = entry

            if previous is not None:
                self.logger.warning("Entry redeclared", key=entry.key,
                                    old_kind=previous.kind.value, new_kind=entry.kind.value)
                self._drop_stale_value(previous, entry)
            return entry

    def _drop_stale_value(self, previous: ConfigEntry, entry: ConfigEntry):
        if entry.key not in self._values:
            return
        keep = (entry.is_compatible_with(previous)
                and validate_entry_value(entry, self._values[entry.key], persisted=True).is_valid)
        if not keep:
            del self._values[entry.key]
            self.logger.info("Stale value dropped after redeclaration", key=entry.key)

    # ------------------------------------------------------------------
    # Value access
    # ------------------------------------------------------------------

    def get_entry(self, key: str) -> Optional[ConfigEntry]:
        with self._lock:
            return self._entries.get(key)

    def get_all_entries(self) -> List[str]:
        """Declared keys in declaration order."""
        with self._lock:
            return list(self._entries)

    def get_value(self, key: str) -> str:
        """
        Current value of ``key``.

        Falls back to the declared default when nothing was set, and to an
        empty string for undeclared keys. SELECT_INDEX entries return the
        index of the selected token as a string.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return ""
            return self._values.get(key, entry.default)

    def get_value_as_bool(self, key: str) -> Optional[bool]:
        """
        Boolean value of a BOOLEAN entry.

        Returns None, not False, when the key is undeclared, is not a boolean
        entry, or has no resolvable value.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or entry.kind is not EntryKind.BOOLEAN:
                return None
            return BOOLEAN_TOKENS.get(self.get_value(key))

    def get_value_index(self, key: str) -> Optional[int]:
        """Integer index of a SELECT_INDEX entry, or None."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or entry.kind is not EntryKind.SELECT_INDEX:
                return None
            value = self.get_value(key)
            return int(value) if entry.token_for_index(value) is not None else None

    def get_selected_token(self, key: str) -> str:
        """Selected token of a select entry, or an empty string."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or not entry.is_select():
                return ""
            value = self.get_value(key)
            if entry.kind is EntryKind.SELECT_INDEX:
                return entry.token_for_index(value) or ""
            return value

    def set_value(self, key: str, new_value: Any) -> bool:
        """
        Set ``key`` to ``new_value`` if it is valid for the entry.

        Invalid values and undeclared keys are ignored and the last accepted
        value is kept. Returns whether the value was accepted.
        """
        return self._set(key, new_value, persisted=False)

    def apply_persisted_value(self, key: str, raw_value: str) -> bool:
        """Set a value read back from a settings file."""
        return self._set(key, raw_value, persisted=True)

    def _set(self, key: str, new_value: Any, persisted: bool) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.logger.debug("Ignoring value for undeclared entry", key=key)
                return False

            result = validate_entry_value(entry, new_value, persisted=persisted)
            if not result.is_valid:
                self.logger.debug("Rejected value", key=key,
                                  errors=[str(e) for e in result.errors])
                return False

            self._values[key] = result.value
            return True

    def values_snapshot(self) -> Dict[str, str]:
        """Copy of the explicitly set values."""
        with self._lock:
            return dict(self._values)

    def reset_to_defaults(self) -> None:
        """Forget every set value; reads fall back to the defaults."""
        with self._lock:
            self._values.clear()

    def to_dict(self, mask_encrypted: bool = True) -> Dict[str, str]:
        """Declared keys with their effective values, in declaration order."""
        with self._lock:
            return {
                key: MASK if (mask_encrypted and entry.encrypted) else self.get_value(key)
                for key, entry in self._entries.items()
            }

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self) -> int:
        """Load values from the default settings directory."""
        return self._persistence.load(self)

    def save(self) -> None:
        """Save values to the default settings directory."""
        self._persistence.save(self)

    def load_from_dir(self, directory) -> int:
        """Load values from the settings file in ``directory``."""
        return self._persistence.load(self, directory)

    def save_to_dir(self, directory) -> None:
        """Save values to the settings file in ``directory``."""
        self._persistence.save(self, directory)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def __str__(self) -> str:
        fields = ", ".join(f"{key}={value}" for key, value in self.to_dict().items())
        return f"ConfigStore[{self.provider_id}]({fields})"
