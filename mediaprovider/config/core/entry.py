"""
Provider setting declarations.

A ConfigEntry describes one named setting of a provider: its kind, its default
in string form and, for select kinds, the allowed tokens.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from mediaprovider.core.enums import EntryKind

COMMENT_PREFIX = "#"


def is_valid_key(key) -> bool:
    """
    True if ``key`` survives a settings file line unchanged.

    Keys are written as ``key=value`` and read back stripped, with comment
    lines skipped, so a key must be a non-empty string with no surrounding
    whitespace and no line break or ``=``. It must not start with ``#``.
    """
    if not isinstance(key, str) or not key or key != key.strip():
        return False
    if key.startswith(COMMENT_PREFIX):
        return False
    return not any(c in key for c in ("=", "\n", "\r"))


@dataclass(frozen=True)
class ConfigEntry:
    """
    Declaration of a single provider setting.

    For SELECT_INDEX entries ``default`` holds the index of the default token
    as a string (``""`` when the default token is unknown), because the store
    keeps indices, not tokens, for this kind.
    """
    key: str
    kind: EntryKind
    default: str = ""
    allowed_values: Tuple[str, ...] = field(default_factory=tuple)
    encrypted: bool = False

    def __post_init__(self):
        # frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, 'allowed_values', tuple(str(v) for v in self.allowed_values))
        if self.kind is not EntryKind.TEXT:
            object.__setattr__(self, 'encrypted', False)

    def is_select(self) -> bool:
        return self.kind in (EntryKind.SELECT, EntryKind.SELECT_INDEX)

    def index_of(self, token: str) -> Optional[str]:
        """Index of ``token`` in the allowed values, as a string."""
        try:
            return str(self.allowed_values.index(token))
        except ValueError:
            return None

    def token_for_index(self, index: str) -> Optional[str]:
        """Token stored at a string index, or None if out of range."""
        if not isinstance(index, str) or not (index.isascii() and index.isdigit()):
            return None
        position = int(index)
        if position >= len(self.allowed_values):
            return None
        return self.allowed_values[position]

    def is_compatible_with(self, other: 'ConfigEntry') -> bool:
        """True if a value accepted for ``other`` keeps its meaning for this entry."""
        if self.kind is not other.kind:
            return False
        if self.is_select():
            return self.allowed_values == other.allowed_values
        return True
