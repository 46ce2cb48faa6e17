"""
Configuration-related enums for the mediaprovider package.
"""

from enum import Enum


class EntryKind(Enum):
    """Kinds of provider setting."""
    BOOLEAN = "boolean"
    TEXT = "text"
    SELECT = "select"
    SELECT_INDEX = "select_index"


# Lower-cased string forms accepted for boolean entries
BOOLEAN_TOKENS = {
    "true": True,
    "false": False,
}
