"""
Core enums for the mediaprovider package.
"""

# Configuration enums
from .config import (
    EntryKind,
    BOOLEAN_TOKENS
)

__all__ = [
    'EntryKind',
    'BOOLEAN_TOKENS'
]
