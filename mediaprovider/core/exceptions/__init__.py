"""
Core exceptions for the mediaprovider package.

This module provides all exception classes used throughout the package,
organized by domain and with a clear inheritance hierarchy.
"""

# Base exceptions
from .base import (
    MediaProviderError,
    ValidationError,
    ConfigurationError,
    NotFoundError
)

# Configuration exceptions
from .config import (
    ConfigPersistenceError,
    ProviderNotFoundError
)

__all__ = [
    # Base exceptions
    'MediaProviderError',
    'ValidationError',
    'ConfigurationError',
    'NotFoundError',

    # Configuration exceptions
    'ConfigPersistenceError',
    'ProviderNotFoundError'
]
