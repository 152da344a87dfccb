"""Hound: find files the easy way."""

from hound.core.engine import FileHound
from hound.errors import (
    ConfigurationError,
    EntryIOError,
    HoundError,
    RootNotFoundError,
    RootPermissionError,
)

__version__ = "1.0.0"

__all__ = [
    "ConfigurationError",
    "EntryIOError",
    "FileHound",
    "HoundError",
    "RootNotFoundError",
    "RootPermissionError",
    "__version__",
]
