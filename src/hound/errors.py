"""Exceptions raised while building and running queries."""

from __future__ import annotations


class HoundError(Exception):
    """Base class for all hound errors."""


class ConfigurationError(HoundError, ValueError):
    """Raised by the query builder when a criterion is malformed.

    Always raised before any filesystem access happens.
    """


class RootNotFoundError(HoundError):
    """Raised when a search root does not exist or is not a directory."""

    def __init__(self, path: str, reason: str = "no such directory") -> None:
        super().__init__(f"Search path '{path}': {reason}")
        self.path = path


class RootPermissionError(HoundError):
    """Raised when a search root cannot be read."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Search path '{path}': permission denied")
        self.path = path


class EntryIOError(HoundError):
    """A single entry could not be read during a walk.

    Never fatal: the walker logs it, skips the entry and carries on.
    The original ``OSError`` is chained as ``__cause__``.
    """

    def __init__(self, path: str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
