"""Hound data models."""

from hound.models.descriptor import Entry, EntryKind, FileDescriptor, StatInfo
from hound.models.query import HiddenPolicy, QueryConfig

__all__ = [
    "Entry",
    "EntryKind",
    "FileDescriptor",
    "HiddenPolicy",
    "QueryConfig",
    "StatInfo",
]
