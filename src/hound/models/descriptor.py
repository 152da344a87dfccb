"""Filesystem entries as seen by the walker and the filters."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path

from hound.utils import is_hidden_name


class EntryKind(Enum):
    """What a directory entry points at (links are followed)."""

    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"  # dangling link
    OTHER = "other"  # socket, fifo, device


@dataclass(frozen=True, slots=True)
class Entry:
    """One name reported by ``FileSystem.list_entries``."""

    name: str
    kind: EntryKind


@dataclass(frozen=True, slots=True)
class StatInfo:
    """Metadata for a single path."""

    size_bytes: int
    is_directory: bool
    is_hidden: bool
    modified: float = 0.0
    accessed: float = 0.0
    changed: float = 0.0


@dataclass(frozen=True, slots=True)
class FileDescriptor:
    """A single entry encountered during a walk.

    ``depth`` counts directories between the search root and the entry,
    so the root's immediate children sit at depth 0. ``stat`` is only
    filled in when some filter needs metadata; see ``with_stat``.
    """

    path: Path
    root: str
    kind: EntryKind
    depth: int
    stat: StatInfo | None = None

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def is_hidden(self) -> bool:
        return is_hidden_name(self.path.name)

    @property
    def is_directory(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @property
    def relative_path(self) -> str:
        return os.path.relpath(self.path, self.root)

    @property
    def size_bytes(self) -> int:
        if self.stat is None:
            raise LookupError(f"No metadata fetched for {self.path}")
        return self.stat.size_bytes

    def with_stat(self, stat: StatInfo) -> FileDescriptor:
        """Return a copy of this descriptor carrying *stat*."""
        return replace(self, stat=stat)

    def __str__(self) -> str:
        return str(self.path)
