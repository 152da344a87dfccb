"""Filesystem access used by the walker."""

from __future__ import annotations

import logging
import os
import stat as stat_mode
from abc import ABC, abstractmethod
from typing import Hashable

from hound.core.path_set import normalize_path
from hound.models.descriptor import Entry, EntryKind, StatInfo
from hound.utils import is_hidden_name

log = logging.getLogger(__name__)


class FileSystem(ABC):
    """Everything the walker needs to know about the disk.

    Implementations raise ``FileNotFoundError``, ``PermissionError`` or any
    other ``OSError`` on failure. Calls are blocking; the walker runs them
    in worker threads.
    """

    @abstractmethod
    def list_entries(self, path: str) -> list[Entry]:
        """Return the entries directly inside *path*, in a stable order."""

    @abstractmethod
    def stat(self, path: str) -> StatInfo:
        """Return metadata for *path*, following symlinks."""

    def resolve_absolute(self, path: str) -> str:
        """Absolute, normalized form of *path*."""
        return normalize_path(path)

    @abstractmethod
    def resolve_real_identity(self, path: str) -> Hashable:
        """Return a value equal for every path naming the same directory."""


class LocalFileSystem(FileSystem):
    """The real filesystem, via ``os.scandir`` and ``os.stat``."""

    def list_entries(self, path: str) -> list[Entry]:
        entries: list[Entry] = []
        with os.scandir(path) as it:
            for item in it:
                entries.append(Entry(item.name, _entry_kind(item)))
        entries.sort(key=lambda e: e.name)
        return entries

    def stat(self, path: str) -> StatInfo:
        st = os.stat(path)
        return StatInfo(
            size_bytes=st.st_size,
            is_directory=stat_mode.S_ISDIR(st.st_mode),
            is_hidden=is_hidden_name(os.path.basename(path)),
            modified=st.st_mtime,
            accessed=st.st_atime,
            changed=st.st_ctime,
        )

    def resolve_real_identity(self, path: str) -> Hashable:
        st = os.stat(path)
        return (st.st_dev, st.st_ino)


def _entry_kind(item: os.DirEntry[str]) -> EntryKind:
    """Classify a scandir entry, following symlinks."""
    try:
        if item.is_dir():
            return EntryKind.DIRECTORY
        if item.is_file():
            return EntryKind.FILE
        if item.is_symlink():
            return EntryKind.SYMLINK
    except OSError:
        log.debug("Cannot classify %s, treating it as a plain entry", item.path)
    return EntryKind.OTHER
