"""Depth-bounded, pruning-aware directory traversal."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import AsyncIterator, Callable, Hashable, TypeVar

from hound.core.filesystem import FileSystem
from hound.errors import EntryIOError, RootNotFoundError, RootPermissionError
from hound.models.descriptor import Entry, EntryKind, FileDescriptor
from hound.models.query import HiddenPolicy
from hound.settings import DEFAULT_CONCURRENCY

log = logging.getLogger(__name__)

T = TypeVar("T")

ErrorCallback = Callable[[EntryIOError], None]
PruneCheck = Callable[[FileDescriptor], bool]


class Walker:
    """Walks search roots and yields one descriptor per entry found.

    Subdirectories are checked against the hidden policy, the depth limit
    and ``should_prune`` before they are listed, so a rejected directory
    costs nothing beyond its own name. Each subdirectory's real identity is
    resolved next, and one already visited during this walk is never listed
    again. Sibling listings are fetched concurrently but consumed in entry
    order, which keeps the output depth-first and stable.

    All filesystem calls go through worker threads and share *semaphore*,
    which caps how many run at once.
    """

    def __init__(
        self,
        fs: FileSystem,
        *,
        max_depth: int | None = None,
        hidden_policy: HiddenPolicy = HiddenPolicy.OFF,
        should_prune: PruneCheck | None = None,
        include_directories: bool = False,
        semaphore: asyncio.Semaphore | None = None,
        on_error: ErrorCallback | None = None,
    ) -> None:
        self._fs = fs
        self._max_depth = max_depth
        self._hidden_policy = hidden_policy
        self._should_prune = should_prune
        self._include_directories = include_directories
        self._semaphore = semaphore or asyncio.Semaphore(DEFAULT_CONCURRENCY)
        self._on_error = on_error

    async def walk(self, root: str) -> AsyncIterator[FileDescriptor]:
        """Yield descriptors below *root*.

        Raises:
            RootNotFoundError: *root* is missing or not a directory.
            RootPermissionError: *root* cannot be read.
        """
        try:
            identity = await self._call(self._fs.resolve_real_identity, root)
            entries = await self._call(self._fs.list_entries, root)
        except (FileNotFoundError, NotADirectoryError) as exc:
            reason = "not a directory" if isinstance(exc, NotADirectoryError) else "no such directory"
            raise RootNotFoundError(root, reason) from exc
        except PermissionError as exc:
            raise RootPermissionError(root) from exc
        except OSError as exc:
            raise RootNotFoundError(root, exc.strerror or str(exc)) from exc

        visited: set[Hashable] = {identity}
        async for descriptor in self._walk_entries(root, root, entries, 0, visited):
            yield descriptor

    async def stat(self, descriptor: FileDescriptor) -> FileDescriptor | None:
        """Return *descriptor* with metadata attached, or None if it vanished."""
        try:
            info = await self._call(self._fs.stat, str(descriptor.path))
        except OSError as exc:
            self._report(str(descriptor.path), exc)
            return None
        return descriptor.with_stat(info)

    async def _walk_entries(
        self,
        root: str,
        directory: str,
        entries: list[Entry],
        depth: int,
        visited: set[Hashable],
    ) -> AsyncIterator[FileDescriptor]:
        admitted: list[FileDescriptor] = []
        for entry in entries:
            descriptor = FileDescriptor(Path(directory, entry.name), root, entry.kind, depth)
            if entry.kind is EntryKind.DIRECTORY:
                if not self._admit_directory(descriptor):
                    continue
            elif self._hides(descriptor):
                continue
            admitted.append(descriptor)

        pending: dict[Path, asyncio.Task[list[Entry] | None]] = {}
        if self._max_depth is None or depth + 1 <= self._max_depth:
            subdirectories = [d for d in admitted if d.is_directory]
            identities = await asyncio.gather(*(self._identify(str(d.path)) for d in subdirectories))
            for descriptor, identity in zip(subdirectories, identities):
                if identity is None:
                    continue
                if identity in visited:
                    log.debug("Skipping %s: directory already visited", descriptor.path)
                    continue
                visited.add(identity)
                pending[descriptor.path] = asyncio.ensure_future(self._list(str(descriptor.path)))

        try:
            for descriptor in admitted:
                if not descriptor.is_directory:
                    if not self._include_directories:
                        yield descriptor
                    continue

                if self._include_directories and not self._hides(descriptor):
                    yield descriptor
                task = pending.pop(descriptor.path, None)
                if task is None:
                    continue
                children = await task
                if children is None:
                    continue
                async for child in self._walk_entries(root, str(descriptor.path), children, depth + 1, visited):
                    yield child
        finally:
            for task in pending.values():
                task.cancel()

    async def _identify(self, path: str) -> Hashable | None:
        try:
            return await self._call(self._fs.resolve_real_identity, path)
        except OSError as exc:
            self._report(path, exc)
            return None

    async def _list(self, path: str) -> list[Entry] | None:
        try:
            return await self._call(self._fs.list_entries, path)
        except OSError as exc:
            self._report(path, exc)
            return None

    def _admit_directory(self, descriptor: FileDescriptor) -> bool:
        if self._hidden_policy is HiddenPolicy.FILES_AND_DIRECTORIES and descriptor.is_hidden:
            log.debug("Skipping hidden directory %s", descriptor.path)
            return False
        if self._should_prune is not None and self._should_prune(descriptor):
            return False
        return True

    def _hides(self, descriptor: FileDescriptor) -> bool:
        return self._hidden_policy is not HiddenPolicy.OFF and descriptor.is_hidden

    def _report(self, path: str, exc: OSError) -> None:
        error = EntryIOError(path, exc.strerror or str(exc))
        error.__cause__ = exc
        log.warning("Skipping %s", error)
        if self._on_error is not None:
            self._on_error(error)

    async def _call(self, fn: Callable[[str], T], path: str) -> T:
        async with self._semaphore:
            return await asyncio.to_thread(fn, path)
