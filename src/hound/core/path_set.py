"""Search root bookkeeping."""

from __future__ import annotations

import logging
import os
from typing import Callable, Iterator

from hound.utils import is_ancestor

log = logging.getLogger(__name__)


def normalize_path(path: str | os.PathLike[str]) -> str:
    """Absolute path without trailing separators; symlinks are left alone."""
    return os.path.normpath(os.path.abspath(os.fspath(path)))


class PathSet:
    """Minimal covering set of search roots.

    After every ``add`` the roots are sorted and any path that sits below
    another root is dropped, since walking the ancestor already covers it.
    """

    def __init__(self, resolve: Callable[[str], str] = normalize_path) -> None:
        self._resolve = resolve
        self._roots: list[str] = []

    def add(self, *paths: str | os.PathLike[str]) -> None:
        """Normalize *paths* into the set and recompute the covering roots."""
        candidates = set(self._roots)
        candidates.update(self._resolve(os.fspath(p)) for p in paths)

        kept: list[str] = []
        for path in sorted(candidates):
            ancestor = next((k for k in kept if is_ancestor(k, path)), None)
            if ancestor is not None:
                log.debug("Search path %s is covered by %s, dropping it", path, ancestor)
                continue
            kept.append(path)
        self._roots = kept

    def get(self) -> list[str]:
        """Return a copy of the sorted roots."""
        return list(self._roots)

    def __len__(self) -> int:
        return len(self._roots)

    def __iter__(self) -> Iterator[str]:
        return iter(self.get())

    def __bool__(self) -> bool:
        return bool(self._roots)
