"""Query building and execution."""

from __future__ import annotations

import asyncio
import fnmatch
import logging
import os
import re
from typing import Awaitable, Callable

from hound.core.expressions import AgeExpression, SizeExpression
from hound.core.filesystem import FileSystem, LocalFileSystem
from hound.core.filters import CustomPredicate, FilterPipeline
from hound.core.path_set import PathSet
from hound.core.walker import ErrorCallback, Walker
from hound.errors import ConfigurationError
from hound.models.descriptor import FileDescriptor
from hound.models.query import HiddenPolicy, QueryConfig
from hound.settings import DEFAULT_CONCURRENCY, Settings

log = logging.getLogger(__name__)

FindCallback = Callable[[Exception | None, list[str] | None], None]
MatchCallback = Callable[[str], None]


class FileHound:
    """Builds a file query through chained calls and runs it.

    Example::

        files = await (
            FileHound.create()
            .paths("/var/log")
            .ext("log")
            .size(">1m")
            .find()
        )

    Every builder method returns the instance. ``find`` freezes the current
    configuration, so changing the builder afterwards never affects a query
    that is already running.
    """

    def __init__(self, fs: FileSystem | None = None, concurrency: int = DEFAULT_CONCURRENCY) -> None:
        if isinstance(concurrency, bool) or not isinstance(concurrency, int) or concurrency < 1:
            raise ConfigurationError(f"Concurrency must be a positive integer, got {concurrency!r}")
        self._fs = fs or LocalFileSystem()
        self._paths = PathSet(self._fs.resolve_absolute)
        self._pipeline = FilterPipeline()
        self._max_depth: int | None = None
        self._hidden_policy = HiddenPolicy.OFF
        self._want_directories = False
        self._concurrency = concurrency
        self._running: set[asyncio.Task[list[str]]] = set()

    @classmethod
    def create(cls, fs: FileSystem | None = None) -> FileHound:
        """Return a new query using the configured concurrency ceiling."""
        return cls(fs, concurrency=Settings.instance().concurrency())

    # ── search roots ─────────────────────────────────────────────────────

    def paths(self, *directories: str | os.PathLike[str]) -> FileHound:
        """Add directories to search; nested ones are folded into their parents."""
        self._paths.add(*directories)
        return self

    def path(self, directory: str | os.PathLike[str]) -> FileHound:
        return self.paths(directory)

    def get_search_paths(self) -> list[str]:
        """Return a copy of the normalized search roots."""
        return self._paths.get()

    def depth(self, max_depth: int) -> FileHound:
        """Limit recursion; 0 means only entries directly inside each root."""
        if isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 0:
            raise ConfigurationError(f"Depth must be a non-negative integer, got {max_depth!r}")
        self._max_depth = max_depth
        return self

    # ── pattern filters ──────────────────────────────────────────────────

    def match(self, *patterns: str) -> FileHound:
        """Keep entries whose name matches any of the shell glob *patterns*."""
        compiled = [_compile(fnmatch.translate(p), p, "glob") for p in _require_strings(patterns, "glob")]
        self._pipeline.add_pattern(
            lambda subject: any(regex.match(subject) for regex in compiled),
            f"match {', '.join(patterns)}",
        )
        return self

    glob = match

    def discard(self, *patterns: str) -> FileHound:
        """Drop entries whose name contains a match for any regex in *patterns*.

        Directories that match are pruned: their contents are never read.
        """
        compiled = [_compile(p, p, "regular expression") for p in _require_strings(patterns, "regular expression")]
        self._pipeline.add_pattern(
            lambda subject: not any(regex.search(subject) for regex in compiled),
            f"discard {', '.join(patterns)}",
            prunes=True,
        )
        return self

    def use_full_path(self) -> FileHound:
        """Apply match/glob/discard to the absolute path, not just the name."""
        self._pipeline.set_full_path(True)
        return self

    def not_(self) -> FileHound:
        """Invert the match/glob/discard filters.

        Attribute and custom filters are unaffected. Calling it again keeps
        the query negated; it does not toggle.
        """
        self._pipeline.set_negate_pattern(True)
        return self

    negate = not_

    # ── attribute filters ────────────────────────────────────────────────

    def ext(self, *extensions: str) -> FileHound:
        """Keep files ending in any of *extensions* (leading dot optional, case-sensitive)."""
        suffixes = tuple("." + e.lstrip(".") for e in _require_strings(extensions, "extension"))
        self._pipeline.add_attribute(
            lambda d: d.name.endswith(suffixes),
            f"ext {', '.join(suffixes)}",
            needs_stat=False,
        )
        return self

    def size(self, criterion: int | str) -> FileHound:
        """Filter by size, e.g. ``20``, ``"==20"``, ``">1k"``, ``"<=2mb"``.

        Repeated calls are ANDed, which gives ranges.
        """
        expression = SizeExpression.parse(criterion)
        self._pipeline.add_attribute(lambda d: expression(d.size_bytes), f"size {expression}")
        return self

    def is_empty(self) -> FileHound:
        return self.size(0)

    def modified(self, criterion: int | str) -> FileHound:
        """Filter by modification age, e.g. ``"<10 days"`` or ``">2 hours"``."""
        expression = AgeExpression.parse(criterion)
        self._pipeline.add_attribute(lambda d: expression(d.stat.modified), f"modified {criterion}")
        return self

    def accessed(self, criterion: int | str) -> FileHound:
        expression = AgeExpression.parse(criterion)
        self._pipeline.add_attribute(lambda d: expression(d.stat.accessed), f"accessed {criterion}")
        return self

    def changed(self, criterion: int | str) -> FileHound:
        expression = AgeExpression.parse(criterion)
        self._pipeline.add_attribute(lambda d: expression(d.stat.changed), f"changed {criterion}")
        return self

    def ignore_hidden_files(self, include_hidden_dirs: bool = False) -> FileHound:
        """Skip dotfiles; with *include_hidden_dirs* also skip dot-directories entirely."""
        self._hidden_policy = (
            HiddenPolicy.FILES_AND_DIRECTORIES if include_hidden_dirs else HiddenPolicy.FILES_ONLY
        )
        return self

    def directory(self) -> FileHound:
        """Return directories instead of files."""
        self._want_directories = True
        return self

    # ── custom filters ───────────────────────────────────────────────────

    def add_filter(self, predicate: CustomPredicate) -> FileHound:
        """Add a predicate receiving each candidate ``FileDescriptor``.

        The descriptor's ``stat`` is filled in. The predicate may be a
        coroutine function; it runs on the event loop, so blocking work
        belongs in ``asyncio.to_thread``.
        """
        if not callable(predicate):
            raise ConfigurationError(f"Filter must be callable, got {predicate!r}")
        self._pipeline.add_custom(predicate, getattr(predicate, "__name__", ""))
        return self

    # ── execution ────────────────────────────────────────────────────────

    def find(
        self,
        callback: FindCallback | None = None,
        *,
        on_match: MatchCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> Awaitable[list[str]]:
        """Start the query and return an awaitable of matching absolute paths.

        The configuration is captured now, not when the result is awaited.
        Inside a running event loop the query is scheduled immediately as a
        task, so a *callback* fires even if the result is never awaited.
        Without a loop the returned coroutine starts once it is run, e.g.
        by ``asyncio.run``.

        Args:
            callback: Called as ``callback(None, paths)`` on success or
                ``callback(error, None)`` on failure. The awaitable resolves
                or raises the same way either way.
            on_match: Called with each accepted path as it is found.
            on_error: Called with an ``EntryIOError`` for each entry skipped
                because it could not be read.
        """
        execution = self._execute(self._snapshot(), callback, on_match, on_error)
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return execution

        task = asyncio.ensure_future(execution)
        self._running.add(task)
        task.add_done_callback(self._running.discard)
        if callback is not None:
            # The callback already received any failure.
            task.add_done_callback(_consume_exception)
        return task

    def find_sync(
        self,
        callback: FindCallback | None = None,
        *,
        on_match: MatchCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> list[str]:
        """Blocking ``find`` for callers without an event loop."""
        return asyncio.run(self._execute(self._snapshot(), callback, on_match, on_error))

    @staticmethod
    async def any(*pending: Awaitable[list[str]]) -> list[str]:
        """Merge several pending ``find`` results into one sorted, deduplicated list.

        Every query runs to completion; if any failed, the first failure in
        argument order is raised.
        """
        outcomes = await asyncio.gather(*pending, return_exceptions=True)
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome

        merged: set[str] = set()
        for paths in outcomes:
            merged.update(paths)
        return sorted(merged)

    def _snapshot(self) -> QueryConfig:
        roots = tuple(self._paths.get()) or (self._fs.resolve_absolute(os.curdir),)
        return QueryConfig(
            roots=roots,
            pipeline=self._pipeline.copy(),
            max_depth=self._max_depth,
            hidden_policy=self._hidden_policy,
            want_directories=self._want_directories,
            concurrency=self._concurrency,
        )

    async def _execute(
        self,
        config: QueryConfig,
        callback: FindCallback | None,
        on_match: MatchCallback | None,
        on_error: ErrorCallback | None,
    ) -> list[str]:
        try:
            results = await self._run(config, on_match, on_error)
        except Exception as exc:
            if callback is not None:
                callback(exc, None)
            raise
        if callback is not None:
            callback(None, results)
        return results

    async def _run(
        self,
        config: QueryConfig,
        on_match: MatchCallback | None,
        on_error: ErrorCallback | None,
    ) -> list[str]:
        log.debug(
            "Searching %s (depth=%s, hidden=%s, %d filters)",
            ", ".join(config.roots),
            config.max_depth,
            config.hidden_policy.value,
            len(config.pipeline),
        )
        walker = Walker(
            self._fs,
            max_depth=config.max_depth,
            hidden_policy=config.hidden_policy,
            should_prune=config.pipeline.should_prune,
            include_directories=config.want_directories,
            semaphore=asyncio.Semaphore(config.concurrency),
            on_error=on_error,
        )

        outcomes = await asyncio.gather(
            *(self._search_root(walker, root, config.pipeline, on_match) for root in config.roots),
            return_exceptions=True,
        )
        failures = [o for o in outcomes if isinstance(o, BaseException)]
        if failures:
            for extra in failures[1:]:
                log.debug("Additional search failure: %s", extra)
            raise failures[0]

        results = [path for paths in outcomes for path in paths]
        log.info("Found %d matching paths in %d search paths", len(results), len(config.roots))
        return results

    async def _search_root(
        self,
        walker: Walker,
        root: str,
        pipeline: FilterPipeline,
        on_match: MatchCallback | None,
    ) -> list[str]:
        accepted: list[str] = []
        async for descriptor in walker.walk(root):
            if not await self._accepts(walker, pipeline, descriptor):
                continue
            path = str(descriptor.path)
            accepted.append(path)
            if on_match is not None:
                on_match(path)
        return accepted

    @staticmethod
    async def _accepts(walker: Walker, pipeline: FilterPipeline, descriptor: FileDescriptor) -> bool:
        if not pipeline.match_pattern(descriptor):
            return False
        if pipeline.needs_stat:
            described = await walker.stat(descriptor)
            if described is None:
                return False
            descriptor = described
        return pipeline.match_attributes(descriptor) and await pipeline.match_custom(descriptor)


def _consume_exception(task: asyncio.Task[list[str]]) -> None:
    if not task.cancelled():
        task.exception()


def _require_strings(values: tuple[str, ...], kind: str) -> tuple[str, ...]:
    if not values:
        raise ConfigurationError(f"At least one {kind} is required")
    for value in values:
        if not isinstance(value, str) or not value:
            raise ConfigurationError(f"Invalid {kind}: {value!r}")
    return values


def _compile(source: str, original: str, kind: str) -> re.Pattern[str]:
    try:
        return re.compile(source)
    except re.error as exc:
        raise ConfigurationError(f"Invalid {kind} {original!r}: {exc}") from exc
