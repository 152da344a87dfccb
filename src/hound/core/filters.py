"""Filter pipeline: tagged predicate groups with pattern-scoped negation."""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Union

from hound.models.descriptor import FileDescriptor

log = logging.getLogger(__name__)

NamePredicate = Callable[[str], bool]
Predicate = Callable[[FileDescriptor], bool]
CustomPredicate = Callable[[FileDescriptor], Union[bool, Awaitable[bool]]]


class FilterGroup(Enum):
    """Which group a filter belongs to.

    PATTERN filters come from match/glob/discard and are the only ones the
    negation flag touches. ATTRIBUTE filters look at metadata (extension,
    size, age). CUSTOM filters are user code and always run last.
    """

    PATTERN = "pattern"
    ATTRIBUTE = "attribute"
    CUSTOM = "custom"


@dataclass(frozen=True)
class Filter:
    """A predicate tagged with its group.

    Pattern predicates receive the entry's basename (or its full path, see
    ``FilterPipeline.set_full_path``); the others receive the descriptor.
    """

    group: FilterGroup
    predicate: Callable[[Any], Any]
    description: str = ""
    prunes: bool = False
    needs_stat: bool = True


class FilterPipeline:
    """Ordered filter groups evaluated as one decision.

    Acceptance is ``pattern AND attribute AND custom``; each group is the
    AND of its filters and stops at the first rejection. When negated only
    the pattern group's outcome is inverted, so ``size()`` and friends keep
    filtering normally under ``not_()``.
    """

    def __init__(self) -> None:
        self._filters: dict[FilterGroup, list[Filter]] = {group: [] for group in FilterGroup}
        self._negate_pattern = False
        self._full_path = False

    def add_pattern(self, predicate: NamePredicate, description: str = "", *, prunes: bool = False) -> None:
        """Add a pattern filter; *prunes* marks it as a directory pruner."""
        self._register(Filter(FilterGroup.PATTERN, predicate, description, prunes=prunes, needs_stat=False))

    def add_attribute(self, predicate: Predicate, description: str = "", *, needs_stat: bool = True) -> None:
        self._register(Filter(FilterGroup.ATTRIBUTE, predicate, description, needs_stat=needs_stat))

    def add_custom(self, predicate: CustomPredicate, description: str = "") -> None:
        self._register(Filter(FilterGroup.CUSTOM, predicate, description))

    def set_negate_pattern(self, negate: bool) -> None:
        self._negate_pattern = negate

    def set_full_path(self, full_path: bool) -> None:
        """Match pattern filters against absolute paths instead of basenames."""
        self._full_path = full_path

    @property
    def negated(self) -> bool:
        return self._negate_pattern

    @property
    def needs_stat(self) -> bool:
        """Whether any filter may read ``descriptor.stat``."""
        return any(f.needs_stat for f in self._filters[FilterGroup.ATTRIBUTE]) or bool(
            self._filters[FilterGroup.CUSTOM]
        )

    def filters(self, group: FilterGroup) -> list[Filter]:
        return list(self._filters[group])

    def copy(self) -> FilterPipeline:
        """Independent pipeline with the same filters and flags."""
        clone = FilterPipeline()
        for group, filters in self._filters.items():
            clone._filters[group] = list(filters)
        clone._negate_pattern = self._negate_pattern
        clone._full_path = self._full_path
        return clone

    def match_pattern(self, descriptor: FileDescriptor) -> bool:
        subject = self._subject(descriptor)
        matched = all(f.predicate(subject) for f in self._filters[FilterGroup.PATTERN])
        return not matched if self._negate_pattern else matched

    def should_prune(self, directory: FileDescriptor) -> bool:
        """True when a discard filter rejects *directory*.

        Negated queries never prune: they ask for exactly what the discard
        filters would have hidden.
        """
        if self._negate_pattern:
            return False
        subject = self._subject(directory)
        for f in self._filters[FilterGroup.PATTERN]:
            if f.prunes and not f.predicate(subject):
                log.debug("Pruning %s (%s)", directory.path, f.description)
                return True
        return False

    def match_attributes(self, descriptor: FileDescriptor) -> bool:
        return all(f.predicate(descriptor) for f in self._filters[FilterGroup.ATTRIBUTE])

    async def match_custom(self, descriptor: FileDescriptor) -> bool:
        for f in self._filters[FilterGroup.CUSTOM]:
            result = f.predicate(descriptor)
            if inspect.isawaitable(result):
                result = await result
            if not result:
                return False
        return True

    async def evaluate(self, descriptor: FileDescriptor) -> bool:
        return (
            self.match_pattern(descriptor)
            and self.match_attributes(descriptor)
            and await self.match_custom(descriptor)
        )

    def _subject(self, descriptor: FileDescriptor) -> str:
        return str(descriptor.path) if self._full_path else descriptor.name

    def _register(self, f: Filter) -> None:
        self._filters[f.group].append(f)
        log.debug("Registered %s filter: %s", f.group.value, f.description or f.predicate)

    def __len__(self) -> int:
        return sum(len(filters) for filters in self._filters.values())
