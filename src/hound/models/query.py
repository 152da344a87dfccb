"""Query configuration snapshot."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hound.core.filters import FilterPipeline


class HiddenPolicy(Enum):
    """How dotfiles and dot-directories are treated during a walk."""

    OFF = "off"
    FILES_ONLY = "files_only"
    FILES_AND_DIRECTORIES = "files_and_directories"


@dataclass(frozen=True)
class QueryConfig:
    """Everything one ``find`` execution needs, frozen at call time.

    The builder keeps mutating its own state after ``find`` returns; the
    running traversal only ever sees this snapshot.
    """

    roots: tuple[str, ...]
    pipeline: FilterPipeline
    max_depth: int | None = None
    hidden_policy: HiddenPolicy = HiddenPolicy.OFF
    want_directories: bool = False
    concurrency: int = 32
