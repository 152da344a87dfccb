"""Comparison expressions for size and age criteria.

Both grammars share an optional comparison operator prefix
(``==``, ``>``, ``<``, ``>=``, ``<=``, defaulting to ``==``) followed by an
integer and an optional unit:

    SizeExpression.parse(20)           # exactly 20 bytes
    SizeExpression.parse(">=1k")       # at least 1024 bytes
    AgeExpression.parse("<10 days")    # touched within the last ten days
"""

from __future__ import annotations

import operator
import re
import time
from dataclasses import dataclass
from typing import Callable

from hound.errors import ConfigurationError

_OPERATORS: dict[str, Callable[[float, float], bool]] = {
    "==": operator.eq,
    ">": operator.gt,
    "<": operator.lt,
    ">=": operator.ge,
    "<=": operator.le,
}

_EXPR_RE = re.compile(r"^(==|>=|<=|>|<)?\s*(\d+)\s*([a-z]*)$", re.IGNORECASE)

_SIZE_UNITS = {
    "": 1,
    "b": 1,
    "k": 1024,
    "kb": 1024,
    "m": 1024**2,
    "mb": 1024**2,
    "g": 1024**3,
    "gb": 1024**3,
    "t": 1024**4,
    "tb": 1024**4,
}

_AGE_UNITS = {
    "": 86400,
    "minute": 60,
    "minutes": 60,
    "hour": 3600,
    "hours": 3600,
    "day": 86400,
    "days": 86400,
    "week": 7 * 86400,
    "weeks": 7 * 86400,
}


@dataclass(frozen=True)
class SizeExpression:
    """Compares a byte count against a fixed operand."""

    op: str
    operand: int

    @classmethod
    def parse(cls, criterion: int | str) -> SizeExpression:
        if isinstance(criterion, bool):
            raise ConfigurationError(f"Invalid size criterion: {criterion!r}")
        if isinstance(criterion, int):
            if criterion < 0:
                raise ConfigurationError(f"Size must not be negative: {criterion}")
            return cls("==", criterion)
        if not isinstance(criterion, str):
            raise ConfigurationError(f"Invalid size criterion: {criterion!r}")

        match = _EXPR_RE.match(criterion.strip())
        if match is None:
            raise ConfigurationError(f"Invalid size criterion: {criterion!r}")
        op, number, unit = match.groups()
        multiplier = _SIZE_UNITS.get(unit.lower())
        if multiplier is None:
            raise ConfigurationError(f"Unknown size unit {unit!r} in {criterion!r}")
        return cls(op or "==", int(number) * multiplier)

    def __call__(self, actual_bytes: int) -> bool:
        return _OPERATORS[self.op](actual_bytes, self.operand)

    def __str__(self) -> str:
        return f"{self.op}{self.operand}"


@dataclass(frozen=True)
class AgeExpression:
    """Compares how long ago a timestamp was against a fixed operand.

    ``<`` means "more recent than", ``>`` means "older than". ``==`` compares
    whole elapsed units, so ``==0 days`` is anything from the last 24 hours.
    """

    op: str
    operand: int
    unit_seconds: int

    @classmethod
    def parse(cls, criterion: int | str) -> AgeExpression:
        if isinstance(criterion, bool):
            raise ConfigurationError(f"Invalid time criterion: {criterion!r}")
        if isinstance(criterion, int):
            if criterion < 0:
                raise ConfigurationError(f"Age must not be negative: {criterion}")
            return cls("==", criterion, _AGE_UNITS[""])
        if not isinstance(criterion, str):
            raise ConfigurationError(f"Invalid time criterion: {criterion!r}")

        match = _EXPR_RE.match(criterion.strip())
        if match is None:
            raise ConfigurationError(f"Invalid time criterion: {criterion!r}")
        op, number, unit = match.groups()
        seconds = _AGE_UNITS.get(unit.lower())
        if seconds is None:
            raise ConfigurationError(f"Unknown time unit {unit!r} in {criterion!r}")
        return cls(op or "==", int(number), seconds)

    def __call__(self, timestamp: float, now: float | None = None) -> bool:
        now = time.time() if now is None else now
        age = max(now - timestamp, 0.0) / self.unit_seconds
        if self.op == "==":
            return int(age) == self.operand
        return _OPERATORS[self.op](age, self.operand)
