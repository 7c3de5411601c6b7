"""Core type definitions for graphclone."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Final

type Frozen[T] = T
"""Type alias indicating a value is an immutable snapshot.

When you see `Frozen[T]` in a return type, the returned value and everything
reachable from it refuse mutation. Use `copy()` to get a mutable copy back.
"""

type Key = str | int
"""Key of an extracted entry: attribute/mapping name or positional index."""

Record = SimpleNamespace
"""Plain attribute record. Class instances that cannot be rebuilt are copied into one."""


class _Undefined:
    """Sentinel for an absent value, distinct from None.

    Copies, pickles and comparisons all resolve to the single instance.
    """

    __slots__ = ()

    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "UNDEFINED"

    def __copy__(self) -> _Undefined:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> _Undefined:
        return self


UNDEFINED: Final = _Undefined()


def is_missing(value: Any) -> bool:
    """Check if a value is None or UNDEFINED.

    Args:
        value: Value to check.

    Returns:
        True if value carries no data, False otherwise.
    """
    return value is None or value is UNDEFINED
