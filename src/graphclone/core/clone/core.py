"""Public copy operations.

Usage:
    from graphclone import copy, immutable_copy, deep_freeze

    snapshot = copy(state)                       # mutable deep copy
    shallow = copy(state, depth=0)               # new root, children shared
    frozen = immutable_copy(state, max_depth=3)  # frozen down to 3 levels
    config = deep_freeze({"a": [1, 2]})          # FrozenDict({'a': FrozenList([1, 2])})
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from graphclone.core.clone.engine import CopyEngine
from graphclone.core.options import CopyOptions, resolve_copy_options
from graphclone.core.types import Frozen

type OptionsInput = CopyOptions | Mapping[str, Any] | None


def copy[T](value: T, options: OptionsInput = None, /, **overrides: Any) -> T:
    """Deep-copy a value graph, optionally freezing the result.

    Never raises for data-shape reasons: each node is copied once, so cycles
    close on the copy, unreadable state is skipped, and values that cannot be
    copied are shared (or replaced by their text when freezing).

    Args:
        value: Root of the graph to copy.
        options: CopyOptions or a mapping of option names.
        **overrides: Individual options (`depth`, `freeze`, ...) taking
            precedence over `options`.

    Returns:
        A copy in the same shape family as `value`.
    """
    return CopyEngine(resolve_copy_options(options, **overrides)).copy(value)


def local_copy[T](value: T, options: OptionsInput = None, /, **overrides: Any) -> T:
    """Alias of `copy`."""
    return copy(value, options, **overrides)


def immutable_copy[T](value: T, options: OptionsInput = None, /, **overrides: Any) -> Frozen[T]:
    """Deep-copy a value graph and freeze every copied value.

    Same arguments as `copy`; `freeze` is always on.
    """
    resolved = resolve_copy_options(options, **overrides).evolve(freeze=True)
    return CopyEngine(resolved).copy(value)


def deep_freeze[T](value: T) -> Frozen[T]:
    """Return a fully frozen copy of a value using the default options."""
    return immutable_copy(value)
