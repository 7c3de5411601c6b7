"""graphclone: deep copy and deep freeze for arbitrary Python object graphs.

Usage:
    from dataclasses import dataclass
    from graphclone import copy, deep_freeze, entries

    @dataclass
    class Node:
        name: str
        parent: "Node | None" = None

    root = Node("root")
    root.parent = root                   # self-reference

    clone = copy(root)                   # clone.parent is clone
    frozen = deep_freeze({"a": [1, 2]})  # FrozenDict({'a': FrozenList([1, 2])})
    frozen["a"].append(3)                # FrozenValueError

    entries({"a": 1, "b": None})         # [Entry(key='a', value=1, owner=...)]
"""

__version__ = "0.1.0"

# Core primitives
from graphclone.core import (
    DEFAULT_COPY_OPTIONS,
    IMMUTABLE_COPY_OPTIONS,
    MAX_STACK_SIZE,
    UNDEFINED,
    CopyOptions,
    Entry,
    ErrorSnapshot,
    Frozen,
    FrozenDict,
    FrozenList,
    FrozenRecord,
    FrozenValueError,
    Introspectable,
    Kind,
    Reconstructible,
    Record,
    classify,
    copy,
    deep_freeze,
    detect_cycles,
    entries,
    entries_to_dict,
    immutable_copy,
    is_read_only,
    iterate_entries,
    local_copy,
    lock,
    object_keys,
    object_values,
    resolve_copy_options,
)

# Configuration
from graphclone.config import CopySettings, get_settings

__all__ = [
    # Version
    "__version__",
    # Copy
    "copy",
    "local_copy",
    "immutable_copy",
    "deep_freeze",
    "lock",
    "is_read_only",
    "ErrorSnapshot",
    # Entries
    "entries",
    "object_keys",
    "object_values",
    "entries_to_dict",
    "iterate_entries",
    "Entry",
    "Introspectable",
    "Reconstructible",
    # Cycles
    "detect_cycles",
    # Options
    "CopyOptions",
    "resolve_copy_options",
    "DEFAULT_COPY_OPTIONS",
    "IMMUTABLE_COPY_OPTIONS",
    "MAX_STACK_SIZE",
    # Types
    "Kind",
    "classify",
    "UNDEFINED",
    "Record",
    "Frozen",
    "FrozenList",
    "FrozenDict",
    "FrozenRecord",
    "FrozenValueError",
    # Configuration
    "CopySettings",
    "get_settings",
]
