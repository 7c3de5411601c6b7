"""Core functionalities: stateless copy, freeze and extraction primitives.

Architecture Note:
    core/ contains pure, stateless functionalities. Every call owns its own
    traversal state; the only shared state is the frozen-subclass cache in
    freeze/ and the cached settings in config/.
"""

from graphclone.core.clone import (
    CopyEngine,
    ErrorSnapshot,
    copy,
    deep_freeze,
    immutable_copy,
    local_copy,
)
from graphclone.core.cycles import detect_cycles
from graphclone.core.entries import (
    TRANSIENT_PROPERTIES,
    Entry,
    Introspectable,
    Reconstructible,
    entries,
    entries_to_dict,
    iterate_entries,
    object_keys,
    object_values,
    scan_private_state,
    state_entries,
)
from graphclone.core.freeze import (
    FrozenDict,
    FrozenList,
    FrozenRecord,
    FrozenValueError,
    is_read_only,
    lock,
)
from graphclone.core.kinds import Kind, classify
from graphclone.core.options import (
    DEFAULT_COPY_OPTIONS,
    IMMUTABLE_COPY_OPTIONS,
    MAX_STACK_SIZE,
    CopyOptions,
    resolve_copy_options,
)
from graphclone.core.types import UNDEFINED, Frozen, Key, Record

__all__ = [
    # Types
    "Frozen",
    "Key",
    "Record",
    "UNDEFINED",
    "Kind",
    "classify",
    # Cycles
    "detect_cycles",
    # Entries
    "Entry",
    "Introspectable",
    "Reconstructible",
    "TRANSIENT_PROPERTIES",
    "entries",
    "entries_to_dict",
    "iterate_entries",
    "object_keys",
    "object_values",
    "scan_private_state",
    "state_entries",
    # Options
    "CopyOptions",
    "DEFAULT_COPY_OPTIONS",
    "IMMUTABLE_COPY_OPTIONS",
    "MAX_STACK_SIZE",
    "resolve_copy_options",
    # Freeze
    "FrozenDict",
    "FrozenList",
    "FrozenRecord",
    "FrozenValueError",
    "is_read_only",
    "lock",
    # Clone
    "CopyEngine",
    "ErrorSnapshot",
    "copy",
    "deep_freeze",
    "immutable_copy",
    "local_copy",
]
