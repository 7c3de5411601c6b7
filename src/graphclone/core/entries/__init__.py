"""Entry extraction: models, protocols, private-state scanner and operations."""

from graphclone.core.entries.core import (
    EntryVisitor,
    entries,
    entries_to_dict,
    iterate_entries,
    object_keys,
    object_values,
)
from graphclone.core.entries.models import (
    MAX_CLASS_LEVELS,
    TRANSIENT_PROPERTIES,
    Entry,
    Introspectable,
    Reconstructible,
    is_transient,
)
from graphclone.core.entries.scanner import (
    property_entries,
    scan_private_state,
    slot_entries,
    state_entries,
)

__all__ = [
    # Models
    "Entry",
    "Introspectable",
    "Reconstructible",
    "MAX_CLASS_LEVELS",
    "TRANSIENT_PROPERTIES",
    "is_transient",
    # Scanner
    "scan_private_state",
    "slot_entries",
    "property_entries",
    "state_entries",
    # Core
    "EntryVisitor",
    "entries",
    "entries_to_dict",
    "iterate_entries",
    "object_keys",
    "object_values",
]
