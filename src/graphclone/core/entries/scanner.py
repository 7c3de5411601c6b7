"""Best-effort recovery of instance state that is not in `__dict__`.

Types that implement `Introspectable` are trusted completely: their
`__entries__()` is the only source of state. For every other instance the
scanner reflects over at most MAX_CLASS_LEVELS classes of the MRO and reads:

- `__slots__` members (private `__x` slots appear under their mangled name)
- read-only `property` getters

Each read is attempted on its own; an accessor that raises is logged and only
that entry is dropped. Names assigned programmatically (setattr with computed
names, `__getattr__` fallbacks) are not discoverable.
"""

from __future__ import annotations

import logging
import types
from collections.abc import Iterable, Iterator
from typing import Any

from graphclone.core.entries.models import MAX_CLASS_LEVELS, Entry, Introspectable, is_transient
from graphclone.core.types import UNDEFINED

logger = logging.getLogger(__name__)


def _class_chain(value: Any) -> Iterator[type]:
    """Yield the scannable classes of value's MRO, most derived first."""
    for cls in type(value).__mro__[:MAX_CLASS_LEVELS]:
        module = cls.__module__ or ""
        if module == "builtins" or module.startswith("pydantic"):
            return
        yield cls


def _read(value: Any, name: str) -> Any:
    """Read an attribute, returning UNDEFINED when the read fails."""
    try:
        return getattr(value, name)
    except Exception as exc:
        logger.debug(
            "Skipping %s.%s: read raised %s", type(value).__qualname__, name, type(exc).__name__
        )
        return UNDEFINED


def introspected_entries(value: Introspectable) -> list[Entry]:
    """Collect the (name, value) pairs a type exposes through `__entries__`.

    Args:
        value: Instance implementing Introspectable.

    Returns:
        Entries in declaration order, de-duplicated by name (first wins).
        Malformed pairs are skipped; a raising `__entries__` yields [].
    """
    try:
        pairs = list(value.__entries__())
    except Exception:
        logger.debug("%s.__entries__ raised", type(value).__qualname__, exc_info=True)
        return []

    result: list[Entry] = []
    seen: set[Any] = set()
    for pair in pairs:
        if not isinstance(pair, tuple) or len(pair) != 2:
            continue
        name, item = pair
        if name in seen:
            continue
        seen.add(name)
        result.append(Entry(name, item, value))
    return result


def slot_entries(value: Any) -> list[Entry]:
    """Read every populated `__slots__` member of an instance.

    Args:
        value: Any instance.

    Returns:
        Slot entries in MRO order; unset slots are omitted.
    """
    result: list[Entry] = []
    seen: set[str] = set()
    for cls in _class_chain(value):
        for name, attribute in vars(cls).items():
            if name in seen or not isinstance(attribute, types.MemberDescriptorType):
                continue
            seen.add(name)
            try:
                item = attribute.__get__(value, type(value))
            except AttributeError:
                continue
            result.append(Entry(name, item, value))
    return result


def property_entries(value: Any) -> list[Entry]:
    """Read every `property` getter visible on an instance.

    A name defined on a more derived class shadows the same name further up
    the MRO, so an overridden property is read once through its override.

    Args:
        value: Any instance.

    Returns:
        Property entries in MRO order; failed reads are omitted.
    """
    result: list[Entry] = []
    shadowed: set[str] = set()
    for cls in _class_chain(value):
        for name, attribute in vars(cls).items():
            if name in shadowed:
                continue
            shadowed.add(name)
            if not isinstance(attribute, property) or attribute.fget is None:
                continue
            item = _read(value, name)
            if item is not UNDEFINED:
                result.append(Entry(name, item, value))
    return result


def scan_private_state(value: Any) -> list[Entry]:
    """Return best-effort entries for state not exposed in `__dict__`.

    Args:
        value: A class instance.

    Returns:
        `__entries__()` pairs for Introspectable types, otherwise slot values
        followed by property values, de-duplicated by name (first wins).
    """
    if isinstance(value, Introspectable):
        return introspected_entries(value)
    return _unique([*slot_entries(value), *property_entries(value)])


def state_entries(value: Any, transient: Iterable[str] = ()) -> list[Entry]:
    """Return the restorable state of an instance or record.

    Unlike `entries()`, None values are kept because they are part of the
    state a rebuilt instance needs. Derived values (properties) are excluded.

    Args:
        value: A class instance, record or exception.
        transient: Extra names to leave out.

    Returns:
        `__entries__()` pairs for Introspectable types, otherwise `__dict__`
        attributes followed by slot values.
    """
    if isinstance(value, Introspectable):
        collected = introspected_entries(value)
    else:
        own = getattr(value, "__dict__", None)
        attributes = [Entry(name, item, value) for name, item in own.items()] if own else []
        collected = [*attributes, *slot_entries(value)]

    extra = frozenset(transient)
    return [
        entry
        for entry in _unique(collected)
        if entry.value is not UNDEFINED and not is_transient(entry.key, extra)
    ]


def _unique(items: Iterable[Entry]) -> list[Entry]:
    seen: set[Any] = set()
    result: list[Entry] = []
    for entry in items:
        if entry.key in seen:
            continue
        seen.add(entry.key)
        result.append(entry)
    return result
