"""Uniform (key, value, owner) extraction for every value kind.

Usage:
    entries([10, 20, 30])          # [Entry(0, 10, ...), Entry(1, 20, ...), Entry(2, 30, ...)]
    entries({"a": 1, "b": 2})      # [Entry("a", 1, ...), Entry("b", 2, ...)]
    entries(Position(x=1, y=None)) # [Entry("x", 1, ...)]

    for key, value, owner in entries(anything):
        ...
"""

from __future__ import annotations

import datetime as dt
import logging
import re
import traceback
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from graphclone.core.cycles import detect_cycles
from graphclone.core.entries.models import Entry, Introspectable, is_transient
from graphclone.core.entries.scanner import scan_private_state
from graphclone.core.kinds import Kind, classify, qualified_name
from graphclone.core.options.models import MAX_STACK_SIZE
from graphclone.core.types import Key, is_missing

logger = logging.getLogger(__name__)

type EntryVisitor = Callable[[Entry, tuple[Key, ...]], Any]
"""Called as (entry, path); a truthy return stops the walk."""

_PATTERN_FLAGS = {
    "ignorecase": re.IGNORECASE,
    "multiline": re.MULTILINE,
    "dotall": re.DOTALL,
    "verbose": re.VERBOSE,
    "ascii": re.ASCII,
}


def _date_pairs(value: dt.date | dt.time | dt.timedelta) -> list[tuple[str, Any]]:
    if isinstance(value, dt.timedelta):
        return [
            ("string", str(value)),
            ("days", value.days),
            ("seconds", value.seconds),
            ("microseconds", value.microseconds),
            ("total_seconds", value.total_seconds()),
        ]

    pairs: list[tuple[str, Any]] = [("string", str(value)), ("isoformat", value.isoformat())]
    if isinstance(value, dt.datetime):
        try:
            pairs.append(("timestamp", value.timestamp()))
        except (OverflowError, OSError, ValueError):
            logger.debug("No timestamp for %r", value)
    if isinstance(value, dt.date):
        pairs += [
            ("year", value.year),
            ("month", value.month),
            ("day", value.day),
            ("weekday", value.weekday()),
        ]
    if isinstance(value, dt.datetime | dt.time):
        pairs += [
            ("hour", value.hour),
            ("minute", value.minute),
            ("second", value.second),
            ("microsecond", value.microsecond),
            ("tzname", value.tzname()),
        ]
    return pairs


def _pattern_pairs(value: re.Pattern[Any]) -> list[tuple[str, Any]]:
    pairs: list[tuple[str, Any]] = [
        ("pattern", value.pattern),
        ("flags", value.flags),
        ("groups", value.groups),
        ("groupindex", dict(value.groupindex)),
    ]
    pairs += [(name, bool(value.flags & flag)) for name, flag in _PATTERN_FLAGS.items()]
    return pairs


def _error_pairs(value: BaseException) -> list[tuple[str, Any]]:
    stack = (
        "".join(traceback.format_exception(value)) if value.__traceback__ is not None else None
    )
    return [
        ("type", qualified_name(value)),
        ("message", str(value)),
        ("args", value.args),
        ("cause", value.__cause__),
        ("context", None if value.__suppress_context__ else value.__context__),
        ("notes", getattr(value, "__notes__", None)),
        ("traceback", stack),
    ]


def _raw_entries(value: Any, kind: Kind) -> list[tuple[Any, Any]]:
    """Produce unfiltered (key, value) pairs for one value, by kind."""
    match kind:
        case Kind.SEQUENCE:
            return list(enumerate(value))
        case Kind.MAPPING:
            return [(str(key), item) for key, item in list(value.items())]
        case Kind.SET:
            return list(enumerate(list(value)))
        case Kind.RECORD:
            return list(vars(value).items())
        case Kind.INSTANCE:
            scanned = [entry[:2] for entry in scan_private_state(value)]
            if isinstance(value, Introspectable):
                return scanned
            return list(getattr(value, "__dict__", {}).items()) + scanned
        case Kind.ERROR:
            return list(vars(value).items()) + _error_pairs(value)
        case Kind.DATE:
            return _date_pairs(value)
        case Kind.PATTERN:
            return _pattern_pairs(value)
        case _:
            return []


def entries(
    value: Any,
    *,
    include_class_names: bool = False,
    transient_properties: Iterable[str] = (),
) -> list[Entry]:
    """Extract an ordered list of entries from any value.

    Sequences and sets yield positional indices, mappings yield the str() form
    of their keys, records and instances yield attribute names. Mapping keys
    whose str() forms collide (1 and "1") keep only the first pair.
    Class instances add slot and property values found by the scanner, and
    datetimes, patterns and exceptions add fixed synthetic entries.

    Args:
        value: Any value; scalars, callables and opaque objects yield [].
        include_class_names: Prepend a ("class", qualified name) entry for
            instances, exceptions, datetimes and patterns.
        transient_properties: Extra names to leave out.

    Returns:
        Entries with unique keys (first occurrence wins). Entries whose value
        is None or UNDEFINED, dunder names and transient names are omitted.
    """
    kind = classify(value)
    try:
        pairs = _raw_entries(value, kind)
    except Exception:
        logger.debug("Entry extraction failed for %s", qualified_name(value), exc_info=True)
        pairs = []

    if include_class_names and kind in (Kind.INSTANCE, Kind.ERROR, Kind.DATE, Kind.PATTERN):
        pairs.insert(0, ("class", qualified_name(value)))

    extra = frozenset(transient_properties)
    seen: set[Any] = set()
    result: list[Entry] = []
    for key, item in pairs:
        if key in seen or is_missing(item) or is_transient(key, extra):
            continue
        seen.add(key)
        result.append(Entry(key, item, value))
    return result


def object_keys(value: Any) -> list[Key]:
    """Return the keys of `entries(value)`."""
    return [entry.key for entry in entries(value)]


def object_values(value: Any) -> list[Any]:
    """Return the values of `entries(value)`, de-duplicated by identity."""
    seen: set[int] = set()
    result: list[Any] = []
    for entry in entries(value):
        if id(entry.value) not in seen:
            seen.add(id(entry.value))
            result.append(entry.value)
    return result


def entries_to_dict(items: Iterable[Entry | tuple[Any, Any]] | Mapping[Any, Any]) -> dict[Any, Any]:
    """Fold entries (or plain key/value pairs) into a dict.

    Args:
        items: Entries, 2-tuples, or a mapping (returned as a plain dict).

    Returns:
        Dict keyed by entry key; nested Entry values are folded too.
        Pairs with a missing key or value are skipped.
    """
    if isinstance(items, Mapping):
        return dict(items)

    result: dict[Any, Any] = {}
    for item in items:
        entry = item if isinstance(item, Entry) else Entry(*item[:2])
        if entry.key is None or entry.is_empty():
            continue
        result.update(entry.fold())
    return result


def iterate_entries(value: Any, visitor: EntryVisitor, *, recursive: bool = False) -> bool:
    """Visit the entries of a value depth-first.

    Args:
        value: Root value.
        visitor: Called as visitor(entry, path) for every entry; a truthy
            return stops the whole walk.
        recursive: Descend into entry values that have entries of their own.
            Descent stops at values already on the current branch, when
            `detect_cycles` fires on the path, or at MAX_STACK_SIZE levels.

    Returns:
        True if the visitor stopped the walk, False if it ran to completion.
    """
    return _walk(value, visitor, recursive, (), frozenset({id(value)}))


def _walk(
    value: Any,
    visitor: EntryVisitor,
    recursive: bool,
    path: tuple[Key, ...],
    ancestors: frozenset[int],
) -> bool:
    for entry in entries(value):
        entry_path = (*path, entry.key)
        if visitor(entry, entry_path):
            return True

        child = entry.value
        if not recursive or not classify(child).is_container:
            continue
        if id(child) in ancestors or len(entry_path) >= MAX_STACK_SIZE:
            continue
        if detect_cycles(entry_path):
            continue
        if _walk(child, visitor, recursive, entry_path, ancestors | {id(child)}):
            return True
    return False
