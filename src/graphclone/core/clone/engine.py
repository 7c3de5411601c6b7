"""Kind-dispatched copy engine.

One CopyEngine copies one value graph. Each handler builds a new container of
the same shape family and recurses into its children. Every source node is
copied at most once: copies are remembered by the identity of their source,
so shared references stay shared and back-references resolve to the copy.
Lists, dicts, records, instances and exceptions are allocated before their
children are copied, which lets a cycle close on the copy itself.

With `freeze` on, those containers are allocated in their frozen form and
everything else goes through `lock()` once built, so every value reachable
from the result is immutable. A frozen copy never shares a mutable source
value: a child that is not copied is replaced by its text.

Descent into the children of a node stops when:
- the depth bound is exhausted (mutable copies only; children are shared)
- `detect_cycles` fires on the key path leading to the node

A node reached again while it is still being built, and which had nothing to
allocate up front (tuples, sets, pydantic models), is built a second time
from its children at that point. A third visit on the same loop is cut.
"""

from __future__ import annotations

import array
import datetime as dt
import logging
import re
import reprlib
from collections import defaultdict, deque
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from types import MappingProxyType, MethodType, SimpleNamespace
from typing import Any
from weakref import WeakKeyDictionary, WeakSet, WeakValueDictionary

from graphclone.core.clone.models import Branch, ErrorSnapshot
from graphclone.core.cycles import detect_cycles
from graphclone.core.entries import Reconstructible, state_entries
from graphclone.core.freeze import FrozenDict, FrozenList, FrozenRecord, frozen_class, lock
from graphclone.core.kinds import Kind, classify, is_pydantic, qualified_name
from graphclone.core.options.models import CopyOptions
from graphclone.core.types import Key, Record

logger = logging.getLogger(__name__)

type Handler = Callable[[Any, Branch], Any]

# A key run of at least this length, repeated this many times, ends a descent
CYCLE_RUN_LENGTH = 5
CYCLE_REPETITIONS = 5

ERROR_LINKS = ("__cause__", "__context__")


def _path_key(key: Any) -> Key:
    return key if isinstance(key, str | int) else str(key)


def _mutable_class(cls: type) -> type:
    """Return the class a frozen subclass was derived from (or cls itself)."""
    if getattr(cls, "__frozen__", False) and "__frozen__" in vars(cls):
        return cls.__mro__[1]
    return cls


def _text_of(value: Any) -> str:
    """Immutable text standing in for a value a frozen copy cannot hold."""
    try:
        return reprlib.repr(value)
    except Exception:
        return f"<{qualified_name(value)}>"


class CopyEngine:
    """Copies value graphs according to one set of resolved options.

    Args:
        options: Resolved options; see `resolve_copy_options`.
    """

    def __init__(self, options: CopyOptions) -> None:
        self.options = options
        self._replacement_options: CopyOptions | None = None
        self._memo: dict[int, Any] = {}
        self._pending: set[int] = set()
        self._rebuilding: set[int] = set()
        # Sources stay referenced until the copy is done so their ids stay unique
        self._keep_alive: list[Any] = []
        self._handlers: dict[Kind, Handler] = {
            Kind.UNDEFINED: self._copy_undefined,
            Kind.NULL: self._copy_null,
            Kind.DATE: self._copy_date,
            Kind.PATTERN: self._copy_pattern,
            Kind.ERROR: self._copy_error,
            Kind.MAPPING: self._copy_mapping,
            Kind.SET: self._copy_set,
            Kind.SEQUENCE: self._copy_sequence,
            Kind.RECORD: self._copy_record,
            Kind.INSTANCE: self._copy_instance,
        }

    def copy(self, value: Any) -> Any:
        """Copy a value graph from its root.

        Args:
            value: Root of the graph.

        Returns:
            The copy (frozen when the options say so).
        """
        try:
            return self.visit(value, Branch(depth=self.options.depth_limit))
        finally:
            self._memo.clear()
            self._pending.clear()
            self._rebuilding.clear()
            self._keep_alive.clear()

    def visit(self, value: Any, branch: Branch) -> Any:
        """Copy one node of the graph.

        Args:
            value: Node to copy.
            branch: Position of the node (path and remaining depth).

        Returns:
            The copied node, or the copy already made of it. A node whose copy
            fails is shared unchanged, or replaced by its text when freezing.
        """
        handler = self._handlers.get(classify(value))
        if handler is None:
            return value
        key = id(value)
        if key in self._memo:
            return self._memo[key]
        if key not in self._pending:
            return self._dispatch(handler, value, branch)
        if key in self._rebuilding:
            logger.debug(
                "Truncating %s at %r: node is its own ancestor", qualified_name(value), branch.path
            )
            return self._cut(value)
        logger.debug(
            "Rebuilding %s at %r: node is still being copied", qualified_name(value), branch.path
        )
        self._rebuilding.add(key)
        try:
            return self._dispatch(handler, value, branch)
        finally:
            self._rebuilding.discard(key)

    def _dispatch(self, handler: Handler, value: Any, branch: Branch) -> Any:
        try:
            return handler(value, branch)
        except Exception:
            logger.debug(
                "Copy of %s at %r failed", qualified_name(value), branch.path, exc_info=True
            )
            return self._cut(value)

    def _cut(self, value: Any) -> Any:
        """Return what stands in for a node that is not copied."""
        return _text_of(value) if self.options.freeze else value

    def _expand(self, value: Any, branch: Branch) -> bool:
        """Decide whether the children of a container are copied too."""
        if branch.depth <= 0 and not self.options.freeze:
            return False
        if detect_cycles(branch.path, CYCLE_RUN_LENGTH, CYCLE_REPETITIONS):
            logger.debug("Truncating %s at %r: repeating path", qualified_name(value), branch.path)
            return False
        return True

    def _finish(self, value: Any) -> Any:
        return lock(value) if self.options.freeze else value

    def _child(self, expand: bool, key: Key, item: Any, branch: Branch) -> Any:
        if expand:
            return self.visit(item, branch.descend(key))
        if id(item) in self._memo:
            return self._memo[id(item)]
        if not self.options.freeze:
            return item
        if classify(item).is_container:
            logger.debug("Replacing %s at %r with its text", qualified_name(item), branch.path)
            return _text_of(item)
        return self.visit(item, branch.descend(key))

    @contextmanager
    def _in_progress(self, value: Any, target: Any, expand: bool) -> Iterator[None]:
        """Register a node while its children are copied.

        An allocated target is remembered at once, so back-references resolve
        to it. A node without one is only marked as pending.
        """
        key = id(value)
        if not expand or key in self._rebuilding:
            yield
            return
        self._keep_alive.append(value)
        if target is not None:
            self._memo[key] = target
            yield
            return
        self._pending.add(key)
        try:
            yield
        finally:
            self._pending.discard(key)

    def _remember(self, value: Any, result: Any, expand: bool) -> Any:
        if expand and id(value) not in self._rebuilding:
            self._memo[id(value)] = result
        return result

    # Replacements

    def _replacement(self, replacement: Any, branch: Branch) -> Any:
        if replacement is None:
            return None
        if self._replacement_options is None:
            self._replacement_options = self.options.evolve(
                null_replacement=None, undefined_replacement=None
            )
        # Each replacement is an independent copy
        return CopyEngine(self._replacement_options).visit(replacement, branch)

    def _copy_undefined(self, value: Any, branch: Branch) -> Any:
        return self._replacement(self.options.undefined_replacement, branch)

    def _copy_null(self, value: Any, branch: Branch) -> Any:
        return self._replacement(self.options.null_replacement, branch)

    # Scalars with structure

    def _copy_date(self, value: dt.date | dt.time | dt.timedelta, branch: Branch) -> Any:
        if isinstance(value, dt.timedelta):
            return type(value)(
                days=value.days, seconds=value.seconds, microseconds=value.microseconds
            )
        return value.replace()

    def _copy_pattern(self, value: re.Pattern[Any], branch: Branch) -> re.Pattern[Any]:
        return re.compile(value.pattern, value.flags)

    # Containers

    def _copy_sequence(self, value: Any, branch: Branch) -> Any:
        expand = self._expand(value, branch)
        target = self._sequence_target(value)
        with self._in_progress(value, target, expand):
            items = [self._child(expand, index, item, branch) for index, item in enumerate(value)]
        if target is None:
            return self._remember(value, self._finish(_rebuild_sequence(value, items)), expand)
        if isinstance(target, list):
            list.extend(target, items)
        else:
            target.extend(items)
        return self._remember(value, target, expand)

    def _sequence_target(self, value: Any) -> Any:
        if type(value) is list or isinstance(value, FrozenList):
            return FrozenList() if self.options.freeze else []
        if isinstance(value, deque) and not self.options.freeze:
            return deque(maxlen=value.maxlen)
        return None

    def _copy_mapping(self, value: Mapping[Any, Any], branch: Branch) -> Any:
        weak = isinstance(value, WeakValueDictionary)
        # Fresh copies in a weak mapping would vanish at once; frozen ones are held strongly
        expand = self._expand(value, branch) and (self.options.freeze or not weak)
        target = self._mapping_target(value)
        with self._in_progress(value, target, expand):
            pairs = [
                (key, self._child(expand, _path_key(key), item, branch))
                for key, item in list(value.items())
            ]
        if isinstance(target, FrozenDict):
            dict.update(target, pairs)
        elif target is not None:
            target.update(dict(pairs))
        elif weak and self.options.freeze:
            target = MappingProxyType(dict(pairs))
        else:
            target = self._finish(_rebuild_mapping(value, pairs))
        return self._remember(value, target, expand)

    def _mapping_target(self, value: Mapping[Any, Any]) -> Any:
        if isinstance(value, MappingProxyType | WeakKeyDictionary | WeakValueDictionary):
            return None
        if self.options.freeze:
            return FrozenDict()
        return _rebuild_mapping(value, [])

    def _copy_set(self, value: Any, branch: Branch) -> Any:
        weak = isinstance(value, WeakSet)
        expand = self._expand(value, branch) and (self.options.freeze or not weak)
        members = []
        with self._in_progress(value, None, expand):
            for index, item in enumerate(list(value)):
                copied = self._child(expand, index, item, branch)
                try:
                    hash(copied)
                except TypeError:
                    copied = self._cut(item)
                members.append(copied)
        if weak and self.options.freeze:
            return self._remember(value, frozenset(members), expand)
        return self._remember(value, self._finish(_rebuild_set(value, members)), expand)

    # Records and instances

    def _copy_fields(self, value: Any, expand: bool, branch: Branch) -> dict[Any, Any]:
        return {
            entry.key: self._child(expand, entry.key, entry.value, branch)
            for entry in state_entries(value, self.options.transient_properties)
        }

    def _copy_record(self, value: SimpleNamespace, branch: Branch) -> Any:
        expand = self._expand(value, branch)
        cls = type(value)
        target = None
        if cls in (SimpleNamespace, FrozenRecord):
            target = FrozenRecord() if self.options.freeze else SimpleNamespace()
        with self._in_progress(value, target, expand):
            fields = self._copy_fields(value, expand, branch)
        if target is not None:
            vars(target).update(fields)
            record = target
        else:
            try:
                record = cls(**fields)
            except Exception:
                logger.debug("Cannot construct %s; using a plain record", cls.__qualname__)
                record = SimpleNamespace(**fields)
            record = self._finish(record)
        _rebind_methods(value, record, fields)
        return self._remember(value, record, expand)

    def _copy_instance(self, value: Any, branch: Branch) -> Any:
        expand = self._expand(value, branch)
        cls = _mutable_class(type(value))
        target = None
        if not isinstance(value, Reconstructible) and not is_pydantic(cls):
            target = self._allocate(cls)
        with self._in_progress(value, target, expand):
            fields = self._copy_fields(value, expand, branch)
        if target is not None:
            clone = _restore(target, fields)
        else:
            clone = _rebuild_instance(cls, value, fields)
            if clone is None:
                clone = self._as_record(value, fields)
            clone = self._finish(clone)
        _rebind_methods(value, clone, fields)
        return self._remember(value, clone, expand)

    def _allocate(self, cls: type) -> Any | None:
        """Create an empty instance of cls, of its frozen subclass when freezing."""
        try:
            target = frozen_class(cls) if self.options.freeze else cls
            return target.__new__(target)
        except Exception:
            logger.debug("Cannot instantiate %s", cls.__qualname__, exc_info=True)
            return None

    def _as_record(self, value: Any, fields: dict[Any, Any]) -> Record:
        attributes = {str(key): item for key, item in fields.items()}
        if self.options.include_class_names:
            attributes = {"class": qualified_name(value), **attributes}
        return Record(**attributes)

    def _copy_error(self, value: BaseException, branch: Branch) -> Any:
        expand = self._expand(value, branch)
        cls = _mutable_class(type(value))
        rebuilt = True
        try:
            target = frozen_class(cls) if self.options.freeze else cls
            clone = target.__new__(target, *value.args)
        except Exception:
            logger.debug("Cannot rebuild %s; using a snapshot", cls.__qualname__, exc_info=True)
            clone = self._finish(ErrorSnapshot.from_exception(value))
            rebuilt = False

        with self._in_progress(value, clone, expand):
            args = self._child(expand, "args", value.args, branch)
            state = self._copy_fields(value, expand, branch) if rebuilt else {}
            links = {}
            for name in ERROR_LINKS:
                linked = getattr(value, name)
                if linked is not None:
                    links[name] = self._child(expand, name, linked, branch)
            notes = None
            if hasattr(value, "__notes__"):
                notes = self._child(expand, "__notes__", value.__notes__, branch)

        if rebuilt:
            _restore(clone, {"args": args if isinstance(args, tuple) else (args,), **state})
        for name in ERROR_LINKS:
            linked = links.get(name)
            object.__setattr__(clone, name, linked if isinstance(linked, BaseException) else None)
        object.__setattr__(clone, "__suppress_context__", value.__suppress_context__)
        object.__setattr__(clone, "__traceback__", value.__traceback__)
        if notes is not None:
            object.__setattr__(clone, "__notes__", notes)
        return self._remember(value, self._finish(clone), expand)


def _rebuild_sequence(value: Any, items: list[Any]) -> Any:
    cls = type(value)
    if isinstance(value, tuple):
        if hasattr(cls, "_make"):
            return cls._make(items)
        return tuple(items) if cls is tuple else cls(items)
    if isinstance(value, deque):
        return deque(items, maxlen=value.maxlen)
    if isinstance(value, array.array):
        return array.array(value.typecode, items)
    if isinstance(value, bytearray):
        return bytearray(items)
    if cls is list or isinstance(value, FrozenList):
        return items
    try:
        return cls(items)
    except Exception:
        logger.debug("Cannot construct %s; using a list", cls.__qualname__)
        return items


def _rebuild_mapping(value: Mapping[Any, Any], pairs: list[tuple[Any, Any]]) -> Any:
    cls = type(value)
    if isinstance(value, MappingProxyType):
        return MappingProxyType(dict(pairs))
    if cls is dict or isinstance(value, FrozenDict):
        return dict(pairs)
    if isinstance(value, defaultdict):
        result = cls(value.default_factory)
        result.update(dict(pairs))
        return result
    try:
        result = cls()
        result.update(dict(pairs))  # type: ignore[attr-defined]
    except Exception:
        logger.debug("Cannot construct %s; using a dict", cls.__qualname__)
        return dict(pairs)
    return result


def _rebuild_set(value: Any, members: list[Any]) -> Any:
    cls = type(value)
    try:
        return cls(members)
    except Exception:
        logger.debug("Cannot construct %s; using a set", cls.__qualname__)
        return frozenset(members) if isinstance(value, frozenset) else set(members)


def _rebuild_instance(cls: type, value: Any, fields: dict[Any, Any]) -> Any | None:
    """Rebuild an instance of cls from copied fields.

    Tries, in order: the Reconstructible hook, pydantic `model_construct`,
    and `cls.__new__(cls)` with the fields assigned directly.

    Returns:
        The new instance, or None if the class cannot be instantiated.
    """
    if isinstance(value, Reconstructible):
        try:
            return cls.__from_entries__(dict(fields))  # type: ignore[attr-defined]
        except Exception:
            logger.debug("%s.__from_entries__ raised", cls.__qualname__, exc_info=True)
    if is_pydantic(cls):
        try:
            return cls.model_construct(**fields)  # type: ignore[attr-defined]
        except Exception:
            logger.debug("%s.model_construct raised", cls.__qualname__, exc_info=True)

    try:
        clone = cls.__new__(cls)
    except Exception:
        logger.debug("Cannot instantiate %s", cls.__qualname__, exc_info=True)
        return None
    return _restore(clone, fields)


def _restore(target: Any, fields: dict[Any, Any]) -> Any:
    """Assign fields straight onto target, bypassing its own __setattr__."""
    for name, item in fields.items():
        try:
            object.__setattr__(target, str(name), item)
        except (AttributeError, TypeError):
            logger.debug("Cannot restore %s.%s", qualified_name(target), name)
    return target


def _rebind_methods(source: Any, target: Any, fields: dict[Any, Any]) -> None:
    """Point bound methods of source stored as attributes at target instead."""
    for name, item in fields.items():
        if not isinstance(item, MethodType) or item.__self__ is not source:
            continue
        try:
            object.__setattr__(target, str(name), MethodType(item.__func__, target))
        except (AttributeError, TypeError):
            logger.debug("Cannot rebind %s on %s", name, qualified_name(target))
