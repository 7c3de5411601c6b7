"""Shallow freezing of single values.

`lock()` makes one value immutable without looking at its children. The copy
engine applies it to every value it produces, bottom-up, which is what makes a
frozen copy immutable all the way down.

Containers cannot be frozen in place in Python, so lock() returns a frozen
counterpart for them. Class instances are frozen in place by switching them to
a frozen subclass of their class; instances of builtin exception types, whose
class cannot be switched, get a frozen shallow copy instead.
"""

from __future__ import annotations

import array
import logging
from collections import deque
from collections.abc import Mapping
from dataclasses import is_dataclass
from types import MappingProxyType, SimpleNamespace
from typing import Any
from weakref import WeakKeyDictionary, WeakValueDictionary

from graphclone.core.freeze.models import FrozenDict, FrozenList, FrozenRecord, frozen_class
from graphclone.core.kinds import Kind, classify, is_pydantic
from graphclone.core.options.models import CopyOptions
from graphclone.core.types import UNDEFINED

logger = logging.getLogger(__name__)

_READ_ONLY_TYPES = (FrozenList, FrozenDict, FrozenRecord, frozenset, MappingProxyType, tuple)


def freeze_instance(value: Any) -> bool:
    """Freeze a class instance in place.

    Args:
        value: Instance (or exception) to freeze.

    Returns:
        True if the instance now refuses attribute assignment, False if its
        class cannot be swapped (builtin types, incompatible layouts).
    """
    cls = type(value)
    if getattr(cls, "__frozen__", False):
        return True
    try:
        object.__setattr__(value, "__class__", frozen_class(cls))
    except Exception:
        logger.debug("Cannot freeze instance of %s", cls.__qualname__, exc_info=True)
        return False
    return True


def _lock_error(value: BaseException) -> BaseException:
    """Freeze an exception, by a frozen shallow copy if its class is static.

    Builtin exception types refuse `__class__` assignment, but their heap
    subclasses can be instantiated directly.
    """
    if freeze_instance(value):
        return value
    try:
        frozen = frozen_class(type(value))
        clone = frozen.__new__(frozen, *value.args)
        for name, item in vars(value).items():
            object.__setattr__(clone, name, item)
        for name in ("__cause__", "__context__", "__suppress_context__", "__traceback__"):
            object.__setattr__(clone, name, getattr(value, name))
    except Exception:
        logger.debug("Cannot freeze %s", type(value).__qualname__, exc_info=True)
        return value
    return clone


def _lock_sequence(value: Any) -> Any:
    if isinstance(value, tuple | FrozenList):
        return value
    if isinstance(value, list):
        return FrozenList(value)
    if isinstance(value, bytearray):
        return bytes(value)
    if isinstance(value, deque | array.array):
        return tuple(value)
    return value


def _lock_mapping(value: Mapping[Any, Any]) -> Any:
    if isinstance(value, FrozenDict | MappingProxyType):
        return value
    if isinstance(value, WeakKeyDictionary | WeakValueDictionary):
        return MappingProxyType(value)  # type: ignore[arg-type]
    return FrozenDict(value)


def lock(value: Any, options: CopyOptions | None = None) -> Any:
    """Freeze a single value without descending into it.

    Args:
        value: Value to freeze.
        options: Supplies the replacements for None and UNDEFINED.

    Returns:
        The value itself when already immutable or frozen in place, otherwise
        its frozen counterpart (FrozenList, FrozenDict, frozenset, tuple,
        bytes, FrozenRecord, or a read-only mapping view).
    """
    if value is UNDEFINED and options is not None:
        value = options.undefined_replacement
    if value is None and options is not None:
        value = options.null_replacement

    kind = classify(value)
    match kind:
        case Kind.SEQUENCE:
            return _lock_sequence(value)
        case Kind.MAPPING:
            return _lock_mapping(value)
        case Kind.SET:
            return value if isinstance(value, frozenset) else frozenset(value)
        case Kind.RECORD:
            return value if isinstance(value, FrozenRecord) else FrozenRecord(**vars(value))
        case Kind.ERROR:
            return _lock_error(value)
        case Kind.INSTANCE:
            freeze_instance(value)
            return value
        case _:
            return value


def is_read_only(value: Any) -> bool:
    """Check if a value refuses mutation at its own level.

    Children are not inspected: a tuple holding a list is read-only here.

    Args:
        value: Any value.

    Returns:
        True for None, UNDEFINED, scalars, dates, patterns, frozen containers,
        frozen records, frozen dataclasses/pydantic models and instances
        frozen by lock(); False otherwise.
    """
    kind = classify(value)
    if kind in (Kind.NULL, Kind.UNDEFINED, Kind.ATOM, Kind.DATE, Kind.PATTERN):
        return True
    if isinstance(value, _READ_ONLY_TYPES):
        return True
    if kind not in (Kind.INSTANCE, Kind.ERROR) or isinstance(value, SimpleNamespace):
        return False

    cls = type(value)
    if getattr(cls, "__frozen__", False):
        return True
    if is_dataclass(cls) and cls.__dataclass_params__.frozen:  # type: ignore[attr-defined]
        return True
    if is_pydantic(cls):
        return bool(getattr(cls, "model_config", {}).get("frozen", False))
    return False
