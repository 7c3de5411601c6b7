"""Runtime kind classification.

Every value handled by graphclone falls into exactly one Kind. The copy engine
and the entry extractor both dispatch on it, so a value is always visited the
same way regardless of which operation looks at it.

Usage:
    classify([1, 2])          # Kind.SEQUENCE
    classify({"a": 1})        # Kind.MAPPING
    classify(Position(0, 0))  # Kind.INSTANCE
"""

from __future__ import annotations

import array
import datetime as dt
import functools
import io
import logging
import re
import socket
import threading
import types
import weakref
from collections import deque
from collections.abc import Mapping
from collections.abc import Set as AbstractSet
from decimal import Decimal
from enum import Enum, auto
from fractions import Fraction
from pathlib import PurePath
from typing import Any
from uuid import UUID

from graphclone.core.types import UNDEFINED


class Kind(Enum):
    """Runtime kind of a value, one dispatch arm per member."""

    UNDEFINED = auto()
    NULL = auto()
    ATOM = auto()  # Immutable scalars, callables, classes, modules
    DATE = auto()
    PATTERN = auto()
    ERROR = auto()
    MAPPING = auto()
    SET = auto()
    SEQUENCE = auto()
    RECORD = auto()
    INSTANCE = auto()
    OPAQUE = auto()  # No defined rule, returned unchanged

    @property
    def is_container(self) -> bool:
        """True for kinds whose children are visited."""
        return self in _CONTAINER_KINDS


_CONTAINER_KINDS = frozenset(
    {Kind.MAPPING, Kind.SET, Kind.SEQUENCE, Kind.RECORD, Kind.INSTANCE, Kind.ERROR}
)

ATOM_TYPES: tuple[type, ...] = (
    str,
    bytes,
    int,
    float,
    complex,
    Decimal,
    Fraction,
    Enum,
    range,
    UUID,
    PurePath,
    memoryview,
    type,
    types.FunctionType,
    types.LambdaType,
    types.BuiltinFunctionType,
    types.MethodType,
    types.MethodWrapperType,
    types.WrapperDescriptorType,
    types.MethodDescriptorType,
    types.ModuleType,
    types.EllipsisType,
    types.NotImplementedType,
    functools.partial,
    property,
    staticmethod,
    classmethod,
)

DATE_TYPES: tuple[type, ...] = (dt.datetime, dt.date, dt.time, dt.timedelta)

SEQUENCE_TYPES: tuple[type, ...] = (list, tuple, deque, array.array, bytearray)

OPAQUE_TYPES: tuple[type, ...] = (
    io.IOBase,
    socket.socket,
    threading.Thread,
    logging.Logger,
    types.GeneratorType,
    types.CoroutineType,
    types.AsyncGeneratorType,
    types.FrameType,
    types.TracebackType,
    types.CodeType,
    weakref.ReferenceType,
)


def has_state(value: Any) -> bool:
    """Check if a value stores attributes in a __dict__ or in __slots__.

    Args:
        value: Value to check.

    Returns:
        True if the value carries per-instance attribute state.
    """
    if hasattr(value, "__dict__"):
        return True
    return any("__slots__" in vars(cls) for cls in type(value).__mro__[:-1])


def classify(value: Any) -> Kind:
    """Classify a value into its runtime Kind.

    Order matters: atoms are checked before containers so that str and bytes
    never count as sequences, and Enum members never count as instances.

    Args:
        value: Any Python value.

    Returns:
        The Kind used to copy and extract entries from the value.
    """
    if value is UNDEFINED:
        return Kind.UNDEFINED
    if value is None:
        return Kind.NULL
    if isinstance(value, ATOM_TYPES):
        return Kind.ATOM
    if isinstance(value, DATE_TYPES):
        return Kind.DATE
    if isinstance(value, re.Pattern):
        return Kind.PATTERN
    if isinstance(value, BaseException):
        return Kind.ERROR
    if isinstance(value, OPAQUE_TYPES):
        return Kind.OPAQUE
    if isinstance(value, Mapping):
        return Kind.MAPPING
    if isinstance(value, AbstractSet | weakref.WeakSet):
        return Kind.SET
    if isinstance(value, SEQUENCE_TYPES):
        return Kind.SEQUENCE
    if isinstance(value, types.SimpleNamespace):
        return Kind.RECORD
    if has_state(value):
        return Kind.INSTANCE
    return Kind.OPAQUE


def is_pydantic(cls: type) -> bool:
    """Check if class is a Pydantic model without importing pydantic.

    Args:
        cls: Class to check.

    Returns:
        True if class inherits from pydantic.BaseModel, False otherwise.
    """
    for base in cls.__mro__:
        if base.__module__.startswith("pydantic") and base.__name__ == "BaseModel":
            return True
    return False


def qualified_name(value: Any) -> str:
    """Return the qualified class name of a value (or of a class)."""
    cls = value if isinstance(value, type) else type(value)
    return cls.__qualname__
