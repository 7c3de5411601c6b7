"""Immutable counterparts of the mutable container kinds.

Frozen containers subclass the type they replace, so isinstance checks and
read access keep working; every mutator raises instead.

Usage:
    items = FrozenList([1, 2])
    items.append(3)          # FrozenValueError

    config = FrozenDict(a=1)
    config["b"] = 2          # FrozenValueError

    point = FrozenRecord(x=1)
    point.x = 2              # dataclasses.FrozenInstanceError
"""

from __future__ import annotations

import threading
from dataclasses import FrozenInstanceError
from types import SimpleNamespace
from typing import Any, NoReturn


class FrozenValueError(TypeError):
    """Raised on an attempt to mutate a frozen container."""

    pass


def _refuse(self: Any, *args: Any, **kwargs: Any) -> NoReturn:
    raise FrozenValueError(f"{type(self).__name__} is frozen and cannot be modified")


class FrozenList(list):  # type: ignore[type-arg]
    """A list whose contents can no longer change."""

    __slots__ = ()

    __setitem__ = __delitem__ = __iadd__ = __imul__ = _refuse
    append = extend = insert = pop = remove = clear = sort = reverse = _refuse

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self), (list(self),))

    def __repr__(self) -> str:
        return f"FrozenList({list.__repr__(self)})"


class FrozenDict(dict):  # type: ignore[type-arg]
    """A dict whose contents can no longer change."""

    __slots__ = ()

    __setitem__ = __delitem__ = __ior__ = _refuse
    clear = pop = popitem = setdefault = update = _refuse

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self), (dict(self),))

    def __repr__(self) -> str:
        return f"FrozenDict({dict.__repr__(self)})"


def _refuse_attribute(self: Any, name: str, *args: Any) -> NoReturn:
    raise FrozenInstanceError(
        f"cannot assign to field {name!r} of frozen {type(self).__qualname__}"
    )


class FrozenRecord(SimpleNamespace):
    """A SimpleNamespace whose attributes can no longer change."""

    __setattr__ = __delattr__ = _refuse_attribute

    def __reduce__(self) -> tuple[Any, ...]:
        return (_rebuild_record, (vars(self).copy(),))


def _rebuild_record(attributes: dict[str, Any]) -> FrozenRecord:
    return FrozenRecord(**attributes)


_frozen_classes: dict[type, type] = {}
_frozen_classes_lock = threading.Lock()


def frozen_class(cls: type) -> type:
    """Return (and cache) the frozen subclass of a class.

    The subclass adds no storage, so an existing instance can switch to it by
    `__class__` assignment. It keeps the name, module and qualname of cls and
    refuses attribute assignment and deletion.

    Args:
        cls: Class of the instance being frozen.

    Returns:
        The frozen subclass; cls itself if it is already one.

    Raises:
        TypeError: If cls cannot be subclassed (final or builtin layout).
    """
    if getattr(cls, "__frozen__", False):
        return cls
    with _frozen_classes_lock:
        frozen = _frozen_classes.get(cls)
        if frozen is None:
            namespace = {
                "__slots__": (),
                "__module__": cls.__module__,
                "__qualname__": cls.__qualname__,
                "__doc__": cls.__doc__,
                "__frozen__": True,
                "__setattr__": _refuse_attribute,
                "__delattr__": _refuse_attribute,
            }
            frozen = type(cls)(cls.__name__, (cls,), namespace)
            _frozen_classes[cls] = frozen
        return frozen
