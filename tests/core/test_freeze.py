"""Tests for frozen containers and shallow locking."""

import pickle
import weakref
from collections import deque
from dataclasses import FrozenInstanceError, dataclass
from types import MappingProxyType, SimpleNamespace

import pytest

from graphclone import (
    UNDEFINED,
    CopyOptions,
    FrozenDict,
    FrozenList,
    FrozenRecord,
    FrozenValueError,
    is_read_only,
    lock,
)
from graphclone.core.freeze import freeze_instance, frozen_class


@dataclass
class Point:
    x: int
    y: int


@dataclass(frozen=True)
class FixedPoint:
    x: int


@dataclass(slots=True)
class SlottedPoint:
    x: int


class Anchor:
    pass


class PipelineError(Exception):
    pass


@pytest.mark.parametrize(
    "mutate",
    [
        lambda items: items.append(4),
        lambda items: items.extend([4]),
        lambda items: items.insert(0, 4),
        lambda items: items.pop(),
        lambda items: items.remove(1),
        lambda items: items.clear(),
        lambda items: items.sort(),
        lambda items: items.reverse(),
        lambda items: items.__setitem__(0, 4),
        lambda items: items.__delitem__(0),
        lambda items: items.__iadd__([4]),
    ],
)
def test_frozen_list_refuses_mutation(mutate):
    items = FrozenList([1, 2, 3])

    with pytest.raises(FrozenValueError):
        mutate(items)

    assert items == [1, 2, 3]


def test_frozen_list_reads_like_a_list():
    items = FrozenList([3, 1, 2])

    assert isinstance(items, list)
    assert items[0] == 3
    assert sorted(items) == [1, 2, 3]
    assert items + [4] == [3, 1, 2, 4]
    assert repr(items) == "FrozenList([3, 1, 2])"


@pytest.mark.parametrize(
    "mutate",
    [
        lambda mapping: mapping.__setitem__("b", 2),
        lambda mapping: mapping.__delitem__("a"),
        lambda mapping: mapping.update(b=2),
        lambda mapping: mapping.setdefault("b", 2),
        lambda mapping: mapping.pop("a"),
        lambda mapping: mapping.popitem(),
        lambda mapping: mapping.clear(),
    ],
)
def test_frozen_dict_refuses_mutation(mutate):
    mapping = FrozenDict(a=1)

    with pytest.raises(FrozenValueError):
        mutate(mapping)

    assert mapping == {"a": 1}


def test_frozen_value_error_is_a_type_error():
    assert issubclass(FrozenValueError, TypeError)


def test_frozen_record_refuses_assignment():
    record = FrozenRecord(x=1)

    with pytest.raises(FrozenInstanceError):
        record.x = 2
    with pytest.raises(FrozenInstanceError):
        del record.x

    assert record.x == 1
    assert repr(record) == "FrozenRecord(x=1)"


def test_frozen_containers_survive_pickling():
    items = pickle.loads(pickle.dumps(FrozenList([1, 2])))
    mapping = pickle.loads(pickle.dumps(FrozenDict(a=1)))
    record = pickle.loads(pickle.dumps(FrozenRecord(x=1)))

    assert type(items) is FrozenList
    assert type(mapping) is FrozenDict
    assert type(record) is FrozenRecord
    assert record.x == 1


def test_frozen_class_is_cached_subclass():
    frozen = frozen_class(Point)

    assert frozen is frozen_class(Point)
    assert issubclass(frozen, Point)
    assert frozen.__name__ == "Point"
    assert frozen_class(frozen) is frozen


@pytest.mark.parametrize("instance", [Point(1, 2), SlottedPoint(1), PipelineError("x")])
def test_freeze_instance(instance):
    assert freeze_instance(instance)

    with pytest.raises(FrozenInstanceError):
        instance.x = 5


def test_frozen_instance_keeps_type_and_equality():
    point = Point(1, 2)
    freeze_instance(point)

    assert isinstance(point, Point)
    assert (point.x, point.y) == (1, 2)
    assert is_read_only(point)


def test_lock_freezes_builtin_exceptions_by_copy():
    """Static types refuse __class__ assignment; lock() returns a frozen copy instead."""
    error = ValueError("x")
    error.detail = 1

    locked = lock(error)

    assert freeze_instance(ValueError("y")) is False
    assert locked is not error
    assert isinstance(locked, ValueError)
    assert locked.args == ("x",)
    assert locked.detail == 1
    assert is_read_only(locked)
    with pytest.raises(FrozenInstanceError):
        locked.extra = 1
    error.extra = 1


def test_lock_returns_frozen_counterparts():
    assert type(lock([1])) is FrozenList
    assert type(lock({"a": 1})) is FrozenDict
    assert lock({1}) == frozenset({1})
    assert type(lock({1})) is frozenset
    assert lock(deque([1, 2])) == (1, 2)
    assert lock(bytearray(b"ab")) == b"ab"
    assert type(lock(SimpleNamespace(a=1))) is FrozenRecord


def test_lock_keeps_immutable_values():
    values = [(1, 2), frozenset({1}), "text", 3, FrozenList([1])]
    for value in values:
        assert lock(value) is value


def test_lock_is_shallow():
    inner = [1]
    locked = lock([inner])

    assert locked[0] is inner
    inner.append(2)
    assert locked[0] == [1, 2]


def test_lock_applies_replacements():
    options = CopyOptions(null_replacement=[], undefined_replacement="gone")

    assert type(lock(None, options)) is FrozenList
    assert lock(UNDEFINED, options) == "gone"
    assert lock(None) is None


def test_lock_weak_mapping_is_a_read_only_view():
    anchor = Anchor()
    view = lock(weakref.WeakKeyDictionary({anchor: 1}))

    assert isinstance(view, MappingProxyType)
    assert view[anchor] == 1
    with pytest.raises(TypeError):
        view[Anchor()] = 2


@pytest.mark.parametrize(
    "value",
    [
        None,
        UNDEFINED,
        1,
        "s",
        (1, [2]),
        frozenset(),
        FrozenList(),
        FrozenDict(),
        FrozenRecord(),
        FixedPoint(1),
    ],
)
def test_is_read_only(value):
    assert is_read_only(value)


@pytest.mark.parametrize("value", [[], {}, set(), SimpleNamespace(), Point(1, 2), bytearray()])
def test_is_not_read_only(value):
    assert not is_read_only(value)
