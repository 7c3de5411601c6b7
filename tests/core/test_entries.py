"""Tests for uniform entry extraction."""

import datetime as dt
import re
from dataclasses import dataclass
from types import SimpleNamespace

from graphclone import (
    UNDEFINED,
    Entry,
    entries,
    entries_to_dict,
    iterate_entries,
    object_keys,
    object_values,
)


@dataclass
class Point:
    x: int
    y: int | None = None


class Report:
    def __init__(self):
        self.title = "q3"
        self.to_dict = lambda: {}
        self.__dunder__ = 1
        self.cache = {}


def pairs(value, **kwargs):
    return [entry[:2] for entry in entries(value, **kwargs)]


def test_sequence_entries_are_indexed():
    assert pairs([10, 20, 30]) == [(0, 10), (1, 20), (2, 30)]
    assert pairs((10, 20)) == [(0, 10), (1, 20)]


def test_mapping_entries_keep_insertion_order():
    assert pairs({"a": 1, "b": 2}) == [("a", 1), ("b", 2)]


def test_missing_values_are_omitted():
    assert pairs({"x": 1, "y": UNDEFINED, "z": None}) == [("x", 1)]
    assert pairs([None, 1]) == [(1, 1)]


def test_mapping_keys_are_stringified():
    assert pairs({(1, 2): "a", 3: "b"}) == [("(1, 2)", "a"), ("3", "b")]


def test_colliding_mapping_keys_keep_first_pair():
    assert pairs({1: "a", "1": "b"}) == [("1", "a")]
    assert pairs({(1, 2): "a", "(1, 2)": "b"}) == [("(1, 2)", "a")]


def test_set_entries_are_positional():
    result = pairs({"only"})
    assert result == [(0, "only")]


def test_record_entries():
    assert pairs(SimpleNamespace(a=1, b=2)) == [("a", 1), ("b", 2)]


def test_instance_entries():
    assert pairs(Point(1)) == [("x", 1)]
    assert pairs(Point(1, 2)) == [("x", 1), ("y", 2)]


def test_owner_is_the_extracted_value():
    point = Point(1)
    assert entries(point)[0].owner is point


def test_transient_and_dunder_names_are_omitted():
    assert pairs(Report()) == [("title", "q3"), ("cache", {})]
    assert pairs(Report(), transient_properties=["cache"]) == [("title", "q3")]


def test_class_name_entry():
    result = pairs(Point(1), include_class_names=True)
    assert result[0] == ("class", "Point")
    assert pairs({"a": 1}, include_class_names=True) == [("a", 1)]


def test_scalars_have_no_entries():
    assert entries(42) == []
    assert entries("text") == []
    assert entries(None) == []
    assert entries(len) == []


def test_datetime_entries():
    moment = dt.datetime(2020, 1, 2, 3, 4, 5, tzinfo=dt.UTC)
    result = dict(pairs(moment))

    assert result["year"] == 2020
    assert result["month"] == 1
    assert result["day"] == 2
    assert result["hour"] == 3
    assert result["tzname"] == "UTC"
    assert result["isoformat"] == "2020-01-02T03:04:05+00:00"
    assert result["timestamp"] == moment.timestamp()


def test_naive_time_omits_timezone():
    result = dict(pairs(dt.time(12, 30)))
    assert result["minute"] == 30
    assert "tzname" not in result


def test_timedelta_entries():
    result = dict(pairs(dt.timedelta(days=1, seconds=2)))
    assert result["days"] == 1
    assert result["seconds"] == 2
    assert result["total_seconds"] == 86402.0


def test_pattern_entries():
    result = dict(pairs(re.compile(r"(?P<word>\w+)", re.IGNORECASE)))

    assert result["pattern"] == r"(?P<word>\w+)"
    assert result["groups"] == 1
    assert result["groupindex"] == {"word": 1}
    assert result["ignorecase"] is True
    assert result["multiline"] is False


def test_error_entries():
    error = ValueError("boom")
    error.code = 7
    result = dict(pairs(error))

    assert result["code"] == 7
    assert result["type"] == "ValueError"
    assert result["message"] == "boom"
    assert result["args"] == ("boom",)
    assert "cause" not in result
    assert "traceback" not in result


def test_error_entries_with_cause_and_traceback():
    try:
        try:
            raise KeyError("inner")
        except KeyError as inner:
            raise RuntimeError("outer") from inner
    except RuntimeError as caught:
        error = caught

    result = dict(pairs(error))
    assert isinstance(result["cause"], KeyError)
    assert "RuntimeError: outer" in result["traceback"]


def test_failing_extraction_yields_nothing():
    """A value whose state cannot be read has no entries instead of raising."""

    class Broken:
        def __entries__(self):
            raise RuntimeError("no state")

    assert entries(Broken()) == []


def test_object_keys_and_values():
    shared = [1]
    value = {"a": shared, "b": shared, "c": None}

    assert object_keys(value) == ["a", "b"]
    assert object_values(value) == [shared]


def test_entries_to_dict():
    assert entries_to_dict(entries({"a": 1, "b": 2})) == {"a": 1, "b": 2}
    assert entries_to_dict([("a", 1), ("b", None)]) == {"a": 1}
    assert entries_to_dict({"a": 1}) == {"a": 1}


def test_entries_to_dict_folds_nested_entries():
    assert entries_to_dict([Entry("outer", Entry("inner", 1))]) == {"outer": {"inner": 1}}


def test_entry_helpers():
    assert Entry("a", None).is_empty()
    assert Entry("a", UNDEFINED).is_empty()
    assert Entry("a", 0).is_valid()
    assert not Entry(1.5, 0).is_valid()
    assert Entry("a", 1).fold() == {"a": 1}


def test_iterate_entries_top_level():
    seen = []
    stopped = iterate_entries({"a": {"b": 1}}, lambda entry, path: seen.append(path))

    assert not stopped
    assert seen == [("a",)]


def test_iterate_entries_recursive():
    seen = []
    value = {"a": {"b": [1, 2]}, "c": Point(3)}

    iterate_entries(value, lambda entry, path: seen.append((path, entry.value)), recursive=True)

    paths = [path for path, _ in seen]
    assert paths == [("a",), ("a", "b"), ("a", "b", 0), ("a", "b", 1), ("c",), ("c", "x")]


def test_iterate_entries_stops_when_visitor_returns_true():
    seen = []

    def visitor(entry, path):
        seen.append(entry.key)
        return entry.key == "b"

    assert iterate_entries({"a": 1, "b": 2, "c": 3}, visitor)
    assert seen == ["a", "b"]


def test_iterate_entries_survives_cycles():
    """CRITICAL: Recursive iteration over a self-referential graph terminates."""
    root = {"name": "root"}
    root["self"] = root
    root["child"] = {"parent": root}
    seen = []

    iterate_entries(root, lambda entry, path: seen.append(path), recursive=True)

    assert ("self",) in seen
    assert ("child", "parent") in seen
    assert ("self", "name") not in seen
