"""Tests for repeated key-pattern detection."""

import logging

from hypothesis import given
from hypothesis import strategies as st

from graphclone import detect_cycles


def test_detects_repeated_run():
    assert detect_cycles(["a", "b", "a", "b", "a", "b"], run_length=2, max_repetitions=3)


def test_ignores_path_without_repeats():
    assert not detect_cycles(["items", 0, "tags", 1])
    assert not detect_cycles(list(range(40)))


def test_short_path_never_fires():
    """Fewer than run_length * max_repetitions keys cannot hold a cycle."""
    assert not detect_cycles(["next"] * 14)
    assert detect_cycles(["next"] * 15)


def test_too_few_repetitions():
    assert not detect_cycles(["a", "b", "a", "b", "c", "d"], run_length=2, max_repetitions=3)


def test_finds_longer_runs_than_requested():
    """Candidate run lengths grow from run_length up to len / max_repetitions."""
    stack = ["a", "b", "c", "d"] * 3
    assert detect_cycles(stack, run_length=2, max_repetitions=3)


def test_finds_staggered_run():
    """A cycle preceded by unrelated keys is found through a stagger offset."""
    stack = ["root", "x", "y", "x", "y", "x", "y"]
    assert detect_cycles(stack, run_length=2, max_repetitions=3)


def test_compares_keys_by_string_form():
    assert detect_cycles([0, "0", 0], run_length=1, max_repetitions=3)


def test_non_positive_arguments_default_to_three():
    assert detect_cycles(["x"] * 9, run_length=0, max_repetitions=-1)
    assert not detect_cycles(["x"] * 8, run_length=0, max_repetitions=0)


def test_callback_receives_detection():
    calls = []

    def on_detected(stack, runs, repetitions, run_length, max_repetitions):
        calls.append((stack, runs, repetitions, run_length, max_repetitions))

    assert detect_cycles(["a", "b"] * 3, 2, 3, on_detected)

    stack, runs, repetitions, run_length, max_repetitions = calls[0]
    assert stack == ["a", "b"] * 3
    assert runs == ["a*b", "a*b", "a*b"]
    assert repetitions == 3
    assert (run_length, max_repetitions) == (2, 3)


def test_failing_callback_is_logged_not_raised(caplog):
    """A broken callback must not turn detection into a crash."""

    def on_detected(*args):
        raise RuntimeError("callback broke")

    with caplog.at_level(logging.WARNING, logger="graphclone.core.cycles.core"):
        assert detect_cycles(["a"] * 9, 3, 3, on_detected)

    assert "callback" in caplog.text


@given(
    prefix=st.lists(st.sampled_from(["a", "b", "c"]), max_size=5),
    unit=st.lists(st.sampled_from(["x", "y", "z", 0, 1]), min_size=1, max_size=4),
)
def test_repeated_unit_is_always_detected(prefix, unit):
    """PROPERTY: any unit repeated max_repetitions times is found."""
    stack = prefix + unit * 3
    assert detect_cycles(stack, run_length=1, max_repetitions=3)


@given(stack=st.lists(st.integers(), unique=True, max_size=30))
def test_unique_keys_never_fire(stack):
    """PROPERTY: a path without repeated keys has no repeated run."""
    assert not detect_cycles(stack, run_length=1, max_repetitions=2)
