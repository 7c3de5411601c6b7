"""Heuristic detection of runaway recursion from a traversal path.

A path is the sequence of keys followed from a root to the node currently being
visited. When the same contiguous run of keys repeats back to back, the walk is
most likely circling through a self-referential structure (or through objects
that keep generating new children) and should stop descending.

Usage:
    detect_cycles(["a", "b", "a", "b", "a", "b"], run_length=2, max_repetitions=3)  # True
    detect_cycles(["items", 0, "tags", 1])  # False

The detector keys on repeating KEY PATTERNS, not on object identity. It will
catch `a -> b -> a -> b -> a -> b` even when every node is a fresh object, but
it can miss a deep chain whose keys never repeat. Callers must also enforce an
independent depth bound.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_RUN_LENGTH = 5
DEFAULT_MAX_REPETITIONS = 3
RUN_DELIMITER = "*"

type CycleCallback = Callable[[list[str], list[str], int, int, int], Any]
"""Called as (stack, runs, repetitions, run_length, max_repetitions) on detection."""


def _calculate_runs(stack: Sequence[str], offset: int, run_length: int) -> list[str]:
    """Partition stack[offset:] into consecutive full windows and stringify each.

    Args:
        stack: Stringified path elements.
        offset: Stagger offset of the first window.
        run_length: Window size.

    Returns:
        One delimiter-joined string per full window, in order.
    """
    return [
        RUN_DELIMITER.join(stack[start : start + run_length])
        for start in range(offset, len(stack) - run_length + 1, run_length)
    ]


def _longest_streak(runs: Sequence[str]) -> int:
    """Count the longest stretch of adjacent-equal windows (the first one counts)."""
    longest = 1 if runs else 0
    streak = 1
    for previous, current in zip(runs, runs[1:], strict=False):
        streak = streak + 1 if current == previous else 1
        longest = max(longest, streak)
    return longest


def _notify(
    callback: CycleCallback,
    stack: list[str],
    runs: list[str],
    repetitions: int,
    run_length: int,
    max_repetitions: int,
) -> None:
    try:
        callback(stack, runs, repetitions, run_length, max_repetitions)
    except Exception:
        logger.warning("Cycle detection callback %r failed", callback, exc_info=True)


def detect_cycles(
    stack: Sequence[Any],
    run_length: int = DEFAULT_RUN_LENGTH,
    max_repetitions: int = DEFAULT_MAX_REPETITIONS,
    on_detected: CycleCallback | None = None,
) -> bool:
    """Return True if the path looks like infinite recursion.

    For every candidate run length from `run_length` up to
    `len(stack) / max_repetitions`, and for every stagger offset, the stack is
    cut into consecutive windows of that length. Each window is joined into a
    string and adjacent windows are compared; `max_repetitions` equal windows in
    a row signal a cycle.

    Args:
        stack: Path of traversal keys; elements are compared by their str() form.
        run_length: Smallest size of a repeating unit (non-positive means 3).
        max_repetitions: Consecutive repeats required (non-positive means 3).
        on_detected: Optional callback receiving
            (stack, runs, repetitions, run_length, max_repetitions).
            Exceptions it raises are logged and discarded.

    Returns:
        True if a repeating run was found, False otherwise. Never raises.
    """
    items = [str(element) for element in stack]
    length = len(items)

    run_length = run_length if run_length > 0 else 3
    max_repetitions = max_repetitions if max_repetitions > 0 else 3

    # Too short to hold max_repetitions copies of even the smallest run
    if length < run_length * max_repetitions:
        return False

    threshold = length / max_repetitions

    while run_length <= threshold:
        # Offsets past run_length only see a subset of the windows of a smaller offset
        for offset in range(run_length):
            runs = _calculate_runs(items, offset, run_length)
            if len(runs) < max_repetitions:
                break

            repetitions = _longest_streak(runs)
            if repetitions >= max_repetitions:
                logger.debug(
                    "Cycle detected: run of %d key(s) repeated %d times in %r",
                    run_length,
                    repetitions,
                    items,
                )
                if on_detected is not None:
                    _notify(on_detected, items, runs, repetitions, run_length, max_repetitions)
                return True

        run_length += 1

    return False
