"""Cycle detection: repeated key-pattern heuristic over traversal paths."""

from graphclone.core.cycles.core import (
    DEFAULT_MAX_REPETITIONS,
    DEFAULT_RUN_LENGTH,
    CycleCallback,
    detect_cycles,
)

__all__ = [
    "CycleCallback",
    "DEFAULT_MAX_REPETITIONS",
    "DEFAULT_RUN_LENGTH",
    "detect_cycles",
]
