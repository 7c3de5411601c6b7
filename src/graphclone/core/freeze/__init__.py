"""Freezing: immutable container types and shallow lock operations."""

from graphclone.core.freeze.core import freeze_instance, is_read_only, lock
from graphclone.core.freeze.models import (
    FrozenDict,
    FrozenList,
    FrozenRecord,
    FrozenValueError,
    frozen_class,
)

__all__ = [
    # Models
    "FrozenDict",
    "FrozenList",
    "FrozenRecord",
    "FrozenValueError",
    "frozen_class",
    # Core
    "freeze_instance",
    "is_read_only",
    "lock",
]
