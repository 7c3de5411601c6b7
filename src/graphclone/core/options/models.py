"""Copy options model and the safety limits it is clamped to."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Final

MAX_STACK_SIZE: Final = 16
"""Hard ceiling on traversal path length. Options may lower it, never raise it."""

DEFAULT_MAX_DEPTH: Final = 99


@dataclass(frozen=True, slots=True)
class CopyOptions:
    """Options controlling one copy.

    Attributes:
        max_depth: Container levels below the root that are deep-copied;
            deeper children are shared by reference.
        max_stack_size: Longest traversal path allowed, clamped to MAX_STACK_SIZE.
        freeze: Make the result and everything reachable from it immutable.
        null_replacement: Copied in place of every None.
        undefined_replacement: Copied in place of every UNDEFINED.
        include_class_names: Add a "class" attribute to records built from
            instances that could not be rebuilt.
        transient_properties: Extra attribute names never copied.
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    max_stack_size: int = MAX_STACK_SIZE
    freeze: bool = False
    null_replacement: Any = None
    undefined_replacement: Any = None
    include_class_names: bool = False
    transient_properties: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        # Enforced here too so direct construction cannot lift the ceiling
        object.__setattr__(self, "max_depth", max(0, self.max_depth))
        object.__setattr__(
            self, "max_stack_size", min(MAX_STACK_SIZE, max(0, self.max_stack_size))
        )
        object.__setattr__(self, "transient_properties", frozenset(self.transient_properties))

    @property
    def depth_limit(self) -> int:
        """Effective number of levels copied below the root."""
        return min(self.max_depth, self.max_stack_size)

    def evolve(self, **changes: Any) -> CopyOptions:
        """Return a copy with the given fields replaced (limits still clamped)."""
        return replace(self, **changes)
