"""Entry models and the protocols types implement to control extraction.

Types opt in to exact extraction and reconstruction by implementing the
protocols below. Neither is required: instances without them are scanned
best-effort (attributes, slots, read-only properties).

Usage:
    @dataclass
    class Account:
        owner: str
        _balance: int = 0

        def __entries__(self):
            return [("owner", self.owner), ("balance", self._balance)]

        @classmethod
        def __from_entries__(cls, fields):
            return cls(owner=fields["owner"], _balance=fields.get("balance", 0))
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, NamedTuple, Protocol, Self, runtime_checkable

from graphclone.core.types import Key, is_missing

MAX_CLASS_LEVELS = 10
"""Number of classes of an MRO walked when scanning for slots and properties."""

TRANSIENT_PROPERTIES: frozenset[str] = frozenset(
    {
        "constructor",
        "prototype",
        "this",
        "global",
        "to_json",
        "to_dict",
        "_abc_impl",
        "__unique_object_id__",
        "__GUID",
    }
)
"""Names never extracted: metadata and generated ids, not state."""


class Entry(NamedTuple):
    """A (key, value, owner) triple produced by extraction.

    Being a tuple, an entry unpacks as `key, value, owner = entry` and
    `entry[:2]` gives the plain pair.
    """

    key: Key
    value: Any
    owner: Any = None

    def is_empty(self) -> bool:
        """Check if the value is None or UNDEFINED."""
        return is_missing(self.value)

    def is_valid(self) -> bool:
        """Check if the entry has a str/int key and a present value."""
        return isinstance(self.key, str | int) and not self.is_empty()

    def fold(self) -> dict[Key, Any]:
        """Fold into a single-item dict, unwrapping nested entries.

        Returns:
            {key: value}, where an Entry value is folded recursively.
        """
        value = self.value.fold() if isinstance(self.value, Entry) else self.value
        return {self.key: value}


@runtime_checkable
class Introspectable(Protocol):
    """Exposes exactly the state a type wants extracted and copied."""

    def __entries__(self) -> Iterable[tuple[str, Any]]: ...


@runtime_checkable
class Reconstructible(Protocol):
    """Rebuilds an instance from copied fields, restoring type identity."""

    @classmethod
    def __from_entries__(cls, fields: dict[str, Any]) -> Self: ...


def is_transient(name: Any, extra: Iterable[str] = ()) -> bool:
    """Check if a name must never be extracted.

    Args:
        name: Attribute or key name.
        extra: Caller-supplied transient names.

    Returns:
        True for dunder names, deny-listed names and names in extra.
    """
    if not isinstance(name, str):
        return False
    if len(name) > 4 and name.startswith("__") and name.endswith("__"):
        return True
    return name in TRANSIENT_PROPERTIES or name in extra
