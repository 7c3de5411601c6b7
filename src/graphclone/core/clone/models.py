"""Models used by the copy engine."""

from __future__ import annotations

import traceback
from dataclasses import dataclass

from graphclone.core.kinds import qualified_name
from graphclone.core.types import Key


class ErrorSnapshot(Exception):
    """Normalized stand-in for an exception whose type could not be rebuilt.

    Keeps what a reader of the original error needs: the type name, the
    message and the formatted stack. The cause is attached by the copy engine.
    """

    def __init__(self, type_name: str, message: str, stack: str | None = None) -> None:
        super().__init__(message)
        self.type_name = type_name
        self.message = message
        self.stack = stack

    @classmethod
    def from_exception(cls, error: BaseException) -> ErrorSnapshot:
        """Capture an exception's type name, message and stack text.

        Args:
            error: Exception to capture.

        Returns:
            A new ErrorSnapshot (without cause or context).
        """
        try:
            message = str(error)
        except Exception:
            message = repr(error.args)
        stack = None
        if error.__traceback__ is not None:
            stack = "".join(traceback.format_exception(error))
        return cls(qualified_name(error), message, stack)

    def __str__(self) -> str:
        return f"{self.type_name}: {self.message}"


@dataclass(frozen=True, slots=True)
class Branch:
    """Position of the engine in the value graph.

    Attributes:
        path: Keys followed from the root to the current node.
        depth: Levels that may still be deep-copied below the current node.
    """

    path: tuple[Key, ...] = ()
    depth: int = 0

    def descend(self, key: Key) -> Branch:
        """Return the branch of a child reached through `key`."""
        return Branch((*self.path, key), self.depth - 1)
