"""Copy engine: kind-dispatched deep copy with an identity memo and freezing."""

from graphclone.core.clone.core import copy, deep_freeze, immutable_copy, local_copy
from graphclone.core.clone.engine import CopyEngine
from graphclone.core.clone.models import Branch, ErrorSnapshot

__all__ = [
    # Models
    "Branch",
    "ErrorSnapshot",
    # Core
    "CopyEngine",
    "copy",
    "deep_freeze",
    "immutable_copy",
    "local_copy",
]
