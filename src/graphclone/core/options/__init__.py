"""Copy options: model, defaults and resolution."""

from graphclone.core.options.core import (
    DEFAULT_COPY_OPTIONS,
    IMMUTABLE_COPY_OPTIONS,
    default_options,
    resolve_copy_options,
)
from graphclone.core.options.models import DEFAULT_MAX_DEPTH, MAX_STACK_SIZE, CopyOptions

__all__ = [
    # Models
    "CopyOptions",
    "MAX_STACK_SIZE",
    "DEFAULT_MAX_DEPTH",
    # Core
    "DEFAULT_COPY_OPTIONS",
    "IMMUTABLE_COPY_OPTIONS",
    "default_options",
    "resolve_copy_options",
]
