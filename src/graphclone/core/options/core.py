"""Options resolution: merge caller input over defaults and clamp the limits.

Usage:
    resolve_copy_options()                            # settings defaults
    resolve_copy_options(freeze=True, depth=2)        # keyword overrides
    resolve_copy_options({"maxStackSize": 64})        # clamped to MAX_STACK_SIZE
    resolve_copy_options(IMMUTABLE_COPY_OPTIONS, max_depth=3)
"""

from __future__ import annotations

import warnings
from collections.abc import Iterable, Mapping
from dataclasses import fields
from typing import Any

from graphclone.config import get_settings
from graphclone.core.options.models import MAX_STACK_SIZE, CopyOptions

DEFAULT_COPY_OPTIONS = CopyOptions()
IMMUTABLE_COPY_OPTIONS = CopyOptions(freeze=True)

_FIELD_NAMES = frozenset(f.name for f in fields(CopyOptions))

_ALIASES = {
    "depth": "max_depth",
    "maxDepth": "max_depth",
    "maxStackSize": "max_stack_size",
    "nullReplacement": "null_replacement",
    "undefinedReplacement": "undefined_replacement",
    "includeClassNames": "include_class_names",
    "transientProperties": "transient_properties",
}


def _warn(message: str) -> None:
    warnings.warn(message, UserWarning, stacklevel=4)


def default_options() -> CopyOptions:
    """Build options from the loaded settings.

    Returns:
        CopyOptions carrying the GRAPHCLONE_* defaults.
    """
    settings = get_settings()
    return CopyOptions(
        max_depth=settings.max_depth,
        max_stack_size=settings.max_stack_size,
        freeze=settings.freeze,
        include_class_names=settings.include_class_names,
    )


def _as_dict(options: CopyOptions | Mapping[str, Any] | None) -> dict[str, Any]:
    if options is None:
        return {}
    if isinstance(options, CopyOptions):
        return {name: getattr(options, name) for name in _FIELD_NAMES}
    if isinstance(options, Mapping):
        return dict(options)
    _warn(f"Ignoring copy options of type {type(options).__name__}; expected a mapping")
    return {}


def _canonical(raw: Mapping[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in raw.items():
        name = _ALIASES.get(key, key)
        if name not in _FIELD_NAMES:
            _warn(f"Ignoring unknown copy option {key!r}")
            continue
        result[name] = value
    return result


def _as_int(name: str, value: Any, default: int) -> int:
    """Coerce an option to a non-negative int, defaulting malformed input."""
    if isinstance(value, bool):
        number = None
    elif isinstance(value, int):
        number = value
    elif isinstance(value, float) and value.is_integer():
        number = int(value)
    elif isinstance(value, str):
        try:
            number = int(value.strip())
        except ValueError:
            number = None
    else:
        number = None

    if number is None:
        _warn(f"Invalid value {value!r} for copy option {name!r}; using {default}")
        return default
    return max(0, number)


def _as_names(value: Any) -> frozenset[str]:
    if value is None:
        return frozenset()
    if isinstance(value, str):
        return frozenset({value})
    if isinstance(value, Iterable):
        return frozenset(str(item) for item in value)
    _warn(f"Invalid transient_properties {value!r}; ignoring")
    return frozenset()


def resolve_copy_options(
    options: CopyOptions | Mapping[str, Any] | None = None, /, **overrides: Any
) -> CopyOptions:
    """Merge caller options over the library defaults.

    Precedence: keyword overrides, then `options`, then settings defaults.
    Keys may use snake_case, camelCase or the `depth` alias.

    Malformed options are never rejected: unknown keys are dropped, bad
    integers fall back to the default, negatives become 0, and
    max_stack_size is clamped to MAX_STACK_SIZE. Each correction of caller
    input is reported with a UserWarning.

    Args:
        options: CopyOptions, a mapping of option names, or None.
        **overrides: Individual options taking precedence over `options`.

    Returns:
        Fully resolved CopyOptions.
    """
    defaults = default_options()
    merged = _as_dict(defaults)
    merged.update(_canonical(_as_dict(options)))
    merged.update(_canonical(overrides))

    max_depth = _as_int("max_depth", merged["max_depth"], defaults.max_depth)
    max_stack_size = _as_int("max_stack_size", merged["max_stack_size"], defaults.max_stack_size)
    if max_stack_size > MAX_STACK_SIZE:
        _warn(f"max_stack_size {max_stack_size} exceeds the ceiling; clamped to {MAX_STACK_SIZE}")
        max_stack_size = MAX_STACK_SIZE

    return CopyOptions(
        max_depth=max_depth,
        max_stack_size=max_stack_size,
        freeze=merged["freeze"] is True,
        null_replacement=merged["null_replacement"],
        undefined_replacement=merged["undefined_replacement"],
        include_class_names=bool(merged["include_class_names"]),
        transient_properties=_as_names(merged["transient_properties"]),
    )
