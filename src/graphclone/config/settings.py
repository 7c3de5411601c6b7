"""Configuration settings using Pydantic Settings.

Provides the library-wide copy defaults with environment variable support.
Per-call options always take precedence; the stack ceiling is enforced no
matter where a value comes from.

Usage:
    from graphclone.config import CopySettings, get_settings

    # Load from environment variables (GRAPHCLONE_*)
    settings = get_settings()

    # Or build explicitly
    settings = CopySettings(max_depth=10)
"""

from __future__ import annotations

import functools
import warnings

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from graphclone.core.options.models import DEFAULT_MAX_DEPTH, MAX_STACK_SIZE


class CopySettings(BaseSettings):  # type: ignore[misc]
    """Library defaults for copy operations.

    Attributes:
        max_depth: Default number of container levels deep-copied.
        max_stack_size: Default traversal path limit (clamped to MAX_STACK_SIZE).
        freeze: Freeze results by default.
        include_class_names: Tag records built from instances with their class name.

    Environment Variables:
        GRAPHCLONE_MAX_DEPTH
        GRAPHCLONE_MAX_STACK_SIZE
        GRAPHCLONE_FREEZE
        GRAPHCLONE_INCLUDE_CLASS_NAMES
    """

    model_config = SettingsConfigDict(
        env_prefix="GRAPHCLONE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=0)
    max_stack_size: int = Field(default=MAX_STACK_SIZE, ge=0)
    freeze: bool = False
    include_class_names: bool = False


@functools.cache
def get_settings() -> CopySettings:
    """Load and cache the settings.

    Malformed environment values do not break copying: a warning is issued
    and the built-in defaults are used instead. Call
    `get_settings.cache_clear()` to reload.

    Returns:
        The process-wide CopySettings instance.
    """
    try:
        return CopySettings()
    except ValidationError as exc:
        warnings.warn(
            f"Ignoring invalid GRAPHCLONE_* settings, using defaults: {exc}",
            stacklevel=2,
        )
        return CopySettings.model_construct()
