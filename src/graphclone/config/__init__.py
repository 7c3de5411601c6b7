"""Configuration module using Pydantic Settings.

Usage:
    from graphclone.config import CopySettings, get_settings

    settings = get_settings()
    shallow = CopySettings(max_depth=0)
"""

from graphclone.config.settings import CopySettings, get_settings

__all__ = [
    "CopySettings",
    "get_settings",
]
