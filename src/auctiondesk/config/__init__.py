"""Configuration helpers for runtime settings."""

from .settings import (
    DEFAULT_PAGE_LINES,
    DEFAULT_SLOT,
    Settings,
    get_settings,
)

__all__ = [
    "DEFAULT_PAGE_LINES",
    "DEFAULT_SLOT",
    "Settings",
    "get_settings",
]
