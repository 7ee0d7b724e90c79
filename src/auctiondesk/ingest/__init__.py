"""Input adapters that turn raw catalog feeds into auction state."""

from .catalog import (
    Catalog,
    LoadFailure,
    build_fresh_state,
    load_catalog,
    parse_catalog,
)

__all__ = [
    "Catalog",
    "LoadFailure",
    "build_fresh_state",
    "load_catalog",
    "parse_catalog",
]
