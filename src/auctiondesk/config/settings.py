"""Runtime settings for the auction service, resolved from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union


logger = logging.getLogger(__name__)

DB_PATH_ENV = "AUCTIONDESK_DB_PATH"
DATA_DIR_ENV = "AUCTIONDESK_DATA_DIR"
SLOT_ENV = "AUCTIONDESK_SLOT"
PAGE_LINES_ENV = "AUCTIONDESK_PAGE_LINES"

DEFAULT_DB_PATH = Path("auctiondesk.sqlite")
DEFAULT_DATA_DIR = Path("data")
# Key the browser version used for its localStorage slot.
DEFAULT_SLOT = "football-auction-state"
DEFAULT_PAGE_LINES = 40

DbLocation = Union[Path, str]


@dataclass(frozen=True)
class Settings:
    db_path: DbLocation
    data_dir: Path
    slot: str
    page_lines: int


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()


def _resolve_db_path(explicit: DbLocation | None) -> DbLocation:
    if explicit is not None:
        return explicit if isinstance(explicit, Path) or explicit.startswith("file:") else Path(explicit)
    env_db = os.getenv(DB_PATH_ENV)
    if env_db:
        # file: URIs are handed to sqlite untouched
        return env_db if env_db.startswith("file:") else Path(env_db)
    return DEFAULT_DB_PATH


def get_settings(
    *,
    db_path: DbLocation | None = None,
    data_dir: Path | str | None = None,
    slot: str | None = None,
) -> Settings:
    """Resolve settings: explicit arguments, then environment, then defaults."""

    if data_dir is None:
        data_dir = Path(_env_str(DATA_DIR_ENV, str(DEFAULT_DATA_DIR)))
    return Settings(
        db_path=_resolve_db_path(db_path),
        data_dir=Path(data_dir),
        slot=slot or _env_str(SLOT_ENV, DEFAULT_SLOT),
        page_lines=_env_int(PAGE_LINES_ENV, DEFAULT_PAGE_LINES, min_value=5),
    )
