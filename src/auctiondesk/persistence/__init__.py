"""Persistence layer for auction snapshots."""

from __future__ import annotations

import json
import logging
import sqlite3
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from auctiondesk.config.settings import DEFAULT_SLOT, DbLocation
from auctiondesk.models import AuctionState


logger = logging.getLogger(__name__)

SNAPSHOT_KEYS = ("players", "captains", "config", "currentIndex")


class PersistenceWriteFailure(RuntimeError):
    """Raised when a snapshot could not be written; in-memory state is unaffected."""


class PersistenceReadFailure(ValueError):
    """A stored snapshot exists but cannot be turned back into auction state."""


@dataclass
class SnapshotRecord:
    slot: str
    saved_at: datetime
    state: AuctionState


def parse_snapshot(raw: str) -> AuctionState:
    """Decode a stored snapshot; raises PersistenceReadFailure if unusable."""

    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise PersistenceReadFailure(f"snapshot is not valid JSON ({exc})") from exc
    if not isinstance(payload, dict):
        raise PersistenceReadFailure("snapshot is not a JSON object")
    missing = [key for key in SNAPSHOT_KEYS if key not in payload]
    if missing:
        raise PersistenceReadFailure(f"snapshot missing keys: {', '.join(missing)}")
    if not isinstance(payload["players"], list) or not isinstance(payload["captains"], list):
        raise PersistenceReadFailure("snapshot players/captains must be arrays")
    try:
        return AuctionState.model_validate({key: payload[key] for key in SNAPSHOT_KEYS})
    except ValidationError as exc:
        raise PersistenceReadFailure(f"snapshot does not describe a valid auction: {exc}") from exc


class SnapshotStore:
    """SQLite-backed single-slot store for the auction snapshot."""

    def __init__(self, db_path: DbLocation, *, slot: str = DEFAULT_SLOT):
        self.slot = slot
        if isinstance(db_path, str) and db_path.startswith("file:"):
            self.db_path: DbLocation = db_path
            self._use_uri = True
        else:
            self.db_path = Path(db_path)
            self._use_uri = False
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        try:
            if isinstance(self.db_path, Path):
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                conn = sqlite3.connect(self.db_path)
            else:
                conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        except (sqlite3.OperationalError, OSError):
            fallback_dir = Path(tempfile.gettempdir()) / "auctiondesk-runtime"
            fallback_dir.mkdir(parents=True, exist_ok=True)
            fallback = fallback_dir / "auctiondesk.sqlite"
            logger.warning("Cannot open %s; falling back to %s", self.db_path, fallback)
            conn = sqlite3.connect(fallback)
            self.db_path = fallback
            self._use_uri = False
            self._create_schema(conn)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            self._create_schema(conn)

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS snapshots (
                slot TEXT PRIMARY KEY,
                payload_json TEXT NOT NULL,
                saved_at TEXT NOT NULL
            )
            """
        )
        conn.commit()

    def save(self, state: AuctionState, *, saved_at: Optional[datetime] = None) -> datetime:
        """Overwrite the slot with a full snapshot of ``state``."""

        saved_at = saved_at or datetime.now(timezone.utc)
        payload = state.to_payload()
        payload["timestamp"] = saved_at.isoformat()
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO snapshots (slot, payload_json, saved_at) VALUES (?, ?, ?)
                    ON CONFLICT(slot) DO UPDATE SET
                        payload_json = excluded.payload_json,
                        saved_at = excluded.saved_at
                    """,
                    (self.slot, json.dumps(payload), saved_at.isoformat()),
                )
                conn.commit()
        except sqlite3.Error as exc:
            raise PersistenceWriteFailure(f"Failed to save snapshot to {self.db_path}: {exc}") from exc
        return saved_at

    def load_snapshot(self) -> Optional[SnapshotRecord]:
        """Return the stored snapshot, or ``None`` if absent or unusable."""

        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT * FROM snapshots WHERE slot = ?",
                    (self.slot,),
                ).fetchone()
        except sqlite3.Error as exc:
            logger.warning("Failed to read snapshot %s: %s", self.slot, exc)
            return None
        if row is None:
            return None
        try:
            state = parse_snapshot(row["payload_json"])
            saved_at = datetime.fromisoformat(row["saved_at"])
        except (PersistenceReadFailure, ValueError) as exc:
            logger.warning("Ignoring unusable snapshot %s: %s", self.slot, exc)
            return None
        return SnapshotRecord(slot=self.slot, saved_at=saved_at, state=state)

    def load(self) -> Optional[AuctionState]:
        record = self.load_snapshot()
        return record.state if record is not None else None

    def has_snapshot(self) -> bool:
        return self.load_snapshot() is not None

    def clear(self) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM snapshots WHERE slot = ?", (self.slot,))
            conn.commit()
        logger.info("Cleared snapshot %s", self.slot)


__all__ = [
    "PersistenceReadFailure",
    "PersistenceWriteFailure",
    "SnapshotRecord",
    "SnapshotStore",
    "parse_snapshot",
]
