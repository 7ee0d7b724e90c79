"""Startup protocol: restore a saved auction or start fresh from the catalog."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from auctiondesk.engine import AuctionEngine
from auctiondesk.ingest import build_fresh_state, load_catalog
from auctiondesk.persistence import SnapshotRecord, SnapshotStore


logger = logging.getLogger("uvicorn.error")

RestoreChooser = Callable[[SnapshotRecord], bool]


def fresh_engine(store: SnapshotStore, source_dir: Path) -> AuctionEngine:
    """Load the catalog, build a new state and snapshot it immediately.

    Raises :class:`~auctiondesk.ingest.LoadFailure` before anything is written
    if a feed is missing or malformed.
    """

    state = build_fresh_state(load_catalog(source_dir))
    engine = AuctionEngine(state, store)
    warning = engine.snapshot()
    if warning:
        logger.warning("Initial snapshot failed: %s", warning)
    return engine


def restore_engine(store: SnapshotStore, record: SnapshotRecord) -> AuctionEngine:
    logger.info(
        "Restored auction saved at %s (player %s of %s)",
        record.saved_at.isoformat(),
        record.state.current_index + 1,
        len(record.state.players),
    )
    return AuctionEngine(record.state, store)


def start_session(
    store: SnapshotStore,
    source_dir: Path,
    *,
    choose_restore: RestoreChooser,
) -> AuctionEngine:
    """Resume from the stored snapshot if the operator agrees, else start over.

    Declining a restore discards the snapshot before the fresh load.
    """

    record = store.load_snapshot()
    if record is not None:
        if choose_restore(record):
            return restore_engine(store, record)
        logger.info("Discarding saved auction from %s", record.saved_at.isoformat())
        store.clear()
    return fresh_engine(store, source_dir)


def reset_session(store: SnapshotStore, source_dir: Path) -> AuctionEngine:
    """Throw away all progress and reload the catalog from source."""

    store.clear()
    engine = fresh_engine(store, source_dir)
    logger.info("Auction reset from %s", source_dir)
    return engine
