import json
from pathlib import Path

import pytest

from auctiondesk.ingest import LoadFailure
from auctiondesk.persistence import SnapshotStore
from auctiondesk.session import reset_session, start_session


def _write_feeds(directory: Path) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    players = {"players": [{"name": f"P{idx}", "position": "Forward", "rating": 70 + idx} for idx in range(1, 4)]}
    captains = {"captains": [{"name": "A", "teamName": "Alpha"}, {"name": "B", "teamName": "Bravo"}]}
    (directory / "players.json").write_text(json.dumps(players), encoding="utf-8")
    (directory / "captains.json").write_text(json.dumps(captains), encoding="utf-8")
    (directory / "config.json").write_text(json.dumps({"teamSize": 2, "initialBudget": 100}), encoding="utf-8")
    return directory


def _never_asked(record):
    raise AssertionError("no snapshot should be offered")


def test_fresh_start_snapshots_immediately(tmp_path):
    store = SnapshotStore(tmp_path / "auction.sqlite")
    engine = start_session(store, _write_feeds(tmp_path / "data"), choose_restore=_never_asked)
    assert engine.current_index == 0
    assert store.load() == engine.state


def test_restore_resumes_progress(tmp_path):
    store = SnapshotStore(tmp_path / "auction.sqlite")
    source = _write_feeds(tmp_path / "data")
    engine = start_session(store, source, choose_restore=_never_asked)
    engine.award(0, 40)
    engine.advance_to_next()

    offered = []

    def _accept(record):
        offered.append(record)
        return True

    resumed = start_session(store, source, choose_restore=_accept)
    assert len(offered) == 1
    assert resumed.current_index == 1
    assert resumed.state.captains[0].budget == 60
    assert resumed.state.players[0].sold


def test_declined_restore_discards_and_starts_fresh(tmp_path):
    store = SnapshotStore(tmp_path / "auction.sqlite")
    source = _write_feeds(tmp_path / "data")
    engine = start_session(store, source, choose_restore=_never_asked)
    engine.award(0, 40)

    fresh = start_session(store, source, choose_restore=lambda record: False)
    assert fresh.current_index == 0
    assert not any(player.sold for player in fresh.state.players)
    assert store.load() == fresh.state


def test_declined_restore_with_broken_feed_leaves_store_empty(tmp_path):
    store = SnapshotStore(tmp_path / "auction.sqlite")
    source = _write_feeds(tmp_path / "data")
    start_session(store, source, choose_restore=_never_asked).award(0, 40)
    (source / "config.json").unlink()
    with pytest.raises(LoadFailure):
        start_session(store, source, choose_restore=lambda record: False)
    assert store.load_snapshot() is None


def test_reset_matches_source_catalog(tmp_path):
    store = SnapshotStore(tmp_path / "auction.sqlite")
    source = _write_feeds(tmp_path / "data")
    pristine = start_session(store, source, choose_restore=_never_asked).state.model_copy(deep=True)
    engine = start_session(store, source, choose_restore=lambda record: True)
    engine.award(1, 30)
    engine.advance_next()

    reset = reset_session(store, source)
    assert reset.state == pristine
    assert all(captain.budget == 100 for captain in reset.state.captains)
