"""Load the player/captain/config feeds and build a fresh auction state."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Tuple

from pydantic import ValidationError

from auctiondesk.models import (
    AuctionConfig,
    AuctionState,
    Captain,
    CaptainSpec,
    Player,
    PlayerSpec,
)


logger = logging.getLogger(__name__)

PLAYERS_FEED = "players.json"
CAPTAINS_FEED = "captains.json"
CONFIG_FEED = "config.json"


class LoadFailure(RuntimeError):
    """Raised when a catalog feed is missing or malformed.

    Fresh start is aborted; no partial catalog is ever returned.
    """

    def __init__(self, feed: str, message: str):
        super().__init__(f"{feed}: {message}")
        self.feed = feed
        self.message = message


@dataclass(frozen=True)
class Catalog:
    players: Tuple[PlayerSpec, ...]
    captains: Tuple[CaptainSpec, ...]
    config: AuctionConfig


def _read_feed(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise LoadFailure(path.name, f"cannot read feed ({exc})") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise LoadFailure(path.name, f"invalid JSON ({exc})") from exc


def _entries(payload: Any, *, feed: str, key: str) -> list:
    if not isinstance(payload, Mapping):
        raise LoadFailure(feed, "expected a JSON object")
    entries = payload.get(key)
    if not isinstance(entries, list):
        raise LoadFailure(feed, f"expected a list under {key!r}")
    return entries


def parse_catalog(
    players_payload: Any,
    captains_payload: Any,
    config_payload: Any,
) -> Catalog:
    """Validate already-decoded feed payloads into a :class:`Catalog`."""

    if not isinstance(config_payload, Mapping):
        raise LoadFailure(CONFIG_FEED, "expected a JSON object")
    try:
        config = AuctionConfig.model_validate(config_payload)
    except ValidationError as exc:
        raise LoadFailure(CONFIG_FEED, str(exc)) from exc

    players: list[PlayerSpec] = []
    for idx, entry in enumerate(_entries(players_payload, feed=PLAYERS_FEED, key="players")):
        try:
            players.append(PlayerSpec.model_validate(entry))
        except ValidationError as exc:
            raise LoadFailure(PLAYERS_FEED, f"entry {idx} is invalid: {exc}") from exc

    captains: list[CaptainSpec] = []
    for idx, entry in enumerate(_entries(captains_payload, feed=CAPTAINS_FEED, key="captains")):
        try:
            captains.append(CaptainSpec.model_validate(entry))
        except ValidationError as exc:
            raise LoadFailure(CAPTAINS_FEED, f"entry {idx} is invalid: {exc}") from exc

    return Catalog(players=tuple(players), captains=tuple(captains), config=config)


def load_catalog(source_dir: Path) -> Catalog:
    """Read the three feeds from ``source_dir``."""

    source_dir = Path(source_dir)
    catalog = parse_catalog(
        _read_feed(source_dir / PLAYERS_FEED),
        _read_feed(source_dir / CAPTAINS_FEED),
        _read_feed(source_dir / CONFIG_FEED),
    )
    logger.info(
        "Loaded catalog from %s: %s players, %s captains (team size %s, budget %s)",
        source_dir,
        len(catalog.players),
        len(catalog.captains),
        catalog.config.team_size,
        catalog.config.initial_budget,
    )
    return catalog


def build_fresh_state(catalog: Catalog) -> AuctionState:
    """Return a brand-new auction state; player order is the source order."""

    budget = catalog.config.initial_budget
    return AuctionState(
        players=[Player.from_spec(spec) for spec in catalog.players],
        captains=[
            Captain(name=spec.name, team_name=spec.team_name, budget=budget, initial_budget=budget)
            for spec in catalog.captains
        ],
        config=catalog.config,
        current_index=0,
    )
