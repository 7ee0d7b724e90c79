"""Canonical auction records shared across ingest, engine and persistence."""

from .captain import Captain, CaptainSpec
from .player import Player, PlayerSpec, RosterEntry
from .state import AuctionConfig, AuctionState

__all__ = [
    "AuctionConfig",
    "AuctionState",
    "Captain",
    "CaptainSpec",
    "Player",
    "PlayerSpec",
    "RosterEntry",
]
