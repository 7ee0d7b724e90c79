"""Typed results returned by engine operations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from auctiondesk.models import Captain, Player


class FailureKind(str, Enum):
    INVALID_REFERENCE = "InvalidReference"
    ALREADY_AWARDED = "AlreadyAwarded"
    ROSTER_FULL = "RosterFull"
    INVALID_BID = "InvalidBid"
    INSUFFICIENT_BUDGET = "InsufficientBudget"
    AUCTION_COMPLETE = "AuctionComplete"

    @property
    def recoverable(self) -> bool:
        """Whether the operator can fix this by re-entering or re-navigating."""

        return self is not FailureKind.INVALID_REFERENCE


@dataclass(frozen=True)
class AuctionFailure:
    kind: FailureKind
    message: str


@dataclass(frozen=True)
class AwardResult:
    failure: Optional[AuctionFailure] = None
    player: Optional[Player] = None
    captain: Optional[Captain] = None
    captain_index: Optional[int] = None
    amount: Optional[int] = None
    warning: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


@dataclass(frozen=True)
class NavigationResult:
    index: int
    moved: bool = False
    failure: Optional[AuctionFailure] = None
    warning: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def complete(self) -> bool:
        return self.failure is not None and self.failure.kind is FailureKind.AUCTION_COMPLETE


@dataclass(frozen=True)
class AuctionSummary:
    total_players: int
    sold_players: int
    remaining_players: int
    current_index: int
    full_teams: int
