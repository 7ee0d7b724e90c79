"""Auction transaction engine: award validation, ledger updates and navigation."""

from __future__ import annotations

import logging
import math
from typing import Any, Optional, Protocol, Tuple, cast

from auctiondesk.models import AuctionState, Captain, Player, RosterEntry
from auctiondesk.persistence import PersistenceWriteFailure

from .types import (
    AuctionFailure,
    AuctionSummary,
    AwardResult,
    FailureKind,
    NavigationResult,
)


logger = logging.getLogger("uvicorn.error")
logger.setLevel(logging.INFO)

SAVE_WARNING = "Failed to auto-save; the auction continues in memory but is not durable."


class SnapshotSink(Protocol):
    def save(self, state: AuctionState) -> Any: ...


def coerce_bid(raw: Any) -> Optional[int]:
    """Turn an operator-entered amount into a whole non-negative bid.

    Empty input counts as 0 and fractional amounts are floored; anything
    non-numeric, non-finite or negative yields ``None``.
    """

    if raw is None:
        return 0
    if isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return 0
        try:
            value: int | float = int(text)
        except ValueError:
            try:
                value = float(text)
            except ValueError:
                return None
    elif isinstance(raw, (int, float)):
        value = raw
    else:
        return None
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        value = math.floor(value)
    if value < 0:
        return None
    return int(value)


def _fail(kind: FailureKind, message: str) -> AuctionFailure:
    return AuctionFailure(kind=kind, message=message)


class AuctionEngine:
    """Sole writer of an :class:`AuctionState`.

    Every operation that changes the state snapshots it through ``store``
    before returning, so the durable copy is never more than one transaction
    behind.
    """

    def __init__(self, state: AuctionState, store: Optional[SnapshotSink] = None):
        self._state = state
        self._store = store

    @property
    def state(self) -> AuctionState:
        return self._state

    @property
    def current_index(self) -> int:
        return self._state.current_index

    @property
    def current_player(self) -> Optional[Player]:
        players = self._state.players
        if 0 <= self._state.current_index < len(players):
            return players[self._state.current_index]
        return None

    @property
    def is_complete(self) -> bool:
        return all(player.sold for player in self._state.players)

    def captain(self, index: int) -> Optional[Captain]:
        if isinstance(index, bool) or not isinstance(index, int):
            return None
        if 0 <= index < len(self._state.captains):
            return self._state.captains[index]
        return None

    def snapshot(self) -> Optional[str]:
        """Persist the current state; returns a warning if durability failed."""

        warning = None
        if self._store is not None:
            try:
                self._store.save(self._state)
            except PersistenceWriteFailure as exc:
                logger.warning("Auto-save failed: %s", exc)
                warning = SAVE_WARNING
        return warning

    # -- queries -----------------------------------------------------------------

    def best_eligible_captain(self) -> Optional[Tuple[int, Captain]]:
        """Richest captain with an open roster slot; ties go to the earliest."""

        team_size = self._state.config.team_size
        best: Optional[Tuple[int, Captain]] = None
        for idx, captain in enumerate(self._state.captains):
            if captain.is_full(team_size):
                continue
            if best is None or captain.budget > best[1].budget:
                best = (idx, captain)
        return best

    def summary(self) -> AuctionSummary:
        players = self._state.players
        sold = sum(1 for player in players if player.sold)
        team_size = self._state.config.team_size
        return AuctionSummary(
            total_players=len(players),
            sold_players=sold,
            remaining_players=len(players) - sold,
            current_index=self._state.current_index,
            full_teams=sum(1 for captain in self._state.captains if captain.is_full(team_size)),
        )

    # -- award transaction -------------------------------------------------------

    def _player_failure(self) -> Optional[AuctionFailure]:
        player = self.current_player
        if player is None:
            return _fail(FailureKind.INVALID_REFERENCE, f"No player at index {self._state.current_index}.")
        if player.sold:
            return _fail(FailureKind.ALREADY_AWARDED, "Player already awarded.")
        return None

    def award(self, captain_index: int, amount: Any) -> AwardResult:
        """Award the current player to ``captain_index`` for ``amount``.

        All checks run before anything is touched; a failed award leaves the
        state exactly as it was.
        """

        captain = self.captain(captain_index)
        if captain is None:
            failure = _fail(FailureKind.INVALID_REFERENCE, f"No captain at index {captain_index!r}.")
            return AwardResult(failure=failure, captain_index=captain_index)
        failure = self._player_failure()
        if failure is not None:
            return AwardResult(failure=failure, captain_index=captain_index)

        if captain.is_full(self._state.config.team_size):
            failure = _fail(FailureKind.ROSTER_FULL, f"{captain.team_name} is full.")
            return AwardResult(failure=failure, captain_index=captain_index)

        bid = coerce_bid(amount)
        if bid is None:
            failure = _fail(FailureKind.INVALID_BID, "Enter a valid non-negative bid amount.")
            return AwardResult(failure=failure, captain_index=captain_index)

        if bid > captain.budget:
            failure = _fail(FailureKind.INSUFFICIENT_BUDGET, "Insufficient budget.")
            return AwardResult(failure=failure, captain_index=captain_index, amount=bid)

        player = cast(Player, self.current_player)
        captain.budget -= bid
        captain.roster.append(
            RosterEntry(name=player.name, position=player.position, rating=player.rating, price=bid)
        )
        player.sold = True
        player.sold_price = bid
        player.awarded_to = captain.name
        logger.info(
            "Awarded %s to %s (%s) for %s; %s remaining",
            player.name,
            captain.team_name,
            captain.name,
            bid,
            captain.budget,
        )

        warning = self.snapshot()
        return AwardResult(
            player=player,
            captain=captain,
            captain_index=captain_index,
            amount=bid,
            warning=warning,
        )

    def award_best(self, amount: Any) -> AwardResult:
        """Fast award to the richest captain that still has room."""

        best = self.best_eligible_captain()
        if best is None:
            failure = self._player_failure() or _fail(FailureKind.ROSTER_FULL, "All teams are full.")
            return AwardResult(failure=failure)
        return self.award(best[0], amount)

    # -- navigation --------------------------------------------------------------

    def _move_to(self, index: int) -> NavigationResult:
        if index == self._state.current_index:
            return NavigationResult(index=index)
        self._state.current_index = index
        warning = self.snapshot()
        return NavigationResult(index=index, moved=True, warning=warning)

    def advance_prev(self) -> NavigationResult:
        if not self._state.players:
            return NavigationResult(index=0)
        return self._move_to(max(0, self._state.current_index - 1))

    def advance_next(self) -> NavigationResult:
        if not self._state.players:
            return NavigationResult(index=0)
        last = len(self._state.players) - 1
        return self._move_to(min(last, self._state.current_index + 1))

    def advance_to_next(self) -> NavigationResult:
        """Move to the next unsold player, or step forward if none is left.

        At the last index with nothing unsold ahead, the cursor stays put and
        the result signals completion.
        """

        players = self._state.players
        current = self._state.current_index
        for idx in range(current + 1, len(players)):
            if not players[idx].sold:
                return self._move_to(idx)
        if current < len(players) - 1:
            return self.advance_next()
        return NavigationResult(
            index=current,
            failure=_fail(FailureKind.AUCTION_COMPLETE, "Auction complete!"),
        )

    def jump_to(self, index: int) -> NavigationResult:
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(self._state.players):
            return NavigationResult(
                index=self._state.current_index,
                failure=_fail(FailureKind.INVALID_REFERENCE, f"No player at index {index!r}."),
            )
        return self._move_to(index)
