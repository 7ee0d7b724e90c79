from __future__ import annotations

from typing import Any, List, Literal

from pydantic import BaseModel, Field, StrictInt


# Passed to the engine untouched; lax coercion would turn true into 1.
BidAmount = Any


class AwardRequest(BaseModel):
    captain_index: StrictInt
    amount: BidAmount = None
    advance: bool = Field(default=True, description="Move to the next unsold player after a successful award")


class BestAwardRequest(BaseModel):
    amount: BidAmount = None
    advance: bool = True


class PlayerResponse(BaseModel):
    index: int
    name: str
    position: str
    photo: str | None
    rating: int | float
    sold: bool
    sold_price: int | None
    awarded_to: str | None


class RosterEntryResponse(BaseModel):
    name: str
    position: str
    rating: int | float
    price: int


class CaptainResponse(BaseModel):
    index: int
    name: str
    team_name: str
    budget: int
    initial_budget: int
    spent: int
    team_count: int
    team_size: int
    full: bool
    roster: List[RosterEntryResponse]


class NavigationResponse(BaseModel):
    index: int
    moved: bool
    complete: bool = False
    message: str | None = None
    warning: str | None = None
    player: PlayerResponse | None = None


class AwardResponse(BaseModel):
    player: PlayerResponse
    captain: CaptainResponse
    amount: int
    message: str
    warning: str | None = None
    navigation: NavigationResponse | None = None


class SummaryResponse(BaseModel):
    total_players: int
    sold_players: int
    remaining_players: int
    current_index: int
    full_teams: int
    complete: bool


class SessionResponse(BaseModel):
    status: Literal["active", "pending_restore"]
    saved_at: str | None = None
    current_index: int | None = None
    total_players: int | None = None
    sold_players: int | None = None
