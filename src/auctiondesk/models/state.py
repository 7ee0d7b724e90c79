"""Auction configuration and the aggregate state that gets persisted."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict

from .captain import Captain
from .player import Player


class AuctionConfig(BaseModel):
    team_size: int = Field(..., alias="teamSize", ge=1)
    initial_budget: int = Field(..., alias="initialBudget", ge=0)

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class AuctionState(BaseModel):
    """Players, captains, config and cursor: the unit of persistence."""

    players: List[Player]
    captains: List[Captain]
    config: AuctionConfig
    current_index: int = Field(..., alias="currentIndex", ge=0)

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="after")
    def _check_state(self) -> "AuctionState":
        if self.players and self.current_index >= len(self.players):
            raise ValueError(
                f"currentIndex {self.current_index} out of range for {len(self.players)} players"
            )
        if not self.players and self.current_index != 0:
            raise ValueError("currentIndex must be 0 when there are no players")
        for captain in self.captains:
            if captain.team_count > self.config.team_size:
                raise ValueError(
                    f"captain {captain.name!r} has {captain.team_count} members, "
                    f"team size is {self.config.team_size}"
                )
        return self

    def to_payload(self) -> dict:
        """JSON-compatible dict using the stored (camelCase) field names."""

        return self.model_dump(mode="json", by_alias=True)
