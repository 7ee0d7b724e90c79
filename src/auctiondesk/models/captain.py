"""Captain/team ledger records."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict

from .player import RosterEntry


class CaptainSpec(BaseModel):
    name: str = Field(..., min_length=1)
    team_name: str = Field(..., alias="teamName")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Captain(BaseModel):
    """A captain's spendable budget and acquired roster.

    The captain occupies an implicit first roster slot, so the team size is
    ``1 + len(roster)``.
    """

    name: str = Field(..., min_length=1)
    team_name: str = Field(..., alias="teamName")
    budget: int = Field(..., ge=0)
    initial_budget: int = Field(..., alias="initialBudget", ge=0)
    roster: List[RosterEntry] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="after")
    def _check_budget(self) -> "Captain":
        if self.budget > self.initial_budget:
            raise ValueError(
                f"captain {self.name!r}: budget {self.budget} exceeds initial budget {self.initial_budget}"
            )
        return self

    @property
    def team_count(self) -> int:
        return 1 + len(self.roster)

    @property
    def spent(self) -> int:
        return self.initial_budget - self.budget

    def is_full(self, team_size: int) -> bool:
        return self.team_count >= team_size
