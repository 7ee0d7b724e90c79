"""Player records shared by the catalog loader, engine and exports."""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, Field, model_validator
from pydantic.config import ConfigDict


Rating = Union[int, float]


class PlayerSpec(BaseModel):
    """One entry of the players feed, exactly as it arrives from the source."""

    name: str = Field(..., min_length=1)
    position: str = ""
    photo: Optional[str] = None
    rating: Rating = 0

    model_config = ConfigDict(frozen=True)


class Player(BaseModel):
    """A player under auction together with its outcome fields."""

    name: str = Field(..., min_length=1)
    position: str = ""
    photo: Optional[str] = None
    rating: Rating = 0
    sold: bool = False
    sold_price: Optional[int] = Field(default=None, alias="soldPrice", ge=0)
    awarded_to: Optional[str] = Field(default=None, alias="awardedTo")

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="after")
    def _check_outcome(self) -> "Player":
        has_outcome = self.sold_price is not None and self.awarded_to is not None
        if self.sold != has_outcome:
            raise ValueError(
                f"player {self.name!r}: sold={self.sold} but "
                f"soldPrice={self.sold_price!r}, awardedTo={self.awarded_to!r}"
            )
        return self

    @classmethod
    def from_spec(cls, spec: PlayerSpec) -> "Player":
        return cls(
            name=spec.name,
            position=spec.position,
            photo=spec.photo,
            rating=spec.rating,
        )


class RosterEntry(BaseModel):
    """Snapshot of an acquired player, frozen at award time."""

    name: str
    position: str = ""
    rating: Rating = 0
    price: int = Field(..., ge=0)

    model_config = ConfigDict(frozen=True)
