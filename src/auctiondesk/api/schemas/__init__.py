"""Pydantic models for API I/O."""

from .auction import (
    AwardRequest,
    AwardResponse,
    BestAwardRequest,
    CaptainResponse,
    NavigationResponse,
    PlayerResponse,
    RosterEntryResponse,
    SessionResponse,
    SummaryResponse,
)

__all__ = [
    "AwardRequest",
    "AwardResponse",
    "BestAwardRequest",
    "CaptainResponse",
    "NavigationResponse",
    "PlayerResponse",
    "RosterEntryResponse",
    "SessionResponse",
    "SummaryResponse",
]
