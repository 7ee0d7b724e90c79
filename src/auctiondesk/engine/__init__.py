"""Auction transaction engine."""

from .service import AuctionEngine, coerce_bid
from .types import (
    AuctionFailure,
    AuctionSummary,
    AwardResult,
    FailureKind,
    NavigationResult,
)

__all__ = [
    "AuctionEngine",
    "AuctionFailure",
    "AuctionSummary",
    "AwardResult",
    "FailureKind",
    "NavigationResult",
    "coerce_bid",
]
