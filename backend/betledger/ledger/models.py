"""Ledger records: users, bets and settlement outcomes."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, Field, PlainSerializer

CENT = Decimal("0.01")

# Balances and stakes are Decimal in memory and plain JSON numbers on the wire.
Money = Annotated[
    Decimal, PlainSerializer(lambda v: float(v), return_type=float, when_used="json")
]


def to_decimal(value: Any) -> Decimal:
    """Convert a number to Decimal without picking up float representation noise."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BetStatus(str, Enum):
    PLACED = "placed"
    WON = "won"
    LOST = "lost"

    @property
    def is_terminal(self) -> bool:
        return self is not BetStatus.PLACED


class Outcome(str, Enum):
    """Event result applied to every open bet on the event."""

    WIN = "win"
    LOSE = "lose"

    @property
    def bet_status(self) -> BetStatus:
        return BetStatus.WON if self is Outcome.WIN else BetStatus.LOST


class User(BaseModel):
    id: str
    balance: Money
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Bet(BaseModel):
    id: str
    user_id: str
    event_id: str
    odds: Money
    stake: Money
    status: BetStatus = BetStatus.PLACED
    created_at: datetime = Field(default_factory=utcnow)
    settled_at: datetime | None = None

    @property
    def payout(self) -> Decimal:
        """Amount credited to the owner when the bet wins."""
        return quantize_money(self.stake * self.odds)
