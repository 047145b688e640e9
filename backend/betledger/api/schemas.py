"""Request and response schemas for the HTTP API."""

from typing import Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from betledger.ledger.models import Money


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        extra="ignore",
    )


class PlaceBetRequest(BaseSchema):
    """Bet placement payload."""

    user_id: str = Field(min_length=1)
    event_id: str = Field(min_length=1)
    odds: float = Field(gt=1)
    stake: float = Field(gt=0, validation_alias=AliasChoices("stake", "amount"))


class SettleEventRequest(BaseSchema):
    """Settlement payload for one event."""

    result: Literal["win", "lose"]


class CreateUserRequest(BaseSchema):
    """User creation payload."""

    user_id: str = Field(min_length=1)
    initial_balance: Optional[float] = Field(default=None, ge=0)


class BalanceResponse(BaseSchema):
    user_id: str
    balance: Money


class SettlementResponse(BaseSchema):
    """Summary of a fully successful event settlement."""

    message: str
    event_id: str
    result: str
    settled: list[str]


class ErrorResponse(BaseSchema):
    error: str
