"""Bets API routes."""

from fastapi import APIRouter, Depends, status

from betledger.api.dependencies import get_bet_service
from betledger.api.schemas import PlaceBetRequest, SettleEventRequest, SettlementResponse
from betledger.ledger import Bet
from betledger.services import BetService

router = APIRouter(prefix="/bets", tags=["Bets"])


@router.post("", response_model=Bet, status_code=status.HTTP_201_CREATED)
def place_bet(
    request: PlaceBetRequest,
    service: BetService = Depends(get_bet_service),
):
    """Place a bet; the user is created with the default balance if unknown."""
    return service.place_bet(
        request.user_id, request.event_id, request.odds, request.stake
    )


@router.get("/{bet_id}", response_model=Bet)
def get_bet(bet_id: str, service: BetService = Depends(get_bet_service)):
    """Get a bet by ID."""
    return service.get_bet(bet_id)


@router.post("/settle/{event_id}", response_model=SettlementResponse)
def settle_event(
    event_id: str,
    request: SettleEventRequest,
    service: BetService = Depends(get_bet_service),
):
    """
    Settle all placed bets for an event.

    A 409 with ``settled`` and ``failed`` lists means the settlement was
    partial: listed bets stay settled.
    """
    report = service.settle_event(event_id, request.result)
    return SettlementResponse(
        message=f"Bets for event {event_id} settled successfully",
        event_id=event_id,
        result=report.outcome.value,
        settled=report.settled,
    )
