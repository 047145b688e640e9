"""FastAPI dependencies."""

from fastapi import Request

from betledger.services import BetService


def get_bet_service(request: Request) -> BetService:
    """Return the service attached to the running application."""
    return request.app.state.bet_service
