"""Users API routes."""

from fastapi import APIRouter, Depends, Response, status

from betledger.api.dependencies import get_bet_service
from betledger.api.schemas import BalanceResponse, CreateUserRequest
from betledger.ledger import User
from betledger.services import BetService

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", response_model=User, status_code=status.HTTP_201_CREATED)
def create_user(
    request: CreateUserRequest,
    service: BetService = Depends(get_bet_service),
):
    return service.create_user(request.user_id, request.initial_balance)


@router.get("", response_model=list[User])
def list_users(service: BetService = Depends(get_bet_service)):
    return service.list_users()


@router.get("/{user_id}", response_model=User)
def get_user(user_id: str, service: BetService = Depends(get_bet_service)):
    return service.get_user(user_id)


@router.get("/{user_id}/balance", response_model=BalanceResponse)
def get_user_balance(user_id: str, service: BetService = Depends(get_bet_service)):
    return BalanceResponse(user_id=user_id, balance=service.get_user_balance(user_id))


@router.put("/{user_id}", response_model=User)
def update_user(user_id: str, service: BetService = Depends(get_bet_service)):
    """Touch the user's modification timestamp."""
    return service.update_user(user_id)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: str, service: BetService = Depends(get_bet_service)):
    """Delete a user. Refused with 409 while the user has unsettled bets."""
    service.delete_user(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
