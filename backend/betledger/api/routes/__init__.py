"""API route modules."""

from .bets import router as bets_router
from .users import router as users_router

__all__ = ["bets_router", "users_router"]
