from .betting import BetService, create_bet_service

__all__ = [
    "BetService",
    "create_bet_service",
]
