"""Ledger core for Betledger - in-memory balances, bets and settlement.

This package provides:
- Records (users, bets, outcomes) as Pydantic models
- The ledger store, which owns all state and its locking
- The settlement orchestrator for settling a whole event at once
- The error taxonomy shared with the HTTP layer
"""

from .exceptions import (
    BadRequestError,
    ConflictError,
    InsufficientFundsError,
    LedgerError,
    LedgerInvariantError,
    NotFoundError,
    PartialSettlementError,
)
from .locks import ReadWriteLock
from .models import Bet, BetStatus, Outcome, User
from .settlement import (
    SettlementFailure,
    SettlementOrchestrator,
    SettlementReport,
    parse_outcome,
)
from .store import DEFAULT_STARTING_BALANCE, LedgerStore

__all__ = [
    # Records
    "Bet",
    "BetStatus",
    "Outcome",
    "User",
    # Store
    "LedgerStore",
    "ReadWriteLock",
    "DEFAULT_STARTING_BALANCE",
    # Settlement
    "SettlementFailure",
    "SettlementOrchestrator",
    "SettlementReport",
    "parse_outcome",
    # Errors
    "LedgerError",
    "NotFoundError",
    "BadRequestError",
    "InsufficientFundsError",
    "ConflictError",
    "PartialSettlementError",
    "LedgerInvariantError",
]
