"""Bet placement, settlement and user management service."""

import logging
from decimal import Decimal
from typing import Any

from betledger.config import Settings
from betledger.ledger import (
    Bet,
    LedgerError,
    LedgerStore,
    Outcome,
    SettlementOrchestrator,
    SettlementReport,
    User,
    parse_outcome,
)

logger = logging.getLogger(__name__)


class BetService:
    """
    Entry point for callers of the ledger.

    Resolves users before placement, validates the settlement result and
    logs every outcome. Ledger errors are logged and re-raised unchanged so
    the HTTP layer can map them.
    """

    def __init__(self, store: LedgerStore):
        self.store = store
        self.settlement = SettlementOrchestrator(store)

    def place_bet(self, user_id: str, event_id: str, odds: Any, stake: Any) -> Bet:
        """
        Place a bet for a user, creating the user on first use.

        Process:
        1. Validate ids, odds and stake
        2. Find or create the user (default starting balance)
        3. Debit the stake and record the bet

        All three run as one store operation, so a rejected bet creates no user.
        """
        try:
            bet = self.store.place_bet(user_id, event_id, odds, stake, create_user=True)
        except LedgerError as e:
            logger.warning(f"Error placing bet for user {user_id}: {e}")
            raise

        logger.info(
            f"Bet placed: id={bet.id} user={bet.user_id} event={bet.event_id} "
            f"stake={bet.stake} odds={bet.odds}"
        )
        return bet

    def get_bet(self, bet_id: str) -> Bet:
        return self.store.get_bet(bet_id)

    def settle_event(self, event_id: str, result: Outcome | str) -> SettlementReport:
        """Settle every placed bet on an event with ``result`` ("win" or "lose")."""
        try:
            outcome = parse_outcome(result)
            return self.settlement.settle_event(event_id, outcome)
        except LedgerError as e:
            logger.warning(f"Error settling event {event_id}: {e}")
            raise

    def create_user(self, user_id: str, initial_balance: Any = None) -> User:
        try:
            user = self.store.create_user(user_id, initial_balance)
        except LedgerError as e:
            logger.warning(f"Error creating user {user_id}: {e}")
            raise
        logger.info(f"User created: id={user.id} balance={user.balance}")
        return user

    def get_user(self, user_id: str) -> User:
        return self.store.get_user(user_id)

    def list_users(self) -> list[User]:
        users = self.store.list_users()
        logger.debug(f"Retrieved {len(users)} users")
        return users

    def update_user(self, user_id: str) -> User:
        user = self.store.update_user(user_id)
        logger.info(f"User updated: id={user_id}")
        return user

    def delete_user(self, user_id: str) -> None:
        try:
            self.store.delete_user(user_id)
        except LedgerError as e:
            logger.warning(f"Error deleting user {user_id}: {e}")
            raise
        logger.info(f"User deleted: id={user_id}")

    def get_user_balance(self, user_id: str) -> Decimal:
        return self.store.get_user_balance(user_id)


def create_bet_service(settings: Settings) -> BetService:
    """Build a service over a fresh, empty ledger."""
    store = LedgerStore(default_balance=settings.ledger.default_balance)
    return BetService(store)
