"""In-memory ledger of user balances and bets.

All state lives in three maps guarded by one readers-writer lock:

- ``_users``: user id -> User
- ``_bets``: bet id -> Bet
- ``_bets_by_event``: event id -> bet ids, in placement order

Every read-modify-write (debit, credit, status transition, find-or-create)
runs inside a single write section, so balance and status changes are
serializable per user and per bet. Callers only ever receive copies.
"""

import logging
import uuid
from decimal import Decimal
from typing import Any

from betledger.ledger.exceptions import (
    BadRequestError,
    ConflictError,
    InsufficientFundsError,
    LedgerInvariantError,
    NotFoundError,
)
from betledger.ledger.locks import ReadWriteLock
from betledger.ledger.models import (
    Bet,
    BetStatus,
    User,
    quantize_money,
    to_decimal,
    utcnow,
)

logger = logging.getLogger(__name__)

DEFAULT_STARTING_BALANCE = Decimal("1000.00")


def _require_id(value: str, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise BadRequestError("must be a non-empty string", field=field)
    return value


def _require_amount(value: Any, field: str, minimum: Decimal) -> Decimal:
    """Parse a positive amount and check it is strictly greater than ``minimum``."""
    try:
        amount = to_decimal(value)
    except (ArithmeticError, TypeError, ValueError):
        raise BadRequestError(f"not a number: {value!r}", field=field) from None
    if not amount.is_finite() or amount <= minimum:
        raise BadRequestError(f"must be greater than {minimum}", field=field)
    return amount


class LedgerStore:
    """Single source of truth for balances and bets."""

    def __init__(self, default_balance: Decimal | float = DEFAULT_STARTING_BALANCE):
        self.default_balance = quantize_money(to_decimal(default_balance))
        self._lock = ReadWriteLock()
        self._users: dict[str, User] = {}
        self._bets: dict[str, Bet] = {}
        self._bets_by_event: dict[str, list[str]] = {}

    # ------------------------------------------------------------------
    # Bets
    # ------------------------------------------------------------------

    def place_bet(
        self,
        user_id: str,
        event_id: str,
        odds: Any,
        stake: Any,
        create_user: bool = False,
    ) -> Bet:
        """Debit ``stake`` and record a new ``placed`` bet in one step.

        With ``create_user`` an unknown user is created with the default balance
        inside the same write section, and only once the input is valid.
        """
        _require_id(user_id, "user_id")
        _require_id(event_id, "event_id")
        odds = _require_amount(odds, "odds", Decimal("1"))
        stake = _require_amount(stake, "stake", Decimal("0"))
        if stake != quantize_money(stake):
            raise BadRequestError("must not have more than two decimal places", field="stake")
        stake = quantize_money(stake)

        with self._lock.write_locked():
            user = self._users.get(user_id)
            is_new_user = user is None
            if is_new_user:
                if not create_user:
                    raise NotFoundError("User", user_id)
                user = self._new_user(user_id)
            if user.balance < stake:
                raise InsufficientFundsError(user_id, user.balance, stake)
            if is_new_user:
                self._users[user_id] = user
                logger.info(f"Created user {user_id} on first bet")

            now = utcnow()
            bet = Bet(
                id=uuid.uuid4().hex,
                user_id=user_id,
                event_id=event_id,
                odds=odds,
                stake=stake,
                status=BetStatus.PLACED,
                created_at=now,
            )
            self._bets[bet.id] = bet
            self._bets_by_event.setdefault(event_id, []).append(bet.id)
            user.balance -= stake
            user.updated_at = now
            result = bet.model_copy()

        logger.debug(
            f"Placed bet {result.id}: user={user_id} event={event_id} "
            f"stake={stake} odds={odds}"
        )
        return result

    def get_bet(self, bet_id: str) -> Bet:
        with self._lock.read_locked():
            bet = self._bets.get(bet_id)
            if bet is None:
                raise NotFoundError("Bet", bet_id)
            return bet.model_copy()

    def find_bets_by_event(self, event_id: str) -> list[Bet]:
        """Return the event's bets that are still ``placed``; empty if none."""
        with self._lock.read_locked():
            return [
                self._bets[bet_id].model_copy()
                for bet_id in self._bets_by_event.get(event_id, ())
                if self._bets[bet_id].status is BetStatus.PLACED
            ]

    def settle_bet(self, bet_id: str, status: BetStatus) -> Bet:
        """Move a ``placed`` bet to ``won`` or ``lost``, crediting the payout on a win.

        The status check and the credit happen under the same write section,
        so of two concurrent attempts exactly one succeeds and the other gets
        ``ConflictError``.
        """
        try:
            status = BetStatus(status)
        except ValueError:
            raise BadRequestError(f"unknown bet status {status!r}", field="status") from None
        if not status.is_terminal:
            raise BadRequestError(
                f"cannot settle a bet to status '{status.value}'", field="status"
            )

        with self._lock.write_locked():
            bet = self._bets.get(bet_id)
            if bet is None:
                raise NotFoundError("Bet", bet_id)
            if bet.status is not BetStatus.PLACED:
                raise ConflictError(
                    f"bet {bet_id} already settled with status {bet.status.value}"
                )

            owner = None
            if status is BetStatus.WON:
                owner = self._users.get(bet.user_id)
                if owner is None:
                    raise LedgerInvariantError(
                        f"internal error: user {bet.user_id} not found "
                        f"for winning bet {bet_id}"
                    )

            now = utcnow()
            bet.status = status
            bet.settled_at = now
            if owner is not None:
                owner.balance += bet.payout
                owner.updated_at = now
            result = bet.model_copy()

        logger.debug(f"Settled bet {bet_id} as {status.value}")
        return result

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def _new_user(self, user_id: str, initial_balance: Any = None) -> User:
        if initial_balance is None:
            balance = self.default_balance
        else:
            try:
                balance = to_decimal(initial_balance)
            except (ArithmeticError, TypeError, ValueError):
                raise BadRequestError(
                    f"not a number: {initial_balance!r}", field="initial_balance"
                ) from None
            if not balance.is_finite() or balance < 0:
                raise BadRequestError(
                    "must be a non-negative amount", field="initial_balance"
                )
            balance = quantize_money(balance)
        now = utcnow()
        return User(id=user_id, balance=balance, created_at=now, updated_at=now)

    def create_user(self, user_id: str, initial_balance: Any = None) -> User:
        """Create a user; the default starting balance applies when none is given."""
        _require_id(user_id, "user_id")
        user = self._new_user(user_id, initial_balance)

        with self._lock.write_locked():
            if user_id in self._users:
                raise ConflictError(f"user with ID '{user_id}' already exists")
            self._users[user_id] = user
            return user.model_copy()

    def find_or_create_user(self, user_id: str) -> User:
        """Return the existing user or insert one with the default balance.

        Lookup and insert share one write section, so racing callers for the
        same new id all end up with the same record.
        """
        _require_id(user_id, "user_id")

        with self._lock.read_locked():
            existing = self._users.get(user_id)
            if existing is not None:
                return existing.model_copy()

        with self._lock.write_locked():
            user = self._users.get(user_id)
            if user is None:
                user = self._new_user(user_id)
                self._users[user_id] = user
                logger.info(f"Created user {user_id} on first use")
            return user.model_copy()

    def get_user(self, user_id: str) -> User:
        with self._lock.read_locked():
            user = self._users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return user.model_copy()

    def list_users(self) -> list[User]:
        with self._lock.read_locked():
            return [user.model_copy() for user in self._users.values()]

    def update_user(self, user_id: str) -> User:
        """Refresh the modification timestamp. Other fields are not editable here."""
        with self._lock.write_locked():
            user = self._users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            user.updated_at = utcnow()
            return user.model_copy()

    def delete_user(self, user_id: str) -> None:
        """Remove a user. Refused while the user still has ``placed`` bets."""
        with self._lock.write_locked():
            if user_id not in self._users:
                raise NotFoundError("User", user_id)
            open_bets = sum(
                1
                for bet in self._bets.values()
                if bet.user_id == user_id and bet.status is BetStatus.PLACED
            )
            if open_bets:
                raise ConflictError(
                    f"user '{user_id}' has {open_bets} unsettled bet(s) and cannot be deleted"
                )
            del self._users[user_id]

    def get_user_balance(self, user_id: str) -> Decimal:
        return self.get_user(user_id).balance
