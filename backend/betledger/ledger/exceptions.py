"""Ledger error taxonomy.

Every failure that crosses the ledger boundary is one of these. The HTTP layer
maps them to status codes via ``status_code``; anything else is a 500.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from betledger.ledger.settlement import SettlementReport


class LedgerError(Exception):
    """Base exception for ledger errors."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(LedgerError):
    """Entity does not exist."""

    status_code = 404

    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} with ID '{entity_id}' not found")
        self.entity = entity
        self.entity_id = entity_id


class BadRequestError(LedgerError):
    """Caller supplied an invalid value."""

    status_code = 400

    def __init__(self, message: str, field: str | None = None):
        if field:
            text = f"bad request: invalid field '{field}' - {message}"
        else:
            text = f"bad request: {message}"
        super().__init__(text)
        self.field = field


class InsufficientFundsError(BadRequestError):
    """Balance does not cover the stake."""

    def __init__(self, user_id: str, balance: Decimal, required: Decimal):
        super().__init__(
            f"insufficient balance for user '{user_id}': "
            f"current {balance:.2f}, required {required:.2f}"
        )
        self.user_id = user_id
        self.balance = balance
        self.required = required


class ConflictError(LedgerError):
    """State already changed, e.g. a bet that is already settled."""

    status_code = 409

    def __init__(self, message: str):
        super().__init__(f"conflict: {message}")


class PartialSettlementError(LedgerError):
    """Some bets of an event failed to settle.

    Bets listed in ``report.settled`` stay settled; nothing is rolled back.
    ``first_error`` is the first per-bet failure and sets ``status_code``, so
    an invariant violation inside the batch is still an internal error.
    """

    def __init__(self, report: SettlementReport, first_error: LedgerError):
        super().__init__(
            f"event '{report.event_id}' settled partially: "
            f"{len(report.settled)} settled, {len(report.failures)} failed; "
            f"some bets may be unsettled (first error: {first_error.message})"
        )
        self.report = report
        self.first_error = first_error
        self.status_code = first_error.status_code


class LedgerInvariantError(LedgerError):
    """Internal state is inconsistent. Indicates a bug, not a caller mistake."""

    pass
