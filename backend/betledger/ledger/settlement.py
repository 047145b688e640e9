"""Event settlement: apply one outcome to every open bet on an event."""

import logging

from pydantic import BaseModel, Field

from betledger.ledger.exceptions import (
    BadRequestError,
    LedgerError,
    NotFoundError,
    PartialSettlementError,
)
from betledger.ledger.models import BetStatus, Outcome
from betledger.ledger.store import LedgerStore

logger = logging.getLogger(__name__)


class SettlementFailure(BaseModel):
    bet_id: str
    error: str


class SettlementReport(BaseModel):
    """What happened to each bet of one ``settle_event`` call."""

    event_id: str
    outcome: Outcome
    status: BetStatus
    settled: list[str] = Field(default_factory=list)
    failures: list[SettlementFailure] = Field(default_factory=list)

    @property
    def is_partial(self) -> bool:
        return bool(self.failures)


def parse_outcome(value: Outcome | str) -> Outcome:
    try:
        return Outcome(value)
    except ValueError:
        raise BadRequestError(
            f"invalid settlement result '{value}', must be 'win' or 'lose'",
            field="result",
        ) from None


class SettlementOrchestrator:
    """
    Best-effort batch settlement.

    Every open bet is attempted even when an earlier one fails. Bets that
    settled stay settled; when anything failed, ``PartialSettlementError`` is
    raised after the whole batch with the report attached and the first
    failure chained as its cause.
    """

    def __init__(self, store: LedgerStore):
        self.store = store

    def settle_event(self, event_id: str, outcome: Outcome | str) -> SettlementReport:
        outcome = parse_outcome(outcome)
        bets = self.store.find_bets_by_event(event_id)
        if not bets:
            logger.info(f"No placed bets found for event {event_id} to settle")
            raise NotFoundError("Placed Bets for Event", event_id)

        target = outcome.bet_status
        report = SettlementReport(event_id=event_id, outcome=outcome, status=target)
        first_error: LedgerError | None = None

        for bet in bets:
            try:
                self.store.settle_bet(bet.id, target)
            except LedgerError as e:
                logger.warning(f"Error settling bet {bet.id} for event {event_id}: {e}")
                report.failures.append(SettlementFailure(bet_id=bet.id, error=str(e)))
                if first_error is None:
                    first_error = e
                continue
            report.settled.append(bet.id)

        if first_error is not None:
            logger.warning(
                f"Finished settling event {event_id} with errors: "
                f"{len(report.settled)} settled, {len(report.failures)} failed"
            )
            raise PartialSettlementError(report, first_error) from first_error

        logger.info(
            f"Settled all {len(report.settled)} placed bets for event {event_id} "
            f"as {target.value}"
        )
        return report
