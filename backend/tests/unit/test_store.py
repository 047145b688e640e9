"""Unit tests for the ledger store."""

from decimal import Decimal

import pytest

from betledger.ledger import (
    BadRequestError,
    BetStatus,
    ConflictError,
    InsufficientFundsError,
    LedgerInvariantError,
    LedgerStore,
    NotFoundError,
)


def test_create_user_uses_default_balance(store: LedgerStore) -> None:
    user = store.create_user("u1")
    assert user.id == "u1"
    assert user.balance == Decimal("1000.00")


def test_create_user_with_initial_balance(store: LedgerStore) -> None:
    user = store.create_user("u1", 250.5)
    assert user.balance == Decimal("250.50")


def test_create_user_duplicate_conflicts(store: LedgerStore) -> None:
    store.create_user("u1")
    with pytest.raises(ConflictError):
        store.create_user("u1")


def test_create_user_rejects_negative_balance(store: LedgerStore) -> None:
    with pytest.raises(BadRequestError):
        store.create_user("u1", -5)


def test_place_bet_debits_balance_and_records_bet(store: LedgerStore) -> None:
    store.create_user("u1")

    bet = store.place_bet("u1", "e1", 2.0, 100)

    assert bet.status is BetStatus.PLACED
    assert bet.settled_at is None
    assert store.get_user_balance("u1") == Decimal("900.00")
    assert store.get_bet(bet.id).stake == Decimal("100.00")


def test_place_bet_generates_unique_ids(store: LedgerStore) -> None:
    store.create_user("u1")
    ids = {store.place_bet("u1", "e1", 1.5, 1).id for _ in range(20)}
    assert len(ids) == 20


def test_place_bet_unknown_user_not_found(store: LedgerStore) -> None:
    with pytest.raises(NotFoundError):
        store.place_bet("ghost", "e1", 2.0, 10)
    assert store.find_bets_by_event("e1") == []


def test_place_bet_insufficient_funds_leaves_balance(store: LedgerStore) -> None:
    store.create_user("u1", 50)

    with pytest.raises(InsufficientFundsError) as exc_info:
        store.place_bet("u1", "e1", 2.0, 100)

    assert isinstance(exc_info.value, BadRequestError)
    assert store.get_user_balance("u1") == Decimal("50.00")
    assert store.find_bets_by_event("e1") == []


def test_place_bet_exact_balance_allowed(store: LedgerStore) -> None:
    store.create_user("u1", 100)
    store.place_bet("u1", "e1", 2.0, 100)
    assert store.get_user_balance("u1") == Decimal("0.00")


@pytest.mark.parametrize(
    "odds, stake",
    [(1.0, 10), (0.5, 10), (2.0, 0), (2.0, -1), ("abc", 10), (float("nan"), 10)],
)
def test_place_bet_validation(store: LedgerStore, odds, stake) -> None:
    store.create_user("u1")
    with pytest.raises(BadRequestError):
        store.place_bet("u1", "e1", odds, stake)
    assert store.get_user_balance("u1") == Decimal("1000.00")


def test_returned_records_are_copies(store: LedgerStore) -> None:
    store.create_user("u1")
    bet = store.place_bet("u1", "e1", 2.0, 100)

    bet.status = BetStatus.WON
    user = store.get_user("u1")
    user.balance = Decimal("0")

    assert store.get_bet(bet.id).status is BetStatus.PLACED
    assert store.get_user_balance("u1") == Decimal("900.00")


def test_find_bets_by_event_only_open(store: LedgerStore) -> None:
    store.create_user("u1")
    first = store.place_bet("u1", "e1", 2.0, 10)
    second = store.place_bet("u1", "e1", 3.0, 10)
    store.place_bet("u1", "e2", 3.0, 10)

    store.settle_bet(first.id, BetStatus.LOST)

    open_bets = store.find_bets_by_event("e1")
    assert [b.id for b in open_bets] == [second.id]
    assert store.find_bets_by_event("unknown") == []


def test_settle_bet_won_credits_payout(store: LedgerStore) -> None:
    store.create_user("u1")
    bet = store.place_bet("u1", "e1", 2.5, 100)

    settled = store.settle_bet(bet.id, BetStatus.WON)

    assert settled.status is BetStatus.WON
    assert settled.settled_at is not None
    assert store.get_user_balance("u1") == Decimal("1150.00")


def test_settle_bet_lost_keeps_balance(store: LedgerStore) -> None:
    store.create_user("u1")
    bet = store.place_bet("u1", "e1", 2.5, 100)

    store.settle_bet(bet.id, BetStatus.LOST)

    assert store.get_bet(bet.id).status is BetStatus.LOST
    assert store.get_user_balance("u1") == Decimal("900.00")


def test_settle_bet_twice_conflicts_and_credits_once(store: LedgerStore) -> None:
    store.create_user("u1")
    bet = store.place_bet("u1", "e1", 2.0, 100)

    store.settle_bet(bet.id, BetStatus.WON)
    with pytest.raises(ConflictError):
        store.settle_bet(bet.id, BetStatus.WON)
    with pytest.raises(ConflictError):
        store.settle_bet(bet.id, BetStatus.LOST)

    assert store.get_bet(bet.id).status is BetStatus.WON
    assert store.get_user_balance("u1") == Decimal("1100.00")


def test_settle_bet_rejects_placed_target(store: LedgerStore) -> None:
    store.create_user("u1")
    bet = store.place_bet("u1", "e1", 2.0, 100)
    with pytest.raises(BadRequestError):
        store.settle_bet(bet.id, BetStatus.PLACED)


def test_settle_unknown_bet_not_found(store: LedgerStore) -> None:
    with pytest.raises(NotFoundError):
        store.settle_bet("missing", BetStatus.WON)


def test_winning_bet_without_owner_is_internal_error(store: LedgerStore) -> None:
    store.create_user("u1")
    bet = store.place_bet("u1", "e1", 2.0, 100)
    # Simulate corruption: the owner vanished behind the store's back.
    del store._users["u1"]

    with pytest.raises(LedgerInvariantError):
        store.settle_bet(bet.id, BetStatus.WON)

    assert store.get_bet(bet.id).status is BetStatus.PLACED


def test_update_user_refreshes_timestamp(store: LedgerStore) -> None:
    created = store.create_user("u1")
    updated = store.update_user("u1")
    assert updated.updated_at >= created.updated_at
    assert updated.balance == created.balance
    with pytest.raises(NotFoundError):
        store.update_user("ghost")


def test_list_and_get_users(store: LedgerStore) -> None:
    store.create_user("u1")
    store.create_user("u2")
    assert sorted(u.id for u in store.list_users()) == ["u1", "u2"]
    with pytest.raises(NotFoundError):
        store.get_user("ghost")
    with pytest.raises(NotFoundError):
        store.get_user_balance("ghost")


def test_delete_user_blocked_by_open_bets(store: LedgerStore) -> None:
    store.create_user("u1")
    bet = store.place_bet("u1", "e1", 2.0, 100)

    with pytest.raises(ConflictError):
        store.delete_user("u1")

    store.settle_bet(bet.id, BetStatus.LOST)
    store.delete_user("u1")

    with pytest.raises(NotFoundError):
        store.get_user("u1")
    with pytest.raises(NotFoundError):
        store.delete_user("u1")


def test_find_or_create_user(store: LedgerStore) -> None:
    created = store.find_or_create_user("u1")
    assert created.balance == Decimal("1000.00")

    store.place_bet("u1", "e1", 2.0, 100)
    found = store.find_or_create_user("u1")
    assert found.balance == Decimal("900.00")
    assert len(store.list_users()) == 1


def test_payout_is_rounded_to_cents(store: LedgerStore) -> None:
    store.create_user("u1", 10)
    bet = store.place_bet("u1", "e1", 1.333, 10)
    store.settle_bet(bet.id, BetStatus.WON)
    assert store.get_user_balance("u1") == Decimal("13.33")


def test_place_bet_rejects_sub_cent_stake(store: LedgerStore) -> None:
    store.create_user("u1")

    with pytest.raises(BadRequestError):
        store.place_bet("u1", "e1", 2.0, 0.005)
    with pytest.raises(BadRequestError):
        store.place_bet("u1", "e1", 2.0, "10.001")

    assert store.get_user_balance("u1") == Decimal("1000.00")
    assert store.find_bets_by_event("e1") == []


def test_place_bet_keeps_two_decimal_stake(store: LedgerStore) -> None:
    store.create_user("u1")
    bet = store.place_bet("u1", "e1", 2.0, 10.25)
    assert bet.stake == Decimal("10.25")
    assert store.get_user_balance("u1") == Decimal("989.75")


def test_place_bet_create_user_inserts_only_on_success(store: LedgerStore) -> None:
    with pytest.raises(InsufficientFundsError):
        store.place_bet("rich-dreams", "e1", 2.0, 5000, create_user=True)
    assert store.list_users() == []

    bet = store.place_bet("newcomer", "e1", 2.0, 100, create_user=True)

    assert bet.user_id == "newcomer"
    assert store.get_user_balance("newcomer") == Decimal("900.00")
