"""Shared fixtures."""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from betledger.api import create_app
from betledger.config import Settings
from betledger.ledger import LedgerStore
from betledger.services import BetService


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(_env_file=None, data_dir=tmp_path, logfire_token="")


@pytest.fixture
def store() -> LedgerStore:
    return LedgerStore(default_balance=Decimal("1000"))


@pytest.fixture
def service(store: LedgerStore) -> BetService:
    return BetService(store)


@pytest.fixture
def client(settings: Settings, service: BetService):
    app = create_app(settings, service)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
