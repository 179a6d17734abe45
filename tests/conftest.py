"""
Shared fixtures: fresh in-memory storage and managers per test.
"""

import pytest
from fastapi.testclient import TestClient

from app.application.brokerage.account_manager import AccountManager
from app.application.brokerage.address_manager import AddressAssociationManager
from app.application.brokerage.trade_manager import TradeManager
from app.infrastructure.brokerage.memory_storage import (
    InMemoryAccountRepository,
    InMemoryAddressRepository,
    InMemoryStore,
    InMemoryTradeRepository,
    InMemoryUnitOfWork,
)
from app.interfaces.brokerage.dependencies import Storage, get_storage
from app.main import app


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def storage(store: InMemoryStore) -> Storage:
    return Storage(
        accounts=InMemoryAccountRepository(store),
        addresses=InMemoryAddressRepository(store),
        trades=InMemoryTradeRepository(store),
        unit_of_work=InMemoryUnitOfWork(store),
    )


@pytest.fixture
def address_manager(storage: Storage) -> AddressAssociationManager:
    return AddressAssociationManager(
        storage.accounts, storage.addresses, storage.unit_of_work
    )


@pytest.fixture
def account_manager(
    storage: Storage, address_manager: AddressAssociationManager
) -> AccountManager:
    return AccountManager(storage.accounts, address_manager, storage.unit_of_work)


@pytest.fixture
def trade_manager(storage: Storage) -> TradeManager:
    return TradeManager(storage.trades, storage.accounts, storage.unit_of_work)


@pytest.fixture
def client(storage: Storage):
    """TestClient whose requests all hit the test's in-memory storage."""
    app.dependency_overrides[get_storage] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()
