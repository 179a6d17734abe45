"""
Dependency injection for the brokerage bounded context.

Provides FastAPI dependency functions that wire storage adapters
into the managers via constructor injection. These are the
composition root for the brokerage context.
"""

from dataclasses import dataclass
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.engine import Engine

from app.application.brokerage.account_manager import AccountManager
from app.application.brokerage.address_manager import AddressAssociationManager
from app.application.brokerage.trade_manager import TradeManager
from app.core.config import settings
from app.domain.brokerage.ports import (
    AccountRepository,
    AddressRepository,
    TradeRepository,
    UnitOfWork,
)
from app.infrastructure.brokerage.account_repository import AccountRepositoryAdapter
from app.infrastructure.brokerage.address_repository import AddressRepositoryAdapter
from app.infrastructure.brokerage.database import SqlUnitOfWork, create_db_engine
from app.infrastructure.brokerage.memory_storage import (
    InMemoryAccountRepository,
    InMemoryAddressRepository,
    InMemoryStore,
    InMemoryTradeRepository,
    InMemoryUnitOfWork,
)
from app.infrastructure.brokerage.trade_repository import TradeRepositoryAdapter


@dataclass(frozen=True)
class Storage:
    """The set of storage ports one request works against."""

    accounts: AccountRepository
    addresses: AddressRepository
    trades: TradeRepository
    unit_of_work: UnitOfWork


@lru_cache
def get_db_engine() -> Engine:
    """Build the process-wide SQLAlchemy engine from application settings."""
    return create_db_engine(settings.get_database_dsn(), pool_size=settings.db_pool_size)


@lru_cache
def get_memory_store() -> InMemoryStore:
    """Return the process-wide in-memory store."""
    return InMemoryStore()


def get_storage() -> Storage:
    """Build the storage adapters for the configured backend."""
    if settings.storage_backend == "memory":
        store = get_memory_store()
        return Storage(
            accounts=InMemoryAccountRepository(store),
            addresses=InMemoryAddressRepository(store),
            trades=InMemoryTradeRepository(store),
            unit_of_work=InMemoryUnitOfWork(store),
        )

    engine = get_db_engine()
    return Storage(
        accounts=AccountRepositoryAdapter(engine),
        addresses=AddressRepositoryAdapter(engine),
        trades=TradeRepositoryAdapter(engine),
        unit_of_work=SqlUnitOfWork(engine),
    )


def build_address_manager(storage: Storage) -> AddressAssociationManager:
    return AddressAssociationManager(
        account_repo=storage.accounts,
        address_repo=storage.addresses,
        unit_of_work=storage.unit_of_work,
    )


def get_address_manager(
    storage: Storage = Depends(get_storage),
) -> AddressAssociationManager:
    """Build AddressAssociationManager with its storage dependencies."""
    return build_address_manager(storage)


def get_account_manager(storage: Storage = Depends(get_storage)) -> AccountManager:
    """Build AccountManager with its storage dependencies."""
    return AccountManager(
        account_repo=storage.accounts,
        address_manager=build_address_manager(storage),
        unit_of_work=storage.unit_of_work,
    )


def get_trade_manager(storage: Storage = Depends(get_storage)) -> TradeManager:
    """Build TradeManager with its storage dependencies."""
    return TradeManager(
        trade_repo=storage.trades,
        account_repo=storage.accounts,
        unit_of_work=storage.unit_of_work,
    )
