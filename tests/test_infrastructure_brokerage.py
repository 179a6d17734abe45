"""
Tests for the brokerage SQL adapters and transaction scoping.

Uses unittest.mock to avoid requiring a live PostgreSQL instance.
Validates parameter binding, row mapping, insert/update failure
handling, and connection reuse inside a unit of work.
"""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.exc import DataError, OperationalError

from app.domain.brokerage.entities import State, TradeSide, TradeStatus
from app.domain.brokerage.errors import StorageError
from app.infrastructure.brokerage.account_repository import AccountRepositoryAdapter
from app.infrastructure.brokerage.address_repository import AddressRepositoryAdapter
from app.infrastructure.brokerage.database import (
    SqlUnitOfWork,
    apply_schema,
    connection_scope,
)
from app.infrastructure.brokerage.trade_repository import TradeRepositoryAdapter
from factories import make_account, make_address, make_trade

NOW = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


# ── Helpers ──────────────────────────────────────────────────────────


def _make_engine() -> tuple[MagicMock, MagicMock]:
    """Return a mock engine whose begin() yields a mock connection."""
    engine = MagicMock()
    conn = MagicMock()
    engine.begin.return_value.__enter__.return_value = conn
    return engine, conn


def _bound_params(conn: MagicMock) -> dict:
    """Parameters of the last execute() call."""
    return conn.execute.call_args.args[1]


def _sql(conn: MagicMock) -> str:
    return str(conn.execute.call_args.args[0])


# ══════════════════════════════════════════════════════════════════════
# Transaction scoping
# ══════════════════════════════════════════════════════════════════════


class TestSqlUnitOfWork:
    """Tests for SqlUnitOfWork and connection_scope."""

    def test_scope_outside_transaction_opens_own(self) -> None:
        engine, conn = _make_engine()
        with connection_scope(engine) as scoped:
            assert scoped is conn
        engine.begin.assert_called_once()

    def test_scope_inside_transaction_reuses_connection(self) -> None:
        engine, conn = _make_engine()
        with SqlUnitOfWork(engine).transaction():
            with connection_scope(engine) as first, connection_scope(engine) as second:
                assert first is conn
                assert second is conn
        engine.begin.assert_called_once()

    def test_nested_transaction_joins_outer(self) -> None:
        engine, _ = _make_engine()
        uow = SqlUnitOfWork(engine)
        with uow.transaction():
            with uow.transaction():
                pass
        engine.begin.assert_called_once()

    def test_connection_released_after_transaction(self) -> None:
        engine, _ = _make_engine()
        with SqlUnitOfWork(engine).transaction():
            pass
        with connection_scope(engine):
            pass
        assert engine.begin.call_count == 2

    def test_exception_propagates_to_begin_block(self) -> None:
        """engine.begin() rolls back when its block exits with an error."""
        engine, _ = _make_engine()
        with pytest.raises(RuntimeError):
            with SqlUnitOfWork(engine).transaction():
                raise RuntimeError("boom")
        exit_args = engine.begin.return_value.__exit__.call_args.args
        assert exit_args[0] is RuntimeError

    def test_apply_schema_runs_each_statement(self, tmp_path) -> None:
        engine, conn = _make_engine()
        schema = tmp_path / "schema.sql"
        schema.write_text("CREATE SCHEMA a;\nCREATE TABLE a.t (id INT);\n\n")

        apply_schema(engine, schema)

        assert conn.execute.call_count == 2


# ══════════════════════════════════════════════════════════════════════
# Accounts
# ══════════════════════════════════════════════════════════════════════


class TestAccountRepositoryAdapter:
    """Tests for AccountRepositoryAdapter."""

    def test_save_captures_generated_fields(self) -> None:
        engine, conn = _make_engine()
        account_id = uuid4()
        conn.execute.return_value.fetchone.return_value = (account_id, NOW)

        saved = AccountRepositoryAdapter(engine).save(make_account())

        assert saved.id == account_id
        assert saved.created_at == NOW
        assert _bound_params(conn)["username"] == "alice"

    def test_save_raises_when_no_row_returned(self) -> None:
        engine, conn = _make_engine()
        conn.execute.return_value.fetchone.return_value = None

        with pytest.raises(StorageError):
            AccountRepositoryAdapter(engine).save(make_account())

    def test_save_wraps_driver_errors(self) -> None:
        engine, conn = _make_engine()
        conn.execute.side_effect = DataError("INSERT", {}, Exception("too long"))

        with pytest.raises(StorageError) as exc_info:
            AccountRepositoryAdapter(engine).save(make_account())
        assert isinstance(exc_info.value.__cause__, DataError)

    def test_update_binds_address_link(self) -> None:
        engine, conn = _make_engine()
        account = make_account(id=uuid4(), address_id=uuid4())

        AccountRepositoryAdapter(engine).update(account)

        params = _bound_params(conn)
        assert params["account_uuid"] == account.id
        assert params["address_uuid"] == account.address_id

    def test_update_wraps_driver_errors(self) -> None:
        engine, conn = _make_engine()
        conn.execute.side_effect = OperationalError("UPDATE", {}, Exception("down"))

        with pytest.raises(StorageError):
            AccountRepositoryAdapter(engine).update(make_account(id=uuid4()))

    def test_find_by_id_maps_row(self) -> None:
        engine, conn = _make_engine()
        account_id = uuid4()
        conn.execute.return_value.mappings.return_value.fetchone.return_value = {
            "account_uuid": account_id,
            "username": "alice",
            "email": "a@x.com",
            "address_uuid": None,
            "created_at": NOW,
        }

        account = AccountRepositoryAdapter(engine).find_by_id(account_id)

        assert account.id == account_id
        assert account.email == "a@x.com"
        assert account.address_id is None

    def test_find_by_id_missing(self) -> None:
        engine, conn = _make_engine()
        conn.execute.return_value.mappings.return_value.fetchone.return_value = None
        assert AccountRepositoryAdapter(engine).find_by_id(uuid4()) is None


# ══════════════════════════════════════════════════════════════════════
# Addresses
# ══════════════════════════════════════════════════════════════════════


class TestAddressRepositoryAdapter:
    """Tests for AddressRepositoryAdapter."""

    def test_save_binds_state_code(self) -> None:
        engine, conn = _make_engine()
        address_id = uuid4()
        conn.execute.return_value.fetchone.return_value = (address_id,)

        saved = AddressRepositoryAdapter(engine).save(make_address(state=State.CA))

        assert saved.id == address_id
        assert _bound_params(conn)["state"] == "CA"

    def test_save_raises_when_no_row_returned(self) -> None:
        engine, conn = _make_engine()
        conn.execute.return_value.fetchone.return_value = None

        with pytest.raises(StorageError):
            AddressRepositoryAdapter(engine).save(make_address())

    def test_save_wraps_driver_errors(self) -> None:
        engine, conn = _make_engine()
        conn.execute.side_effect = OperationalError("INSERT", {}, Exception("down"))

        with pytest.raises(StorageError):
            AddressRepositoryAdapter(engine).save(make_address())

    def test_find_by_id_maps_row(self) -> None:
        engine, conn = _make_engine()
        address_id = uuid4()
        conn.execute.return_value.mappings.return_value.fetchone.return_value = {
            "address_uuid": address_id,
            "name": "Home",
            "street": "1 Main St",
            "city": "Albany",
            "state": "NY",
            "zipcode": 12207,
        }

        address = AddressRepositoryAdapter(engine).find_by_id(address_id)

        assert address.id == address_id
        assert address.city == "Albany"
        assert _bound_params(conn) == {"address_uuid": address_id}

    def test_find_by_id_missing(self) -> None:
        engine, conn = _make_engine()
        conn.execute.return_value.mappings.return_value.fetchone.return_value = None
        assert AddressRepositoryAdapter(engine).find_by_id(uuid4()) is None

    def test_find_by_account_joins_through_account(self) -> None:
        engine, conn = _make_engine()
        address_id = uuid4()
        conn.execute.return_value.mappings.return_value.fetchone.return_value = {
            "address_uuid": address_id,
            "name": "Home",
            "street": "1 Main St",
            "city": "New York",
            "state": "NY",
            "zipcode": 10001,
        }

        address = AddressRepositoryAdapter(engine).find_by_account(uuid4())

        assert address.id == address_id
        assert address.state is State.NY
        assert "JOIN brokerage.address" in _sql(conn)

    def test_delete_by_address_id(self) -> None:
        engine, conn = _make_engine()
        address_id = uuid4()

        AddressRepositoryAdapter(engine).delete(address_id)

        assert _bound_params(conn) == {"address_uuid": address_id}
        assert "DELETE FROM brokerage.address" in _sql(conn)


# ══════════════════════════════════════════════════════════════════════
# Trades
# ══════════════════════════════════════════════════════════════════════


class TestTradeRepositoryAdapter:
    """Tests for TradeRepositoryAdapter."""

    def _trade_row(self, account_id, **overrides) -> dict:
        row = {
            "trade_uuid": uuid4(),
            "account_uuid": account_id,
            "symbol": "AAPL",
            "quantity": 10,
            "side": "BUY",
            "price": Decimal("25.5000"),
            "status": "SUBMITTED",
            "created_at": NOW,
        }
        row.update(overrides)
        return row

    def test_save_takes_status_from_database(self) -> None:
        engine, conn = _make_engine()
        trade_id = uuid4()
        conn.execute.return_value.fetchone.return_value = (trade_id, "SUBMITTED", NOW)

        saved = TradeRepositoryAdapter(engine).save(make_trade(uuid4()))

        assert saved.id == trade_id
        assert saved.status is TradeStatus.SUBMITTED
        assert _bound_params(conn)["side"] == "BUY"

    def test_save_raises_when_no_row_returned(self) -> None:
        engine, conn = _make_engine()
        conn.execute.return_value.fetchone.return_value = None

        with pytest.raises(StorageError):
            TradeRepositoryAdapter(engine).save(make_trade(uuid4()))

    def test_save_wraps_driver_errors(self) -> None:
        """An out-of-range column value surfaces as StorageError, not a raw DataError."""
        engine, conn = _make_engine()
        conn.execute.side_effect = DataError("INSERT", {}, Exception("integer out of range"))

        with pytest.raises(StorageError) as exc_info:
            TradeRepositoryAdapter(engine).save(make_trade(uuid4(), quantity=10**12))
        assert isinstance(exc_info.value.__cause__, DataError)

    def test_update_binds_status(self) -> None:
        engine, conn = _make_engine()
        trade = make_trade(uuid4(), id=uuid4(), status=TradeStatus.CANCELLED)

        TradeRepositoryAdapter(engine).update(trade)

        assert _bound_params(conn)["status"] == "CANCELLED"
        assert _bound_params(conn)["trade_uuid"] == trade.id

    def test_update_wraps_driver_errors(self) -> None:
        engine, conn = _make_engine()
        conn.execute.side_effect = OperationalError("UPDATE", {}, Exception("down"))
        trade = make_trade(uuid4(), id=uuid4(), status=TradeStatus.CANCELLED)

        with pytest.raises(StorageError):
            TradeRepositoryAdapter(engine).update(trade)

    def test_row_mapping_computes_total(self) -> None:
        engine, conn = _make_engine()
        account_id = uuid4()
        conn.execute.return_value.mappings.return_value.fetchall.return_value = [
            self._trade_row(account_id, side="SELL", status="FILLED")
        ]

        trades = TradeRepositoryAdapter(engine).find_by_account(account_id)

        assert len(trades) == 1
        assert trades[0].side is TradeSide.SELL
        assert trades[0].status is TradeStatus.FILLED
        assert trades[0].total_amount == Decimal("255.00")

    def test_find_by_id_and_account_filters_on_both(self) -> None:
        engine, conn = _make_engine()
        conn.execute.return_value.mappings.return_value.fetchone.return_value = None
        trade_id, account_id = uuid4(), uuid4()

        result = TradeRepositoryAdapter(engine).find_by_id_and_account(trade_id, account_id)

        assert result is None
        assert _bound_params(conn) == {"trade_uuid": trade_id, "account_uuid": account_id}
