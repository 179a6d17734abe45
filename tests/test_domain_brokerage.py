"""
Tests for the brokerage domain layer.

Tests domain entities and error classes in isolation.
No external dependencies or IO required.
"""

from decimal import Decimal
from uuid import uuid4

from app.domain.brokerage.entities import TradeStatus
from app.domain.brokerage.errors import (
    AccountNotFoundError,
    AddressAlreadyExistsError,
    ErrorKind,
    InvalidTradeStatusError,
    MissingAddressError,
    MissingIdentifierError,
    StorageError,
    TradeNotFoundError,
    TradeOwnershipError,
)
from factories import make_trade


class TestTradeEntity:
    """Tests for the Trade entity."""

    def test_total_amount_is_quantity_times_price(self) -> None:
        """quantity=10, price=25.50 gives exactly 255.00."""
        trade = make_trade(uuid4(), quantity=10, price=Decimal("25.50"))
        assert trade.total_amount == Decimal("255.00")

    def test_total_amount_keeps_decimal_precision(self) -> None:
        trade = make_trade(uuid4(), quantity=3, price=Decimal("0.10"))
        assert trade.total_amount == Decimal("0.30")
        assert str(trade.total_amount) == "0.30"

    def test_total_amount_follows_price(self) -> None:
        trade = make_trade(uuid4(), quantity=2, price=Decimal("1.00"))
        trade.price = Decimal("3.25")
        assert trade.total_amount == Decimal("6.50")

    def test_only_submitted_is_cancellable(self) -> None:
        trade = make_trade(uuid4())
        trade.status = TradeStatus.SUBMITTED
        assert trade.is_cancellable
        for status in (TradeStatus.CANCELLED, TradeStatus.FILLED, TradeStatus.REJECTED):
            trade.status = status
            assert not trade.is_cancellable


class TestDomainErrors:
    """Tests for domain error classes."""

    def test_not_found_errors_carry_id(self) -> None:
        account_id = uuid4()
        err = AccountNotFoundError(account_id)
        assert err.kind is ErrorKind.NOT_FOUND
        assert str(account_id) in err.message
        assert TradeNotFoundError(uuid4()).kind is ErrorKind.NOT_FOUND

    def test_address_already_exists_is_conflict(self) -> None:
        assert AddressAlreadyExistsError(uuid4()).kind is ErrorKind.CONFLICT

    def test_invalid_operation_errors(self) -> None:
        for err in (
            MissingAddressError(uuid4()),
            MissingIdentifierError("account"),
            TradeOwnershipError(uuid4(), uuid4()),
        ):
            assert err.kind is ErrorKind.INVALID_OPERATION

    def test_invalid_trade_status_message(self) -> None:
        err = InvalidTradeStatusError(uuid4(), "CANCELLED")
        assert err.kind is ErrorKind.INVALID_TRADE_STATUS
        assert "CANCELLED" in err.message

    def test_storage_error_kind(self) -> None:
        assert StorageError("Insert failed").kind is ErrorKind.STORAGE_FAILURE
