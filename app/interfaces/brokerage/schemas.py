"""
Pydantic schemas for brokerage API request/response validation.

These schemas enforce input validation and define the API contract.
Request bodies never carry ids, trade status or total amount: those
are assigned by the server.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Optional
from uuid import UUID

from pydantic import AfterValidator, BaseModel, Field

from app.domain.brokerage.entities import (
    Account,
    Address,
    State,
    Trade,
    TradeSide,
    TradeStatus,
)

MIN_PRICE = Decimal("0.01")
# Bounds of the trade.quantity INTEGER and trade.price NUMERIC(19, 4) columns.
MAX_QUANTITY = 2**31 - 1
PRICE_MAX_DIGITS = 19
PRICE_DECIMAL_PLACES = 4


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


NonBlankStr = Annotated[str, AfterValidator(_not_blank)]


class AddressRequest(BaseModel):
    """Address fields supplied on create/update."""

    name: NonBlankStr = Field(..., max_length=255)
    street: NonBlankStr = Field(..., max_length=255)
    city: NonBlankStr = Field(..., max_length=255)
    state: State = Field(..., description="US state or DC code, e.g. NY")
    zipcode: int = Field(..., ge=0, le=99999)

    def to_entity(self) -> Address:
        return Address(
            name=self.name,
            street=self.street,
            city=self.city,
            state=self.state,
            zipcode=self.zipcode,
        )


class AccountRequest(BaseModel):
    """Account fields supplied on create/update, with an optional address."""

    username: NonBlankStr = Field(..., max_length=255)
    email: NonBlankStr = Field(..., max_length=255)
    address: Optional[AddressRequest] = None

    def to_entity(self, account_id: Optional[UUID] = None) -> Account:
        return Account(
            id=account_id,
            username=self.username,
            email=self.email,
            address=self.address.to_entity() if self.address else None,
        )


class TradeRequest(BaseModel):
    """Trade fields supplied on submission."""

    symbol: NonBlankStr = Field(..., max_length=16)
    quantity: int = Field(..., ge=1, le=MAX_QUANTITY)
    side: TradeSide
    price: Decimal = Field(
        ...,
        ge=MIN_PRICE,
        max_digits=PRICE_MAX_DIGITS,
        decimal_places=PRICE_DECIMAL_PLACES,
        description="Limit price, minimum 0.01, at most 4 decimal places",
    )

    def to_entity(self, account_id: UUID) -> Trade:
        return Trade(
            account_id=account_id,
            symbol=self.symbol,
            quantity=self.quantity,
            side=self.side,
            price=self.price,
        )


class IdResponse(BaseModel):
    """Identifier of a newly created resource."""

    id: UUID


class AddressResponse(BaseModel):
    """An address as returned by the API."""

    id: UUID
    name: str
    street: str
    city: str
    state: State
    zipcode: int

    @classmethod
    def from_entity(cls, address: Address) -> "AddressResponse":
        return cls(
            id=address.id,
            name=address.name,
            street=address.street,
            city=address.city,
            state=address.state,
            zipcode=address.zipcode,
        )


class AccountResponse(BaseModel):
    """An account as returned by the API."""

    id: UUID
    username: str
    email: str
    address_id: Optional[UUID] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, account: Account) -> "AccountResponse":
        return cls(
            id=account.id,
            username=account.username,
            email=account.email,
            address_id=account.address_id,
            created_at=account.created_at,
        )


class TradeResponse(BaseModel):
    """A trade as returned by the API, with its derived total amount."""

    id: UUID
    account_id: UUID
    symbol: str
    quantity: int
    side: TradeSide
    price: Decimal
    status: TradeStatus
    total_amount: Decimal
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, trade: Trade) -> "TradeResponse":
        return cls(
            id=trade.id,
            account_id=trade.account_id,
            symbol=trade.symbol,
            quantity=trade.quantity,
            side=trade.side,
            price=trade.price,
            status=trade.status,
            total_amount=trade.total_amount,
            created_at=trade.created_at,
        )


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    error: str
    detail: Optional[object] = None


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    version: str
    storage_backend: str
