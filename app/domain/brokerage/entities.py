"""
Domain entities for the brokerage bounded context.

Entities represent core business objects with identity and lifecycle.
They contain no framework imports and no IO operations.
Identifiers and timestamps are assigned by storage on insert.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID


class State(Enum):
    """US region codes accepted on an address."""

    AL = "AL"
    AK = "AK"
    AZ = "AZ"
    AR = "AR"
    CA = "CA"
    CO = "CO"
    CT = "CT"
    DE = "DE"
    DC = "DC"
    FL = "FL"
    GA = "GA"
    HI = "HI"
    ID = "ID"
    IL = "IL"
    IN = "IN"
    IA = "IA"
    KS = "KS"
    KY = "KY"
    LA = "LA"
    ME = "ME"
    MD = "MD"
    MA = "MA"
    MI = "MI"
    MN = "MN"
    MS = "MS"
    MO = "MO"
    MT = "MT"
    NE = "NE"
    NV = "NV"
    NH = "NH"
    NJ = "NJ"
    NM = "NM"
    NY = "NY"
    NC = "NC"
    ND = "ND"
    OH = "OH"
    OK = "OK"
    OR = "OR"
    PA = "PA"
    RI = "RI"
    SC = "SC"
    SD = "SD"
    TN = "TN"
    TX = "TX"
    UT = "UT"
    VT = "VT"
    VA = "VA"
    WA = "WA"
    WV = "WV"
    WI = "WI"
    WY = "WY"


class TradeSide(Enum):
    """Direction of a trade."""

    BUY = "BUY"
    SELL = "SELL"


class TradeStatus(Enum):
    """Trade status.

    Only SUBMITTED and CANCELLED are managed here. FILLED and REJECTED
    are set by downstream settlement processing.
    """

    SUBMITTED = "SUBMITTED"
    CANCELLED = "CANCELLED"
    FILLED = "FILLED"
    REJECTED = "REJECTED"


@dataclass
class Address:
    """A postal address, owned by at most one account."""

    name: str
    street: str
    city: str
    state: State
    zipcode: int
    id: Optional[UUID] = None


@dataclass
class Account:
    """A trading account with at most one linked address.

    `address` is only populated on incoming requests that embed an
    address; the persisted link is `address_id`.
    """

    username: str
    email: str
    id: Optional[UUID] = None
    address_id: Optional[UUID] = None
    address: Optional[Address] = None
    created_at: Optional[datetime] = None


@dataclass
class Trade:
    """A stock trade submitted on behalf of an account."""

    account_id: UUID
    symbol: str
    quantity: int
    side: TradeSide
    price: Decimal
    id: Optional[UUID] = None
    status: Optional[TradeStatus] = None
    created_at: Optional[datetime] = None

    @property
    def total_amount(self) -> Decimal:
        """Return quantity times price, exact to the price's precision."""
        return Decimal(self.quantity) * self.price

    @property
    def is_cancellable(self) -> bool:
        """A trade can only be cancelled while still SUBMITTED."""
        return self.status is TradeStatus.SUBMITTED
