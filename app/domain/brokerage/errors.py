"""
Domain-specific errors for the brokerage bounded context.

All errors raised from the domain and application layers are defined here.
Each error carries an ErrorKind tag; the interface layer maps the tag
to an HTTP status. No framework imports allowed.
"""

from enum import Enum
from uuid import UUID


class ErrorKind(Enum):
    """Category of a brokerage failure."""

    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INVALID_OPERATION = "invalid_operation"
    INVALID_TRADE_STATUS = "invalid_trade_status"
    STORAGE_FAILURE = "storage_failure"


class BrokerageDomainError(Exception):
    """Base error for all brokerage domain errors."""

    kind: ErrorKind = ErrorKind.INVALID_OPERATION

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class EntityNotFoundError(BrokerageDomainError):
    """Raised when a referenced entity does not exist in storage."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str, entity_id: UUID) -> None:
        super().__init__(f"Invalid id for {entity} [{entity_id}]")
        self.entity = entity
        self.entity_id = entity_id


class AccountNotFoundError(EntityNotFoundError):
    """Raised when an account id does not exist."""

    def __init__(self, account_id: UUID) -> None:
        super().__init__("account", account_id)
        self.account_id = account_id


class TradeNotFoundError(EntityNotFoundError):
    """Raised when a trade id does not exist."""

    def __init__(self, trade_id: UUID) -> None:
        super().__init__("trade", trade_id)
        self.trade_id = trade_id


class AddressAlreadyExistsError(BrokerageDomainError):
    """Raised when creating an address for an account that already has one."""

    kind = ErrorKind.CONFLICT

    def __init__(self, account_id: UUID) -> None:
        super().__init__(f"Address already exists for this account {account_id}")
        self.account_id = account_id


class InvalidOperationError(BrokerageDomainError):
    """Raised when a state precondition of an operation is violated."""

    kind = ErrorKind.INVALID_OPERATION


class MissingAddressError(InvalidOperationError):
    """Raised when an operation needs a linked address and there is none."""

    def __init__(self, account_id: UUID) -> None:
        super().__init__(f"There's no address for this account {account_id}")
        self.account_id = account_id


class MissingIdentifierError(InvalidOperationError):
    """Raised when an update is requested without the entity id."""

    def __init__(self, entity: str) -> None:
        super().__init__(f"In order to update the {entity} you must provide its id")
        self.entity = entity


class TradeOwnershipError(InvalidOperationError):
    """Raised when a trade is accessed through an account that does not own it."""

    def __init__(self, trade_id: UUID, account_id: UUID) -> None:
        super().__init__(
            f"Trade {trade_id} doesn't belong to account {account_id}"
        )
        self.trade_id = trade_id
        self.account_id = account_id


class InvalidTradeStatusError(BrokerageDomainError):
    """Raised when cancelling a trade that is not SUBMITTED."""

    kind = ErrorKind.INVALID_TRADE_STATUS

    def __init__(self, trade_id: UUID, status: str) -> None:
        super().__init__(
            f"Trade {trade_id} is {status}; only SUBMITTED trades can be cancelled"
        )
        self.trade_id = trade_id
        self.status = status


class StorageError(BrokerageDomainError):
    """Raised when an insert or update did not complete."""

    kind = ErrorKind.STORAGE_FAILURE
