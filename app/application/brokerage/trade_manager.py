"""
Trade lifecycle manager.

State machine: SUBMITTED -> CANCELLED. Other terminal states are set
by downstream processing and are never entered here.

Failure cases: AccountNotFoundError, TradeNotFoundError,
TradeOwnershipError, InvalidTradeStatusError.
"""

import logging
from typing import Optional
from uuid import UUID

from app.domain.brokerage.entities import Trade, TradeStatus
from app.domain.brokerage.errors import (
    AccountNotFoundError,
    InvalidTradeStatusError,
    TradeNotFoundError,
    TradeOwnershipError,
)
from app.domain.brokerage.ports import AccountRepository, TradeRepository, UnitOfWork

logger = logging.getLogger(__name__)


class TradeManager:
    """Submits, lists and cancels trades on behalf of an account."""

    def __init__(
        self,
        trade_repo: TradeRepository,
        account_repo: AccountRepository,
        unit_of_work: UnitOfWork,
    ) -> None:
        self._trade_repo = trade_repo
        self._account_repo = account_repo
        self._unit_of_work = unit_of_work

    def create(self, trade: Trade) -> Trade:
        """Submit a trade for its owning account.

        Returns:
            The persisted trade, with storage-assigned id and SUBMITTED status.

        Raises:
            AccountNotFoundError: If the owning account does not exist.
        """
        self._require_account(trade.account_id)
        saved = self._trade_repo.save(trade)
        logger.info(
            "Submitted trade=%s account=%s symbol=%s side=%s quantity=%d",
            saved.id,
            saved.account_id,
            saved.symbol,
            saved.side.value,
            saved.quantity,
        )
        return saved

    def list(self, account_id: UUID) -> list[Trade]:
        """Return all trades of an account.

        Raises:
            AccountNotFoundError: If the account does not exist.
        """
        self._require_account(account_id)
        return self._trade_repo.find_by_account(account_id)

    def find_by_id_and_account(
        self, trade_id: UUID, account_id: UUID
    ) -> Optional[Trade]:
        """Return the trade if it exists under this account, else None."""
        return self._trade_repo.find_by_id_and_account(trade_id, account_id)

    def cancel(self, account_id: UUID, trade_id: UUID) -> None:
        """Move a SUBMITTED trade to CANCELLED.

        Raises:
            AccountNotFoundError: If the account does not exist.
            TradeNotFoundError: If the trade does not exist.
            TradeOwnershipError: If the trade belongs to another account.
            InvalidTradeStatusError: If the trade is not SUBMITTED.
        """
        logger.info("Cancelling trade=%s account=%s", trade_id, account_id)
        with self._unit_of_work.transaction():
            self._require_account(account_id)
            trade = self._trade_repo.find_by_id(trade_id)
            if trade is None:
                raise TradeNotFoundError(trade_id)
            if trade.account_id != account_id:
                raise TradeOwnershipError(trade_id, account_id)
            if not trade.is_cancellable:
                raise InvalidTradeStatusError(trade_id, trade.status.value)

            trade.status = TradeStatus.CANCELLED
            self._trade_repo.update(trade)

    def _require_account(self, account_id: UUID) -> None:
        if self._account_repo.find_by_id(account_id) is None:
            raise AccountNotFoundError(account_id)
