"""
Adapter: Trade repository.

Implements TradeRepository port.
Reads/writes the brokerage.trade table. The database assigns id,
status (SUBMITTED) and created_at on insert.
"""

import logging
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from app.domain.brokerage.entities import Trade, TradeSide, TradeStatus
from app.domain.brokerage.errors import StorageError
from app.domain.brokerage.ports import TradeRepository
from app.infrastructure.brokerage.database import connection_scope

logger = logging.getLogger(__name__)

_SELECT_TRADE = """
    SELECT trade_uuid, account_uuid, symbol, quantity, side, price, status, created_at
    FROM brokerage.trade
"""


def _row_to_trade(row: Any) -> Trade:
    """Map a trade row to the Trade entity."""
    return Trade(
        id=row["trade_uuid"],
        account_id=row["account_uuid"],
        symbol=row["symbol"],
        quantity=row["quantity"],
        side=TradeSide(row["side"]),
        price=Decimal(str(row["price"])),
        status=TradeStatus(row["status"]),
        created_at=row["created_at"],
    )


class TradeRepositoryAdapter(TradeRepository):
    """PostgreSQL adapter for the brokerage.trade table."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def save(self, trade: Trade) -> Trade:
        """Insert a trade and capture the server-assigned fields."""
        query = text(
            """
            INSERT INTO brokerage.trade (account_uuid, symbol, quantity, side, price)
            VALUES (:account_uuid, :symbol, :quantity, :side, :price)
            RETURNING trade_uuid, status, created_at
            """
        )
        try:
            with connection_scope(self._engine) as conn:
                row = conn.execute(
                    query,
                    {
                        "account_uuid": trade.account_id,
                        "symbol": trade.symbol,
                        "quantity": trade.quantity,
                        "side": trade.side.value,
                        "price": trade.price,
                    },
                ).fetchone()
        except SQLAlchemyError as exc:
            logger.warning("Insert of trade record failed: account=%s", trade.account_id)
            raise StorageError("Insert failed for trade") from exc

        if row is None:
            logger.warning("Insert of trade record failed: account=%s", trade.account_id)
            raise StorageError("Insert failed for trade")

        trade.id = row[0]
        trade.status = TradeStatus(row[1])
        trade.created_at = row[2]
        logger.info("Inserted trade record %s with status %s.", trade.id, trade.status.value)
        return trade

    def update(self, trade: Trade) -> None:
        """Overwrite the mutable columns of a trade. Owner never changes."""
        query = text(
            """
            UPDATE brokerage.trade SET
                symbol = :symbol,
                quantity = :quantity,
                side = :side,
                price = :price,
                status = :status
            WHERE trade_uuid = :trade_uuid
            """
        )
        try:
            with connection_scope(self._engine) as conn:
                conn.execute(
                    query,
                    {
                        "symbol": trade.symbol,
                        "quantity": trade.quantity,
                        "side": trade.side.value,
                        "price": trade.price,
                        "status": trade.status.value,
                        "trade_uuid": trade.id,
                    },
                )
        except SQLAlchemyError as exc:
            logger.warning("Update of trade record %s failed.", trade.id)
            raise StorageError("Update failed for trade") from exc
        logger.debug("Updated trade record %s.", trade.id)

    def find_by_id(self, trade_id: UUID) -> Optional[Trade]:
        """Return a trade by id, or None."""
        query = text(_SELECT_TRADE + " WHERE trade_uuid = :trade_uuid")
        with connection_scope(self._engine) as conn:
            row = conn.execute(query, {"trade_uuid": trade_id}).mappings().fetchone()

        if row is None:
            logger.debug("No trade found for id %s", trade_id)
            return None
        return _row_to_trade(row)

    def find_by_account(self, account_id: UUID) -> list[Trade]:
        """Return all trades of an account in insertion order."""
        query = text(
            _SELECT_TRADE + " WHERE account_uuid = :account_uuid ORDER BY created_at ASC"
        )
        with connection_scope(self._engine) as conn:
            rows = conn.execute(query, {"account_uuid": account_id}).mappings().fetchall()
        return [_row_to_trade(r) for r in rows]

    def find_by_id_and_account(
        self, trade_id: UUID, account_id: UUID
    ) -> Optional[Trade]:
        """Return a trade only if it belongs to the given account."""
        query = text(
            _SELECT_TRADE
            + " WHERE trade_uuid = :trade_uuid AND account_uuid = :account_uuid"
        )
        with connection_scope(self._engine) as conn:
            row = conn.execute(
                query, {"trade_uuid": trade_id, "account_uuid": account_id}
            ).mappings().fetchone()

        if row is None:
            logger.debug("No trade found for id %s on account %s", trade_id, account_id)
            return None
        return _row_to_trade(row)
