"""
Adapter: Account repository.

Implements AccountRepository port.
Reads/writes the brokerage.account table.
"""

import logging
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from app.domain.brokerage.entities import Account
from app.domain.brokerage.errors import StorageError
from app.domain.brokerage.ports import AccountRepository
from app.infrastructure.brokerage.database import connection_scope

logger = logging.getLogger(__name__)

_SELECT_ACCOUNT = """
    SELECT account_uuid, username, email, address_uuid, created_at
    FROM brokerage.account
"""


def _row_to_account(row: Any) -> Account:
    """Map an account row to the Account entity."""
    return Account(
        id=row["account_uuid"],
        username=row["username"],
        email=row["email"],
        address_id=row["address_uuid"],
        created_at=row["created_at"],
    )


class AccountRepositoryAdapter(AccountRepository):
    """PostgreSQL adapter for the brokerage.account table."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def save(self, account: Account) -> Account:
        """Insert an account and capture its generated id and timestamp."""
        query = text(
            """
            INSERT INTO brokerage.account (username, email, address_uuid)
            VALUES (:username, :email, :address_uuid)
            RETURNING account_uuid, created_at
            """
        )
        try:
            with connection_scope(self._engine) as conn:
                row = conn.execute(
                    query,
                    {
                        "username": account.username,
                        "email": account.email,
                        "address_uuid": account.address_id,
                    },
                ).fetchone()
        except SQLAlchemyError as exc:
            logger.warning("Insert of account record failed: username=%s", account.username)
            raise StorageError("Insert failed for account") from exc

        if row is None:
            logger.warning("Insert of account record failed: username=%s", account.username)
            raise StorageError("Insert failed for account")

        account.id = row[0]
        account.created_at = row[1]
        logger.info("Inserted account record %s.", account.id)
        return account

    def update(self, account: Account) -> None:
        """Overwrite username, email and address link of an account."""
        query = text(
            """
            UPDATE brokerage.account SET
                username = :username,
                email = :email,
                address_uuid = :address_uuid
            WHERE account_uuid = :account_uuid
            """
        )
        try:
            with connection_scope(self._engine) as conn:
                conn.execute(
                    query,
                    {
                        "username": account.username,
                        "email": account.email,
                        "address_uuid": account.address_id,
                        "account_uuid": account.id,
                    },
                )
        except SQLAlchemyError as exc:
            logger.warning("Update of account record %s failed.", account.id)
            raise StorageError("Update failed for account") from exc
        logger.debug("Updated account record %s.", account.id)

    def find_by_id(self, account_id: UUID) -> Optional[Account]:
        """Return an account by id, or None."""
        query = text(_SELECT_ACCOUNT + " WHERE account_uuid = :account_uuid")
        with connection_scope(self._engine) as conn:
            row = conn.execute(query, {"account_uuid": account_id}).mappings().fetchone()

        if row is None:
            logger.debug("No account found with id %s", account_id)
            return None
        return _row_to_account(row)

    def list_all(self) -> list[Account]:
        """Return every account, oldest first."""
        query = text(_SELECT_ACCOUNT + " ORDER BY created_at ASC")
        with connection_scope(self._engine) as conn:
            rows = conn.execute(query).mappings().fetchall()
        return [_row_to_account(r) for r in rows]
