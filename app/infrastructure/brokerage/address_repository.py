"""
Adapter: Address repository.

Implements AddressRepository port.
Reads/writes the brokerage.address table; the account link lives
on brokerage.account.address_uuid.
"""

import logging
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from app.domain.brokerage.entities import Address, State
from app.domain.brokerage.errors import StorageError
from app.domain.brokerage.ports import AddressRepository
from app.infrastructure.brokerage.database import connection_scope

logger = logging.getLogger(__name__)


def _row_to_address(row: Any) -> Address:
    """Map an address row to the Address entity."""
    return Address(
        id=row["address_uuid"],
        name=row["name"],
        street=row["street"],
        city=row["city"],
        state=State(row["state"]),
        zipcode=row["zipcode"],
    )


def _address_params(address: Address) -> dict[str, Any]:
    return {
        "name": address.name,
        "street": address.street,
        "city": address.city,
        "state": address.state.value,
        "zipcode": address.zipcode,
    }


class AddressRepositoryAdapter(AddressRepository):
    """PostgreSQL adapter for the brokerage.address table."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def save(self, address: Address) -> Address:
        """Insert an address and capture its generated id."""
        query = text(
            """
            INSERT INTO brokerage.address (name, street, city, state, zipcode)
            VALUES (:name, :street, :city, :state, :zipcode)
            RETURNING address_uuid
            """
        )
        try:
            with connection_scope(self._engine) as conn:
                row = conn.execute(query, _address_params(address)).fetchone()
        except SQLAlchemyError as exc:
            logger.warning("Insert of address record failed.")
            raise StorageError("Insert failed for address") from exc

        if row is None:
            logger.warning("Insert of address record failed.")
            raise StorageError("Insert failed for address")

        address.id = row[0]
        logger.info("Inserted address record %s.", address.id)
        return address

    def update(self, address: Address) -> None:
        """Overwrite every field of an address."""
        query = text(
            """
            UPDATE brokerage.address SET
                name = :name,
                street = :street,
                city = :city,
                state = :state,
                zipcode = :zipcode
            WHERE address_uuid = :address_uuid
            """
        )
        params = _address_params(address)
        params["address_uuid"] = address.id
        try:
            with connection_scope(self._engine) as conn:
                conn.execute(query, params)
        except SQLAlchemyError as exc:
            logger.warning("Update of address record %s failed.", address.id)
            raise StorageError("Update failed for address") from exc
        logger.debug("Updated address record %s.", address.id)

    def find_by_id(self, address_id: UUID) -> Optional[Address]:
        """Return an address by id, or None."""
        query = text(
            """
            SELECT address_uuid, name, street, city, state, zipcode
            FROM brokerage.address
            WHERE address_uuid = :address_uuid
            """
        )
        with connection_scope(self._engine) as conn:
            row = conn.execute(query, {"address_uuid": address_id}).mappings().fetchone()
        return _row_to_address(row) if row is not None else None

    def find_by_account(self, account_id: UUID) -> Optional[Address]:
        """Return the address linked to an account, or None."""
        query = text(
            """
            SELECT ad.address_uuid, ad.name, ad.street, ad.city, ad.state, ad.zipcode
            FROM brokerage.account ac
            JOIN brokerage.address ad ON ac.address_uuid = ad.address_uuid
            WHERE ac.account_uuid = :account_uuid
            """
        )
        with connection_scope(self._engine) as conn:
            row = conn.execute(query, {"account_uuid": account_id}).mappings().fetchone()

        if row is None:
            logger.debug("No address found for account %s", account_id)
            return None
        return _row_to_address(row)

    def delete(self, address_id: UUID) -> None:
        """Delete an address record."""
        query = text("DELETE FROM brokerage.address WHERE address_uuid = :address_uuid")
        with connection_scope(self._engine) as conn:
            conn.execute(query, {"address_uuid": address_id})
        logger.info("Deleted address record %s.", address_id)
