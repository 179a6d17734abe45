"""
Address association manager.

Enforces the one-address-per-account rule: an address is created,
updated and deleted only through its owning account.

Failure cases: AccountNotFoundError, AddressAlreadyExistsError,
MissingAddressError, MissingIdentifierError.
"""

import logging
from typing import Optional
from uuid import UUID

from app.domain.brokerage.entities import Account, Address
from app.domain.brokerage.errors import (
    AccountNotFoundError,
    AddressAlreadyExistsError,
    MissingAddressError,
    MissingIdentifierError,
)
from app.domain.brokerage.ports import (
    AccountRepository,
    AddressRepository,
    UnitOfWork,
)

logger = logging.getLogger(__name__)


class AddressAssociationManager:
    """Creates, updates, reads and detaches the address of an account."""

    def __init__(
        self,
        account_repo: AccountRepository,
        address_repo: AddressRepository,
        unit_of_work: UnitOfWork,
    ) -> None:
        self._account_repo = account_repo
        self._address_repo = address_repo
        self._unit_of_work = unit_of_work

    def create(self, address: Address) -> UUID:
        """Persist an address without linking it to any account.

        Used by account creation, which links the returned id itself.
        """
        return self._address_repo.save(address).id

    def create_for_account(self, account_id: UUID, address: Address) -> UUID:
        """Create an address and link it to an account.

        Args:
            account_id: Owning account.
            address: Address fields; any id on it is ignored.

        Returns:
            The generated address id.

        Raises:
            AccountNotFoundError: If the account does not exist.
            AddressAlreadyExistsError: If the account already has an address.
        """
        logger.info("Creating address for account=%s", account_id)
        with self._unit_of_work.transaction():
            account = self._require_account(account_id)
            if self._address_repo.find_by_account(account_id) is not None:
                raise AddressAlreadyExistsError(account_id)

            saved = self._address_repo.save(address)
            account.address_id = saved.id
            self._account_repo.update(account)

        return saved.id

    def update(self, address: Address) -> None:
        """Overwrite an address in place.

        Raises:
            MissingIdentifierError: If the address carries no id.
        """
        if address.id is None:
            raise MissingIdentifierError("address")
        self._address_repo.update(address)

    def update_for_account(self, account_id: UUID, address: Address) -> None:
        """Overwrite the address linked to an account.

        The stored address id is copied onto the input; callers can
        never change it.

        Raises:
            AccountNotFoundError: If the account does not exist.
            MissingAddressError: If the account has no address to update.
        """
        logger.info("Updating address of account=%s", account_id)
        with self._unit_of_work.transaction():
            current = self._require_address(account_id)
            address.id = current.id
            self.update(address)

    def find_for_account(self, account_id: UUID) -> Optional[Address]:
        """Return the address linked to an account, or None.

        Raises:
            AccountNotFoundError: If the account does not exist.
        """
        self._require_account(account_id)
        return self._address_repo.find_by_account(account_id)

    def delete_for_account(self, account_id: UUID) -> None:
        """Detach and delete the address linked to an account.

        The account's link is cleared and persisted before the address
        row is deleted, so the account never references a missing row.

        Raises:
            AccountNotFoundError: If the account does not exist.
            MissingAddressError: If the account has no address.
        """
        logger.info("Deleting address from account=%s", account_id)
        with self._unit_of_work.transaction():
            account = self._require_account(account_id)
            current = self._address_repo.find_by_account(account_id)
            if current is None:
                raise MissingAddressError(account_id)

            account.address_id = None
            self._account_repo.update(account)
            self._address_repo.delete(current.id)

    def _require_account(self, account_id: UUID) -> Account:
        account = self._account_repo.find_by_id(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    def _require_address(self, account_id: UUID) -> Address:
        address = self.find_for_account(account_id)
        if address is None:
            raise MissingAddressError(account_id)
        return address
