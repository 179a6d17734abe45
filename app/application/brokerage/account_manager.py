"""
Account manager.

Creates and updates accounts together with their optional embedded
address. Address rules are delegated to AddressAssociationManager.

Failure cases: AccountNotFoundError, MissingIdentifierError,
MissingAddressError, StorageError.
"""

import logging
from typing import Optional
from uuid import UUID

from app.application.brokerage.address_manager import AddressAssociationManager
from app.domain.brokerage.entities import Account
from app.domain.brokerage.errors import MissingAddressError, MissingIdentifierError
from app.domain.brokerage.ports import AccountRepository, UnitOfWork

logger = logging.getLogger(__name__)


class AccountManager:
    """Orchestrates the account aggregate: an account plus its address."""

    def __init__(
        self,
        account_repo: AccountRepository,
        address_manager: AddressAssociationManager,
        unit_of_work: UnitOfWork,
    ) -> None:
        self._account_repo = account_repo
        self._address_manager = address_manager
        self._unit_of_work = unit_of_work

    def create(self, account: Account) -> UUID:
        """Persist a new account, creating its embedded address first.

        Returns:
            The generated account id.
        """
        logger.info("Creating account username=%s", account.username)
        with self._unit_of_work.transaction():
            if account.address is not None:
                account.address_id = self._address_manager.create(account.address)
            saved = self._account_repo.save(account)

        logger.info("Created account=%s address=%s", saved.id, saved.address_id)
        return saved.id

    def update(self, account: Account) -> None:
        """Replace username and email, and reconcile the address.

        With an embedded address the account must already have one,
        which is overwritten in place; no address is ever created here.
        Without one, any linked address is detached and deleted.

        Raises:
            MissingIdentifierError: If the account has no id.
            AccountNotFoundError: If the account does not exist.
            MissingAddressError: If an address is embedded but none is linked.
        """
        if account.id is None:
            raise MissingIdentifierError("account")

        logger.info("Updating account=%s", account.id)
        with self._unit_of_work.transaction():
            current = self._address_manager.find_for_account(account.id)
            if account.address is not None:
                if current is None:
                    raise MissingAddressError(account.id)
                account.address.id = current.id
                account.address_id = current.id
                self._address_manager.update(account.address)
            else:
                if current is not None:
                    self._address_manager.delete_for_account(account.id)
                account.address_id = None

            self._account_repo.update(account)

    def find_by_id(self, account_id: UUID) -> Optional[Account]:
        """Return an account by id, or None."""
        return self._account_repo.find_by_id(account_id)

    def list_all(self) -> list[Account]:
        """Return every account."""
        return self._account_repo.list_all()
