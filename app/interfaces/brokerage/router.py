"""
FastAPI router for the brokerage bounded context.

All routes delegate to managers. No business logic here.
Input validation is handled by Pydantic schemas.
Error mapping is handled by centralized error handlers.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Request, Response, status

from app.application.brokerage.account_manager import AccountManager
from app.application.brokerage.address_manager import AddressAssociationManager
from app.application.brokerage.trade_manager import TradeManager
from app.interfaces.brokerage.dependencies import (
    get_account_manager,
    get_address_manager,
    get_trade_manager,
)
from app.interfaces.brokerage.schemas import (
    AccountRequest,
    AccountResponse,
    AddressRequest,
    AddressResponse,
    ErrorResponse,
    IdResponse,
    TradeRequest,
    TradeResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/accounts")

NOT_FOUND = {404: {"model": ErrorResponse}}
VALIDATION = {400: {"model": ErrorResponse}}
CONFLICT = {409: {"model": ErrorResponse}}


def _created(response: Response, request: Request, entity_id: UUID) -> IdResponse:
    """Set the Location header of a 201 response."""
    response.headers["Location"] = f"{str(request.url).rstrip('/')}/{entity_id}"
    return IdResponse(id=entity_id)


# ── Accounts ─────────────────────────────────────────────────────


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=IdResponse,
    responses=VALIDATION,
    tags=["accounts"],
    summary="Create an account",
    description="Creates an account, with an optional embedded address, and returns its id.",
)
def create_account(
    body: AccountRequest,
    request: Request,
    response: Response,
    manager: AccountManager = Depends(get_account_manager),
) -> IdResponse:
    """Create an account."""
    account_id = manager.create(body.to_entity())
    return _created(response, request, account_id)


@router.get(
    "",
    response_model=list[AccountResponse],
    responses={204: {"description": "No accounts found"}},
    tags=["accounts"],
    summary="List accounts",
)
def list_accounts(manager: AccountManager = Depends(get_account_manager)):
    """List every account; 204 when there are none."""
    accounts = manager.list_all()
    if not accounts:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return [AccountResponse.from_entity(a) for a in accounts]


@router.get(
    "/{account_id}",
    response_model=AccountResponse,
    responses=NOT_FOUND,
    tags=["accounts"],
    summary="Get an account",
)
def get_account(
    account_id: UUID,
    manager: AccountManager = Depends(get_account_manager),
):
    """Return one account."""
    logger.info("Fetching account %s", account_id)
    account = manager.find_by_id(account_id)
    if account is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return AccountResponse.from_entity(account)


@router.put(
    "/{account_id}",
    status_code=status.HTTP_202_ACCEPTED,
    responses={**NOT_FOUND, **CONFLICT, **VALIDATION},
    tags=["accounts"],
    summary="Update an account",
    description=(
        "Replaces username and email. An embedded address overwrites the "
        "existing one (which must exist); omitting it deletes the address."
    ),
)
def update_account(
    account_id: UUID,
    body: AccountRequest,
    manager: AccountManager = Depends(get_account_manager),
) -> None:
    """Update an account and reconcile its address."""
    manager.update(body.to_entity(account_id))


# ── Address ──────────────────────────────────────────────────────


@router.post(
    "/{account_id}/address",
    status_code=status.HTTP_201_CREATED,
    response_model=IdResponse,
    responses={**NOT_FOUND, **CONFLICT, **VALIDATION},
    tags=["address"],
    summary="Create the account's address",
)
def create_address(
    account_id: UUID,
    body: AddressRequest,
    request: Request,
    response: Response,
    manager: AddressAssociationManager = Depends(get_address_manager),
) -> IdResponse:
    """Create and link the address of an account."""
    address_id = manager.create_for_account(account_id, body.to_entity())
    response.headers["Location"] = str(request.url)
    return IdResponse(id=address_id)


@router.put(
    "/{account_id}/address",
    status_code=status.HTTP_202_ACCEPTED,
    responses={**NOT_FOUND, **CONFLICT, **VALIDATION},
    tags=["address"],
    summary="Update the account's address",
)
def update_address(
    account_id: UUID,
    body: AddressRequest,
    manager: AddressAssociationManager = Depends(get_address_manager),
) -> None:
    """Overwrite the existing address of an account."""
    manager.update_for_account(account_id, body.to_entity())


@router.get(
    "/{account_id}/address",
    response_model=AddressResponse,
    responses={**NOT_FOUND, 204: {"description": "No address for this account"}},
    tags=["address"],
    summary="Get the account's address",
)
def get_address(
    account_id: UUID,
    manager: AddressAssociationManager = Depends(get_address_manager),
):
    """Return the address of an account; 204 when it has none."""
    address = manager.find_for_account(account_id)
    if address is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return AddressResponse.from_entity(address)


@router.delete(
    "/{account_id}/address",
    status_code=status.HTTP_202_ACCEPTED,
    responses={**NOT_FOUND, **CONFLICT},
    tags=["address"],
    summary="Delete the account's address",
)
def delete_address(
    account_id: UUID,
    manager: AddressAssociationManager = Depends(get_address_manager),
) -> None:
    """Detach and delete the address of an account."""
    manager.delete_for_account(account_id)


# ── Trades ───────────────────────────────────────────────────────


@router.post(
    "/{account_id}/trades",
    status_code=status.HTTP_201_CREATED,
    response_model=IdResponse,
    responses={**NOT_FOUND, **VALIDATION},
    tags=["trades"],
    summary="Submit a trade",
)
def create_trade(
    account_id: UUID,
    body: TradeRequest,
    request: Request,
    response: Response,
    manager: TradeManager = Depends(get_trade_manager),
) -> IdResponse:
    """Submit a trade on an account."""
    trade = manager.create(body.to_entity(account_id))
    return _created(response, request, trade.id)


@router.get(
    "/{account_id}/trades",
    response_model=list[TradeResponse],
    responses={**NOT_FOUND, 204: {"description": "No trades on the account"}},
    tags=["trades"],
    summary="List the account's trades",
)
def list_trades(
    account_id: UUID,
    manager: TradeManager = Depends(get_trade_manager),
):
    """List the trades of an account; 204 when there are none."""
    trades = manager.list(account_id)
    if not trades:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return [TradeResponse.from_entity(t) for t in trades]


@router.get(
    "/{account_id}/trades/{trade_id}",
    response_model=TradeResponse,
    responses=NOT_FOUND,
    tags=["trades"],
    summary="Get a trade",
)
def get_trade(
    account_id: UUID,
    trade_id: UUID,
    manager: TradeManager = Depends(get_trade_manager),
):
    """Return a trade only if it belongs to the account."""
    trade = manager.find_by_id_and_account(trade_id, account_id)
    if trade is None:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return TradeResponse.from_entity(trade)


@router.delete(
    "/{account_id}/trades/{trade_id}",
    status_code=status.HTTP_202_ACCEPTED,
    responses={
        **NOT_FOUND,
        409: {"model": ErrorResponse, "description": "Trade belongs to another account"},
        451: {"model": ErrorResponse, "description": "Trade is not SUBMITTED"},
    },
    tags=["trades"],
    summary="Cancel a trade",
)
def cancel_trade(
    account_id: UUID,
    trade_id: UUID,
    manager: TradeManager = Depends(get_trade_manager),
) -> None:
    """Cancel a SUBMITTED trade."""
    manager.cancel(account_id, trade_id)
