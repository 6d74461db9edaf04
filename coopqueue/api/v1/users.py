"""Account management endpoints. Listing needs a session; changes need an administrator."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from coopqueue.api.v1.auth import get_current_user, require_admin
from coopqueue.api.v1.responses import unwrap
from coopqueue.core.database import get_db
from coopqueue.schemas.auth import AccountListItem, CurrentUser, ResetPasswordRequest, Role
from coopqueue.schemas.envelope import ServiceResponse
from coopqueue.services import accounts

router = APIRouter()


@router.get("", response_model=ServiceResponse[list[AccountListItem]])
def list_users(
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ServiceResponse[list[AccountListItem]]:
    return ServiceResponse.ok(accounts.list_accounts(db))


@router.delete("/{account_id}", response_model=ServiceResponse[bool])
def delete_user(
    account_id: int,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> ServiceResponse[bool]:
    """Delete an account. The owner account and your own account are refused."""
    return unwrap(accounts.delete_account(db, account_id, admin))


@router.put("/{account_id}/role", response_model=ServiceResponse[Role])
def toggle_user_role(
    account_id: int,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> ServiceResponse[Role]:
    """Toggle standard/administrator. The owner account and your own account are refused."""
    return unwrap(accounts.toggle_role(db, account_id, admin))


@router.post("/{account_id}/reset-password", response_model=ServiceResponse[bool])
def reset_user_password(
    account_id: int,
    body: ResetPasswordRequest,
    admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> ServiceResponse[bool]:
    return unwrap(accounts.reset_password(db, account_id, body.new_password, admin))
