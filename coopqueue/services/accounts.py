"""Administrative account management with root-account and self-lockout guards."""

import logging

from sqlalchemy.orm import Session

from coopqueue.core.errors import ErrorKind
from coopqueue.core.security import hash_password
from coopqueue.models import Account
from coopqueue.schemas.auth import AccountListItem, CurrentUser, Role
from coopqueue.schemas.envelope import ServiceResponse
from coopqueue.services.access import (
    ACCOUNT_DELETE,
    ACCOUNT_RESET_PASSWORD,
    ACCOUNT_TOGGLE_ROLE,
    account_action_denial,
)

logger = logging.getLogger(__name__)

ADMIN_REQUIRED_MESSAGE = "Admin access required"
ACCOUNT_NOT_FOUND_MESSAGE = "User not found."


def list_accounts(db: Session) -> list[AccountListItem]:
    accounts = db.query(Account).order_by(Account.id).all()
    return [
        AccountListItem(id=a.id, username=a.username, role=Role(a.role), created_at=a.created_at)
        for a in accounts
    ]


def _load_target(db: Session, actor: CurrentUser, target_id: int, action: str) -> ServiceResponse | Account:
    """Run the admin, root and self guards, then lock the target row for the write."""
    if not actor.is_admin:
        return ServiceResponse.fail(ErrorKind.AUTHORIZATION, ADMIN_REQUIRED_MESSAGE)
    denial = account_action_denial(actor, target_id, action)
    if denial is not None:
        logger.warning("Account action %s on id=%s refused for %s: %s", action, target_id, actor.username, denial)
        return ServiceResponse.fail(ErrorKind.CONFLICT, denial)
    account = db.query(Account).filter(Account.id == target_id).with_for_update().first()
    if account is None:
        return ServiceResponse.fail(ErrorKind.NOT_FOUND, ACCOUNT_NOT_FOUND_MESSAGE)
    return account


def delete_account(db: Session, target_id: int, actor: CurrentUser) -> ServiceResponse[bool]:
    target = _load_target(db, actor, target_id, ACCOUNT_DELETE)
    if isinstance(target, ServiceResponse):
        db.rollback()
        return target
    db.delete(target)
    db.commit()
    logger.info("Account id=%s deleted by %s", target_id, actor.username)
    return ServiceResponse.ok(True, "User successfully deleted.")


def toggle_role(db: Session, target_id: int, actor: CurrentUser) -> ServiceResponse[Role]:
    """Flip a non-root account between standard and administrator."""
    target = _load_target(db, actor, target_id, ACCOUNT_TOGGLE_ROLE)
    if isinstance(target, ServiceResponse):
        db.rollback()
        return target
    new_role = Role.STANDARD if Role(target.role) == Role.ADMINISTRATOR else Role.ADMINISTRATOR
    target.role = new_role.value
    db.commit()
    logger.info("Account id=%s role set to %s by %s", target_id, new_role.value, actor.username)
    return ServiceResponse.ok(new_role, f"Role changed to {new_role.value}.")


def reset_password(db: Session, target_id: int, new_password: str, actor: CurrentUser) -> ServiceResponse[bool]:
    target = _load_target(db, actor, target_id, ACCOUNT_RESET_PASSWORD)
    if isinstance(target, ServiceResponse):
        db.rollback()
        return target
    target.password_hash, target.password_salt = hash_password(new_password)
    db.commit()
    logger.info("Password of account id=%s reset by %s", target_id, actor.username)
    return ServiceResponse.ok(True, "Password reset successfully.")
