"""Registration, login and password change, plus the auth dependencies
(get_requester, get_current_user, require_admin)."""

import hmac
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from coopqueue.api.v1.responses import unwrap
from coopqueue.core.config import Settings, get_settings
from coopqueue.core.database import get_db
from coopqueue.models import Account
from coopqueue.schemas.auth import (
    ChangePasswordRequest,
    CurrentUser,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
)
from coopqueue.schemas.envelope import ServiceResponse
from coopqueue.services import credentials as credential_service

logger = logging.getLogger(__name__)

router = APIRouter()
security = HTTPBearer(auto_error=False)


def _session_account(db: Session, token: str) -> Account | None:
    claims = credential_service.parse_session(token)
    if claims is None:
        return None
    return db.get(Account, claims.subject_id)


def get_requester(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """Dependency: identity from a valid Bearer token, else the anonymous requester (id 0)."""
    if credentials is None:
        return CurrentUser.anonymous()
    account = _session_account(db, credentials.credentials)
    if account is None:
        return CurrentUser.anonymous()
    return CurrentUser.from_account(account)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """
    Dependency: require a valid Bearer JWT and return the current user.
    Name and role come from the stored account, so demotion and deletion apply
    to tokens already issued. Raises 401 if missing, invalid, or the account is gone.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    claims = credential_service.parse_session(credentials.credentials)
    if claims is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    account = db.get(Account, claims.subject_id)
    if account is None:
        logger.info("Rejected token for missing account id=%s", claims.subject_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return CurrentUser.from_account(account)


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require an authenticated administrator. Raises 403 otherwise."""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


def _invite_code_valid(provided: str, settings: Settings) -> bool:
    if settings.REGISTRATION_KEY is None:
        return True
    expected = settings.REGISTRATION_KEY.get_secret_value()
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


@router.post("/register", response_model=ServiceResponse[int])
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ServiceResponse[int]:
    """Create an account. The very first account becomes the administrator; returns the new id."""
    if not _invite_code_valid(body.invite_code, settings):
        logger.warning("Registration refused for %s: invalid invite code", body.username)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid invite code! Access denied.",
        )
    return unwrap(credential_service.register(db, body.username, body.password))


@router.post("/login", response_model=ServiceResponse[LoginResponse])
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> ServiceResponse[LoginResponse]:
    """
    Authenticate with username and password; returns a JWT session token.
    Include the token in the Authorization header as: Bearer <token>
    """
    result = credential_service.login(db, body.username, body.password)
    if not result.success:
        # Do not reveal whether the username exists.
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return result


@router.post("/change-password", response_model=ServiceResponse[bool])
def change_password(
    body: ChangePasswordRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> ServiceResponse[bool]:
    if not credential_service.change_password(db, current_user.id, body.old_password, body.new_password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Old password is incorrect or user not found.",
        )
    return ServiceResponse.ok(True, "Password changed successfully.")
