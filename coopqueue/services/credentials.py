"""Credential service: registration, login, password change and session parsing.

Passwords are stored as HMAC-SHA512(key=random salt, msg=utf8(password)) and
compared in constant time. Sessions are stateless JWTs carrying the account id,
name and role; they expire after JWT_EXPIRE_MINUTES with no refresh.
"""

import logging

import jwt
from pydantic import ValidationError
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from coopqueue.core.errors import ErrorKind
from coopqueue.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from coopqueue.models import Account
from coopqueue.schemas.auth import LoginResponse, Role, SessionClaims
from coopqueue.schemas.envelope import ServiceResponse

logger = logging.getLogger(__name__)

USERNAME_TAKEN_MESSAGE = "Username is already taken."
USER_NOT_FOUND_MESSAGE = "User not found"
WRONG_PASSWORD_MESSAGE = "Wrong password"


def find_account_by_username(db: Session, username: str) -> Account | None:
    """Case-insensitive lookup."""
    return (
        db.query(Account)
        .filter(func.lower(Account.username) == username.strip().lower())
        .first()
    )


def register(db: Session, username: str, raw_password: str) -> ServiceResponse[int]:
    """
    Create an account and return its id.

    The first account ever created becomes an administrator; every later one is standard.
    """
    username = (username or "").strip()
    if not username:
        return ServiceResponse.fail(ErrorKind.VALIDATION, "Please choose a username.")
    if not raw_password:
        return ServiceResponse.fail(ErrorKind.VALIDATION, "Please enter a password.")

    if find_account_by_username(db, username) is not None:
        return ServiceResponse.fail(ErrorKind.CONFLICT, USERNAME_TAKEN_MESSAGE)

    is_first_account = db.query(Account.id).first() is None
    role = Role.ADMINISTRATOR if is_first_account else Role.STANDARD
    password_hash, password_salt = hash_password(raw_password)
    account = Account(
        username=username,
        password_hash=password_hash,
        password_salt=password_salt,
        role=role.value,
    )
    db.add(account)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race against a concurrent registration of the same name.
        db.rollback()
        return ServiceResponse.fail(ErrorKind.CONFLICT, USERNAME_TAKEN_MESSAGE)

    logger.info("Registered account id=%s username=%s role=%s", account.id, username, role.value)
    return ServiceResponse.ok(account.id, "Registration successful.")


def login(db: Session, username: str, raw_password: str) -> ServiceResponse[LoginResponse]:
    """Verify credentials and issue a signed session token."""
    account = find_account_by_username(db, username or "")
    if account is None:
        logger.warning("Login failed: unknown username=%s", username)
        return ServiceResponse.fail(ErrorKind.AUTHENTICATION, USER_NOT_FOUND_MESSAGE)
    if not verify_password(raw_password, account.password_hash, account.password_salt):
        logger.warning("Login failed: wrong password for account id=%s", account.id)
        return ServiceResponse.fail(ErrorKind.AUTHENTICATION, WRONG_PASSWORD_MESSAGE)

    role = Role(account.role)
    token = create_access_token(sub=account.id, name=account.username, role=role.value)
    return ServiceResponse.ok(
        LoginResponse(username=account.username, role=role, token=token),
        "Login successful.",
    )


def change_password(db: Session, account_id: int, old_password: str, new_password: str) -> bool:
    """Replace the password after verifying the old one. Fails closed: returns False, never raises."""
    account = db.get(Account, account_id)
    if account is None:
        return False
    if not verify_password(old_password, account.password_hash, account.password_salt):
        return False

    account.password_hash, account.password_salt = hash_password(new_password)
    db.commit()
    logger.info("Password changed for account id=%s", account_id)
    return True


def parse_session(token: str | None) -> SessionClaims | None:
    """
    Verify signature and expiry and return the claims, or None when the token
    is missing, malformed, tampered with or expired.
    """
    if not token:
        return None
    try:
        payload = decode_access_token(token)
        return SessionClaims(
            subject_id=int(payload["sub"]),
            subject_name=payload["name"],
            role=Role(payload["role"]),
            issued_at=payload["iat"],
            expires_at=payload["exp"],
        )
    except jwt.PyJWTError:
        return None
    except (KeyError, TypeError, ValueError, ValidationError):
        return None
