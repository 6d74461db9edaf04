"""Pydantic request/response schemas."""

from coopqueue.schemas.auth import (
    AccountListItem,
    ChangePasswordRequest,
    CurrentUser,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    ResetPasswordRequest,
    Role,
    SessionClaims,
)
from coopqueue.schemas.envelope import ServiceResponse
from coopqueue.schemas.health import HealthResponse
from coopqueue.schemas.items import (
    CatalogSearchResult,
    ItemDraft,
    ItemStatus,
    ItemView,
    SelectionMode,
)

__all__ = [
    "AccountListItem",
    "CatalogSearchResult",
    "ChangePasswordRequest",
    "CurrentUser",
    "HealthResponse",
    "ItemDraft",
    "ItemStatus",
    "ItemView",
    "LoginRequest",
    "LoginResponse",
    "RegisterRequest",
    "ResetPasswordRequest",
    "Role",
    "SelectionMode",
    "ServiceResponse",
    "SessionClaims",
]
