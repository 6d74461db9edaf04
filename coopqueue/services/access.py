"""Access control predicates. Pure functions over the requester and the target."""

from coopqueue.models import Item
from coopqueue.models.user import ROOT_ACCOUNT_ID
from coopqueue.schemas.auth import CurrentUser, Role

# Administrative account actions guarded by account_action_denial.
ACCOUNT_DELETE = "delete"
ACCOUNT_TOGGLE_ROLE = "toggle_role"
ACCOUNT_RESET_PASSWORD = "reset_password"

_ROOT_DENIALS = {
    ACCOUNT_DELETE: "The Owner account cannot be deleted.",
    ACCOUNT_TOGGLE_ROLE: "The Owner role cannot be modified.",
    ACCOUNT_RESET_PASSWORD: "The Owner's password cannot be reset via this method.",
}

_SELF_DENIALS = {
    ACCOUNT_DELETE: "You cannot delete your own account.",
    ACCOUNT_TOGGLE_ROLE: "You cannot revoke your own admin rights.",
}


def can_modify(actor: CurrentUser, item: Item) -> bool:
    """True iff the actor is an administrator or suggested the item."""
    return actor.role == Role.ADMINISTRATOR or item.added_by_username == actor.username


def account_action_denial(actor: CurrentUser, target_account_id: int, action: str) -> str | None:
    """
    Return the reason an administrative account action is refused, or None if allowed.

    The root account is never a valid target. Delete and role toggle also refuse
    the actor's own account (self-deletion, self-lockout).
    """
    if action not in _ROOT_DENIALS:
        raise ValueError(f"Unknown account action: {action!r}")
    if target_account_id == ROOT_ACCOUNT_ID:
        return _ROOT_DENIALS[action]
    if action in _SELF_DENIALS and target_account_id == actor.id:
        return _SELF_DENIALS[action]
    return None
