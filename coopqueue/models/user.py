"""ORM model for accounts (credentials and RBAC role)."""

from sqlalchemy import Column, DateTime, Index, Integer, LargeBinary, String, func

from coopqueue.models.base import Base

# The first account ever created; protected from deletion, demotion and admin password reset.
ROOT_ACCOUNT_ID = 1


class Account(Base):
    """
    Registered account for JWT authentication and role-based access control.

    role: 'standard' or 'administrator' (see schemas.auth.Role)
    """

    __tablename__ = "users"
    # Ids are never reused; votes reference accounts by id only.
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False)
    password_hash = Column(LargeBinary, nullable=False)
    password_salt = Column(LargeBinary, nullable=False)
    role = Column(String(32), nullable=False, default="standard")
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


# Usernames are unique regardless of case.
Index("ux_users_username_lower", func.lower(Account.__table__.c.username), unique=True)
