"""SQLAlchemy ORM models."""

from coopqueue.models.base import Base
from coopqueue.models.item import Item
from coopqueue.models.user import Account
from coopqueue.models.vote import VoteRecord

__all__ = ["Base", "Account", "Item", "VoteRecord"]
