"""ORM model for backlog items (candidate activities)."""

from sqlalchemy import BigInteger, Column, DateTime, Integer, String, Text

from coopqueue.models.base import Base


class Item(Base):
    """
    One backlog entry. vote_count caches the number of VoteRecord rows for this item.

    external_ref is the catalog id; unique when set (NULLs do not collide).
    """

    __tablename__ = "items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    cover_url = Column(String(2048), nullable=True)
    status = Column(String(32), nullable=False, default="suggested", index=True)
    external_ref = Column(BigInteger, nullable=True, unique=True)
    secondary_ref = Column(BigInteger, nullable=True)
    release_date = Column(DateTime(timezone=True), nullable=True)
    added_by_username = Column(String(255), nullable=False, default="")
    vote_count = Column(Integer, nullable=False, default=0)
