"""ORM model for the vote ledger: one row per (item, user) vote."""

from sqlalchemy import Column, ForeignKey, Integer, UniqueConstraint

from coopqueue.models.base import Base


class VoteRecord(Base):
    """Append-only vote. The (item_id, user_id) pair is unique at the storage layer."""

    __tablename__ = "votes"
    __table_args__ = (
        UniqueConstraint("item_id", "user_id", name="uq_votes_item_user"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    item_id = Column(
        Integer,
        ForeignKey("items.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Plain id; votes of a deleted account stay so item counts match the ledger.
    user_id = Column(Integer, nullable=False, index=True)
