"""Vote ledger: append-only (item, user) votes, one per pair."""

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from coopqueue.models import Item, VoteRecord
from coopqueue.schemas.auth import ANONYMOUS_ID


def voted_item_ids(db: Session, user_id: int) -> set[int]:
    """Ids of the items this user has voted for; empty for the anonymous requester."""
    if user_id == ANONYMOUS_ID:
        return set()
    rows = db.query(VoteRecord.item_id).filter(VoteRecord.user_id == user_id).all()
    return {item_id for (item_id,) in rows}


def has_voted(db: Session, item_id: int, user_id: int) -> bool:
    return (
        db.query(VoteRecord.id)
        .filter(VoteRecord.item_id == item_id, VoteRecord.user_id == user_id)
        .first()
        is not None
    )


def count_votes(db: Session, item_id: int) -> int:
    """Number of ledger rows for an item; equals Item.vote_count."""
    return (
        db.query(func.count(VoteRecord.id))
        .filter(VoteRecord.item_id == item_id)
        .scalar()
        or 0
    )


def record_vote(db: Session, item_id: int, user_id: int) -> bool:
    """
    Insert the vote and bump the item's cached count in the current transaction.

    Returns False, with the transaction rolled back, when the (item, user) pair
    already exists. The unique constraint decides, so concurrent duplicates
    cannot both succeed. The caller commits on True.
    """
    db.add(VoteRecord(item_id=item_id, user_id=user_id))
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        return False
    db.query(Item).filter(Item.id == item_id).update(
        {Item.vote_count: Item.vote_count + 1},
        synchronize_session=False,
    )
    return True


def delete_votes_for_item(db: Session, item_id: int) -> int:
    """Remove every vote for an item (used when the item itself is deleted)."""
    return (
        db.query(VoteRecord)
        .filter(VoteRecord.item_id == item_id)
        .delete(synchronize_session=False)
    )
