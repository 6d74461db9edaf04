"""Catalog: item CRUD, duplicate prevention, ownership checks and voting.

Every mutation returns the refreshed list for the requester, ordered by vote
count (highest first, insertion order on ties) and annotated with the
requester's own votes.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from coopqueue.core.errors import ErrorKind
from coopqueue.models import Item
from coopqueue.schemas.auth import ANONYMOUS_ID, CurrentUser
from coopqueue.schemas.envelope import ServiceResponse
from coopqueue.schemas.items import ItemDraft, ItemStatus, ItemView
from coopqueue.services import votes
from coopqueue.services.access import can_modify

logger = logging.getLogger(__name__)

ITEM_NOT_FOUND_MESSAGE = "Item not found."
NOT_OWNER_MESSAGE = "You are only allowed to edit or delete your own suggestions."
ALREADY_VOTED_MESSAGE = "You have already voted for this item."


def _duplicate_message(title: str) -> str:
    return f"{title} is already on the list."


def to_view(item: Item, voted: bool = False) -> ItemView:
    return ItemView(
        id=item.id,
        title=item.title,
        description=item.description,
        cover_url=item.cover_url,
        vote_count=item.vote_count or 0,
        status=ItemStatus(item.status),
        external_ref=item.external_ref,
        secondary_ref=item.secondary_ref,
        release_date=item.release_date,
        added_by_username=item.added_by_username or "Unknown",
        voted_by_requester=voted,
    )


def _external_ref_taken(db: Session, external_ref: int, exclude_item_id: int | None = None) -> bool:
    query = db.query(Item.id).filter(Item.external_ref == external_ref)
    if exclude_item_id is not None:
        query = query.filter(Item.id != exclude_item_id)
    return query.first() is not None


def list_items(db: Session, requester_id: int = ANONYMOUS_ID) -> list[ItemView]:
    """All items, most votes first; ties keep insertion order."""
    items = db.query(Item).order_by(Item.vote_count.desc(), Item.id.asc()).all()
    voted = votes.voted_item_ids(db, requester_id)
    return [to_view(item, item.id in voted) for item in items]


def add_item(db: Session, draft: ItemDraft, requester: CurrentUser) -> ServiceResponse[list[ItemView]]:
    """Create an item owned by the requester; rejects a second item with the same external_ref."""
    if draft.external_ref is not None and _external_ref_taken(db, draft.external_ref):
        return ServiceResponse.fail(ErrorKind.CONFLICT, _duplicate_message(draft.title))

    item = Item(
        title=draft.title,
        description=draft.description,
        cover_url=draft.cover_url,
        status=(draft.status or ItemStatus.SUGGESTED).value,
        external_ref=draft.external_ref,
        secondary_ref=draft.secondary_ref,
        release_date=draft.release_date,
        added_by_username=requester.username,
        vote_count=0,
    )
    db.add(item)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return ServiceResponse.fail(ErrorKind.CONFLICT, _duplicate_message(draft.title))

    logger.info("Item id=%s added by %s", item.id, requester.username)
    return ServiceResponse.ok(list_items(db, requester.id))


def update_item(
    db: Session,
    item_id: int,
    draft: ItemDraft,
    requester: CurrentUser,
) -> ServiceResponse[list[ItemView]]:
    """
    Edit an item (owner or administrator only).

    Title, description, cover and status are always overwritten; external_ref,
    secondary_ref and release_date only when the draft supplies them.
    """
    item = db.query(Item).filter(Item.id == item_id).with_for_update().first()
    if item is None:
        return ServiceResponse.fail(ErrorKind.NOT_FOUND, ITEM_NOT_FOUND_MESSAGE)
    if not can_modify(requester, item):
        db.rollback()
        logger.warning("User %s denied edit of item id=%s", requester.username, item_id)
        return ServiceResponse.fail(ErrorKind.AUTHORIZATION, NOT_OWNER_MESSAGE)

    if draft.external_ref is not None and _external_ref_taken(db, draft.external_ref, exclude_item_id=item.id):
        db.rollback()
        return ServiceResponse.fail(ErrorKind.CONFLICT, _duplicate_message(draft.title))

    item.title = draft.title
    item.description = draft.description
    item.cover_url = draft.cover_url
    item.status = draft.status.value
    if draft.external_ref is not None:
        item.external_ref = draft.external_ref
    if draft.secondary_ref is not None:
        item.secondary_ref = draft.secondary_ref
    if draft.release_date is not None:
        item.release_date = draft.release_date

    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return ServiceResponse.fail(ErrorKind.CONFLICT, _duplicate_message(draft.title))
    return ServiceResponse.ok(list_items(db, requester.id))


def remove_item(db: Session, item_id: int, requester: CurrentUser) -> ServiceResponse[list[ItemView]]:
    """Delete an item and its votes (owner or administrator only)."""
    item = db.query(Item).filter(Item.id == item_id).with_for_update().first()
    if item is None:
        return ServiceResponse.fail(ErrorKind.NOT_FOUND, ITEM_NOT_FOUND_MESSAGE)
    if not can_modify(requester, item):
        db.rollback()
        logger.warning("User %s denied delete of item id=%s", requester.username, item_id)
        return ServiceResponse.fail(ErrorKind.AUTHORIZATION, NOT_OWNER_MESSAGE)

    votes.delete_votes_for_item(db, item.id)
    db.delete(item)
    db.commit()
    logger.info("Item id=%s deleted by %s", item_id, requester.username)
    return ServiceResponse.ok(list_items(db, requester.id))


def upvote_item(db: Session, item_id: int, user_id: int) -> ServiceResponse[list[ItemView]]:
    """Record one vote for (item, user) and increment the item's count by exactly one."""
    if user_id == ANONYMOUS_ID:
        return ServiceResponse.fail(ErrorKind.AUTHENTICATION, "User not recognized.")
    if db.get(Item, item_id) is None:
        return ServiceResponse.fail(ErrorKind.NOT_FOUND, ITEM_NOT_FOUND_MESSAGE)
    # Fast path; record_vote's unique constraint is what decides under concurrency.
    if votes.has_voted(db, item_id, user_id):
        return ServiceResponse.fail(ErrorKind.CONFLICT, ALREADY_VOTED_MESSAGE)

    if not votes.record_vote(db, item_id, user_id):
        return ServiceResponse.fail(ErrorKind.CONFLICT, ALREADY_VOTED_MESSAGE)
    db.commit()
    return ServiceResponse.ok(list_items(db, user_id))
