"""Backlog endpoints: list, suggest, edit, delete, upvote and pick the next item."""

import random
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from coopqueue.api.v1.auth import get_current_user, get_requester
from coopqueue.api.v1.responses import unwrap
from coopqueue.core.database import get_db
from coopqueue.schemas.auth import CurrentUser
from coopqueue.schemas.envelope import ServiceResponse
from coopqueue.schemas.items import ItemDraft, ItemView, SelectionMode
from coopqueue.services import catalog
from coopqueue.services.selection import SelectionEngine

router = APIRouter()


def get_selection_engine() -> SelectionEngine:
    """One generator per request; tests override this with a seeded engine."""
    return SelectionEngine(random.Random())


@router.get("", response_model=ServiceResponse[list[ItemView]])
def list_items(
    db: Annotated[Session, Depends(get_db)],
    requester: Annotated[CurrentUser, Depends(get_requester)],
) -> ServiceResponse[list[ItemView]]:
    """All items, most votes first, each flagged with whether the requester voted for it."""
    return ServiceResponse.ok(catalog.list_items(db, requester.id))


@router.post("", response_model=ServiceResponse[list[ItemView]])
def add_item(
    body: ItemDraft,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> ServiceResponse[list[ItemView]]:
    """Suggest an item; the current user becomes its owner. 409 if its external_ref is already listed."""
    return unwrap(catalog.add_item(db, body, current_user))


@router.post("/pick", response_model=ServiceResponse[ItemView])
def pick_next_item(
    db: Annotated[Session, Depends(get_db)],
    engine: Annotated[SelectionEngine, Depends(get_selection_engine)],
    _user: Annotated[CurrentUser, Depends(get_current_user)],
    mode: Annotated[SelectionMode, Query()] = SelectionMode.MAJORITY,
) -> ServiceResponse[ItemView]:
    """
    Pick the next item among suggestions and mark it active.

    mode=majority takes the most-voted item (random among ties);
    mode=weighted_lottery draws with vote_count + 1 tickets per item.
    """
    return unwrap(engine.pick(db, mode))


@router.put("/{item_id}", response_model=ServiceResponse[list[ItemView]])
def update_item(
    item_id: int,
    body: ItemDraft,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> ServiceResponse[list[ItemView]]:
    """Edit an item. Owner or administrator only."""
    return unwrap(catalog.update_item(db, item_id, body, current_user))


@router.delete("/{item_id}", response_model=ServiceResponse[list[ItemView]])
def delete_item(
    item_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> ServiceResponse[list[ItemView]]:
    """Delete an item and its votes. Owner or administrator only."""
    return unwrap(catalog.remove_item(db, item_id, current_user))


@router.put("/{item_id}/upvote", response_model=ServiceResponse[list[ItemView]])
def upvote_item(
    item_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> ServiceResponse[list[ItemView]]:
    """Vote for an item once. 409 on a second vote by the same user."""
    return unwrap(catalog.upvote_item(db, item_id, current_user.id))
