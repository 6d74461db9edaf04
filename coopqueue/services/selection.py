"""Selection engine: pick the next item to activate from the suggested candidates.

Two strategies:

- Majority: highest vote count wins; ties are broken uniformly at random.
- Weighted lottery: every candidate holds vote_count + 1 tickets and one
  ticket is drawn uniformly, so unvoted items keep a non-zero chance.

The random source is injected so tests can seed it and concurrent requests do
not share one generator.
"""

import logging
import random
from bisect import bisect_right
from collections.abc import Sequence
from itertools import accumulate

from sqlalchemy.orm import Session

from coopqueue.core.errors import ErrorKind
from coopqueue.models import Item
from coopqueue.schemas.envelope import ServiceResponse
from coopqueue.schemas.items import ItemStatus, ItemView, SelectionMode
from coopqueue.services.catalog import to_view

logger = logging.getLogger(__name__)

NO_CANDIDATES_MESSAGE = "No items with status 'suggested' found in the queue."


def lottery_tickets(item: Item) -> int:
    return (item.vote_count or 0) + 1


class SelectionEngine:
    """Chooses and activates the next item.

    Usage:
        engine = SelectionEngine(random.Random(42))
        result = engine.pick(db, SelectionMode.MAJORITY)
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else random.Random()

    def choose(self, candidates: Sequence[Item], mode: SelectionMode) -> Item:
        """Pure choice over a non-empty candidate list; does not touch storage."""
        if not candidates:
            raise ValueError("candidates must not be empty")
        if mode == SelectionMode.MAJORITY:
            return self._choose_majority(candidates)
        return self._choose_weighted(candidates)

    def _choose_majority(self, candidates: Sequence[Item]) -> Item:
        max_votes = max(c.vote_count or 0 for c in candidates)
        tied = [c for c in candidates if (c.vote_count or 0) == max_votes]
        if len(tied) == 1:
            return tied[0]
        return self._rng.choice(tied)

    def _choose_weighted(self, candidates: Sequence[Item]) -> Item:
        cumulative = list(accumulate(lottery_tickets(c) for c in candidates))
        ticket = self._rng.randrange(cumulative[-1])
        return candidates[bisect_right(cumulative, ticket)]

    def pick(self, db: Session, mode: SelectionMode) -> ServiceResponse[ItemView]:
        """Choose among suggested items and move the winner to active."""
        candidates = (
            db.query(Item)
            .filter(Item.status == ItemStatus.SUGGESTED.value)
            .order_by(Item.id.asc())
            .all()
        )
        if not candidates:
            return ServiceResponse.fail(ErrorKind.NOT_FOUND, NO_CANDIDATES_MESSAGE)

        winner = self.choose(candidates, mode)
        # Conditional transition: a concurrent pick of the same item loses here.
        updated = (
            db.query(Item)
            .filter(Item.id == winner.id, Item.status == ItemStatus.SUGGESTED.value)
            .update({Item.status: ItemStatus.ACTIVE.value}, synchronize_session=False)
        )
        if updated != 1:
            db.rollback()
            return ServiceResponse.fail(
                ErrorKind.CONFLICT,
                "The selected item was picked by another request; try again.",
            )
        db.commit()
        db.refresh(winner)

        logger.info(
            "Picked item id=%s (%s) by %s from %d candidates",
            winner.id,
            winner.title,
            mode.value,
            len(candidates),
        )
        return ServiceResponse.ok(to_view(winner))
