"""Victory reward selection: which memory drops after a won battle."""

from __future__ import annotations

import logging
import random
from typing import Protocol

from pydantic import BaseModel

from nancymon.utils.helpers import get_rng

logger = logging.getLogger(__name__)


class CollectionStore(Protocol):
    """Read/write contract of the collected-memories store."""

    def is_collected(self, memory_id: str) -> bool: ...

    def mark_collected(self, memory_id: str) -> bool: ...

    def collected_count(self) -> int: ...

    def total_count(self) -> int: ...


class DropResult(BaseModel):
    """Result of a drop roll."""

    drop_id: str | None = None
    all_collected: bool = False


def select_drop(
    collected_ids: set[str],
    all_ids: list[str],
    rng: random.Random | None = None,
) -> DropResult:
    """Pick a random uncollected id and record it as collected.

    Mutation: adds the chosen id to collected_ids.

    Returns:
        DropResult with drop_id None when nothing is left to drop.
        all_collected is True once every id is in collected_ids.
    """
    uncollected = [memory_id for memory_id in all_ids if memory_id not in collected_ids]
    if not uncollected:
        return DropResult(all_collected=True)

    drop_id = get_rng(rng).choice(uncollected)
    collected_ids.add(drop_id)
    return DropResult(
        drop_id=drop_id,
        all_collected=all(memory_id in collected_ids for memory_id in all_ids),
    )


class RewardSelector:
    """Drop selection on top of a collection store."""

    def __init__(
        self,
        collection: CollectionStore,
        all_ids: list[str],
        rng: random.Random | None = None,
    ):
        """Initialize the selector.

        Args:
            collection: Store that remembers what has been collected.
            all_ids: Every droppable memory id, in catalog order.
            rng: Optional randomness source.
        """
        self.collection = collection
        self.all_ids = list(all_ids)
        self.rng = get_rng(rng)

    def uncollected(self) -> list[str]:
        return [memory_id for memory_id in self.all_ids if not self.collection.is_collected(memory_id)]

    def roll(self) -> DropResult:
        """Draw one uncollected memory and mark it collected."""
        candidates = self.uncollected()
        if not candidates:
            return DropResult(all_collected=True)

        drop_id = self.rng.choice(candidates)
        if not self.collection.mark_collected(drop_id):
            # Store already had it
            logger.warning("Memory %s was already collected", drop_id)
            return DropResult(all_collected=self._all_collected())

        logger.debug("Dropped memory %s", drop_id)
        return DropResult(drop_id=drop_id, all_collected=self._all_collected())

    def _all_collected(self) -> bool:
        return self.collection.collected_count() >= self.collection.total_count()
