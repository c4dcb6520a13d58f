"""In-memory player state that outlives a single battle."""

from __future__ import annotations

from pydantic import BaseModel, Field

from nancymon.data.catalog import ITEMS, MEMORIES, STARTER_ITEMS


class Inventory(BaseModel):
    """Item counts by item id."""

    items: dict[str, int] = Field(default_factory=dict)

    def add_item(self, item_id: str, count: int = 1) -> None:
        """Add item to inventory."""
        if count <= 0:
            return
        if item_id in self.items:
            self.items[item_id] += count
        else:
            self.items[item_id] = count

    def use_item(self, item_id: str) -> bool:
        """Use item from inventory, returns True if successful."""
        if item_id in self.items and self.items[item_id] > 0:
            self.items[item_id] -= 1
            if self.items[item_id] == 0:
                del self.items[item_id]
            return True
        return False

    def consume_item(self, item_id: str) -> bool:
        return self.use_item(item_id)

    def item_count(self, item_id: str) -> int:
        return self.items.get(item_id, 0)

    def known_items(self) -> list[tuple[str, int]]:
        """(item_id, count) pairs for ids present in the item catalog."""
        return [(item_id, count) for item_id, count in self.items.items() if item_id in ITEMS]

    @classmethod
    def with_starter_items(cls) -> Inventory:
        return cls(items=dict(STARTER_ITEMS))


class MemoryCollection(BaseModel):
    """Which memories the player has found so far."""

    collected: list[str] = Field(default_factory=list)
    all_ids: list[str] = Field(default_factory=lambda: list(MEMORIES))
    finale_unlocked: bool = False

    def is_collected(self, memory_id: str) -> bool:
        return memory_id in self.collected

    def mark_collected(self, memory_id: str) -> bool:
        """Record a memory. Returns False if it was already collected."""
        if memory_id in self.collected:
            return False
        self.collected.append(memory_id)
        if self.collected_count() >= self.total_count():
            self.finale_unlocked = True
        return True

    def collected_count(self) -> int:
        return len(self.collected)

    def total_count(self) -> int:
        return len(self.all_ids)

    @property
    def completion(self) -> float:
        """Collection completion percentage."""
        if not self.all_ids:
            return 0.0
        return (self.collected_count() / self.total_count()) * 100
