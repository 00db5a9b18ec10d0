"""Collision detection between the player and registered items."""

from __future__ import annotations

from typing import List

from .items import GameItem


class CollisionManager:
    """Tracks live items and reports which of them the player touched."""

    def __init__(self):
        self._items: List[GameItem] = []

    def __len__(self) -> int:
        return len(self._items)

    @property
    def items(self) -> tuple:
        return tuple(self._items)

    def register_item(self, item):
        if item is not None:
            self._items.append(item)

    def clear_items(self):
        self._items.clear()

    def check_collisions(self, player_box) -> List[GameItem]:
        """Deactivate and return, in registration order, the items hit this frame.

        The caller handles each hit and then calls the item's
        ``on_collide_with_player``. Items that are inactive or removed are
        dropped from the watch list.
        """
        collided = []
        for item in self._items:
            if not item.active or item.removed:
                continue
            if item.hit_box().colliderect(player_box):
                item.active = False
                collided.append(item)
        self._items = [item for item in self._items if item.active and not item.removed]
        return collided