"""Spawning of item patterns and pausing of everything spawned so far."""

from __future__ import annotations

from typing import Callable, Iterable, List, Optional

from .items import GameItem

MIN_GAP = 200
SPAWN_CHECK_MS = 100


class ItemManager:
    """Asks the generator for new patterns once the screen edge is clear.

    ``on_spawn`` is called with each new item, in order, as it is added.
    """

    def __init__(self, generator, screen_width, on_spawn=None):
        self._generator = generator
        self.screen_width = screen_width
        self._on_spawn: Optional[Callable[[GameItem], None]] = on_spawn
        self._items: List[GameItem] = []

    @property
    def items(self) -> tuple:
        return tuple(self._items)

    def spawn_next_pattern(self, live_items: Iterable[GameItem]) -> List[GameItem]:
        """Spawn the next pattern unless an active item is still near the right edge."""
        max_right = max(
            (item.x + item.width for item in live_items if item is not None and item.active),
            default=0,
        )
        max_right = max(max_right, 0)
        if max_right > self.screen_width - MIN_GAP:
            return []
        spawned = [item for item in self._generator.generate_next_pattern() if item is not None]
        for item in spawned:
            if self._on_spawn is not None:
                self._on_spawn(item)
            self._items.append(item)
        return spawned

    def pause_items(self):
        for item in self._items:
            if not item.removed:
                item.pause()

    def resume_items(self):
        for item in self._items:
            if not item.removed:
                item.resume()