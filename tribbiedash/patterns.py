"""Choice and layout of the item patterns that scroll in from the right."""

from __future__ import annotations

import random
import time
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .items import (
    GameItem,
    GoldCoin,
    Letter,
    LionShield,
    Magnet,
    Receiver,
    RedCrystal,
    Spear,
    SpeedPig,
    Track,
)

MIN_INTERVAL_MS = 1500
LETTERS_BEFORE_GOAL = 3
LETTER_UNLOCK_SPAWNS = 10
SPAWN_MARGIN_X = 50
ITEM_SPACING_X = 90
TRAP_OFFSET_X = 100

STRAIGHT_COINS = 0
ARC_COINS = 1
SHIELD_LINE = 2
LETTER_WITH_TRAP = 3
LETTER_GUARD = 4
SPEAR = 5
MAGNET = 6
SPEED_PIG = 7

LEVEL_CANDIDATES: Dict[int, Tuple[int, ...]] = {
    1: (0, 0, 0, 1, 1, 1, 2, 2, 2),
    2: (0, 1, 2, 2, 2, 2, 2, 5, 5, 5, 5, 5),
    3: (0, 0, 1, 1, 2, 2, 2, 7, 7, 7, 7, 7),
    4: (0, 0, 0, 1, 1, 1, 2, 2, 6, 6, 6, 6, 6),
    5: (0, 0, 1, 1, 2, 2, 5, 5, 6, 6, 7, 7),
}
LETTER_CANDIDATES = (LETTER_WITH_TRAP, LETTER_GUARD)

# Each arc is a list of (x offset from the spawn point, track) pairs.
ARC_PATTERNS: Tuple[Tuple[Tuple[int, int], ...], ...] = (
    ((0, 2), (19, 4), (43, 1), (75, 3), (150, 0), (225, 3), (257, 1), (281, 4), (300, 2)),
    ((0, 2), (48, 4), (104, 1), (160, 4), (208, 2)),
)


def _now_ms() -> int:
    return int(time.time() * 1000)


class PatternGenerator:
    """Picks the next group of items for a level and lays it out off screen.

    ``track_y`` maps a :class:`Track` to the y coordinate of its centre line,
    ``clock`` returns the current time in milliseconds.
    """

    def __init__(
        self,
        screen_width,
        track_y,
        level=1,
        rng=None,
        clock=None,
    ):
        self.screen_width = screen_width
        self._track_y: Callable[[Track], int] = track_y
        self.level = level
        self._rng = rng if rng is not None else random.Random()
        self._clock: Callable[[], int] = clock if clock is not None else _now_ms
        self.last_pattern = -1
        self.letter_count = 0
        self.goal_generated = False
        self.spawn_counter = 0
        self.candidate_types: List[int] = []
        self._last_spawn_ms = 0
        self._builders: Dict[int, Callable[[], List[GameItem]]] = {
            STRAIGHT_COINS: self._straight_coins,
            ARC_COINS: self._arc_coins,
            SHIELD_LINE: self._shield_line,
            LETTER_WITH_TRAP: self._letter_with_trap,
            LETTER_GUARD: self._letter_guard,
            SPEAR: self._spear,
            MAGNET: self._magnet,
            SPEED_PIG: self._speed_pig,
        }

    @property
    def _spawn_x(self) -> int:
        return self.screen_width + SPAWN_MARGIN_X

    def generate_next_pattern(self) -> List[GameItem]:
        """Return the next group of items, or an empty list if it is too soon.

        Once enough letters have been handed out, the receiver is produced
        and no further items follow.
        """
        now = self._clock()
        if now - self._last_spawn_ms < MIN_INTERVAL_MS or self.goal_generated:
            return []
        self._last_spawn_ms = now
        self.spawn_counter += 1

        if self.letter_count >= LETTERS_BEFORE_GOAL:
            self.goal_generated = True
            return self._goal()

        # The pool keeps growing on purpose: every spawn adds its weights again.
        self.candidate_types.extend(LEVEL_CANDIDATES.get(self.level, ()))
        if self.spawn_counter > LETTER_UNLOCK_SPAWNS:
            self.candidate_types.extend(LETTER_CANDIDATES)
        if not self.candidate_types:
            raise ValueError(f"no patterns available for level {self.level}")

        while True:
            chosen = self._rng.choice(self.candidate_types)
            if chosen != self.last_pattern or len(self.candidate_types) <= 1:
                break
        self.last_pattern = chosen
        return self.generate_pattern(chosen)

    def generate_pattern(self, pattern_type) -> List[GameItem]:
        """Build the pattern with the given number; unknown numbers give nothing."""
        builder = self._builders.get(pattern_type)
        return builder() if builder is not None else []

    def _random_lane(self) -> Track:
        return Track(self._rng.randrange(3))

    def _place(self, item: GameItem, x: int) -> GameItem:
        item.move_to(x, self._track_y(item.track) - item.height // 2)
        return item

    def _row(self, factory: Callable[[Track], GameItem], count: int) -> List[GameItem]:
        track = self._random_lane()
        return [
            self._place(factory(track), self._spawn_x + i * ITEM_SPACING_X)
            for i in range(count)
        ]

    def _straight_coins(self) -> List[GameItem]:
        return self._row(lambda t: GoldCoin(t, self.screen_width), 5)

    def _arc_coins(self) -> List[GameItem]:
        arc: Sequence[Tuple[int, int]] = self._rng.choice(ARC_PATTERNS)
        return [
            self._place(GoldCoin(Track(track), self.screen_width), self._spawn_x + dx)
            for dx, track in arc
        ]

    def _shield_line(self) -> List[GameItem]:
        return self._row(lambda t: LionShield(t, self.screen_width, self._rng), 3)

    def _letter_with_trap(self) -> List[GameItem]:
        track = self._random_lane()
        items = [
            self._place(Letter(track, self.screen_width), self._spawn_x),
            self._place(RedCrystal(track, self.screen_width), self._spawn_x + TRAP_OFFSET_X),
        ]
        self.letter_count += 1
        return items

    def _letter_guard(self) -> List[GameItem]:
        centre = self._random_lane()
        items: List[GameItem] = [self._place(Letter(centre, self.screen_width), self._spawn_x)]
        self.letter_count += 1
        if centre is not Track.TOP:
            shield = LionShield(Track(centre - 1), self.screen_width, self._rng)
            items.append(self._place(shield, self._spawn_x))
        if centre is not Track.BOTTOM:
            trap = RedCrystal(Track(centre + 1), self.screen_width)
            items.append(self._place(trap, self._spawn_x))
        return items

    def _single(self, factory: Callable[[Track, int], GameItem]) -> List[GameItem]:
        item = factory(self._random_lane(), self.screen_width)
        return [self._place(item, self._spawn_x)]

    def _goal(self) -> List[GameItem]:
        return self._single(Receiver)

    def _spear(self) -> List[GameItem]:
        return self._single(Spear)

    def _magnet(self) -> List[GameItem]:
        return self._single(Magnet)

    def _speed_pig(self) -> List[GameItem]:
        return self._single(SpeedPig)


def default_generator(screen_width: int, track_y: Callable[[Track], int], level: int,
                      rng: Optional[random.Random] = None) -> PatternGenerator:
    """A generator driven by the wall clock."""
    return PatternGenerator(screen_width, track_y, level, rng)