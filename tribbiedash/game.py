"""One run of a level: scrolling, spawning, collisions, lives and power-up timers."""

from __future__ import annotations

import enum
import random
from typing import Callable, List, Optional

from .character import Character, CharacterEvent, CharacterType
from .collision import CollisionManager
from .items import (
    GameItem,
    GoldCoin,
    Letter,
    LionShield,
    Magnet,
    Receiver,
    RedCrystal,
    SoundCue,
    Spear,
    SpeedPig,
    Track,
)
from .manager import SPAWN_CHECK_MS, ItemManager
from .patterns import PatternGenerator

SCREEN_WIDTH = 1280
SCREEN_HEIGHT = 720
Y_OFFSET = 60
GROUND_SPEED = 120
GROUND_TILE_HEIGHT = 100
DEFAULT_GROUND_TILE_WIDTH = 200
START_LIVES = 3

DASH_MULTIPLIER = 4.5
SPEED_UP_MULTIPLIER = 2.0

SPEAR_PICKUP_SECONDS = 20
MAGNET_PICKUP_SECONDS = 15
SPEED_PIG_SECONDS = 8

RESULT_SOUND: SoundCue = ("sound/fail.wav", 0.8)


class Outcome(enum.Enum):
    """How the run stands."""

    PLAYING = "playing"
    FAILED = "failed"
    FINISHED = "finished"


class Countdown:
    """Whole-second countdown shown next to an active power-up."""

    def __init__(self):
        self.remaining = 0
        self.running = False
        self.visible = False
        self._elapsed = 0.0

    @property
    def text(self) -> str:
        return f"{self.remaining}s"

    def start(self, seconds):
        """Show the countdown and start counting down from ``seconds``."""
        self.remaining = int(seconds)
        self.running = True
        self.visible = True
        self._elapsed = 0.0

    def stop(self):
        """Stop counting and hide the countdown."""
        self.running = False
        self.visible = False
        self._elapsed = 0.0

    def tick(self, delta_sec):
        """Advance by ``delta_sec``; one is taken off for every full second."""
        if not self.running:
            return
        self._elapsed += delta_sec
        while self.running and self._elapsed >= 1.0 - 1e-9:
            self._elapsed -= 1.0
            self.remaining -= 1
            if self.remaining <= 0:
                self.running = False


class GameSession:
    """The state of one level being played, advanced frame by frame."""

    def __init__(self, level=1, rng=None, clock=None):
        self.level = level
        self.width = SCREEN_WIDTH
        self.height = SCREEN_HEIGHT
        base_y = int(self.height * 0.25)
        spacing = int(self.height * 0.18)
        self.track_y_positions: List[int] = [base_y, base_y + spacing, base_y + 2 * spacing]

        self.character = Character(
            CharacterType.BAO, self.track_y_positions, Y_OFFSET, self.width
        )
        self._rng = rng if rng is not None else random.Random()
        self.collisions = CollisionManager()
        self._items: List[GameItem] = []
        generator = PatternGenerator(self.width, self.track_y, level, self._rng, clock)
        self.item_manager = ItemManager(generator, self.width, self.register_item)
        self._spawn_elapsed_ms = 0.0

        self.coins = 0
        self.letters = 0
        self.lives = START_LIVES
        self.outcome = Outcome.PLAYING
        self.paused = False
        self.pause_overlay_visible = False
        self._sounds: List[SoundCue] = []

        self.spear_countdown = Countdown()
        self.magnet_countdown = Countdown()
        self.speed_up_countdown = Countdown()

        self.ground_top = (
            self.track_y_positions[2] + self.character.size // 2 - Y_OFFSET + 35
        )
        self.ground_tile_width = 0
        self.ground_tiles: List[int] = []
        self.layout_ground(DEFAULT_GROUND_TILE_WIDTH)

        self.toggle_pause()

    @property
    def background_image(self) -> str:
        return f"images/wfls{self.level}.png"

    @property
    def pause_image(self) -> str:
        return f"images/pause{self.level}.png"

    @property
    def items(self) -> tuple:
        return tuple(self._items)

    @property
    def speed_multiplier(self) -> float:
        multiplier = 1.0
        if self.character.is_dashing:
            multiplier *= DASH_MULTIPLIER
        if self.character.speed_up_active:
            multiplier *= SPEED_UP_MULTIPLIER
        return multiplier

    def layout_ground(self, tile_width):
        """Lay out enough ground tiles of ``tile_width`` to cover the screen."""
        if tile_width <= 0:
            raise ValueError("ground tile width must be positive")
        self.ground_tile_width = int(tile_width)
        count = self.width // self.ground_tile_width + 2
        self.ground_tiles = [i * self.ground_tile_width for i in range(count)]

    def track_y(self, track):
        """Y coordinate of the centre line of ``track``."""
        top, middle, bottom = self.track_y_positions
        track = Track(track)
        if track is Track.TOP:
            return top
        if track is Track.MIDDLE:
            return middle
        if track is Track.BOTTOM:
            return bottom
        if track is Track.BETWEEN_TOP_MIDDLE:
            return (top + middle) // 2
        return (middle + bottom) // 2

    def register_item(self, item):
        """Add an item to the level and watch it for collisions."""
        if item is None:
            return
        self._items.append(item)
        self.collisions.register_item(item)

    def drain_sounds(self) -> List[SoundCue]:
        """Sounds requested since the last call, oldest first."""
        self._process_character_events()
        sounds, self._sounds = self._sounds, []
        return sounds

    def tick(self, delta_sec):
        """Advance the level by one frame of ``delta_sec`` seconds."""
        self.character.tick(delta_sec)
        for countdown in (self.spear_countdown, self.magnet_countdown, self.speed_up_countdown):
            countdown.tick(delta_sec)
        self._process_character_events()
        self._run_spawner(delta_sec)
        if not self.paused:
            self._frame(delta_sec)
        self._process_character_events()
        self._items = [item for item in self._items if not item.removed]

    def jump(self):
        self.character.start_jump()
        self._process_character_events()

    def switch_character(self, character_type):
        self.character.switch_type(character_type)

    def dash(self):
        self.character.trigger_dash()
        self._process_character_events()

    def toggle_pause(self):
        """Pause or resume the run, showing the pause overlay while paused."""
        self.paused = not self.paused
        if self.paused:
            self.item_manager.pause_items()
            self.pause_overlay_visible = True
        else:
            self.item_manager.resume_items()
            self.pause_overlay_visible = False

    def freeze(self):
        """Stop everything without showing the pause overlay."""
        if not self.paused:
            self.item_manager.pause_items()
            self.paused = True

    def _run_spawner(self, delta_sec: float) -> None:
        self._spawn_elapsed_ms += delta_sec * 1000.0
        while self._spawn_elapsed_ms >= SPAWN_CHECK_MS - 1e-6:
            self._spawn_elapsed_ms -= SPAWN_CHECK_MS
            live = [item for item in self._items if not item.removed]
            self.item_manager.spawn_next_pattern(live)

    def _frame(self, delta_sec: float) -> None:
        self.character.process_jump(delta_sec)
        multiplier = self.speed_multiplier
        ground_speed = int(GROUND_SPEED * multiplier)
        self._scroll_ground(int(ground_speed * delta_sec))

        attractor = self.character.center if self.character.magnet_active else None
        for item in list(self._items):
            if item.removed:
                continue
            item.update_position(delta_sec * multiplier, attractor)
            if isinstance(item, Receiver) and item.x + item.width < 0:
                self._fail()
                return

        for item in self.collisions.check_collisions(self.character.hit_box()):
            self._handle_collision(item)

    def _scroll_ground(self, shift: int) -> None:
        width = self.ground_tile_width
        for index, x in enumerate(self.ground_tiles):
            new_x = x - shift
            if new_x + width < 0:
                new_x = max(0, *self.ground_tiles) + width
            self.ground_tiles[index] = new_x

    def _handle_collision(self, item: GameItem) -> None:
        character = self.character
        if isinstance(item, GoldCoin):
            self.coins += 1
        elif isinstance(item, Letter):
            self.letters += 1
        elif isinstance(item, RedCrystal):
            self._lose_life()
        elif isinstance(item, LionShield):
            if not character.is_dashing:
                self._fail()
        elif isinstance(item, Spear):
            character.activate_spear_mode(SPEAR_PICKUP_SECONDS)
        elif isinstance(item, Magnet):
            character.activate_magnet_mode(MAGNET_PICKUP_SECONDS)
        elif isinstance(item, SpeedPig):
            character.activate_speed_up_mode(SPEED_PIG_SECONDS)

        cue = item.on_collide_with_player()
        if cue is not None:
            self._sounds.append(cue)
        if isinstance(item, Receiver) and item.goal_reached:
            self._finish()

    def _lose_life(self) -> None:
        if self.lives <= 0:
            return
        self.lives -= 1
        if self.lives == 0:
            self._fail()

    def _end(self, outcome: Outcome) -> None:
        if self.outcome is not Outcome.PLAYING:
            return
        self.freeze()
        self.outcome = outcome
        self._sounds.append(RESULT_SOUND)

    def _fail(self) -> None:
        self._end(Outcome.FAILED)

    def _finish(self) -> None:
        self._end(Outcome.FINISHED)

    def _process_character_events(self) -> None:
        for event in self.character.drain_events():
            self._apply_event(event)

    def _apply_event(self, event: CharacterEvent) -> None:
        countdowns: dict = {
            "spear_mode": self.spear_countdown,
            "magnet_mode": self.magnet_countdown,
            "speed_up_mode": self.speed_up_countdown,
        }
        if event.kind == "sound":
            self._sounds.append((event.sound, 1.0))
            return
        countdown: Optional[Countdown] = countdowns.get(event.kind)
        if countdown is None:
            return
        if event.active:
            countdown.start(event.duration)
        else:
            countdown.stop()


SessionFactory = Callable[[int], GameSession]