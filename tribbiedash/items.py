"""Collectable items, obstacles and power-ups that scroll across the tracks."""

from __future__ import annotations

import enum
import math
import random
from typing import Optional, Tuple

from pygame import Rect

SoundCue = Tuple[str, float]

_TOP_Y = 180
_MIDDLE_Y = 310
_BOTTOM_Y = 440

DEFAULT_SIZE = (80, 80)
DEFAULT_SPEED = 120
FADE_MS = 300
HIT_BOX_MARGIN = 20
ATTRACTION_STRENGTH = 80.0
ATTRACTION_SOFTENING = 40.0
ATTRACTION_MIN = 0.05
ATTRACTION_MAX = 0.5

LION_SHIELD_IMAGES = ("images/lion_shield1.png", "images/lion_shield2.png")


class Track(enum.IntEnum):
    """Lanes an item can be spawned on."""

    TOP = 0
    MIDDLE = 1
    BOTTOM = 2
    BETWEEN_TOP_MIDDLE = 3
    BETWEEN_MIDDLE_BOTTOM = 4


def _half(value: int) -> int:
    """Integer halving that truncates towards zero."""
    return int(value / 2)


def _track_top(track: Track, height: int) -> int:
    if track is Track.TOP:
        return _TOP_Y - _half(height)
    if track is Track.MIDDLE:
        return _MIDDLE_Y - _half(height)
    if track is Track.BOTTOM:
        return _BOTTOM_Y - _half(height)
    if track is Track.BETWEEN_TOP_MIDDLE:
        return _half(_TOP_Y + _MIDDLE_Y - height)
    return _half(_MIDDLE_Y + _BOTTOM_Y - height)


def rect_centre(x: int, y: int, width: int, height: int) -> Tuple[int, int]:
    """Centre point of an integer rectangle, rounded towards its top-left."""
    return _half(2 * x + width - 1), _half(2 * y + height - 1)


class GameItem:
    """An object that scrolls from the right edge of the screen to the left."""

    def __init__(
        self,
        track,
        screen_width,
        size=DEFAULT_SIZE,
        speed=DEFAULT_SPEED,
        image="",
        sound="",
        volume=1.0,
    ):
        self.track = Track(track)
        self.width, self.height = size
        self.speed = speed
        self.image = image
        self.sound = sound
        self.volume = volume
        self.x = screen_width
        self.y = _track_top(self.track, self.height)
        self.active = True
        self.removed = False
        self.opacity = 1.0
        self._fade_total_ms: Optional[float] = None
        self._fade_elapsed_ms = 0.0

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(track={self.track.name}, x={self.x}, y={self.y}, "
            f"active={self.active}, removed={self.removed})"
        )

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)

    @property
    def center(self) -> Tuple[int, int]:
        return rect_centre(self.x, self.y, self.width, self.height)

    def move_to(self, x, y):
        """Place the item's top-left corner at (x, y)."""
        self.x = int(x)
        self.y = int(y)

    def update_position(self, delta_sec, attractor=None):
        """Advance the item by one frame; it is removed once fully off screen."""
        self._advance_fade(delta_sec)
        if not self.active:
            return
        self.x -= int(self.speed * delta_sec)
        if self.x + self.width < 0:
            self.removed = True

    def hit_box(self) -> Rect:
        """The item's rectangle shrunk by a margin on every side."""
        margin = HIT_BOX_MARGIN
        return Rect(
            self.x + margin,
            self.y + margin,
            self.width - 2 * margin,
            self.height - 2 * margin,
        )

    def stop(self):
        self.active = False

    def pause(self):
        self.active = False

    def resume(self):
        self.active = True

    def on_collide_with_player(self) -> Optional[SoundCue]:
        """React to being touched by the player; returns a sound to play, if any."""
        return None

    def _fade_and_delete(self, duration_ms: float = FADE_MS) -> None:
        self._fade_total_ms = float(duration_ms)
        self._fade_elapsed_ms = 0.0
        self.opacity = 1.0

    def _advance_fade(self, delta_sec: float) -> None:
        if self._fade_total_ms is None:
            return
        self._fade_elapsed_ms += delta_sec * 1000.0
        if self._fade_total_ms <= 0 or self._fade_elapsed_ms >= self._fade_total_ms:
            self.opacity = 0.0
            self.removed = True
        else:
            self.opacity = 1.0 - self._fade_elapsed_ms / self._fade_total_ms

    def _collect(self) -> Optional[SoundCue]:
        self.stop()
        self._fade_and_delete()
        return (self.sound, self.volume) if self.sound else None


class _Collectable(GameItem):
    """An item that plays its sound and fades out when picked up."""

    def on_collide_with_player(self) -> Optional[SoundCue]:
        return self._collect()


class GoldCoin(_Collectable):
    """A coin; drawn towards the player while the magnet is active."""

    def __init__(self, track, screen_width):
        super().__init__(
            track,
            screen_width,
            size=(70, 70),
            image="images/coin.png",
            sound="sound/coin.wav",
            volume=2.0,
        )

    def update_position(self, delta_sec, attractor=None):
        """Fly towards ``attractor`` when given, otherwise scroll left."""
        if attractor is None:
            super().update_position(delta_sec)
            return
        self._advance_fade(delta_sec)
        cx, cy = self.center
        dx = attractor[0] - cx
        dy = attractor[1] - cy
        distance = math.hypot(dx, dy)
        factor = min(
            max(ATTRACTION_STRENGTH / (distance + ATTRACTION_SOFTENING), ATTRACTION_MIN),
            ATTRACTION_MAX,
        )
        self.x = int(self.x + dx * factor)
        self.y = int(self.y + dy * factor)


class Letter(_Collectable):
    """A letter to deliver; collecting enough of them brings the receiver."""

    def __init__(self, track, screen_width):
        super().__init__(
            track,
            screen_width,
            size=(80, 80),
            image="images/letter.png",
            sound="sound/letter.wav",
            volume=2.0,
        )


class RedCrystal(_Collectable):
    """A trap that costs the player a life."""

    def __init__(self, track, screen_width):
        super().__init__(
            track,
            screen_width,
            size=(80, 80),
            image="images/redcrystal.png",
            sound="sound/hurt.WAV",
            volume=2.0,
        )


class LionShield(GameItem):
    """An obstacle that ends the run unless the player is dashing."""

    def __init__(self, track, screen_width, rng=None):
        rng = rng if rng is not None else random.Random()
        super().__init__(
            track,
            screen_width,
            size=(80, 80),
            image=rng.choice(LION_SHIELD_IMAGES),
            sound="sound/fail.wav",
            volume=1.0,
        )

    def on_collide_with_player(self) -> Optional[SoundCue]:
        self.stop()
        self.removed = True
        return None


class Magnet(_Collectable):
    """Power-up that pulls coins towards the player."""

    def __init__(self, track, screen_width):
        super().__init__(
            track,
            screen_width,
            size=(90, 90),
            image="images/magnet.png",
            sound="sound/magnet_pickup.WAV",
            volume=1.5,
        )


class Spear(_Collectable):
    """Power-up that lets the player dash through shields."""

    def __init__(self, track, screen_width):
        super().__init__(
            track,
            screen_width,
            size=(200, 200),
            image="images/spear.png",
            sound="sound/spear_pickup.WAV",
            volume=1.0,
        )


class SpeedPig(_Collectable):
    """Power-up that doubles the scrolling speed for a while."""

    def __init__(self, track, screen_width):
        super().__init__(
            track,
            screen_width,
            size=(90, 90),
            image="images/speedpig.png",
            sound="sound/speedpig.WAV",
            volume=1.0,
        )


class Receiver(GameItem):
    """The goal: reaching it finishes the level."""

    def __init__(self, track, screen_width):
        super().__init__(
            track,
            screen_width,
            image="images/mail.png",
            sound="sound/mail.wav",
            volume=1.5,
        )
        self.width = self.height = 130
        self.goal_reached = False

    def on_collide_with_player(self) -> Optional[SoundCue]:
        """Stop, mark the goal as reached and return the arrival sound."""
        self.stop()
        self.goal_reached = True
        return (self.sound, self.volume)