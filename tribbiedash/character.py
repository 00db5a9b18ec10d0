"""The player character: lane switching, jumping and timed power-up modes."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from pygame import Rect

from .items import rect_centre

CHARACTER_SIZE = 120
HIT_BOX_MARGIN = 25
GRAVITY = (4.0, 12.0)
FIRST_JUMP_FORCE = (-36.0, -54.0)
SECOND_JUMP_FORCE = (-54.0, -108.0)
DASH_SECONDS = 0.5
DEFAULT_SPEAR_SECONDS = 10

JUMP_SOUND = "sound/jump.wav"
DASH_SOUND = "sound/Spear_Dash.WAV"

_IMAGES = {1: "images/an.png", 2: "images/ning.png", 3: "images/bao.png"}


class CharacterType(enum.IntEnum):
    """Playable characters; each one runs on its own track."""

    AN = 1
    NING = 2
    BAO = 3


@dataclass(frozen=True)
class CharacterEvent:
    """Something that happened to the character.

    ``kind`` is one of ``jumped``, ``sound``, ``spear_mode``, ``dash_started``,
    ``dash_ended``, ``magnet_mode`` or ``speed_up_mode``.
    """

    kind: str
    active: bool = False
    duration: int = 0
    sound: str = ""


class Character:
    """The runner controlled by the player."""

    def __init__(self, character_type, track_y_positions, y_offset, screen_width):
        self.track_y_positions: List[int] = list(track_y_positions)
        self.y_offset = y_offset
        self.screen_width = screen_width
        self.size = CHARACTER_SIZE
        self.type: Optional[CharacterType] = None
        self.x = 0
        self.y = 0
        self.velocity = 0.0
        self.is_jumping = False
        self.can_double_jump = False
        self.in_spear_mode = False
        self.is_dashing = False
        self.magnet_active = False
        self.speed_up_active = False
        self.speed_up_duration = 0
        self._timers: Dict[str, float] = {}
        self._events: List[CharacterEvent] = []
        self.switch_type(character_type)

    @property
    def image(self) -> str:
        return _IMAGES[int(self.type)]

    @property
    def center(self) -> Tuple[int, int]:
        return rect_centre(self.x, self.y, self.size, self.size)

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.size, self.size)

    def _lane_y(self, index: int) -> int:
        return self.track_y_positions[index] - self.y_offset

    def switch_type(self, character_type):
        """Become another character and snap to that character's track."""
        character_type = CharacterType(character_type)
        if character_type is self.type:
            return
        self.is_jumping = False
        self.velocity = 0.0
        self.type = character_type
        self.x = self.screen_width // 2 - self.size // 2
        self.y = self._lane_y(character_type - 1)

    def process_jump(self, delta_sec):
        """Apply one frame of gravity while airborne."""
        if self.type is CharacterType.AN or not self.is_jumping:
            return
        self.velocity += GRAVITY[self.speed_up_active]
        new_y = self.y + int(self.velocity)
        ceiling = self._lane_y(0)
        target = self._lane_y(self.type - 1)
        if new_y <= ceiling:
            new_y = ceiling
            self.velocity = 0.0
        elif new_y >= target:
            new_y = target
            self.velocity = 0.0
            self.is_jumping = False
            self.can_double_jump = True
        self.y = new_y

    def start_jump(self):
        """Jump, or double jump when airborne as BAO."""
        if self.type is CharacterType.AN:
            return
        boost = self.speed_up_active
        if not self.is_jumping:
            self.velocity = FIRST_JUMP_FORCE[boost]
            self.is_jumping = True
            self.can_double_jump = True
            self._events.append(CharacterEvent("sound", sound=JUMP_SOUND))
        elif self.can_double_jump and self.type is CharacterType.BAO:
            self.velocity = SECOND_JUMP_FORCE[boost]
            self.can_double_jump = False
            self._events.append(CharacterEvent("sound", sound=JUMP_SOUND))
        self._events.append(CharacterEvent("jumped"))

    def hit_box(self) -> Rect:
        margin = HIT_BOX_MARGIN
        return Rect(
            self.x + margin, self.y + margin, self.size - 2 * margin, self.size - 2 * margin
        )

    def activate_spear_mode(self, duration_sec=DEFAULT_SPEAR_SECONDS):
        self.in_spear_mode = True
        self._timers["spear"] = float(duration_sec)
        self._events.append(CharacterEvent("spear_mode", True, duration_sec))

    def trigger_dash(self):
        """Start a short dash; only possible while holding the spear."""
        if not self.in_spear_mode or self.is_dashing:
            return
        self.is_dashing = True
        self._events.append(CharacterEvent("sound", sound=DASH_SOUND))
        self._events.append(CharacterEvent("dash_started"))
        self._timers["dash"] = DASH_SECONDS

    def activate_magnet_mode(self, duration_sec):
        self.magnet_active = True
        self._events.append(CharacterEvent("magnet_mode", True, duration_sec))
        self._timers["magnet"] = float(duration_sec)

    def activate_speed_up_mode(self, seconds):
        self.speed_up_active = True
        self.speed_up_duration = seconds
        self._events.append(CharacterEvent("speed_up_mode", True, seconds))
        self._timers["speed_up"] = float(seconds)

    def tick(self, delta_sec):
        """Advance the power-up timers and end the modes that ran out."""
        for name in ("spear", "dash", "magnet", "speed_up"):
            remaining = self._timers.get(name)
            if remaining is None:
                continue
            remaining -= delta_sec
            if remaining > 1e-9:
                self._timers[name] = remaining
                continue
            del self._timers[name]
            self._expire(name)

    def _expire(self, name: str) -> None:
        if name == "spear":
            self.in_spear_mode = False
            self._events.append(CharacterEvent("spear_mode", False, 0))
        elif name == "dash":
            self.is_dashing = False
            self._events.append(CharacterEvent("dash_ended"))
        elif name == "magnet":
            self.magnet_active = False
            self._events.append(CharacterEvent("magnet_mode", False, 0))
        else:
            self.speed_up_active = False
            self._events.append(CharacterEvent("speed_up_mode", False, 0))

    def drain_events(self) -> List[CharacterEvent]:
        """Return the events since the last call, oldest first, and forget them."""
        events, self._events = self._events, []
        return events


def lane_positions(character: Character) -> Sequence[int]:
    """Resting y coordinate of each lane for the given character."""
    return [y - character.y_offset for y in character.track_y_positions]