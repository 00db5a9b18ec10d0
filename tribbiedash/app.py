"""Menus, result screen and the pygame front end that plays a level."""

from __future__ import annotations

import argparse
import enum
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import pygame
from pygame import Rect

from .character import CharacterType
from .game import (
    GROUND_TILE_HEIGHT,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    GameSession,
    Outcome,
)
from .items import GameItem

FPS = 60
CAPTION = "Tribbie Dash"

HEART_RED = "images/heart_red.png"
HEART_GRAY = "images/heart_gray.png"
COIN_IMAGE = "images/coin.png"
LETTER_IMAGE = "images/letter.png"
GROUND_IMAGE = "images/ground.png"
SPEAR_IMAGE = "images/spear.png"
MAGNET_IMAGE = "images/magnet.png"
SPEED_PIG_IMAGE = "images/speedpig.png"
MENU_BACKGROUND = "images/Main_background.jpg"
MENU_BUTTON_IMAGE = "images/choose_btn.png"
LEVEL_BACKGROUND = "images/choose.png"
SUCCESS_BACKGROUND = "images/succeed.png"
FAIL_BACKGROUND = "images/fail.png"
RETRY_IMAGE = "images/again.png"
BACK_IMAGE = "images/back.png"

RESULT_SIZE = (600, 400)
RETRY_BUTTON = Rect(150, 300, 60, 60)
BACK_BUTTON = Rect(390, 300, 60, 60)
RESULT_INFO = Rect(350, 100, 220, 150)

LEVEL_COUNT = 5
LEVEL_BUTTON_SIZE = (128, 224)
LEVEL_AREA_SIZE = (1100, 600)
LEVEL_AREA_MARGIN = 30
LEVEL_CONTENT_LEFT = 60
LEVEL_CONTENT_TOP = 30
LEVEL_BUTTON_SPACING = 10

MENU_BUTTON_SIZE = 110
MENU_BUTTON_ICON = 90
MENU_BUTTON_MARGIN = 30

WHITE = (255, 255, 255)


class Action(enum.Enum):
    """What a click on a menu or result screen asks for."""

    RETRY = "retry"
    BACK_TO_MENU = "back_to_menu"
    OPEN_LEVEL_SELECT = "open_level_select"


class Command(enum.Enum):
    """In-game commands bound to keys."""

    JUMP = "jump"
    PLAY_BAO = "play_bao"
    PLAY_NING = "play_ning"
    PLAY_AN = "play_an"
    PAUSE = "pause"
    DASH = "dash"
    CLOSE = "close"


_KEY_COMMANDS: Dict[int, Command] = {
    pygame.K_SPACE: Command.JUMP,
    pygame.K_1: Command.PLAY_BAO,
    pygame.K_2: Command.PLAY_NING,
    pygame.K_3: Command.PLAY_AN,
    pygame.K_s: Command.PAUSE,
    pygame.K_d: Command.DASH,
    pygame.K_ESCAPE: Command.CLOSE,
}

_CHARACTER_COMMANDS = {
    Command.PLAY_BAO: CharacterType.BAO,
    Command.PLAY_NING: CharacterType.NING,
    Command.PLAY_AN: CharacterType.AN,
}


def key_command(key):
    """The command bound to a pygame key code, or None."""
    return _KEY_COMMANDS.get(key)


def apply_command(session: GameSession, command: Command) -> bool:
    """Carry out ``command`` on ``session``; True means the level should close."""
    if command is Command.CLOSE:
        return True
    if command is Command.JUMP:
        session.jump()
    elif command is Command.PAUSE:
        session.toggle_pause()
    elif command is Command.DASH:
        session.dash()
    elif command in _CHARACTER_COMMANDS:
        session.switch_character(_CHARACTER_COMMANDS[command])
    return False


def _fit(source: Tuple[int, int], bounds: Tuple[int, int]) -> Tuple[int, int]:
    width, height = source
    scale = min(bounds[0] / width, bounds[1] / height)
    return max(1, round(width * scale)), max(1, round(height * scale))


def _scaled(surface: pygame.Surface, size: Tuple[int, int]) -> pygame.Surface:
    try:
        return pygame.transform.smoothscale(surface, size)
    except ValueError:
        return pygame.transform.scale(surface, size)


class Assets:
    """Images and sounds loaded from a directory, cached by name and size.

    Missing or unreadable files give None, so nothing is drawn or played.
    """

    def __init__(self, root):
        self.root = Path(root)
        self._images: Dict[Tuple[str, Optional[Tuple[int, int]], bool], Optional[pygame.Surface]] = {}
        self._sounds: Dict[str, Optional[pygame.mixer.Sound]] = {}

    def _load(self, name: str) -> Optional[pygame.Surface]:
        path = self.root / name
        if not path.is_file():
            return None
        try:
            return pygame.image.load(str(path))
        except pygame.error:
            return None

    def image(self, name, size=None):
        """The image scaled to fit inside ``size``, keeping its aspect ratio."""
        return self._get(name, size, keep_aspect=True)

    def stretched(self, name: str, size: Tuple[int, int]) -> Optional[pygame.Surface]:
        """The image scaled to exactly ``size``."""
        return self._get(name, size, keep_aspect=False)

    def _get(self, name, size, keep_aspect):
        key = (name, tuple(size) if size is not None else None, keep_aspect)
        if key in self._images:
            return self._images[key]
        surface = self._load(name)
        if surface is not None and size is not None:
            target = _fit(surface.get_size(), key[1]) if keep_aspect else key[1]
            surface = _scaled(surface, target)
        self._images[key] = surface
        return surface

    def sound(self, name: str) -> Optional[pygame.mixer.Sound]:
        """The sound stored under ``name``, or None if it cannot be played."""
        if name in self._sounds:
            return self._sounds[name]
        sound = None
        path = self.root / name
        if path.is_file() and pygame.mixer.get_init():
            try:
                sound = pygame.mixer.Sound(str(path))
            except pygame.error:
                sound = None
        self._sounds[name] = sound
        return sound


class ResultScreen:
    """The panel shown when a level is won or lost."""

    def __init__(self, success, coins, letters, lives):
        self.success = success
        self.coins = coins
        self.letters = letters
        self.lives = lives
        self.width, self.height = RESULT_SIZE

    @property
    def background_image(self) -> str:
        return SUCCESS_BACKGROUND if self.success else FAIL_BACKGROUND

    @property
    def coin_text(self) -> str:
        return f"× {self.coins}"

    @property
    def letter_text(self) -> str:
        return f"× {self.letters}"

    def heart_images(self) -> List[str]:
        """One heart per starting life, red while still held, grey once lost."""
        return [HEART_RED if i < self.lives else HEART_GRAY for i in range(3)]

    def handle_click(self, pos):
        """Action for a click at ``pos``, relative to the panel's top-left."""
        if RETRY_BUTTON.collidepoint(pos):
            return Action.RETRY
        if BACK_BUTTON.collidepoint(pos):
            return Action.BACK_TO_MENU
        return None


class LevelSelect:
    """A row of level buttons inside the lower-right area of the screen."""

    def __init__(self):
        area_w, area_h = LEVEL_AREA_SIZE
        self.area = Rect(
            SCREEN_WIDTH - area_w - LEVEL_AREA_MARGIN,
            SCREEN_HEIGHT - area_h - LEVEL_AREA_MARGIN,
            area_w,
            area_h,
        )
        button_w, button_h = LEVEL_BUTTON_SIZE
        self.buttons: List[Tuple[int, Rect]] = [
            (
                level,
                Rect(
                    self.area.x + LEVEL_CONTENT_LEFT
                    + (level - 1) * (button_w + LEVEL_BUTTON_SPACING),
                    self.area.y + LEVEL_CONTENT_TOP,
                    button_w,
                    button_h,
                ),
            )
            for level in range(1, LEVEL_COUNT + 1)
        ]

    @staticmethod
    def button_image(level: int) -> str:
        return f"images/level{level}.png"

    def handle_click(self, pos):
        """The level whose button is at ``pos``, or None."""
        for level, rect in self.buttons:
            if rect.collidepoint(pos):
                return level
        return None


class MainMenu:
    """The title screen with its single button in the lower-left corner."""

    def __init__(self):
        self.button = Rect(
            MENU_BUTTON_MARGIN,
            SCREEN_HEIGHT - MENU_BUTTON_MARGIN - MENU_BUTTON_SIZE,
            MENU_BUTTON_SIZE,
            MENU_BUTTON_SIZE,
        )
        self.hovered = False

    def handle_click(self, pos):
        """OPEN_LEVEL_SELECT when the button is clicked, else None."""
        if self.button.collidepoint(pos):
            return Action.OPEN_LEVEL_SELECT
        return None


class _App:
    """Moves between the menu, the level list and a running level."""

    def __init__(self, screen: pygame.Surface, assets: Assets):
        self.screen = screen
        self.assets = assets
        self.menu = MainMenu()
        self.levels = LevelSelect()
        self.view = "menu"
        self.session: Optional[GameSession] = None
        self.result: Optional[ResultScreen] = None
        self.font = pygame.font.Font(None, 28)
        self.result_pos = (
            (SCREEN_WIDTH - RESULT_SIZE[0]) // 2,
            (SCREEN_HEIGHT - RESULT_SIZE[1]) // 2,
        )

    def start_level(self, level: int) -> None:
        self.session = GameSession(level)
        ground = self.assets._load(GROUND_IMAGE)
        if ground is not None and ground.get_height() > 0:
            width = int(GROUND_TILE_HEIGHT * ground.get_width() / ground.get_height())
            if width > 0:
                self.session.layout_ground(width)
        self.result = None
        self.view = "game"

    def close_level(self) -> None:
        self.session = None
        self.result = None
        self.view = "levels"

    def handle(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.QUIT:
            return False
        if event.type == pygame.MOUSEMOTION and self.view == "menu":
            self.menu.hovered = self.menu.button.collidepoint(event.pos)
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self._click(event.pos)
        elif event.type == pygame.KEYDOWN and self.view == "game" and self.session:
            command = key_command(event.key)
            if command is not None and apply_command(self.session, command):
                self.close_level()
        return True

    def _click(self, pos: Tuple[int, int]) -> None:
        if self.view == "menu":
            if self.menu.handle_click(pos) is Action.OPEN_LEVEL_SELECT:
                self.view = "levels"
        elif self.view == "levels":
            level = self.levels.handle_click(pos)
            if level is not None:
                self.start_level(level)
        elif self.view == "game" and self.result is not None and self.session:
            local = (pos[0] - self.result_pos[0], pos[1] - self.result_pos[1])
            action = self.result.handle_click(local)
            if action is Action.RETRY:
                self.start_level(self.session.level)
            elif action is Action.BACK_TO_MENU:
                self.close_level()

    def update(self, delta_sec: float) -> None:
        session = self.session
        if self.view != "game" or session is None:
            return
        session.tick(delta_sec)
        for name, volume in session.drain_sounds():
            sound = self.assets.sound(name)
            if sound is not None:
                sound.set_volume(min(volume, 1.0))
                sound.play()
        if session.outcome is not Outcome.PLAYING and self.result is None:
            self.result = ResultScreen(
                session.outcome is Outcome.FINISHED,
                session.coins,
                session.letters,
                session.lives,
            )

    def _blit(self, surface: Optional[pygame.Surface], pos: Tuple[int, int]) -> None:
        if surface is not None:
            self.screen.blit(surface, pos)

    def _text(self, text: str, pos: Tuple[int, int]) -> None:
        self.screen.blit(self.font.render(text, True, WHITE), pos)

    def draw(self) -> None:
        self.screen.fill((0, 0, 0))
        size = (SCREEN_WIDTH, SCREEN_HEIGHT)
        if self.view == "menu":
            self._blit(self.assets.stretched(MENU_BACKGROUND, size), (0, 0))
            button = pygame.Surface(self.menu.button.size, pygame.SRCALPHA)
            alpha = 230 if self.menu.hovered else 178
            shade = 255 if self.menu.hovered else 200
            radius = MENU_BUTTON_SIZE // 2
            pygame.draw.circle(button, (shade, shade, shade, alpha), (radius, radius), radius)
            self.screen.blit(button, self.menu.button.topleft)
            icon = self.assets.image(MENU_BUTTON_IMAGE, (MENU_BUTTON_ICON, MENU_BUTTON_ICON))
            if icon is not None:
                self.screen.blit(icon, icon.get_rect(center=self.menu.button.center))
        elif self.view == "levels":
            self._blit(self.assets.stretched(LEVEL_BACKGROUND, size), (0, 0))
            for level, rect in self.levels.buttons:
                icon = self.assets.image(LevelSelect.button_image(level), rect.size)
                if icon is not None:
                    self.screen.blit(icon, icon.get_rect(center=rect.center))
        elif self.session is not None:
            self._draw_game(self.session)
        pygame.display.flip()

    def _draw_item(self, item: GameItem) -> None:
        surface = self.assets.image(item.image, (item.width, item.height))
        if surface is None:
            return
        if item.opacity < 1.0:
            surface = surface.copy()
            surface.set_alpha(int(255 * item.opacity))
        self.screen.blit(surface, (item.x, item.y))

    def _draw_game(self, session: GameSession) -> None:
        w, h = SCREEN_WIDTH, SCREEN_HEIGHT
        self._blit(self.assets.stretched(session.background_image, (w, h)), (0, 0))
        character = session.character
        self._blit(
            self.assets.image(character.image, (character.size, character.size)),
            (character.x, character.y),
        )
        tile = self.assets.stretched(
            GROUND_IMAGE, (session.ground_tile_width, GROUND_TILE_HEIGHT)
        )
        for x in session.ground_tiles:
            self._blit(tile, (x, session.ground_top))
        for item in session.items:
            if not item.removed:
                self._draw_item(item)

        self._blit(self.assets.image(COIN_IMAGE, (40, 40)), (w // 2 + 200, 20))
        self._text(f"× {session.coins}", (w // 2 + 250, 30))
        self._blit(self.assets.image(LETTER_IMAGE, (40, 40)), (w // 2 + 430, 20))
        self._text(f"× {session.letters}", (w // 2 + 480, 30))
        for i in range(3):
            heart = HEART_RED if i < session.lives else HEART_GRAY
            self._blit(self.assets.image(heart, (40, 40)), (w // 2 - 300 + i * 50, 20))

        if session.spear_countdown.visible:
            self._blit(self.assets.image(SPEAR_IMAGE, (200, 200)), (20, h - 180))
            self._text(session.spear_countdown.text, (220, h - 70))
        if session.magnet_countdown.visible:
            self._blit(self.assets.image(MAGNET_IMAGE, (90, 90)), (270, h - 110))
            self._text(session.magnet_countdown.text, (380, h - 70))
        if session.speed_up_countdown.visible:
            self._blit(self.assets.stretched(SPEED_PIG_IMAGE, (90, 90)), (450, h - 110))
            self._text(session.speed_up_countdown.text, (550, h - 70))

        if session.pause_overlay_visible:
            self._blit(
                self.assets.image(session.pause_image, (1000, 500)),
                ((w - 800) // 2 - 100, (h - 400) // 2),
            )
        if self.result is not None:
            self._draw_result(self.result)

    def _draw_result(self, result: ResultScreen) -> None:
        panel = pygame.Surface(RESULT_SIZE, pygame.SRCALPHA)
        background = self.assets.stretched(result.background_image, RESULT_SIZE)
        if background is not None:
            panel.blit(background, (0, 0))
        mask = pygame.Surface(RESULT_SIZE, pygame.SRCALPHA)
        mask.fill((0, 0, 0, 120))
        panel.blit(mask, (0, 0))

        info = RESULT_INFO
        rows = (
            (COIN_IMAGE, result.coin_text, info.y),
            (LETTER_IMAGE, result.letter_text, info.y + 50),
        )
        for image, text, y in rows:
            icon = self.assets.stretched(image, (40, 40))
            if icon is not None:
                panel.blit(icon, (info.x, y))
            panel.blit(self.font.render(text, True, WHITE), (info.x + 60, y + 10))
        for i, heart in enumerate(result.heart_images()):
            icon = self.assets.stretched(heart, (30, 30))
            if icon is not None:
                panel.blit(icon, (info.x + i * 40, info.y + 105))

        for image, rect in ((RETRY_IMAGE, RETRY_BUTTON), (BACK_IMAGE, BACK_BUTTON)):
            icon = self.assets.image(image, rect.size)
            if icon is not None:
                panel.blit(icon, icon.get_rect(center=rect.center))
        self.screen.blit(panel, self.result_pos)


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="tribbiedash", description="Side-scrolling runner.")
    parser.add_argument(
        "--assets",
        default="assets",
        help="directory holding the images/ and sound/ folders (default: %(default)s)",
    )
    parser.add_argument(
        "--level",
        type=int,
        choices=range(1, LEVEL_COUNT + 1),
        help="start this level straight away",
    )
    return parser.parse_args(argv)


def main(argv=None):
    """Open the game window and run until it is closed."""
    args = _parse_args(argv)
    pygame.init()
    try:
        try:
            pygame.mixer.init()
        except pygame.error:
            pass
        screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
        pygame.display.set_caption(CAPTION)
        app = _App(screen, Assets(args.assets))
        if args.level is not None:
            app.start_level(args.level)
        clock = pygame.time.Clock()
        running = True
        while running:
            delta_sec = clock.tick(FPS) / 1000.0
            for event in pygame.event.get():
                if not app.handle(event):
                    running = False
                    break
            app.update(delta_sec)
            app.draw()
    finally:
        pygame.quit()
    return 0