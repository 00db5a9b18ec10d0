import random

import pygame
import pytest

from tribbiedash.app import (
    BACK_BUTTON,
    HEART_GRAY,
    HEART_RED,
    RETRY_BUTTON,
    SUCCESS_BACKGROUND,
    FAIL_BACKGROUND,
    Action,
    Assets,
    Command,
    LevelSelect,
    MainMenu,
    ResultScreen,
    apply_command,
    key_command,
)
from tribbiedash.character import CharacterType
from tribbiedash.game import SCREEN_HEIGHT, SCREEN_WIDTH, GameSession


@pytest.fixture
def session():
    return GameSession(level=1, rng=random.Random(0), clock=lambda: 0)


@pytest.fixture
def asset_dir(tmp_path):
    images = tmp_path / "images"
    images.mkdir()
    surface = pygame.Surface((100, 50))
    surface.fill((10, 20, 30))
    pygame.image.save(surface, str(images / "wide.bmp"))
    return tmp_path


def test_missing_image_is_none(tmp_path):
    assert Assets(tmp_path).image("images/nothing.png", (40, 40)) is None


def test_image_fits_inside_size_keeping_aspect(asset_dir):
    surface = Assets(asset_dir).image("images/wide.bmp", (40, 40))
    assert surface.get_size() == (40, 20)


def test_image_without_size_is_original(asset_dir):
    surface = Assets(asset_dir).image("images/wide.bmp", None)
    assert surface.get_size() == (100, 50)


def test_image_is_cached(asset_dir):
    assets = Assets(asset_dir)
    first = assets.image("images/wide.bmp", (40, 40))
    assert assets.image("images/wide.bmp", (40, 40)) is first


def test_stretched_image_has_exact_size(asset_dir):
    surface = Assets(asset_dir).stretched("images/wide.bmp", (30, 30))
    assert surface.get_size() == (30, 30)


@pytest.mark.parametrize(
    "lives, expected",
    [
        (3, [HEART_RED, HEART_RED, HEART_RED]),
        (1, [HEART_RED, HEART_GRAY, HEART_GRAY]),
        (0, [HEART_GRAY, HEART_GRAY, HEART_GRAY]),
    ],
)
def test_heart_images(lives, expected):
    assert ResultScreen(False, 0, 0, lives).heart_images() == expected


def test_result_background_and_texts():
    won = ResultScreen(True, 7, 3, 2)
    lost = ResultScreen(False, 7, 3, 2)
    assert won.background_image == SUCCESS_BACKGROUND
    assert lost.background_image == FAIL_BACKGROUND
    assert won.coin_text == "× 7"
    assert won.letter_text == "× 3"


def test_result_buttons():
    screen = ResultScreen(True, 0, 0, 3)
    assert screen.handle_click(RETRY_BUTTON.center) is Action.RETRY
    assert screen.handle_click(BACK_BUTTON.center) is Action.BACK_TO_MENU
    assert screen.handle_click((0, 0)) is None


def test_level_select_buttons_map_to_levels():
    select = LevelSelect()
    levels = [select.handle_click(rect.center) for _, rect in select.buttons]
    assert levels == [1, 2, 3, 4, 5]


def test_level_select_layout_invariants():
    select = LevelSelect()
    screen = pygame.Rect(0, 0, SCREEN_WIDTH, SCREEN_HEIGHT)
    rects = [rect for _, rect in select.buttons]
    assert all(screen.contains(rect) and select.area.contains(rect) for rect in rects)
    assert all(a.right < b.left for a, b in zip(rects, rects[1:]))
    assert select.handle_click((0, 0)) is None


def test_main_menu_button():
    menu = MainMenu()
    assert menu.handle_click(menu.button.center) is Action.OPEN_LEVEL_SELECT
    assert menu.handle_click((SCREEN_WIDTH - 1, 0)) is None
    assert menu.button.bottom <= SCREEN_HEIGHT


@pytest.mark.parametrize(
    "key, command",
    [
        (pygame.K_SPACE, Command.JUMP),
        (pygame.K_1, Command.PLAY_BAO),
        (pygame.K_2, Command.PLAY_NING),
        (pygame.K_3, Command.PLAY_AN),
        (pygame.K_s, Command.PAUSE),
        (pygame.K_d, Command.DASH),
        (pygame.K_ESCAPE, Command.CLOSE),
    ],
)
def test_key_command(key, command):
    assert key_command(key) is command


def test_unbound_key():
    assert key_command(pygame.K_q) is None


def test_apply_pause_toggles(session):
    was_paused = session.paused
    assert apply_command(session, Command.PAUSE) is False
    assert session.paused is not was_paused


def test_apply_character_switch(session):
    apply_command(session, Command.PLAY_AN)
    assert session.character.type is CharacterType.AN
    apply_command(session, Command.PLAY_NING)
    assert session.character.type is CharacterType.NING


def test_apply_jump(session):
    apply_command(session, Command.JUMP)
    assert session.character.is_jumping is True


def test_apply_close(session):
    assert apply_command(session, Command.CLOSE) is True