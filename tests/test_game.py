import random

import pytest

from tribbiedash.character import CharacterType
from tribbiedash.game import Countdown, GameSession, Outcome
from tribbiedash.items import (
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

FRAME = 0.016


def make_session(level=1, clock_ms=0):
    return GameSession(level, random.Random(7), lambda: clock_ms)


def running_session():
    session = make_session()
    session.toggle_pause()
    return session


def place_on_player(session, item):
    character = session.character
    item.move_to(character.x + 10, character.y + 10)
    session.register_item(item)
    return item


def test_countdown_counts_whole_seconds():
    countdown = Countdown()
    countdown.start(3)
    countdown.tick(0.5)
    assert countdown.remaining == 3
    countdown.tick(0.5)
    assert countdown.remaining == 2
    assert countdown.text == "2s"
    countdown.tick(5)
    assert countdown.remaining == 0
    assert countdown.running is False
    assert countdown.visible is True


def test_countdown_stop_hides():
    countdown = Countdown()
    countdown.start(4)
    countdown.stop()
    countdown.tick(2)
    assert countdown.visible is False
    assert countdown.remaining == 4


def test_session_starts_paused():
    session = make_session()
    assert session.paused is True
    assert session.pause_overlay_visible is True
    session.toggle_pause()
    assert session.paused is False
    assert session.pause_overlay_visible is False


def test_track_y_between_tracks_are_midpoints():
    session = make_session()
    top = session.track_y(Track.TOP)
    middle = session.track_y(Track.MIDDLE)
    bottom = session.track_y(Track.BOTTOM)
    assert top < middle < bottom
    assert session.track_y(Track.BETWEEN_TOP_MIDDLE) == (top + middle) // 2
    assert session.track_y(Track.BETWEEN_MIDDLE_BOTTOM) == (middle + bottom) // 2


def test_character_starts_as_bao_on_bottom_track():
    session = make_session()
    assert session.character.type is CharacterType.BAO
    assert session.character.y == session.track_y(Track.BOTTOM) - 60


def test_paused_tick_does_not_move_items():
    session = make_session()
    coin = GoldCoin(Track.TOP, session.width)
    coin.move_to(500, 100)
    session.register_item(coin)
    session.tick(0.5)
    assert coin.x == 500


def test_running_tick_scrolls_items_left():
    session = running_session()
    coin = GoldCoin(Track.TOP, session.width)
    coin.move_to(500, 100)
    session.register_item(coin)
    session.tick(0.5)
    assert coin.x < 500


def test_coin_collision_counts_and_plays_sound():
    session = running_session()
    coin = place_on_player(session, GoldCoin(Track.BOTTOM, session.width))
    session.tick(FRAME)
    assert session.coins == 1
    assert coin.active is False
    assert ("sound/coin.wav", 2.0) in session.drain_sounds()


def test_letter_collision_counts():
    session = running_session()
    place_on_player(session, Letter(Track.BOTTOM, session.width))
    session.tick(FRAME)
    assert session.letters == 1


def test_three_red_crystals_fail_the_run():
    session = running_session()
    for expected_lives in (2, 1, 0):
        place_on_player(session, RedCrystal(Track.BOTTOM, session.width))
        session.tick(FRAME)
        assert session.lives == expected_lives
    assert session.outcome is Outcome.FAILED
    assert session.paused is True
    assert ("sound/fail.wav", 0.8) in session.drain_sounds()


def test_lion_shield_fails_when_not_dashing():
    session = running_session()
    place_on_player(session, LionShield(Track.BOTTOM, session.width, random.Random(1)))
    session.tick(FRAME)
    assert session.outcome is Outcome.FAILED


def test_lion_shield_is_harmless_while_dashing():
    session = running_session()
    session.character.activate_spear_mode(20)
    session.dash()
    assert session.character.is_dashing is True
    place_on_player(session, LionShield(Track.BOTTOM, session.width, random.Random(1)))
    session.tick(FRAME)
    assert session.outcome is Outcome.PLAYING


def test_spear_pickup_starts_countdown():
    session = running_session()
    place_on_player(session, Spear(Track.BOTTOM, session.width))
    session.tick(FRAME)
    assert session.character.in_spear_mode is True
    assert session.spear_countdown.visible is True
    assert session.spear_countdown.remaining == 20


def test_magnet_pickup_starts_countdown():
    session = running_session()
    place_on_player(session, Magnet(Track.BOTTOM, session.width))
    session.tick(FRAME)
    assert session.character.magnet_active is True
    assert session.magnet_countdown.remaining == 15


def test_speed_pig_doubles_ground_speed():
    normal = running_session()
    boosted = running_session()
    boosted.character.activate_speed_up_mode(8)
    start = normal.ground_tiles[0]
    normal.tick(0.1)
    boosted.tick(0.1)
    normal_shift = start - normal.ground_tiles[0]
    boosted_shift = start - boosted.ground_tiles[0]
    assert boosted_shift == 2 * normal_shift
    assert boosted.speed_up_countdown.remaining == 8


def test_speed_up_expires_and_hides_countdown():
    session = running_session()
    place_on_player(session, SpeedPig(Track.BOTTOM, session.width))
    session.tick(FRAME)
    assert session.speed_up_countdown.visible is True
    for _ in range(90):
        session.tick(0.1)
    assert session.character.speed_up_active is False
    assert session.speed_up_countdown.visible is False


def test_ground_tiles_stay_on_screen():
    session = running_session()
    count = len(session.ground_tiles)
    for _ in range(200):
        session.tick(0.1)
        assert all(x + session.ground_tile_width >= 0 for x in session.ground_tiles)
    assert len(session.ground_tiles) == count
    assert min(session.ground_tiles) <= 0


def test_layout_ground_rejects_non_positive_width():
    session = make_session()
    with pytest.raises(ValueError):
        session.layout_ground(0)


def test_receiver_reached_finishes_level():
    session = running_session()
    receiver = Receiver(Track.BOTTOM, session.width)
    receiver.move_to(session.character.x, session.character.y)
    session.register_item(receiver)
    session.tick(FRAME)
    assert session.outcome is Outcome.FINISHED
    assert receiver.goal_reached is True
    assert session.paused is True


def test_receiver_leaving_screen_fails_level():
    session = running_session()
    receiver = Receiver(Track.TOP, session.width)
    receiver.move_to(-200, 0)
    session.register_item(receiver)
    session.tick(FRAME)
    assert session.outcome is Outcome.FAILED


def test_spawner_adds_items_after_interval():
    session = make_session(clock_ms=10_000)
    session.toggle_pause()
    session.tick(0.1)
    first = session.items
    assert len(first) > 0
    assert all(item.x >= session.width for item in first)
    session.tick(0.1)
    assert len(session.items) == len(first)


def test_no_spawn_before_interval():
    session = make_session(clock_ms=0)
    session.tick(1.0)
    assert session.items == ()


def test_freeze_pauses_items_without_overlay():
    session = running_session()
    session.register_item(GoldCoin(Track.TOP, session.width))
    session.item_manager._items.extend(session.items)
    session.freeze()
    assert session.paused is True
    assert session.pause_overlay_visible is False
    assert all(not item.active for item in session.items)


def test_switch_to_an_disables_jumping():
    session = running_session()
    session.switch_character(CharacterType.AN)
    assert session.character.y == session.track_y(Track.TOP) - 60
    session.jump()
    assert session.character.is_jumping is False
    assert session.drain_sounds() == []


def test_jump_plays_jump_sound():
    session = running_session()
    session.jump()
    assert session.character.is_jumping is True
    assert session.drain_sounds() == [("sound/jump.wav", 1.0)]