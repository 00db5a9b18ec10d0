# tribbiedash

A side-scrolling runner played on three lanes. Items scroll in from the
right edge of the screen. Pick up coins and letters, avoid the red crystals
and lion shields, and once three letters have been handed out, reach the
receiver to finish the level.

## Installing

```
pip install .
```

This installs the game and its one dependency, `pygame`.

## Playing

```
tribbiedash
```

Options:

- `--assets DIR`: directory holding the `images/` and `sound/` folders
  (default: `assets`).
- `--level N`: start level `N` (1 to 5) straight away instead of showing the
  main menu.

Without `--level` the command opens the main menu; its button in the
lower-left corner leads to the level list, where you pick one of five
levels. A level starts paused; press `S` to begin.

Controls:

| Key     | Action                                              |
|---------|-----------------------------------------------------|
| Space   | Jump (Bao can jump a second time in mid-air)        |
| 1       | Switch to Bao (bottom lane, double jump)            |
| 2       | Switch to Ning (middle lane, single jump)           |
| 3       | Switch to An (top lane, no jump)                    |
| D       | Dash for half a second, while holding the spear     |
| S       | Pause or resume                                     |
| Escape  | Leave the level and return to the level list        |

Items:

- **Gold coin**: adds to your coin count. While the magnet is active, coins
  are pulled toward you.
- **Letter**: adds to your letter count.
- **Red crystal**: costs one of your three lives. Losing all three ends the run.
- **Lion shield**: ends the run, unless you are dashing.
- **Spear**: for 20 seconds you can press `D` to dash, which scrolls the
  level four and a half times as fast.
- **Magnet**: attracts coins for 15 seconds.
- **Speed pig**: doubles the scrolling speed and makes jumps faster for 8 seconds.
- **Receiver**: appears once three letters have been spawned; touching it wins
  the level. Letting it scroll past loses the level.

Letters only start to appear after the first ten patterns. Each level mixes
the patterns differently: level 1 teaches the basics, level 2 introduces the
spear, level 3 the speed pig, level 4 the magnet and level 5 combines them.

When a run ends, a result panel shows your coins, letters and remaining
lives, with a button to retry the level and one to go back to the level list.

Images and sounds are loaded from the assets directory. A file that is
missing or cannot be read is simply not drawn or not played; the game still
runs.

## What it does not do

- No images or sounds are shipped with the package; you supply the assets
  directory yourself.
- There is no opening animation before the main menu.
- Scores are not saved between runs.

## Using the engine

The game logic in `tribbiedash.game` can be driven without opening a window:

```python
from tribbiedash.game import GameSession, Outcome

session = GameSession(level=1)
session.toggle_pause()          # sessions start paused
for _ in range(600):
    session.tick(1 / 60)
    if session.outcome is not Outcome.PLAYING:
        break
print(session.coins, session.letters, session.lives, session.outcome)
```

`GameSession` offers `tick()`, `jump()`, `dash()`, `switch_character()`,
`toggle_pause()`, `freeze()` and `drain_sounds()`, which returns the
`(sound file, volume)` pairs requested since the last call. A `rng`
(a `random.Random`) and a `clock` (a function returning milliseconds) can be
passed in to make runs repeatable.

The building blocks live in `tribbiedash.items` (the items and `Track`),
`tribbiedash.character` (`Character`), `tribbiedash.collision`
(`CollisionManager`), `tribbiedash.patterns` (`PatternGenerator`) and
`tribbiedash.manager` (`ItemManager`). The menus, result panel and window
are in `tribbiedash.app`.

## Running the tests

```
pip install .[test]
pytest
```