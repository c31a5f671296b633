import random
from pathlib import Path

from pairpals.components.difficulty import Difficulty
from pairpals.components.game_state import GameMode
from pairpals.components.tile import FlipState
from pairpals.events.bus import EVENT_GAME_WON
from pairpals.game import PairPalsGame


def _pairs(game: PairPalsGame) -> list[tuple[int, int]]:
    groups: dict[str, list[int]] = {}
    for view in game.snapshot().tiles:
        groups.setdefault(view.content_ref, []).append(view.id)
    return [(ids[0], ids[1]) for ids in groups.values()]


def _play(game: PairPalsGame, pair) -> None:
    game.click(pair[0])
    game.click(pair[1])
    for _ in range(8):
        game.update(0.1)


def test_menu_snapshot_before_start():
    game = PairPalsGame()
    snap = game.snapshot()
    assert snap.mode == GameMode.MENU
    assert snap.tiles == ()
    assert snap.moves == 0


def test_update_outside_play_does_not_tick():
    game = PairPalsGame(rng=random.Random(1))
    game.update(5.0)
    game.start("Ada", Difficulty.EASY)

    assert game.snapshot().time_left == 120


def test_full_game_reaches_leaderboard(tmp_path):
    save_path = Path(tmp_path) / "save.json"
    game = PairPalsGame(save_path=save_path, rng=random.Random(4))
    wins = []
    game.bus.subscribe(EVENT_GAME_WON, lambda sender, **payload: wins.append(payload))
    game.start("Ada", Difficulty.EASY)

    for pair in _pairs(game):
        _play(game, pair)

    snap = game.snapshot()
    assert snap.mode == GameMode.GAME_OVER
    assert snap.is_over is True
    assert snap.matches == snap.pair_count == 4
    assert all(view.state is FlipState.MATCHED for view in snap.tiles)
    assert len(wins) == 1
    assert snap.high_score == 550

    again = PairPalsGame(save_path=save_path)
    assert [(e.name, e.moves) for e in again.leaderboard()] == [("Ada", 4)]
    assert again.snapshot().high_score == 550


def test_snapshot_reflects_flips_hints_and_animation():
    game = PairPalsGame(rng=random.Random(2))
    game.start("", "medium")
    a, b = _pairs(game)[0]

    game.click(a)
    snap = game.snapshot()
    assert snap.tiles[a].face_up is True
    assert snap.columns == 4

    game.click(b)
    for _ in range(8):
        game.update(0.1)
    snap = game.snapshot()
    assert snap.tiles[a].animate is True
    assert snap.score == 100
    assert snap.moves == 1

    game.hint()
    snap = game.snapshot()
    assert snap.hints_left == 2
    assert sum(1 for view in snap.tiles if view.hinted) == 2


def test_restart_and_clear_leaderboard():
    game = PairPalsGame(rng=random.Random(3))
    game.add_custom_content(["img"])
    game.start("Ada", Difficulty.EASY)
    for pair in _pairs(game):
        _play(game, pair)
    assert len(game.leaderboard()) == 1

    game.clear_leaderboard(confirmed=False)
    assert len(game.leaderboard()) == 1
    game.clear_leaderboard(confirmed=True)
    assert game.leaderboard() == []

    game.restart()
    snap = game.snapshot()
    assert snap.mode == GameMode.MENU
    assert snap.player_name == ""


def test_new_game_and_difficulty_switch():
    game = PairPalsGame(rng=random.Random(5))
    game.start("Bo", Difficulty.EASY)
    game.new_game()
    assert len(game.snapshot().tiles) == 8

    game.set_difficulty(Difficulty.HARD)
    snap = game.snapshot()
    assert len(snap.tiles) == 16
    assert snap.player_name == "Bo"


def test_effects_settle_after_game_ends():
    game = PairPalsGame(rng=random.Random(6))
    game.start("", Difficulty.EASY)
    for pair in _pairs(game):
        _play(game, pair)
    snap = game.snapshot()
    assert snap.is_over is True
    frozen_time = snap.time_left

    for _ in range(10):
        game.update(0.1)

    snap = game.snapshot()
    assert not any(view.animate for view in snap.tiles)
    assert snap.time_left == frozen_time


def test_hint_marks_clear_after_timeout():
    game = PairPalsGame(rng=random.Random(7), max_time=1)
    game.start("", Difficulty.EASY)
    game.hint()
    assert any(view.hinted for view in game.snapshot().tiles)

    game.update(1.0)
    assert game.snapshot().mode == GameMode.GAME_OVER

    for _ in range(25):
        game.update(0.1)
    assert not any(view.hinted for view in game.snapshot().tiles)
