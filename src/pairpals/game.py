"""Headless host for a Pair Pals game.

Sets up the ECS world, event bus and systems. A presentation layer drives it by
forwarding clicks and frame time, and subscribes to ``bus`` for effects.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Tuple

from pairpals.components.board import Board
from pairpals.components.difficulty import Difficulty
from pairpals.components.game_state import GameMode
from pairpals.components.score_entry import ScoreEntry
from pairpals.components.tile import FlipState, MatchAnimation
from pairpals.constants import MAX_TIME
from pairpals.events.bus import (
    EVENT_CUSTOM_CONTENT_ADDED,
    EVENT_DIFFICULTY_CHANGED,
    EVENT_HINT_REQUEST,
    EVENT_LEADERBOARD_CLEAR_REQUEST,
    EVENT_MENU_START_SELECTED,
    EVENT_NEW_GAME_REQUEST,
    EVENT_RESTART_REQUEST,
    EVENT_TICK,
    EVENT_TILE_CLICK,
    EventBus,
)
from pairpals.systems.game_flow_system import GameFlowSystem
from pairpals.systems.hint import HintSystem
from pairpals.systems.leaderboard import LeaderboardStore, LeaderboardSystem
from pairpals.systems.match_resolution import MatchResolutionSystem
from pairpals.systems.scheduler import SchedulerSystem
from pairpals.systems.score_timer import ScoreTimerSystem
from pairpals.systems.tile_flip import TileFlipSystem
from pairpals.utils.game_state import get_game_state
from pairpals.utils.session import get_countdown, get_score_state, get_session, iter_tiles
from pairpals.utils.storage import JsonFileStore, KeyValueStore, MemoryStore
from pairpals.world import create_world


@dataclass(frozen=True, slots=True)
class TileView:
    id: int
    content_ref: str
    state: FlipState
    hinted: bool
    animate: bool

    @property
    def face_up(self) -> bool:
        return self.state is not FlipState.HIDDEN


@dataclass(frozen=True, slots=True)
class GameSnapshot:
    mode: GameMode
    tiles: Tuple[TileView, ...]
    columns: int
    moves: int
    matches: int
    pair_count: int
    score: int
    streak: int
    strikes: int
    time_left: int
    hints_left: int
    high_score: int
    player_name: str
    is_over: bool


class PairPalsGame:
    def __init__(
        self,
        *,
        store: KeyValueStore | None = None,
        save_path: Path | str | None = None,
        rng: random.Random | None = None,
        max_time: int = MAX_TIME,
    ):
        if store is None:
            store = JsonFileStore(save_path) if save_path is not None else MemoryStore()
        self.bus = EventBus()
        self.world = create_world(rng=rng)
        self.leaderboard_store = LeaderboardStore(store)

        # Timing
        self.scheduler = SchedulerSystem(self.world, self.bus)
        # Session lifecycle
        self.game_flow_system = GameFlowSystem(self.world, self.bus, self.scheduler, max_time=max_time)
        # Board systems
        self.tile_flip_system = TileFlipSystem(self.world, self.bus, self.scheduler)
        self.match_resolution_system = MatchResolutionSystem(self.world, self.bus, self.scheduler)
        self.hint_system = HintSystem(self.world, self.bus, self.scheduler)
        # Scoring and persistence
        self.score_timer_system = ScoreTimerSystem(self.world, self.bus, leaderboard=self.leaderboard_store)
        self.leaderboard_system = LeaderboardSystem(self.bus, self.leaderboard_store)

    # Menu -------------------------------------------------------------

    def add_custom_content(self, refs: Iterable[str]) -> None:
        self.bus.emit(EVENT_CUSTOM_CONTENT_ADDED, refs=list(refs))

    def start(self, player_name: str = "", difficulty: Difficulty | str | None = None) -> None:
        self.bus.emit(EVENT_MENU_START_SELECTED, player_name=player_name, difficulty=difficulty)

    def set_difficulty(self, difficulty: Difficulty | str) -> None:
        self.bus.emit(EVENT_DIFFICULTY_CHANGED, difficulty=difficulty)

    # Play -------------------------------------------------------------

    def click(self, tile_id: int) -> None:
        self.bus.emit(EVENT_TILE_CLICK, tile_id=tile_id)

    def hint(self) -> None:
        self.bus.emit(EVENT_HINT_REQUEST)

    def update(self, delta_time: float) -> None:
        state = get_game_state(self.world)
        # Game over still runs pending timers; the countdown is frozen by then.
        if state and state.mode in (GameMode.PLAYING, GameMode.GAME_OVER):
            self.bus.emit(EVENT_TICK, dt=delta_time)

    def new_game(self) -> None:
        self.bus.emit(EVENT_NEW_GAME_REQUEST)

    def restart(self) -> None:
        self.bus.emit(EVENT_RESTART_REQUEST)

    # Leaderboard ------------------------------------------------------

    def leaderboard(self) -> List[ScoreEntry]:
        return self.leaderboard_store.load()

    def clear_leaderboard(self, *, confirmed: bool) -> None:
        self.bus.emit(EVENT_LEADERBOARD_CLEAR_REQUEST, confirmed=confirmed)

    # Read model -------------------------------------------------------

    def snapshot(self) -> GameSnapshot:
        state = get_game_state(self.world)
        session = get_session(self.world)
        score = get_score_state(self.world)
        countdown = get_countdown(self.world)
        columns = next((board.columns for _, board in self.world.get_component(Board)), 0)
        tiles = tuple(
            TileView(
                id=tile.id,
                content_ref=tile.content_ref,
                state=flip.state,
                hinted=hint.hinted,
                animate=self.world.has_component(ent, MatchAnimation),
            )
            for ent, tile, flip, hint in iter_tiles(self.world)
        )
        return GameSnapshot(
            mode=state.mode if state else GameMode.MENU,
            tiles=tiles,
            columns=columns,
            moves=session.move_count if session else 0,
            matches=session.match_count if session else 0,
            pair_count=session.pair_count if session else 0,
            score=score.score if score else 0,
            streak=score.streak if score else 0,
            strikes=score.strike_count if score else 0,
            time_left=countdown.time_left_seconds if countdown else 0,
            hints_left=session.hint_budget if session else 0,
            high_score=self.score_timer_system.high_score,
            player_name=session.player_name if session else self.game_flow_system.player_name,
            is_over=session.is_over if session else False,
        )
