"""High-level coordinator for session start, replay and teardown."""
from __future__ import annotations

import itertools
import logging
import random
from typing import Callable, Iterable

from esper import World

from pairpals.components.board import Board
from pairpals.components.custom_content import CustomContent
from pairpals.components.difficulty import DEFAULT_DIFFICULTY, Difficulty
from pairpals.components.game_session import GameSession
from pairpals.components.game_state import GameMode
from pairpals.components.score_state import Countdown, ScoreState
from pairpals.components.tile import Tile
from pairpals.constants import HINT_BUDGET, MAX_TIME
from pairpals.events.bus import (
    EVENT_BOARD_READY,
    EVENT_CUSTOM_CONTENT_ADDED,
    EVENT_DIFFICULTY_CHANGED,
    EVENT_MENU_START_SELECTED,
    EVENT_NEW_GAME_REQUEST,
    EVENT_RESTART_REQUEST,
    EVENT_SESSION_ENDED,
    EVENT_SESSION_STARTED,
    EventBus,
)
from pairpals.factories.board import spawn_board
from pairpals.factories.content_pool import generate_avatar, resolve_content_pool
from pairpals.systems.scheduler import SchedulerSystem
from pairpals.utils.game_state import get_game_state, set_game_mode
from pairpals.utils.session import get_session

logger = logging.getLogger("pairpals.game_flow")


class GameFlowSystem:
    """Owns the lifetime of the active ``GameSession``.

    A session is built from the menu settings (player name, difficulty and any
    custom content) and torn down on new game, difficulty change or restart.
    Teardown cancels every scheduled task before the old entities go away.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        scheduler: SchedulerSystem,
        *,
        rng: random.Random | None = None,
        content_generator: Callable[[], str] | None = None,
        max_time: int = MAX_TIME,
        hint_budget: int = HINT_BUDGET,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.scheduler = scheduler
        self._rng = rng or getattr(world, "random", None) or random.Random()
        self._generate = content_generator or (lambda: generate_avatar(self._rng))
        self.max_time = max_time
        self.hint_budget = hint_budget
        self.player_name = ""
        self.difficulty: Difficulty = DEFAULT_DIFFICULTY
        self._session_ids = itertools.count(1)
        self._session_entity: int | None = None

        self.event_bus.subscribe(EVENT_CUSTOM_CONTENT_ADDED, self._on_custom_content_added)
        self.event_bus.subscribe(EVENT_MENU_START_SELECTED, self._on_start_selected)
        self.event_bus.subscribe(EVENT_NEW_GAME_REQUEST, self._on_new_game)
        self.event_bus.subscribe(EVENT_DIFFICULTY_CHANGED, self._on_difficulty_changed)
        self.event_bus.subscribe(EVENT_RESTART_REQUEST, self._on_restart)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _on_custom_content_added(self, sender, **payload) -> None:
        refs = payload.get("refs") or ()
        self.add_custom_content(refs)

    def _on_start_selected(self, sender, **payload) -> None:
        name = payload.get("player_name")
        self.player_name = str(name).strip() if name else ""
        if payload.get("difficulty") is not None:
            self.difficulty = Difficulty.parse(payload.get("difficulty"))
        self.start_session()

    def _on_new_game(self, sender, **payload) -> None:
        self.start_session()

    def _on_difficulty_changed(self, sender, **payload) -> None:
        self.difficulty = Difficulty.parse(payload.get("difficulty"))
        state = get_game_state(self.world)
        if state is not None and state.mode != GameMode.MENU:
            self.start_session()

    def _on_restart(self, sender, **payload) -> None:
        self.return_to_menu()

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def add_custom_content(self, refs: Iterable[str]) -> int:
        state = get_game_state(self.world)
        if state is not None and state.mode != GameMode.MENU:
            return 0
        return self._custom_content().add(refs)

    def start_session(self) -> GameSession:
        self.teardown(reason="replaced")
        config = self.difficulty.config
        content = resolve_content_pool(self._custom_content().refs, config.pair_count, self._generate)
        tile_entities = spawn_board(self.world, content, self._rng, columns=config.columns)
        session = GameSession(
            session_id=next(self._session_ids),
            difficulty=self.difficulty,
            config=config,
            player_name=self.player_name,
            hint_budget=self.hint_budget,
        )
        self._session_entity = self.world.create_entity(
            session,
            ScoreState(),
            Countdown(time_left_seconds=self.max_time),
        )
        set_game_mode(self.world, self.event_bus, GameMode.PLAYING)
        logger.info(
            "Session %d started: %s, %d pairs",
            session.session_id, self.difficulty.value, config.pair_count,
        )
        self.event_bus.emit(
            EVENT_BOARD_READY,
            tile_ids=list(range(len(tile_entities))),
            pair_count=config.pair_count,
            columns=config.columns,
        )
        self.event_bus.emit(
            EVENT_SESSION_STARTED,
            session_id=session.session_id,
            difficulty=self.difficulty,
            pair_count=config.pair_count,
        )
        return session

    def teardown(self, *, reason: str) -> None:
        """Discard the active session, its board and every pending scheduled task."""
        session = get_session(self.world)
        self.scheduler.cancel_all()
        doomed = [ent for ent, _ in self.world.get_component(Tile)]
        doomed.extend(ent for ent, _ in self.world.get_component(Board))
        doomed.extend(ent for ent, _ in self.world.get_component(GameSession))
        for ent in doomed:
            if self.world.entity_exists(ent):
                self.world.delete_entity(ent, immediate=True)
        self._session_entity = None
        if session is not None:
            logger.debug("Session %d discarded (%s)", session.session_id, reason)
            self.event_bus.emit(EVENT_SESSION_ENDED, session_id=session.session_id, reason=reason)

    def return_to_menu(self) -> None:
        self.teardown(reason="restart")
        self._custom_content().clear()
        self.player_name = ""
        set_game_mode(self.world, self.event_bus, GameMode.MENU)

    def _custom_content(self) -> CustomContent:
        for _, content in self.world.get_component(CustomContent):
            return content
        content = CustomContent()
        self.world.create_entity(content)
        return content
