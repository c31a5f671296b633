from __future__ import annotations

import logging
import math

from esper import World

from pairpals.components.game_state import GameMode
from pairpals.components.score_entry import ScoreEntry
from pairpals.constants import (
    MATCH_BASE_POINTS,
    STREAK_BONUS,
    STRIKE_LIMIT,
    STRIKE_PENALTY,
)
from pairpals.events.bus import (
    EVENT_COUNTDOWN_TICK,
    EVENT_GAME_OVER,
    EVENT_GAME_WON,
    EVENT_LEADERBOARD_UPDATED,
    EVENT_PAIR_MATCHED,
    EVENT_PAIR_MISSED,
    EVENT_SCORE_CHANGED,
    EVENT_STRIKE_PENALTY,
    EVENT_TICK,
    EventBus,
)
from pairpals.systems.leaderboard import LeaderboardStore
from pairpals.utils.game_state import set_game_mode
from pairpals.utils.session import get_countdown, get_score_state, get_session

logger = logging.getLogger("pairpals.score_timer")

REASON_COMPLETED = "completed"
REASON_TIMEOUT = "timeout"


class ScoreTimerSystem:
    """Applies scoring rules to pair outcomes and runs the session countdown.

    Matches earn ``100 + 25 * streak`` and reset strikes. Misses reset the
    streak; every third consecutive miss costs 100 points, floored at zero.
    The session ends when the countdown reaches zero or every pair is matched,
    and ending is idempotent.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        leaderboard: LeaderboardStore | None = None,
    ):
        self.world = world
        self.event_bus = event_bus
        self.leaderboard = leaderboard
        self.high_score = leaderboard.best_score() if leaderboard is not None else 0
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)
        self.event_bus.subscribe(EVENT_PAIR_MATCHED, self.on_pair_matched)
        self.event_bus.subscribe(EVENT_PAIR_MISSED, self.on_pair_missed)

    # ------------------------------------------------------------------
    # Countdown
    # ------------------------------------------------------------------

    def on_tick(self, sender, **kwargs):
        dt = kwargs.get('dt', 1/60)
        try:
            dt = float(dt)
        except (TypeError, ValueError):
            return
        if not math.isfinite(dt) or dt <= 0.0:
            return
        session = get_session(self.world)
        countdown = get_countdown(self.world)
        if session is None or countdown is None or session.is_over or countdown.frozen:
            return
        countdown.accumulator += dt
        while countdown.accumulator >= 1.0 - 1e-9 and not session.is_over:
            countdown.accumulator -= 1.0
            self.tick_second()

    def tick_second(self) -> None:
        """Advance the countdown by one whole second."""
        session = get_session(self.world)
        countdown = get_countdown(self.world)
        if session is None or countdown is None or session.is_over or countdown.frozen:
            return
        countdown.time_left_seconds = max(0, countdown.time_left_seconds - 1)
        countdown.elapsed_seconds += 1
        self.event_bus.emit(
            EVENT_COUNTDOWN_TICK,
            time_left=countdown.time_left_seconds,
            elapsed=countdown.elapsed_seconds,
        )
        if countdown.time_left_seconds == 0:
            self.end_game(REASON_TIMEOUT)

    # ------------------------------------------------------------------
    # Outcome handlers
    # ------------------------------------------------------------------

    def on_pair_matched(self, sender, **kwargs):
        session = get_session(self.world)
        score = get_score_state(self.world)
        if session is None or score is None or session.is_over:
            return
        points = MATCH_BASE_POINTS + STREAK_BONUS * score.streak
        score.score += points
        score.streak += 1
        score.strike_count = 0
        self.event_bus.emit(
            EVENT_SCORE_CHANGED,
            score=score.score,
            delta=points,
            streak=score.streak,
            strikes=score.strike_count,
            reason="match",
        )
        if session.is_complete:
            self.end_game(REASON_COMPLETED)

    def on_pair_missed(self, sender, **kwargs):
        session = get_session(self.world)
        score = get_score_state(self.world)
        if session is None or score is None or session.is_over:
            return
        score.strike_count += 1
        score.streak = 0
        delta = 0
        if score.strike_count >= STRIKE_LIMIT:
            before = score.score
            score.score = max(0, score.score - STRIKE_PENALTY)
            score.strike_count = 0
            delta = score.score - before
            self.event_bus.emit(EVENT_STRIKE_PENALTY, score=score.score, delta=delta)
        self.event_bus.emit(
            EVENT_SCORE_CHANGED,
            score=score.score,
            delta=delta,
            streak=score.streak,
            strikes=score.strike_count,
            reason="miss",
        )

    # ------------------------------------------------------------------
    # Game end
    # ------------------------------------------------------------------

    def end_game(self, reason: str) -> bool:
        """Transition the active session to game over; later calls are no-ops."""
        session = get_session(self.world)
        if session is None or session.is_over:
            return False
        session.is_over = True
        session.end_reason = reason
        countdown = get_countdown(self.world)
        if countdown is not None:
            countdown.frozen = True
        score_state = get_score_state(self.world)
        final_score = score_state.score if score_state is not None else 0
        elapsed = countdown.elapsed_seconds if countdown is not None else 0

        self.high_score = max(self.high_score, final_score)
        if self.leaderboard is not None:
            self.high_score = max(self.high_score, self.leaderboard.offer_score(final_score))
        set_game_mode(self.world, self.event_bus, GameMode.GAME_OVER)
        logger.info(
            "Session %d over (%s): score=%d moves=%d elapsed=%ds",
            session.session_id, reason, final_score, session.move_count, elapsed,
        )

        if session.is_complete:
            self.event_bus.emit(
                EVENT_GAME_WON,
                session_id=session.session_id,
                score=final_score,
                moves=session.move_count,
                elapsed=elapsed,
            )
            name = session.player_name.strip()
            if name and self.leaderboard is not None:
                entries = self.leaderboard.record(
                    ScoreEntry(
                        name=name,
                        moves=session.move_count,
                        elapsed_seconds=elapsed,
                        difficulty=session.difficulty.value,
                    )
                )
                self.event_bus.emit(EVENT_LEADERBOARD_UPDATED, entries=entries)

        self.event_bus.emit(
            EVENT_GAME_OVER,
            session_id=session.session_id,
            reason=reason,
            score=final_score,
            high_score=self.high_score,
        )
        return True
