"""Ranked, persisted record of completed sessions."""
from __future__ import annotations

import json
import logging
from typing import List

from pairpals.components.score_entry import ScoreEntry
from pairpals.constants import HIGH_SCORE_KEY, LEADERBOARD_KEY, LEADERBOARD_LIMIT
from pairpals.events.bus import (
    EVENT_LEADERBOARD_CLEAR_REQUEST,
    EVENT_LEADERBOARD_UPDATED,
    EventBus,
)
from pairpals.utils.storage import KeyValueStore, MemoryStore

logger = logging.getLogger("pairpals.leaderboard")


class LeaderboardStore:
    """Keeps the top entries ordered by fewest moves, then shortest time.

    Reads never raise: missing, unparsable or malformed data is an empty board.
    Write failures are logged and swallowed so a broken store never interrupts
    play.
    """

    def __init__(
        self,
        store: KeyValueStore | None = None,
        *,
        key: str = LEADERBOARD_KEY,
        high_score_key: str = HIGH_SCORE_KEY,
        limit: int = LEADERBOARD_LIMIT,
    ) -> None:
        self._store = store if store is not None else MemoryStore()
        self._key = key
        self._high_score_key = high_score_key
        self._limit = max(0, int(limit))

    @property
    def limit(self) -> int:
        return self._limit

    def load(self) -> List[ScoreEntry]:
        try:
            raw = self._store.get(self._key)
        except (OSError, ValueError, TypeError) as exc:
            logger.warning("Leaderboard read failed: %s", exc)
            return []
        if not raw:
            return []
        try:
            records = json.loads(raw)
        except (TypeError, ValueError, RecursionError):
            logger.warning("Leaderboard data is not valid JSON; treating as empty")
            return []
        if not isinstance(records, list):
            return []
        try:
            return [ScoreEntry.from_record(record) for record in records]
        except ValueError as exc:
            logger.warning("Leaderboard data is malformed (%s); treating as empty", exc)
            return []

    def record(self, entry: ScoreEntry) -> List[ScoreEntry]:
        entries = self.load()
        entries.append(entry)
        entries.sort(key=lambda item: item.rank_key)
        entries = entries[: self._limit]
        if self._persist(entries):
            logger.info("Recorded %s: %d moves in %ds", entry.name, entry.moves, entry.elapsed_seconds)
        return entries

    def clear(self) -> None:
        self._persist([])

    def _persist(self, entries: List[ScoreEntry]) -> bool:
        payload = json.dumps([entry.to_record() for entry in entries])
        try:
            self._store.set(self._key, payload)
        except (OSError, ValueError, TypeError) as exc:
            logger.warning("Leaderboard write failed: %s", exc)
            return False
        return True

    def best_score(self) -> int:
        try:
            raw = self._store.get(self._high_score_key)
        except (OSError, ValueError, TypeError) as exc:
            logger.warning("High score read failed: %s", exc)
            return 0
        if raw is None:
            return 0
        try:
            return max(0, int(raw))
        except (TypeError, ValueError):
            return 0

    def offer_score(self, score: int) -> int:
        """Persist ``score`` if it beats the stored best; returns the resulting best."""
        best = self.best_score()
        if score <= best:
            return best
        try:
            self._store.set(self._high_score_key, str(int(score)))
        except (OSError, ValueError, TypeError) as exc:
            logger.warning("High score write failed: %s", exc)
        return score


class LeaderboardSystem:
    """Bridges leaderboard maintenance requests from the presentation layer."""

    def __init__(self, event_bus: EventBus, store: LeaderboardStore):
        self.event_bus = event_bus
        self.store = store
        self.event_bus.subscribe(EVENT_LEADERBOARD_CLEAR_REQUEST, self.on_clear_request)

    def on_clear_request(self, sender, **kwargs):
        # Requires an explicit confirmation from the host.
        if kwargs.get('confirmed') is not True:
            return
        self.store.clear()
        logger.info("Leaderboard cleared")
        self.event_bus.emit(EVENT_LEADERBOARD_UPDATED, entries=self.store.load())
