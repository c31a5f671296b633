from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from pairpals.components.difficulty import Difficulty, GameConfig
from pairpals.constants import HINT_BUDGET


@dataclass(slots=True)
class GameSession:
    """Aggregate state for one played board.

    Created when a game starts and deleted on restart, new game or difficulty
    change. ``session_id`` is unique per world so deferred work scheduled for a
    superseded session can be recognised and dropped.
    """

    session_id: int
    difficulty: Difficulty
    config: GameConfig
    player_name: str = ""
    pending_flips: List[int] = field(default_factory=list)
    move_count: int = 0
    match_count: int = 0
    hint_budget: int = HINT_BUDGET
    is_over: bool = False
    end_reason: str | None = None

    @property
    def pair_count(self) -> int:
        return self.config.pair_count

    @property
    def is_complete(self) -> bool:
        return self.match_count >= self.config.pair_count
