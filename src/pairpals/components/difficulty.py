"""Difficulty tiers and the board configuration bound to each."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True, slots=True)
class GameConfig:
    pair_count: int
    columns: int
    label: str

    def __post_init__(self) -> None:
        if self.pair_count < 1:
            raise ValueError(f"pair_count must be at least 1, got {self.pair_count}")
        if self.columns < 1:
            raise ValueError(f"columns must be at least 1, got {self.columns}")

    @property
    def tile_count(self) -> int:
        return self.pair_count * 2


class Difficulty(Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def config(self) -> GameConfig:
        return DIFFICULTY_PRESETS[self]

    @classmethod
    def parse(cls, value: Difficulty | str | None) -> Difficulty:
        """Accept an enum member or its string value; anything else falls back to the default."""
        if isinstance(value, Difficulty):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return DEFAULT_DIFFICULTY


DIFFICULTY_PRESETS: dict[Difficulty, GameConfig] = {
    Difficulty.EASY: GameConfig(pair_count=4, columns=4, label="Easy"),
    Difficulty.MEDIUM: GameConfig(pair_count=6, columns=4, label="Medium"),
    Difficulty.HARD: GameConfig(pair_count=8, columns=4, label="Hard"),
}

DEFAULT_DIFFICULTY = Difficulty.MEDIUM
