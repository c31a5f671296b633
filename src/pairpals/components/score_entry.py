"""Persisted leaderboard record."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict


def _new_entry_id() -> str:
    return uuid.uuid4().hex


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


@dataclass(frozen=True, slots=True)
class ScoreEntry:
    name: str
    moves: int
    elapsed_seconds: int
    difficulty: str
    date: str = field(default_factory=_now_iso)
    id: str = field(default_factory=_new_entry_id)

    @property
    def rank_key(self) -> tuple[int, int]:
        return (self.moves, self.elapsed_seconds)

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "moves": self.moves,
            "elapsedSeconds": self.elapsed_seconds,
            "date": self.date,
            "difficulty": self.difficulty,
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> ScoreEntry:
        """Build an entry from its stored form; raises ``ValueError`` on malformed input."""
        if not isinstance(record, dict):
            raise ValueError(f"score record must be an object, got {type(record).__name__}")
        try:
            moves = record["moves"]
            elapsed = record["elapsedSeconds"]
            name = record["name"]
            entry_id = record["id"]
            date = record["date"]
            difficulty = record["difficulty"]
        except KeyError as exc:
            raise ValueError(f"score record missing field {exc.args[0]!r}") from None
        if isinstance(moves, bool) or not isinstance(moves, int):
            raise ValueError("moves must be an integer")
        if isinstance(elapsed, bool) or not isinstance(elapsed, int):
            raise ValueError("elapsedSeconds must be an integer")
        if not all(isinstance(value, str) for value in (name, entry_id, date, difficulty)):
            raise ValueError("name, id, date and difficulty must be strings")
        return cls(
            name=name,
            moves=moves,
            elapsed_seconds=elapsed,
            difficulty=difficulty,
            date=date,
            id=entry_id,
        )
