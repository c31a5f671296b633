from dataclasses import dataclass

from pairpals.constants import MAX_TIME


@dataclass(slots=True)
class ScoreState:
    score: int = 0
    streak: int = 0
    strike_count: int = 0


@dataclass(slots=True)
class Countdown:
    """Whole-second countdown driven by fractional frame ticks."""

    time_left_seconds: int = MAX_TIME
    elapsed_seconds: int = 0
    frozen: bool = False
    # Fraction of a second carried between ticks.
    accumulator: float = 0.0
