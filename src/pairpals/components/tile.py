from dataclasses import dataclass
from enum import Enum, auto


class FlipState(Enum):
    HIDDEN = auto()
    FLIPPED = auto()
    MATCHED = auto()


@dataclass(slots=True)
class Tile:
    """Identity of a single board tile.

    ``id`` is the board position assigned when the board was built and never
    changes for the rest of the session. Two tiles share each ``content_ref``.
    """
    id: int
    content_ref: str


@dataclass(slots=True)
class TileFlip:
    state: FlipState = FlipState.HIDDEN


@dataclass(slots=True)
class HintMark:
    """Cosmetic highlight set by the hint service."""
    hinted: bool = False


@dataclass(slots=True)
class MatchAnimation:
    """Marker present on freshly matched tiles until the celebration window ends."""
