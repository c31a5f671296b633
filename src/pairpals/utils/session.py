"""Lookups shared by the systems that operate on the active session."""
from __future__ import annotations

from typing import Iterator, Tuple

from esper import World

from pairpals.components.game_session import GameSession
from pairpals.components.score_state import Countdown, ScoreState
from pairpals.components.tile import HintMark, Tile, TileFlip


def get_session(world: World) -> GameSession | None:
    for _, session in world.get_component(GameSession):
        return session
    return None


def is_active_session(world: World, session_id: int | None) -> bool:
    session = get_session(world)
    return session is not None and session.session_id == session_id


def get_score_state(world: World) -> ScoreState | None:
    for _, score in world.get_component(ScoreState):
        return score
    return None


def get_countdown(world: World) -> Countdown | None:
    for _, countdown in world.get_component(Countdown):
        return countdown
    return None


def get_tile_entity(world: World, tile_id: int) -> int | None:
    for ent, tile in world.get_component(Tile):
        if tile.id == tile_id:
            return ent
    return None


def iter_tiles(world: World) -> Iterator[Tuple[int, Tile, TileFlip, HintMark]]:
    """Yield ``(entity, tile, flip, hint)`` ordered by tile id."""
    rows = world.get_components(Tile, TileFlip, HintMark)
    for ent, (tile, flip, hint) in sorted(rows, key=lambda row: row[1][0].id):
        yield ent, tile, flip, hint
