from __future__ import annotations

import random
from typing import List, Sequence, Tuple

from esper import World

from pairpals.components.board import Board
from pairpals.components.tile import HintMark, Tile, TileFlip


def fisher_yates_shuffle(items: List, rng: random.Random) -> None:
    """Uniform in-place permutation."""
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]


def build_board_layout(content: Sequence[str], rng: random.Random) -> List[Tuple[int, str]]:
    """Duplicate each reference into a pair, shuffle, and number tiles by final position."""
    deck = list(content) * 2
    fisher_yates_shuffle(deck, rng)
    return list(enumerate(deck))


def spawn_board(world: World, content: Sequence[str], rng: random.Random, *, columns: int) -> List[int]:
    """Create the board entity and one entity per tile; returns tile entities in id order."""
    world.create_entity(Board(pair_count=len(content), columns=columns))
    entities: List[int] = []
    for tile_id, content_ref in build_board_layout(content, rng):
        entities.append(
            world.create_entity(
                Tile(id=tile_id, content_ref=content_ref),
                TileFlip(),
                HintMark(),
            )
        )
    return entities
