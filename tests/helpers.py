from __future__ import annotations

import random
from typing import Dict, List, Sequence, Tuple

from esper import World

from pairpals.components.difficulty import Difficulty
from pairpals.components.game_session import GameSession
from pairpals.components.tile import FlipState, Tile, TileFlip
from pairpals.events.bus import EVENT_TICK, EventBus
from pairpals.systems.game_flow_system import GameFlowSystem
from pairpals.systems.hint import HintSystem
from pairpals.systems.leaderboard import LeaderboardStore
from pairpals.systems.match_resolution import MatchResolutionSystem
from pairpals.systems.scheduler import SchedulerSystem
from pairpals.systems.score_timer import ScoreTimerSystem
from pairpals.systems.tile_flip import TileFlipSystem
from pairpals.world import create_world


class Harness:
    """World, bus and every gameplay system wired the way the game facade does it."""

    def __init__(self, *, seed: int = 0, leaderboard: LeaderboardStore | None = None, max_time: int = 120):
        self.bus = EventBus()
        self.world: World = create_world(rng=random.Random(seed))
        self.scheduler = SchedulerSystem(self.world, self.bus)
        self.flow = GameFlowSystem(self.world, self.bus, self.scheduler, max_time=max_time)
        self.flip = TileFlipSystem(self.world, self.bus, self.scheduler)
        self.resolver = MatchResolutionSystem(self.world, self.bus, self.scheduler)
        self.hints = HintSystem(self.world, self.bus, self.scheduler)
        self.score_timer = ScoreTimerSystem(self.world, self.bus, leaderboard=leaderboard)

    def start(self, difficulty: Difficulty = Difficulty.MEDIUM, player_name: str = "") -> GameSession:
        self.flow.difficulty = difficulty
        self.flow.player_name = player_name
        return self.flow.start_session()


def drive_ticks(bus: EventBus, count: int = 10, dt: float = 0.1) -> None:
    for _ in range(count):
        bus.emit(EVENT_TICK, dt=dt)


def tiles_by_content(world: World) -> Dict[str, List[int]]:
    groups: Dict[str, List[int]] = {}
    for _, tile in sorted(world.get_component(Tile), key=lambda row: row[1].id):
        groups.setdefault(tile.content_ref, []).append(tile.id)
    return groups


def flip_state(world: World, tile_id: int) -> FlipState:
    for ent, tile in world.get_component(Tile):
        if tile.id == tile_id:
            return world.component_for_entity(ent, TileFlip).state
    raise KeyError(tile_id)


def matching_pairs(world: World) -> List[Tuple[int, int]]:
    return [(ids[0], ids[1]) for ids in tiles_by_content(world).values()]


def mismatched_pair(world: World) -> Tuple[int, int]:
    """Two hidden tiles holding different content."""
    hidden = [
        ids[0]
        for ids in tiles_by_content(world).values()
        if flip_state(world, ids[0]) is FlipState.HIDDEN
    ]
    return hidden[0], hidden[1]


def play_pair(harness: Harness, pair: Sequence[int]) -> None:
    """Flip both tiles of ``pair`` and let the reveal window elapse."""
    harness.flip.request_flip(pair[0])
    harness.flip.request_flip(pair[1])
    drive_ticks(harness.bus, count=8, dt=0.1)


def capture(bus: EventBus, name: str) -> list:
    received: list = []
    bus.subscribe(name, lambda sender, **payload: received.append(payload))
    return received
