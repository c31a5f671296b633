from __future__ import annotations

import logging

from esper import World

from pairpals.components.tile import FlipState, MatchAnimation, Tile, TileFlip
from pairpals.constants import MATCH_ANIMATION_DURATION
from pairpals.events.bus import (
    EVENT_MATCH_ANIMATION_END,
    EVENT_PAIR_MATCHED,
    EVENT_PAIR_MISSED,
    EVENT_PAIR_RESOLVE,
    EventBus,
)
from pairpals.systems.scheduler import SchedulerSystem
from pairpals.utils.session import get_session, get_tile_entity, is_active_session

logger = logging.getLogger("pairpals.match_resolution")


class MatchResolutionSystem:
    """Settles a revealed pair once the reveal window has elapsed.

    This is the only system that moves a tile out of ``FLIPPED``.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        scheduler: SchedulerSystem,
        *,
        animation_duration: float = MATCH_ANIMATION_DURATION,
    ):
        self.world = world
        self.event_bus = event_bus
        self.scheduler = scheduler
        self.animation_duration = animation_duration
        self.event_bus.subscribe(EVENT_PAIR_RESOLVE, self.on_pair_resolve)
        self.event_bus.subscribe(EVENT_MATCH_ANIMATION_END, self.on_match_animation_end)

    def on_pair_resolve(self, sender, **kwargs):
        tile_ids = kwargs.get('tile_ids')
        if not tile_ids or len(tile_ids) != 2:
            return
        session_id = kwargs.get('session_id')
        if session_id is not None and not is_active_session(self.world, session_id):
            return
        self.resolve(*tile_ids)

    def resolve(self, tile_a: int, tile_b: int) -> bool | None:
        """Commit or revert the pair; returns True on match, False on miss, None if ignored."""
        session = get_session(self.world)
        if session is None:
            return None
        ent_a = get_tile_entity(self.world, tile_a)
        ent_b = get_tile_entity(self.world, tile_b)
        if ent_a is None or ent_b is None or ent_a == ent_b:
            session.pending_flips.clear()
            return None
        flip_a = self.world.component_for_entity(ent_a, TileFlip)
        flip_b = self.world.component_for_entity(ent_b, TileFlip)
        if flip_a.state is not FlipState.FLIPPED or flip_b.state is not FlipState.FLIPPED:
            session.pending_flips.clear()
            return None

        content_a = self.world.component_for_entity(ent_a, Tile).content_ref
        content_b = self.world.component_for_entity(ent_b, Tile).content_ref
        pair = (tile_a, tile_b)
        # Outcome handlers may start new flips, so the gate opens first.
        session.pending_flips.clear()
        if content_a == content_b:
            flip_a.state = FlipState.MATCHED
            flip_b.state = FlipState.MATCHED
            session.match_count += 1
            for ent in (ent_a, ent_b):
                self.world.add_component(ent, MatchAnimation())
            self.scheduler.schedule(EVENT_MATCH_ANIMATION_END, self.animation_duration, tile_ids=pair)
            logger.debug("Matched tiles %s (%d/%d)", pair, session.match_count, session.pair_count)
            self.event_bus.emit(
                EVENT_PAIR_MATCHED,
                tile_ids=pair,
                content_ref=content_a,
                matches=session.match_count,
            )
            return True

        flip_a.state = FlipState.HIDDEN
        flip_b.state = FlipState.HIDDEN
        logger.debug("Missed tiles %s", pair)
        self.event_bus.emit(EVENT_PAIR_MISSED, tile_ids=pair)
        return False

    def on_match_animation_end(self, sender, **kwargs):
        for tile_id in kwargs.get('tile_ids') or ():
            ent = get_tile_entity(self.world, tile_id)
            if ent is not None and self.world.has_component(ent, MatchAnimation):
                self.world.remove_component(ent, MatchAnimation)
