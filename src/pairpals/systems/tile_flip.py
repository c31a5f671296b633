from __future__ import annotations

import logging

from esper import World

from pairpals.components.tile import FlipState, HintMark, TileFlip
from pairpals.constants import REVEAL_DELAY
from pairpals.events.bus import (
    EVENT_MOVE_COUNTED,
    EVENT_PAIR_RESOLVE,
    EVENT_TILE_CLICK,
    EVENT_TILE_FLIPPED,
    EventBus,
)
from pairpals.systems.scheduler import SchedulerSystem
from pairpals.utils.session import get_session, get_tile_entity

logger = logging.getLogger("pairpals.tile_flip")


class TileFlipSystem:
    """Accepts flip intents and gates the board to one unresolved pair at a time."""

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        scheduler: SchedulerSystem,
        *,
        reveal_delay: float = REVEAL_DELAY,
    ):
        self.world = world
        self.event_bus = event_bus
        self.scheduler = scheduler
        self.reveal_delay = reveal_delay
        self.event_bus.subscribe(EVENT_TILE_CLICK, self.on_tile_click)

    def on_tile_click(self, sender, **kwargs):
        tile_id = kwargs.get('tile_id')
        if tile_id is None:
            return
        self.request_flip(tile_id)

    def request_flip(self, tile_id: int) -> bool:
        session = get_session(self.world)
        if session is None or session.is_over:
            return False
        if len(session.pending_flips) >= 2:
            return False
        try:
            tile_id = int(tile_id)
        except (TypeError, ValueError):
            return False
        ent = get_tile_entity(self.world, tile_id)
        if ent is None:
            return False
        flip = self.world.component_for_entity(ent, TileFlip)
        if flip.state is not FlipState.HIDDEN:
            return False

        flip.state = FlipState.FLIPPED
        self.world.component_for_entity(ent, HintMark).hinted = False
        session.pending_flips.append(tile_id)
        logger.debug("Flipped tile %d (pending=%s)", tile_id, session.pending_flips)
        self.event_bus.emit(EVENT_TILE_FLIPPED, tile_id=tile_id, pending=list(session.pending_flips))

        if len(session.pending_flips) == 2:
            session.move_count += 1
            pair = tuple(session.pending_flips)
            self.event_bus.emit(EVENT_MOVE_COUNTED, moves=session.move_count, tile_ids=pair)
            self.scheduler.schedule(EVENT_PAIR_RESOLVE, self.reveal_delay, tile_ids=pair)
        return True
