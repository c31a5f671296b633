from __future__ import annotations

import logging
import random

from esper import World

from pairpals.components.tile import FlipState, HintMark, Tile, TileFlip
from pairpals.constants import HINT_DURATION
from pairpals.events.bus import (
    EVENT_HINT_CLEARED,
    EVENT_HINT_EXPIRE,
    EVENT_HINT_REQUEST,
    EVENT_HINT_SHOWN,
    EventBus,
)
from pairpals.systems.scheduler import SchedulerSystem
from pairpals.utils.session import get_session, is_active_session

logger = logging.getLogger("pairpals.hint")


class HintSystem:
    """Briefly highlights one unresolved pair, within a per-session budget."""

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        scheduler: SchedulerSystem,
        *,
        rng: random.Random | None = None,
        duration: float = HINT_DURATION,
    ):
        self.world = world
        self.event_bus = event_bus
        self.scheduler = scheduler
        self.duration = duration
        self._rng = rng or getattr(world, "random", None) or random.Random()
        self.event_bus.subscribe(EVENT_HINT_REQUEST, self.on_hint_request)
        self.event_bus.subscribe(EVENT_HINT_EXPIRE, self.on_hint_expire)

    def on_hint_request(self, sender, **kwargs):
        self.request_hint()

    def request_hint(self) -> tuple[int, int] | None:
        session = get_session(self.world)
        if session is None or session.is_over:
            return None
        if session.hint_budget <= 0 or session.pending_flips:
            return None

        hidden = [
            (ent, tile)
            for ent, (tile, flip) in self.world.get_components(Tile, TileFlip)
            if flip.state is FlipState.HIDDEN
        ]
        if not hidden:
            return None
        hidden.sort(key=lambda row: row[1].id)
        first_ent, first = self._rng.choice(hidden)
        partner = next(
            ((ent, tile) for ent, tile in hidden if tile.content_ref == first.content_ref and ent != first_ent),
            None,
        )
        if partner is None:
            return None
        partner_ent, second = partner

        for ent in (first_ent, partner_ent):
            self.world.component_for_entity(ent, HintMark).hinted = True
        session.hint_budget -= 1
        pair = (first.id, second.id)
        # A newer hint supersedes the pending clear of an older one.
        self.scheduler.cancel(EVENT_HINT_EXPIRE)
        self.scheduler.schedule(EVENT_HINT_EXPIRE, self.duration)
        logger.debug("Hint shown for tiles %s (%d left)", pair, session.hint_budget)
        self.event_bus.emit(EVENT_HINT_SHOWN, tile_ids=pair, remaining=session.hint_budget)
        return pair

    def on_hint_expire(self, sender, **kwargs):
        session_id = kwargs.get('session_id')
        if session_id is not None and not is_active_session(self.world, session_id):
            return
        self.clear_hints()

    def clear_hints(self) -> None:
        for _, mark in self.world.get_component(HintMark):
            mark.hinted = False
        self.event_bus.emit(EVENT_HINT_CLEARED)
