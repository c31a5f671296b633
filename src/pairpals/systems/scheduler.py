from __future__ import annotations

import logging
import math
from typing import Any

from esper import World

from pairpals.components.scheduled_task import ScheduledTask
from pairpals.events.bus import EVENT_TICK, EventBus
from pairpals.utils.session import get_session, is_active_session

logger = logging.getLogger("pairpals.scheduler")


class SchedulerSystem:
    """Runs deferred bus emissions off the frame tick.

    Every task is an entity carrying a ``ScheduledTask``. Tasks are tied to the
    session that was active when they were scheduled; a task whose session has
    since been replaced is dropped instead of fired.
    """

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self._sequence = 0
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)

    def schedule(self, event: str, delay: float, *, session_bound: bool = True, **payload: Any) -> int:
        session = get_session(self.world) if session_bound else None
        self._sequence += 1
        task = ScheduledTask(
            event=event,
            remaining=max(0.0, float(delay)),
            session_id=session.session_id if session is not None else None,
            sequence=self._sequence,
            payload=dict(payload),
        )
        ent = self.world.create_entity(task)
        logger.debug("Scheduled %s in %.2fs (session=%s)", event, task.remaining, task.session_id)
        return ent

    def pending(self, event: str | None = None) -> list[ScheduledTask]:
        tasks = [task for _, task in self.world.get_component(ScheduledTask)]
        if event is not None:
            tasks = [task for task in tasks if task.event == event]
        return sorted(tasks, key=lambda task: task.sequence)

    def cancel(self, event: str) -> int:
        doomed = [ent for ent, task in self.world.get_component(ScheduledTask) if task.event == event]
        for ent in doomed:
            self.world.delete_entity(ent, immediate=True)
        return len(doomed)

    def cancel_all(self) -> int:
        doomed = [ent for ent, _ in self.world.get_component(ScheduledTask)]
        for ent in doomed:
            self.world.delete_entity(ent, immediate=True)
        if doomed:
            logger.debug("Cancelled %d scheduled task(s)", len(doomed))
        return len(doomed)

    def on_tick(self, sender, **kwargs):
        dt = kwargs.get('dt', 1/60)
        try:
            dt = float(dt)
        except (TypeError, ValueError):
            return
        if not math.isfinite(dt) or dt < 0.0:
            return
        due: list[tuple[int, ScheduledTask]] = []
        for ent, task in list(self.world.get_component(ScheduledTask)):
            task.remaining -= dt
            if task.remaining <= 1e-9:
                due.append((ent, task))
        due.sort(key=lambda item: (item[1].remaining, item[1].sequence))
        for ent, task in due:
            # An earlier callback in this batch may have torn the session down.
            if not self.world.entity_exists(ent):
                continue
            self.world.delete_entity(ent, immediate=True)
            if task.session_id is not None and not is_active_session(self.world, task.session_id):
                logger.debug("Dropped stale %s for session %s", task.event, task.session_id)
                continue
            self.event_bus.emit(task.event, session_id=task.session_id, **task.payload)
