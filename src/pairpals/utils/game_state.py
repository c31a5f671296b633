from __future__ import annotations

from esper import World

from pairpals.components.game_state import GameMode, GameState
from pairpals.events.bus import EVENT_GAME_MODE_CHANGED, EventBus


def get_game_state(world: World) -> GameState | None:
    for _, state in world.get_component(GameState):
        return state
    return None


def set_game_mode(world: World, event_bus: EventBus, mode: GameMode) -> None:
    """Update the global game mode and emit a change event when it differs."""

    previous_mode: GameMode | None = None
    for _, state in world.get_component(GameState):
        previous_mode = state.mode
        if state.mode != mode:
            state.mode = mode
            event_bus.emit(EVENT_GAME_MODE_CHANGED, previous_mode=previous_mode, new_mode=mode)
        return
    # No existing GameState component; create a new one.
    world.create_entity(GameState(mode=mode))
    event_bus.emit(EVENT_GAME_MODE_CHANGED, previous_mode=previous_mode, new_mode=mode)
