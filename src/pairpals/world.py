import random

from esper import World

from pairpals.components.custom_content import CustomContent
from pairpals.components.game_state import GameMode, GameState


def create_world(
    initial_mode: GameMode = GameMode.MENU,
    *,
    rng: random.Random | None = None,
) -> World:
    world = World()
    setattr(world, "random", rng or random.Random())

    # Register the global game state resource.
    world.create_entity(GameState(mode=initial_mode))
    # Content supplied from the menu for the next board.
    world.create_entity(CustomContent())
    return world
