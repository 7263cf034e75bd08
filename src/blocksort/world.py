from esper import World

from blocksort.components.active_board import ActiveBoard
from blocksort.components.level_stats import LevelProgress
from blocksort.utils.random_source import RandomSource


def create_world(
    *,
    rng: RandomSource | None = None,
    progress: LevelProgress | None = None,
) -> World:
    world = World()
    setattr(world, "random", rng or RandomSource())

    # Singleton resources read by the level systems.
    world.create_entity(progress or LevelProgress())
    world.create_entity(ActiveBoard())
    return world
