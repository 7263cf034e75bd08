from __future__ import annotations

from esper import World

from blocksort.components.active_board import ActiveBoard
from blocksort.components.level_stats import LevelProgress


def get_level_progress(world: World) -> LevelProgress:
    for _, progress in world.get_component(LevelProgress):
        return progress
    # No existing LevelProgress component; create a new one.
    progress = LevelProgress()
    world.create_entity(progress)
    return progress


def get_active_board(world: World) -> ActiveBoard:
    for _, active in world.get_component(ActiveBoard):
        return active
    active = ActiveBoard()
    world.create_entity(active)
    return active
