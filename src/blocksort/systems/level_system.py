from __future__ import annotations

import logging
from typing import List

from esper import World

from blocksort.components.board import Board
from blocksort.events.bus import (
    EVENT_BOARD_READY,
    EVENT_BOARD_REQUEST,
    EVENT_BOARD_REQUEST_DENIED,
    EventBus,
)
from blocksort.factories.levels import LevelSpec, all_level_specs, get_level_spec
from blocksort.utils.random_source import RandomSource
from blocksort.utils.world_state import get_active_board, get_level_progress

log = logging.getLogger(__name__)


class LevelSystem:
    """Hands out generated boards for catalog levels the player has unlocked."""

    def __init__(self, world: World, event_bus: EventBus, *, rng: RandomSource | None = None) -> None:
        self.world = world
        self.event_bus = event_bus
        candidate_rng = rng or getattr(world, "random", None)
        self._rng: RandomSource = candidate_rng or RandomSource()
        self.event_bus.subscribe(EVENT_BOARD_REQUEST, self._on_board_request)

    def visible_levels(self) -> List[LevelSpec]:
        progress = get_level_progress(self.world)
        return [spec for spec in all_level_specs() if spec.is_visible(progress)]

    def unlocked_levels(self) -> List[LevelSpec]:
        progress = get_level_progress(self.world)
        return [spec for spec in all_level_specs() if spec.is_unlocked(progress)]

    def request_board(self, level_id: str, seed: int | None = None) -> Board | None:
        spec = get_level_spec(level_id)
        if spec is None:
            self._deny(level_id, "unknown_level")
            return None
        if not spec.is_unlocked(get_level_progress(self.world)):
            self._deny(level_id, "locked")
            return None

        board = spec.create_board(seed, rng=self._rng)
        active = get_active_board(self.world)
        active.level_id = level_id
        active.board = board
        log.info("Generated board for %s (seed=%s, steps=%d)", level_id, board.seed, board.steps)
        self.event_bus.emit(EVENT_BOARD_READY, level_id=level_id, board=board)
        return board

    def _deny(self, level_id: str, reason: str) -> None:
        log.info("Board request for %s denied: %s", level_id, reason)
        self.event_bus.emit(EVENT_BOARD_REQUEST_DENIED, level_id=level_id, reason=reason)

    # Event handlers -----------------------------------------------------

    def _on_board_request(self, sender, **payload) -> None:
        level_id = payload.get("level_id")
        if not level_id:
            return
        self.request_board(level_id, payload.get("seed"))
