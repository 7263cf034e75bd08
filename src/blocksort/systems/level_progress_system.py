from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Set

from esper import World

from blocksort.components.level_stats import LevelStats
from blocksort.events.bus import (
    EVENT_LEVEL_CLEARED,
    EVENT_LEVEL_FAILED,
    EVENT_LEVEL_STATS_CHANGED,
    EVENT_LEVEL_UNLOCKED,
    EventBus,
)
from blocksort.factories.levels import all_level_specs
from blocksort.utils.world_state import get_level_progress

log = logging.getLogger(__name__)


class LevelProgressSystem:
    """Tracks wins and streaks per level and announces newly unlocked levels.

    Stats are kept on the ``LevelProgress`` singleton; with ``save_path`` they
    are also written to a JSON file after every change.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        save_path: Path | None = None,
        load_existing: bool = True,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self._save_path = Path(save_path) if save_path is not None else None

        self.event_bus.subscribe(EVENT_LEVEL_CLEARED, self._on_level_cleared)
        self.event_bus.subscribe(EVENT_LEVEL_FAILED, self._on_level_failed)

        if self._save_path is not None and load_existing:
            self.load_progress()

    def unlocked_level_ids(self) -> Set[str]:
        progress = get_level_progress(self.world)
        return {spec.id for spec in all_level_specs() if spec.is_unlocked(progress)}

    def load_progress(self) -> None:
        if self._save_path is None:
            return
        progress = get_level_progress(self.world)
        try:
            with self._save_path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except FileNotFoundError:
            progress.stats = {}
            return
        except json.JSONDecodeError:
            log.warning("Ignoring unreadable level progress at %s", self._save_path)
            progress.stats = {}
            return
        progress.stats = {
            level_id: LevelStats(
                wins=int(raw.get("wins", 0)),
                streak=int(raw.get("streak", 0)),
                highest_streak=int(raw.get("highest_streak", 0)),
            )
            for level_id, raw in payload.get("levels", {}).items()
        }

    def save_progress(self) -> None:
        if self._save_path is None:
            return
        progress = get_level_progress(self.world)
        self._save_path.parent.mkdir(parents=True, exist_ok=True)
        with self._save_path.open("w", encoding="utf-8") as handle:
            json.dump({
                "levels": {
                    level_id: {
                        "wins": stats.wins,
                        "streak": stats.streak,
                        "highest_streak": stats.highest_streak,
                    }
                    for level_id, stats in progress.stats.items()
                },
            }, handle, indent=2)

    # Event handlers -----------------------------------------------------

    def _on_level_cleared(self, sender, **payload) -> None:
        level_id = payload.get("level_id")
        if not level_id:
            return
        unlocked_before = self.unlocked_level_ids()

        stats = get_level_progress(self.world).stats_for(level_id)
        stats.wins += 1
        stats.streak += 1
        stats.highest_streak = max(stats.highest_streak, stats.streak)
        self._stats_changed(level_id, stats)

        unlocked_after = self.unlocked_level_ids()
        for spec in all_level_specs():
            if spec.id in unlocked_before or spec.id not in unlocked_after:
                continue
            log.info("Level %s unlocked", spec.id)
            self.event_bus.emit(EVENT_LEVEL_UNLOCKED, level_id=spec.id)

    def _on_level_failed(self, sender, **payload) -> None:
        level_id = payload.get("level_id")
        if not level_id:
            return
        stats = get_level_progress(self.world).stats_for(level_id)
        stats.streak = 0
        self._stats_changed(level_id, stats)

    def _stats_changed(self, level_id: str, stats: LevelStats) -> None:
        self.save_progress()
        self.event_bus.emit(EVENT_LEVEL_STATS_CHANGED, level_id=level_id, stats=stats)
