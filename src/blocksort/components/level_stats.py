from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict


@dataclass(slots=True)
class LevelStats:
    wins: int = 0
    streak: int = 0
    highest_streak: int = 0


@dataclass(slots=True)
class LevelProgress:
    """Singleton component with per-level play statistics."""

    stats: Dict[str, LevelStats] = field(default_factory=dict)

    def stats_for(self, level_id: str) -> LevelStats:
        entry = self.stats.get(level_id)
        if entry is None:
            entry = LevelStats()
            self.stats[level_id] = entry
        return entry

    def wins(self, level_id: str) -> int:
        entry = self.stats.get(level_id)
        return entry.wins if entry is not None else 0

    def has_cleared(self, level_id: str) -> bool:
        return self.wins(level_id) > 0
