from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # Strong references so bound methods of systems nobody else holds keep receiving events.
        sig.connect(fn, weak=False)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# BOARD GENERATION
# ============================================================================
EVENT_BOARD_REQUEST = "board_request"                    # payload: level_id=str, seed=int|None
EVENT_BOARD_READY = "board_ready"                        # payload: level_id=str, board=Board
EVENT_BOARD_REQUEST_DENIED = "board_request_denied"      # payload: level_id=str, reason=str


# ============================================================================
# LEVEL PROGRESS
# ============================================================================
EVENT_LEVEL_CLEARED = "level_cleared"                    # payload: level_id=str
EVENT_LEVEL_FAILED = "level_failed"                      # payload: level_id=str
EVENT_LEVEL_STATS_CHANGED = "level_stats_changed"        # payload: level_id=str, stats=LevelStats
EVENT_LEVEL_UNLOCKED = "level_unlocked"                  # payload: level_id=str
