from dataclasses import dataclass

from blocksort.components.board import Board


@dataclass(slots=True)
class ActiveBoard:
    """Singleton component holding the board most recently handed to the player."""
    level_id: str | None = None
    board: Board | None = None
