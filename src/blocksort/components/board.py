from dataclasses import dataclass, field
from typing import Dict

from blocksort.components.block import Block
from blocksort.components.line import Line


@dataclass(slots=True)
class Board:
    """Arena of lines and blocks keyed by id.

    Every block id appears in exactly one line's ``block_ids`` and every id a
    line references is a key of ``blocks``. ``steps`` counts the scramble moves
    applied during generation; ``seed`` reproduces the board when set.
    """
    level_id: str
    seed: int | None = None
    disable_empty_drop: bool = False
    steps: int = 0
    lines: Dict[str, Line] = field(default_factory=dict)
    blocks: Dict[str, Block] = field(default_factory=dict)
