from dataclasses import dataclass, field
from typing import List


@dataclass(slots=True)
class Line:
    """Capacity-bounded stack of block ids; index 0 is the bottom.

    ``x``/``y``/``even`` are layout hints for the presentation layer only.
    """
    id: str
    size: int
    block_ids: List[str] = field(default_factory=list)
    x: float = 0.0
    y: float = 0.0
    even: bool = True

    @property
    def space(self) -> int:
        return self.size - len(self.block_ids)

    @property
    def top_id(self) -> str | None:
        return self.block_ids[-1] if self.block_ids else None
