from dataclasses import dataclass


@dataclass(slots=True)
class Block:
    """A colored block. ``line_id``/``index`` locate it inside its owning line.

    The back-pointer is a cache of the owning line's ``block_ids`` order and is
    rewritten by ``sync_blocks`` whenever lines are mutated in bulk.
    """
    id: str
    color: str
    line_id: str
    index: int
