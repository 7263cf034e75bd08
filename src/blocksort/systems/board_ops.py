from __future__ import annotations

from typing import Any, Dict, Iterator, List, Tuple

from blocksort.components.block import Block
from blocksort.components.board import Board
from blocksort.components.line import Line


class BoardInconsistencyError(RuntimeError):
    """Lines and blocks of a board no longer reference each other consistently."""


def resolve_line(board: Board, line: Line | str) -> Line:
    return board.lines[line] if isinstance(line, str) else line


def resolve_block(board: Board, block: Block | str) -> Block:
    return board.blocks[block] if isinstance(block, str) else block


def clone_board(board: Board) -> Board:
    """Copy a board so the clone's lines and blocks can be mutated independently."""
    return Board(
        level_id=board.level_id,
        seed=board.seed,
        disable_empty_drop=board.disable_empty_drop,
        steps=board.steps,
        lines={
            line_id: Line(
                id=line.id,
                size=line.size,
                block_ids=list(line.block_ids),
                x=line.x,
                y=line.y,
                even=line.even,
            )
            for line_id, line in board.lines.items()
        },
        blocks={
            block_id: Block(id=block.id, color=block.color, line_id=block.line_id, index=block.index)
            for block_id, block in board.blocks.items()
        },
    )


def move_block(board: Board, dst_line: Line | str, src_block: Block | str) -> List[str]:
    """Move ``src_block`` and every block above it onto the top of ``dst_line``.

    No legality check is made here. Callers gate this with
    ``move_oracle.is_movable_block``; an illegal relocation leaves the board in
    an undefined (but still ``sync_blocks``-checkable) state.
    Returns the ids of the moved run, bottom first.
    """
    dst_line = resolve_line(board, dst_line)
    src_block = resolve_block(board, src_block)
    return relocate_run(board, board.lines[src_block.line_id], src_block.index, dst_line)


def relocate_run(board: Board, src_line: Line, start_index: int, dst_line: Line) -> List[str]:
    moving_ids = src_line.block_ids[start_index:]
    del src_line.block_ids[start_index:]
    base = len(dst_line.block_ids)
    for offset, block_id in enumerate(moving_ids):
        block = board.blocks[block_id]
        block.line_id = dst_line.id
        block.index = base + offset
    dst_line.block_ids.extend(moving_ids)
    return moving_ids


def sync_blocks(board: Board) -> Board:
    """Rewrite every block's back-pointer from the lines' block order.

    Raises ``BoardInconsistencyError`` when a line references an unknown block
    id, when an id is referenced twice, or when a block is left without a line.
    """
    pending: Dict[str, Block] = dict(board.blocks)
    for line in board.lines.values():
        for index, block_id in enumerate(line.block_ids):
            block = pending.pop(block_id, None)
            if block is None:
                if block_id in board.blocks:
                    raise BoardInconsistencyError(f"Block referenced twice: {block_id}")
                raise BoardInconsistencyError(f"Block not found: {block_id}")
            block.line_id = line.id
            block.index = index
    if pending:
        raise BoardInconsistencyError(f"Inconsistency in blocks: {', '.join(pending)}")
    return board


def find_block_by_id(board: Board, block_id: str) -> Tuple[Line, Block]:
    """Locate a block by scanning the lines rather than trusting its back-pointer."""
    for line in board.lines.values():
        if block_id in line.block_ids:
            return line, board.blocks[block_id]
    raise BoardInconsistencyError(f"Block not found: {block_id}")


def iter_line_colors(board: Board, line: Line | str) -> Iterator[str]:
    line = resolve_line(board, line)
    for block_id in line.block_ids:
        yield board.blocks[block_id].color


def get_state_hash(board: Board) -> str:
    """Return an 8-digit hex hash of the board's structure.

    Line order and concrete color names are ignored: lines are sorted by
    capacity and color sequence, then colors are renumbered in order of first
    appearance, so boards differing only by a line permutation or a palette
    swap hash equally.
    """
    paired: List[Tuple[int, str, List[str]]] = []
    for line in board.lines.values():
        colors = list(iter_line_colors(board, line))
        paired.append((line.size, ','.join(colors), colors))
    paired.sort(key=lambda entry: (entry[0], entry[1]))
    color_ids: Dict[str, int] = {}
    parts: List[str] = []
    for _, _, colors in paired:
        numbered = []
        for color in colors:
            if color not in color_ids:
                color_ids[color] = len(color_ids) + 1
            numbered.append(str(color_ids[color]))
        parts.append(','.join(numbered))
    normalized = '|'.join(parts)

    value = 0
    for char in normalized:
        value = ((value << 5) - value + ord(char)) & 0xFFFFFFFF
    return f"{value:08x}"


def board_to_dict(board: Board) -> Dict[str, Any]:
    """Plain, JSON-compatible form of a board. Block back-pointers are omitted."""
    return {
        'level_id': board.level_id,
        'seed': board.seed,
        'disable_empty_drop': board.disable_empty_drop,
        'steps': board.steps,
        'lines': {
            line_id: {
                'id': line.id,
                'size': line.size,
                'block_ids': list(line.block_ids),
                'x': line.x,
                'y': line.y,
                'even': line.even,
            }
            for line_id, line in board.lines.items()
        },
        'blocks': {
            block_id: {'id': block.id, 'color': block.color}
            for block_id, block in board.blocks.items()
        },
    }


def board_from_dict(data: Dict[str, Any]) -> Board:
    """Rebuild a board from ``board_to_dict`` output and validate it with ``sync_blocks``."""
    board = Board(
        level_id=data['level_id'],
        seed=data.get('seed'),
        disable_empty_drop=bool(data.get('disable_empty_drop', False)),
        steps=int(data.get('steps', 0)),
    )
    for line_id, raw in data['lines'].items():
        board.lines[line_id] = Line(
            id=raw.get('id', line_id),
            size=int(raw['size']),
            block_ids=list(raw.get('block_ids', [])),
            x=raw.get('x', 0.0),
            y=raw.get('y', 0.0),
            even=bool(raw.get('even', True)),
        )
    for block_id, raw in data['blocks'].items():
        board.blocks[block_id] = Block(id=raw.get('id', block_id), color=raw['color'], line_id='', index=-1)
    return sync_blocks(board)
