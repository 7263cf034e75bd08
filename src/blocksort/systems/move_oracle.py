"""Move legality and board evaluation.

A move takes a block together with everything stacked on it and drops the run
onto another line. These predicates are the only gate in front of
``board_ops.move_block``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Set

from blocksort.components.block import Block
from blocksort.components.board import Board
from blocksort.components.line import Line
from blocksort.systems.board_ops import resolve_block, resolve_line


@dataclass(slots=True)
class Move:
    src_block: Block
    dst_line: Line


def block_below(board: Board, block: Block) -> Block | None:
    if block.index <= 0:
        return None
    line = board.lines[block.line_id]
    return board.blocks[line.block_ids[block.index - 1]]


def top_block(board: Board, line: Line) -> Block | None:
    top_id = line.top_id
    return board.blocks[top_id] if top_id is not None else None


def run_length(board: Board, block: Block) -> int:
    """Number of blocks that move together when ``block`` is picked up."""
    return len(board.lines[block.line_id].block_ids) - block.index


def is_movable_block(board: Board, dst_line: Line | str, src_block: Block | str) -> bool:
    dst_line = resolve_line(board, dst_line)
    src_block = resolve_block(board, src_block)

    if board.disable_empty_drop and not dst_line.block_ids:
        return False

    src_line = board.lines[src_block.line_id]
    if dst_line.id == src_line.id:
        return False

    # A same-colored run cannot be split.
    below = block_below(board, src_block)
    if below is not None and below.color == src_block.color:
        return False

    if dst_line.space < len(src_line.block_ids) - src_block.index:
        return False

    dst_top = top_block(board, dst_line)
    return dst_top is None or dst_top.color == src_block.color


def is_trivial_move(board: Board, move: Move) -> bool:
    """True when a whole line moves onto an empty line of the same capacity.

    Such a move only permutes lines; ``get_state_hash`` is unchanged by it.
    """
    src_line = board.lines[move.src_block.line_id]
    return (
        move.src_block.index == 0
        and not move.dst_line.block_ids
        and move.dst_line.size == src_line.size
    )


def get_possible_moves(board: Board, *, include_trivial: bool = True) -> List[Move]:
    moves: List[Move] = []
    for src_block in board.blocks.values():
        for dst_line in board.lines.values():
            if not is_movable_block(board, dst_line, src_block):
                continue
            move = Move(src_block=src_block, dst_line=dst_line)
            if not include_trivial and is_trivial_move(board, move):
                continue
            moves.append(move)
    return moves


def is_stuck_state(board: Board) -> bool:
    """No move is left that changes the board beyond permuting its lines."""
    return not get_possible_moves(board, include_trivial=False)


def is_goal_state(board: Board) -> bool:
    """Every color forms a single contiguous run across the whole scan order."""
    seen_colors: Set[str] = set()
    for line in board.lines.values():
        prev_color = None
        for block_id in line.block_ids:
            color = board.blocks[block_id].color
            if color != prev_color:
                if color in seen_colors:
                    return False
                seen_colors.add(color)
            prev_color = color
    return True


def get_completion_rate(board: Board) -> float:
    """Fraction of run continuations among continuations and re-opened colors.

    1.0 means fully consolidated (or no blocks at all); lower is more scrambled.
    """
    seen_colors: Set[str] = set()
    ok_count = 0
    ng_count = 0
    for line in board.lines.values():
        prev_color = None
        for block_id in line.block_ids:
            color = board.blocks[block_id].color
            if color == prev_color:
                ok_count += 1
            elif color in seen_colors:
                ng_count += 1
            else:
                seen_colors.add(color)
            prev_color = color
    if ok_count + ng_count == 0:
        return 1.0
    return ok_count / (ok_count + ng_count)
