from __future__ import annotations

from typing import Dict, List, Sequence

from blocksort.components.block import Block
from blocksort.components.board import Board
from blocksort.components.line import Line
from blocksort.systems.board_ops import clone_board, get_state_hash, move_block
from blocksort.systems.move_oracle import get_possible_moves, is_goal_state
from blocksort.utils.random_source import RandomSource


def build_board(
    lines: Sequence[Sequence[str]],
    sizes: int | Sequence[int] = 4,
    *,
    level_id: str = "test",
    disable_empty_drop: bool = False,
) -> Board:
    """Build a board from per-line color lists (bottom first)."""

    if isinstance(sizes, int):
        sizes = [sizes] * len(lines)
    board = Board(level_id=level_id, disable_empty_drop=disable_empty_drop)
    for line_index, (colors, size) in enumerate(zip(lines, sizes)):
        line_id = f"L{line_index}"
        line = Line(id=line_id, size=size)
        for color in colors:
            block_id = f"b{len(board.blocks)}"
            board.blocks[block_id] = Block(id=block_id, color=color, line_id=line_id, index=len(line.block_ids))
            line.block_ids.append(block_id)
        board.lines[line_id] = line
    return board


def line_colors(board: Board) -> List[List[str]]:
    return [[board.blocks[block_id].color for block_id in line.block_ids] for line in board.lines.values()]


def play_random_legal_moves(board: Board, rng: RandomSource, count: int) -> int:
    """Apply up to ``count`` random legal moves in place; returns how many were applied."""

    applied = 0
    for _ in range(count):
        moves = get_possible_moves(board)
        if not moves:
            break
        move = moves[rng.randrange(len(moves))]
        move_block(board, move.dst_line, move.src_block)
        applied += 1
    return applied


def find_solution_length(board: Board, max_depth: int) -> int | None:
    """Iterative-deepening search for the shortest move count reaching a goal state."""

    def search(state: Board, depth: int, seen: Dict[str, int]) -> bool:
        if is_goal_state(state):
            return True
        if depth == 0:
            return False
        key = get_state_hash(state)
        if seen.get(key, -1) >= depth:
            return False
        seen[key] = depth
        for move in get_possible_moves(state, include_trivial=False):
            child = clone_board(state)
            move_block(child, move.dst_line.id, move.src_block.id)
            if search(child, depth - 1, seen):
                return True
        return False

    for depth in range(max_depth + 1):
        if search(board, depth, {}):
            return depth
    return None


def all_line_block_ids(board: Board) -> List[str]:
    return [block_id for line in board.lines.values() for block_id in line.block_ids]


def color_counts(board: Board) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for block in board.blocks.values():
        counts[block.color] = counts.get(block.color, 0) + 1
    return counts

