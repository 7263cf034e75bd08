from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from blocksort.components.block import Block
from blocksort.components.board import Board
from blocksort.components.line import Line
from blocksort.constants import (
    BLOCK_HEIGHT,
    BLOCK_OVERLAP,
    BOARD_TARGET_RATIO,
    LINE_PADDING_BOTTOM,
    LINE_PADDING_TOP,
    LINE_WIDTH,
    MAX_LINE_GAP_PCT,
    NARROW_BOARD_LINES,
    NARROW_BOARD_MIN_GAP_PCT,
)

GRID_UNIT = BLOCK_HEIGHT - BLOCK_OVERLAP
OVER_HEIGHT = BLOCK_OVERLAP + LINE_PADDING_TOP + LINE_PADDING_BOTTOM
LINE_ROW_GAP = GRID_UNIT - (OVER_HEIGHT % GRID_UNIT) + GRID_UNIT


class LevelConfigError(ValueError):
    """A level layout cannot be turned into a valid blank board."""


@dataclass(frozen=True, slots=True)
class LineDef:
    """One line of a layout: its capacity and the lengths of its color runs,
    bottom first. Each run takes the next palette color."""
    size: int
    stacks: Sequence[int] = field(default_factory=tuple)


def calc_blocks_height(block_count: int) -> int:
    return BLOCK_HEIGHT * block_count - BLOCK_OVERLAP * (block_count - 1)


def calc_line_height(line_size: int) -> int:
    return calc_blocks_height(line_size) + LINE_PADDING_TOP + LINE_PADDING_BOTTOM


def calc_line_gap(rows: Sequence[Sequence[LineDef]]) -> float:
    """Horizontal gap between lines so that tall boards approach the target ratio."""
    upper = rows[0]
    upper_count = len(upper)
    if upper_count <= 1:
        return 0.0

    lower = rows[1] if len(rows) > 1 else ()
    upper_width = LINE_WIDTH * upper_count
    max_height = 0
    for index, line_upper in enumerate(upper):
        height = calc_line_height(line_upper.size)
        if index < len(lower):
            height += calc_line_height(lower[index].size) + LINE_ROW_GAP
        max_height = max(max_height, height)

    min_gap = LINE_WIDTH * NARROW_BOARD_MIN_GAP_PCT if upper_count < NARROW_BOARD_LINES else 0.0
    if upper_width / max_height >= BOARD_TARGET_RATIO:
        return min_gap

    total_gap = BOARD_TARGET_RATIO * max_height - upper_width
    return max(min_gap, min(total_gap / (upper_count - 1), LINE_WIDTH * MAX_LINE_GAP_PCT))


def validate_layout(rows: Sequence[Sequence[LineDef]], colors: Sequence[str]) -> None:
    if not rows or not rows[0]:
        raise LevelConfigError("Layout needs at least one line in the upper row")
    if len(rows) > 2:
        raise LevelConfigError(f"Layout supports at most two rows, got {len(rows)}")
    if len(rows) == 2 and len(rows[1]) > len(rows[0]):
        raise LevelConfigError("Lower row cannot hold more lines than the upper row")

    run_count = 0
    for row_index, row in enumerate(rows):
        for line_index, line_def in enumerate(row):
            where = f"row {row_index} line {line_index}"
            if line_def.size <= 0:
                raise LevelConfigError(f"{where}: capacity must be positive, got {line_def.size}")
            if any(stack <= 0 for stack in line_def.stacks):
                raise LevelConfigError(f"{where}: color runs must be positive, got {list(line_def.stacks)}")
            if sum(line_def.stacks) > line_def.size:
                raise LevelConfigError(
                    f"{where}: runs {list(line_def.stacks)} exceed capacity {line_def.size}"
                )
            run_count += len(line_def.stacks)

    if run_count > len(colors):
        raise LevelConfigError(f"Layout has {run_count} color runs but only {len(colors)} colors")


class _BoardBuilder:
    def __init__(self, board: Board, colors: Sequence[str]) -> None:
        self.board = board
        self._colors = list(colors)
        self._color_index = 0

    def _next_id(self, prefix: str, count: int) -> str:
        return f"{prefix}-{count}"

    def add_line(self, line_def: LineDef, x: float, y: float, even: bool) -> Line:
        line_id = self._next_id("line", len(self.board.lines))
        line = Line(id=line_id, size=line_def.size, x=x, y=y, even=even)
        for stack in line_def.stacks:
            color = self._colors[self._color_index]
            self._color_index += 1
            for _ in range(stack):
                block_id = self._next_id("block", len(self.board.blocks))
                self.board.blocks[block_id] = Block(
                    id=block_id, color=color, line_id=line_id, index=len(line.block_ids)
                )
                line.block_ids.append(block_id)
        self.board.lines[line_id] = line
        return line


def create_blank_board(
    level_id: str,
    seed: int | None,
    rows: Sequence[Sequence[LineDef]],
    colors: Sequence[str],
    *,
    disable_empty_drop: bool = False,
) -> Board:
    """Build the solved starting board for a level layout.

    ``rows`` holds an upper row and an optional lower row of line definitions.
    Lines are inserted column by column (upper, then the lower line below it),
    which is also the scan order used by the move oracle.
    """
    validate_layout(rows, colors)

    board = Board(level_id=level_id, seed=seed, disable_empty_drop=disable_empty_drop)
    builder = _BoardBuilder(board, colors)

    upper = rows[0]
    lower: List[LineDef] = list(rows[1]) if len(rows) > 1 else []
    effective_width = LINE_WIDTH + calc_line_gap(rows)

    # A lower row one line short of a uniform upper row sits half a line to the right.
    same_size = all(line_def.size == upper[0].size for line_def in upper)
    lower_offset_x = 0.5 if same_size and len(upper) - 1 == len(lower) else 0.0

    for index, line_upper in enumerate(upper):
        builder.add_line(line_upper, effective_width * index, 0, index % 2 == 0)
        if index < len(lower):
            y = calc_line_height(line_upper.size) + LINE_ROW_GAP
            builder.add_line(lower[index], effective_width * (lower_offset_x + index), y, index % 2 != 0)

    return board
