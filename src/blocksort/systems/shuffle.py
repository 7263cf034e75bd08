"""Puzzle generation by scrambling a solved board with reversible moves.

Every scramble step picks a run that currently sits on a same-colored block
(or on the floor) and drops it onto a line whose top is a different color (or
empty). The exact inverse of such a step is a legal move, so undoing the walk
always leads back to the solved board.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Iterator, List, Sequence, Tuple, TypeVar

from blocksort.components.block import Block
from blocksort.components.board import Board
from blocksort.components.line import Line
from blocksort.constants import (
    DEFAULT_MAX_MOVES,
    DEFAULT_TRIALS,
    LOW_COMPLETION_THRESHOLD,
    LOW_COMPLETION_WEIGHT_CEILING,
)
from blocksort.systems.board_ops import clone_board, relocate_run
from blocksort.systems.move_oracle import block_below, get_completion_rate, top_block
from blocksort.utils.random_source import RandomSource

log = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(slots=True)
class ScrambleMove:
    """Move ``block`` and everything above it onto ``target_line``."""
    block: Block
    target_line: Line


@dataclass(slots=True)
class MoveWeightContext:
    board: Board
    block: Block
    target_line: Line
    completion_rate: float

    @property
    def run_length(self) -> int:
        return len(self.board.lines[self.block.line_id].block_ids) - self.block.index


@dataclass(slots=True)
class PuzzleScoreContext:
    board: Board


MoveWeightFn = Callable[[MoveWeightContext], float]
PuzzleScoreFn = Callable[[PuzzleScoreContext], float]


def get_default_move_weight(context: MoveWeightContext) -> float:
    """Prefer shallow picks onto short lines while the board is still mostly
    scrambled, deep picks onto tall lines otherwise."""
    reach = context.block.index + len(context.target_line.block_ids)
    if context.completion_rate < LOW_COMPLETION_THRESHOLD:
        return LOW_COMPLETION_WEIGHT_CEILING - reach
    return reach + 1


def get_default_puzzle_score(context: PuzzleScoreContext) -> float:
    """Scramble length penalised by the variance of free space across lines."""
    board = context.board
    spaces = [line.space for line in board.lines.values()]
    if not spaces:
        return float(board.steps)
    mean = sum(spaces) / len(spaces)
    penalty = sum((space - mean) ** 2 for space in spaces)
    return board.steps - penalty


def shuffle_array(items: Sequence[T], rng: RandomSource) -> List[T]:
    """Return a permutation of ``items`` by repeatedly extracting a random element."""
    pool = list(items)
    return [pool.pop(rng.randrange(len(pool))) for _ in range(len(pool))]


def shuffle_lines(board: Board, rng: RandomSource) -> Board:
    """Permute block stacks among lines of equal capacity."""
    lines = list(board.lines.values())
    sizes = list(dict.fromkeys(line.size for line in lines))
    for size in sizes:
        same_size = [line for line in lines if line.size == size]
        stacks = shuffle_array([list(line.block_ids) for line in same_size], rng)
        for line, block_ids in zip(same_size, stacks):
            line.block_ids = block_ids
            for block_id in block_ids:
                board.blocks[block_id].line_id = line.id
    return board


def shuffle_colors(board: Board, rng: RandomSource) -> Board:
    """Permute the colors present on the board."""
    used = list(dict.fromkeys(block.color for block in board.blocks.values()))
    mapping: Dict[str, str] = dict(zip(used, shuffle_array(used, rng)))
    for block in board.blocks.values():
        block.color = mapping[block.color]
    return board


def iter_scramble_candidates(board: Board) -> Iterator[ScrambleMove]:
    """Yield every scramble step whose inverse is a legal move.

    Candidates are enumerated per block (the bottom of the run to pick up), then
    per target line, both in board order.
    """
    for block in board.blocks.values():
        line = board.lines[block.line_id]

        # The inverse would drop the run onto an empty line.
        if board.disable_empty_drop and block.index == 0:
            continue

        # The inverse must land on the same color, or on the floor.
        below = block_below(board, block)
        if below is not None and below.color != block.color:
            continue

        length = len(line.block_ids) - block.index
        for target in board.lines.values():
            if target.id == line.id:
                continue
            if target.space < length:
                continue
            # The inverse cannot split a same-colored run.
            target_top = top_block(board, target)
            if target_top is not None and target_top.color == block.color:
                continue
            # Moving a whole line onto an empty one only trades which line is empty.
            if target_top is None and below is None:
                continue
            yield ScrambleMove(block=block, target_line=target)


def scramble_step(
    board: Board,
    rng: RandomSource,
    get_move_weight: MoveWeightFn,
    completion_rate: float,
) -> ScrambleMove | None:
    """Pick one candidate by single-pass weighted sampling and apply it."""
    chosen: ScrambleMove | None = None
    total_weight = 0.0
    for candidate in iter_scramble_candidates(board):
        weight = get_move_weight(
            MoveWeightContext(
                board=board,
                block=candidate.block,
                target_line=candidate.target_line,
                completion_rate=completion_rate,
            )
        )
        if weight <= 0:
            continue
        total_weight += weight
        if rng.next() * total_weight < weight:
            chosen = candidate

    if chosen is not None:
        source_line = board.lines[chosen.block.line_id]
        relocate_run(board, source_line, chosen.block.index, chosen.target_line)
    return chosen


def run_trial(
    board: Board,
    rng: RandomSource,
    max_moves: int,
    get_move_weight: MoveWeightFn,
) -> Board:
    """Scramble a clone of ``board`` using ``rng``; the clone records the seed used."""
    trial = clone_board(board)
    trial.seed = rng.seed
    shuffle_colors(trial, rng)
    shuffle_lines(trial, rng)

    for _ in range(max_moves):
        completion_rate = get_completion_rate(trial)
        if completion_rate <= 0:
            log.debug("Trial %#010x fully fragmented after %d steps", trial.seed, trial.steps)
            break
        if scramble_step(trial, rng, get_move_weight, completion_rate) is None:
            log.debug("Trial %#010x has no scramble candidate after %d steps", trial.seed, trial.steps)
            break
        trial.steps += 1
    return trial


def _trial_sources(board: Board, trials: int, rng: RandomSource | None) -> Iterable[RandomSource]:
    if board.seed is not None:
        yield RandomSource(board.seed)
        return
    parent = rng if rng is not None else RandomSource()
    for _ in range(trials):
        yield parent.fork()


def shuffle_blocks(
    board: Board,
    max_moves: int = DEFAULT_MAX_MOVES,
    trials: int = DEFAULT_TRIALS,
    *,
    rng: RandomSource | None = None,
    get_puzzle_score: PuzzleScoreFn | None = None,
    get_move_weight: MoveWeightFn | None = None,
) -> Board:
    """Generate a scrambled puzzle from a solved ``board``.

    A board with a seed is regenerated deterministically in a single trial.
    Otherwise ``trials`` independent walks run on forks of ``rng`` and the most
    fragmented result wins, ties broken by the highest puzzle score. ``board``
    itself is never mutated.
    """
    if trials < 1:
        raise ValueError(f"trials must be at least 1, got {trials}")
    if max_moves < 0:
        raise ValueError(f"max_moves must not be negative, got {max_moves}")
    get_puzzle_score = get_puzzle_score or get_default_puzzle_score
    get_move_weight = get_move_weight or get_default_move_weight

    # (completion rate, negated score, trial order, board); the smallest wins.
    ranked: List[Tuple[float, float, int, Board]] = []

    for source in _trial_sources(board, trials, rng):
        trial = run_trial(board, source, max_moves, get_move_weight)
        rate = get_completion_rate(trial)
        score = get_puzzle_score(PuzzleScoreContext(board=trial))
        log.debug(
            "Trial seed=%#010x steps=%d completion=%.3f score=%.3f",
            trial.seed, trial.steps, rate, score,
        )
        ranked.append((rate, -score, len(ranked), trial))

    return min(ranked)[3]
