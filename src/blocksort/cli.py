"""Command line entry point: generate a level board and print it.

Run with: ``blocksort normal1 --seed 42`` or ``blocksort --list``.
"""
from __future__ import annotations

import argparse
import json
import logging
from typing import List, Sequence

from blocksort.components.board import Board
from blocksort.components.level_stats import LevelProgress, LevelStats
from blocksort.events.bus import EVENT_BOARD_READY, EVENT_BOARD_REQUEST, EVENT_BOARD_REQUEST_DENIED, EventBus
from blocksort.factories.levels import all_level_specs
from blocksort.systems.board_ops import board_to_dict, get_state_hash, iter_line_colors
from blocksort.systems.level_system import LevelSystem
from blocksort.systems.move_oracle import get_completion_rate
from blocksort.world import create_world


def render_board(board: Board) -> List[str]:
    rows = [
        f"seed={board.seed} steps={board.steps} "
        f"completion={get_completion_rate(board):.3f} hash={get_state_hash(board)}"
    ]
    for line in board.lines.values():
        colors = list(iter_line_colors(board, line))
        slots = colors + ['.'] * (line.size - len(colors))
        rows.append(f"{line.id:>8} | " + ' '.join(f"{slot:<6}" for slot in slots).rstrip())
    return rows


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a color sorting puzzle board")
    parser.add_argument("level", nargs="?", help="level id from the catalog")
    parser.add_argument("--seed", type=int, default=None, help="regenerate a specific board")
    parser.add_argument("--json", action="store_true", help="print the board as JSON")
    parser.add_argument("--list", action="store_true", help="list catalog levels")
    parser.add_argument("--verbose", "-v", action="store_true", help="log every generation trial")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    if args.list or not args.level:
        for spec in all_level_specs():
            print(f"{spec.id:<10} {spec.display_id:<4} {spec.name} (max moves {spec.max_moves})")
        return 0

    # The command line plays with three wins on every level, so all of them are unlocked.
    progress = LevelProgress(stats={spec.id: LevelStats(wins=3) for spec in all_level_specs()})
    bus = EventBus()
    world = create_world(progress=progress)
    LevelSystem(world, bus)

    result: dict = {}
    bus.subscribe(EVENT_BOARD_READY, lambda sender, **payload: result.update(payload))
    bus.subscribe(EVENT_BOARD_REQUEST_DENIED, lambda sender, **payload: result.update(payload))
    bus.emit(EVENT_BOARD_REQUEST, level_id=args.level, seed=args.seed)

    board = result.get("board")
    if board is None:
        print(f"Cannot generate {args.level}: {result.get('reason', 'unknown')}")
        return 1
    if args.json:
        print(json.dumps(board_to_dict(board), indent=2))
    else:
        print('\n'.join(render_board(board)))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
