from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Mapping, Sequence

from blocksort.components.board import Board
from blocksort.components.level_stats import LevelProgress
from blocksort.constants import BLOCK_COLORS, DEFAULT_TRIALS
from blocksort.factories.blank_board import LineDef, create_blank_board, validate_layout
from blocksort.systems.shuffle import shuffle_blocks
from blocksort.utils.random_source import RandomSource

ProgressPredicate = Callable[[LevelProgress], bool]


def _always(progress: LevelProgress) -> bool:
    return True


def _cleared(*level_ids: str, wins: int = 1) -> ProgressPredicate:
    def predicate(progress: LevelProgress) -> bool:
        return all(progress.wins(level_id) >= wins for level_id in level_ids)

    return predicate


@dataclass(frozen=True)
class LevelSpec:
    id: str
    display_id: str
    name: str
    rows: Sequence[Sequence[LineDef]]
    max_moves: int
    trials: int = DEFAULT_TRIALS
    disable_empty_drop: bool = False
    help_page_id: str | None = None
    is_visible: ProgressPredicate = _always
    is_unlocked: ProgressPredicate = _always

    def create_blank_board(self, seed: int | None = None) -> Board:
        return create_blank_board(
            self.id, seed, self.rows, BLOCK_COLORS, disable_empty_drop=self.disable_empty_drop
        )

    def create_board(self, seed: int | None = None, *, rng: RandomSource | None = None) -> Board:
        """Generate a puzzle for this level; a seed regenerates the same board."""
        return shuffle_blocks(self.create_blank_board(seed), self.max_moves, self.trials, rng=rng)


def _row(size: int, *stacks: Sequence[int]) -> tuple[LineDef, ...]:
    return tuple(LineDef(size=size, stacks=tuple(stack)) for stack in stacks)


_LEVEL_SPECS: Mapping[str, LevelSpec] = {
    spec.id: spec
    for spec in (
        LevelSpec(
            id="tutorial1",
            display_id="T1",
            name="First Steps",
            rows=(_row(4, [4], [], [], []),),
            max_moves=2,
            help_page_id="how-to-play",
        ),
        LevelSpec(
            id="tutorial2",
            display_id="T2",
            name="First Steps+",
            rows=(_row(4, [4], [4], [], []),),
            max_moves=3,
            is_unlocked=_cleared("tutorial1"),
        ),
        LevelSpec(
            id="tutorial3",
            display_id="T3",
            name="First Steps++",
            rows=(_row(4, [4], [4], [], []),),
            max_moves=10,
            is_unlocked=_cleared("tutorial2"),
        ),
        LevelSpec(
            id="normal1",
            display_id="1",
            name="Normal 1",
            rows=(_row(4, [4], [4], [4], []),),
            max_moves=20,
            is_visible=_cleared("tutorial1"),
            is_unlocked=_cleared("tutorial3"),
        ),
        LevelSpec(
            id="normal2",
            display_id="2",
            name="Normal 2",
            rows=(_row(4, [4], [4], [4], [4]), _row(4, [], [], [])),
            max_moves=30,
            is_visible=_cleared("tutorial3"),
            is_unlocked=_cleared("normal1"),
        ),
        LevelSpec(
            id="normal3",
            display_id="3",
            name="Normal 3",
            rows=(_row(4, [4], [4], [4], [4], [4]), _row(4, [], [], [], [])),
            max_moves=40,
            is_visible=_cleared("normal1"),
            is_unlocked=_cleared("normal2"),
        ),
        LevelSpec(
            id="deep1",
            display_id="D1",
            name="Deep",
            rows=(_row(8, [8], [8], [8], []),),
            max_moves=30,
            is_visible=_cleared("normal1"),
            is_unlocked=_cleared("normal2"),
        ),
        LevelSpec(
            id="deep2",
            display_id="D2",
            name="Deeper",
            rows=(_row(8, [4, 4], [4, 4], [4, 4], [], []),),
            max_moves=40,
            is_visible=_cleared("deep1"),
            is_unlocked=_cleared("deep1", wins=3),
        ),
        LevelSpec(
            id="wide1",
            display_id="W1",
            name="Wide",
            rows=(_row(4, [4], [4], [4], [4], [4], [4], [4], []),),
            max_moves=30,
            is_visible=_cleared("normal2"),
            is_unlocked=_cleared("normal3"),
        ),
        LevelSpec(
            id="wide2",
            display_id="W2",
            name="Wider",
            rows=(_row(4, [4], [4], [4], [4]), _row(4, [4], [4], [4], [])),
            max_moves=40,
            is_visible=_cleared("wide1"),
            is_unlocked=_cleared("wide1", wins=3),
        ),
        LevelSpec(
            id="tower1",
            display_id="X1",
            name="Towers",
            rows=(
                (LineDef(6, (3, 3)), LineDef(6, (3, 3)), LineDef(6, ()), LineDef(3, ())),
            ),
            max_moves=30,
            disable_empty_drop=True,
            help_page_id="no-empty-drop",
            is_visible=_cleared("deep1"),
            is_unlocked=_cleared("deep2", "wide1"),
        ),
    )
}


def all_level_specs() -> Iterable[LevelSpec]:
    return _LEVEL_SPECS.values()


def get_level_spec(level_id: str) -> LevelSpec | None:
    return _LEVEL_SPECS.get(level_id)


def validate_catalog() -> None:
    """Check every level layout against the palette; raises ``LevelConfigError``."""
    for spec in all_level_specs():
        validate_layout(spec.rows, BLOCK_COLORS)
