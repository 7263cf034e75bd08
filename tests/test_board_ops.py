import json

import pytest

from blocksort.components.block import Block
from blocksort.systems.board_ops import (
    BoardInconsistencyError,
    board_from_dict,
    board_to_dict,
    clone_board,
    find_block_by_id,
    get_state_hash,
    move_block,
    sync_blocks,
)
from tests.helpers import all_line_block_ids, build_board, line_colors


def test_clone_board_is_independent():
    board = build_board([["red", "blue"], []])
    clone = clone_board(board)

    move_block(clone, "L1", "b1")
    clone.blocks["b0"].color = "green"
    clone.steps = 5

    assert board.lines["L0"].block_ids == ["b0", "b1"]
    assert board.lines["L1"].block_ids == []
    assert board.blocks["b0"].color == "red"
    assert board.blocks["b1"].line_id == "L0"
    assert board.steps == 0


def test_move_block_relocates_run_and_renumbers():
    board = build_board([["red", "blue", "blue"], ["blue"]])
    moved = move_block(board, board.lines["L1"], board.blocks["b1"])

    assert moved == ["b1", "b2"]
    assert board.lines["L0"].block_ids == ["b0"]
    assert board.lines["L1"].block_ids == ["b3", "b1", "b2"]
    assert (board.blocks["b1"].line_id, board.blocks["b1"].index) == ("L1", 1)
    assert (board.blocks["b2"].line_id, board.blocks["b2"].index) == ("L1", 2)


def test_move_block_accepts_ids():
    board = build_board([["red"], []])
    move_block(board, "L1", "b0")
    assert line_colors(board) == [[], ["red"]]
    assert board.blocks["b0"].line_id == "L1"
    assert board.blocks["b0"].index == 0


def test_sync_blocks_repairs_back_pointers():
    board = build_board([["red", "blue"], ["green"]])
    board.lines["L0"].block_ids.reverse()
    board.blocks["b2"].line_id = "L0"
    board.blocks["b2"].index = 9

    sync_blocks(board)

    assert (board.blocks["b1"].line_id, board.blocks["b1"].index) == ("L0", 0)
    assert (board.blocks["b0"].line_id, board.blocks["b0"].index) == ("L0", 1)
    assert (board.blocks["b2"].line_id, board.blocks["b2"].index) == ("L1", 0)


def test_sync_blocks_rejects_unknown_block_id():
    board = build_board([["red"], []])
    board.lines["L1"].block_ids.append("ghost")
    with pytest.raises(BoardInconsistencyError, match="ghost"):
        sync_blocks(board)


def test_sync_blocks_rejects_orphan_block():
    board = build_board([["red"], []])
    board.blocks["lost"] = Block(id="lost", color="red", line_id="L1", index=0)
    with pytest.raises(BoardInconsistencyError, match="lost"):
        sync_blocks(board)


def test_sync_blocks_rejects_block_in_two_lines():
    board = build_board([["red"], []])
    board.lines["L1"].block_ids.append("b0")
    with pytest.raises(BoardInconsistencyError, match="b0"):
        sync_blocks(board)


def test_unchecked_illegal_move_is_caught_by_sync_only_when_ids_break():
    # The mutator never validates: overfilling a line still leaves ids consistent,
    # so the only guard against illegal moves is the oracle.
    board = build_board([["red", "red"], ["blue"]], sizes=[2, 1])
    move_block(board, "L1", "b0")
    sync_blocks(board)
    assert len(board.lines["L1"].block_ids) > board.lines["L1"].size


def test_find_block_by_id_scans_lines():
    board = build_board([["red"], ["blue", "green"]])
    board.blocks["b2"].line_id = "stale"
    line, block = find_block_by_id(board, "b2")
    assert line.id == "L1"
    assert block.color == "green"
    with pytest.raises(BoardInconsistencyError):
        find_block_by_id(board, "missing")


def test_state_hash_ignores_line_order_and_color_names():
    board = build_board([["red", "blue"], ["blue"], []])
    permuted = build_board([[], ["green"], ["yellow", "green"]])
    assert get_state_hash(board) == get_state_hash(permuted)


def test_state_hash_distinguishes_structure():
    board = build_board([["red", "blue"], ["blue"], []])
    other = build_board([["red"], ["blue", "blue"], []])
    resized = build_board([["red", "blue"], ["blue"], []], sizes=[4, 4, 5])
    digest = get_state_hash(board)
    assert len(digest) == 8
    int(digest, 16)
    assert digest != get_state_hash(other)
    assert digest != get_state_hash(resized)


def test_board_dict_round_trip_rebuilds_back_pointers():
    board = build_board([["red", "blue"], ["blue"], []], level_id="normal1")
    board.seed = 1234
    board.steps = 3
    move_block(board, "L2", "b1")

    payload = json.loads(json.dumps(board_to_dict(board)))
    assert "line_id" not in payload["blocks"]["b1"]

    restored = board_from_dict(payload)
    assert restored.level_id == "normal1"
    assert restored.seed == 1234
    assert restored.steps == 3
    assert line_colors(restored) == line_colors(board)
    assert (restored.blocks["b1"].line_id, restored.blocks["b1"].index) == ("L2", 0)
    assert sorted(all_line_block_ids(restored)) == sorted(restored.blocks)


def test_board_from_dict_rejects_inconsistent_payload():
    payload = board_to_dict(build_board([["red"], []]))
    payload["blocks"]["extra"] = {"id": "extra", "color": "blue"}
    with pytest.raises(BoardInconsistencyError):
        board_from_dict(payload)
