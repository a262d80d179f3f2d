import pytest

from pour_solver.board import BoardState, IllegalMoveError, Pour, replay
from pour_solver.puzzle import Puzzle


def test_group_by_top_color():
    board = Puzzle.from_text("AB,BA,,").board()
    ids = Puzzle.from_text("AB,BA,,").color_ids()
    buckets = board.group_by_top_color()
    assert len(buckets) == 3
    assert buckets[0] == [(2, 2, 0), (3, 2, 0)]
    assert buckets[ids["B"]] == [(0, 0, 1)]
    assert buckets[ids["A"]] == [(1, 0, 1)]


def test_full_containers_start_inactive():
    board = Puzzle.from_text("AA,B,B").board()
    assert list(board.active) == [1, 2]
    assert not board.is_solved()


def test_apply_fills_and_undo_restores():
    board = Puzzle.from_text("BA,A,").board()
    before = board.snapshot()
    board.apply_pour(0, 1, 1)
    assert board.containers[1].is_full()
    assert list(board.active) == [0, 2]
    board.undo_pour(0, 1, 1)
    assert board.snapshot() == before
    assert list(board.active) == [0, 1, 2]


def test_fingerprint_tracks_contents():
    a = Puzzle.from_text("AB,BA,,").board()
    b = Puzzle.from_text("AB,BA,,").board()
    assert a.fingerprint() == b.fingerprint()
    a.apply_pour(0, 2, 1)
    assert a.fingerprint() != b.fingerprint()
    a.undo_pour(0, 2, 1)
    assert a.fingerprint() == b.fingerprint()


def test_solved_means_every_active_container_is_empty():
    board = BoardState.from_cells([[1, 1], [0, 0], [2, 2]])
    assert board.is_solved()
    assert board.is_terminal()
    board = BoardState.from_cells([[1, 0], [1, 0]])
    assert not board.is_solved()


def test_pour_amount_is_maximal():
    board = BoardState.from_cells([[1, 2, 2, 2], [2, 2, 0, 0], [0, 0, 0, 0], [1, 3, 3, 3]])
    assert board.pour_amount(0, 1) == 2
    assert board.pour_amount(0, 2) == 3
    assert board.pour_amount(0, 3) == 0
    assert board.pour_amount(2, 0) == 0
    assert board.pour_amount(1, 1) == 0


def test_replay_moves():
    board = Puzzle.from_text("AB,BA,,").board()
    pours = replay(board, [(0, 2), (1, 0), (1, 2)])
    assert pours == [Pour(0, 2, 1), Pour(1, 0, 1), Pour(1, 2, 1)]
    assert board.is_solved()


def test_illegal_moves_raise():
    board = Puzzle.from_text("AB,BA,,").board()
    with pytest.raises(IllegalMoveError):
        board.apply_move(0, 1)
    with pytest.raises(IllegalMoveError):
        board.apply_move(2, 3)
    with pytest.raises(IllegalMoveError):
        board.apply_move(0, 7)
    full = Puzzle.from_text("AA,").board()
    with pytest.raises(IllegalMoveError):
        full.apply_move(0, 1)
