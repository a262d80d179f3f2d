import copy
import json

import pytest

from pour_solver.puzzle import (
    InvalidBoardError,
    InvalidFormatError,
    Puzzle,
    is_valid_board,
    validate_board,
)


def test_from_text_pads_short_containers_on_top():
    p = Puzzle.from_text("AB,BA,,")
    assert p.capacity == 2
    assert p.rows == [["A", "B"], ["B", "A"], ["", ""], ["", ""]]
    assert p.labels == ["", "A", "B"]

    p = Puzzle.from_text(" A , BBB ")
    assert p.capacity == 3
    assert p.rows[0] == ["A", "", ""]


def test_explicit_capacity():
    p = Puzzle.from_text("AB,BA", capacity=4)
    assert p.rows[0] == ["A", "B", "", ""]
    with pytest.raises(InvalidFormatError):
        Puzzle.from_text("AAA", capacity=2)


@pytest.mark.parametrize("text", ["", "   ", ",", "A B,AB"])
def test_malformed_descriptions(text):
    with pytest.raises(InvalidFormatError):
        Puzzle.from_text(text)


def test_validator_accepts_multiples_of_capacity():
    validate_board([["A", "B"], ["B", "A"], ["", ""]])
    validate_board([["A", "A", "A"], ["A", "A", "A"], ["", "", ""]])
    assert is_valid_board([["A", "A"]])


def test_validator_rejects_bad_counts():
    # a color whose count is not a multiple of the capacity
    with pytest.raises(InvalidBoardError):
        validate_board(Puzzle.from_text("AB,A").rows)
    assert not is_valid_board([["A", "A", "A"], ["B", "", ""]])


def test_validator_rejects_gaps():
    with pytest.raises(InvalidBoardError):
        validate_board([["", "A"], ["A", ""]])
    assert not is_valid_board(Puzzle.from_text(".A,A").rows)
    assert not is_valid_board([["A", "", "B"], ["A", "B", "B"], ["A", "", ""]])


def test_validator_rejects_ragged_rows():
    with pytest.raises(InvalidFormatError):
        validate_board([["A", "A"], ["A"]])


def test_validator_is_idempotent_and_read_only():
    for rows in ([["A", "B"], ["B", "A"], ["", ""]], [["", "A"], ["A", ""]]):
        original = copy.deepcopy(rows)
        first = is_valid_board(rows)
        second = is_valid_board(rows)
        assert first == second
        assert rows == original


def test_board_text_directives_and_comments():
    text = "\n".join(
        [
            "# capacity: 4",
            "# name: demo",
            "# the two mixed containers",
            "AABB",
            "BBAA",
            "",
            ".",
            ".",
        ]
    )
    p = Puzzle.from_board_text(text)
    assert p.capacity == 4
    assert len(p) == 4
    assert p.meta["name"] == "demo"
    assert p.rows[2] == ["", "", "", ""]
    p.validate()


def test_from_file(tmp_path):
    path = tmp_path / "board.txt"
    path.write_text("AB,BA\n,\n", encoding="utf-8")
    p = Puzzle.from_file(path)
    assert len(p) == 4
    assert p.meta["source"] == str(path)


def test_from_json_accepts_named_colors():
    text = json.dumps({"containers": [["red", "blue"], ["blue", "red"], [], []], "meta": {"level": 1}})
    p = Puzzle.from_json(text)
    assert p.capacity == 2
    assert p.labels == ["", "red", "blue"]
    assert p.meta == {"level": 1}
    p.validate()

    p = Puzzle.from_json('["AB", "BA", ""]')
    assert p.rows[2] == ["", ""]


@pytest.mark.parametrize("text", ["{", '{"containers": 3}', '{"containers": [1]}', '{"containers": ["A"], "capacity": "2"}'])
def test_from_json_errors(text):
    with pytest.raises(InvalidFormatError):
        Puzzle.from_json(text)


def test_to_text_round_trip():
    assert Puzzle.from_text("AB,BA,,").to_text() == "AB,BA,,"
    assert Puzzle.from_text("A,BBB").to_text() == "A,BBB"


def test_from_json_rejects_non_object_meta():
    with pytest.raises(InvalidFormatError):
        Puzzle.from_json('{"containers": ["AA"], "meta": [1]}')


def test_from_file_rejects_undecodable_bytes(tmp_path):
    path = tmp_path / "board.txt"
    path.write_bytes(b"\xff\xfe,AB")
    with pytest.raises(InvalidFormatError):
        Puzzle.from_file(path)
