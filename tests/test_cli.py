from pour_solver.cli import EXIT_ABORTED, EXIT_INVALID_BOARD, EXIT_INVALID_FORMAT, format_moves, main


def test_solve_prints_numbered_moves(capsys):
    assert main(["solve", "AB,BA,,"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == [
        "[1] #1 ――→ #3",
        "[2] #2 ――→ #1",
        "[3] #2 ――→ #3",
    ]


def test_format_moves_pads_columns():
    lines = format_moves([(0, 9)] * 10, 12)
    assert lines[0] == "[ 1] #1  ――→ #10"
    assert lines[-1] == "[10] #1  ――→ #10"


def test_empty_results(capsys):
    assert main(["solve", "AA"]) == 0
    assert capsys.readouterr().out.strip() == "Already solved."
    assert main(["solve", "AB,BA"]) == 0
    assert capsys.readouterr().out.strip() == "No solution."


def test_exit_codes_for_bad_input(capsys):
    assert main(["solve", "AAA", "--capacity", "2"]) == EXIT_INVALID_FORMAT
    assert main(["solve", "AB,A"]) == EXIT_INVALID_BOARD
    assert main(["check", ".A,A"]) == EXIT_INVALID_BOARD
    err = capsys.readouterr().err
    assert "Invalid input" in err
    assert "Invalid board" in err


def test_step_budget(capsys):
    assert main(["solve", "ABC,BCA,CAB,,", "--max-steps", "1"]) == EXIT_ABORTED


def test_check_and_file_input(tmp_path, capsys):
    path = tmp_path / "level.txt"
    path.write_text("# capacity: 2\nAB\nBA\n.\n.\n", encoding="utf-8")
    assert main(["check", str(path), "--file"]) == 0
    assert "containers=4" in capsys.readouterr().out
    assert main(["check", str(tmp_path / "missing.txt"), "--file"]) == EXIT_INVALID_FORMAT


def test_solve_writes_replay(tmp_path, capsys):
    out = tmp_path / "solution.html"
    assert main(["solve", "AB,BA,,", "--out", str(out)]) == 0
    assert out.exists()
    assert "Wrote solution visualization" in capsys.readouterr().out


def test_visualize(tmp_path):
    out = tmp_path / "board.html"
    assert main(["visualize", "AB,BA,,", "--out", str(out)]) == 0
    assert "plotly" in out.read_text(encoding="utf-8").lower()


def test_undecodable_file_is_a_format_error(tmp_path, capsys):
    path = tmp_path / "level.txt"
    path.write_bytes(b"\xff\xfe,AB")
    assert main(["check", str(path), "--file"]) == EXIT_INVALID_FORMAT
    assert "Invalid input" in capsys.readouterr().err
