from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from .board import Move
from .puzzle import InvalidBoardError, InvalidFormatError, Puzzle
from .solver import SOLVER_CHOICES, SolveStatus, solve_puzzle

EXIT_OK = 0
EXIT_INVALID_FORMAT = 3
EXIT_INVALID_BOARD = 4
EXIT_ABORTED = 5


def format_moves(moves: Sequence[Move], container_count: int) -> List[str]:
    """One line per move, 1-based: `[ 3] #2  ――→ #11`."""
    step_w = len(str(len(moves)))
    idx_w = len(str(container_count))
    return [
        f"[{i + 1:>{step_w}}] #{a + 1:<{idx_w}} ――→ #{b + 1:<{idx_w}}"
        for i, (a, b) in enumerate(moves)
    ]


def _load(args: argparse.Namespace) -> Puzzle:
    if args.file:
        return Puzzle.from_file(args.board, capacity=args.capacity)
    return Puzzle.from_text(args.board, capacity=args.capacity)


def _configure_logging(verbose: int) -> None:
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, stream=sys.stderr, format="%(levelname)s %(name)s: %(message)s")


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="pour_solver", description="Pour-sort (water sort) puzzle solver")
    sub = parser.add_subparsers(dest="cmd", required=True)

    def add_board_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("board", type=str, help='Comma separated containers, bottom to top, e.g. "AB,BA,,"')
        p.add_argument("--file", action="store_true", help="Treat BOARD as a path to a text or .json board file")
        p.add_argument("--capacity", type=int, default=None, help="Container capacity (default: longest container)")
        p.add_argument("-v", "--verbose", action="count", default=0, help="Log progress to stderr (-vv for debug)")

    p_solve = sub.add_parser("solve", help="Solve a board and print the moves")
    add_board_args(p_solve)
    p_solve.add_argument("--solver", choices=SOLVER_CHOICES, default="backtrack", help="Solver backend")
    p_solve.add_argument("--timeout-ms", type=int, default=None, help="Give up after this many milliseconds")
    p_solve.add_argument("--max-steps", type=int, default=None, help="Give up after this many search steps")
    p_solve.add_argument("--out", type=str, default=None, help="Also write an HTML replay of the solution")

    p_check = sub.add_parser("check", help="Validate a board without solving it")
    add_board_args(p_check)

    p_viz = sub.add_parser("visualize", help="Render the board to an HTML file")
    add_board_args(p_viz)
    p_viz.add_argument("--out", type=str, default="out/board.html", help="Output HTML path")

    args = parser.parse_args(list(argv) if argv is not None else None)
    _configure_logging(args.verbose)

    try:
        puzzle = _load(args)
        puzzle.validate()
    except InvalidFormatError as e:
        print(f"Invalid input: {e}", file=sys.stderr)
        return EXIT_INVALID_FORMAT
    except InvalidBoardError as e:
        print(f"Invalid board: {e}", file=sys.stderr)
        return EXIT_INVALID_BOARD
    except OSError as e:
        print(f"Cannot read board: {e}", file=sys.stderr)
        return EXIT_INVALID_FORMAT

    if args.cmd == "check":
        print(f"Valid board: containers={len(puzzle)}, capacity={puzzle.capacity}, colors={len(puzzle.labels) - 1}")
        return EXIT_OK

    if args.cmd == "visualize":
        from .viz import write_plotly_html

        out = write_plotly_html(puzzle, out_path=args.out, title=f"Board: {puzzle.to_text()}")
        print(f"Wrote board visualization: {out}")
        return EXIT_OK

    if args.cmd == "solve":
        res = solve_puzzle(puzzle, solver=args.solver, timeout_ms=args.timeout_ms, max_steps=args.max_steps)
        if res.status is SolveStatus.ABORTED:
            print("Search aborted before finding a solution.", file=sys.stderr)
            return EXIT_ABORTED
        if res.status is SolveStatus.UNSOLVABLE:
            print("No solution.")
            return EXIT_OK
        if res.status is SolveStatus.ALREADY_SOLVED:
            print("Already solved.")
            return EXIT_OK
        for line in format_moves(res.moves, len(puzzle)):
            print(line)
        if args.out:
            from .viz import write_plotly_html

            out = write_plotly_html(puzzle, out_path=args.out, moves=res.moves, title="Solution")
            print(f"Wrote solution visualization: {out}")
        return EXIT_OK

    raise AssertionError("unreachable")
