from __future__ import annotations

from typing import List

from ..board import Move
from ..puzzle import Puzzle
from .backtrack_solver import Companion, Decision, solve_board, solve_with_backtrack
from .bfs_solver import solve_with_bfs
from .types import SolveResult, SolverName, SolveStatus

SOLVER_CHOICES: tuple[SolverName, ...] = ("backtrack", "bfs")


def solve_puzzle(
    puzzle: Puzzle,
    *,
    solver: SolverName = "backtrack",
    timeout_ms: int | None = None,
    max_steps: int | None = None,
) -> SolveResult:
    """Validate and solve `puzzle`.

    Raises `InvalidBoardError` before any search when the board can never be
    solved. An empty `moves` list means either already solved or unsolvable;
    `status` tells them apart.
    """
    if solver == "backtrack":
        return solve_with_backtrack(puzzle, timeout_ms=timeout_ms, max_steps=max_steps)
    if solver == "bfs":
        return solve_with_bfs(puzzle, timeout_ms=timeout_ms, max_steps=max_steps)
    raise ValueError(f"Unknown solver {solver!r}. Choose one of: {', '.join(SOLVER_CHOICES)}")


def solve_moves(puzzle: Puzzle) -> List[Move]:
    """The plain move list: empty when already solved or unsolvable."""
    return solve_puzzle(puzzle).moves


__all__ = [
    "Companion",
    "Decision",
    "SolveResult",
    "SolveStatus",
    "SolverName",
    "SOLVER_CHOICES",
    "solve_board",
    "solve_moves",
    "solve_puzzle",
    "solve_with_backtrack",
    "solve_with_bfs",
]
