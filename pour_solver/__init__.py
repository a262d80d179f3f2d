from .board import BoardState, IllegalMoveError, Move, Pour, replay
from .puzzle import (
    InvalidBoardError,
    InvalidFormatError,
    Puzzle,
    PuzzleError,
    is_valid_board,
    validate_board,
)
from .solver import SolveResult, SolveStatus, solve_board, solve_puzzle

__all__ = [
    "BoardState",
    "IllegalMoveError",
    "InvalidBoardError",
    "InvalidFormatError",
    "Move",
    "Pour",
    "Puzzle",
    "PuzzleError",
    "SolveResult",
    "SolveStatus",
    "is_valid_board",
    "replay",
    "solve_board",
    "solve_puzzle",
    "validate_board",
]
