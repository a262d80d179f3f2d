from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Literal

from ..board import Move

SolverName = Literal["backtrack", "bfs"]


class SolveStatus(str, Enum):
    ALREADY_SOLVED = "already_solved"
    SOLVED = "solved"
    UNSOLVABLE = "unsolvable"
    ABORTED = "aborted"  # step or time budget ran out


@dataclass
class SolveResult:
    status: SolveStatus
    moves: List[Move] = field(default_factory=list)  # empty unless SOLVED
    stats: Dict[str, int] = field(default_factory=dict)

    @property
    def solved(self) -> bool:
        return self.status in (SolveStatus.SOLVED, SolveStatus.ALREADY_SOLVED)
