from __future__ import annotations

import logging
import time
from queue import SimpleQueue as Queue
from typing import Dict, List, Optional, Tuple

from ..board import Move, Snapshot
from ..puzzle import Puzzle
from .types import SolveResult, SolveStatus

logger = logging.getLogger(__name__)


def _is_terminal(state: Snapshot, capacity: int) -> bool:
    for runs in state:
        if runs and not (len(runs) == 1 and runs[0][1] == capacity):
            return False
    return True


def _pour(state: Snapshot, capacity: int, src: int, dst: int) -> Optional[Snapshot]:
    """The state after pouring `src` into `dst`, or None if the pour is useless or illegal."""
    source, target = state[src], state[dst]
    if not source:
        return None
    color, count = source[-1]
    if len(source) == 1 and count == capacity:
        # already complete
        return None
    if not target and len(source) == 1:
        # moving a single-color container into an empty one changes nothing
        return None
    free = capacity - sum(c for _, c in target)
    if free == 0 or (target and target[-1][0] != color):
        return None
    amount = min(count, free)
    if amount == count:
        new_source = source[:-1]
    else:
        new_source = source[:-1] + ((color, count - amount),)
    if target:
        new_target = target[:-1] + ((color, target[-1][1] + amount),)
    else:
        new_target = ((color, amount),)
    out = list(state)
    out[src] = new_source
    out[dst] = new_target
    return tuple(out)


def solve_with_bfs(
    puzzle: Puzzle,
    *,
    timeout_ms: int | None = None,
    max_steps: int | None = None,
) -> SolveResult:
    """Breadth-first search for a shortest solution.

    Memory grows with every distinct board reached, so this is meant for
    small puzzles and for checking the backtracking engine.
    """

    puzzle.validate()
    board = puzzle.board()
    capacity = board.capacity
    start = board.snapshot()
    start_time = time.monotonic()

    if _is_terminal(start, capacity):
        return SolveResult(SolveStatus.ALREADY_SOLVED, [], {"states": 1})

    parents: Dict[Snapshot, Tuple[Optional[Snapshot], Optional[Move]]] = {start: (None, None)}
    queue: Queue = Queue()
    queue.put(start)
    expanded = 0
    n = len(start)

    def walk_back(state: Snapshot) -> List[Move]:
        moves: List[Move] = []
        while True:
            parent, move = parents[state]
            if parent is None:
                break
            moves.append(move)  # type: ignore[arg-type]
            state = parent
        moves.reverse()
        return moves

    while not queue.empty():
        state = queue.get()
        expanded += 1
        if max_steps is not None and expanded > max_steps:
            logger.info("bfs search aborted after %d states", expanded)
            return SolveResult(SolveStatus.ABORTED, [], {"states": len(parents)})
        if timeout_ms is not None and expanded % 1000 == 0:
            if (time.monotonic() - start_time) * 1000.0 > timeout_ms:
                logger.info("bfs search timed out after %d states", expanded)
                return SolveResult(SolveStatus.ABORTED, [], {"states": len(parents)})

        for src in range(n):
            for dst in range(n):
                if src == dst:
                    continue
                poured = _pour(state, capacity, src, dst)
                if poured is None or poured in parents:
                    continue
                parents[poured] = (state, (src, dst))
                if _is_terminal(poured, capacity):
                    moves = walk_back(poured)
                    logger.info("bfs search solved: moves=%d states=%d", len(moves), len(parents))
                    return SolveResult(SolveStatus.SOLVED, moves, {"states": len(parents)})
                queue.put(poured)

    logger.info("bfs search exhausted: states=%d", len(parents))
    return SolveResult(SolveStatus.UNSOLVABLE, [], {"states": len(parents)})
