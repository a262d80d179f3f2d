from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import List, Optional, Set, Tuple, Union

from ..board import BoardState, Move, Pour
from ..container import EMPTY
from ..puzzle import Puzzle
from .types import SolveResult, SolveStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Decision:
    """An independent choice explored at search depth `depth` (>= 1)."""

    pour: Pour
    depth: int


@dataclass(frozen=True)
class Companion:
    """A filling pour applied together with the nearest Decision below it."""

    pour: Pour


Entry = Union[Decision, Companion]


def _group_start(stack: List[Entry]) -> int:
    """Index of the Decision owning the group on top of the stack."""
    pos = len(stack) - 1
    while isinstance(stack[pos], Companion):
        pos -= 1
    return pos


def _advance(board: BoardState, stack: List[Entry]) -> int:
    """Apply the group on top of the stack; returns the depth of the new frontier."""
    if not stack:
        return 1
    pos = len(stack) - 1
    while isinstance(stack[pos], Companion):
        board.apply_pour(*stack[pos].pour)
        pos -= 1
    decision = stack[pos]
    board.apply_pour(*decision.pour)
    return decision.depth + 1


def _extend(board: BoardState, stack: List[Entry], depth: int) -> None:
    """Push the candidate groups of the current frontier, best candidate last."""
    buckets = board.group_by_top_color()
    capacity = board.capacity

    # Pours into the first empty container. Explored only after every merge
    # candidate at this depth failed.
    if buckets[EMPTY]:
        sink = buckets[EMPTY][0][0]
        sink_pours: List[Tuple[Tuple[int, int, int], Pour]] = []
        for bucket in buckets[1:]:
            for j, free, count in bucket:
                # a container holding a single color gains nothing from moving
                if free + count < capacity:
                    sink_pours.append(((count, free, -j), Pour(j, sink, count)))
        sink_pours.sort(key=lambda item: item[0])
        for _, pour in sink_pours:
            stack.append(Decision(pour, depth))

    # Merge a top run into containers topped with the same color, filling
    # them in order of decreasing free space.
    branches: List[Tuple[Tuple[int, int, int], Pour, List[Pour]]] = []
    for bucket in buckets[1:]:
        if len(bucket) < 2:
            continue
        bucket.sort(key=lambda item: -item[1])
        room = sum(free for _, free, _ in bucket)
        for j, free, count in bucket:
            if free + count > room:
                continue
            fills: List[Pour] = []
            acc = widest = 0
            for i, air, dest_count in bucket:
                if i == j:
                    continue
                acc += air
                widest = max(widest, air + dest_count)
                if acc >= count:
                    branches.append(((widest, count, -j), Pour(j, i, count - (acc - air)), fills))
                    break
                fills.append(Pour(j, i, air))

    branches.sort(key=lambda item: item[0])
    for _, pour, fills in branches:
        stack.append(Decision(pour, depth))
        stack.extend(Companion(fill) for fill in reversed(fills))


def _backtrack(board: BoardState, stack: List[Entry], depth: int, fail_states: Set[int]) -> Tuple[bool, int]:
    """Undo groups until an untried alternative is on top.

    Returns (found, rewinds). Every board left behind on the way down is a
    proven dead end and goes into `fail_states`.
    """
    last = depth
    rewinds = 0
    while stack:
        pos = _group_start(stack)
        group_depth = stack[pos].depth
        if group_depth == last:
            return True, rewinds
        fail_states.add(board.fingerprint())
        last = group_depth
        for entry in stack[pos:]:
            board.undo_pour(*entry.pour)
        del stack[pos:]
        rewinds += 1
        logger.debug("rewind to depth %d (stack=%d)", group_depth, len(stack))
    return False, rewinds


def _path(stack: List[Entry]) -> List[Pour]:
    """The pours currently applied to the board, in application order.

    Entries sharing a depth with an entry above them are untried
    alternatives and are skipped together with their companions.
    """
    out: List[Pour] = []
    pending: List[Pour] = []
    last: Optional[int] = None
    for entry in reversed(stack):
        if isinstance(entry, Companion):
            pending.append(entry.pour)
            continue
        if entry.depth == last:
            pending.clear()
            continue
        last = entry.depth
        out.append(entry.pour)
        out.extend(reversed(pending))
        pending.clear()
    out.reverse()
    return out


def solve_board(
    board: BoardState,
    *,
    timeout_ms: int | None = None,
    max_steps: int | None = None,
) -> SolveResult:
    """Depth-first search with an explicit undo stack over one mutable board.

    The board is left in its solved state on success and restored to its
    starting state otherwise.
    """

    start_time = time.monotonic()
    stack: List[Entry] = []
    fail_states: Set[int] = set()
    steps = rewinds = cache_hits = max_depth = 0

    def stats() -> dict:
        return {
            "steps": steps,
            "rewinds": rewinds,
            "cache_hits": cache_hits,
            "fail_states": len(fail_states),
            "max_depth": max_depth,
        }

    def budget_exhausted() -> bool:
        if max_steps is not None and steps > max_steps:
            return True
        if timeout_ms is not None and steps % 1000 == 0:
            return (time.monotonic() - start_time) * 1000.0 > timeout_ms
        return False

    logger.info(
        "backtrack search: containers=%d capacity=%d colors=%d",
        len(board),
        board.capacity,
        board.color_count - 1,
    )
    while True:
        depth = _advance(board, stack)
        steps += 1
        max_depth = max(max_depth, depth - 1)
        if budget_exhausted():
            for pour in reversed(_path(stack)):
                board.undo_pour(*pour)
            logger.info("backtrack search aborted after %d steps", steps)
            return SolveResult(SolveStatus.ABORTED, [], stats())

        if board.fingerprint() in fail_states:
            cache_hits += 1
        elif board.is_solved():
            moves: List[Move] = [(p.src, p.dst) for p in _path(stack)]
            status = SolveStatus.SOLVED if moves else SolveStatus.ALREADY_SOLVED
            logger.info("backtrack search %s: moves=%d %s", status.value, len(moves), stats())
            return SolveResult(status, moves, stats())
        else:
            _extend(board, stack, depth)

        found, undone = _backtrack(board, stack, depth, fail_states)
        rewinds += undone
        if not found:
            logger.info("backtrack search exhausted: %s", stats())
            return SolveResult(SolveStatus.UNSOLVABLE, [], stats())


def solve_with_backtrack(
    puzzle: Puzzle,
    *,
    timeout_ms: int | None = None,
    max_steps: int | None = None,
) -> SolveResult:
    """Validate `puzzle` and solve it with the backtracking engine."""
    puzzle.validate()
    return solve_board(puzzle.board(), timeout_ms=timeout_ms, max_steps=max_steps)
