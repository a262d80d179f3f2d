from __future__ import annotations

from typing import Iterable, List, NamedTuple, Sequence, Tuple

from .active_set import ActiveSet
from .container import EMPTY, Container, Run

Move = Tuple[int, int]  # (src, dst), 0-based
Snapshot = Tuple[Tuple[Run, ...], ...]
Bucket = List[Tuple[int, int, int]]  # (index, free, top_count)


class IllegalMoveError(ValueError):
    pass


class Pour(NamedTuple):
    src: int
    dst: int
    amount: int


class BoardState:
    """All containers of one puzzle plus the set of not-yet-full ones.

    The board is mutated in place by `apply_pour`/`undo_pour`; the solver
    relies on every forward pour having an exact inverse.
    """

    def __init__(self, capacity: int, color_count: int, containers: Sequence[Container]) -> None:
        self.capacity = capacity
        self.color_count = color_count
        self.containers: List[Container] = list(containers)
        self.active = ActiveSet(len(self.containers))
        for j, container in enumerate(self.containers):
            if container.is_full():
                self.active.remove(j)

    @classmethod
    def from_cells(cls, rows: Sequence[Sequence[int]], color_count: int | None = None) -> "BoardState":
        """Build from integer rows (bottom to top, `EMPTY` padding on top)."""
        if not rows:
            raise ValueError("A board needs at least one container")
        capacity = len(rows[0])
        if any(len(r) != capacity for r in rows):
            raise ValueError("All rows must have the same length")
        if color_count is None:
            color_count = max((c for r in rows for c in r), default=EMPTY) + 1
        return cls(capacity, color_count, [Container.from_cells(r) for r in rows])

    def __len__(self) -> int:
        return len(self.containers)

    def is_solved(self) -> bool:
        return all(self.containers[j].is_empty() for j in self.active)

    def is_terminal(self) -> bool:
        """Every container is empty or full, regardless of active-set bookkeeping."""
        return all(c.is_empty() or c.is_full() for c in self.containers)

    def group_by_top_color(self) -> List[Bucket]:
        buckets: List[Bucket] = [[] for _ in range(self.color_count)]
        for j in self.active:
            container = self.containers[j]
            if container.is_empty():
                buckets[EMPTY].append((j, self.capacity, 0))
                continue
            color, count = container.top()
            buckets[color].append((j, container.free, count))
        return buckets

    def apply_pour(self, src: int, dst: int, amount: int) -> None:
        color = self.containers[src].top_color
        self.containers[src].pour_out(amount)
        self.containers[dst].pour_in(color, amount)
        if self.containers[dst].is_full():
            self.active.remove(dst)

    def undo_pour(self, src: int, dst: int, amount: int) -> None:
        if self.containers[dst].is_full():
            self.active.restore(dst)
        color = self.containers[dst].top_color
        self.containers[dst].pour_out(amount)
        self.containers[src].pour_in(color, amount)

    def fingerprint(self) -> int:
        return hash(self.snapshot())

    def snapshot(self) -> Snapshot:
        return tuple(tuple(c.runs) for c in self.containers)

    def cells(self) -> List[List[int]]:
        return [c.cells() for c in self.containers]

    # Replaying (src, dst) moves whose amount is implied by the board.

    def pour_amount(self, src: int, dst: int) -> int:
        """Largest legal amount for pouring `src` into `dst`, 0 when illegal."""
        if src == dst:
            return 0
        source, target = self.containers[src], self.containers[dst]
        if source.is_empty() or target.free == 0:
            return 0
        color, count = source.top()
        if not target.is_empty() and target.top_color != color:
            return 0
        return min(count, target.free)

    def apply_move(self, src: int, dst: int) -> Pour:
        for idx in (src, dst):
            if not 0 <= idx < len(self.containers):
                raise IllegalMoveError(f"Container index out of range: {idx}")
        if self.containers[src].is_full():
            raise IllegalMoveError(f"Container {src} is already complete; no need to pour it")
        amount = self.pour_amount(src, dst)
        if amount == 0:
            raise IllegalMoveError(f"Cannot pour container {src} into container {dst}")
        self.apply_pour(src, dst, amount)
        return Pour(src, dst, amount)


def replay(board: BoardState, moves: Iterable[Move]) -> List[Pour]:
    """Apply `moves` in order as maximal legal pours; returns the pours performed."""
    return [board.apply_move(src, dst) for src, dst in moves]
