from __future__ import annotations

from typing import List, Sequence, Tuple

EMPTY = 0

Run = Tuple[int, int]  # (color, count)


class Container:
    """One container stored as runs of colors, bottom first, plus free space on top."""

    __slots__ = ("capacity", "free", "runs")

    def __init__(self, capacity: int, runs: Sequence[Run] = ()) -> None:
        self.capacity = capacity
        self.runs: List[Run] = list(runs)
        self.free = capacity - sum(count for _, count in self.runs)

    @classmethod
    def from_cells(cls, cells: Sequence[int]) -> "Container":
        """Build from `cells` listed bottom to top, `EMPTY` padding on top."""
        runs: List[Run] = []
        for color in cells:
            if color == EMPTY:
                continue
            if runs and runs[-1][0] == color:
                runs[-1] = (color, runs[-1][1] + 1)
            else:
                runs.append((color, 1))
        return cls(len(cells), runs)

    def is_full(self) -> bool:
        return self.free == 0 and len(self.runs) == 1

    def is_empty(self) -> bool:
        return not self.runs

    def top(self) -> Run:
        return self.runs[-1]

    @property
    def top_color(self) -> int:
        return self.runs[-1][0] if self.runs else EMPTY

    def pour_out(self, amount: int) -> None:
        color, count = self.runs[-1]
        if count == amount:
            self.runs.pop()
        else:
            self.runs[-1] = (color, count - amount)
        self.free += amount

    def pour_in(self, color: int, amount: int) -> None:
        self.free -= amount
        if self.runs and self.runs[-1][0] == color:
            self.runs[-1] = (color, self.runs[-1][1] + amount)
        else:
            self.runs.append((color, amount))

    def cells(self) -> List[int]:
        out: List[int] = []
        for color, count in self.runs:
            out.extend([color] * count)
        out.extend([EMPTY] * self.free)
        return out

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Container):
            return NotImplemented
        return self.capacity == other.capacity and self.runs == other.runs

    def __repr__(self) -> str:
        return f"Container(capacity={self.capacity}, runs={self.runs!r})"
