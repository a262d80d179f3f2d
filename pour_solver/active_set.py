from __future__ import annotations

from typing import Iterator, List


class ActiveSet:
    """Indices `0..n-1` kept in an intrusive, circular doubly linked list.

    Slot `n` is the sentinel. Removing a node leaves its own (prev, next)
    links in place so that it can be relinked in O(1) later. Restores must
    mirror removes in stack order; the set tracks the removals and refuses
    anything else.
    """

    def __init__(self, n: int) -> None:
        self._n = n
        self._prev: List[int] = [n] + list(range(n))
        self._next: List[int] = list(range(1, n + 1)) + [0]
        self._removed: List[int] = []
        self._present = [True] * n

    def remove(self, index: int) -> None:
        if not self._present[index]:
            raise RuntimeError(f"Index {index} is not in the active set")
        p, n = self._prev[index], self._next[index]
        self._next[p] = n
        self._prev[n] = p
        self._present[index] = False
        self._removed.append(index)

    def restore(self, index: int) -> None:
        if not self._removed or self._removed[-1] != index:
            raise RuntimeError(f"Index {index} is not the most recent removal")
        self._removed.pop()
        p, n = self._prev[index], self._next[index]
        self._next[p] = index
        self._prev[n] = index
        self._present[index] = True

    def __iter__(self) -> Iterator[int]:
        index = self._next[self._n]
        while index != self._n:
            yield index
            index = self._next[index]

    def __contains__(self, index: object) -> bool:
        return isinstance(index, int) and 0 <= index < self._n and self._present[index]

    def __len__(self) -> int:
        return self._n - len(self._removed)

    def __repr__(self) -> str:
        return f"ActiveSet({list(self)!r})"
