from __future__ import annotations

import json
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from .board import BoardState
from .container import Container

Label = str

EMPTY_LABEL: Label = ""
# Explicit empty cell in text descriptions, e.g. "A.B" (which the validator rejects).
EMPTY_TOKEN = "."


class PuzzleError(ValueError):
    pass


class InvalidFormatError(PuzzleError):
    """The board description is structurally malformed."""


class InvalidBoardError(PuzzleError):
    """The board is well formed but can never reach a solved state."""


def validate_board(rows: Sequence[Sequence[Label]]) -> None:
    """Check a padded board grid (rows bottom to top, `""` for empty slots).

    Raises `InvalidBoardError` when some label's total count is not a
    multiple of the capacity, or when an empty slot sits below a unit.
    The grid is only read, never modified.
    """
    if not rows:
        raise InvalidFormatError("Board has no containers")
    capacity = len(rows[0])
    if capacity == 0:
        raise InvalidFormatError("Board capacity must be at least 1")
    if any(len(r) != capacity for r in rows):
        raise InvalidFormatError("All containers must be padded to the same capacity")

    counts = Counter(label for row in rows for label in row if label != EMPTY_LABEL)
    for label, count in counts.items():
        if count % capacity != 0:
            raise InvalidBoardError(
                f"Color {label!r} appears {count} times, which is not a multiple of {capacity}"
            )

    for i, row in enumerate(rows):
        seen_empty = False
        for label in row:
            if label == EMPTY_LABEL:
                seen_empty = True
            elif seen_empty:
                raise InvalidBoardError(f"Container {i + 1} has an empty slot below a unit: {list(row)!r}")


def is_valid_board(rows: Sequence[Sequence[Label]]) -> bool:
    try:
        validate_board(rows)
    except PuzzleError:
        return False
    return True


@dataclass
class Puzzle:
    """A pour-sort puzzle as labels.

    - `rows[i]` lists container `i` from bottom to top, padded with `""` up
      to `capacity`.
    - Color ids for the engine are assigned in order of first appearance.
    """

    rows: List[List[Label]]
    capacity: int
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def labels(self) -> List[Label]:
        """Index = color id; slot 0 is the empty label."""
        out: List[Label] = [EMPTY_LABEL]
        seen = set()
        for row in self.rows:
            for label in row:
                if label != EMPTY_LABEL and label not in seen:
                    seen.add(label)
                    out.append(label)
        return out

    def color_ids(self) -> Dict[Label, int]:
        return {label: i for i, label in enumerate(self.labels)}

    def validate(self) -> None:
        validate_board(self.rows)

    def board(self) -> BoardState:
        ids = self.color_ids()
        containers = [Container.from_cells([ids[label] for label in row]) for row in self.rows]
        return BoardState(self.capacity, len(ids), containers)

    def to_text(self) -> str:
        return ",".join("".join(label or EMPTY_TOKEN for label in row).rstrip(EMPTY_TOKEN) for row in self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    @staticmethod
    def from_rows(
        containers: Sequence[Union[str, Sequence[Optional[Label]]]],
        *,
        capacity: Optional[int] = None,
        meta: Optional[Dict[str, Any]] = None,
    ) -> "Puzzle":
        """Build from per-container contents, bottom to top.

        Each container is either a string of single-character labels or a
        list of labels (`None`/`""` meaning an empty slot). Short containers
        are padded with empty slots on top.
        """
        if not containers:
            raise InvalidFormatError("Board has no containers")

        cells: List[List[Label]] = []
        for i, item in enumerate(containers):
            if isinstance(item, str):
                if any(ch.isspace() for ch in item):
                    raise InvalidFormatError(f"Container {i + 1} contains whitespace: {item!r}")
                cells.append([EMPTY_LABEL if ch == EMPTY_TOKEN else ch for ch in item])
            else:
                row = []
                for label in item:
                    if label is None or label == EMPTY_LABEL or label == EMPTY_TOKEN:
                        row.append(EMPTY_LABEL)
                    elif not isinstance(label, str):
                        raise InvalidFormatError(f"Container {i + 1} has a non-string label: {label!r}")
                    else:
                        row.append(label)
                cells.append(row)

        width = max(len(r) for r in cells)
        if capacity is None:
            capacity = width
        if capacity <= 0:
            raise InvalidFormatError("Board capacity must be at least 1")
        for i, row in enumerate(cells):
            if len(row) > capacity:
                raise InvalidFormatError(
                    f"Container {i + 1} holds {len(row)} slots but the capacity is {capacity}"
                )
        rows = [row + [EMPTY_LABEL] * (capacity - len(row)) for row in cells]
        return Puzzle(rows=rows, capacity=capacity, meta=dict(meta or {}))

    @staticmethod
    def from_text(text: str, *, capacity: Optional[int] = None, meta: Optional[Dict[str, Any]] = None) -> "Puzzle":
        """Parse `"AB,BA,,"`: comma-separated containers, bottom to top."""
        if not text.strip():
            raise InvalidFormatError("Board description is empty")
        items = [item.strip() for item in text.split(",")]
        return Puzzle.from_rows(items, capacity=capacity, meta=meta)

    @staticmethod
    def from_file(path: str | Path, *, capacity: Optional[int] = None) -> "Puzzle":
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise InvalidFormatError(f"{path} is not valid UTF-8 text: {e}") from e
        if path.suffix.lower() == ".json":
            return Puzzle.from_json(text, capacity=capacity)
        return Puzzle.from_board_text(text, capacity=capacity, source_name=str(path))

    @staticmethod
    def from_board_text(
        text: str,
        *,
        capacity: Optional[int] = None,
        source_name: str = "<text>",
    ) -> "Puzzle":
        """Parse a board file: containers separated by commas and/or newlines.

        Lines like "# key: value" are directives (`capacity` is understood,
        anything else lands in `meta`); other lines starting with "#" are
        comments. Blank lines are ignored, so an empty container is written
        as "." or as an empty comma-separated item.
        """
        meta: Dict[str, Any] = {"source": source_name}
        file_capacity: Optional[int] = None
        board_lines: List[str] = []

        for ln in text.splitlines():
            raw = ln.strip()
            if not raw:
                continue
            if raw.startswith("#"):
                hdr = raw[1:].strip()
                if ":" in hdr:
                    k, v = [x.strip() for x in hdr.split(":", 1)]
                    if k.lower() == "capacity":
                        try:
                            file_capacity = int(v)
                        except ValueError as e:
                            raise InvalidFormatError(f"Invalid capacity directive: {v!r}") from e
                    else:
                        meta[k] = v
                continue
            board_lines.append(raw)

        if not board_lines:
            raise InvalidFormatError(f"No containers found in {source_name}")
        return Puzzle.from_text(
            ",".join(board_lines),
            capacity=capacity if capacity is not None else file_capacity,
            meta=meta,
        )

    @staticmethod
    def from_json(text: str, *, capacity: Optional[int] = None) -> "Puzzle":
        try:
            obj = json.loads(text)
        except json.JSONDecodeError as e:
            raise InvalidFormatError(f"Invalid JSON: {e}") from e
        if isinstance(obj, list):
            obj = {"containers": obj}
        if not isinstance(obj, dict) or not isinstance(obj.get("containers"), list):
            raise InvalidFormatError("JSON board must be a list or an object with a 'containers' list")
        if capacity is None:
            capacity = obj.get("capacity")
        if capacity is not None and not isinstance(capacity, int):
            raise InvalidFormatError(f"Capacity must be an integer, got {capacity!r}")
        for i, item in enumerate(obj["containers"]):
            if not isinstance(item, (str, list)):
                raise InvalidFormatError(f"Container {i + 1} must be a string or a list of labels")
        meta = obj.get("meta", {})
        if not isinstance(meta, dict):
            raise InvalidFormatError(f"JSON 'meta' must be an object, got {type(meta).__name__}")
        return Puzzle.from_rows(obj["containers"], capacity=capacity, meta=meta)
