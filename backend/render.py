from __future__ import annotations

import io
from typing import List, Tuple

from PIL import Image, ImageDraw

from pour_solver.container import EMPTY
from pour_solver.puzzle import Puzzle
from pour_solver.viz import color_map

_BACKGROUND = (15, 17, 22)
_OUTLINE = (200, 200, 200)


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    hex_color = hex_color.lstrip("#")
    return tuple(int(hex_color[i : i + 2], 16) for i in (0, 2, 4))  # type: ignore[return-value]


def render_board_png(puzzle: Puzzle, cells: List[List[int]] | None = None, *, size: Tuple[int, int] = (240, 180)) -> bytes:
    """Draw every container as a column of slots, bottom slot at the bottom."""
    if cells is None:
        cells = puzzle.board().cells()
    colors = color_map(puzzle)

    width, height = size
    img = Image.new("RGB", (width, height), _BACKGROUND)
    draw = ImageDraw.Draw(img)

    count = len(cells)
    pad = 8
    col_w = max(4.0, (width - pad) / max(count, 1) - pad)
    slot_h = max(2.0, (height - 2 * pad) / max(puzzle.capacity, 1))
    for j, row in enumerate(cells):
        x0 = pad + j * (col_w + pad)
        for level, color in enumerate(row):
            y1 = height - pad - level * slot_h
            y0 = y1 - slot_h
            if color != EMPTY:
                draw.rectangle((x0, y0, x0 + col_w, y1), fill=hex_to_rgb(colors[color]))
        draw.rectangle((x0, height - pad - puzzle.capacity * slot_h, x0 + col_w, height - pad), outline=_OUTLINE)

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
