from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Sequence

from ..board import Move, replay
from ..container import EMPTY
from ..puzzle import Puzzle


_PALETTE = [
    "#1f77b4",  # blue
    "#ff7f0e",  # orange
    "#2ca02c",  # green
    "#d62728",  # red
    "#9467bd",  # purple
    "#8c564b",  # brown
    "#e377c2",  # pink
    "#7f7f7f",  # gray
    "#bcbd22",  # olive
    "#17becf",  # cyan
]
_EMPTY_COLOR = "rgba(220,220,220,0.25)"


def color_map(puzzle: Puzzle) -> Dict[int, str]:
    """Color id -> hex color; the empty id maps to a faint gray."""
    out = {EMPTY: _EMPTY_COLOR}
    for i in range(1, len(puzzle.labels)):
        out[i] = _PALETTE[(i - 1) % len(_PALETTE)]
    return out


def board_states(puzzle: Puzzle, moves: Sequence[Move] = ()) -> List[List[List[int]]]:
    """Cell grids of the start board and after every move."""
    board = puzzle.board()
    states = [board.cells()]
    for move in moves:
        replay(board, [move])
        states.append(board.cells())
    return states


def _bar_traces(puzzle: Puzzle, cells: List[List[int]]):
    import plotly.graph_objects as go

    colors = color_map(puzzle)
    labels = puzzle.labels
    xs = [f"#{j + 1}" for j in range(len(cells))]
    traces = []
    # one trace per slot level, stacked from the bottom
    for level in range(puzzle.capacity):
        ids = [row[level] for row in cells]
        traces.append(
            go.Bar(
                x=xs,
                y=[1] * len(cells),
                marker=dict(color=[colors[c] for c in ids], line=dict(width=1, color="#333333")),
                text=[labels[c] for c in ids],
                textposition="inside",
                hoverinfo="x+text",
                showlegend=False,
            )
        )
    return traces


def build_plotly_figure(
    puzzle: Puzzle,
    *,
    moves: Optional[Sequence[Move]] = None,
    title: str = "Pour Solver",
):
    import plotly.graph_objects as go

    states = board_states(puzzle, moves or ())
    fig = go.Figure(data=_bar_traces(puzzle, states[0]))
    fig.update_layout(
        title=title,
        barmode="stack",
        bargap=0.35,
        xaxis=dict(title="container"),
        yaxis=dict(visible=False, range=[0, puzzle.capacity]),
        margin=dict(l=0, r=0, t=40, b=0),
    )

    if moves:
        step_names = ["start"] + [f"{i + 1}: #{a + 1} → #{b + 1}" for i, (a, b) in enumerate(moves)]
        fig.frames = [
            go.Frame(data=_bar_traces(puzzle, cells), name=name)
            for name, cells in zip(step_names, states)
        ]
        fig.update_layout(
            sliders=[
                dict(
                    active=0,
                    currentvalue=dict(prefix="step "),
                    steps=[
                        dict(
                            label=name,
                            method="animate",
                            args=[[name], dict(mode="immediate", frame=dict(duration=0, redraw=True))],
                        )
                        for name in step_names
                    ],
                )
            ]
        )

    return fig


def write_plotly_html(
    puzzle: Puzzle,
    *,
    out_path: str | Path,
    moves: Optional[Sequence[Move]] = None,
    title: str = "Pour Solver",
) -> Path:
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    fig = build_plotly_figure(puzzle, moves=moves, title=title)
    fig.write_html(str(out_path), include_plotlyjs="cdn", full_html=True)
    return out_path
