from pour_solver.puzzle import Puzzle
from pour_solver.viz import board_states, build_plotly_figure, color_map


def test_board_states_follow_moves():
    puzzle = Puzzle.from_text("AB,BA,,")
    states = board_states(puzzle, [(0, 2), (1, 0), (1, 2)])
    assert len(states) == 4
    assert states[0] == [[1, 2], [2, 1], [0, 0], [0, 0]]
    assert states[-1] == [[1, 1], [0, 0], [2, 2], [0, 0]]


def test_color_map_covers_every_label():
    puzzle = Puzzle.from_text("AB,BA,CC")
    colors = color_map(puzzle)
    assert set(colors) == {0, 1, 2, 3}
    assert len(set(colors.values())) == 4


def test_figure_has_one_trace_per_level_and_frames_per_step():
    puzzle = Puzzle.from_text("AB,BA,,")
    fig = build_plotly_figure(puzzle)
    assert len(fig.data) == puzzle.capacity
    assert not fig.frames

    fig = build_plotly_figure(puzzle, moves=[(0, 2), (1, 0), (1, 2)])
    assert len(fig.frames) == 4
    assert len(fig.layout.sliders[0].steps) == 4
