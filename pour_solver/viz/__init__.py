from .plotly_viz import board_states, build_plotly_figure, color_map, write_plotly_html

__all__ = [
    "board_states",
    "build_plotly_figure",
    "color_map",
    "write_plotly_html",
]
