"""Window placement for the overlay panel."""

from __future__ import annotations

from dataclasses import dataclass

MAX_WINDOW_WIDTH = 700
SMALL_SCREEN_HEIGHT = 560
VERTICAL_MARGIN = 100
COLUMN_PADDING = 115


@dataclass(frozen=True)
class WindowGeometry:
    x: int
    y: int
    width: int
    height: int
    left_column_width: int
    right_column_width: int


def compute_window_geometry(screen_width: int, screen_height: int) -> WindowGeometry:
    """Center a window of at most 700 wide, leaving a margin on tall screens."""
    width = min(screen_width, MAX_WINDOW_WIDTH)
    height = screen_height if screen_height < SMALL_SCREEN_HEIGHT else screen_height - VERTICAL_MARGIN
    x = round((screen_width - width) / 2)
    y = round((screen_height - height) / 2)
    left = round(width / 2.5)
    return WindowGeometry(
        x=x,
        y=y,
        width=width,
        height=height,
        left_column_width=left,
        right_column_width=width - left - COLUMN_PADDING,
    )
