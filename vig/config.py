"""
Gallery Configuration

Immutable layout and style settings passed into the compositor, the
text overlay and the assembler.
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .errors import GridSizeError

MAX_GRID = 10


@dataclass(frozen=True)
class GridSpec:
    """Grid shape plus every spacing that decides the canvas size."""
    cols: int = 3
    rows: int = 3
    thumb_width: int = 480
    thumb_height: int = 270
    thumb_pad: int = 20  # Gap between neighbouring cells
    border: int = 4
    pad_left: int = 30
    pad_right: int = 30
    pad_top: int = 30
    pad_bottom: int = 30
    header_height: int = 80
    background: Tuple[int, int, int] = (239, 239, 239)
    border_color: Tuple[int, int, int] = (0, 0, 0)

    def __post_init__(self):
        if self.cols > MAX_GRID or self.rows > MAX_GRID:
            raise GridSizeError(
                f"The maximum number of rows or columns is: {MAX_GRID}.")
        if self.cols < 1 or self.rows < 1:
            raise GridSizeError(
                f"Grid needs at least one row and one column, got {self.cols}x{self.rows}.")

    @property
    def sample_count(self) -> int:
        return self.cols * self.rows

    @property
    def canvas_width(self) -> int:
        return (self.pad_left + self.pad_right + self.cols * self.thumb_width
                + (self.cols - 1) * self.thumb_pad)

    @property
    def canvas_height(self) -> int:
        return (self.pad_top + self.pad_bottom + self.header_height
                + self.rows * self.thumb_height + (self.rows - 1) * self.thumb_pad)

    def cell_position(self, index: int) -> Tuple[int, int]:
        """Return ``(row, col)`` of a sample index, filling rows first."""
        return index // self.cols, index % self.cols

    def cell_origin(self, index: int) -> Tuple[int, int]:
        """Top-left canvas pixel of the cell holding sample ``index``."""
        row, col = self.cell_position(index)
        ox = self.pad_left + col * (self.thumb_width + self.thumb_pad)
        oy = (self.pad_top + self.header_height
              + row * (self.thumb_height + self.thumb_pad))
        return ox, oy


@dataclass(frozen=True)
class HeaderStyle:
    """How the one-line header is rendered."""
    font_size: float = 38.0  # Pixel height
    color: Tuple[int, int, int] = (0, 0, 0)
    offset_y: int = 10  # Below pad_top
    font_path: Optional[str] = None


@dataclass(frozen=True)
class SheetConfig:
    grid: GridSpec = field(default_factory=GridSpec)
    header: HeaderStyle = field(default_factory=HeaderStyle)
    quality: int = 90
    output_dir: str = field(default_factory=os.getcwd)


def parse_resolution(text: str) -> Tuple[int, int]:
    """
    Parse a ``COLSxROWS`` string such as ``"4x3"``.

    Raises:
        GridSizeError: if the text is not two integers separated by ``x``
    """
    cols, sep, rows = text.strip().lower().partition("x")
    if not sep:
        raise GridSizeError(f"Invalid resolution '{text}', expected WxH (e.g. 3x3).")
    try:
        return int(cols), int(rows)
    except ValueError:
        raise GridSizeError(
            f"Invalid resolution '{text}', expected WxH (e.g. 3x3).") from None
