import logging
from typing import Mapping, Optional, Tuple

import numpy as np

from .config import GridSpec
from .extractor import Thumbnail
from .pixels import PixelBuffer

logger = logging.getLogger(__name__)


def resize_nearest(pixels: PixelBuffer, width: int, height: int) -> PixelBuffer:
    """
    Nearest-neighbour resize.

    Destination pixel ``(x, y)`` takes source pixel
    ``(x * w // width, y * h // height)``; no interpolation.
    """
    xs = np.arange(width, dtype=np.int64) * pixels.width // width
    ys = np.arange(height, dtype=np.int64) * pixels.height // height
    return PixelBuffer(pixels.array[ys[:, None], xs[None, :]])


class GridCompositor:
    """Lays thumbnails out on a fixed grid below the header band."""

    def __init__(self, grid: Optional[GridSpec] = None):
        self.grid = grid or GridSpec()

    def new_canvas(self) -> PixelBuffer:
        return PixelBuffer.new(self.grid.canvas_width, self.grid.canvas_height,
                               self.grid.background)

    def cell_position(self, index: int) -> Tuple[int, int]:
        return self.grid.cell_position(index)

    def cell_origin(self, index: int) -> Tuple[int, int]:
        return self.grid.cell_origin(index)

    def draw_border(self, canvas: PixelBuffer, ox: int, oy: int):
        """
        Paint the ring of ``border`` pixels just outside a cell.

        The cell interior is left untouched.
        """
        g = self.grid
        b = g.border
        if b <= 0:
            return
        x0, y0 = ox - b, oy - b
        x1, y1 = ox + g.thumb_width + b, oy + g.thumb_height + b
        canvas.fill_rect(x0, y0, x1, oy, g.border_color)  # top
        canvas.fill_rect(x0, oy + g.thumb_height, x1, y1, g.border_color)  # bottom
        canvas.fill_rect(x0, oy, ox, oy + g.thumb_height, g.border_color)  # left
        canvas.fill_rect(ox + g.thumb_width, oy, x1, oy + g.thumb_height,
                         g.border_color)  # right

    def fill_cell(self, canvas: PixelBuffer, index: int,
                  thumbnail: Optional[Thumbnail]) -> bool:
        """
        Blit the thumbnail into cell ``index``, or clear it to background.

        Returns:
            True when a thumbnail was drawn
        """
        g = self.grid
        ox, oy = self.cell_origin(index)
        if thumbnail is None:
            canvas.fill_rect(ox, oy, ox + g.thumb_width, oy + g.thumb_height, g.background)
            return False

        resized = resize_nearest(thumbnail.pixels, g.thumb_width, g.thumb_height)
        canvas.blit(resized, ox, oy)
        return True

    def compose(self, thumbnails: Mapping[int, Thumbnail]) -> PixelBuffer:
        """
        Build the gallery canvas.

        Args:
            thumbnails: Sample index to thumbnail; absent indices become
                empty bordered cells. Cells are fetched one at a time, so a
                lazy mapping such as ThumbnailStore keeps a single full-size
                frame in memory

        Returns:
            Canvas filled with background, borders and thumbnails
        """
        canvas = self.new_canvas()
        extra = sorted(i for i in thumbnails if not 0 <= i < self.grid.sample_count)
        if extra:
            logger.debug("[Layout] Ignoring thumbnails outside the grid: %s", extra)

        # All borders first so no ring lands on a neighbouring thumbnail
        for index in range(self.grid.sample_count):
            self.draw_border(canvas, *self.cell_origin(index))
        missing = 0
        for index in range(self.grid.sample_count):
            if not self.fill_cell(canvas, index, thumbnails.get(index)):
                missing += 1

        logger.debug("[Layout] %dx%d canvas, %d empty cell(s)",
                     canvas.width, canvas.height, missing)
        return canvas
