"""
Header Text Module

Rasterizes glyphs with Pillow's FreeType bindings and alpha-blends them
onto a gallery canvas.
"""

import io
import logging
import platform
from dataclasses import dataclass
from typing import Callable, Dict, Tuple

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from .config import HeaderStyle
from .pixels import PixelBuffer

logger = logging.getLogger(__name__)


@dataclass
class Glyph:
    """
    Coverage bitmap of one character.

    ``xoff`` and ``yoff`` place the bitmap's top-left corner relative to
    the pen position on the baseline.
    """
    bitmap: np.ndarray  # height x width, 0-255 coverage
    width: int
    height: int
    xoff: int
    yoff: int
    advance: int


class FontService:
    """
    Glyph provider for one TrueType face at arbitrary pixel heights.

    Pixel height follows the usual convention of ascent plus descent, so
    a 38 px header is 38 px from the top of the tallest ascender to the
    bottom of the lowest descender.
    """

    SYSTEM_FONTS = {
        "Darwin": ["/System/Library/Fonts/Helvetica.ttc"],
        "Windows": ["arial.ttf"],
    }
    FALLBACK_FONTS = ["DejaVuSans.ttf",
                      "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
                      "/usr/share/fonts/TTF/DejaVuSans.ttf"]

    def __init__(self, loader: Callable[[int], ImageFont.FreeTypeFont]):
        """
        Args:
            loader: Returns the face loaded at a given em size in pixels
        """
        self._loader = loader
        self._fonts: Dict[int, ImageFont.FreeTypeFont] = {}
        self._scales: Dict[float, float] = {}

    @classmethod
    def from_bytes(cls, data: bytes) -> 'FontService':
        return cls(lambda size: ImageFont.truetype(io.BytesIO(data), size))

    @classmethod
    def from_path(cls, path: str) -> 'FontService':
        with open(path, "rb") as fh:
            return cls.from_bytes(fh.read())

    @classmethod
    def default(cls) -> 'FontService':
        """Pillow's embedded FreeType font."""
        def load(size):
            font = ImageFont.load_default(size)
            if not isinstance(font, ImageFont.FreeTypeFont):
                raise RuntimeError("Pillow was built without FreeType support")
            return font
        return cls(load)

    @classmethod
    def system(cls) -> 'FontService':
        """Try the platform's usual sans-serif faces, then the embedded one."""
        candidates = cls.SYSTEM_FONTS.get(platform.system(), []) + cls.FALLBACK_FONTS
        for candidate in candidates:
            try:
                ImageFont.truetype(candidate, 12)
            except OSError:
                continue
            logger.debug("[Text] Using font %s", candidate)
            return cls(lambda size, path=candidate: ImageFont.truetype(path, size))
        logger.debug("[Text] No system font found, using embedded font")
        return cls.default()

    def _font(self, em_size: int) -> ImageFont.FreeTypeFont:
        if em_size not in self._fonts:
            self._fonts[em_size] = self._loader(em_size)
        return self._fonts[em_size]

    def scale_for_pixel_height(self, pixel_height: float) -> float:
        """Ratio of em size to pixel height for this face."""
        if pixel_height not in self._scales:
            probe = max(1, round(pixel_height))
            ascent, descent = self._font(probe).getmetrics()
            total = ascent + descent
            self._scales[pixel_height] = probe / total if total > 0 else 1.0
        return self._scales[pixel_height]

    def sized(self, pixel_height: float) -> ImageFont.FreeTypeFont:
        scale = self.scale_for_pixel_height(pixel_height)
        return self._font(max(1, round(pixel_height * scale)))

    def vertical_metrics(self, pixel_height: float) -> Tuple[int, int, int]:
        """Return ``(ascent, descent, line_gap)`` in pixels."""
        ascent, descent = self.sized(pixel_height).getmetrics()
        # FreeType in Pillow does not expose the line gap
        return ascent, -descent, 0

    def glyph(self, char: str, pixel_height: float) -> Glyph:
        font = self.sized(pixel_height)
        advance = int(round(font.getlength(char)))
        x0, y0, x1, y1 = font.getbbox(char, anchor="ls")
        width, height = x1 - x0, y1 - y0

        if width <= 0 or height <= 0:
            return Glyph(np.zeros((0, 0), dtype=np.uint8), 0, 0, 0, 0, advance)

        mask = Image.new("L", (width, height), 0)
        ImageDraw.Draw(mask).text((-x0, -y0), char, fill=255, font=font, anchor="ls")
        return Glyph(np.array(mask, dtype=np.uint8), width, height, x0, y0, advance)


def format_header(filename: str, metadata, cols: int) -> str:
    """Header line; the file name is only shown for grids wider than two."""
    hh, mm, ss = metadata.duration_hms()
    resolution = f"{metadata.width}x{metadata.height}"
    duration = f"{hh:02d}:{mm:02d}:{ss:02d}"
    if cols <= 2:
        return f"{resolution} | {duration}"
    return f"{filename}  |  {resolution}  |  {duration}"


class TextOverlay:
    def __init__(self, font: FontService, style: HeaderStyle = None):
        self.font = font
        self.style = style or HeaderStyle()

    def draw(self, canvas: PixelBuffer, text: str, x: int, y: int) -> int:
        """
        Blend ``text`` onto ``canvas`` with its top at ``y``.

        Each covered pixel becomes ``(1 - a) * dst + a * color`` with
        ``a = coverage / 255``, truncated to 8 bits. Pixels outside the
        canvas are skipped.

        Returns:
            Pen x position after the last character
        """
        size = self.style.font_size
        color = np.array(self.style.color, dtype=np.float32)
        ascent, _, _ = self.font.vertical_metrics(size)
        baseline = y + int(round(ascent))

        cx = x
        for char in text:
            glyph = self.font.glyph(char, size)
            if glyph.width and glyph.height:
                self._blend(canvas, glyph, cx + glyph.xoff, baseline + glyph.yoff, color)
            cx += glyph.advance
        return cx

    @staticmethod
    def _blend(canvas: PixelBuffer, glyph: Glyph, dx: int, dy: int, color: np.ndarray):
        # Clip the glyph rectangle to the canvas
        x0, y0 = max(dx, 0), max(dy, 0)
        x1 = min(dx + glyph.width, canvas.width)
        y1 = min(dy + glyph.height, canvas.height)
        if x0 >= x1 or y0 >= y1:
            return

        coverage = glyph.bitmap[y0 - dy:y1 - dy, x0 - dx:x1 - dx]
        alpha = (coverage.astype(np.float32) / 255.0)[:, :, None]
        region = canvas.array[y0:y1, x0:x1].astype(np.float32)
        blended = (1.0 - alpha) * region + alpha * color
        canvas.array[y0:y1, x0:x1] = blended.astype(np.uint8)
