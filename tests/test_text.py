import numpy as np
import pytest

from vig.config import HeaderStyle
from vig.pixels import PixelBuffer
from vig.processor import VideoMetadata
from vig.text import FontService, TextOverlay, format_header
from tests.conftest import BlockFont

META = VideoMetadata(width=1920, height=1080, duration=3725.4, fps=25.0)


def test_header_omits_filename_for_narrow_grids():
    assert format_header("holiday.mp4", META, 2) == "1920x1080 | 01:02:05"
    assert format_header("holiday.mp4", META, 1) == "1920x1080 | 01:02:05"


def test_header_includes_filename_for_wide_grids():
    assert format_header("holiday.mp4", META, 3) == "holiday.mp4  |  1920x1080  |  01:02:05"


def test_full_coverage_replaces_pixels_with_text_color():
    canvas = PixelBuffer.new(20, 12, (200, 200, 200))
    overlay = TextOverlay(BlockFont(), HeaderStyle(color=(10, 20, 30)))

    end = overlay.draw(canvas, "AB", 2, 1)

    assert end == 12
    # Baseline at y + ascent = 9, glyphs cover rows 3..8
    assert canvas.pixel(2, 3) == (10, 20, 30)
    assert canvas.pixel(5, 8) == (10, 20, 30)
    assert canvas.pixel(7, 3) == (10, 20, 30)
    assert canvas.pixel(2, 2) == (200, 200, 200)
    assert canvas.pixel(6, 5) == (200, 200, 200)
    assert canvas.pixel(2, 9) == (200, 200, 200)


def test_partial_coverage_blends_and_truncates():
    canvas = PixelBuffer.new(10, 10, (200, 100, 50))
    TextOverlay(BlockFont(coverage=128), HeaderStyle(color=(0, 0, 0))).draw(canvas, "A", 0, 0)

    a = 128 / 255
    expected = tuple(int((1 - a) * v) for v in (200, 100, 50))
    assert canvas.pixel(1, 4) == expected


def test_spaces_only_advance_the_cursor():
    canvas = PixelBuffer.new(20, 12, (200, 200, 200))
    end = TextOverlay(BlockFont(), HeaderStyle()).draw(canvas, " A", 0, 1)
    assert end == 8
    assert canvas.pixel(0, 5) == (200, 200, 200)
    assert canvas.pixel(3, 5) == (0, 0, 0)


def test_pixels_outside_canvas_are_skipped():
    canvas = PixelBuffer.new(8, 8, (200, 200, 200))
    overlay = TextOverlay(BlockFont(), HeaderStyle())

    overlay.draw(canvas, "AAAA", 6, -4)
    overlay.draw(canvas, "A", -50, -50)

    assert canvas.pixel(6, 0) == (0, 0, 0)
    assert canvas.pixel(7, 1) == (0, 0, 0)
    assert canvas.pixel(5, 0) == (200, 200, 200)


@pytest.fixture(scope="module")
def embedded_font():
    try:
        return FontService.default()
    except RuntimeError as e:
        pytest.skip(str(e))


def test_embedded_font_glyphs(embedded_font):
    glyph = embedded_font.glyph("H", 38.0)
    assert glyph.width > 0 and glyph.height > 0
    assert glyph.bitmap.shape == (glyph.height, glyph.width)
    assert glyph.bitmap.max() > 0
    # Capitals sit on the baseline
    assert glyph.yoff < 0
    assert glyph.advance > 0

    space = embedded_font.glyph(" ", 38.0)
    assert space.width == 0
    assert space.advance > 0


def test_embedded_font_pixel_height(embedded_font):
    ascent, descent, line_gap = embedded_font.vertical_metrics(38.0)
    assert ascent > 0 and descent <= 0 and line_gap == 0
    assert abs((ascent - descent) - 38) <= 3


def test_embedded_font_renders_header(embedded_font):
    canvas = PixelBuffer.new(400, 80, (239, 239, 239))
    TextOverlay(embedded_font, HeaderStyle()).draw(canvas, "640x360 | 00:00:10", 10, 10)
    assert np.any(canvas.array < 239)
    assert np.all(canvas.array[:10] == 239)
