import numpy as np
import pytest

from vig.pixels import PixelBuffer


def test_new_fills_and_sizes_buffer():
    buf = PixelBuffer.new(5, 3, (1, 2, 3))
    assert buf.size == (5, 3)
    assert len(buf.to_bytes()) == 5 * 3 * 3
    assert buf.pixel(4, 2) == (1, 2, 3)


def test_from_strided_drops_row_padding():
    width, height, stride = 2, 3, 8
    data = bytearray()
    for y in range(height):
        row = bytes(range(y * 10, y * 10 + width * 3))
        data += row + b"\xff" * (stride - len(row))

    buf = PixelBuffer.from_strided(bytes(data), width, height, stride)

    assert len(buf.to_bytes()) == width * height * 3
    assert buf.pixel(0, 1) == (10, 11, 12)
    assert buf.pixel(1, 2) == (23, 24, 25)
    assert 255 not in buf.to_bytes()


def test_from_strided_rejects_short_buffers():
    with pytest.raises(ValueError):
        PixelBuffer.from_strided(b"\x00" * 10, 2, 2, 6)
    with pytest.raises(ValueError):
        PixelBuffer.from_strided(b"\x00" * 64, 4, 2, 6)


def test_accessors_are_bounds_checked():
    buf = PixelBuffer.new(2, 2)
    with pytest.raises(IndexError):
        buf.pixel(2, 0)
    with pytest.raises(IndexError):
        buf.set_pixel(0, -1, (0, 0, 0))
    with pytest.raises(IndexError):
        buf.row(2)


def test_fill_rect_clips_to_buffer():
    buf = PixelBuffer.new(4, 4, (0, 0, 0))
    buf.fill_rect(-3, -3, 2, 2, (9, 9, 9))
    assert buf.pixel(1, 1) == (9, 9, 9)
    assert buf.pixel(2, 2) == (0, 0, 0)
    buf.fill_rect(10, 10, 20, 20, (5, 5, 5))
    assert not np.any(buf.array == 5)


def test_blit_must_fit():
    canvas = PixelBuffer.new(4, 4)
    block = PixelBuffer.new(2, 2, (7, 7, 7))
    canvas.blit(block, 2, 2)
    assert canvas.pixel(3, 3) == (7, 7, 7)
    with pytest.raises(IndexError):
        canvas.blit(block, 3, 0)
