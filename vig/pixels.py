"""
Pixel Buffer Module

An owned RGB24 image buffer with bounds-checked accessors, used for
decoded frames, thumbnails and the gallery canvas.
"""

import numpy as np
from typing import Tuple

RGB = Tuple[int, int, int]


class PixelBuffer:
    """
    Row-major RGB24 pixels stored as a ``height x width x 3`` uint8 array.

    The buffer never carries row padding, so ``len(to_bytes())`` is always
    ``width * height * 3``.
    """

    def __init__(self, array: np.ndarray):
        if array.ndim != 3 or array.shape[2] != 3:
            raise ValueError(
                f"Expected a (height, width, 3) array, got shape {array.shape}")
        self.array = np.ascontiguousarray(array, dtype=np.uint8)

    @classmethod
    def new(cls, width: int, height: int, fill: RGB = (0, 0, 0)) -> 'PixelBuffer':
        """Create a buffer of the given size filled with one color."""
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid buffer size: {width}x{height}")
        array = np.empty((height, width, 3), dtype=np.uint8)
        array[:, :] = fill
        return cls(array)

    @classmethod
    def from_bytes(cls, data, width: int, height: int) -> 'PixelBuffer':
        """Wrap tightly packed RGB24 bytes (no row padding)."""
        return cls.from_strided(data, width, height, width * 3)

    @classmethod
    def from_strided(cls, data, width: int, height: int, stride: int) -> 'PixelBuffer':
        """
        Copy RGB24 rows out of a buffer whose rows are ``stride`` bytes apart.

        Args:
            data: bytes-like object holding at least ``height`` rows
            width: Visible pixels per row
            height: Number of rows
            stride: Distance in bytes between the start of two rows

        Returns:
            A new PixelBuffer without the per-row padding
        """
        row_bytes = width * 3
        if stride < row_bytes:
            raise ValueError(
                f"Row stride {stride} is smaller than {row_bytes} bytes per row")

        flat = np.frombuffer(data, dtype=np.uint8)
        # The last row only needs its visible bytes
        needed = stride * (height - 1) + row_bytes
        if flat.size < needed:
            raise ValueError(
                f"Buffer holds {flat.size} bytes, {needed} required for "
                f"{width}x{height} with stride {stride}")

        if flat.size < stride * height:
            flat = np.concatenate(
                [flat[:needed], np.zeros(stride * height - needed, dtype=np.uint8)])
        rows = flat[:stride * height].reshape(height, stride)
        return cls(rows[:, :row_bytes].reshape(height, width, 3).copy())

    @property
    def width(self) -> int:
        return self.array.shape[1]

    @property
    def height(self) -> int:
        return self.array.shape[0]

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def _check(self, x: int, y: int):
        if not self.contains(x, y):
            raise IndexError(
                f"Pixel ({x}, {y}) outside {self.width}x{self.height} buffer")

    def pixel(self, x: int, y: int) -> RGB:
        self._check(x, y)
        r, g, b = self.array[y, x]
        return int(r), int(g), int(b)

    def set_pixel(self, x: int, y: int, rgb: RGB):
        self._check(x, y)
        self.array[y, x] = rgb

    def row(self, y: int) -> np.ndarray:
        """Return a view of one row as a ``width x 3`` array."""
        if not 0 <= y < self.height:
            raise IndexError(f"Row {y} outside buffer of height {self.height}")
        return self.array[y]

    def fill_rect(self, x0: int, y0: int, x1: int, y1: int, rgb: RGB):
        """Fill ``[x0, x1) x [y0, y1)``, clipped to the buffer."""
        x0, x1 = max(0, x0), min(self.width, x1)
        y0, y1 = max(0, y0), min(self.height, y1)
        if x0 < x1 and y0 < y1:
            self.array[y0:y1, x0:x1] = rgb

    def blit(self, src: 'PixelBuffer', ox: int, oy: int):
        """Copy ``src`` so its top-left pixel lands on ``(ox, oy)``."""
        if (ox < 0 or oy < 0 or ox + src.width > self.width
                or oy + src.height > self.height):
            raise IndexError(
                f"{src.width}x{src.height} block at ({ox}, {oy}) does not fit "
                f"in {self.width}x{self.height} buffer")
        self.array[oy:oy + src.height, ox:ox + src.width] = src.array

    def copy(self) -> 'PixelBuffer':
        return PixelBuffer(self.array.copy())

    def to_bytes(self) -> bytes:
        return self.array.tobytes()

    def __eq__(self, other):
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return np.array_equal(self.array, other.array)

    def __repr__(self):
        return f"PixelBuffer({self.width}x{self.height})"
