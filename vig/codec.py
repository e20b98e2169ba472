"""JPEG encode/decode of pixel buffers through Pillow."""

import io
import os

import numpy as np
from PIL import Image

from .pixels import PixelBuffer

DEFAULT_QUALITY = 90


class ImageCodec:
    def __init__(self, quality: int = DEFAULT_QUALITY):
        self.quality = quality

    def encode(self, pixels: PixelBuffer, quality: int = None) -> bytes:
        out = io.BytesIO()
        Image.fromarray(pixels.array).save(
            out, format="JPEG", quality=quality or self.quality)
        return out.getvalue()

    def decode(self, data: bytes) -> PixelBuffer:
        with Image.open(io.BytesIO(data)) as img:
            return PixelBuffer(np.array(img.convert("RGB")))

    def save(self, pixels: PixelBuffer, path: str, quality: int = None):
        """Encode ``pixels`` and write them to ``path``."""
        with open(path, "wb") as fh:
            fh.write(self.encode(pixels, quality))

    def load(self, path: str) -> PixelBuffer:
        if not os.path.exists(path):
            raise FileNotFoundError(f"Image file not found: {path}")
        with open(path, "rb") as fh:
            return self.decode(fh.read())
