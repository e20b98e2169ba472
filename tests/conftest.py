from __future__ import annotations

import numpy as np
import pytest

from vig.processor import RgbFrame, VideoMetadata
from vig.text import Glyph

MP4_HEADER = b"\x00\x00\x00\x18ftypmp42\x00\x00\x00\x00mp42isom"


class ArrayConverter:
    """Frames are already RGB arrays; records how many were converted."""

    def __init__(self):
        self.converted = 0

    def convert(self, frame: np.ndarray) -> RgbFrame:
        self.converted += 1
        height, width = frame.shape[:2]
        return RgbFrame(frame.tobytes(), width, height, width * 3)


class FakeDecoder:
    """Stands in for VideoProcessor: solid-color frames, value = ordinal."""

    opened: list = []

    def __init__(self, path, frame_count: int = 30, reported: int | None = None,
                 size: tuple = (64, 36)):
        self.path = path
        self.width, self.height = size
        self.decodable = frame_count
        self.reported = frame_count if reported is None else reported
        self.closed = False
        FakeDecoder.opened.append(self)

    def get_metadata(self) -> VideoMetadata:
        return VideoMetadata(width=self.width, height=self.height,
                             duration=self.reported / 10.0, fps=10.0,
                             frame_count=self.reported)

    def frames(self):
        for i in range(self.decodable):
            yield np.full((self.height, self.width, 3), i % 256, dtype=np.uint8)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True


class BlockFont:
    """Every character is a solid 4x6 block sitting on the baseline."""

    def __init__(self, coverage: int = 255, ascent: int = 8):
        self.coverage = coverage
        self.ascent = ascent

    def vertical_metrics(self, pixel_height):
        return self.ascent, -2, 0

    def glyph(self, char, pixel_height):
        if char == " ":
            return Glyph(np.zeros((0, 0), dtype=np.uint8), 0, 0, 0, 0, 3)
        bitmap = np.full((6, 4), self.coverage, dtype=np.uint8)
        return Glyph(bitmap, 4, 6, 0, -6, 5)


@pytest.fixture
def mp4_file(tmp_path):
    path = tmp_path / "clip.mp4"
    path.write_bytes(MP4_HEADER + b"\x00" * 64)
    return path


@pytest.fixture(autouse=True)
def _reset_fake_decoder():
    FakeDecoder.opened = []
    yield
