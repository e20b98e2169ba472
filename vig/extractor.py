"""
Thumbnail Extraction Module

Drives a single forward pass over decoded frames, converts the frames
chosen by the frame selector to RGB and hands them to a thumbnail sink.
"""

import enum
import logging
import os
import shutil
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, List, Optional, Protocol

from .codec import ImageCodec
from .pixels import PixelBuffer

logger = logging.getLogger(__name__)


@dataclass
class Thumbnail:
    """A sampled frame in RGB, keyed by its position in the grid."""
    index: int
    pixels: PixelBuffer

    @property
    def width(self) -> int:
        return self.pixels.width

    @property
    def height(self) -> int:
        return self.pixels.height


class ColorConverter(Protocol):
    def convert(self, frame):
        """Return an object with ``data``, ``width``, ``height`` and ``stride``."""


class DecodeState(enum.Enum):
    SCANNING = "scanning"
    DONE = "done"


class DecodeOrchestrator:
    """
    Pick target frames out of a stream of decoded frames.

    Frames are counted as they are decoded. Whenever the count equals the
    next pending target the frame is converted once and emitted for that
    target and for any following targets with the same ordinal. The pass
    ends when every target is satisfied or the frames run out, in which
    case the remaining sample indices simply have no thumbnail.
    """

    def __init__(self,
                 targets: List[int],
                 converter: ColorConverter,
                 sink: Callable[[Thumbnail], None]):
        """
        Args:
            targets: Non-decreasing frame ordinals, one per sample index
            converter: Turns a decoded frame into RGB24 rows
            sink: Receives each thumbnail as soon as it is extracted
        """
        if any(b < a for a, b in zip(targets, targets[1:])):
            raise ValueError("Targets must be in non-decreasing order")
        self.targets = list(targets)
        self.converter = converter
        self.sink = sink
        self.state = DecodeState.SCANNING if self.targets else DecodeState.DONE
        self.frames_decoded = 0
        self._cursor = 0

    @property
    def pending(self) -> int:
        """Number of targets still waiting for a frame."""
        return len(self.targets) - self._cursor

    def feed(self, frame) -> DecodeState:
        """Account for one decoded frame and return the resulting state."""
        if self.state is DecodeState.DONE:
            return self.state

        current = self.frames_decoded
        self.frames_decoded += 1

        if self.targets[self._cursor] != current:
            return self.state

        rgb = self.converter.convert(frame)
        pixels = PixelBuffer.from_strided(rgb.data, rgb.width, rgb.height, rgb.stride)
        shared = False
        while self._cursor < len(self.targets) and self.targets[self._cursor] == current:
            self.sink(Thumbnail(self._cursor, pixels.copy() if shared else pixels))
            logger.debug("[Decode] Frame %d -> sample %d", current, self._cursor)
            shared = True
            self._cursor += 1

        if self._cursor == len(self.targets):
            self.state = DecodeState.DONE
        return self.state

    def finish(self):
        """Mark the input as exhausted."""
        if self.pending:
            logger.info("[Decode] Stream ended after %d frames, %d sample(s) missing",
                        self.frames_decoded, self.pending)
        self.state = DecodeState.DONE

    def run(self, source: Iterable) -> int:
        """
        Consume frames from ``source`` until done.

        Returns:
            Number of thumbnails emitted
        """
        for frame in source:
            if self.feed(frame) is DecodeState.DONE:
                break
        self.finish()
        return self._cursor


class ThumbnailStore(Mapping):
    """
    Scratch directory holding one JPEG per sample index.

    Reads as a mapping from sample index to Thumbnail. Each lookup decodes
    the file again and nothing is cached.
    """

    def __init__(self, directory: str, codec: Optional[ImageCodec] = None):
        self.directory = directory
        self.codec = codec or ImageCodec()
        os.makedirs(self.directory, exist_ok=True)

    def path_for(self, index: int) -> str:
        return os.path.join(self.directory, f"frame_{index}.jpg")

    def save(self, thumbnail: Thumbnail):
        self.codec.save(thumbnail.pixels, self.path_for(thumbnail.index))

    def load(self, index: int) -> Optional[Thumbnail]:
        path = self.path_for(index)
        if not os.path.exists(path):
            return None
        return Thumbnail(index, self.codec.load(path))

    def indices(self) -> List[int]:
        found = []
        for name in os.listdir(self.directory):
            stem, ext = os.path.splitext(name)
            if ext == ".jpg" and stem.startswith("frame_") and stem[6:].isdigit():
                found.append(int(stem[6:]))
        return sorted(found)

    def __contains__(self, index) -> bool:
        return isinstance(index, int) and os.path.exists(self.path_for(index))

    def __getitem__(self, index: int) -> Thumbnail:
        thumbnail = self.load(index)
        if thumbnail is None:
            raise KeyError(index)
        return thumbnail

    def __iter__(self) -> Iterator[int]:
        return iter(self.indices())

    def __len__(self) -> int:
        return len(self.indices())

    def clear(self):
        shutil.rmtree(self.directory, ignore_errors=True)
        os.makedirs(self.directory, exist_ok=True)
