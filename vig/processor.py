import logging
import os
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

import cv2
import numpy as np

from .errors import DecodeError, InputNotFoundError, NoVideoStreamError
from .sampling import estimate_frame_count

logger = logging.getLogger(__name__)

# Container families accepted by the gallery (MP4/MOV and WMV)
ALLOWED_CONTAINERS = ("mov", "mp4", "asf")

_ISO_BMFF_ATOMS = {b"ftyp", b"moov", b"mdat", b"wide", b"free", b"skip", b"pnot"}
_ASF_HEADER_GUID = bytes.fromhex("3026b2758e66cf11a6d900aa0062ce6c")


def probe_container(path) -> Optional[str]:
    """
    Identify the container family from the first bytes of a file.

    Returns:
        "mov,mp4" for ISO base media files, "asf" for ASF/WMV, None otherwise
    """
    with open(path, "rb") as fh:
        head = fh.read(16)

    if len(head) >= 8 and head[4:8] in _ISO_BMFF_ATOMS:
        return "mov,mp4"
    if head == _ASF_HEADER_GUID:
        return "asf"
    return None


def is_allowed_container(kind: Optional[str]) -> bool:
    return kind is not None and any(name in kind for name in ALLOWED_CONTAINERS)


@dataclass(frozen=True)
class VideoMetadata:
    width: int
    height: int
    duration: float
    fps: float
    frame_count: Optional[int] = None

    @property
    def total_frames(self) -> int:
        """Exact frame count when reported, otherwise duration * fps."""
        if self.frame_count is not None:
            return self.frame_count
        return estimate_frame_count(self.duration, self.fps)

    def duration_hms(self) -> Tuple[int, int, int]:
        seconds = int(self.duration)
        return int(self.duration / 3600), (seconds % 3600) // 60, seconds % 60


@dataclass
class RgbFrame:
    """Interleaved RGB24 rows, ``stride`` bytes apart."""
    data: bytes
    width: int
    height: int
    stride: int


class CapturedFrame:
    """
    A frame grabbed but not yet retrieved from a capture.

    Only valid until the next grab on the same capture.
    """

    def __init__(self, cap, ordinal: int):
        self.cap = cap
        self.ordinal = ordinal

    def retrieve(self) -> np.ndarray:
        try:
            ret, frame = self.cap.retrieve()
        except cv2.error as e:
            raise DecodeError(f"Failed to retrieve frame {self.ordinal}: {e}") from e
        if not ret:
            raise DecodeError(f"Failed to retrieve frame {self.ordinal}")
        return frame


class OpenCVColorConverter:
    """Convert OpenCV frames (BGR, BGRA or grayscale) to RGB24."""

    def convert(self, frame) -> RgbFrame:
        if isinstance(frame, CapturedFrame):
            frame = frame.retrieve()
        if frame.ndim == 2:
            rgb = cv2.cvtColor(frame, cv2.COLOR_GRAY2RGB)
        elif frame.shape[2] == 4:
            rgb = cv2.cvtColor(frame, cv2.COLOR_BGRA2RGB)
        else:
            rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)

        height, width = rgb.shape[:2]
        # tobytes() packs the rows, so the stride is exactly one row
        return RgbFrame(rgb.tobytes(), width, height, width * 3)


class VideoProcessor:
    """
    Forward-only OpenCV decoder for one video file.

    Usable as a context manager; the capture handle is released on exit.
    """

    def __init__(self, video_path):
        if not os.path.exists(video_path):
            raise InputNotFoundError(f"file: '{video_path}' does not exist.")

        self.video_path = video_path
        self.cap = cv2.VideoCapture(str(video_path))

        if not self.cap.isOpened():
            self.cap.release()
            raise NoVideoStreamError(f"No video stream found in '{video_path}'.")

        self.width = int(self.cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        self.height = int(self.cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        if self.width <= 0 or self.height <= 0:
            self.cap.release()
            raise NoVideoStreamError(f"No video stream found in '{video_path}'.")

        self.fps = self.cap.get(cv2.CAP_PROP_FPS)
        frame_count = int(self.cap.get(cv2.CAP_PROP_FRAME_COUNT))
        # Some containers do not report a count
        self.frame_count = frame_count if frame_count > 0 else None
        self.duration = (frame_count / self.fps
                         if self.frame_count and self.fps > 0 else 0.0)

        logger.debug("[Decode] %s: %dx%d, %.3f fps, %s frames",
                     video_path, self.width, self.height, self.fps,
                     self.frame_count if self.frame_count else "unknown")

    def get_metadata(self) -> VideoMetadata:
        return VideoMetadata(
            width=self.width,
            height=self.height,
            duration=self.duration,
            fps=self.fps,
            frame_count=self.frame_count,
        )

    def frames(self) -> Iterator[CapturedFrame]:
        """
        Grab frames in stream order until the stream ends.

        Frames are only converted to BGR when a consumer calls
        ``retrieve()`` on the yielded handle.
        """
        ordinal = 0
        while True:
            try:
                ret = self.cap.grab()
            except cv2.error as e:
                raise DecodeError(f"Failed to decode '{self.video_path}': {e}") from e
            if not ret:
                return
            yield CapturedFrame(self.cap, ordinal)
            ordinal += 1

    def close(self):
        self.cap.release()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
