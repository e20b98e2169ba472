"""Frame selection: which decoded frame ordinals become thumbnails."""

from typing import List

MAX_SAMPLES = 100


def estimate_frame_count(duration: float, fps: float) -> int:
    """
    Estimate the number of frames from duration and average frame rate.

    Variable frame rate sources make this an approximation; the result is
    never reconciled with the number of frames actually decoded.
    """
    if duration <= 0 or fps <= 0:
        return 0
    return int(duration * fps)


def select_targets(total_frames: int, sample_count: int) -> List[int]:
    """
    Evenly spaced frame ordinals, ``i * (total_frames // sample_count)``.

    When there are fewer frames than samples the step truncates to zero and
    every target is frame 0.

    Args:
        total_frames: Exact or estimated frame count of the video stream
        sample_count: Number of thumbnails wanted (1 to 100)

    Returns:
        List of ``sample_count`` non-decreasing frame ordinals
    """
    if not 1 <= sample_count <= MAX_SAMPLES:
        raise ValueError(
            f"sample_count must be between 1 and {MAX_SAMPLES}, got {sample_count}")
    step = max(0, total_frames) // sample_count
    return [i * step for i in range(sample_count)]
