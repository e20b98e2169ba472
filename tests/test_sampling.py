import pytest

from vig.processor import VideoMetadata
from vig.sampling import estimate_frame_count, select_targets


def test_targets_are_evenly_spaced():
    assert select_targets(300, 9) == [0, 33, 66, 99, 132, 165, 198, 231, 264]


def test_fewer_frames_than_samples_collapse_to_first_frame():
    assert select_targets(5, 9) == [0] * 9


def test_targets_stay_inside_stream():
    for total in (1, 9, 10, 99, 1000, 12345):
        for samples in (1, 4, 9, 100):
            targets = select_targets(total, samples)
            assert len(targets) == samples
            assert all(0 <= t < total for t in targets)
            assert targets == sorted(targets)


@pytest.mark.parametrize("samples", [0, 101, -1])
def test_sample_count_bounds(samples):
    with pytest.raises(ValueError):
        select_targets(100, samples)


def test_estimate_frame_count():
    assert estimate_frame_count(10.0, 29.97) == 299
    assert estimate_frame_count(0.0, 30.0) == 0
    assert estimate_frame_count(5.0, 0.0) == 0


def test_metadata_falls_back_to_estimate():
    meta = VideoMetadata(width=640, height=360, duration=12.5, fps=24.0)
    assert meta.total_frames == 300
    exact = VideoMetadata(width=640, height=360, duration=12.5, fps=24.0, frame_count=301)
    assert exact.total_frames == 301


def test_duration_hms():
    meta = VideoMetadata(width=1, height=1, duration=3723.9, fps=1.0)
    assert meta.duration_hms() == (1, 2, 3)
