import pytest

from core.reduction import compute_reduction, format_size


@pytest.mark.parametrize("original,optimized,expected", [
    (10_000_000, 6_000_000, "40.00"),
    (3, 2, "33.33"),
    (3, 1, "66.67"),
    (1000, 1000, "0.00"),
    (1000, 1500, "-50.00"),
    (8, 0, "100.00"),
])
def test_compute_reduction(original, optimized, expected):
    assert compute_reduction(original, optimized) == expected


def test_compute_reduction_empty_original():
    assert compute_reduction(0, 0) == "0.00"
    assert compute_reduction(0, 512) == "0.00"


def test_compute_reduction_rounds_half_up():
    # 1/8 = 12.5%, 1/1600 = 0.0625%
    assert compute_reduction(8, 7) == "12.50"
    assert compute_reduction(1600, 1599) == "0.06"
    assert compute_reduction(16000, 15999) == "0.01"


@pytest.mark.parametrize("size,expected", [
    (0, "0 B"),
    (512, "512.00 B"),
    (1536, "1.50 KB"),
    (10_000_000, "9.54 MB"),
    (5 * 1024 ** 3, "5.00 GB"),
    (3 * 1024 ** 4, "3072.00 GB"),
    (-2048, "-2.00 KB"),
])
def test_format_size(size, expected):
    assert format_size(size) == expected
