"""Unit tests for latency statistics."""
import pytest

from latency_topology.models.models import LatencyStats
from latency_topology.storage.sample_store import compute_stats

from test_utils import make_sample


def samples_with(*rtts):
    return [make_sample(i, rtt_ms=rtt) for i, rtt in enumerate(rtts)]


def test_empty_input():
    """Test empty input yields all zeros."""
    assert compute_stats([]) == LatencyStats(min=0, max=0, avg=0, count=0)
    assert compute_stats([]).to_dict() == {'min': 0, 'max': 0, 'avg': 0, 'count': 0}


def test_basic_stats():
    stats = compute_stats(samples_with(10, 20, 30))
    assert stats.to_dict() == {'min': 10, 'max': 30, 'avg': 20, 'count': 3}


def test_single_sample():
    assert compute_stats(samples_with(7)) == LatencyStats(min=7, max=7, avg=7, count=1)


@pytest.mark.parametrize("rtts, expected_avg", [
    ((2, 3), 3),          # 2.5 rounds up
    ((4, 5), 5),          # 4.5 rounds up, not to even
    ((1, 2, 2), 2),       # 1.67
    ((1, 1, 2), 1),       # 1.33
    ((1.5, 2.5), 2),
])
def test_average_rounds_half_up(rtts, expected_avg):
    """Test the mean is rounded half-up."""
    assert compute_stats(samples_with(*rtts)).avg == expected_avg


def test_unsorted_input():
    stats = compute_stats(samples_with(50, 5, 500, 45))
    assert stats.min == 5
    assert stats.max == 500
    assert stats.count == 4


def test_accepts_any_iterable():
    stats = compute_stats(sample for sample in samples_with(10, 20))
    assert stats.count == 2
    assert stats.avg == 15


def test_store_delegates(store):
    assert store.compute_stats(samples_with(10, 20, 30)).avg == 20
