"""Test utilities and mock classes."""
from unittest.mock import create_autospec

from latency_topology.ingestion.globalping import GlobalpingClient
from latency_topology.models.models import Sample


class FixedClock:
    """Clock returning a settable time in ms."""

    def __init__(self, now=1_000_000):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms


def make_sample(timestamp, rtt_ms=50, from_id="A", to_id="B"):
    """Build a sample for a pair with the given timestamp."""
    return Sample(from_id=from_id, to_id=to_id, timestamp=timestamp, rtt_ms=rtt_ms)


def create_mock_source(success=True, rtt_ms=42, timestamp=123456):
    """Create a mock measurement source with configurable behavior."""
    mock = create_autospec(GlobalpingClient, instance=True)

    def measure(from_server, to_server):
        if not success:
            return None
        return Sample(from_id=from_server.id, to_id=to_server.id, timestamp=timestamp, rtt_ms=rtt_ms)

    mock.get_real_latency_sample.side_effect = measure
    return mock
