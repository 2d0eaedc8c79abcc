"""Deterministic latency sample generation."""
import math
import threading
import time
from typing import Callable, Optional

from latency_topology.models.models import Sample

DEFAULT_SEED = 12345
RTT_FLOOR_MS = 5

# LCG constants
MULTIPLIER = 9301
INCREMENT = 49297
MODULUS = 233280


def now_ms() -> int:
    """Current wall-clock time in milliseconds."""
    return int(time.time() * 1000)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounding towards +infinity."""
    return int(math.floor(value + 0.5))


class SeededRandom:
    """Linear congruential sequence yielding values in [0, 1)."""

    def __init__(self, seed: int = DEFAULT_SEED):
        self.state = seed

    def next(self) -> float:
        self.state = (self.state * MULTIPLIER + INCREMENT) % MODULUS
        return self.state / MODULUS


class SampleGenerator:
    """Simulates round-trip times between endpoint pairs.

    Every sample consumes exactly two values of a single shared sequence,
    so a fresh generator with the same seed fed the same calls reproduces
    the same stream of RTTs.
    """

    def __init__(self, seed: int = DEFAULT_SEED, clock: Optional[Callable[[], int]] = None):
        """Initialize the generator.

        Args:
            seed: Initial state of the sequence
            clock: Callable returning the current time in ms
        """
        self.seed = seed
        self._clock = clock or now_ms
        self._rng = SeededRandom(seed)
        self._lock = threading.Lock()

    @property
    def state(self) -> int:
        return self._rng.state

    def generate_sample(
        self,
        from_id: str,
        to_id: str,
        base_rtt_ms: float = 50,
        timestamp: Optional[int] = None
    ) -> Sample:
        """
        Generate a sample for a directed pair

        Args:
            from_id: Source endpoint ID
            to_id: Destination endpoint ID
            base_rtt_ms: Expected RTT before variance and jitter
            timestamp: Simulated time in ms, defaults to the clock

        Returns:
            Sample with an integer RTT of at least 5ms
        """
        with self._lock:
            variance = self._rng.next() * 20 - 10
            jitter = self._rng.next() * 10

        rtt_ms = max(RTT_FLOOR_MS, base_rtt_ms + variance + jitter)

        return Sample(
            from_id=from_id,
            to_id=to_id,
            timestamp=self._clock() if timestamp is None else timestamp,
            rtt_ms=round_half_up(rtt_ms),
        )

    def reset(self, seed: Optional[int] = None) -> None:
        """Restart the sequence, optionally switching to a new seed."""
        with self._lock:
            if seed is not None:
                self.seed = seed
            self._rng = SeededRandom(self.seed)
