"""Module for storing and querying latency samples in memory."""
import logging
import threading
from collections import deque
from itertools import islice
from typing import Callable, Deque, Dict, Iterable, List, Optional, Tuple

from latency_topology.config.base_config import (
    MAX_SAMPLES_PER_PAIR,
    RETENTION_MS,
    QUERY_LIMIT,
    RECENT_PER_PAIR,
    RECENT_LIMIT,
)
from latency_topology.models.models import LatencyStats, Sample
from latency_topology.monitoring.metrics import (
    SAMPLES_EVICTED,
    STORE_PARTITIONS,
    STORE_SAMPLES,
)
from latency_topology.simulation.generator import SampleGenerator, now_ms, round_half_up

logger = logging.getLogger(__name__)

PairId = Tuple[str, str]


def compute_stats(samples: Iterable[Sample]) -> LatencyStats:
    """Compute min/max/avg/count over the RTTs of any sample sequence.

    The average is rounded half-up, so a mean of 2.5 reports 3.
    """
    rtts = [sample.rtt_ms for sample in samples]
    if not rtts:
        return LatencyStats()

    return LatencyStats(
        min=min(rtts),
        max=max(rtts),
        avg=round_half_up(sum(rtts) / len(rtts)),
        count=len(rtts),
    )


class SampleStore:
    """Thread-safe, pair-partitioned store of latency samples.

    Each directed pair owns a partition kept in insertion order. After every
    insert the partition is trimmed first to the count cap, then of samples
    older than the retention window.

    The store size gauges are process-wide and are overwritten from this
    store's own counts after every change, so they describe the one store
    a service runs with.
    """

    def __init__(
        self,
        generator: Optional[SampleGenerator] = None,
        max_samples_per_pair: int = MAX_SAMPLES_PER_PAIR,
        retention_ms: int = RETENTION_MS,
        query_limit: int = QUERY_LIMIT,
        clock: Optional[Callable[[], int]] = None
    ):
        """Initialize the sample store.

        Args:
            generator: Generator whose sequence is restarted on reset
            max_samples_per_pair: Count cap per partition
            retention_ms: Maximum sample age in ms
            query_limit: Maximum number of samples returned by a query
            clock: Callable returning the current time in ms
        """
        self.generator = generator or SampleGenerator()
        self.max_samples_per_pair = max_samples_per_pair
        self.retention_ms = retention_ms
        self.query_limit = query_limit
        self.clock = clock or now_ms

        self._partitions: Dict[PairId, Deque[Sample]] = {}
        self._sample_count = 0
        self._lock = threading.RLock()

    def insert(self, sample: Sample) -> None:
        """Append a sample to its pair's partition and apply eviction."""
        key = (sample.from_id, sample.to_id)
        with self._lock:
            partition = self._partitions.get(key)
            if partition is None:
                partition = deque()
                self._partitions[key] = partition
                logger.debug(f"Created partition {sample.pair_key}")

            partition.append(sample)
            self._sample_count += 1

            evicted = 0
            while len(partition) > self.max_samples_per_pair:
                partition.popleft()
                evicted += 1
            if evicted:
                SAMPLES_EVICTED.labels(reason='count').inc(evicted)
                self._sample_count -= evicted

            self._evict_expired(key, partition)
            self._publish_gauges()

    def _publish_gauges(self) -> None:
        STORE_PARTITIONS.set(len(self._partitions))
        STORE_SAMPLES.set(self._sample_count)

    def _evict_expired(self, key: PairId, partition: Deque[Sample]) -> None:
        cutoff = self.clock() - self.retention_ms
        evicted = 0
        while partition and partition[0].timestamp < cutoff:
            partition.popleft()
            evicted += 1
        if evicted:
            SAMPLES_EVICTED.labels(reason='age').inc(evicted)
            self._sample_count -= evicted
            logger.debug(f"Evicted {evicted} expired samples from {key[0]}-{key[1]}")

    def query(
        self,
        from_id: str,
        to_id: str,
        from_time: Optional[int] = None,
        to_time: Optional[int] = None
    ) -> List[Sample]:
        """Get samples for a pair, optionally within a time range.

        Args:
            from_id: Source endpoint ID
            to_id: Destination endpoint ID
            from_time: Start of time range in ms (inclusive)
            to_time: End of time range in ms (inclusive)

        Returns:
            The most recent matching samples, at most query_limit of them,
            in insertion order
        """
        key = (from_id, to_id)
        with self._lock:
            partition = self._partitions.get(key)
            if not partition:
                return []

            self._evict_expired(key, partition)
            self._publish_gauges()

            if from_time is None and to_time is None:
                matches = list(partition)
            else:
                matches = [
                    sample for sample in partition
                    if (from_time is None or sample.timestamp >= from_time)
                    and (to_time is None or sample.timestamp <= to_time)
                ]

        return matches[-self.query_limit:] if self.query_limit > 0 else []

    def recent_across_all_pairs(
        self,
        limit: int = RECENT_LIMIT,
        per_pair: int = RECENT_PER_PAIR
    ) -> List[Sample]:
        """Get the newest samples across every pair.

        Takes the tail of each partition, then sorts newest first. Equal
        timestamps are ordered by (from_id, to_id), then by partition order.
        """
        candidates: List[Tuple[PairId, Sample]] = []
        with self._lock:
            for key, partition in self._partitions.items():
                tail = list(islice(reversed(partition), per_pair))[::-1] if per_pair > 0 else []
                candidates.extend((key, sample) for sample in tail)

        # Two stable passes: secondary key first, then the primary one
        candidates.sort(key=lambda item: item[0])
        candidates.sort(key=lambda item: item[1].timestamp, reverse=True)
        return [sample for _, sample in candidates[:max(limit, 0)]]

    def compute_stats(self, samples: Iterable[Sample]) -> LatencyStats:
        return compute_stats(samples)

    def reset(self) -> None:
        """Drop every partition and restart the generator's sequence."""
        with self._lock:
            self._partitions.clear()
            self._sample_count = 0
            self.generator.reset()
            self._publish_gauges()
        logger.info("Sample store reset")

    def pairs(self) -> List[Tuple[str, str]]:
        """List the (from_id, to_id) pairs that currently hold samples."""
        with self._lock:
            return [key for key, partition in self._partitions.items() if partition]

    def partition_size(self, from_id: str, to_id: str) -> int:
        with self._lock:
            return len(self._partitions.get((from_id, to_id), ()))

    def total_samples(self) -> int:
        with self._lock:
            return sum(len(partition) for partition in self._partitions.values())
