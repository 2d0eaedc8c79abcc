"""Periodic ingestion of latency samples into the store."""
import asyncio
import logging
import random
import threading
from typing import List, Optional, Sequence

from latency_topology.config.base_config import (
    INGEST_INTERVAL_SECONDS,
    INGEST_PAIRS_PER_TICK,
    INITIAL_NEIGHBOURS,
)
from latency_topology.models.models import ExchangeServer, Sample
from latency_topology.monitoring.metrics import EXTERNAL_FAILURES, SAMPLES_INGESTED
from latency_topology.simulation.generator import SampleGenerator
from latency_topology.storage.sample_store import SampleStore

logger = logging.getLogger(__name__)


class IngestionScheduler:
    """Feeds the store with one sample per selected pair on every tick.

    Samples come from the external measurement source when one is set and
    from the generator otherwise. A failed or empty external measurement
    falls back to the generator, so each selected pair is inserted exactly
    once per tick.
    """

    def __init__(
        self,
        store: SampleStore,
        generator: SampleGenerator,
        servers: Sequence[ExchangeServer],
        measurement_source=None,
        rng: Optional[random.Random] = None,
        interval_seconds: float = INGEST_INTERVAL_SECONDS,
        pairs_per_tick: int = INGEST_PAIRS_PER_TICK
    ):
        self.store = store
        self.generator = generator
        self.servers = list(servers)
        self.measurement_source = measurement_source
        self.rng = rng or random.Random()
        self.interval_seconds = interval_seconds
        self.pairs_per_tick = pairs_per_tick

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def _base_rtt(self) -> float:
        return 50 + self.rng.random() * 100

    def _insert(self, sample: Sample, source: str) -> None:
        self.store.insert(sample)
        SAMPLES_INGESTED.labels(source=source).inc()

    def seed_initial_samples(self, neighbours: int = INITIAL_NEIGHBOURS) -> List[Sample]:
        """Give every server a first sample towards its next few neighbours."""
        count = len(self.servers)
        inserted = []
        for index, server in enumerate(self.servers):
            for offset in range(1, min(neighbours, count - 1) + 1):
                other = self.servers[(index + offset) % count]
                sample = self.generator.generate_sample(server.id, other.id, self._base_rtt())
                self._insert(sample, 'generator')
                inserted.append(sample)

        logger.info(f"Seeded {len(inserted)} initial samples for {count} servers")
        return inserted

    async def _obtain_sample(self, from_server: ExchangeServer, to_server: ExchangeServer):
        base_rtt = self._base_rtt()
        if self.measurement_source is not None:
            try:
                sample = await self.measurement_source.get_real_latency_sample(from_server, to_server)
            except Exception as e:
                EXTERNAL_FAILURES.labels(reason='source_error').inc()
                logger.warning(f"Measurement source failed for {from_server.id} -> {to_server.id}: {str(e)}")
                sample = None

            if sample is not None:
                return sample, 'external'
            logger.warning(f"Falling back to generated sample for {from_server.id} -> {to_server.id}")

        return self.generator.generate_sample(from_server.id, to_server.id, base_rtt), 'generator'

    async def run_tick(self) -> List[Sample]:
        """Select random pairs and insert one sample for each.

        Returns:
            Samples inserted during this tick
        """
        if len(self.servers) < 2:
            return []

        pairs = []
        for _ in range(min(self.pairs_per_tick, len(self.servers))):
            from_server = self.rng.choice(self.servers)
            to_server = self.rng.choice(self.servers)
            if from_server.id != to_server.id:
                pairs.append((from_server, to_server))

        results = await asyncio.gather(*(
            self._obtain_sample(from_server, to_server)
            for from_server, to_server in pairs
        ))

        inserted = []
        for sample, source in results:
            self._insert(sample, source)
            inserted.append(sample)

        logger.debug(f"Ingested {len(inserted)} samples")
        return inserted

    async def run_forever(self) -> None:
        """Run ticks until stop() is called."""
        logger.info(f"Starting ingestion every {self.interval_seconds}s")
        while not self._stop_event.is_set():
            try:
                await self.run_tick()
            except Exception as e:
                logger.error(f"Ingestion tick failed: {str(e)}")
            # Wakes as soon as stop() sets the event
            await asyncio.get_running_loop().run_in_executor(
                None, self._stop_event.wait, self.interval_seconds
            )
        logger.info("Ingestion stopped")

    def start_in_background(self) -> threading.Thread:
        """Run the ingestion loop on a daemon thread."""
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=lambda: asyncio.run(self.run_forever()),
            name="latency-ingestion",
            daemon=True
        )
        self._thread.start()
        return self._thread

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
