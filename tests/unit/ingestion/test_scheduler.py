"""Unit tests for the ingestion scheduler."""
import random
import time

import pytest

from latency_topology.ingestion.globalping import GlobalpingError
from latency_topology.ingestion.scheduler import IngestionScheduler

from test_utils import create_mock_source


@pytest.fixture
def scheduler(store, generator, servers):
    """Scheduler without an external source."""
    return IngestionScheduler(store, generator, servers, rng=random.Random(3))


class TestSeedInitialSamples:
    def test_each_server_gets_five_neighbours(self, scheduler, store, servers):
        inserted = scheduler.seed_initial_samples()

        assert len(inserted) == len(servers) * 5
        assert store.total_samples() == len(inserted)
        assert store.partition_size("srv-0", "srv-1") == 1
        assert store.partition_size("srv-0", "srv-5") == 1
        assert store.partition_size("srv-0", "srv-6") == 0
        # Wrap-around from the last server
        assert store.partition_size("srv-11", "srv-0") == 1

    def test_small_catalog(self, store, generator, servers):
        scheduler = IngestionScheduler(store, generator, servers[:3], rng=random.Random(3))
        inserted = scheduler.seed_initial_samples()

        assert len(inserted) == 6
        assert all(s.from_id != s.to_id for s in inserted)

    def test_base_rtt_range(self, scheduler):
        for sample in scheduler.seed_initial_samples():
            assert 40 <= sample.rtt_ms <= 170


class TestRunTick:
    @pytest.mark.asyncio
    async def test_tick_inserts_generated_samples(self, scheduler, store):
        inserted = await scheduler.run_tick()

        assert 0 < len(inserted) <= 10
        assert store.total_samples() == len(inserted)
        for sample in inserted:
            assert sample.from_id != sample.to_id
            assert sample in store.query(sample.from_id, sample.to_id)

    @pytest.mark.asyncio
    async def test_tick_with_too_few_servers(self, store, generator, servers):
        scheduler = IngestionScheduler(store, generator, servers[:1])
        assert await scheduler.run_tick() == []
        assert store.total_samples() == 0

    @pytest.mark.asyncio
    async def test_tick_is_reproducible_with_seeded_rng(self, store, generator, servers):
        first = await IngestionScheduler(store, generator, servers, rng=random.Random(9)).run_tick()
        store.reset()
        second = await IngestionScheduler(store, generator, servers, rng=random.Random(9)).run_tick()

        assert first == second

    @pytest.mark.asyncio
    async def test_external_samples_are_used(self, store, generator, servers):
        source = create_mock_source(rtt_ms=42)
        scheduler = IngestionScheduler(store, generator, servers, measurement_source=source,
                                       rng=random.Random(3))

        inserted = await scheduler.run_tick()

        assert inserted
        assert all(s.rtt_ms == 42 and s.timestamp == 123456 for s in inserted)
        assert source.get_real_latency_sample.await_count == len(inserted)
        assert store.total_samples() == len(inserted)

    @pytest.mark.asyncio
    async def test_falls_back_when_source_returns_nothing(self, store, generator, servers):
        """Test each pair still gets exactly one sample."""
        source = create_mock_source(success=False)
        scheduler = IngestionScheduler(store, generator, servers, measurement_source=source,
                                       rng=random.Random(3))

        inserted = await scheduler.run_tick()

        assert inserted
        assert source.get_real_latency_sample.await_count == len(inserted)
        assert store.total_samples() == len(inserted)
        assert all(s.timestamp == 1_000_000 for s in inserted)

    @pytest.mark.asyncio
    async def test_falls_back_when_source_raises(self, store, generator, servers):
        source = create_mock_source()
        source.get_real_latency_sample.side_effect = GlobalpingError("boom", 500)
        scheduler = IngestionScheduler(store, generator, servers, measurement_source=source,
                                       rng=random.Random(3))

        inserted = await scheduler.run_tick()

        assert inserted
        assert store.total_samples() == len(inserted)


class TestBackgroundLoop:
    def test_start_and_stop(self, store, generator, servers):
        scheduler = IngestionScheduler(store, generator, servers, rng=random.Random(3),
                                       interval_seconds=0.01)
        thread = scheduler.start_in_background()
        assert thread.is_alive()

        scheduler.stop(timeout=2.0)
        assert not thread.is_alive()

    def test_stop_interrupts_long_interval(self, store, generator, servers):
        """Test stop() returns once the thread exits, not after the interval."""
        scheduler = IngestionScheduler(store, generator, servers, rng=random.Random(3),
                                       interval_seconds=60)
        thread = scheduler.start_in_background()

        started = time.monotonic()
        scheduler.stop(timeout=5.0)

        assert not thread.is_alive()
        assert time.monotonic() - started < 5.0
