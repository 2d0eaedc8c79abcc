"""Global test configuration and fixtures."""
import random

import pytest

from latency_topology.api.app import create_app
from latency_topology.ingestion.exchanges import generate_exchange_servers
from latency_topology.simulation.generator import SampleGenerator
from latency_topology.storage.sample_store import SampleStore

from test_utils import FixedClock


@pytest.fixture
def clock():
    """Clock fixed at one million ms past the epoch."""
    return FixedClock()


@pytest.fixture
def generator(clock):
    return SampleGenerator(clock=clock)


@pytest.fixture
def store(generator, clock):
    """Fresh store per test."""
    return SampleStore(generator=generator, clock=clock)


@pytest.fixture
def servers():
    return generate_exchange_servers(random.Random(1))


@pytest.fixture
def app(store, servers):
    app = create_app(store=store, servers=servers)
    app.config['TESTING'] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
