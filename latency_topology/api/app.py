"""Main application entry point."""

import logging
import random
from typing import Optional, Sequence

from flask import Flask, Response
from flask_cors import CORS

from latency_topology.api.routes.latency import latency_api, EXTENSION_KEY
from latency_topology.config.base_config import (
    API_HOST,
    API_PORT,
    DEBUG,
    LOG_LEVEL,
    GENERATOR_SEED,
    GLOBALPING_ENABLED,
)
from latency_topology.ingestion.exchanges import generate_exchange_servers
from latency_topology.ingestion.globalping import GlobalpingClient
from latency_topology.ingestion.scheduler import IngestionScheduler
from latency_topology.models.models import ExchangeServer
from latency_topology.monitoring.metrics import export_metrics
from latency_topology.simulation.generator import SampleGenerator
from latency_topology.storage.sample_store import SampleStore

logger = logging.getLogger(__name__)


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def create_app(
    store: Optional[SampleStore] = None,
    generator: Optional[SampleGenerator] = None,
    servers: Optional[Sequence[ExchangeServer]] = None
) -> Flask:
    """Create the Flask application around a store.

    Args:
        store: Sample store served by the API, created when omitted
        generator: Generator owned by the store
        servers: Exchange server catalog

    Returns:
        Configured Flask app
    """
    if store is None:
        generator = generator or SampleGenerator(seed=GENERATOR_SEED)
        store = SampleStore(generator=generator)
    else:
        generator = store.generator

    app = Flask(__name__)
    CORS(app)

    app.extensions[EXTENSION_KEY] = {
        'store': store,
        'generator': generator,
        'servers': list(servers) if servers is not None else generate_exchange_servers(),
    }
    app.register_blueprint(latency_api)

    @app.route('/health')
    def health_check():
        """Health check endpoint."""
        return {'status': 'healthy', 'samples': store.total_samples()}

    @app.route('/metrics')
    def metrics():
        """Prometheus metrics endpoint."""
        payload, content_type = export_metrics()
        return Response(payload, content_type=content_type)

    return app


def create_scheduler(app: Flask, rng: Optional[random.Random] = None) -> IngestionScheduler:
    """Build the ingestion scheduler for an app's store and servers."""
    context = app.extensions[EXTENSION_KEY]
    return IngestionScheduler(
        store=context['store'],
        generator=context['generator'],
        servers=context['servers'],
        measurement_source=GlobalpingClient() if GLOBALPING_ENABLED else None,
        rng=rng,
    )


def main() -> None:
    configure_logging()
    app = create_app()
    scheduler = create_scheduler(app)
    scheduler.seed_initial_samples()
    scheduler.start_in_background()

    try:
        # The reloader would start a second scheduler
        app.run(host=API_HOST, port=API_PORT, debug=DEBUG, use_reloader=False)
    finally:
        scheduler.stop(timeout=1.0)


if __name__ == '__main__':
    main()
