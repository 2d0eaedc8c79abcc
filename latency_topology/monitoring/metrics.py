from prometheus_client import (
    generate_latest,
    CONTENT_TYPE_LATEST,
    Counter,
    Histogram,
    Gauge,
    CollectorRegistry
)
from functools import wraps
import time

# Create a custom registry for latency store metrics
LATENCY_REGISTRY = CollectorRegistry()

# Ingestion Metrics
SAMPLES_INGESTED = Counter(
    'latency_samples_ingested_total',
    'Number of samples inserted into the store',
    ['source'],  # source: generator/globalping/external
    registry=LATENCY_REGISTRY
)

SAMPLES_EVICTED = Counter(
    'latency_samples_evicted_total',
    'Number of samples evicted from the store',
    ['reason'],  # reason: count/age
    registry=LATENCY_REGISTRY
)

EXTERNAL_FAILURES = Counter(
    'latency_external_measurement_failures_total',
    'Number of external measurements replaced by generated samples',
    ['reason'],
    registry=LATENCY_REGISTRY
)

# Store Metrics
STORE_PARTITIONS = Gauge(
    'latency_store_partitions',
    'Number of endpoint pairs held in the store',
    registry=LATENCY_REGISTRY
)

STORE_SAMPLES = Gauge(
    'latency_store_samples',
    'Number of samples held in the store',
    registry=LATENCY_REGISTRY
)

# Request Metrics
REQUEST_LATENCY = Histogram(
    'latency_request_seconds',
    'Query surface request latency in seconds',
    ['endpoint'],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
    registry=LATENCY_REGISTRY
)


def track_request(endpoint):
    """Decorator to record request duration for an endpoint."""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.time()
            try:
                return func(*args, **kwargs)
            finally:
                REQUEST_LATENCY.labels(endpoint=endpoint).observe(time.time() - start_time)
        return wrapper
    return decorator


def export_metrics():
    """Render the registry in the Prometheus text format."""
    return generate_latest(LATENCY_REGISTRY), CONTENT_TYPE_LATEST
