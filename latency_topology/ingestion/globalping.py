"""Globalping API client for real network latency measurements."""
import asyncio
import logging
import time
from datetime import datetime
from typing import Any, Dict, Optional

import aiohttp

from latency_topology.config.base_config import (
    GLOBALPING_API_BASE,
    GLOBALPING_TIMEOUT_SECONDS,
    GLOBALPING_POLL_SECONDS,
)
from latency_topology.models.models import CloudProvider, ExchangeServer, Sample
from latency_topology.monitoring.metrics import EXTERNAL_FAILURES
from latency_topology.simulation.generator import round_half_up

logger = logging.getLogger(__name__)

PROVIDER_TARGETS = {
    CloudProvider.AWS: "amazon.com",
    CloudProvider.GCP: "google.com",
    CloudProvider.AZURE: "microsoft.com",
}
DEFAULT_TARGET = "cloudflare.com"


class GlobalpingError(Exception):
    """Globalping API request failed."""
    def __init__(self, message, status=None):
        super().__init__(message)
        self.message = message
        self.status = status


class MeasurementTimeout(GlobalpingError):
    """Measurement did not finish in time."""
    def __init__(self, measurement_id):
        super().__init__(f"Measurement {measurement_id} timed out")
        self.measurement_id = measurement_id


def location_from_coords(lat: float, lon: float) -> Dict[str, str]:
    """Map coordinates to a Globalping probe location (coarse lookup)."""
    if lat > 50 and -10 < lon < 10:
        return {"country": "GB", "city": "London"}
    if 40 < lat < 50 and -80 < lon < -70:
        return {"country": "US", "city": "New York"}
    if 35 < lat < 45 and -125 < lon < -115:
        return {"country": "US", "city": "California"}
    if 48 < lat < 52 and 4 < lon < 6:
        return {"country": "NL", "city": "Amsterdam"}
    if 35 < lat < 37 and 135 < lon < 145:
        return {"country": "JP", "city": "Tokyo"}
    if 1 < lat < 2 and 103 < lon < 105:
        return {"country": "SG", "city": "Singapore"}
    if -35 < lat < -32 and 150 < lon < 152:
        return {"country": "AU", "city": "Sydney"}
    return {"country": "US"}


def target_for_server(server: ExchangeServer) -> str:
    """Pick a ping target by provider to spread load across hosts."""
    return PROVIDER_TARGETS.get(server.provider, DEFAULT_TARGET)


def measurement_to_sample(
    measurement: Dict[str, Any],
    from_server: ExchangeServer,
    to_server: ExchangeServer
) -> Optional[Sample]:
    """Convert a finished measurement into a sample, or None if unusable."""
    results = measurement.get('results') or []
    if not results:
        return None

    result = results[0].get('result', {})
    if result.get('status') != 'finished':
        return None

    try:
        avg = float(result['stats']['avg'])
        created_at = datetime.fromisoformat(measurement['createdAt'].replace('Z', '+00:00'))
    except (KeyError, TypeError, ValueError) as e:
        logger.warning(f"Malformed measurement {measurement.get('id')}: {str(e)}")
        return None

    return Sample(
        from_id=from_server.id,
        to_id=to_server.id,
        timestamp=int(created_at.timestamp() * 1000),
        rtt_ms=round_half_up(avg),
    )


class GlobalpingClient:
    """Async client for the Globalping measurement API."""

    def __init__(
        self,
        api_base: str = GLOBALPING_API_BASE,
        timeout_seconds: float = GLOBALPING_TIMEOUT_SECONDS,
        poll_seconds: float = GLOBALPING_POLL_SECONDS
    ):
        self.api_base = api_base.rstrip('/')
        self.timeout_seconds = timeout_seconds
        self.poll_seconds = poll_seconds

    async def create_ping_measurement(
        self,
        from_server: ExchangeServer,
        to_server: ExchangeServer
    ) -> Dict[str, Any]:
        """Create a ping measurement from one server's location to another."""
        body = {
            "type": "ping",
            "target": target_for_server(to_server),
            "locations": [location_from_coords(from_server.lat, from_server.lon)],
            "measurementOptions": {
                "packets": 3,
                "timeout": 1000,
            },
        }
        async with aiohttp.ClientSession() as session:
            async with session.post(f"{self.api_base}/measurements", json=body) as response:
                if response.status >= 400:
                    raise GlobalpingError(
                        f"Globalping API error: {response.status} {response.reason}",
                        response.status
                    )
                return await response.json()

    async def get_measurement_results(self, measurement_id: str) -> Dict[str, Any]:
        """Get measurement results by ID."""
        async with aiohttp.ClientSession() as session:
            async with session.get(f"{self.api_base}/measurements/{measurement_id}") as response:
                if response.status >= 400:
                    raise GlobalpingError(
                        f"Failed to get measurement results: {response.status}",
                        response.status
                    )
                return await response.json()

    async def wait_for_measurement(
        self,
        measurement_id: str,
        timeout_seconds: Optional[float] = None
    ) -> Dict[str, Any]:
        """Poll a measurement until it finishes.

        Raises:
            MeasurementTimeout: If the measurement is still running after the timeout
        """
        timeout = self.timeout_seconds if timeout_seconds is None else timeout_seconds
        deadline = time.monotonic() + timeout

        while time.monotonic() < deadline:
            measurement = await self.get_measurement_results(measurement_id)
            if measurement.get('status') == 'finished':
                return measurement
            await asyncio.sleep(self.poll_seconds)

        raise MeasurementTimeout(measurement_id)

    async def check_api_availability(self) -> bool:
        """Check if the Globalping API accepts measurements."""
        body = {
            "type": "ping",
            "target": "google.com",
            "locations": [{"country": "US"}],
        }
        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(f"{self.api_base}/measurements", json=body) as response:
                    return response.status < 400
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"Globalping API unavailable: {str(e)}")
            return False

    async def get_real_latency_sample(
        self,
        from_server: ExchangeServer,
        to_server: ExchangeServer
    ) -> Optional[Sample]:
        """Measure real latency for a pair.

        Returns:
            Sample if the measurement succeeded, None on any failure
        """
        try:
            measurement = await self.create_ping_measurement(from_server, to_server)
            completed = await self.wait_for_measurement(measurement['id'])
            sample = measurement_to_sample(completed, from_server, to_server)
            if sample is None:
                EXTERNAL_FAILURES.labels(reason='no_result').inc()
            return sample
        except MeasurementTimeout as e:
            EXTERNAL_FAILURES.labels(reason='timeout').inc()
            logger.warning(f"Failed to get real latency for {from_server.id} -> {to_server.id}: {e.message}")
        except (GlobalpingError, aiohttp.ClientError, asyncio.TimeoutError, KeyError, ValueError) as e:
            EXTERNAL_FAILURES.labels(reason='error').inc()
            logger.warning(f"Failed to get real latency for {from_server.id} -> {to_server.id}: {str(e)}")
        return None
