"""Sample exchange servers across major cloud providers."""
import random
from typing import Dict, List, Optional, Tuple

from latency_topology.models.models import CloudProvider, ExchangeServer

PROVIDER_SITES: Dict[CloudProvider, List[Tuple[float, float, str]]] = {
    CloudProvider.AWS: [
        (40.7128, -74.006, "N. Virginia"),
        (47.6062, -122.3321, "N. California"),
        (51.5074, -0.1278, "London"),
        (55.9375, 37.6054, "Frankfurt"),
        (35.6762, 139.6503, "Tokyo"),
    ],
    CloudProvider.GCP: [
        (37.3861, -122.0839, "Mountain View"),
        (48.8566, 2.3522, "Paris"),
        (1.3521, 103.8198, "Singapore"),
    ],
    CloudProvider.AZURE: [
        (42.3601, -71.0589, "Boston"),
        (52.37, 4.895, "Amsterdam"),
        (35.0116, 135.768, "Osaka"),
    ],
    CloudProvider.OTHER: [
        (-33.8688, 151.2093, "Sydney"),
    ],
}

EXCHANGES = ["Binance", "Bybit", "OKX", "Deribit", "Kraken"]


def generate_exchange_servers(rng: Optional[random.Random] = None) -> List[ExchangeServer]:
    """Build the server catalog.

    Ids run srv-0, srv-1, ... in provider order. Each site is jittered by up
    to one degree so markers sharing a city do not overlap on the map.
    """
    rng = rng or random.Random()
    servers = []
    server_id = 0

    for provider, sites in PROVIDER_SITES.items():
        for index, (lat, lon, region) in enumerate(sites):
            exchange = EXCHANGES[index % len(EXCHANGES)]
            servers.append(ExchangeServer(
                id=f"srv-{server_id}",
                name=f"{exchange} ({provider.value})",
                lat=lat + (rng.random() - 0.5) * 2,
                lon=lon + (rng.random() - 0.5) * 2,
                provider=provider,
                region=region,
            ))
            server_id += 1

    return servers
