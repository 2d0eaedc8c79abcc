from .models import (
    Sample,
    LatencyStats,
    CloudProvider,
    ExchangeServer,
    TimeRange,
    pair_key,
)

__all__ = [
    'Sample',
    'LatencyStats',
    'CloudProvider',
    'ExchangeServer',
    'TimeRange',
    'pair_key',
]
