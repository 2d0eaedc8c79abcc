"""Core data models for latency samples and exchange servers."""
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Optional, Union


def pair_key(from_id: str, to_id: str) -> str:
    """Get the partition key for a directed pair."""
    return f"{from_id}-{to_id}"


@dataclass(frozen=True)
class Sample:
    """A single round-trip time measurement between two endpoints."""

    from_id: str
    to_id: str
    timestamp: int  # ms since epoch
    rtt_ms: Union[int, float]

    @property
    def pair_key(self) -> str:
        return pair_key(self.from_id, self.to_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'fromId': self.from_id,
            'toId': self.to_id,
            'timestamp': self.timestamp,
            'rttMs': self.rtt_ms,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Sample':
        return cls(
            from_id=data['fromId'],
            to_id=data['toId'],
            timestamp=int(data['timestamp']),
            rtt_ms=data['rttMs'],
        )


@dataclass(frozen=True)
class LatencyStats:
    """Aggregate statistics over a set of samples."""

    min: Union[int, float] = 0
    max: Union[int, float] = 0
    avg: int = 0
    count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class CloudProvider(Enum):
    """Cloud provider hosting an exchange server."""
    AWS = "AWS"
    GCP = "GCP"
    AZURE = "Azure"
    OTHER = "Other"


class TimeRange(Enum):
    """Named history windows offered by the dashboard."""
    HOUR = "1h"
    DAY = "24h"
    WEEK = "7d"
    MONTH = "30d"

    def to_millis(self) -> int:
        unit = self.value[-1]
        amount = int(self.value[:-1])
        if unit == 'h':
            return amount * 60 * 60 * 1000
        return amount * 24 * 60 * 60 * 1000


@dataclass
class ExchangeServer:
    """Exchange server location on the map."""

    id: str
    name: str
    lat: float
    lon: float
    provider: CloudProvider
    region: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['provider'] = self.provider.value
        return {key: value for key, value in data.items() if value is not None}
