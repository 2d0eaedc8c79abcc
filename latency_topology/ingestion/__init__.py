from .exchanges import generate_exchange_servers
from .globalping import GlobalpingClient, GlobalpingError, MeasurementTimeout
from .scheduler import IngestionScheduler

__all__ = [
    'generate_exchange_servers',
    'GlobalpingClient',
    'GlobalpingError',
    'MeasurementTimeout',
    'IngestionScheduler',
]
