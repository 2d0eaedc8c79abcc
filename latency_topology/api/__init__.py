"""API package for the latency topology service."""

from .routes.latency import latency_api

__all__ = ['latency_api']
