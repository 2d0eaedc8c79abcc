"""Latency topology: pair-indexed latency sample store and its collaborators."""

__version__ = "0.1.0"
