from .sample_store import SampleStore, compute_stats

__all__ = ['SampleStore', 'compute_stats']
