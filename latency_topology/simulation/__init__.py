from .generator import SampleGenerator, SeededRandom, DEFAULT_SEED

__all__ = ['SampleGenerator', 'SeededRandom', 'DEFAULT_SEED']
