"""Personal credential manager backed by one encrypted, tab-separated file."""

__version__ = '0.1.0'
