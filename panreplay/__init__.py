"""
Pan Replay Engine

Deterministic, seekable replay of recorded kitchen-line pan cycles.
"""

__version__ = "0.1.0"
