"""
Playback control: timer-driven stepping, skip, speed and clamping.
"""

from .driver import BlockingTicker, ManualTicker, PlaybackDriver, Seekable, Ticker

__all__ = [
    "BlockingTicker",
    "ManualTicker",
    "PlaybackDriver",
    "Seekable",
    "Ticker",
]
