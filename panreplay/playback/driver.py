"""
Playback driver: play/pause, skip and speed control over a seekable engine.

The driver holds only the playback position, speed and whether it is
playing; all world state lives behind the engine's seek().
"""

import time
from typing import Callable, Optional, Protocol

from ..core.clock import clamp_second
from ..logging_config import get_logger

MIN_SPEED = 0.1
MAX_SPEED = 64.0

TickCallback = Callable[[], None]


class Seekable(Protocol):
    """Engine surface the driver needs."""

    @property
    def last_second(self) -> int:
        ...

    def seek(self, second: float):
        ...


class Ticker(Protocol):
    """Fixed-period timer."""

    @property
    def active(self) -> bool:
        ...

    def start(self, interval: float, callback: TickCallback) -> None:
        ...

    def stop(self) -> None:
        ...


class ManualTicker:
    """
    Ticker fired explicitly by the caller.

    Usage:
        ticker = ManualTicker()
        driver = PlaybackDriver(engine, ticker)
        driver.play_pause()
        ticker.fire(10)
    """

    def __init__(self) -> None:
        self.interval: Optional[float] = None
        self._callback: Optional[TickCallback] = None

    @property
    def active(self) -> bool:
        return self._callback is not None

    def start(self, interval: float, callback: TickCallback) -> None:
        self.interval = interval
        self._callback = callback

    def stop(self) -> None:
        self._callback = None

    def fire(self, times: int = 1) -> int:
        fired = 0
        for _ in range(times):
            if self._callback is None:
                break
            self._callback()
            fired += 1
        return fired


class BlockingTicker:
    """
    Ticker that runs its loop on the caller's thread.

    start() only arms the ticker; run() sleeps and fires until stopped.
    """

    def __init__(self, sleep: Callable[[float], None] = time.sleep) -> None:
        self.interval: Optional[float] = None
        self._callback: Optional[TickCallback] = None
        self._sleep = sleep

    @property
    def active(self) -> bool:
        return self._callback is not None

    def start(self, interval: float, callback: TickCallback) -> None:
        self.interval = interval
        self._callback = callback

    def stop(self) -> None:
        self._callback = None

    def run(self) -> None:
        while self._callback is not None and self.interval is not None:
            self._sleep(self.interval)
            callback = self._callback
            if callback is None:
                break
            callback()


class PlaybackDriver:
    """
    Timer-based stepping over a Seekable engine.

    Fields:
        engine: Target of seek requests
        ticker: Timer driving playback
        tick_seconds: Timer period at speed 1.0
        skip_seconds: Default skip distance
    """

    def __init__(
        self,
        engine: Seekable,
        ticker: Ticker,
        tick_seconds: float = 0.05,
        skip_seconds: int = 15,
    ) -> None:
        self.engine = engine
        self.ticker = ticker
        self.tick_seconds = tick_seconds
        self.skip_seconds = skip_seconds
        self.position = 0
        self.speed = 1.0
        self.playing = False
        self.logger = get_logger(__name__)

    @property
    def last_second(self) -> int:
        return self.engine.last_second

    @property
    def interval(self) -> float:
        return self.tick_seconds / self.speed

    def clamp(self, second: float) -> int:
        return clamp_second(second, self.last_second)

    def _go(self, second: float):
        self.position = self.clamp(second)
        return self.engine.seek(self.position)

    def seek(self, second: float):
        """Scrub to `second`; pauses playback first."""
        if self.playing:
            self.pause()
        return self._go(second)

    def play(self) -> None:
        if self.playing:
            return
        if self.position >= self.last_second:
            self._go(0)
        self.playing = True
        self.ticker.start(self.interval, self.tick)
        self.logger.debug(f"Playback started at {self.position} (speed {self.speed}x)")

    def pause(self) -> None:
        if not self.playing:
            return
        self.playing = False
        self.ticker.stop()
        self.logger.debug(f"Playback paused at {self.position}")

    def play_pause(self) -> bool:
        """Toggle playback; returns True if now playing."""
        if self.playing:
            self.pause()
        else:
            self.play()
        return self.playing

    def tick(self) -> None:
        """Advance one second; stops at the end of the window."""
        if self.position >= self.last_second:
            self.pause()
            return
        self._go(self.position + 1)
        if self.position >= self.last_second:
            self.pause()

    def skip_forward(self, seconds: Optional[float] = None):
        step = self.skip_seconds if seconds is None else abs(seconds)
        return self._go(self.position + step)

    def skip_backward(self, seconds: Optional[float] = None):
        step = self.skip_seconds if seconds is None else abs(seconds)
        return self._go(self.position - step)

    def set_playback_speed(self, multiplier: float) -> float:
        """Set speed (clamped to [0.1, 64]); a running timer is re-armed."""
        self.speed = max(MIN_SPEED, min(float(multiplier), MAX_SPEED))
        if self.playing:
            self.ticker.stop()
            self.ticker.start(self.interval, self.tick)
        return self.speed
