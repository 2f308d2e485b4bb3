"""
Prometheus metrics for the replay engine.

Collectors live in a dedicated registry so several engines (and test runs)
in one process share them without re-registration errors.

Usage:
    from panreplay.metrics import start_metrics_server, track_seek

    start_metrics_server(port=9108)
    with track_seek():
        engine.seek(120)
"""

import logging
from contextlib import contextmanager
from typing import Generator

from prometheus_client import CollectorRegistry, Counter, Histogram, start_http_server

logger = logging.getLogger(__name__)

REGISTRY = CollectorRegistry(auto_describe=True)

EVENTS_APPLIED = Counter(
    "panreplay_events_applied_total",
    "Pan events applied to the entity registry",
    labelnames=["event_type"],
    registry=REGISTRY,
)

EVENTS_SKIPPED = Counter(
    "panreplay_events_skipped_total",
    "Pan events skipped during replay (recoverable errors)",
    labelnames=["reason"],
    registry=REGISTRY,
)

FULL_REBUILDS = Counter(
    "panreplay_full_rebuilds_total",
    "Backward seeks that reset the registry and replayed from zero",
    registry=REGISTRY,
)

SEEK_DURATION = Histogram(
    "panreplay_seek_duration_seconds",
    "Duration of seek operations in seconds",
    buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0),
    registry=REGISTRY,
)


def start_metrics_server(port: int, addr: str = "127.0.0.1") -> None:
    """
    Start Prometheus metrics HTTP server in a daemon thread.

    Example:
        start_metrics_server(9108)
        # curl http://127.0.0.1:9108/metrics
    """
    start_http_server(port, addr=addr, registry=REGISTRY)
    logger.info(f"Metrics server started on http://{addr}:{port}/metrics")


@contextmanager
def track_seek() -> Generator[None, None, None]:
    with SEEK_DURATION.time():
        yield


def track_event_applied(event_type: str) -> None:
    EVENTS_APPLIED.labels(event_type=event_type).inc()


def track_event_skipped(reason: str) -> None:
    EVENTS_SKIPPED.labels(reason=reason).inc()


def track_rebuild() -> None:
    FULL_REBUILDS.inc()
