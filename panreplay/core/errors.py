"""
Exception types for the replay engine.
"""


class PanReplayError(Exception):
    """Base class for replay errors."""
    pass


class NoDataError(PanReplayError):
    """Raised when a dataset yields no usable cycle records."""
    pass


class ConfigError(PanReplayError):
    """Raised when replay settings cannot be loaded or validated."""
    pass


class InvalidTransitionError(PanReplayError):
    """Raised when no handler is registered for an event type."""
    pass
