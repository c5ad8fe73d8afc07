"""Exception types raised by netcheck."""


class NetcheckError(Exception):
    """Base class for netcheck errors."""


class ConfigError(NetcheckError, ValueError):
    """Configuration is invalid and the run cannot start."""


class NoUsableTargetError(NetcheckError):
    """No target produced a summary, so nothing can be ranked."""


class BandwidthMeasurementError(NetcheckError):
    """The download speed test could not produce a result."""
