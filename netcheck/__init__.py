"""Network quality diagnostics: DNS resolver latency, resolution time and bandwidth."""

__version__ = "0.1.0"
