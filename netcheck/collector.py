"""Interfaces for the external mechanisms netcheck measures through."""

from typing import Protocol

from netcheck.models import ProbeOutcome


class Collector(Protocol):
    """Issues single latency probes."""

    def probe(self, host: str) -> ProbeOutcome:
        """Send one probe to host and report whether it came back."""
        ...


class Resolver(Protocol):
    """Resolves domain names. Failure is signalled by raising."""

    def resolve(self, domain: str) -> None:
        ...


class BandwidthMeter(Protocol):
    """Measures download throughput."""

    def measure_download_mbps(self) -> float:
        """Return download speed in the configured unit.

        Raises:
            BandwidthMeasurementError: if the measurement failed
        """
        ...
