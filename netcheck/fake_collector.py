"""Simulated probes for offline runs and tests."""

import random
import threading
import zlib

from netcheck.models import ProbeOutcome


class FakeCollector:
    """Generates simulated probe outcomes.

    Each host gets its own stable base latency so that a simulated run
    still produces a meaningful ranking, and its own random stream so
    that seeded results do not depend on how targets are spread across
    threads.
    """

    def __init__(self, seed: int | None = None):
        """Initialize with optional random seed for deterministic behavior."""
        self._seed = seed
        self._streams: dict[str, random.Random] = {}
        self._lock = threading.Lock()

        self.min_base_latency = 8.0
        self.max_base_latency = 45.0
        self.latency_variance = 3.0
        self.spike_probability = 0.05
        self.spike_multiplier = 3.0
        self.loss_probability = 0.02

    def base_latency(self, host: str) -> float:
        """Stable per-host base latency in milliseconds."""
        span = self.max_base_latency - self.min_base_latency
        return self.min_base_latency + (zlib.crc32(host.encode()) % 1000) / 1000.0 * span

    def _stream(self, host: str) -> random.Random:
        with self._lock:
            stream = self._streams.get(host)
            if stream is None:
                seed = None if self._seed is None else f"{self._seed}:{host}"
                stream = self._streams[host] = random.Random(seed)
            return stream

    def probe(self, host: str) -> ProbeOutcome:
        """Simulate one probe against host."""
        if not host or not host.strip():
            raise ValueError("Host cannot be empty")

        rng = self._stream(host)
        if rng.random() < self.loss_probability:
            return ProbeOutcome.lost_for(host)

        base = self.base_latency(host)
        if rng.random() < self.spike_probability:
            base *= self.spike_multiplier
        latency = max(0.1, base + rng.gauss(0, self.latency_variance))

        return ProbeOutcome.alive(host, round(latency, 2))


class FakeResolver:
    """Resolver that succeeds for every domain without touching the network."""

    def resolve(self, domain: str) -> None:
        """Accept any non-blank domain."""
        if not domain or not domain.strip():
            raise ValueError("Domain cannot be empty")
