"""ICMP probes through the operating system ping command."""

import logging
import platform
import re
import subprocess
from math import ceil

from netcheck.models import ProbeOutcome

logger = logging.getLogger(__name__)

# Windows reports sub-threshold replies as "time<1ms"
_LESS_THAN_PATTERN = re.compile(r"time<(\d+)", re.IGNORECASE)
_LATENCY_PATTERN = re.compile(r"time\s*[=<]\s*(\d+(?:\.\d+)?)\s*ms", re.IGNORECASE)


def parse_ping_latency_ms(output: str | None) -> float | None:
    """Extract the round-trip time from ping output.

    Understands the Linux/macOS form "time=12.3 ms" and the Windows forms
    "time=12ms" and "time<1ms". A "time<N" reply is reported as N/2.

    Args:
        output: Raw stdout of one ping invocation

    Returns:
        Latency in milliseconds, or None when no reply time is present

    Examples:
        >>> parse_ping_latency_ms("64 bytes from 1.1.1.1: icmp_seq=1 time=12.3 ms")
        12.3
        >>> parse_ping_latency_ms("Reply from 127.0.0.1: bytes=32 time<1ms TTL=128")
        0.5
        >>> parse_ping_latency_ms("Request timed out.") is None
        True
    """
    if not output:
        return None

    match = _LESS_THAN_PATTERN.search(output)
    if match:
        return float(match.group(1)) / 2.0

    match = _LATENCY_PATTERN.search(output)
    if match:
        return float(match.group(1))

    return None


class PingCollector:
    """Probes hosts with a single echo request per call.

    Works on Windows, Linux and macOS. Output is parsed for the English
    "time" keyword; localized ping output is reported as a lost probe.
    """

    def __init__(self, timeout_ms: int = 1000):
        """Initialize ping collector.

        Args:
            timeout_ms: Maximum wait for one echo reply in milliseconds
        """
        if timeout_ms <= 0:
            raise ValueError("timeout_ms must be positive")

        self.timeout_ms = timeout_ms
        self.timeout_seconds = timeout_ms / 1000.0
        self.system = platform.system()

        logger.debug("PingCollector initialized: timeout_ms=%d, system=%s", timeout_ms, self.system)

    def probe(self, host: str) -> ProbeOutcome:
        """Send one echo request to host.

        A non-zero exit status, a subprocess timeout, unparseable output or
        any error starting ping all produce a lost outcome.
        """
        if not host or not host.strip():
            return ProbeOutcome.lost_for(host)

        cmd = self.build_command(host)
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout_seconds + 0.5,
                shell=False,
            )
        except subprocess.TimeoutExpired:
            logger.debug("Ping timeout: host=%s, timeout=%.1fs", host, self.timeout_seconds)
            return ProbeOutcome.lost_for(host)
        except OSError as e:
            logger.warning("Ping error: host=%s, error=%s", host, e, exc_info=True)
            return ProbeOutcome.lost_for(host)

        if result.returncode != 0:
            logger.debug("Ping lost: host=%s, returncode=%d", host, result.returncode)
            return ProbeOutcome.lost_for(host)

        latency = parse_ping_latency_ms(result.stdout)
        if latency is None:
            logger.debug(
                "Parse failed: host=%s, output_preview=%s",
                host,
                result.stdout[:100] if result.stdout else "(empty)",
            )
            return ProbeOutcome.lost_for(host)

        logger.debug("Ping reply: host=%s, latency=%.2fms", host, latency)
        return ProbeOutcome.alive(host, latency)

    def build_command(self, host: str) -> list[str]:
        """Build the single-echo ping command for the current platform."""
        if self.system == "Windows":
            return ["ping", "-n", "1", "-w", str(self.timeout_ms), host]

        if self.system == "Linux":
            return ["ping", "-c", "1", "-W", str(max(1, ceil(self.timeout_seconds))), host]

        # macOS -W means something else; the subprocess timeout bounds the call
        return ["ping", "-c", "1", host]
