"""Configuration for a netcheck run.

The configuration is built once before any probing starts and passed
explicitly into each component. Defaults can be overridden through
environment variables:

    NETCHECK_PING_COUNT            probes per DNS target (default 20)
    NETCHECK_PING_TIMEOUT_MS       per-probe timeout (default 1000)
    NETCHECK_FAST_TOKEN            fast.com API token
    NETCHECK_SPEEDTEST_TIMEOUT_MS  download test duration (default 10000)
    NETCHECK_BANDWIDTH_THRESHOLD   Mbps below which bandwidth is flagged (default 50)
    NETCHECK_TARGET_WORKERS        targets probed concurrently (default 1)
"""

import logging
import math
import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace

from netcheck.errors import ConfigError
from netcheck.models import Target

logger = logging.getLogger(__name__)

DEFAULT_TARGETS = (
    Target(host="1.1.1.1", name="Cloudflare"),
    Target(host="8.8.8.8", name="Google"),
    Target(host="9.9.9.9", name="Quad9"),
    Target(host="194.146.28.66", name="DNS.SB (DE)"),
    Target(host="89.233.43.71", name="UncensoredDNS (DK)"),
    Target(host="45.90.28.0", name="NextDNS"),
    Target(host="94.140.14.14", name="AdGuard"),
)

DEFAULT_TEST_DOMAINS = ("google.com", "cloudflare.com", "example.com")

# Public token used by the fast.com web client
DEFAULT_FAST_TOKEN = "YXNkZmFzZGxmbnNkYWZoYXNkZmhrYWxm"

# Divisor applied to bytes per second for each supported unit
SPEED_UNITS = {
    "Bps": 1.0,
    "KBps": 1_000.0,
    "MBps": 1_000_000.0,
    "GBps": 1_000_000_000.0,
    "bps": 1 / 8,
    "Kbps": 1_000 / 8,
    "Mbps": 1_000_000 / 8,
    "Gbps": 1_000_000_000 / 8,
}


@dataclass(frozen=True)
class SpeedTestConfig:
    """Parameters for the fast.com download test."""

    token: str = DEFAULT_FAST_TOKEN
    timeout_ms: int = 10000
    unit: str = "Mbps"
    url_count: int = 5


@dataclass(frozen=True)
class AnalysisConfig:
    """Immutable settings for one analysis run."""

    targets: tuple[Target, ...] = DEFAULT_TARGETS
    ping_count: int = 20
    ping_timeout_ms: int = 1000
    test_domains: tuple[str, ...] = DEFAULT_TEST_DOMAINS
    speed_test: SpeedTestConfig = field(default_factory=SpeedTestConfig)
    bandwidth_threshold_mbps: float = 50.0
    resolve_timeout_s: float = 2.0
    target_workers: int = 1

    def validate(self) -> "AnalysisConfig":
        """Check the configuration and return it unchanged.

        Raises:
            ConfigError: if any setting would make the run meaningless
        """
        if not self.targets:
            raise ConfigError("at least one DNS target is required")
        hosts = [target.host for target in self.targets]
        if len(set(hosts)) != len(hosts):
            raise ConfigError("DNS target hosts must be unique")
        if any(not target.host.strip() for target in self.targets):
            raise ConfigError("DNS target host cannot be empty")
        if self.ping_count <= 0:
            raise ConfigError("ping_count must be positive")
        if self.ping_timeout_ms <= 0:
            raise ConfigError("ping_timeout_ms must be positive")
        if not self.test_domains:
            raise ConfigError("at least one test domain is required")
        if self.resolve_timeout_s <= 0:
            raise ConfigError("resolve_timeout_s must be positive")
        if not math.isfinite(self.bandwidth_threshold_mbps) or self.bandwidth_threshold_mbps <= 0:
            raise ConfigError("bandwidth_threshold_mbps must be a positive number")
        if self.target_workers < 1:
            raise ConfigError("target_workers must be at least 1")
        if self.speed_test.unit not in SPEED_UNITS:
            raise ConfigError(f"unknown speed unit: {self.speed_test.unit}")
        if self.speed_test.timeout_ms <= 0:
            raise ConfigError("speed test timeout_ms must be positive")
        if self.speed_test.url_count <= 0:
            raise ConfigError("speed test url_count must be positive")
        return self


def _env_number(environ: Mapping[str, str], name: str, kind):
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return None
    try:
        value = kind(raw.strip())
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None
    if isinstance(value, float) and not math.isfinite(value):
        raise ConfigError(f"{name} must be a finite number, got {raw!r}")
    return value


def load_config(environ: Mapping[str, str] | None = None) -> AnalysisConfig:
    """Build the run configuration from defaults and environment overrides.

    Args:
        environ: Environment mapping, defaults to os.environ

    Returns:
        Validated AnalysisConfig

    Raises:
        ConfigError: if an override is malformed or the result is invalid
    """
    if environ is None:
        environ = os.environ

    config = AnalysisConfig()
    overrides = {}
    speed_overrides = {}

    ping_count = _env_number(environ, "NETCHECK_PING_COUNT", int)
    if ping_count is not None:
        overrides["ping_count"] = ping_count

    ping_timeout = _env_number(environ, "NETCHECK_PING_TIMEOUT_MS", int)
    if ping_timeout is not None:
        overrides["ping_timeout_ms"] = ping_timeout

    threshold = _env_number(environ, "NETCHECK_BANDWIDTH_THRESHOLD", float)
    if threshold is not None:
        overrides["bandwidth_threshold_mbps"] = threshold

    workers = _env_number(environ, "NETCHECK_TARGET_WORKERS", int)
    if workers is not None:
        overrides["target_workers"] = workers

    token = environ.get("NETCHECK_FAST_TOKEN", "").strip()
    if token:
        speed_overrides["token"] = token

    speed_timeout = _env_number(environ, "NETCHECK_SPEEDTEST_TIMEOUT_MS", int)
    if speed_timeout is not None:
        speed_overrides["timeout_ms"] = speed_timeout

    if speed_overrides:
        overrides["speed_test"] = replace(config.speed_test, **speed_overrides)

    config = replace(config, **overrides).validate()
    logger.debug(
        "Configuration loaded: targets=%d, ping_count=%d, target_workers=%d",
        len(config.targets),
        config.ping_count,
        config.target_workers,
    )
    return config
