"""Entry point for netcheck: python -m netcheck."""

import json
import logging
import os
import sys

import dns.resolver

from netcheck.analyzer import run_analysis
from netcheck.bandwidth import FastSpeedTest
from netcheck.collector import Collector, Resolver
from netcheck.config import AnalysisConfig, load_config
from netcheck.errors import ConfigError
from netcheck.fake_collector import FakeCollector, FakeResolver
from netcheck.logging_config import configure_logging
from netcheck.report import format_report, report_to_dict
from netcheck.resolution import DnsResolver

logger = logging.getLogger(__name__)


def select_collector(config: AnalysisConfig, environ=None) -> Collector:
    """Pick the ping collector, falling back to simulated probes."""
    if environ is None:
        environ = os.environ

    if environ.get("NETCHECK_COLLECTOR", "").lower() == "fake":
        logger.info("Simulated probes requested via NETCHECK_COLLECTOR=fake")
        return FakeCollector()

    try:
        from netcheck.collector_ping import PingCollector
    except ImportError as e:
        logger.warning("PingCollector unavailable, using simulated probes: %s", e)
        return FakeCollector()

    try:
        collector = PingCollector(timeout_ms=config.ping_timeout_ms)
    except (ValueError, OSError) as e:
        # PermissionError is an OSError
        logger.warning("PingCollector could not start, using simulated probes: %s", e)
        return FakeCollector()

    logger.info("PingCollector initialized successfully")
    return collector


def select_resolver(config: AnalysisConfig, environ=None) -> Resolver:
    """Pick the resolver for resolution checks.

    Uses the system DNS configuration through dnspython, or the offline
    resolver when NETCHECK_COLLECTOR=fake.

    Raises:
        dns.resolver.NoResolverConfiguration: if the system has no usable resolver setup
    """
    if environ is None:
        environ = os.environ

    if environ.get("NETCHECK_COLLECTOR", "").lower() == "fake":
        return FakeResolver()

    return DnsResolver(lifetime_s=config.resolve_timeout_s)


class _UnavailableResolver:
    """Stands in for the system resolver when it could not be set up.

    Every lookup fails, so each domain is reported as a failed resolution.
    """

    def __init__(self, reason: str):
        self.reason = reason

    def resolve(self, domain: str) -> None:
        """Fail the lookup with the original set-up error."""
        raise OSError(self.reason)


def main() -> int:
    """Run the analysis and print the report to stdout."""
    configure_logging()

    try:
        config = load_config()
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    collector = select_collector(config)
    try:
        resolver = select_resolver(config)
    except (dns.resolver.NoResolverConfiguration, OSError) as e:
        logger.warning("System resolver unavailable, resolution checks will fail: %s", e, exc_info=True)
        resolver = _UnavailableResolver(str(e))

    report = run_analysis(config, collector, resolver, FastSpeedTest(config.speed_test))

    if os.environ.get("NETCHECK_OUTPUT", "").lower() == "json":
        print(json.dumps(report_to_dict(report, config), indent=2))
    else:
        print(format_report(report, config))

    return 0 if report.recommendation is not None else 1


if __name__ == "__main__":
    sys.exit(main())
