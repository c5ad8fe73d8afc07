"""DNS resolution timing for sample domains."""

import logging
import time
from collections.abc import Callable, Iterable

import dns.resolver

from netcheck.collector import Resolver
from netcheck.models import ResolutionResult

logger = logging.getLogger(__name__)


class DnsResolver:
    """Resolves A records with dnspython.

    Uses the system resolver configuration unless explicit nameservers are
    given.
    """

    def __init__(self, lifetime_s: float = 2.0, nameservers: list[str] | None = None):
        if lifetime_s <= 0:
            raise ValueError("lifetime_s must be positive")

        self._resolver = dns.resolver.Resolver(configure=nameservers is None)
        if nameservers is not None:
            self._resolver.nameservers = list(nameservers)
        self._resolver.lifetime = lifetime_s

    def resolve(self, domain: str) -> None:
        """Resolve domain, raising a dnspython exception on failure."""
        self._resolver.resolve(domain, "A")


def check_resolution(
    resolver: Resolver,
    domains: Iterable[str],
    clock: Callable[[], float] = time.perf_counter,
) -> ResolutionResult:
    """Time one resolution per domain.

    Failed resolutions are recorded as None and do not affect the other
    domains.

    Args:
        resolver: Resolver to query
        domains: Domain names, checked in order
        clock: Monotonic clock returning seconds

    Returns:
        Mapping of domain to elapsed milliseconds or None
    """
    results: ResolutionResult = {}
    for domain in domains:
        start = clock()
        try:
            resolver.resolve(domain)
        except Exception as e:
            logger.debug("Resolution failed: domain=%s, error=%s", domain, e)
            results[domain] = None
            continue
        results[domain] = (clock() - start) * 1000.0
        logger.debug("Resolved %s in %.1fms", domain, results[domain])
    return results
