"""Ordering of target summaries and selection of the recommended target."""

from collections.abc import Iterable

from netcheck.errors import NoUsableTargetError
from netcheck.models import TargetSummary


def ranking_key(summary: TargetSummary) -> tuple[float, float]:
    # Loss percent is reported but intentionally not part of the key
    return (summary.avg_latency_ms, summary.jitter_ms)


def rank(summaries: Iterable[TargetSummary]) -> tuple[TargetSummary, ...]:
    """Order summaries best first.

    Lower average latency wins; equal averages fall back to lower jitter.
    The sort is stable, so fully tied summaries keep their input order.

    Raises:
        NoUsableTargetError: if there are no summaries to rank
    """
    ordered = tuple(sorted(summaries, key=ranking_key))
    if not ordered:
        raise NoUsableTargetError("no DNS target produced any replies")
    return ordered


def recommend(summaries: Iterable[TargetSummary]) -> TargetSummary:
    """Return the best ranked summary."""
    return rank(summaries)[0]
