"""Reduce repeated probes against one target into summary statistics."""

import logging
from collections.abc import Sequence

from netcheck.collector import Collector
from netcheck.models import ProbeOutcome, Target, TargetSummary

logger = logging.getLogger(__name__)


def calculate_jitter(samples: Sequence[float]) -> float:
    """Mean absolute difference between consecutive samples.

    Samples are compared in collection order. A single sample has no
    predecessor, so its jitter is 0.
    """
    if len(samples) < 2:
        return 0.0
    total = sum(abs(current - previous) for previous, current in zip(samples, samples[1:]))
    return total / (len(samples) - 1)


def aggregate(collector: Collector, target: Target, attempts: int) -> TargetSummary | None:
    """Probe target sequentially and summarize the replies.

    Every attempt that is lost, returns no outcome, or whose probe call
    raises, counts towards the loss percentage. The loss percentage is relative to ``attempts``.

    Args:
        collector: Probe executor
        target: Target to probe
        attempts: Number of probes to send, must be positive

    Returns:
        TargetSummary, or None when no probe got a reply
    """
    if attempts <= 0:
        raise ValueError("attempts must be positive")

    samples: list[float] = []
    losses = 0

    for attempt in range(attempts):
        try:
            outcome = collector.probe(target.host)
        except Exception as e:
            logger.debug("Probe raised: host=%s, attempt=%d, error=%s", target.host, attempt, e)
            losses += 1
            continue

        if not isinstance(outcome, ProbeOutcome):
            logger.debug("Probe returned no outcome: host=%s, attempt=%d, got=%r", target.host, attempt, outcome)
            losses += 1
        elif outcome.lost:
            losses += 1
        else:
            samples.append(outcome.latency_ms)

    if not samples:
        logger.info("Target unreachable: %s (%s), %d/%d lost", target.name, target.host, losses, attempts)
        return None

    summary = TargetSummary(
        target=target,
        avg_latency_ms=sum(samples) / len(samples),
        jitter_ms=calculate_jitter(samples),
        loss_percent=100.0 * losses / attempts,
        samples=tuple(samples),
    )
    logger.debug(
        "Aggregated %s: avg=%.2fms, jitter=%.2fms, loss=%.1f%%",
        target.host,
        summary.avg_latency_ms,
        summary.jitter_ms,
        summary.loss_percent,
    )
    return summary
