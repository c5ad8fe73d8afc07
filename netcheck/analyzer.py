"""Runs a full analysis: target probing, ranking, bandwidth and resolution."""

import logging
from concurrent.futures import ThreadPoolExecutor

from netcheck.aggregator import aggregate
from netcheck.bandwidth import run_speed_test
from netcheck.collector import BandwidthMeter, Collector, Resolver
from netcheck.config import AnalysisConfig
from netcheck.errors import NoUsableTargetError
from netcheck.models import AnalysisReport, Target, TargetSummary
from netcheck.ranking import rank
from netcheck.resolution import check_resolution

logger = logging.getLogger(__name__)


def probe_targets(config: AnalysisConfig, collector: Collector) -> dict[Target, TargetSummary | None]:
    """Aggregate every configured target.

    Targets run one after another unless ``config.target_workers`` allows
    more. Probes against a single target are always sequential, and the
    result keeps the configured target order either way.
    """
    if config.target_workers == 1:
        return {target: _aggregate_target(collector, target, config.ping_count) for target in config.targets}

    workers = min(config.target_workers, len(config.targets))
    logger.info("Probing %d targets with %d workers", len(config.targets), workers)
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {
            target: executor.submit(_aggregate_target, collector, target, config.ping_count)
            for target in config.targets
        }
        return {target: future.result() for target, future in futures.items()}


def _aggregate_target(collector: Collector, target: Target, attempts: int) -> TargetSummary | None:
    logger.info("Testing %s (%s)", target.name, target.host)
    summary = aggregate(collector, target, attempts)
    if summary is None:
        logger.warning("DNS target failed: %s (%s)", target.name, target.host)
    return summary


def run_analysis(
    config: AnalysisConfig,
    collector: Collector,
    resolver: Resolver,
    meter: BandwidthMeter,
) -> AnalysisReport:
    """Run every measurement once and collect the results.

    Per-target, per-domain and bandwidth failures are recorded in the
    report; only an invalid configuration raises.

    Raises:
        ConfigError: if the configuration is invalid
    """
    config.validate()
    logger.info("Starting network analysis: %d DNS targets, %d probes each", len(config.targets), config.ping_count)

    summaries = probe_targets(config, collector)

    try:
        ranked = rank(summary for summary in summaries.values() if summary is not None)
    except NoUsableTargetError:
        logger.error("No usable DNS target: all %d targets unreachable", len(config.targets))
        ranked = ()

    download = run_speed_test(meter)
    resolution = check_resolution(resolver, config.test_domains)

    report = AnalysisReport(
        summaries=summaries,
        ranked=ranked,
        resolution=resolution,
        download_mbps=download,
    )
    if report.recommendation is not None:
        logger.info("Recommended DNS target: %s (%s)", report.recommendation.name, report.recommendation.host)
    return report
