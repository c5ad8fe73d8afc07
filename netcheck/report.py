"""Text and structured rendering of an analysis report."""

from netcheck.config import SPEED_UNITS, AnalysisConfig
from netcheck.models import AnalysisReport, TargetSummary

LOW_BANDWIDTH_MESSAGE = "WARNING: Download speed may affect streaming/updates"
GOOD_BANDWIDTH_MESSAGE = "OK: Good download performance"


def to_mbps(speed: float, unit: str) -> float:
    return speed * SPEED_UNITS[unit] / SPEED_UNITS["Mbps"]


def assess_bandwidth(mbps: float | None, threshold_mbps: float) -> str | None:
    """Qualitative verdict on a download speed, None when there is no speed."""
    if mbps is None:
        return None
    return LOW_BANDWIDTH_MESSAGE if mbps < threshold_mbps else GOOD_BANDWIDTH_MESSAGE


def _summary_line(summary: TargetSummary) -> str:
    return (
        f"{summary.avg_latency_ms:.1f}ms | Jitter: {summary.jitter_ms:.1f}ms | "
        f"Loss: {summary.loss_percent:.1f}%"
    )


def format_report(report: AnalysisReport, config: AnalysisConfig) -> str:
    """Render the report as console text."""
    unit = config.speed_test.unit
    lines = ["=== DNS Server Analysis ==="]
    for target, summary in report.summaries.items():
        result = _summary_line(summary) if summary is not None else "Failed"
        lines.append(f"Testing {target.name:<20} ({target.host})... {result}")

    lines += ["", "=== Bandwidth Analysis ==="]
    if report.download_mbps is not None:
        lines.append(f"Download Speed: {report.download_mbps:.1f} {unit}")
    else:
        lines.append("Download Speed: measurement failed")

    lines += ["", "=== Network Health Check ===", "DNS Resolution Times:"]
    for domain, elapsed in report.resolution.items():
        shown = f"{elapsed:.1f}ms" if elapsed is not None else "Failed"
        lines.append(f"- {domain:<12}: {shown}")

    lines += ["", "=== Recommendations ==="]
    best = report.recommendation
    if best is None:
        lines.append("No usable DNS server: every target was unreachable")
    else:
        lines += [
            f"Recommended DNS Server: {best.name} ({best.host})",
            f"- Average Latency: {best.avg_latency_ms:.1f}ms",
            f"- Network Jitter:  {best.jitter_ms:.1f}ms",
            f"- Packet Loss:     {best.loss_percent:.1f}%",
        ]

    if report.download_mbps is not None:
        verdict = assess_bandwidth(to_mbps(report.download_mbps, unit), config.bandwidth_threshold_mbps)
        lines += ["", "Bandwidth Assessment:", verdict]

    return "\n".join(lines)


def _summary_dict(summary: TargetSummary) -> dict:
    return {
        "name": summary.name,
        "host": summary.host,
        "avg_latency_ms": summary.avg_latency_ms,
        "jitter_ms": summary.jitter_ms,
        "loss_percent": summary.loss_percent,
        "samples": list(summary.samples),
    }


def report_to_dict(report: AnalysisReport, config: AnalysisConfig) -> dict:
    """JSON-serializable form of the report."""
    targets = []
    for target, summary in report.summaries.items():
        if summary is None:
            targets.append({"name": target.name, "host": target.host, "status": "failed"})
        else:
            targets.append({**_summary_dict(summary), "status": "ok"})

    best = report.recommendation
    download = report.download_mbps
    return {
        "targets": targets,
        "ranking": [summary.host for summary in report.ranked],
        "recommendation": _summary_dict(best) if best is not None else None,
        "resolution_ms": dict(report.resolution),
        "bandwidth": {
            "download": download,
            "unit": config.speed_test.unit,
            "assessment": assess_bandwidth(
                to_mbps(download, config.speed_test.unit) if download is not None else None,
                config.bandwidth_threshold_mbps,
            ),
        },
    }
