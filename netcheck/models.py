"""Data models for netcheck probes, summaries and reports."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class Target:
    """A DNS resolver to probe. Identity is the host."""

    host: str
    name: str = field(compare=False)


@dataclass
class ProbeOutcome:
    """Result of one probe attempt against a host."""

    ts: datetime
    host: str
    latency_ms: float | None  # None indicates the probe was lost
    lost: bool

    def __post_init__(self):
        """Keep latency_ms and lost consistent."""
        if self.lost:
            self.latency_ms = None
        elif self.latency_ms is None:
            self.lost = True

    @classmethod
    def alive(cls, host: str, latency_ms: float) -> "ProbeOutcome":
        return cls(ts=datetime.now(), host=host, latency_ms=float(latency_ms), lost=False)

    @classmethod
    def lost_for(cls, host: str) -> "ProbeOutcome":
        return cls(ts=datetime.now(), host=host, latency_ms=None, lost=True)


@dataclass(frozen=True)
class TargetSummary:
    """Reduced statistics for one target after all of its probes completed.

    A summary only exists when at least one probe succeeded, so the average
    and jitter are always defined.
    """

    target: Target
    avg_latency_ms: float
    jitter_ms: float
    loss_percent: float
    samples: tuple[float, ...]

    def __post_init__(self):
        if not self.samples:
            raise ValueError("TargetSummary requires at least one sample")

    @property
    def name(self) -> str:
        return self.target.name

    @property
    def host(self) -> str:
        return self.target.host


# Domain name -> elapsed milliseconds, None when resolution failed
ResolutionResult = dict[str, float | None]

# Download speed in the configured unit, None when the measurement failed
BandwidthResult = float | None


@dataclass
class AnalysisReport:
    """Everything produced by one analysis run."""

    summaries: dict[Target, TargetSummary | None]
    ranked: tuple[TargetSummary, ...]
    resolution: ResolutionResult
    download_mbps: BandwidthResult = None

    @property
    def recommendation(self) -> TargetSummary | None:
        """Best ranked target, or None when every target was unreachable."""
        return self.ranked[0] if self.ranked else None

    @property
    def unreachable(self) -> list[Target]:
        return [target for target, summary in self.summaries.items() if summary is None]
