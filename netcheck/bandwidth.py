"""Download bandwidth measurement against fast.com."""

import logging
import time
from collections.abc import Callable

import requests

from netcheck.collector import BandwidthMeter
from netcheck.config import SPEED_UNITS, SpeedTestConfig
from netcheck.errors import BandwidthMeasurementError
from netcheck.models import BandwidthResult

logger = logging.getLogger(__name__)

FAST_API_URL = "https://api.fast.com/netflix/speedtest"
CHUNK_SIZE = 64 * 1024


class FastSpeedTest:
    """Measures download throughput from fast.com content servers.

    The API hands out a set of download URLs for the token. They are
    streamed one after another until the configured duration is used up,
    and throughput is the number of bytes received over the elapsed time.
    """

    def __init__(
        self,
        config: SpeedTestConfig,
        session: requests.Session | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if config.unit not in SPEED_UNITS:
            raise ValueError(f"unknown speed unit: {config.unit}")

        self.config = config
        self.session = session if session is not None else requests.Session()
        self._clock = clock

    @property
    def timeout_seconds(self) -> float:
        return self.config.timeout_ms / 1000.0

    def fetch_target_urls(self) -> list[str]:
        """Ask the API for download URLs.

        Raises:
            BandwidthMeasurementError: on HTTP failure or an unusable payload
        """
        params = {"https": "true", "token": self.config.token, "urlCount": self.config.url_count}
        try:
            response = self.session.get(FAST_API_URL, params=params, timeout=self.timeout_seconds)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            raise BandwidthMeasurementError(f"speed test API request failed: {e}") from e
        except ValueError as e:
            raise BandwidthMeasurementError("speed test API returned invalid JSON") from e

        # v1 returns a bare list, v2 wraps it in {"targets": [...]}
        if isinstance(payload, dict):
            payload = payload.get("targets", [])
        if not isinstance(payload, list):
            raise BandwidthMeasurementError("speed test API returned an unexpected payload")

        urls = [item["url"] for item in payload if isinstance(item, dict) and item.get("url")]
        if not urls:
            raise BandwidthMeasurementError("speed test API returned no download targets")
        logger.debug("Speed test targets: %d", len(urls))
        return urls

    def measure_download_mbps(self) -> float:
        """Run the download test.

        Returns:
            Throughput in the configured unit (Mbps by default)

        Raises:
            BandwidthMeasurementError: if no data could be downloaded
        """
        urls = self.fetch_target_urls()

        start = self._clock()
        deadline = start + self.timeout_seconds
        received = 0

        for url in urls:
            remaining = deadline - self._clock()
            if remaining <= 0:
                break
            try:
                with self.session.get(url, stream=True, timeout=remaining) as response:
                    response.raise_for_status()
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        received += len(chunk)
                        if self._clock() >= deadline:
                            break
            except requests.RequestException as e:
                logger.debug("Download target failed: url=%s, error=%s", url, e)

        elapsed = self._clock() - start
        if received == 0 or elapsed <= 0:
            raise BandwidthMeasurementError("no data received from download targets")

        speed = received / elapsed / SPEED_UNITS[self.config.unit]
        logger.debug("Downloaded %d bytes in %.2fs: %.2f %s", received, elapsed, speed, self.config.unit)
        return speed


def run_speed_test(meter: BandwidthMeter) -> BandwidthResult:
    """Measure download speed, reporting failure as None."""
    try:
        return meter.measure_download_mbps()
    except BandwidthMeasurementError as e:
        logger.warning("Speed test failed. Make sure you have a valid token. (%s)", e)
        return None
