"""Tests for netcheck.bandwidth with a stubbed requests session."""

import pytest
import requests

from netcheck.bandwidth import FAST_API_URL, FastSpeedTest, run_speed_test
from netcheck.config import SpeedTestConfig
from netcheck.errors import BandwidthMeasurementError


class StubResponse:
    def __init__(self, status=200, payload=None, chunks=(), json_error=False):
        self.status = status
        self.payload = payload
        self.chunks = list(chunks)
        self.json_error = json_error

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} error")

    def json(self):
        if self.json_error:
            raise ValueError("not json")
        return self.payload

    def iter_content(self, chunk_size=1):
        yield from self.chunks

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class StubSession:
    """Session returning canned responses keyed by URL."""

    def __init__(self, responses):
        self.responses = responses
        self.requests = []

    def get(self, url, **kwargs):
        self.requests.append((url, kwargs))
        response = self.responses[url]
        if isinstance(response, Exception):
            raise response
        return response


class StepClock:
    def __init__(self, step_s):
        self.step_s = step_s
        self.now = 100.0

    def __call__(self):
        value = self.now
        self.now += self.step_s
        return value


def targets_payload(*urls):
    return [{"url": url} for url in urls]


class TestFetchTargetUrls:
    """Test fast.com API handling."""

    def test_sends_token_and_url_count(self):
        """Test the API call carries token, https flag and url count."""
        session = StubSession({FAST_API_URL: StubResponse(payload=targets_payload("https://a"))})
        test = FastSpeedTest(SpeedTestConfig(token="abc", url_count=3, timeout_ms=2000), session=session)

        assert test.fetch_target_urls() == ["https://a"]
        url, kwargs = session.requests[0]
        assert url == FAST_API_URL
        assert kwargs["params"] == {"https": "true", "token": "abc", "urlCount": 3}
        assert kwargs["timeout"] == 2.0

    def test_accepts_wrapped_targets(self):
        """Test the {"targets": [...]} payload shape."""
        payload = {"targets": targets_payload("https://a", "https://b")}
        session = StubSession({FAST_API_URL: StubResponse(payload=payload)})

        assert FastSpeedTest(SpeedTestConfig(), session=session).fetch_target_urls() == ["https://a", "https://b"]

    def test_invalid_token(self):
        """Test HTTP 403 from the API is a measurement error."""
        session = StubSession({FAST_API_URL: StubResponse(status=403)})

        with pytest.raises(BandwidthMeasurementError, match="request failed"):
            FastSpeedTest(SpeedTestConfig(token="bad"), session=session).fetch_target_urls()

    def test_connection_error(self):
        """Test network errors are wrapped."""
        session = StubSession({FAST_API_URL: requests.ConnectionError("offline")})

        with pytest.raises(BandwidthMeasurementError):
            FastSpeedTest(SpeedTestConfig(), session=session).fetch_target_urls()

    def test_bad_json(self):
        """Test a non-JSON body is a measurement error."""
        session = StubSession({FAST_API_URL: StubResponse(json_error=True)})

        with pytest.raises(BandwidthMeasurementError, match="invalid JSON"):
            FastSpeedTest(SpeedTestConfig(), session=session).fetch_target_urls()

    def test_no_targets(self):
        """Test an empty target list is a measurement error."""
        session = StubSession({FAST_API_URL: StubResponse(payload=[])})

        with pytest.raises(BandwidthMeasurementError, match="no download targets"):
            FastSpeedTest(SpeedTestConfig(), session=session).fetch_target_urls()

    def test_unknown_unit_rejected(self):
        """Test an unsupported unit fails at construction."""
        with pytest.raises(ValueError, match="unknown speed unit"):
            FastSpeedTest(SpeedTestConfig(unit="furlongs"), session=StubSession({}))


class TestMeasureDownload:
    """Test throughput computation."""

    def test_mbps(self):
        """Test bytes over elapsed time converted to Mbps."""
        session = StubSession(
            {
                FAST_API_URL: StubResponse(payload=targets_payload("https://a", "https://b")),
                "https://a": StubResponse(chunks=[b"x" * 500_000]),
                "https://b": StubResponse(chunks=[b"x" * 500_000]),
            }
        )
        # Clock ticks once per call: start, remaining a, chunk a, remaining b, chunk b, end
        test = FastSpeedTest(SpeedTestConfig(timeout_ms=60_000), session=session, clock=StepClock(0.2))

        speed = test.measure_download_mbps()

        # 1,000,000 bytes in 1.0s = 8 Mbps
        assert speed == pytest.approx(8.0)

    def test_other_unit(self):
        """Test the configured unit is applied."""
        session = StubSession(
            {
                FAST_API_URL: StubResponse(payload=targets_payload("https://a")),
                "https://a": StubResponse(chunks=[b"x" * 1000]),
            }
        )
        # start, remaining, chunk, end: 0.5s per tick -> 1.5s
        test = FastSpeedTest(SpeedTestConfig(unit="KBps", timeout_ms=60_000), session=session, clock=StepClock(0.5))

        assert test.measure_download_mbps() == pytest.approx(1000 / 1.5 / 1000)

    def test_failed_target_skipped(self):
        """Test one failing download target does not fail the measurement."""
        session = StubSession(
            {
                FAST_API_URL: StubResponse(payload=targets_payload("https://a", "https://b")),
                "https://a": requests.ConnectionError("reset"),
                "https://b": StubResponse(chunks=[b"x" * 125_000]),
            }
        )
        test = FastSpeedTest(SpeedTestConfig(timeout_ms=60_000), session=session, clock=StepClock(0.2))

        assert test.measure_download_mbps() > 0

    def test_stops_at_deadline(self):
        """Test downloading stops once the timeout has elapsed."""
        session = StubSession(
            {
                FAST_API_URL: StubResponse(payload=targets_payload("https://a", "https://b")),
                "https://a": StubResponse(chunks=[b"x"] * 100),
                "https://b": StubResponse(chunks=[b"x"]),
            }
        )
        test = FastSpeedTest(SpeedTestConfig(timeout_ms=1000), session=session, clock=StepClock(0.3))

        test.measure_download_mbps()

        assert [url for url, _ in session.requests] == [FAST_API_URL, "https://a"]

    def test_no_bytes_is_error(self):
        """Test zero bytes received is a measurement error."""
        session = StubSession(
            {
                FAST_API_URL: StubResponse(payload=targets_payload("https://a")),
                "https://a": StubResponse(status=500),
            }
        )

        with pytest.raises(BandwidthMeasurementError, match="no data"):
            FastSpeedTest(SpeedTestConfig(), session=session, clock=StepClock(0.1)).measure_download_mbps()


class TestRunSpeedTest:
    """Test run_speed_test() failure handling."""

    def test_returns_speed(self):
        """Test a successful meter result is returned."""

        class Meter:
            def measure_download_mbps(self):
                return 123.4

        assert run_speed_test(Meter()) == 123.4

    def test_failure_is_none(self):
        """Test a measurement error becomes None."""

        class Meter:
            def measure_download_mbps(self):
                raise BandwidthMeasurementError("token rejected")

        assert run_speed_test(Meter()) is None
