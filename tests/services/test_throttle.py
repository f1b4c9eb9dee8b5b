# tests/services/test_throttle.py
"""Tests for the per-address request throttle."""

from agentboards.services.throttle import RequestThrottle


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestRequestThrottle:
    def test_blocks_request_over_limit(self):
        """The N+1th request inside one window is refused."""
        throttle = RequestThrottle(3, clock=FakeClock())

        assert [throttle.allow("10.0.0.1") for _ in range(4)] == [True, True, True, False]

    def test_keys_are_independent(self):
        throttle = RequestThrottle(1, clock=FakeClock())

        assert throttle.allow("10.0.0.1") is True
        assert throttle.allow("10.0.0.2") is True
        assert throttle.allow("10.0.0.1") is False

    def test_window_slides(self):
        """Requests older than the window no longer count."""
        clock = FakeClock()
        throttle = RequestThrottle(2, window_seconds=60, clock=clock)
        throttle.allow("a")
        clock.now += 30
        throttle.allow("a")
        assert throttle.allow("a") is False

        clock.now += 31
        assert throttle.allow("a") is True
        assert throttle.allow("a") is False

    def test_retry_after(self):
        clock = FakeClock()
        throttle = RequestThrottle(1, window_seconds=60, clock=clock)
        assert throttle.retry_after("a") == 0

        throttle.allow("a")
        clock.now += 20

        assert throttle.retry_after("a") == 41

    def test_reset(self):
        throttle = RequestThrottle(1, clock=FakeClock())
        throttle.allow("a")

        throttle.reset()

        assert throttle.allow("a") is True

    def test_idle_addresses_are_forgotten(self):
        """Addresses with no request inside the window drop out of the table."""
        clock = FakeClock()
        throttle = RequestThrottle(5, window_seconds=60, clock=clock)
        for n in range(100):
            throttle.allow(f"10.0.{n}.1")
        assert len(throttle._hits) == 100

        clock.now += 61
        assert throttle.allow("10.9.9.9") is True

        assert list(throttle._hits) == ["10.9.9.9"]

    def test_sweep_keeps_addresses_still_in_window(self):
        clock = FakeClock()
        throttle = RequestThrottle(2, window_seconds=60, clock=clock)
        throttle.allow("old")
        clock.now += 30
        throttle.allow("busy")
        throttle.allow("busy")

        clock.now += 31
        throttle.allow("new")

        assert set(throttle._hits) == {"busy", "new"}
        assert throttle.allow("busy") is False
