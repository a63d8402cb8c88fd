from app.core.rate_limit import RateLimiter


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_budget_per_window():
    clock = FakeClock()
    limiter = RateLimiter(max_requests=2, window_seconds=60, clock=clock)

    assert limiter.hit("10.0.0.1")
    assert limiter.hit("10.0.0.1")
    assert not limiter.hit("10.0.0.1")
    assert limiter.hit("10.0.0.2")

    clock.now = 61
    assert limiter.hit("10.0.0.1")


def test_retry_after_counts_down():
    clock = FakeClock()
    limiter = RateLimiter(max_requests=1, window_seconds=900, clock=clock)
    limiter.hit("10.0.0.1")

    clock.now = 300
    assert limiter.retry_after("10.0.0.1") == 600


def test_expired_windows_are_dropped():
    clock = FakeClock()
    limiter = RateLimiter(max_requests=5, window_seconds=900, clock=clock)
    for n in range(1000):
        limiter.hit(f"10.0.{n // 256}.{n % 256}")
    assert len(limiter._windows) == 1000

    clock.now = 10_000
    limiter.hit("192.168.1.1")
    assert list(limiter._windows) == ["192.168.1.1"]


def test_live_windows_survive_a_sweep():
    clock = FakeClock()
    limiter = RateLimiter(max_requests=1, window_seconds=900, clock=clock)
    limiter.hit("old")

    clock.now = 600
    limiter.hit("recent")

    clock.now = 1000
    limiter.hit("new")
    assert set(limiter._windows) == {"recent", "new"}
    assert not limiter.hit("recent")
