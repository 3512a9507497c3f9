import threading
from mindbot.conversation.ratelimit import InMemoryRateLimitStore, Limited, NotLimited, RateLimiter

class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

def test_limits_after_threshold_and_recovers_after_window():
    clock = FakeClock()
    limiter = RateLimiter(max_requests=40, window_seconds=60, clock=clock)
    results = [limiter.check("1.2.3.4") for _ in range(41)]
    assert all(isinstance(r, NotLimited) for r in results[:40])
    assert isinstance(results[40], Limited)
    assert results[40].count == 41

    clock.now += 61
    after = limiter.check("1.2.3.4")
    assert not after.limited
    assert after.count == 1

def test_window_edge_is_still_inside():
    clock = FakeClock()
    limiter = RateLimiter(max_requests=1, window_seconds=60, clock=clock)
    assert not limiter.should_limit("k")
    clock.now += 60
    assert limiter.should_limit("k")

def test_retry_after_counts_down():
    clock = FakeClock()
    limiter = RateLimiter(max_requests=1, window_seconds=60, clock=clock)
    limiter.check("k")
    clock.now += 20
    result = limiter.check("k")
    assert result.limited
    assert result.retry_after == 40

def test_keys_are_independent():
    limiter = RateLimiter(max_requests=2, window_seconds=60, clock=FakeClock())
    for _ in range(3):
        limiter.check("a")
    assert limiter.should_limit("a")
    assert not limiter.should_limit("b")

def test_reset():
    limiter = RateLimiter(max_requests=1, window_seconds=60, clock=FakeClock())
    limiter.check("a")
    assert limiter.should_limit("a")
    limiter.reset("a")
    assert not limiter.should_limit("a")

def test_store_get_returns_copy():
    store = InMemoryRateLimitStore()
    assert store.get("x") is None
    store.increment("x", 0.0, 60)
    snapshot = store.get("x")
    snapshot.count = 99
    assert store.get("x").count == 1

def test_concurrent_increments_same_key_are_counted():
    store = InMemoryRateLimitStore()
    limiter = RateLimiter(max_requests=10_000, window_seconds=60, store=store, clock=FakeClock())

    def hit():
        for _ in range(200):
            limiter.check("shared")

    threads = [threading.Thread(target=hit) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert store.get("shared").count == 1600

def test_expired_keys_are_swept():
    clock = FakeClock()
    store = InMemoryRateLimitStore()
    limiter = RateLimiter(max_requests=40, window_seconds=60, store=store, clock=clock)
    for i in range(50):
        limiter.check(f"10.0.0.{i}")
    assert len(store) == 50

    clock.now += 61
    limiter.check("10.0.0.200")
    assert len(store) == 1
    assert store.get("10.0.0.1") is None
    assert store.get("10.0.0.200").count == 1

def test_sweep_keeps_live_windows():
    clock = FakeClock()
    store = InMemoryRateLimitStore()
    limiter = RateLimiter(max_requests=2, window_seconds=60, store=store, clock=clock)
    limiter.check("old")
    clock.now += 30
    limiter.check("busy")
    limiter.check("busy")
    clock.now += 31
    # "old" expired, "busy" still inside its window
    assert limiter.check("busy").limited
    assert store.get("old") is None
