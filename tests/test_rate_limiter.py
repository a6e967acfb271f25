from signaling import RateLimiter


async def test_first_event_creates_window(clock):
    limiter = RateLimiter(window_ms=1000, max_events=10, clock=clock)

    assert await limiter.admit("c1", "chat") is True
    assert await limiter.window_count("c1") == 1


async def test_eleventh_event_in_window_is_rejected(clock):
    limiter = RateLimiter(window_ms=1000, max_events=10, clock=clock)

    results = []
    for _ in range(11):
        results.append(await limiter.admit("c1", "chat"))
        clock.advance(50)

    assert results[:10] == [True] * 10
    assert results[10] is False


async def test_rejections_do_not_extend_the_count(clock):
    limiter = RateLimiter(window_ms=1000, max_events=2, clock=clock)

    assert await limiter.admit("c1", "sdp")
    assert await limiter.admit("c1", "sdp")
    for _ in range(5):
        assert not await limiter.admit("c1", "sdp")

    clock.advance(1001)
    assert await limiter.admit("c1", "sdp")
    assert await limiter.admit("c1", "sdp")
    assert not await limiter.admit("c1", "sdp")


async def test_window_resets_only_after_reset_time(clock):
    limiter = RateLimiter(window_ms=1000, max_events=10, clock=clock)
    for _ in range(10):
        await limiter.admit("c1", "chat")

    clock.advance(1000)
    # Still inside the window: reset happens strictly after reset_time
    assert await limiter.admit("c1", "chat") is False

    clock.advance(1)
    assert await limiter.admit("c1", "chat") is True


async def test_keys_are_independent(clock):
    limiter = RateLimiter(window_ms=1000, max_events=1, clock=clock)

    assert await limiter.admit("c1", "chat")
    assert await limiter.admit("c1", "sdp")
    assert await limiter.admit("c2", "chat")
    assert not await limiter.admit("c1", "chat")


async def test_sweep_removes_only_that_connection(clock):
    limiter = RateLimiter(clock=clock)
    await limiter.admit("c1", "chat")
    await limiter.admit("c1", "sdp")
    await limiter.admit("c10", "chat")

    removed = await limiter.sweep("c1")

    assert removed == 2
    assert await limiter.window_count("c1") == 0
    assert await limiter.window_count("c10") == 1
    assert await limiter.window_count() == 1
