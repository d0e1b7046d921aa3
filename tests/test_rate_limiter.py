"""
Pure unit tests for content_scanner/core/rate_limiter.py.

Memory tests set the Redis client to None so the fallback is exercised.
Time is frozen with unittest.mock.patch to test window sliding without sleeping.
"""

import time
import uuid
from unittest.mock import patch

import pytest
from fastapi import HTTPException

from tests.mocks.redis_mock import MockRedis


def _uid() -> str:
    return f"rl_test_{uuid.uuid4().hex}"


def _with_null_redis(monkeypatch):
    from content_scanner.integrations import redis_client as rc
    monkeypatch.setattr(rc, "client", None)


# ---------------------------------------------------------------------------
# Memory fallback: basic cases
# ---------------------------------------------------------------------------


def test_first_request_passes(monkeypatch):
    _with_null_redis(monkeypatch)
    from content_scanner.core.rate_limiter import _rate_limits, check_rate_limit

    uid = _uid()
    _rate_limits.pop(uid, None)
    check_rate_limit(uid)  # should not raise


def test_requests_under_limit_pass(monkeypatch):
    _with_null_redis(monkeypatch)
    from content_scanner.config import settings
    from content_scanner.core.rate_limiter import _rate_limits, check_rate_limit

    uid = _uid()
    _rate_limits.pop(uid, None)
    for _ in range(settings.rate_limit_max_requests):
        check_rate_limit(uid)  # no exception


def test_request_exceeding_limit_raises_429(monkeypatch):
    _with_null_redis(monkeypatch)
    from content_scanner.config import settings
    from content_scanner.core.rate_limiter import _rate_limits, check_rate_limit

    uid = _uid()
    _rate_limits.pop(uid, None)

    for _ in range(settings.rate_limit_max_requests):
        check_rate_limit(uid)

    with pytest.raises(HTTPException) as exc:
        check_rate_limit(uid)
    assert exc.value.status_code == 429
    assert exc.value.detail["code"] == "RATE_LIMITED"
    assert 1 <= int(exc.value.headers["Retry-After"]) <= settings.rate_limit_window_sec


# ---------------------------------------------------------------------------
# Sliding window
# ---------------------------------------------------------------------------


def test_new_window_allows_requests_again(monkeypatch):
    _with_null_redis(monkeypatch)
    from content_scanner.config import settings
    from content_scanner.core.rate_limiter import RATE_LIMIT_WINDOW, _rate_limits, check_rate_limit

    uid = _uid()
    _rate_limits.pop(uid, None)

    # Fill the window
    for _ in range(settings.rate_limit_max_requests):
        check_rate_limit(uid)

    # Advance time past the window so all timestamps expire
    future_time = time.time() + RATE_LIMIT_WINDOW + 1
    with patch("content_scanner.core.rate_limiter.time") as mock_time:
        mock_time.time.return_value = future_time
        check_rate_limit(uid)  # should not raise in the new window


def test_retry_after_counts_down_from_oldest_hit(monkeypatch):
    _with_null_redis(monkeypatch)
    from content_scanner.core import rate_limiter

    monkeypatch.setattr(rate_limiter, "MAX_REQUESTS_PER_WINDOW", 2)
    uid = _uid()
    now = 1_000_000.0
    rate_limiter._rate_limits[uid] = [now - 50, now - 10]

    with patch("content_scanner.core.rate_limiter.time") as mock_time:
        mock_time.time.return_value = now
        with pytest.raises(HTTPException) as exc:
            rate_limiter.check_rate_limit(uid)

    # Oldest hit leaves the 60 s window in 10 s.
    assert exc.value.headers["Retry-After"] == "10"


# ---------------------------------------------------------------------------
# Cleanup removes idle sessions
# ---------------------------------------------------------------------------


def test_cleanup_removes_idle_sessions(monkeypatch):
    _with_null_redis(monkeypatch)
    from content_scanner.core.rate_limiter import (
        RATE_LIMIT_WINDOW,
        _cleanup_all_limits,
        _rate_limits,
    )

    uid = _uid()
    _rate_limits[uid] = [time.time() - RATE_LIMIT_WINDOW - 5]  # stale entry

    _cleanup_all_limits(time.time())

    assert uid not in _rate_limits


# ---------------------------------------------------------------------------
# Redis path
# ---------------------------------------------------------------------------


def test_redis_counter_sets_expiry_and_limits(monkeypatch):
    from content_scanner.core import rate_limiter
    from content_scanner.integrations import redis_client as rc

    mock_rc = MockRedis()
    monkeypatch.setattr(rc, "client", mock_rc)
    monkeypatch.setattr(rate_limiter, "MAX_REQUESTS_PER_WINDOW", 2)
    uid = _uid()

    rate_limiter.check_rate_limit(uid)
    assert mock_rc.ttl(f"rate_limit:{uid}") > 0
    rate_limiter.check_rate_limit(uid)

    with pytest.raises(HTTPException) as exc:
        rate_limiter.check_rate_limit(uid)
    assert exc.value.status_code == 429
    assert exc.value.headers["X-RateLimit-Limit"] == "2"


def test_redis_failure_falls_back_to_memory(monkeypatch):
    from content_scanner.core.rate_limiter import _rate_limits, check_rate_limit
    from content_scanner.integrations import redis_client as rc

    monkeypatch.setattr(rc, "client", MockRedis(fail_with=ConnectionError("down")))
    uid = _uid()

    check_rate_limit(uid)  # should not raise

    assert len(_rate_limits[uid]) == 1
