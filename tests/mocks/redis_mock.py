"""
MockRedis: synchronous in-memory stand-in for the Upstash client in unit tests.

Supports the calls the rate limiter makes: get, set, incr, expire.
Expiry is enforced lazily on read. `fail_with` makes every call raise, to
exercise the memory fallback.
"""

import time
from typing import Optional


class MockRedis:
    def __init__(self, fail_with: Optional[Exception] = None):
        self._store: dict[str, object] = {}
        self._expiry: dict[str, float] = {}
        self._fail_with = fail_with

    def _check(self) -> None:
        if self._fail_with is not None:
            raise self._fail_with

    def _expired(self, key: str) -> bool:
        if key in self._expiry and time.time() > self._expiry[key]:
            self._store.pop(key, None)
            self._expiry.pop(key, None)
            return True
        return False

    def get(self, key: str):
        self._check()
        if self._expired(key):
            return None
        return self._store.get(key)

    def set(self, key: str, value, ex: int | None = None) -> bool:
        self._check()
        self._store[key] = value
        if ex:
            self._expiry[key] = time.time() + ex
        return True

    def incr(self, key: str) -> int:
        self._check()
        self._expired(key)
        val = int(self._store.get(key, 0)) + 1
        self._store[key] = str(val)
        return val

    def expire(self, key: str, seconds: int) -> int:
        self._check()
        if key in self._store:
            self._expiry[key] = time.time() + seconds
            return 1
        return 0

    def ttl(self, key: str) -> int:
        if key not in self._expiry:
            return -1
        return max(0, int(self._expiry[key] - time.time()))
