"""
Fixed-window request rate limiter keyed by caller identity.

One instance is built per application and torn down with it; nothing is
held at module level.
"""

from __future__ import annotations

import math
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    retry_after_seconds: int
    remaining: int
    reset_at: float


@dataclass
class _Bucket:
    count: int
    reset_at: float


class FixedWindowRateLimiter:
    """
    Allows at most ``max_requests`` per caller key in each window.

    A caller's window opens on its first request and lasts
    ``window_seconds``; the first request after it closes opens a new one.
    """

    def __init__(
        self,
        *,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._max_requests = max(1, max_requests)
        self._window_seconds = max(0.001, window_seconds)
        self._clock = clock
        self._buckets: dict[str, _Bucket] = {}
        self._lock = threading.Lock()

    @property
    def max_requests(self) -> int:
        return self._max_requests

    def consume(self, key: str) -> RateLimitDecision:
        """
        Count one request for *key* and report whether it is allowed.
        """

        with self._lock:
            now = self._clock()
            bucket = self._buckets.get(key)
            if bucket is None or now >= bucket.reset_at:
                bucket = _Bucket(count=0, reset_at=now + self._window_seconds)
                self._buckets[key] = bucket

            if bucket.count >= self._max_requests:
                return RateLimitDecision(
                    allowed=False,
                    retry_after_seconds=max(1, math.ceil(bucket.reset_at - now)),
                    remaining=0,
                    reset_at=bucket.reset_at,
                )

            bucket.count += 1
            return RateLimitDecision(
                allowed=True,
                retry_after_seconds=0,
                remaining=self._max_requests - bucket.count,
                reset_at=bucket.reset_at,
            )

    def clear(self, key: str) -> None:
        """
        Forget the window for one caller.
        """

        with self._lock:
            self._buckets.pop(key, None)

    def reset(self) -> None:
        """
        Forget every caller's window.
        """

        with self._lock:
            self._buckets.clear()
