# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time
from collections import defaultdict, deque
from collections.abc import Callable
from dataclasses import dataclass
from functools import wraps
from threading import Lock

from flask import Request, request

from newshub.shared.errors import RateLimitedError


@dataclass
class Bucket:
    timestamps: deque[float]


class InMemoryRateLimiter:
    def __init__(self, limit: int, window_seconds: float) -> None:
        self._limit = max(1, int(limit))
        self._window = max(0.1, float(window_seconds))
        self._lock = Lock()
        self._buckets: dict[str, Bucket] = defaultdict(lambda: Bucket(deque(maxlen=self._limit)))

    def hit(self, key: str) -> float:
        """Record a hit; return 0 when allowed, else seconds until the next slot frees up."""
        now = time.monotonic()
        with self._lock:
            bucket = self._buckets[key]
            # Drop old
            while bucket.timestamps and (now - bucket.timestamps[0]) > self._window:
                bucket.timestamps.popleft()
            if len(bucket.timestamps) >= self._limit:
                return self._window - (now - bucket.timestamps[0])
            bucket.timestamps.append(now)
            return 0.0

    def reset(self) -> None:
        with self._lock:
            self._buckets.clear()


def _client_key(req: Request) -> str:
    return req.remote_addr or "unknown"


def rate_limit(limiter: InMemoryRateLimiter | None):
    def decorator(f: Callable):
        if limiter is None:
            return f

        @wraps(f)
        def wrapper(*args, **kwargs):
            key = f"{request.path}:{_client_key(request)}"
            retry_after = limiter.hit(key)
            if retry_after > 0:
                raise RateLimitedError(retry_after)
            return f(*args, **kwargs)

        return wrapper

    return decorator


__all__ = ["InMemoryRateLimiter", "rate_limit"]
