# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import threading
import time
from collections import deque
from collections.abc import Callable
from functools import wraps

from flask import Request, jsonify, request

from authgate.shared.logging import logger


class InMemoryRateLimiter:
    def __init__(
        self,
        limit: int,
        window_seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._limit = max(1, int(limit))
        self._window = max(0.1, float(window_seconds))
        self._clock = clock
        self._buckets: dict[str, deque[float]] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def __len__(self) -> int:
        return len(self._buckets)

    def _sweep(self, now: float) -> None:
        stale = [
            key
            for key, timestamps in self._buckets.items()
            if not timestamps or (now - timestamps[-1]) > self._window
        ]
        for key in stale:
            del self._buckets[key]
        self._last_sweep = now

    def allow(self, key: str) -> bool:
        now = self._clock()
        with self._lock:
            if (now - self._last_sweep) > self._window:
                self._sweep(now)

            timestamps = self._buckets.get(key)
            if timestamps is None:
                timestamps = self._buckets[key] = deque(maxlen=self._limit)
            # Drop old
            while timestamps and (now - timestamps[0]) > self._window:
                timestamps.popleft()
            if len(timestamps) >= self._limit:
                return False
            timestamps.append(now)
            return True


def _client_key(req: Request) -> str:
    # X-Forwarded-For is only honoured through ProxyFix (TRUSTED_PROXY_COUNT).
    return req.remote_addr or "unknown"


def rate_limit(limit: int, window_seconds: float, *, enabled: bool = True):
    limiter = InMemoryRateLimiter(limit, window_seconds)

    def decorator(f: Callable):
        if not enabled:
            return f

        @wraps(f)
        def wrapper(*args, **kwargs):
            key = f"{request.path}:{_client_key(request)}"
            if not limiter.allow(key):
                logger.warning(f"rate_limit: rejected {request.method} {request.path}")
                return jsonify({"error": "rate_limited"}), 429
            return f(*args, **kwargs)

        return wrapper

    return decorator


__all__ = ["InMemoryRateLimiter", "rate_limit"]
