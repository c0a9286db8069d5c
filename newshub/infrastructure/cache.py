# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import time
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from threading import Lock
from typing import Generic, TypeVar

from newshub.shared.logging import logger

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass(slots=True)
class CacheEntry(Generic[V]):  # noqa: UP046
    value: V
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class InMemoryTTLCache(Generic[K, V]):  # noqa: UP046
    """Passive-expiry cache: stale entries are dropped when they are read."""

    def __init__(
        self, default_ttl: float, *, clock: Callable[[], float] = time.monotonic
    ) -> None:
        self._ttl = default_ttl
        self._clock = clock
        self._lock = Lock()
        self._store: dict[K, CacheEntry[V]] = {}

    def get(self, key: K) -> V | None:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                self._store.pop(key, None)
                return None
            return entry.value

    def set(self, key: K, value: V, ttl: float | None = None) -> None:
        expires_at = self._clock() + (self._ttl if ttl is None else ttl)
        with self._lock:
            self._store[key] = CacheEntry(value=value, expires_at=expires_at)

    def get_or_set(self, key: K, factory: Callable[[], V], ttl: float | None = None) -> V:
        value = self.get(key)
        if value is not None:
            logger.debug(f"cache: hit key={key}")
            return value

        logger.debug(f"cache: miss key={key}")
        value = factory()
        self.set(key, value, ttl)
        return value

    def invalidate(self, key: K) -> None:
        with self._lock:
            if key in self._store:
                logger.debug(f"cache: invalidate key={key}")
                self._store.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            logger.debug("cache: clear all keys")
            self._store.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)


__all__ = ["InMemoryTTLCache"]
