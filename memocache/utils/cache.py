"""Bounded, time-expiring memoization cache.

This module provides :class:`MemoCache`, a typed wrapper over
:class:`cachetools.FIFOCache` that adds canonical key normalization and a
per-entry time-to-live.

Two independent policies bound the cache:

- capacity: when a new key arrives and the cache is full, the oldest
  insertion is discarded first (FIFO). Reads never change eviction order.
- ttl: an entry older than ``ttl`` seconds is never returned. Expiry is lazy;
  the entry is removed the moment a ``get`` observes it, and ``size()`` keeps
  counting it until then.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from cachetools import Cache, FIFOCache  # type: ignore[import-untyped]

from ..config.models import DEFAULT_CAPACITY, DEFAULT_TTL_SECONDS, CacheConfig
from .keys import canonical_key

logger = logging.getLogger(__name__)

V = TypeVar("V")

Clock = Callable[[], float]


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    """A stored value and the clock reading taken when it was inserted."""

    value: V
    inserted_at: float


@dataclass(frozen=True)
class CacheStats:
    """Snapshot of cache counters since construction or the last clear()."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0
    expirations: int = 0


class _EntryStore(FIFOCache):
    # FIFOCache that reports capacity evictions back to its owner
    def __init__(self, maxsize: int, on_evict: Callable[[str, Any], None]) -> None:
        super().__init__(maxsize=maxsize)
        self._on_evict = on_evict

    def __setitem__(self, key, value):
        # Overwrites keep their original position in the eviction order
        if key in self:
            Cache.__setitem__(self, key, value)
        else:
            super().__setitem__(key, value)

    def popitem(self):
        key, entry = super().popitem()
        self._on_evict(key, entry)
        return key, entry


class MemoCache(Generic[V]):
    """Bounded TTL cache keyed by canonical key identity.

    Parameters
    ----------
    capacity: int
        Maximum number of tracked entries. Must be positive.
    ttl: float
        Entry lifetime in seconds (same unit as `clock`). Must be positive.
    clock: Callable[[], float]
        Timestamp source, ``time.monotonic`` by default. Tests inject a fake.

    Raises
    ------
    InvalidConfiguration
        If `capacity` or `ttl` is not a positive number.
    """

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        ttl: float = DEFAULT_TTL_SECONDS,
        *,
        clock: Clock = time.monotonic,
    ) -> None:
        config = CacheConfig.build(capacity=capacity, ttl_seconds=ttl)
        self._capacity = config.capacity
        self._ttl = config.ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._store = _EntryStore(self._capacity, self._record_eviction)
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._expirations = 0

    @classmethod
    def from_config(
        cls, config: CacheConfig, *, clock: Clock = time.monotonic
    ) -> "MemoCache[V]":
        return cls(config.capacity, config.ttl_seconds, clock=clock)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def ttl(self) -> float:
        return self._ttl

    @property
    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
                expirations=self._expirations,
            )

    def get(self, key: Any, default: Any = None) -> Optional[V]:
        """Return the live value for `key`, or `default` if absent or expired."""
        ident = canonical_key(key)
        with self._lock:
            entry = self._store.get(ident)
            if entry is None:
                self._misses += 1
                return default

            if self._is_expired(entry):
                del self._store[ident]
                self._expirations += 1
                self._misses += 1
                logger.debug(
                    "memocache.expired",
                    extra={"key": ident, "inserted_at": entry.inserted_at},
                )
                return default

            self._hits += 1
            return entry.value

    def set(self, key: Any, value: V) -> None:
        """Insert or overwrite `key`, evicting the oldest entry if full.

        Overwriting an existing key refreshes its timestamp but keeps its
        place in the eviction order; it never evicts another key.
        """
        ident = canonical_key(key)
        with self._lock:
            self._store[ident] = CacheEntry(value=value, inserted_at=self._clock())

    def clear(self) -> None:
        """Discard all entries and reset counters. Capacity and ttl are kept."""
        with self._lock:
            self._store.clear()
            self._hits = 0
            self._misses = 0
            self._evictions = 0
            self._expirations = 0

    def size(self) -> int:
        """Return the number of tracked entries, including unread expired ones."""
        with self._lock:
            return len(self._store)

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, key: Any) -> bool:
        # Liveness check only: no eviction, no stats
        ident = canonical_key(key)
        with self._lock:
            entry = self._store.get(ident)
            return entry is not None and not self._is_expired(entry)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(capacity={self._capacity}, ttl={self._ttl}, "
            f"size={len(self._store)})"
        )

    def _is_expired(self, entry: CacheEntry[V]) -> bool:
        return self._clock() - entry.inserted_at > self._ttl

    def _record_eviction(self, ident: str, entry: CacheEntry[V]) -> None:
        self._evictions += 1
        logger.debug(
            "memocache.evicted",
            extra={"key": ident, "inserted_at": entry.inserted_at},
        )
