"""
Memoized-computation adapter.

Composes a :class:`MemoCache` with a single-argument function: a call returns
the cached result for its key while it is live, and otherwise computes,
stores, and returns a fresh one.

`compute` is expected to be pure. Cache hits skip it entirely, so any side
effects it has are skipped too. ``None`` results are cached like any other.
"""

from __future__ import annotations

import functools
import logging
import time
from typing import Any, Callable, TypeVar

from ..config.models import DEFAULT_CAPACITY, DEFAULT_TTL_SECONDS, CacheConfig
from .cache import Clock, MemoCache

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")

_MISSING = object()


def memoize(compute: Callable[[K], V], cache: MemoCache[V]) -> Callable[[K], V]:
    """
    Wrap `compute` so results are served from `cache` while live.

    Parameters
    ----------
    compute : callable
        Pure function of one key argument
    cache : MemoCache
        Cache holding computed results; may be shared between wrappers

    Returns
    -------
    callable
        Wrapper with the same name and docstring as `compute`. The cache is
        available as ``wrapper.cache``.

    Raises
    ------
    Exception
        Whatever `compute` raises, unchanged. Failed computations are not
        cached.
    """

    @functools.wraps(compute)
    def wrapper(key: K) -> V:
        cached = cache.get(key, _MISSING)
        if cached is not _MISSING:
            return cached

        logger.debug(
            "memoize.miss",
            extra={"function": getattr(compute, "__qualname__", repr(compute))},
        )
        result = compute(key)
        cache.set(key, result)
        return result

    wrapper.cache = cache  # type: ignore[attr-defined]
    return wrapper


def memoized(
    capacity: int = DEFAULT_CAPACITY,
    ttl: float = DEFAULT_TTL_SECONDS,
    *,
    clock: Clock = time.monotonic,
) -> Callable[[Callable[[K], V]], Callable[[K], V]]:
    """Decorator form of :func:`memoize` with a private cache per function.

    >>> @memoized(capacity=10, ttl=60)
    ... def square(n):
    ...     return n * n
    >>> square(4)
    16
    """
    config = CacheConfig.build(capacity=capacity, ttl_seconds=ttl)

    def decorator(compute: Callable[[K], V]) -> Callable[[K], V]:
        cache: MemoCache[Any] = MemoCache.from_config(config, clock=clock)
        return memoize(compute, cache)

    return decorator
