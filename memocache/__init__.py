"""
memocache package.

Bounded, time-expiring memoization cache: a FIFO-evicting TTL cache keyed by
canonical key identity, plus an adapter that memoizes a pure function with
it. See README.md for usage.
"""

from .__version__ import __version__
from .config.models import CacheConfig, EnvSettings
from .errors import InvalidConfiguration, KeyNormalizationError, MemoCacheError
from .utils.cache import CacheEntry, CacheStats, MemoCache
from .utils.keys import CanonicalKey, canonical_key
from .utils.memoize import memoize, memoized

__all__ = [
    "__version__",
    "CacheConfig",
    "CacheEntry",
    "CacheStats",
    "CanonicalKey",
    "EnvSettings",
    "InvalidConfiguration",
    "KeyNormalizationError",
    "MemoCache",
    "MemoCacheError",
    "canonical_key",
    "memoize",
    "memoized",
]
