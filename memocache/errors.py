"""Exception types raised by the cache and its configuration layer."""

from __future__ import annotations


class MemoCacheError(Exception):
    """Base error for the memocache package."""


class InvalidConfiguration(MemoCacheError, ValueError):
    """Raised when capacity or ttl are not positive numbers."""


class KeyNormalizationError(MemoCacheError, TypeError):
    """Raised when a key cannot be reduced to a canonical identity."""
