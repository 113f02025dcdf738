"""
Cache engine and helpers.

Modules
-------
cache
    MemoCache: FIFO-evicting, lazily expiring cache with injectable clock
keys
    Canonical key identity for primitive and composite keys
memoize
    Memoized-computation adapter and decorator
"""

__all__ = []
