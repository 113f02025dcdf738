"""
Canonical key identity for cache lookups.

Keys are reduced to a string so that arbitrary values, including nested
mappings and sequences, can address the same cache slot when they are
structurally equal. Composite keys are normalized recursively and then
serialized with ``orjson`` using sorted mapping keys; primitive keys use their
``str()`` form.

Normalization rules:

- integral floats collapse to ints, so ``{"x": 1}`` and ``{"x": 1.0}`` share
  an identity, as do ``1`` and ``1.0``,
- integers beyond the 64-bit range are written as raw JSON numbers,
- non-string mapping keys (including tuples and frozensets) are replaced by
  their own canonical identity,
- set members are ordered by canonical identity, then type name.

Known limitations: a primitive whose text happens to equal the serialization
of a composite key (``"[1,2]"`` and ``[1, 2]``) maps to the same identity, and
so do mapping keys ``1`` and ``"1"``. ``True`` and ``1`` compare equal in
Python but keep distinct identities. Callers that need stricter separation
can implement :class:`CanonicalKey`.
"""

from __future__ import annotations

import dataclasses
import math
from collections.abc import Mapping
from typing import Any, Protocol, Tuple, runtime_checkable

import orjson
from pydantic import BaseModel

from ..errors import KeyNormalizationError

_COMPOSITE_TYPES = (Mapping, list, tuple, set, frozenset, BaseModel)

_INT_MIN = -(2**63)
_INT_MAX = 2**64 - 1


@runtime_checkable
class CanonicalKey(Protocol):
    """Keys that know their own canonical identity."""

    def canonical_key(self) -> str:
        ...


def is_composite(key: Any) -> bool:
    """Return True if `key` is serialized structurally rather than via str()."""
    if isinstance(key, _COMPOSITE_TYPES):
        return True
    return dataclasses.is_dataclass(key) and not isinstance(key, type)


def _sort_token(value: Any) -> Tuple[str, str]:
    # Type name breaks ties between members with the same text, e.g. 1 and "1"
    return canonical_key(value), type(value).__name__


def _mapping_key(key: Any) -> str:
    return key if isinstance(key, str) else canonical_key(key)


def _normalize(obj: Any) -> Any:
    # Rewrite `obj` into values orjson serializes deterministically
    if isinstance(obj, CanonicalKey):
        return obj.canonical_key()
    if isinstance(obj, BaseModel):
        return _normalize(obj.model_dump(mode="json"))
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {
            field.name: _normalize(getattr(obj, field.name))
            for field in dataclasses.fields(obj)
        }
    if isinstance(obj, Mapping):
        items = sorted(
            ((_mapping_key(k), type(k).__name__, v) for k, v in obj.items()),
            key=lambda item: item[:2],
        )
        return {text: _normalize(value) for text, _, value in items}
    if isinstance(obj, (list, tuple)):
        return [_normalize(item) for item in obj]
    if isinstance(obj, (set, frozenset)):
        return [_normalize(item) for item in sorted(obj, key=_sort_token)]
    if isinstance(obj, bool):
        return obj
    if isinstance(obj, float) and math.isfinite(obj) and obj.is_integer():
        return _normalize(int(obj))
    if isinstance(obj, int) and not _INT_MIN <= obj <= _INT_MAX:
        return orjson.Fragment(str(int(obj)))
    return obj


def canonical_key(key: Any) -> str:
    """
    Return the canonical lookup identity for `key`.

    Parameters
    ----------
    key : Any
        Primitive value, composite value, or :class:`CanonicalKey`.

    Returns
    -------
    str
        Deterministic string identity. Structurally equal composite keys
        produce the same string regardless of mapping insertion order.

    Raises
    ------
    KeyNormalizationError
        If a composite key contains values that cannot be serialized.

    Examples
    --------
    >>> canonical_key(42)
    '42'
    >>> canonical_key({"b": 1, "a": 2.0})
    '{"a":2,"b":1}'
    """
    if isinstance(key, CanonicalKey):
        return key.canonical_key()
    if not is_composite(key):
        if isinstance(key, float) and math.isfinite(key) and key.is_integer():
            return str(int(key))
        return str(key)
    try:
        return orjson.dumps(_normalize(key), option=orjson.OPT_SORT_KEYS).decode(
            "utf-8"
        )
    except (orjson.JSONEncodeError, TypeError) as exc:
        raise KeyNormalizationError(
            f"Cannot build a cache key from {type(key).__name__}: {exc}"
        ) from exc
