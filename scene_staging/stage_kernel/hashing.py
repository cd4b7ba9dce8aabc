"""Stable content hashing for stages, props and components.

Hashes are derived from a canonical JSON rendering so they survive a process
restart. Folding is ordering-sensitive and wraps to a signed 64-bit integer.
"""
from __future__ import annotations

import hashlib
import json
from typing import Any, Iterable

NULL_HASH = -1

_MASK = (1 << 64) - 1
_SIGN = 1 << 63


def _wrap(value: int) -> int:
    value &= _MASK
    return value - (1 << 64) if value & _SIGN else value


def _key(key: Any) -> str:
    if isinstance(key, str):
        return key
    if isinstance(key, bool):
        return "true" if key else "false"
    if key is None:
        return "null"
    return str(key)


def _canonical(value: Any) -> Any:
    """Rewrite a payload into what it looks like after a JSON round trip.

    Mapping keys become strings and tuples/sets become lists, so values that
    encode to the same JSON also hash the same.
    """
    if isinstance(value, dict):
        return {_key(key): _canonical(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_canonical(item) for item in value]
    if isinstance(value, (set, frozenset)):
        return sorted((_canonical(item) for item in value), key=repr)
    return value


def stable_hash(value: Any) -> int:
    """Hash any JSON-ish value. None maps to the fixed sentinel. Never raises."""
    if value is None:
        return NULL_HASH
    try:
        body = json.dumps(_canonical(value), sort_keys=True, separators=(",", ":"), default=str)
    except (TypeError, ValueError, RecursionError):
        body = repr(value)
    digest = hashlib.sha256(body.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big", signed=True)


def combine(seed: int, value_hash: int, factor: int = 31) -> int:
    return _wrap(seed * factor + value_hash)


def fold(seed: int, hashes: Iterable[int], factor: int = 31) -> int:
    for value_hash in hashes:
        seed = combine(seed, value_hash, factor)
    return seed
