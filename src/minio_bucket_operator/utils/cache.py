"""Short lived cache for custom resources read from the API server."""

from __future__ import annotations

import os
import threading
import time
from typing import Any

_cache: dict[str, tuple[float, Any]] = {}
_lock = threading.Lock()


def _ttl() -> float:
    return float(os.getenv("INSTANCE_CACHE_TTL_SECONDS", "30"))


def make_cache_key(kind: str, namespace: str, name: str) -> str:
    return f"{kind}/{namespace}/{name}"


def get_cached_object(key: str) -> Any | None:
    """Return a cached object, or None if absent or expired."""
    with _lock:
        entry = _cache.get(key)
        if entry is None:
            return None
        stored_at, obj = entry
        if time.monotonic() - stored_at > _ttl():
            del _cache[key]
            return None
        return obj


def set_cached_object(key: str, obj: Any) -> None:
    with _lock:
        _cache[key] = (time.monotonic(), obj)


def invalidate_cache(key: str | None = None) -> None:
    """Drop one cached object, or all of them."""
    with _lock:
        if key is None:
            _cache.clear()
        else:
            _cache.pop(key, None)
