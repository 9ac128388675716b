"""
Short-lived result cache for recommendation responses.

Entries are keyed by user and request. A ranking depends on other users too:
their interactions feed the collaborative boost, so any recorded interaction
or preference update drops every entry, not only the caller's. A new query
that shifts who counts as similar is not tracked; entries then lag for at
most the TTL.
"""
from __future__ import annotations

import hashlib
import json
import logging
import time
from typing import Any

from ..config import DEFAULT_ENGINE_CONFIG

logger = logging.getLogger(__name__)

_cache: dict[str, dict[str, dict[str, Any]]] = {}
_hits: int = 0
_misses: int = 0
_DEFAULT_TTL = DEFAULT_ENGINE_CONFIG.cache_ttl


def _make_key(request_dict: dict) -> str:
    normalized = json.dumps(request_dict, sort_keys=True, default=str)
    return hashlib.sha256(normalized.encode()).hexdigest()[:16]


def cache_get(user_id: str, request_dict: dict, ttl: float = _DEFAULT_TTL) -> Any | None:
    global _hits, _misses
    key = _make_key(request_dict)
    entries = _cache.get(user_id, {})
    entry = entries.get(key)
    if entry and time.time() - entry["created_at"] < ttl:
        _hits += 1
        logger.debug("Cache hit for user %s", user_id)
        return entry["value"]
    if entry:
        del entries[key]
    _misses += 1
    return None


def cache_set(user_id: str, request_dict: dict, value: Any) -> None:
    key = _make_key(request_dict)
    _cache.setdefault(user_id, {})[key] = {"value": value, "created_at": time.time()}


def invalidate_all() -> None:
    """Drop every cached response, keeping the hit/miss counters."""
    _cache.clear()


def get_cache_stats() -> dict:
    total = _hits + _misses
    return {
        "size": sum(len(entries) for entries in _cache.values()),
        "users": len(_cache),
        "hits": _hits,
        "misses": _misses,
        "hit_rate": round(_hits / total * 100, 1) if total > 0 else 0.0,
    }


def clear_cache() -> None:
    global _hits, _misses
    _cache.clear()
    _hits = 0
    _misses = 0
