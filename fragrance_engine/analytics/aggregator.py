from __future__ import annotations

from collections import Counter
from typing import Any


def _top(counter: Counter[str], n: int = 10) -> list[dict[str, Any]]:
    return [{"name": name, "count": count} for name, count in counter.most_common(n)]


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    requests = [e for e in events if e["type"] == "recommendation"]
    interactions = [e for e in events if e["type"] == "interaction"]
    total = len(requests)

    # Average response time
    times = [r["response_time_ms"] for r in requests if "response_time_ms" in r]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    # Pipeline health
    fallbacks = sum(1 for r in requests if r.get("status") == "fallback")
    mode_usage = Counter(r["mode"] for r in requests if r.get("mode"))

    # Preference signals
    season_counter: Counter[str] = Counter()
    occasion_counter: Counter[str] = Counter()
    note_counter: Counter[str] = Counter()
    for r in requests:
        if r.get("season"):
            season_counter[r["season"].lower()] += 1
        if r.get("occasion"):
            occasion_counter[r["occasion"].lower()] += 1
        for note in r.get("favorite_notes", []) or []:
            note_counter[note.lower()] += 1

    # Interactions
    kind_counter = Counter(i["kind"] for i in interactions)
    item_counter = Counter(str(i["item_id"]) for i in interactions)

    # Cache stats
    cache_hits = sum(1 for r in requests if r.get("cache_hit"))
    cache_misses = total - cache_hits

    return {
        "total_requests": total,
        "avg_response_time_ms": avg_time,
        "fallback_rate": round(fallbacks / total * 100, 1) if total else 0.0,
        "mode_usage": dict(mode_usage),
        "top_seasons": _top(season_counter),
        "top_occasions": _top(occasion_counter),
        "top_notes": _top(note_counter),
        "interactions": {
            "total": len(interactions),
            "by_kind": dict(kind_counter),
            "top_items": _top(item_counter),
        },
        "cache_stats": {
            "hits": cache_hits,
            "misses": cache_misses,
            "hit_rate": round(cache_hits / total * 100, 1) if total else 0.0,
        },
    }
