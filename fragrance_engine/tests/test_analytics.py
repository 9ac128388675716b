from __future__ import annotations

from fragrance_engine.analytics.aggregator import compute_analytics
from fragrance_engine.analytics.store import clear_events, get_events, record_event


def test_analytics_empty():
    body = compute_analytics([])
    assert body["total_requests"] == 0
    assert body["avg_response_time_ms"] == 0.0
    assert body["fallback_rate"] == 0.0


def test_analytics_summarizes_requests_and_interactions():
    clear_events()
    record_event("recommendation", "alice", {
        "season": "Spring", "favorite_notes": ["citrus", "woody"], "status": "delivered",
        "mode": "rule", "response_time_ms": 10.0, "cache_hit": False,
    })
    record_event("recommendation", "bob", {
        "season": "spring", "favorite_notes": ["citrus"], "status": "fallback",
        "mode": None, "response_time_ms": 20.0, "cache_hit": True,
    })
    record_event("interaction", "alice", {"item_id": 3, "kind": "like", "rating": None})

    body = compute_analytics(get_events())

    assert body["total_requests"] == 2
    assert body["avg_response_time_ms"] == 15.0
    assert body["fallback_rate"] == 50.0
    assert body["mode_usage"] == {"rule": 1}
    assert body["top_seasons"] == [{"name": "spring", "count": 2}]
    assert body["top_notes"][0] == {"name": "citrus", "count": 2}
    assert body["interactions"]["by_kind"] == {"like": 1}
    assert body["cache_stats"]["hit_rate"] == 50.0


def test_get_events_filters_by_type():
    clear_events()
    record_event("recommendation", "alice", {})
    record_event("interaction", "alice", {"item_id": 1, "kind": "view"})
    assert len(get_events("interaction")) == 1
