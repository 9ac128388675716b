from __future__ import annotations

import asyncio

from fragrance_engine.profiles.insights import compute_insights, profile_completeness
from fragrance_engine.profiles.models import (
    Interaction,
    InteractionKind,
    PreferenceQuery,
    Purchase,
)
from fragrance_engine.profiles.store import ProfileStore


def test_profile_created_on_first_reference():
    store = ProfileStore()
    assert "alice" not in store

    profile = store.get_or_create("alice")

    assert "alice" in store
    assert store.get("alice") is profile
    assert list(profile.preferences) == []


def test_history_keeps_ten_most_recent_queries():
    store = ProfileStore()
    for intensity in range(12):
        store.append_query("alice", PreferenceQuery(intensity=intensity))

    history = list(store.get("alice").preferences)

    assert len(history) == 10
    assert [q.intensity for q in history] == list(range(2, 12))
    assert store.get("alice").latest_preference.intensity == 11


def test_interactions_and_purchases_are_unbounded():
    store = ProfileStore()
    for i in range(25):
        store.append_interaction("bob", Interaction(item_id=i, kind=InteractionKind.view))
    store.append_purchase("bob", Purchase(item_id=1, price=180))

    profile = store.get("bob")
    assert len(profile.interactions) == 25
    assert profile.purchases[0].price == 180


def test_iteration_follows_insertion_order():
    store = ProfileStore()
    for user in ("carol", "alice", "bob"):
        store.get_or_create(user)
    assert [p.user_id for p in store] == ["carol", "alice", "bob"]


def test_lock_is_per_user():
    store = ProfileStore()
    assert store.lock("alice") is store.lock("alice")
    assert store.lock("alice") is not store.lock("bob")


def test_lock_serializes_same_user_mutation():
    store = ProfileStore()
    order: list[str] = []

    async def writer(tag: str) -> None:
        async with store.lock("alice"):
            order.append(f"{tag}-start")
            await asyncio.sleep(0)
            store.append_query("alice", PreferenceQuery())
            order.append(f"{tag}-end")

    async def scenario() -> None:
        await asyncio.gather(writer("a"), writer("b"))

    asyncio.run(scenario())

    assert order == ["a-start", "a-end", "b-start", "b-end"]
    assert len(store.get("alice").preferences) == 2


def test_close_discards_profiles():
    store = ProfileStore()
    store.append_query("alice", PreferenceQuery())
    store.close()
    assert len(store) == 0


def test_insights_summarize_history():
    store = ProfileStore()
    store.append_query("alice", PreferenceQuery(season="spring", intensity=40, favorite_notes=("Citrus", "woody")))
    store.append_query("alice", PreferenceQuery(season="Spring", intensity=60, favorite_notes=("citrus",)))
    store.append_query("alice", PreferenceQuery(season="fall", intensity=50))

    insights = compute_insights(store.get("alice"))

    assert insights["favorite_notes"] == ["citrus", "woody"]
    assert insights["preferred_intensity"] == 50.0
    assert insights["seasonal_preferences"] == {"spring": 2, "fall": 1}
    assert insights["total_interactions"] == 0


def test_insights_for_unknown_user():
    insights = compute_insights(None)
    assert insights["favorite_notes"] == []
    assert insights["preferred_intensity"] is None
    assert insights["profile_completeness"] == 0.0


def test_profile_completeness_counts_signals():
    store = ProfileStore()
    profile = store.append_query(
        "alice", PreferenceQuery(season="spring", favorite_notes=("rose",))
    )
    assert profile_completeness(profile) == 40.0

    store.append_interaction("alice", Interaction(item_id=1, kind=InteractionKind.like))
    assert profile_completeness(profile) == 60.0
