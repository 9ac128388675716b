from __future__ import annotations

import time
from datetime import datetime, timezone

from ..analytics.store import record_event
from ..profiles.insights import compute_insights
from ..profiles.models import InteractionKind
from .cache import cache_get, cache_set, invalidate_all
from .engine import RecommendationEngine
from .models import (
    PreferencesIn,
    ProfileResponse,
    RecommendationRequest,
    RecommendationResponse,
    SimilarUserOut,
)


def anonymize_user_id(user_id: str) -> str:
    """Display form of a user id that does not expose the identifier."""
    return f"user_{str(user_id)[-4:]}"


def _request_event(
    request: RecommendationRequest,
    response: RecommendationResponse,
    elapsed_ms: float,
    cache_hit: bool,
) -> dict:
    prefs = request.preferences
    return {
        "season": prefs.season,
        "occasion": prefs.occasion,
        "intensity": prefs.intensity,
        "favorite_notes": prefs.favorite_notes,
        "price_range": prefs.price_range,
        "status": response.status,
        "mode": response.mode.value if response.mode else None,
        "results_returned": len(response.recommendations),
        "response_time_ms": elapsed_ms,
        "cache_hit": cache_hit,
    }


async def get_recommendations(
    engine: RecommendationEngine,
    user_id: str,
    request: RecommendationRequest,
) -> RecommendationResponse:
    start_time = time.time()

    # --- Cache check ---
    request_dict = request.model_dump()
    cached = cache_get(user_id, request_dict, ttl=engine.config.cache_ttl)
    if cached is not None:
        # A served query still lands in the user's history
        await engine.update_preferences(user_id, request.preferences.to_query())
        elapsed_ms = round((time.time() - start_time) * 1000, 1)
        record_event("recommendation", user_id, _request_event(request, cached, elapsed_ms, True))
        return cached

    outcome = await engine.generate_recommendations(
        request.preferences.to_query(), user_id, limit=request.limit,
    )
    response = RecommendationResponse(
        recommendations=list(outcome.results),
        status=outcome.status,
        mode=outcome.mode,
        timestamp=datetime.now(timezone.utc),
    )

    # Fallback lists are not cached so the next call retries the pipeline
    if not outcome.is_fallback:
        cache_set(user_id, request_dict, response)

    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    record_event("recommendation", user_id, _request_event(request, response, elapsed_ms, False))
    return response


async def record_interaction(
    engine: RecommendationEngine,
    user_id: str,
    item_id: int,
    kind: InteractionKind,
    rating: float | None = None,
) -> None:
    await engine.record_interaction(user_id, item_id, kind, rating)
    invalidate_all()
    record_event("interaction", user_id, {
        "item_id": item_id,
        "kind": kind.value,
        "rating": rating,
    })


async def update_preferences(
    engine: RecommendationEngine,
    user_id: str,
    preferences: PreferencesIn,
) -> None:
    await engine.update_preferences(user_id, preferences.to_query())
    invalidate_all()
    record_event("preferences_update", user_id, preferences.model_dump())


def get_profile(engine: RecommendationEngine, user_id: str) -> ProfileResponse:
    profile = engine.get_profile(user_id)
    return ProfileResponse(
        user_id=user_id,
        preferences=list(profile.preferences) if profile else [],
        interactions=list(profile.interactions) if profile else [],
        purchases=list(profile.purchases) if profile else [],
        insights=compute_insights(profile),
    )


def get_similar_users(engine: RecommendationEngine, user_id: str) -> list[SimilarUserOut]:
    return [
        SimilarUserOut(anonymized_id=anonymize_user_id(u.user_id), similarity=round(u.similarity, 4))
        for u in engine.find_similar_users(user_id)
    ]
