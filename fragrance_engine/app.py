from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request

from .analytics.aggregator import compute_analytics
from .analytics.store import get_events
from .catalog.data_store import get_catalog
from .catalog.models import CatalogItem
from .recommendations import service
from .recommendations.cache import get_cache_stats
from .recommendations.engine import RecommendationEngine
from .recommendations.models import (
    InteractionRequest,
    PreferencesIn,
    ProfileResponse,
    RecommendationRequest,
    RecommendationResponse,
    SimilarUserOut,
    StatusResponse,
)


def require_user(x_user_id: str | None = Header(default=None)) -> str:
    """Raise 401 if the caller did not identify a user."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Not authenticated")
    return x_user_id.strip()


def get_engine(request: Request) -> RecommendationEngine:
    return request.app.state.engine


def create_app(engine: RecommendationEngine | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if getattr(app.state, "engine", None) is None:
            app.state.engine = RecommendationEngine(get_catalog())
        await app.state.engine.start()
        yield
        await app.state.engine.close()

    app = FastAPI(title="Fragrance Recommendation API", version="1.0.0", lifespan=lifespan)
    app.state.engine = engine

    # ── Public endpoints ─────────────────────────────────────────────────

    @app.get("/health")
    def health(engine: RecommendationEngine = Depends(get_engine)) -> dict[str, str]:
        return {"status": "ok", "mode": engine.mode.value}

    @app.get("/trending")
    def trending(
        limit: int = Query(default=5, ge=1, le=50),
        engine: RecommendationEngine = Depends(get_engine),
    ) -> dict:
        return {
            "trending": [
                {"item": item.model_dump(), "trend_score": score}
                for item, score in engine.trending(limit)
            ]
        }

    @app.get("/catalog", response_model=list[CatalogItem])
    def catalog(engine: RecommendationEngine = Depends(get_engine)) -> list[CatalogItem]:
        return list(engine.catalog)

    # ── User endpoints ───────────────────────────────────────────────────

    @app.post("/recommendations", response_model=RecommendationResponse)
    async def recommendations(
        body: RecommendationRequest,
        user_id: str = Depends(require_user),
        engine: RecommendationEngine = Depends(get_engine),
    ) -> RecommendationResponse:
        return await service.get_recommendations(engine, user_id, body)

    @app.post("/interaction", response_model=StatusResponse)
    async def interaction(
        body: InteractionRequest,
        user_id: str = Depends(require_user),
        engine: RecommendationEngine = Depends(get_engine),
    ) -> StatusResponse:
        if body.item_id not in engine.catalog:
            raise HTTPException(status_code=404, detail="Unknown fragrance")
        await service.record_interaction(engine, user_id, body.item_id, body.kind, body.rating)
        return StatusResponse(status="recorded", message="Interaction recorded successfully")

    @app.get("/profile", response_model=ProfileResponse)
    def profile(
        user_id: str = Depends(require_user),
        engine: RecommendationEngine = Depends(get_engine),
    ) -> ProfileResponse:
        return service.get_profile(engine, user_id)

    @app.put("/preferences", response_model=StatusResponse)
    async def preferences(
        body: PreferencesIn,
        user_id: str = Depends(require_user),
        engine: RecommendationEngine = Depends(get_engine),
    ) -> StatusResponse:
        await service.update_preferences(engine, user_id, body)
        return StatusResponse(status="updated", message="Preferences updated successfully")

    @app.get("/similar-users")
    def similar_users(
        user_id: str = Depends(require_user),
        engine: RecommendationEngine = Depends(get_engine),
    ) -> dict[str, list[SimilarUserOut]]:
        return {"similar_users": service.get_similar_users(engine, user_id)}

    # ── Operations endpoints ─────────────────────────────────────────────

    @app.get("/analytics")
    def analytics() -> dict:
        return compute_analytics(get_events())

    @app.get("/cache/stats")
    def cache_stats() -> dict:
        return get_cache_stats()

    return app


app = create_app()
