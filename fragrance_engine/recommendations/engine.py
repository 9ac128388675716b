"""
Recommendation orchestrator.

Pipeline per request:
  profile update -> score (rule or model) -> collaborative boost
  -> confidence -> explanation -> sort (stable) -> truncate

``generate_recommendations`` never raises. Any failure inside the pipeline
is logged and answered with the popularity-ranked fallback list, wrapped in
``FallbackDelivered`` so callers can tell it apart from a full run.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Coroutine, Sequence
from typing import Any

from ..catalog.models import Catalog, CatalogItem
from ..config import DEFAULT_ENGINE_CONFIG, EngineConfig
from ..profiles.models import (
    Interaction,
    InteractionKind,
    PreferenceQuery,
    Purchase,
    UserProfile,
)
from ..profiles.store import ProfileStore
from .collaborative import BoostStrategy, InteractionBoost
from .confidence import blend_confidence
from .errors import ComputationFault, ModelUnavailable
from .explanation import compose_explanation
from .model_scorer import ModelScorer
from .models import (
    FALLBACK_EXPLANATION,
    Delivered,
    FallbackDelivered,
    RankedResult,
    RecommendationOutcome,
    ScoredCandidate,
    ScoringMode,
    SimilarUser,
)
from .scoring import RuleScorer, clamp
from .similarity import SimilarityEngine
from .trending import trending_items

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 5
FALLBACK_FACTORS = ("Trending fragrance",)


class RecommendationEngine:
    def __init__(
        self,
        catalog: Catalog,
        config: EngineConfig = DEFAULT_ENGINE_CONFIG,
        profiles: ProfileStore | None = None,
        model_scorer: ModelScorer | None = None,
        booster: BoostStrategy | None = None,
        rule_scorer: RuleScorer | None = None,
        similarity: SimilarityEngine | None = None,
    ) -> None:
        self.catalog = catalog
        self.config = config
        self.profiles = profiles or ProfileStore(history_limit=config.history_limit)
        self.rule_scorer = rule_scorer or RuleScorer(config)
        self.similarity = similarity or SimilarityEngine(config)
        self.booster: BoostStrategy = booster or InteractionBoost(config)

        self._mode = ScoringMode.rule
        self._model: ModelScorer | None = None
        self._model_load_attempted = False
        self._tasks: set[asyncio.Task] = set()
        if model_scorer is not None:
            self._model_load_attempted = True
            self.activate_model(model_scorer)

    # ── Scoring mode ────────────────────────────────────────────────────

    @property
    def mode(self) -> ScoringMode:
        return self._mode

    def activate_model(self, scorer: ModelScorer) -> None:
        """Switch to model scoring. Requests already in flight keep their mode."""
        self._model = scorer
        self._mode = ScoringMode.model
        logger.info("Model scoring activated")

    async def start(self, wait: bool = False) -> None:
        """Make the one attempt to load the configured model.

        Loading runs in the background unless ``wait`` is set; until it
        finishes, requests are served by the rule scorer. A failed load
        leaves the engine in rule mode for good.
        """
        if self._model_load_attempted or self.config.model_path is None:
            return
        self._model_load_attempted = True
        task = self._spawn(self._load_model())
        if wait:
            await task

    async def _load_model(self) -> None:
        try:
            scorer = await asyncio.to_thread(ModelScorer.load, self.config.model_path)
        except ModelUnavailable:
            logger.info("Scoring model not found, using rule-based recommendations", exc_info=True)
            return
        self.activate_model(scorer)

    async def close(self) -> None:
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
        self.profiles.close()

    # ── Public operations ───────────────────────────────────────────────

    async def generate_recommendations(
        self,
        query: PreferenceQuery,
        user_id: str,
        limit: int = DEFAULT_LIMIT,
    ) -> RecommendationOutcome:
        try:
            results, mode = await self._run_pipeline(query, user_id, limit)
        except Exception as exc:
            logger.warning(
                "Recommendation pipeline failed for user %s, serving popular fallback",
                user_id,
                exc_info=True,
            )
            return FallbackDelivered(results=self.fallback_recommendations(limit), cause=exc)
        return Delivered(results=results, mode=mode)

    async def record_interaction(
        self,
        user_id: str,
        item_id: int,
        kind: InteractionKind | str,
        rating: float | None = None,
    ) -> None:
        interaction = Interaction(item_id=item_id, kind=InteractionKind(kind), rating=rating)
        async with self.profiles.lock(user_id):
            self.profiles.append_interaction(user_id, interaction)
            if interaction.kind is InteractionKind.purchase:
                item = self.catalog.get(item_id)
                if item is not None:
                    self.profiles.append_purchase(
                        user_id, Purchase(item_id=item_id, price=item.price)
                    )

        model = self._model
        if self._mode is ScoringMode.model and model is not None and rating is not None:
            self._spawn(model.learn(user_id, item_id, rating))

    async def update_preferences(self, user_id: str, query: PreferenceQuery) -> UserProfile:
        async with self.profiles.lock(user_id):
            return self.profiles.append_query(user_id, query)

    def find_similar_users(self, user_id: str) -> list[SimilarUser]:
        return self.similarity.similar_users(user_id, self.profiles)

    def get_profile(self, user_id: str) -> UserProfile | None:
        return self.profiles.get(user_id)

    def trending(self, limit: int = DEFAULT_LIMIT) -> list[tuple[CatalogItem, float]]:
        return trending_items(self.catalog, self.profiles, self.config.interaction_weights, limit)

    def fallback_recommendations(self, limit: int = DEFAULT_LIMIT) -> tuple[RankedResult, ...]:
        if not isinstance(limit, int) or limit < 1:
            limit = DEFAULT_LIMIT
        return tuple(
            RankedResult(
                item=item,
                score=clamp(item.popularity * 100),
                matching_factors=FALLBACK_FACTORS,
                collaborative_boost=0.0,
                confidence=clamp(item.popularity * 100),
                explanation=FALLBACK_EXPLANATION,
            )
            for item in self.catalog.by_popularity()[:limit]
        )

    # ── Pipeline ────────────────────────────────────────────────────────

    async def _run_pipeline(
        self,
        query: PreferenceQuery,
        user_id: str,
        limit: int,
    ) -> tuple[tuple[RankedResult, ...], ScoringMode]:
        if not isinstance(limit, int) or limit < 1:
            raise ComputationFault(f"Invalid result limit: {limit!r}")

        async with self.profiles.lock(user_id):
            self.profiles.append_query(user_id, query)
            candidates, mode = await self._score(query)
            similar = self.similarity.similar_users(user_id, self.profiles)
            ranked = [self._rank(candidate, query, similar) for candidate in candidates]

        ranked.sort(key=lambda result: -result.confidence)
        return tuple(ranked[:limit]), mode

    async def _score(self, query: PreferenceQuery) -> tuple[list[ScoredCandidate], ScoringMode]:
        # Snapshot the strategy so a late model activation does not switch
        # this request halfway.
        mode, model = self._mode, self._model
        if mode is ScoringMode.model and model is not None:
            try:
                candidates = await asyncio.wait_for(
                    model.score(query, list(self.catalog)),
                    timeout=self.config.model_timeout,
                )
                return candidates, ScoringMode.model
            except (asyncio.TimeoutError, ModelUnavailable):
                logger.warning(
                    "Model scoring unavailable for this request, using rules", exc_info=True
                )
        return self.rule_scorer.candidates(query, self.catalog), ScoringMode.rule

    def _rank(
        self,
        candidate: ScoredCandidate,
        query: PreferenceQuery,
        similar: Sequence[SimilarUser],
    ) -> RankedResult:
        boost = self.booster(candidate.item.id, similar, self.profiles)
        boost = clamp(float(boost), 0.0, 100.0 - candidate.score)
        confidence = blend_confidence(candidate.score + boost, candidate.item, query, self.config)
        return RankedResult(
            item=candidate.item,
            score=candidate.score,
            matching_factors=candidate.matching_factors,
            collaborative_boost=boost,
            confidence=confidence,
            explanation=compose_explanation(candidate.matching_factors, candidate.item, boost),
        )

    # ── Background tasks ────────────────────────────────────────────────

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.warning("Background task failed", exc_info=task.exception())
