"""
Trained-model scoring strategy.

Wraps an estimator exposing ``predict(X)`` (scikit-learn style) that maps one
encoded preference vector to one value per catalog item. Values are scaled
to 0-100. The estimator is loaded once from a joblib file; producing it is
outside this package.
"""
from __future__ import annotations

import asyncio
import logging
from collections import deque
from pathlib import Path
from typing import Any

import joblib
import numpy as np

from ..catalog.models import CatalogItem
from ..config import MODEL_OCCASIONS, SEASONS
from ..profiles.models import PreferenceQuery
from .errors import ComputationFault, ModelUnavailable
from .models import ScoredCandidate
from .scoring import normalize_occasion

logger = logging.getLogger(__name__)

MODEL_FACTOR = "Model-derived recommendation"
FEATURE_WIDTH = 1 + len(SEASONS) + len(MODEL_OCCASIONS)
FEEDBACK_LIMIT = 1000


def encode_preferences(query: PreferenceQuery) -> np.ndarray:
    """Encode a query as ``[intensity, season one-hot, occasion one-hot]``."""
    season = query.season.lower() if query.season else None
    occasion = normalize_occasion(query.occasion) if query.occasion else None
    features = [float(query.intensity)]
    features.extend(1.0 if season == s else 0.0 for s in SEASONS)
    features.extend(1.0 if occasion == o else 0.0 for o in MODEL_OCCASIONS)
    return np.asarray(features, dtype=float).reshape(1, -1)


class ModelScorer:
    def __init__(self, estimator: Any, feedback_limit: int = FEEDBACK_LIMIT) -> None:
        if not hasattr(estimator, "predict"):
            raise ModelUnavailable("Estimator does not implement predict()")
        self.estimator = estimator
        # Oldest ratings drop once the limit is reached
        self.feedback: deque[dict[str, Any]] = deque(maxlen=feedback_limit)

    @classmethod
    def load(cls, path: Path | str) -> ModelScorer:
        try:
            estimator = joblib.load(path)
        except Exception as exc:
            raise ModelUnavailable(f"Could not load scoring model from {path}") from exc
        logger.info("Loaded scoring model from %s", path)
        return cls(estimator)

    def _predict(self, features: np.ndarray) -> np.ndarray:
        return np.asarray(self.estimator.predict(features), dtype=float).ravel()

    async def score(self, query: PreferenceQuery, catalog: list[CatalogItem]) -> list[ScoredCandidate]:
        if not catalog:
            raise ComputationFault("Cannot score an empty catalog")
        predictions = await asyncio.to_thread(self._predict, encode_preferences(query))
        if predictions.shape[0] != len(catalog):
            raise ComputationFault(
                f"Model returned {predictions.shape[0]} scores for {len(catalog)} items"
            )
        scores = np.clip(np.nan_to_num(predictions) * 100, 0, 100)
        return [
            ScoredCandidate(item=item, score=float(score), matching_factors=(MODEL_FACTOR,))
            for item, score in zip(catalog, scores)
        ]

    async def learn(self, user_id: str, item_id: int, rating: float) -> None:
        """Queue a rating for the next incremental training run."""
        self.feedback.append({"user_id": user_id, "item_id": item_id, "rating": rating})
        logger.info(
            "Queued model update from user %s rating %s for fragrance %s",
            user_id, rating, item_id,
        )
