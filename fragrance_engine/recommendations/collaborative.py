"""
Collaborative boosting.

A boost strategy maps ``(item_id, similar_users, profiles)`` to a
non-negative number of points. The default strategy aggregates what similar
users did with the same item: likes, purchases and good reviews count,
weighted by how similar the user is and decayed by how old the signal is.
"""
from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from typing import Protocol

from ..config import DEFAULT_ENGINE_CONFIG, EngineConfig
from ..profiles.models import Interaction, InteractionKind
from ..profiles.store import ProfileStore
from .models import SimilarUser

_SECONDS_PER_DAY = 86_400
_GOOD_REVIEW = 4.0


class BoostStrategy(Protocol):
    def __call__(
        self,
        item_id: int,
        similar_users: Sequence[SimilarUser],
        profiles: ProfileStore,
    ) -> float: ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InteractionBoost:
    def __init__(
        self,
        config: EngineConfig = DEFAULT_ENGINE_CONFIG,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.weights = config.interaction_weights
        self.points_per_signal = config.boost_points_per_signal
        self.max_boost = config.max_boost
        self.half_life_days = config.boost_half_life_days
        self.clock = clock

    def _weight(self, interaction: Interaction) -> float:
        if interaction.kind == InteractionKind.review and (
            interaction.rating is None or interaction.rating < _GOOD_REVIEW
        ):
            return 0.0
        return self.weights.get(interaction.kind.value, 0.0)

    def _decay(self, interaction: Interaction, now: datetime) -> float:
        if self.half_life_days <= 0:
            return 1.0
        age_days = max(0.0, (now - interaction.timestamp).total_seconds() / _SECONDS_PER_DAY)
        return 0.5 ** (age_days / self.half_life_days)

    def signal(
        self,
        item_id: int,
        similar_users: Sequence[SimilarUser],
        profiles: ProfileStore,
    ) -> float:
        now = self.clock()
        total = 0.0
        for user in similar_users:
            profile = profiles.get(user.user_id)
            if profile is None:
                continue
            for interaction in profile.interactions:
                if interaction.item_id == item_id:
                    total += user.similarity * self._weight(interaction) * self._decay(interaction, now)
        return total

    def __call__(
        self,
        item_id: int,
        similar_users: Sequence[SimilarUser],
        profiles: ProfileStore,
    ) -> float:
        if not similar_users:
            return 0.0
        boost = self.signal(item_id, similar_users, profiles) * self.points_per_signal
        return min(self.max_boost, max(0.0, boost))
