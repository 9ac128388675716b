from __future__ import annotations

from ..config import DEFAULT_ENGINE_CONFIG, EngineConfig
from ..profiles.models import UserProfile
from ..profiles.store import ProfileStore
from .models import SimilarUser

SEASON_SIMILARITY = 0.2
OCCASION_SIMILARITY = 0.2
INTENSITY_SIMILARITY = 0.3
NOTES_SIMILARITY = 0.3
INTENSITY_TOLERANCE = 20
_FACTOR_COUNT = 4


def profile_similarity(a: UserProfile | None, b: UserProfile | None) -> float:
    """Similarity in [0, 1] of the latest preference query of two profiles.

    Older history is ignored. A profile without history scores 0.
    """
    pref_a = a.latest_preference if a else None
    pref_b = b.latest_preference if b else None
    if pref_a is None or pref_b is None:
        return 0.0

    similarity = 0.0
    if pref_a.season == pref_b.season:
        similarity += SEASON_SIMILARITY
    if pref_a.occasion == pref_b.occasion:
        similarity += OCCASION_SIMILARITY
    if abs(pref_a.intensity - pref_b.intensity) <= INTENSITY_TOLERANCE:
        similarity += INTENSITY_SIMILARITY

    notes_a = {n.lower() for n in pref_a.favorite_notes}
    notes_b = {n.lower() for n in pref_b.favorite_notes}
    if notes_a and notes_b:
        similarity += len(notes_a & notes_b) / max(len(notes_a), len(notes_b)) * NOTES_SIMILARITY

    return similarity / _FACTOR_COUNT


class SimilarityEngine:
    def __init__(self, config: EngineConfig = DEFAULT_ENGINE_CONFIG) -> None:
        self.threshold = config.similarity_threshold
        self.max_results = config.max_similar_users

    def similar_users(self, user_id: str, profiles: ProfileStore) -> list[SimilarUser]:
        """Other users above the threshold, most similar first.

        ``sorted`` is stable, so equal similarities keep store insertion order.
        """
        target = profiles.get(user_id)
        if target is None:
            return []
        matches = []
        for other in profiles:
            if other.user_id == user_id:
                continue
            similarity = profile_similarity(target, other)
            if similarity > self.threshold:
                matches.append(SimilarUser(other.user_id, similarity))
        matches.sort(key=lambda m: -m.similarity)
        return matches[: self.max_results]
