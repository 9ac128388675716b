from __future__ import annotations

import asyncio
from collections.abc import Iterator

from .models import (
    DEFAULT_HISTORY_LIMIT,
    Interaction,
    PreferenceQuery,
    Purchase,
    UserProfile,
)


class ProfileStore:
    """In-memory mapping of user id to profile.

    Profiles are created on first reference and live until ``close()``;
    nothing is persisted. Iteration follows insertion order, which is also
    the tie-break order for similar-user ranking.
    """

    def __init__(self, history_limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        self.history_limit = history_limit
        self._profiles: dict[str, UserProfile] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def __len__(self) -> int:
        return len(self._profiles)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._profiles

    def __iter__(self) -> Iterator[UserProfile]:
        return iter(list(self._profiles.values()))

    def get(self, user_id: str) -> UserProfile | None:
        return self._profiles.get(user_id)

    def get_or_create(self, user_id: str) -> UserProfile:
        profile = self._profiles.get(user_id)
        if profile is None:
            profile = UserProfile(user_id=user_id, history_limit=self.history_limit)
            self._profiles[user_id] = profile
        return profile

    def lock(self, user_id: str) -> asyncio.Lock:
        """Per-user lock serialising profile mutation and pipeline reads."""
        lock = self._locks.get(user_id)
        if lock is None:
            lock = self._locks[user_id] = asyncio.Lock()
        return lock

    def append_query(self, user_id: str, query: PreferenceQuery) -> UserProfile:
        profile = self.get_or_create(user_id)
        profile.preferences.append(query)
        return profile

    def append_interaction(self, user_id: str, interaction: Interaction) -> UserProfile:
        profile = self.get_or_create(user_id)
        profile.interactions.append(interaction)
        return profile

    def append_purchase(self, user_id: str, purchase: Purchase) -> UserProfile:
        profile = self.get_or_create(user_id)
        profile.purchases.append(purchase)
        return profile

    def close(self) -> None:
        self._profiles.clear()
        self._locks.clear()
