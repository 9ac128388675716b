from __future__ import annotations

from collections import Counter
from typing import Any

from .models import UserProfile

_TOP_NOTES = 5


def favorite_notes(profile: UserProfile | None, limit: int = _TOP_NOTES) -> list[str]:
    """Most frequently requested notes across the preference history."""
    if profile is None:
        return []
    counter: Counter[str] = Counter()
    for query in profile.preferences:
        for note in query.favorite_notes:
            counter[note.strip().lower()] += 1
    return [note for note, _ in counter.most_common(limit)]


def preferred_intensity(profile: UserProfile | None) -> float | None:
    if profile is None or not profile.preferences:
        return None
    values = [query.intensity for query in profile.preferences]
    return round(sum(values) / len(values), 1)


def seasonal_preferences(profile: UserProfile | None) -> dict[str, int]:
    if profile is None:
        return {}
    counter: Counter[str] = Counter(
        query.season.lower() for query in profile.preferences if query.season
    )
    return dict(counter.most_common())


def profile_completeness(profile: UserProfile | None) -> float:
    """Percentage of preference and behaviour signals the profile carries.

    Checks the latest query for season, occasion, favourite notes and price
    range, plus whether any interaction has been recorded.
    """
    if profile is None:
        return 0.0
    latest = profile.latest_preference
    signals = [
        bool(latest and latest.season),
        bool(latest and latest.occasion),
        bool(latest and latest.favorite_notes),
        bool(latest and latest.price_range),
        bool(profile.interactions),
    ]
    return round(sum(signals) / len(signals) * 100, 1)


def compute_insights(profile: UserProfile | None) -> dict[str, Any]:
    return {
        "favorite_notes": favorite_notes(profile),
        "preferred_intensity": preferred_intensity(profile),
        "seasonal_preferences": seasonal_preferences(profile),
        "total_interactions": len(profile.interactions) if profile else 0,
        "profile_completeness": profile_completeness(profile),
    }
