from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_HISTORY_LIMIT = 10


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InteractionKind(str, Enum):
    view = "view"
    like = "like"
    purchase = "purchase"
    review = "review"


class PreferenceQuery(BaseModel):
    """One snapshot of a user's stated fragrance preferences."""

    model_config = ConfigDict(frozen=True)

    season: str | None = None
    occasion: str | None = None
    intensity: float = Field(default=50, ge=0, le=100)
    favorite_notes: tuple[str, ...] = ()
    price_range: str | None = None
    submitted_at: datetime = Field(default_factory=_utcnow)


class Interaction(BaseModel):
    model_config = ConfigDict(frozen=True)

    item_id: int
    kind: InteractionKind
    rating: float | None = Field(default=None, ge=1.0, le=5.0)
    timestamp: datetime = Field(default_factory=_utcnow)


class Purchase(BaseModel):
    model_config = ConfigDict(frozen=True)

    item_id: int
    price: float
    timestamp: datetime = Field(default_factory=_utcnow)


@dataclass
class UserProfile:
    user_id: str
    history_limit: int = DEFAULT_HISTORY_LIMIT
    preferences: deque[PreferenceQuery] = field(init=False, default_factory=deque)
    interactions: list[Interaction] = field(default_factory=list)
    purchases: list[Purchase] = field(default_factory=list)

    def __post_init__(self) -> None:
        # deque(maxlen) drops the oldest entry in the same step as the append
        self.preferences = deque(maxlen=self.history_limit)

    @property
    def latest_preference(self) -> PreferenceQuery | None:
        return self.preferences[-1] if self.preferences else None
