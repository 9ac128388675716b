from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, Field

from ..catalog.models import CatalogItem
from ..profiles.models import Interaction, InteractionKind, PreferenceQuery, Purchase

FALLBACK_EXPLANATION = "Popular choice among all users"


class ScoringMode(str, Enum):
    rule = "rule"
    model = "model"


class SimilarUser(NamedTuple):
    user_id: str
    similarity: float


@dataclass(frozen=True)
class ScoredCandidate:
    """Raw score of one item before collaborative adjustment."""

    item: CatalogItem
    score: float
    matching_factors: tuple[str, ...] = ()


class RankedResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    item: CatalogItem
    score: float = Field(..., ge=0, le=100)
    matching_factors: tuple[str, ...] = ()
    collaborative_boost: float = Field(default=0.0, ge=0)
    confidence: float = Field(..., ge=0, le=100)
    explanation: str


# ── Pipeline outcomes ───────────────────────────────────────────────────


@dataclass(frozen=True)
class Delivered:
    results: tuple[RankedResult, ...]
    mode: ScoringMode
    status: str = field(default="delivered", init=False)

    @property
    def is_fallback(self) -> bool:
        return False


@dataclass(frozen=True)
class FallbackDelivered:
    results: tuple[RankedResult, ...]
    cause: BaseException
    status: str = field(default="fallback", init=False)

    @property
    def is_fallback(self) -> bool:
        return True

    @property
    def mode(self) -> None:
        return None


RecommendationOutcome = Delivered | FallbackDelivered


# ── API schemas ─────────────────────────────────────────────────────────


class PreferencesIn(BaseModel):
    season: str | None = None
    occasion: str | None = None
    intensity: float = Field(default=50, ge=0, le=100)
    favorite_notes: list[str] = Field(default_factory=list)
    price_range: str | None = Field(
        default=None, description='Price bracket label, e.g. "$100-200"'
    )

    def to_query(self) -> PreferenceQuery:
        return PreferenceQuery(
            season=self.season,
            occasion=self.occasion,
            intensity=self.intensity,
            favorite_notes=tuple(self.favorite_notes),
            price_range=self.price_range,
        )


class RecommendationRequest(BaseModel):
    preferences: PreferencesIn = Field(default_factory=PreferencesIn)
    limit: int = Field(default=5, ge=1, le=50)


class RecommendationResponse(BaseModel):
    recommendations: list[RankedResult]
    status: str
    mode: ScoringMode | None = None
    timestamp: datetime


class InteractionRequest(BaseModel):
    item_id: int
    kind: InteractionKind
    rating: float | None = Field(default=None, ge=1.0, le=5.0)


class StatusResponse(BaseModel):
    status: str
    message: str | None = None


class SimilarUserOut(BaseModel):
    anonymized_id: str
    similarity: float


class ProfileResponse(BaseModel):
    user_id: str
    preferences: list[PreferenceQuery]
    interactions: list[Interaction]
    purchases: list[Purchase]
    insights: dict[str, Any]
