"""
Engine configuration.

Responsibilities:
- Load overrides from the project ``.env`` and the process environment.
- Hold the tunable thresholds of the ranking pipeline (rule filter,
  price brackets, similarity policy, collaborative boost weights).
- Point at the catalog snapshot and the optional trained scorer.
"""
from __future__ import annotations

import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import NamedTuple

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

_DATA_DIR = Path(__file__).resolve().parent / "data"


class PriceBracket(NamedTuple):
    low: float
    high: float
    include_high: bool = True

    def contains(self, price: float) -> bool:
        if price < self.low:
            return False
        return price <= self.high if self.include_high else price < self.high


DEFAULT_PRICE_BRACKETS: dict[str, PriceBracket] = {
    "Under $100": PriceBracket(0, 100, include_high=False),
    "$100-200": PriceBracket(100, 200),
    "$200-300": PriceBracket(200, 300),
    "Above $300": PriceBracket(300, math.inf),
}
UNKNOWN_PRICE_BRACKET = PriceBracket(0, 1000, include_high=False)

SEASONS: tuple[str, ...] = ("spring", "summer", "fall", "winter")
MODEL_OCCASIONS: tuple[str, ...] = ("daily", "evening", "special_events")

DEFAULT_INTERACTION_WEIGHTS: dict[str, float] = {
    "view": 0.0,
    "like": 1.0,
    "purchase": 2.0,
    "review": 1.0,
}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return float(raw)


def _env_path(name: str, default: Path | None) -> Path | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return Path(raw)


@dataclass(frozen=True)
class EngineConfig:
    catalog_path: Path = field(
        default_factory=lambda: _env_path("FRAGRANCE_CATALOG_PATH", _DATA_DIR / "fragrances.json")
    )
    model_path: Path | None = field(
        default_factory=lambda: _env_path("FRAGRANCE_MODEL_PATH", None)
    )
    model_timeout: float = field(
        default_factory=lambda: _env_float("FRAGRANCE_MODEL_TIMEOUT", 2.0)
    )

    # Rule scoring
    score_threshold: float = field(
        default_factory=lambda: _env_float("FRAGRANCE_SCORE_THRESHOLD", 30.0)
    )
    price_brackets: dict[str, PriceBracket] = field(
        default_factory=lambda: dict(DEFAULT_PRICE_BRACKETS)
    )
    unknown_price_bracket: PriceBracket = UNKNOWN_PRICE_BRACKET

    # Confidence blending
    budget_price_ceiling: float = 150.0
    budget_penalty: float = 15.0

    # Profiles and similarity
    history_limit: int = 10
    similarity_threshold: float = field(
        default_factory=lambda: _env_float("FRAGRANCE_SIMILARITY_THRESHOLD", 0.6)
    )
    max_similar_users: int = 5

    # Collaborative boost
    interaction_weights: dict[str, float] = field(
        default_factory=lambda: dict(DEFAULT_INTERACTION_WEIGHTS)
    )
    boost_points_per_signal: float = 2.5
    max_boost: float = 10.0
    boost_half_life_days: float = 30.0

    # Result cache
    cache_ttl: float = field(
        default_factory=lambda: _env_float("FRAGRANCE_CACHE_TTL", 1800.0)
    )

    def price_bracket(self, label: str) -> PriceBracket:
        return self.price_brackets.get(label, self.unknown_price_bracket)


DEFAULT_ENGINE_CONFIG = EngineConfig()
