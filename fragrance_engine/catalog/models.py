from __future__ import annotations

from collections.abc import Iterable, Iterator

from pydantic import BaseModel, ConfigDict, Field


class Ingredients(BaseModel):
    model_config = ConfigDict(frozen=True)

    top: tuple[str, ...] = ()
    heart: tuple[str, ...] = ()
    base: tuple[str, ...] = ()


class CatalogItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    notes: tuple[str, ...] = ()
    intensity: float = Field(..., ge=0, le=100)
    longevity: float = 0.0
    sillage: float = 0.0
    seasons: tuple[str, ...] = ()
    occasions: tuple[str, ...] = ()
    price: float = Field(..., ge=0)
    popularity: float = Field(default=0.0, ge=0.0, le=1.0)
    rating: float = Field(default=0.0, ge=0.0, le=5.0)
    ingredients: Ingredients = Field(default_factory=Ingredients)


class Catalog:
    """Ordered, read-only snapshot of the items available for ranking."""

    def __init__(self, items: Iterable[CatalogItem]) -> None:
        self._items: tuple[CatalogItem, ...] = tuple(items)
        self._by_id: dict[int, CatalogItem] = {item.id: item for item in self._items}
        if len(self._by_id) != len(self._items):
            raise ValueError("Catalog item ids must be unique")

    def __iter__(self) -> Iterator[CatalogItem]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._by_id

    @property
    def items(self) -> tuple[CatalogItem, ...]:
        return self._items

    def get(self, item_id: int) -> CatalogItem | None:
        return self._by_id.get(item_id)

    def by_popularity(self) -> list[CatalogItem]:
        """Items sorted by popularity, highest first; ties keep catalog order."""
        return sorted(self._items, key=lambda item: -item.popularity)
