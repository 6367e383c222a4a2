"""Similarity search over a food store."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Protocol

from food_similarity.domain.diets import Diet
from food_similarity.domain.errors import LookupNotFoundError
from food_similarity.domain.foods import FoodRecord
from food_similarity.services.metric import FacetSelection
from food_similarity.services.ranking import DietFilteredRanker, RankedFood

_logger = logging.getLogger(__name__)


class FoodSource(Protocol):
    """Store interface used by queries."""

    def iter_foods(self) -> Iterator[FoodRecord]:
        """Return a fresh forward-only stream of stored foods."""

    def get_by_source_id(self, source_id: str) -> FoodRecord:
        """Return a food by source id or raise LookupNotFoundError."""

    def get_by_name(self, name: str) -> FoodRecord:
        """Return a food by display name or raise LookupNotFoundError."""


@dataclass
class SearchService:
    """Resolves query foods and runs diet-aware queries against a store."""

    source: FoodSource
    default_k: int = 5
    default_selection: FacetSelection = FacetSelection.ALL

    def get_food(self, query: str) -> FoodRecord:
        """Resolve a food by source id, falling back to its display name."""
        try:
            return self.source.get_by_source_id(query)
        except LookupNotFoundError:
            pass
        try:
            return self.source.get_by_name(query)
        except LookupNotFoundError:
            raise LookupNotFoundError(query) from None

    def nearest(  # noqa: PLR0913
        self,
        query: str,
        k: int | None = None,
        diet: Diet | None = None,
        selection: FacetSelection | None = None,
        *,
        same_category: bool = False,
        store_facet_distances: bool = False,
    ) -> list[RankedFood]:
        """Return the k foods most similar to the query that the diet admits."""
        query_food = self.get_food(query)
        resolved_k = k if k is not None else self.default_k
        resolved_selection = selection or self.default_selection
        results = DietFilteredRanker(diet).nearest(
            self.source.iter_foods(),
            query_food,
            resolved_k,
            resolved_selection,
            same_category=same_category,
            store_facet_distances=store_facet_distances,
        )
        _logger.info(
            "Nearest to %s: k=%s diet=%s selection=%s same_category=%s results=%s",
            query_food.name,
            resolved_k,
            diet.name if diet else None,
            resolved_selection.name,
            same_category,
            len(results),
        )
        return results

    def list_foods(self, diet: Diet | None = None) -> list[FoodRecord]:
        """Return every stored food the diet admits, in stored order."""
        return DietFilteredRanker(diet).listing(self.source.iter_foods())
