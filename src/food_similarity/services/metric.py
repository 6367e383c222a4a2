"""Composite L1 distance over selected nutrient facets."""

import math
from collections.abc import Iterable
from enum import Enum

from food_similarity.domain.foods import FoodRecord
from food_similarity.domain.nutrients import Facet


class FacetSelection(Enum):
    """Which facets take part in the composite distance."""

    ALL = (Facet.MACRONUTRIENTS, Facet.MINERALS, Facet.VITAMINS)
    MACRONUTRIENTS = (Facet.MACRONUTRIENTS,)
    MICRONUTRIENTS = (Facet.MINERALS, Facet.VITAMINS)
    MINERALS = (Facet.MINERALS,)
    VITAMINS = (Facet.VITAMINS,)

    @property
    def facets(self) -> tuple[Facet, ...]:
        return self.value

    @classmethod
    def parse(cls, value: str) -> "FacetSelection":
        """Resolve a selection by name, case-insensitively."""
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown facet selection {value!r}") from None


def manhattan(left: Iterable[float], right: Iterable[float]) -> float:
    """Return the sum of absolute component-wise differences."""
    return sum(abs(a - b) for a, b in zip(left, right, strict=True))


def facet_distances(
    left: FoodRecord,
    right: FoodRecord,
    selection: FacetSelection = FacetSelection.ALL,
    bound: float = math.inf,
) -> dict[Facet, float]:
    """Return per-facet L1 distances for the selected facets.

    Facets missing from either record are skipped. Evaluation stops as soon
    as the running total reaches ``bound``; the sum of the returned values is
    then a lower bound of the full distance.
    """
    distances: dict[Facet, float] = {}
    total = 0.0
    for facet in selection.facets:
        if total >= bound:
            break
        mine = left.vector(facet)
        other = right.vector(facet)
        if mine is None or other is None:
            continue
        distance = manhattan(mine, other)
        distances[facet] = distance
        total += distance
    return distances


def composite_distance(
    left: FoodRecord,
    right: FoodRecord,
    selection: FacetSelection = FacetSelection.ALL,
) -> float:
    """Return the selected-facet sum of L1 distances between two foods."""
    return sum(facet_distances(left, right, selection).values())
