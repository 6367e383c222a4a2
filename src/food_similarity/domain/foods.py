"""Normalized food record model."""

from collections.abc import Mapping
from dataclasses import dataclass, field

from food_similarity.domain.diets import FoodCategory
from food_similarity.domain.nutrients import FACET_NUTRIENTS, Facet, Nutrient


@dataclass(frozen=True)
class FoodRecord:
    """A food item with its RDI-normalized facet vectors."""

    source_id: str
    name: str
    category: FoodCategory
    vectors: Mapping[Facet, tuple[float, ...]] = field(hash=False)

    def vector(self, facet: Facet) -> tuple[float, ...] | None:
        """Return the vector of a facet, or None if the record lacks it."""
        return self.vectors.get(facet)

    @property
    def macronutrients(self) -> tuple[float, ...] | None:
        return self.vector(Facet.MACRONUTRIENTS)

    @property
    def minerals(self) -> tuple[float, ...] | None:
        return self.vector(Facet.MINERALS)

    @property
    def vitamins(self) -> tuple[float, ...] | None:
        return self.vector(Facet.VITAMINS)

    @classmethod
    def from_values(
        cls,
        source_id: str,
        name: str,
        category: FoodCategory,
        values: Mapping[Nutrient, float],
    ) -> "FoodRecord":
        """Build a record from per-nutrient values, defaulting missing ones to 0."""
        vectors = {
            facet: tuple(float(values.get(nutrient, 0.0)) for nutrient in nutrients)
            for facet, nutrients in FACET_NUTRIENTS.items()
        }
        return cls(source_id=source_id, name=name, category=category, vectors=vectors)
