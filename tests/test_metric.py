"""Tests for the composite facet distance."""

import math

import pytest

from food_similarity.domain.diets import FoodCategory
from food_similarity.domain.foods import FoodRecord
from food_similarity.domain.nutrients import Facet
from food_similarity.services.metric import (
    FacetSelection,
    composite_distance,
    facet_distances,
    manhattan,
)
from tests.conftest import make_food

APPLE = make_food(
    "09003",
    FoodCategory.FRUIT,
    macronutrients=(10, 20, 5, 30, 2),
    minerals=(1, 2, 3, 4, 5, 6, 7),
    vitamins=(1,) * 11,
)
PEAR = make_food(
    "09252",
    FoodCategory.FRUIT,
    macronutrients=(12, 18, 5, 28, 2),
    minerals=(0, 2, 3, 4, 5, 6, 9),
    vitamins=(0,) * 11,
)


def test_macronutrient_distance_example() -> None:
    assert composite_distance(APPLE, PEAR, FacetSelection.MACRONUTRIENTS) == 6


@pytest.mark.parametrize(
    ("selection", "expected"),
    [
        (FacetSelection.ALL, 6 + 3 + 11),
        (FacetSelection.MICRONUTRIENTS, 3 + 11),
        (FacetSelection.MINERALS, 3),
        (FacetSelection.VITAMINS, 11),
    ],
)
def test_selection_variants(selection: FacetSelection, expected: float) -> None:
    assert composite_distance(APPLE, PEAR, selection) == expected


@pytest.mark.parametrize("selection", list(FacetSelection))
def test_distance_is_symmetric_and_zero_on_self(selection: FacetSelection) -> None:
    assert composite_distance(APPLE, PEAR, selection) == composite_distance(
        PEAR, APPLE, selection
    )
    assert composite_distance(APPLE, APPLE, selection) == 0
    assert composite_distance(APPLE, PEAR, selection) >= 0


def test_missing_facet_contributes_nothing() -> None:
    partial = FoodRecord(
        source_id="x",
        name="partial",
        category=FoodCategory.UNCATEGORIZED,
        vectors={Facet.MACRONUTRIENTS: (12, 18, 5, 28, 2)},
    )
    assert facet_distances(APPLE, partial) == {Facet.MACRONUTRIENTS: 6}
    assert composite_distance(partial, APPLE) == 6


def test_facet_distances_reports_each_facet() -> None:
    assert facet_distances(APPLE, PEAR) == {
        Facet.MACRONUTRIENTS: 6,
        Facet.MINERALS: 3,
        Facet.VITAMINS: 11,
    }


def test_bound_stops_evaluation_early() -> None:
    distances = facet_distances(APPLE, PEAR, FacetSelection.ALL, bound=5)
    assert distances == {Facet.MACRONUTRIENTS: 6}
    assert sum(distances.values()) <= composite_distance(APPLE, PEAR)
    assert facet_distances(APPLE, PEAR, bound=math.inf) == facet_distances(APPLE, PEAR)


def test_manhattan_requires_equal_lengths() -> None:
    assert manhattan((1.5, -2.0), (0.5, 1.0)) == 4.0
    with pytest.raises(ValueError):
        manhattan((1.0,), (1.0, 2.0))


def test_parse_selection() -> None:
    assert FacetSelection.parse("micronutrients") is FacetSelection.MICRONUTRIENTS
    with pytest.raises(ValueError, match="Unknown facet selection"):
        FacetSelection.parse("sugars")
