"""Tests for the search service."""

import pytest

from food_similarity.domain.diets import Diet, FoodCategory
from food_similarity.domain.errors import LookupNotFoundError
from food_similarity.services.metric import FacetSelection
from food_similarity.services.search import SearchService
from tests.conftest import InMemoryFoodStore, make_food


@pytest.fixture
def pantry() -> InMemoryFoodStore:
    return InMemoryFoodStore(
        foods=[
            make_food("1", FoodCategory.FRUIT, (10, 20, 5, 30, 2), name="Apple"),
            make_food("2", FoodCategory.FRUIT, (12, 18, 5, 28, 2), name="Pear"),
            make_food("3", FoodCategory.BEEF, (10, 20, 5, 30, 3), name="Beef"),
            make_food("4", FoodCategory.LEGUME, (40, 1, 1, 1, 1), name="Lentil"),
            make_food(
                "5",
                FoodCategory.DAIRY,
                (10, 20, 5, 30, 2),
                minerals=(50, 0, 0, 0, 0, 0, 0),
                name="Milk",
            ),
        ]
    )


def test_nearest_resolves_by_source_id(pantry: InMemoryFoodStore) -> None:
    results = SearchService(pantry).nearest("1", k=3)

    assert [r.food.name for r in results] == ["Apple", "Beef", "Pear"]
    assert [r.distance for r in results] == [0, 1, 6]


def test_nearest_resolves_by_name_and_filters_by_diet(
    pantry: InMemoryFoodStore,
) -> None:
    results = SearchService(pantry).nearest("Apple", k=5, diet=Diet.VEGAN)

    assert [r.food.name for r in results] == ["Apple", "Pear", "Lentil"]


def test_nearest_uses_selection_and_defaults(pantry: InMemoryFoodStore) -> None:
    service = SearchService(
        pantry, default_k=2, default_selection=FacetSelection.MACRONUTRIENTS
    )

    results = service.nearest("Milk")

    assert [r.food.name for r in results] == ["Apple", "Milk"]
    assert results[1].distance == 0
    everything = service.nearest("Milk", selection=FacetSelection.ALL)
    assert [r.food.name for r in everything] == ["Milk", "Apple"]
    assert [r.distance for r in everything] == [0, 50]


def test_each_query_requests_a_fresh_stream(pantry: InMemoryFoodStore) -> None:
    service = SearchService(pantry)

    service.nearest("1")
    service.list_foods()

    assert pantry.streams_opened == 2


def test_unknown_query_raises(pantry: InMemoryFoodStore) -> None:
    with pytest.raises(LookupNotFoundError) as excinfo:
        SearchService(pantry).nearest("Quince")
    assert excinfo.value.query == "Quince"


def test_list_foods_with_diet(pantry: InMemoryFoodStore) -> None:
    service = SearchService(pantry)

    assert len(service.list_foods()) == 5
    assert [f.name for f in service.list_foods(Diet.CARNIVOROUS)] == ["Beef"]
    assert [f.name for f in service.list_foods(Diet.VEGETARIAN)] == [
        "Apple",
        "Pear",
        "Lentil",
        "Milk",
    ]


def test_list_foods_on_empty_store() -> None:
    assert SearchService(InMemoryFoodStore()).list_foods(Diet.VEGAN) == []


def test_nearest_limited_to_query_category(pantry: InMemoryFoodStore) -> None:
    results = SearchService(pantry).nearest(
        "Apple", k=5, selection=FacetSelection.MACRONUTRIENTS, same_category=True
    )

    assert [r.food.name for r in results] == ["Apple", "Pear"]
    assert [r.distance for r in results] == [0, 6]
