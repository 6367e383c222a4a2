"""Food categories and diet admissibility rules."""

from enum import Enum

from food_similarity.domain.errors import InvalidOrdinalError


class FoodCategory(Enum):
    """Fixed food categories keyed by a 1-based ordinal."""

    GLUTEN_CEREAL = 1
    GLUTEN_FREE_CEREAL = 2
    LEGUME = 3
    NUT_OR_SEED = 4
    VEGETABLE = 5
    FRUIT = 6
    POULTRY = 7
    FISH = 8
    SEAFOOD = 9
    BEEF = 10
    PORK = 11
    LAMB = 12
    GAME = 13
    EGG = 14
    DAIRY = 15
    MUSHROOM = 16
    UNCATEGORIZED = 17

    @property
    def ordinal(self) -> int:
        return self.value


_ALL_CATEGORIES = frozenset(FoodCategory)


def _all_except(*excluded: FoodCategory) -> frozenset[FoodCategory]:
    return _ALL_CATEGORIES - frozenset(excluded)


def _only(*admitted: FoodCategory) -> frozenset[FoodCategory]:
    return frozenset(admitted)


C = FoodCategory


class Diet(Enum):
    """Diets keyed by a 1-based ordinal, each admitting a set of categories."""

    OMNIVOROUS = (1, _ALL_CATEGORIES)
    CARNIVOROUS = (
        2,
        _all_except(
            C.GLUTEN_FREE_CEREAL,
            C.GLUTEN_CEREAL,
            C.LEGUME,
            C.NUT_OR_SEED,
            C.FRUIT,
            C.VEGETABLE,
            C.DAIRY,
            C.MUSHROOM,
        ),
    )
    KETOGENIC = (
        3,
        _all_except(C.GLUTEN_FREE_CEREAL, C.GLUTEN_CEREAL, C.LEGUME, C.FRUIT),
    )
    PESCETARIAN = (4, _all_except(C.POULTRY, C.BEEF, C.PORK, C.LAMB, C.GAME))
    VEGETARIAN = (
        5,
        _all_except(C.POULTRY, C.FISH, C.SEAFOOD, C.BEEF, C.PORK, C.LAMB, C.GAME),
    )
    VEGAN = (
        6,
        _only(
            C.GLUTEN_CEREAL,
            C.GLUTEN_FREE_CEREAL,
            C.LEGUME,
            C.NUT_OR_SEED,
            C.VEGETABLE,
            C.FRUIT,
            C.MUSHROOM,
            C.UNCATEGORIZED,
        ),
    )
    # Raw food only, nothing heated above 48 degrees Celsius.
    VITARIAN = (
        7,
        _only(
            C.LEGUME,
            C.NUT_OR_SEED,
            C.VEGETABLE,
            C.FRUIT,
            C.MUSHROOM,
            C.UNCATEGORIZED,
        ),
    )
    ISLAMIC = (8, _all_except(C.PORK))
    HINDU = (9, _all_except(C.BEEF))
    JEWISH = (10, _all_except(C.SEAFOOD, C.PORK, C.GAME))
    PALEO = (11, _all_except(C.GLUTEN_FREE_CEREAL, C.GLUTEN_CEREAL, C.LEGUME))
    FRUITARIAN = (
        12,
        _only(
            C.GLUTEN_FREE_CEREAL,
            C.GLUTEN_CEREAL,
            C.NUT_OR_SEED,
            C.FRUIT,
            C.UNCATEGORIZED,
        ),
    )
    CELIAC = (13, _all_except(C.GLUTEN_CEREAL))

    def __init__(self, ordinal: int, consumables: frozenset[FoodCategory]) -> None:
        self.ordinal = ordinal
        self.consumables = consumables

    def is_edible(self, category: FoodCategory) -> bool:
        """Return True if the diet admits foods of the category."""
        return category in self.consumables


del C

_CATEGORIES_BY_ORDINAL = {category.ordinal: category for category in FoodCategory}
_DIETS_BY_ORDINAL = {diet.ordinal: diet for diet in Diet}


def category_by_ordinal(ordinal: int) -> FoodCategory | None:
    """Return the category for an ordinal, or None when out of range."""
    return _CATEGORIES_BY_ORDINAL.get(ordinal)


def diet_by_ordinal(ordinal: int) -> Diet | None:
    """Return the diet for an ordinal, or None when out of range."""
    return _DIETS_BY_ORDINAL.get(ordinal)


def require_category(ordinal: int) -> FoodCategory:
    """Return the category for an ordinal or raise InvalidOrdinalError."""
    category = category_by_ordinal(ordinal)
    if category is None:
        raise InvalidOrdinalError("category", ordinal, len(_CATEGORIES_BY_ORDINAL))
    return category


def require_diet(ordinal: int) -> Diet:
    """Return the diet for an ordinal or raise InvalidOrdinalError."""
    diet = diet_by_ordinal(ordinal)
    if diet is None:
        raise InvalidOrdinalError("diet", ordinal, len(_DIETS_BY_ORDINAL))
    return diet


def parse_diet(value: str) -> Diet:
    """Resolve a diet from its name or its ordinal."""
    text = value.strip()
    if text.isdigit():
        return require_diet(int(text))
    try:
        return Diet[text.upper()]
    except KeyError:
        raise ValueError(f"Unknown diet {value!r}") from None
