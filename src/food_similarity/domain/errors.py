"""Error types raised by ingestion and search."""


class FoodSimilarityError(Exception):
    """Base class for food similarity errors."""


class FormatError(FoodSimilarityError):
    """A raw report or a persisted record is malformed."""


class UnknownNutrientNameError(FormatError):
    """A raw report row names a nutrient outside the recognized vocabulary."""

    def __init__(self, name: str) -> None:
        super().__init__(f"{name!r} is not a known nutrient name in this format")
        self.name = name


class LookupNotFoundError(FoodSimilarityError, LookupError):
    """A query referenced a food that is not in the store."""

    def __init__(self, query: str) -> None:
        super().__init__(f"No food found for {query!r}")
        self.query = query


class InvalidOrdinalError(FoodSimilarityError, ValueError):
    """A category or diet ordinal is outside its fixed range."""

    def __init__(self, kind: str, ordinal: int, upper: int) -> None:
        super().__init__(f"Invalid {kind} ordinal {ordinal}, expected 1-{upper}")
        self.kind = kind
        self.ordinal = ordinal
