"""Text data file holding normalized food records."""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from food_similarity.domain.diets import FoodCategory
from food_similarity.domain.errors import FormatError, LookupNotFoundError
from food_similarity.domain.foods import FoodRecord
from food_similarity.domain.nutrients import FACET_NUTRIENTS, Facet

OBJECT_KEY_NAMESPACE = "messif.objects.keys.AbstractObjectKey"
FACET_VECTOR_TAG = "messif.objects.impl.ObjectFloatVectorL1"
_FACET_ORDER = (Facet.MACRONUTRIENTS, Facet.MINERALS, Facet.VITAMINS)
_OBJECT_KEY = "#objectKey"
_ID = "#id"
_CATEGORY = "#category"


def serialize_food(food: FoodRecord) -> str:
    """Render a record in the data file format."""
    header = "".join(f"{facet.value};{FACET_VECTOR_TAG};" for facet in _FACET_ORDER)
    lines = [f"{_OBJECT_KEY} {OBJECT_KEY_NAMESPACE} {food.name}", header]
    for facet in _FACET_ORDER:
        vector = food.vector(facet)
        if vector is None:
            vector = (0.0,) * len(FACET_NUTRIENTS[facet])
        lines.append(",".join(str(float(value)) for value in vector))
    lines.append(f"{_ID} {food.source_id}")
    lines.append(f"{_CATEGORY} {food.category.name}")
    return "\n".join(lines) + "\n"


def parse_foods(lines: Iterable[str]) -> Iterator[FoodRecord]:
    """Lazily parse records from data file lines."""
    stream = (line.rstrip("\r\n") for line in lines)
    for line in stream:
        if not line.strip():
            continue
        yield _parse_food(line, stream)


def _parse_food(key_line: str, stream: Iterator[str]) -> FoodRecord:
    if not key_line.startswith(_OBJECT_KEY):
        raise FormatError(f"Expected {_OBJECT_KEY} line, got: {key_line}")
    parts = key_line.split(" ", 2)
    if len(parts) < 3 or not parts[2]:  # noqa: PLR2004
        raise FormatError(f"Food name missing in: {key_line}")
    name = parts[2]

    header = _require_line(stream, "facet header")
    names = header.rstrip(";").split(";")[::2]
    if names != [facet.value for facet in _FACET_ORDER]:
        raise FormatError(f"Unexpected facet header: {header}")

    vectors = {
        facet: _parse_vector(facet, _require_line(stream, facet.value))
        for facet in _FACET_ORDER
    }
    source_id = _parse_tagged(_require_line(stream, _ID), _ID)
    category_name = _parse_tagged(_require_line(stream, _CATEGORY), _CATEGORY)
    try:
        category = FoodCategory[category_name]
    except KeyError:
        raise FormatError(f"Unknown food category {category_name!r}") from None
    return FoodRecord(
        source_id=source_id, name=name, category=category, vectors=vectors
    )


def _require_line(stream: Iterator[str], what: str) -> str:
    line = next(stream, None)
    if line is None:
        raise FormatError(f"Data file ended while reading {what}")
    return line


def _parse_vector(facet: Facet, line: str) -> tuple[float, ...]:
    try:
        vector = tuple(float(value) for value in line.split(","))
    except ValueError:
        raise FormatError(f"Non-numeric {facet.value} vector: {line}") from None
    if len(vector) != len(FACET_NUTRIENTS[facet]):
        raise FormatError(
            f"{facet.value} vector has {len(vector)} values, "
            f"expected {len(FACET_NUTRIENTS[facet])}"
        )
    return vector


def _parse_tagged(line: str, tag: str) -> str:
    if not line.startswith(tag + " "):
        raise FormatError(
            f"There was a problem while reading {tag}. Data file may be corrupted."
        )
    value = line[len(tag) + 1 :].strip()
    if not value:
        raise FormatError(f"Empty {tag} value")
    return value


@dataclass
class DataFileStore:
    """Food store backed by a single append-only text file."""

    path: Path

    def iter_foods(self) -> Iterator[FoodRecord]:
        """Stream records from the file in stored order."""
        if not self.path.exists():
            return
        with self.path.open(encoding="utf-8") as handle:
            yield from parse_foods(handle)

    def get_by_source_id(self, source_id: str) -> FoodRecord:
        for food in self.iter_foods():
            if food.source_id == source_id:
                return food
        raise LookupNotFoundError(source_id)

    def get_by_name(self, name: str) -> FoodRecord:
        for food in self.iter_foods():
            if food.name == name:
                return food
        raise LookupNotFoundError(name)

    def present_source_ids(self) -> set[str]:
        """Parse every record so a corrupted store fails before any insert."""
        return {food.source_id for food in self.iter_foods()}

    def append(self, food: FoodRecord) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        text = serialize_food(food)
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(text)

    def count(self) -> int:
        return sum(1 for _ in self.iter_foods())

    def clear(self) -> None:
        """Truncate the store so corrected reports can be ingested again."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("", encoding="utf-8")
