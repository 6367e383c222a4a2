"""Shared test fixtures."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from food_similarity.config import Settings
from food_similarity.domain.diets import FoodCategory
from food_similarity.domain.errors import LookupNotFoundError
from food_similarity.domain.foods import FoodRecord
from food_similarity.domain.nutrients import Facet
from food_similarity.services.ingestion import FileRenamer, FoodLabeler, FoodSink
from food_similarity.services.search import FoodSource

BANNER = (
    "Source: USDA National Nutrient Database for Standard Reference 28 "
    "Software v.2.3.2"
)

APPLE_ROWS = {
    "Water": ("g", 85.56),
    "Energy": ("kcal", 52),
    "Protein": ("g", 0.26),
    "Total lipid (fat)": ("g", 0.17),
    "Carbohydrate, by difference": ("g", 13.81),
    "Fiber, total dietary": ("g", 2.4),
    "Sugars, total": ("g", 10.39),
    "Calcium, Ca": ("mg", 6),
    "Iron, Fe": ("mg", 0.12),
    "Potassium, K": ("mg", 107),
    "Vitamin C, total ascorbic acid": ("mg", 4.6),
    "Vitamin A, RAE": ("ug", 3),
    "Vitamin A, IU": ("IU", 54),
    "Cholesterol": ("mg", 0),
}


def report_text(source_id: str, name: str, rows: dict[str, tuple[str, float]]) -> str:
    """Render an SR28 single-food report."""
    lines = [
        BANNER,
        "Report Run at: October 19, 2026 10:15 EDT",
        f'"Nutrient data for: {source_id}, {name}"',
        "Nutrient,Unit,1Value per 100 g,Data points,Std. Error,1cup,1oz",
        "Proximates",
    ]
    for nutrient, (unit, value) in rows.items():
        lines.append(f'"{nutrient}",{unit},{value},1,0.1,{value * 2},{value / 4}')
    lines.append("Sources of Data")
    return "\n".join(lines) + "\n"


def write_report(
    directory: Path,
    filename: str,
    source_id: str,
    name: str,
    rows: dict[str, tuple[str, float]] | None = None,
) -> Path:
    path = directory / filename
    path.write_text(report_text(source_id, name, rows or APPLE_ROWS), encoding="utf-8")
    return path


def make_food(
    source_id: str,
    category: FoodCategory = FoodCategory.UNCATEGORIZED,
    macronutrients: tuple[float, ...] = (0.0,) * 5,
    minerals: tuple[float, ...] = (0.0,) * 7,
    vitamins: tuple[float, ...] = (0.0,) * 11,
    name: str | None = None,
) -> FoodRecord:
    return FoodRecord(
        source_id=source_id,
        name=name or f"food-{source_id}",
        category=category,
        vectors={
            Facet.MACRONUTRIENTS: macronutrients,
            Facet.MINERALS: minerals,
            Facet.VITAMINS: vitamins,
        },
    )


@dataclass
class InMemoryFoodStore(FoodSink, FoodSource):
    """In-memory food store for tests."""

    foods: list[FoodRecord] = field(default_factory=list)
    streams_opened: int = 0

    def iter_foods(self) -> Iterator[FoodRecord]:
        self.streams_opened += 1
        return iter(list(self.foods))

    def get_by_source_id(self, source_id: str) -> FoodRecord:
        for food in self.foods:
            if food.source_id == source_id:
                return food
        raise LookupNotFoundError(source_id)

    def get_by_name(self, name: str) -> FoodRecord:
        for food in self.foods:
            if food.name == name:
                return food
        raise LookupNotFoundError(name)

    def present_source_ids(self) -> set[str]:
        return {food.source_id for food in self.foods}

    def append(self, food: FoodRecord) -> None:
        self.foods.append(food)


@dataclass
class FakeLabeler(FoodLabeler):
    """Labeler returning a fixed answer and recording requests."""

    name: str = "Apple"
    category: FoodCategory = FoodCategory.FRUIT
    requests: list[tuple[str, Path]] = field(default_factory=list)

    def label(self, raw_name: str, path: Path) -> tuple[str, FoodCategory]:
        self.requests.append((raw_name, path))
        return self.name, self.category


@dataclass
class RecordingRenamer(FileRenamer):
    """Renamer that records requests instead of touching files."""

    renames: list[tuple[Path, Path]] = field(default_factory=list)
    fail: bool = False

    def rename(self, path: Path, target: Path) -> None:
        if self.fail:
            raise PermissionError("read-only directory")
        self.renames.append((path, target))


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        csv_dir=tmp_path / "csv",
        data_file=tmp_path / "FoodDataFile.data",
    )


@pytest.fixture
def store() -> InMemoryFoodStore:
    return InMemoryFoodStore()


@pytest.fixture
def labeler() -> FakeLabeler:
    return FakeLabeler()


@pytest.fixture
def renamer() -> RecordingRenamer:
    return RecordingRenamer()


@pytest.fixture
def csv_dir(tmp_path: Path) -> Path:
    path = tmp_path / "csv"
    path.mkdir()
    return path
