"""Console prompts for naming and categorizing unlabeled reports."""

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from food_similarity.domain.diets import FoodCategory, category_by_ordinal


@dataclass
class ConsoleFoodLabeler:
    """Asks for a display name and a category on the console."""

    read: Callable[[str], str] = input
    write: Callable[[str], None] = print
    max_attempts: int = 5
    _menu: str = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._menu = "\n".join(
            f"{category.ordinal}\t{category.name}" for category in FoodCategory
        )

    def label(self, raw_name: str, path: Path) -> tuple[str, FoodCategory]:
        self.write(f"About to add {raw_name} ({path.name}) to the data file.")
        name = self.read("Insert a human friendlier name: ").strip() or raw_name
        for _ in range(self.max_attempts):
            self.write(f"Please type in the category number for {name}:")
            self.write(self._menu)
            answer = self.read("> ").strip()
            category = category_by_ordinal(int(answer)) if answer.isdigit() else None
            if category is not None:
                return name, category
            self.write("Invalid input, try again.")
        self.write(f"No valid category given, using {FoodCategory.UNCATEGORIZED.name}.")
        return name, FoodCategory.UNCATEGORIZED
