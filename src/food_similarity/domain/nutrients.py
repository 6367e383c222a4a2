"""Static nutrient registry and the SR28 report vocabulary."""

from dataclasses import dataclass
from enum import Enum

from food_similarity.domain.errors import UnknownNutrientNameError


class Facet(str, Enum):
    """Semantic nutrient groupings stored as separate vectors."""

    MACRONUTRIENTS = "Macronutrients"
    MINERALS = "Minerals"
    VITAMINS = "Vitamins"


class Nutrient(str, Enum):
    """Leaf nutrients that carry a measured value."""

    WATER = "WATER"
    PROTEIN = "PROTEIN"
    LIPIDS = "LIPIDS"
    CARBOHYDRATE = "CARBOHYDRATE"
    FIBER = "FIBER"
    CALCIUM = "CALCIUM"
    IRON = "IRON"
    MAGNESIUM = "MAGNESIUM"
    PHOSPHORUS = "PHOSPHORUS"
    POTASSIUM = "POTASSIUM"
    SODIUM = "SODIUM"
    ZINC = "ZINC"
    VITAMIN_C = "VITAMIN_C"
    VITAMIN_B1 = "VITAMIN_B1"
    VITAMIN_B2 = "VITAMIN_B2"
    VITAMIN_B3 = "VITAMIN_B3"
    VITAMIN_B6 = "VITAMIN_B6"
    VITAMIN_B9 = "VITAMIN_B9"
    VITAMIN_B12 = "VITAMIN_B12"
    VITAMIN_A = "VITAMIN_A"
    VITAMIN_E = "VITAMIN_E"
    VITAMIN_D = "VITAMIN_D"
    VITAMIN_K = "VITAMIN_K"


@dataclass(frozen=True)
class NutrientSpec:
    """Registry row for a leaf nutrient."""

    nutrient: Nutrient
    facet: Facet
    rdi: float


# Row order is the dimension order of every facet vector.
NUTRIENT_TABLE: tuple[NutrientSpec, ...] = (
    NutrientSpec(Nutrient.WATER, Facet.MACRONUTRIENTS, 3700),
    NutrientSpec(Nutrient.PROTEIN, Facet.MACRONUTRIENTS, 56),
    NutrientSpec(Nutrient.LIPIDS, Facet.MACRONUTRIENTS, 65),
    NutrientSpec(Nutrient.CARBOHYDRATE, Facet.MACRONUTRIENTS, 130),
    NutrientSpec(Nutrient.FIBER, Facet.MACRONUTRIENTS, 38),
    NutrientSpec(Nutrient.CALCIUM, Facet.MINERALS, 800),
    NutrientSpec(Nutrient.IRON, Facet.MINERALS, 14),
    NutrientSpec(Nutrient.MAGNESIUM, Facet.MINERALS, 400),
    NutrientSpec(Nutrient.PHOSPHORUS, Facet.MINERALS, 700),
    NutrientSpec(Nutrient.POTASSIUM, Facet.MINERALS, 2000),
    NutrientSpec(Nutrient.SODIUM, Facet.MINERALS, 1500),
    NutrientSpec(Nutrient.ZINC, Facet.MINERALS, 10),
    NutrientSpec(Nutrient.VITAMIN_C, Facet.VITAMINS, 80),
    NutrientSpec(Nutrient.VITAMIN_B1, Facet.VITAMINS, 1.1),
    NutrientSpec(Nutrient.VITAMIN_B2, Facet.VITAMINS, 1.4),
    NutrientSpec(Nutrient.VITAMIN_B3, Facet.VITAMINS, 16),
    NutrientSpec(Nutrient.VITAMIN_B6, Facet.VITAMINS, 1.4),
    NutrientSpec(Nutrient.VITAMIN_B9, Facet.VITAMINS, 200),
    NutrientSpec(Nutrient.VITAMIN_B12, Facet.VITAMINS, 2.5),
    NutrientSpec(Nutrient.VITAMIN_A, Facet.VITAMINS, 3000),
    NutrientSpec(Nutrient.VITAMIN_E, Facet.VITAMINS, 12),
    NutrientSpec(Nutrient.VITAMIN_D, Facet.VITAMINS, 600),
    NutrientSpec(Nutrient.VITAMIN_K, Facet.VITAMINS, 75),
)

_SPECS: dict[Nutrient, NutrientSpec] = {row.nutrient: row for row in NUTRIENT_TABLE}

FACET_NUTRIENTS: dict[Facet, tuple[Nutrient, ...]] = {
    facet: tuple(row.nutrient for row in NUTRIENT_TABLE if row.facet is facet)
    for facet in Facet
}

REPORT_NUTRIENT_NAMES: dict[str, Nutrient] = {
    "Water": Nutrient.WATER,
    "Protein": Nutrient.PROTEIN,
    "Total lipid (fat)": Nutrient.LIPIDS,
    "Carbohydrate, by difference": Nutrient.CARBOHYDRATE,
    "Fiber, total dietary": Nutrient.FIBER,
    "Calcium, Ca": Nutrient.CALCIUM,
    "Iron, Fe": Nutrient.IRON,
    "Magnesium, Mg": Nutrient.MAGNESIUM,
    "Phosphorus, P": Nutrient.PHOSPHORUS,
    "Potassium, K": Nutrient.POTASSIUM,
    "Sodium, Na": Nutrient.SODIUM,
    "Zinc, Zn": Nutrient.ZINC,
    "Vitamin C, total ascorbic acid": Nutrient.VITAMIN_C,
    "Thiamin": Nutrient.VITAMIN_B1,
    "Riboflavin": Nutrient.VITAMIN_B2,
    "Niacin": Nutrient.VITAMIN_B3,
    "Vitamin B-6": Nutrient.VITAMIN_B6,
    "Folate, DFE": Nutrient.VITAMIN_B9,
    "Vitamin B-12": Nutrient.VITAMIN_B12,
    "Vitamin A, IU": Nutrient.VITAMIN_A,
    "Vitamin E (alpha-tocopherol)": Nutrient.VITAMIN_E,
    "Vitamin D": Nutrient.VITAMIN_D,
    "Vitamin K (phylloquinone)": Nutrient.VITAMIN_K,
}

# Recognized in reports but not measured; vitamin A and D use the IU rows.
IGNORED_REPORT_NAMES: frozenset[str] = frozenset(
    {
        "Energy",
        "Sugars, total",
        "Vitamin A, RAE",
        "Vitamin D (D2 + D3)",
        "Fatty acids, total saturated",
        "Fatty acids, total monounsaturated",
        "Fatty acids, total polyunsaturated",
        "Fatty acids, total trans",
        "Cholesterol",
        "Caffeine",
    }
)


def rdi_of(nutrient: Nutrient) -> float:
    """Return the recommended daily intake of a nutrient."""
    return _SPECS[nutrient].rdi


def facet_of(nutrient: Nutrient) -> Facet:
    """Return the facet a nutrient belongs to."""
    return _SPECS[nutrient].facet


def lookup_report_nutrient(name: str) -> Nutrient | None:
    """Map a quoted report name to its nutrient, or None for ignored names."""
    nutrient = REPORT_NUTRIENT_NAMES.get(name)
    if nutrient is not None:
        return nutrient
    if name in IGNORED_REPORT_NAMES:
        return None
    raise UnknownNutrientNameError(name)


def normalize_intake(nutrient: Nutrient, value_per_100g: float) -> float:
    """Express a per-100g amount as a percentage of the nutrient's RDI."""
    return round(value_per_100g / rdi_of(nutrient) * 100, 3)


def facet_header(facet: Facet) -> str:
    """Return a readable '(A,B,...)' list of a facet's dimensions."""
    return "(" + ",".join(n.value for n in FACET_NUTRIENTS[facet]) + ")"
