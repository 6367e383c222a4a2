"""Command-line entry point."""

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from food_similarity.app_logging import configure_logging
from food_similarity.config import Settings
from food_similarity.containers import AppContainer, build_container
from food_similarity.domain.diets import Diet, parse_diet
from food_similarity.domain.errors import FoodSimilarityError
from food_similarity.domain.foods import FoodRecord
from food_similarity.domain.nutrients import Facet, facet_header
from food_similarity.services.metric import FacetSelection
from food_similarity.services.ranking import RankedFood


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="food-similarity",
        description="Ingest USDA nutrient reports and search for similar foods.",
    )
    parser.add_argument("--data-file", type=Path, help="normalized data file")
    commands = parser.add_subparsers(dest="command", required=True)

    ingest = commands.add_parser("ingest", help="parse .csv reports into the data file")
    ingest.add_argument("input", nargs="?", type=Path, help="report file or folder")
    ingest.add_argument(
        "--clear", action="store_true", help="empty the data file before parsing"
    )

    listing = commands.add_parser("list", help="list foods, optionally by diet")
    listing.add_argument("--diet", type=parse_diet, help="diet name or ordinal")

    nearest = commands.add_parser("nearest", help="find the most similar foods")
    nearest.add_argument("query", help="source id or name of the query food")
    nearest.add_argument("-k", type=_positive_int, help="number of results")
    nearest.add_argument("--diet", type=parse_diet, help="diet name or ordinal")
    nearest.add_argument(
        "--facets",
        type=FacetSelection.parse,
        help="ALL, MACRONUTRIENTS, MICRONUTRIENTS, MINERALS or VITAMINS",
    )
    nearest.add_argument(
        "--same-category",
        action="store_true",
        help="only rank foods in the query food's category",
    )
    nearest.add_argument(
        "--details", action="store_true", help="show per-facet distances"
    )
    return parser


def main(argv: Sequence[str] | None = None, settings: Settings | None = None) -> int:
    args = build_parser().parse_args(argv)
    resolved_settings = settings or Settings()
    if args.data_file is not None:
        resolved_settings = resolved_settings.model_copy(
            update={"data_file": args.data_file}
        )
    configure_logging(resolved_settings.log_level)
    try:
        container = build_container(resolved_settings)
        if args.command == "ingest":
            return _ingest(container, args.input, clear=args.clear)
        if args.command == "list":
            return _list(container, args.diet)
        return _nearest(container, args)
    except FoodSimilarityError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


def _ingest(container: AppContainer, target: Path | None, *, clear: bool) -> int:
    if clear:
        container.store.clear()
        container.ingestor.refresh()
    source = target or container.settings.csv_dir
    if source.is_file():
        result = container.ingestor.ingest_report(source)
        print(f"{result.name}: {result.status.value}")
        return 0
    try:
        summary = container.ingestor.ingest_directory(source)
    except FileNotFoundError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(
        f"added={len(summary.added)} duplicates={len(summary.duplicates)} "
        f"skipped={len(summary.skipped)} failed={len(summary.failed)}"
    )
    for path, reason in summary.failed.items():
        print(f"  {path}: {reason}")
    return 1 if summary.failed else 0


def _list(container: AppContainer, diet: Diet | None) -> int:
    for food in container.search_service.list_foods(diet):
        print(f"{food.source_id}\t{food.name}\t{food.category.name}")
    return 0


def _nearest(container: AppContainer, args: argparse.Namespace) -> int:
    diet = args.diet or container.default_diet
    results = container.search_service.nearest(
        args.query,
        k=args.k,
        diet=diet,
        selection=args.facets,
        same_category=args.same_category,
        store_facet_distances=args.details,
    )
    for position, ranked in enumerate(results, start=1):
        print(f"{position}. {format_ranked(ranked)}")
        if args.details:
            print(describe_food(ranked.food))
    return 0


def format_ranked(ranked: RankedFood) -> str:
    line = f"{ranked.food.name} ({ranked.food.source_id}) {ranked.distance:.3f}"
    if ranked.facet_distances:
        parts = ", ".join(
            f"{facet.value}={distance:.3f}"
            for facet, distance in ranked.facet_distances.items()
        )
        line = f"{line} [{parts}]"
    return line


def describe_food(food: FoodRecord) -> str:
    lines = [f"{food.name}, {food.category.name}"]
    for facet in Facet:
        vector = food.vector(facet)
        values = ", ".join(str(value) for value in vector) if vector else "-"
        lines.append(f"  {facet.value} {facet_header(facet)}: {values}")
    return "\n".join(lines)


if __name__ == "__main__":
    sys.exit(main())
