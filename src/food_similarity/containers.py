"""Dependency container wiring for the application."""

from dataclasses import dataclass

from food_similarity.adapters.console_labeler import ConsoleFoodLabeler
from food_similarity.adapters.data_file_store import DataFileStore
from food_similarity.config import Settings
from food_similarity.domain.diets import Diet, parse_diet
from food_similarity.services.ingestion import CsvIngestor, FoodLabeler
from food_similarity.services.metric import FacetSelection
from food_similarity.services.search import SearchService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    store: DataFileStore
    ingestor: CsvIngestor
    search_service: SearchService
    default_diet: Diet


def build_container(
    settings: Settings | None = None, labeler: FoodLabeler | None = None
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    store = DataFileStore(resolved_settings.data_file)
    ingestor = CsvIngestor(store=store, labeler=labeler or ConsoleFoodLabeler())
    search_service = SearchService(
        source=store,
        default_k=resolved_settings.default_k,
        default_selection=FacetSelection.parse(resolved_settings.default_selection),
    )
    return AppContainer(
        settings=resolved_settings,
        store=store,
        ingestor=ingestor,
        search_service=search_service,
        default_diet=parse_diet(resolved_settings.default_diet),
    )
