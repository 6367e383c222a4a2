"""Diet-filtered k-NN and listing evaluation over a food stream."""

import bisect
import logging
import math
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from food_similarity.domain.diets import Diet
from food_similarity.domain.foods import FoodRecord
from food_similarity.domain.nutrients import Facet
from food_similarity.services.metric import FacetSelection, facet_distances

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankedFood:
    """A food with its distance from the query."""

    food: FoodRecord
    distance: float
    facet_distances: dict[Facet, float] | None = field(default=None, compare=False)


class BoundedRanking:
    """Best-k collection ordered by ascending distance.

    Entries with equal distance keep their arrival order, so on a tie for the
    last slot the earlier entry stays and the newcomer is rejected.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("Ranking capacity must be at least 1")
        self.capacity = capacity
        self._keys: list[float] = []
        self._entries: list[RankedFood] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[RankedFood]:
        return iter(self._entries)

    @property
    def is_full(self) -> bool:
        return len(self._entries) >= self.capacity

    @property
    def threshold(self) -> float:
        """Distance a candidate must beat once the ranking is full."""
        if not self.is_full:
            return math.inf
        return self._keys[-1]

    def offer(self, entry: RankedFood) -> bool:
        """Insert an entry if it ranks within capacity; return True if kept."""
        if entry.distance >= self.threshold:
            return False
        position = bisect.bisect_right(self._keys, entry.distance)
        self._keys.insert(position, entry.distance)
        self._entries.insert(position, entry)
        if len(self._entries) > self.capacity:
            self._keys.pop()
            self._entries.pop()
        return True

    def to_list(self) -> list[RankedFood]:
        return list(self._entries)


@dataclass
class DietFilteredRanker:
    """Evaluates queries over a single pass of candidate foods."""

    diet: Diet | None = None

    def admits(self, food: FoodRecord) -> bool:
        """Return True if the configured diet allows the food's category."""
        return self.diet is None or self.diet.is_edible(food.category)

    def nearest(  # noqa: PLR0913
        self,
        candidates: Iterable[FoodRecord],
        query: FoodRecord,
        k: int,
        selection: FacetSelection = FacetSelection.ALL,
        *,
        same_category: bool = False,
        store_facet_distances: bool = False,
        ranking: BoundedRanking | None = None,
    ) -> list[RankedFood]:
        """Return up to k admitted candidates closest to the query.

        With ``same_category`` only candidates sharing the query's category
        are ranked; others are rejected before any distance is computed.
        """
        answer = ranking if ranking is not None else BoundedRanking(k)
        seen = 0
        rejected = 0
        excluded = 0
        for food in candidates:
            seen += 1
            if not self.admits(food) or (
                same_category and food.category is not query.category
            ):
                rejected += 1
                continue
            bound = answer.threshold
            distances = facet_distances(query, food, selection, bound=bound)
            distance = sum(distances.values())
            if distance >= bound:
                excluded += 1
                continue
            answer.offer(
                RankedFood(
                    food=food,
                    distance=distance,
                    facet_distances=distances if store_facet_distances else None,
                )
            )
        _logger.debug(
            "kNN query=%s k=%s seen=%s rejected=%s excluded=%s",
            query.source_id,
            k,
            seen,
            rejected,
            excluded,
        )
        return answer.to_list()

    def listing(self, candidates: Iterable[FoodRecord]) -> list[FoodRecord]:
        """Return every admitted candidate in arrival order."""
        return [food for food in candidates if self.admits(food)]
