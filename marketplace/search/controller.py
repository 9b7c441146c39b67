"""
Infinite-scroll search controller.

One controller backs one browsing session. Every filter change starts a new
generation; responses belonging to an older generation are dropped so a slow
response can never overwrite the results of a newer search.

The HTTP API is stateless and pages with explicit cursors; the controller is
the session-side counterpart for clients embedding this package. Both go
through ``search_page``.
"""
import logging
from dataclasses import dataclass, field

from marketplace.catalog import FEED_ADS
from marketplace.config import config
from marketplace.schemas.request import SearchFilters
from marketplace.schemas.response import FeedEntry, Professional
from marketplace.search.pagination import fetch_page, search_page
from marketplace.search.predicates import Predicate, build_predicates
from marketplace.search.sponsored import build_feed
from marketplace.store import RecordStore

logger = logging.getLogger(__name__)


@dataclass
class SearchState:
    filters: SearchFilters = field(default_factory=SearchFilters)
    results: list[Professional] = field(default_factory=list)
    page: int = 0
    total_count: int = 0
    has_more: bool = True
    loading: bool = False
    loading_more: bool = False
    failed: bool = False
    cursor: int = 0


class SearchController:
    def __init__(
        self,
        store: RecordStore,
        country: str | None = None,
        page_size: int = config.PAGE_SIZE,
    ):
        if page_size < 1:
            raise ValueError("page_size must be positive")
        self.store = store
        self.country = country
        self.page_size = page_size
        self.state = SearchState()
        self._generation = 0
        self._predicates: list[Predicate] = []

    @property
    def generation(self) -> int:
        return self._generation

    def _reset(self, filters: SearchFilters) -> int:
        self._generation += 1
        self._predicates = build_predicates(filters, self.country)
        self.state = SearchState(filters=filters, loading=True)
        return self._generation

    async def apply_filters(self, filters: SearchFilters) -> None:
        """Replace the results with the first page for ``filters``."""
        generation = self._reset(filters)
        logger.info(f"Search generation {generation}: {filters}")

        total, result = await search_page(
            self.store, self._predicates, 0, self.page_size
        )
        if generation != self._generation:
            logger.debug(f"Dropping stale first page for generation {generation}")
            return

        self.state.total_count = total or 0
        self.state.results = list(result.items)
        self.state.page = 0
        self.state.cursor = result.next_cursor
        self.state.has_more = result.has_more
        self.state.failed = result.failed or total is None
        self.state.loading = False

    async def set_country(self, country: str | None) -> None:
        self.country = country
        await self.apply_filters(self.state.filters)

    async def load_more(self) -> None:
        """Append the next page. Ignored while a fetch is running or when exhausted."""
        state = self.state
        if state.loading or state.loading_more or not state.has_more:
            return

        generation = self._generation
        state.loading_more = True
        try:
            result = await fetch_page(
                self.store, self._predicates, state.cursor, self.page_size
            )
        finally:
            if generation == self._generation:
                self.state.loading_more = False

        if generation != self._generation:
            logger.debug(f"Dropping stale load-more for generation {generation}")
            return

        state.results = state.results + result.items
        state.cursor = result.next_cursor
        state.has_more = result.has_more
        if result.failed:
            state.failed = True
        else:
            state.page += 1

    def feed(self) -> list[FeedEntry]:
        """Current results with sponsored marks and feed ads applied."""
        return build_feed(self.state.results, FEED_ADS)
