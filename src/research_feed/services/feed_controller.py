"""
Feed controller.

Owns the filter state, the pagination cursor and the rows currently on
display for one screen (the feed or the favorites listing). Every trigger
(filter change, page change, favorites arriving) re-runs load(); each load
is tagged with a sequence number and only the most recently issued one may
change what is displayed.
"""

from collections.abc import Iterable
from datetime import date
import logging
from typing import TYPE_CHECKING, Any

from research_feed.models.enums import FeedSource, FeedStatus
from research_feed.models.filters import (
    FilterOptions,
    FilterState,
    cleared_date_filter,
    resolve_field,
    set_field,
    with_custom_range,
)
from research_feed.models.papers import FeedPage, FeedRow, Paper
from research_feed.services.common.diffing import covers_all
from research_feed.services.favorites import FavoriteService, FavoriteSet
from research_feed.services.pagination import (
    PageToken,
    clamp_page,
    page_window,
    total_pages_for,
)
from research_feed.services.query import FeedQuery, encode_query
from research_feed.utils.errors import ResearchFeedError, StaleResponseDiscarded

if TYPE_CHECKING:
    from research_feed.clients.feed_api import ResearchFeedClient

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 15

LOAD_ERROR_MESSAGES = {
    FeedSource.FEED: "Failed to load your feed.",
    FeedSource.FAVORITES: "Failed to load your favorites.",
}

FAVORITE_ERROR_MESSAGE = "Failed to update favorites."


def enrich_rows(
    papers: Iterable[Paper], favorites: FavoriteSet | None, all_favorites: bool = False
) -> list[FeedRow]:
    """
    Build display rows, resolving ``is_favorite`` against ``favorites``.

    A missing favorite set marks every row as not favorite.
    """
    rows = []
    for paper in papers:
        is_favorite = all_favorites or (favorites is not None and favorites.has(paper.id))
        rows.append(FeedRow.from_paper(paper, is_favorite))
    return rows


class FeedController:
    """State machine behind a paginated, filterable paper listing."""

    def __init__(
        self,
        client: "ResearchFeedClient",
        favorites: FavoriteSet | None = None,
        *,
        source: FeedSource = FeedSource.FEED,
        page_size: int = DEFAULT_PAGE_SIZE,
        filters: FilterState | None = None,
    ):
        """
        Initialize the controller.

        Args:
            client: Backend client used for every fetch
            favorites: Favorite ids, if already loaded; see set_favorites()
            source: Feed or favorites listing
            page_size: Rows per page, fixed for the lifetime of the screen
            filters: Initial filter state (defaults: newest first, last 7 days)
        """
        self.client = client
        self.favorites = favorites
        self.source = source
        self.page_size = page_size
        self.filters = filters or FilterState()
        self.options = FilterOptions()

        self.current_page = 1
        self.total_items = 0
        self.total_pages = 0
        self.rows: list[FeedRow] = []
        self.status = FeedStatus.IDLE
        self.error: str | None = None
        # Query whose response is currently displayed
        self.displayed_query: FeedQuery | None = None

        self._papers: list[Paper] = []
        self._issued = 0

    # -------------------- Loading --------------------

    @property
    def latest_sequence(self) -> int:
        return self._issued

    def _ensure_current(self, sequence: int) -> None:
        if sequence != self._issued:
            raise StaleResponseDiscarded(sequence, self._issued)

    async def load(self) -> bool:
        """
        Fetch the page described by the current filters and cursor.

        Returns:
            True if the response was applied; False if the request failed or
            was superseded by a newer one before its response arrived
        """
        self._issued += 1
        sequence = self._issued
        query = encode_query(self.filters, self.current_page, self.page_size)
        self.status = FeedStatus.LOADING

        try:
            page = await self.client.get_listing(self.source, query)
        except ResearchFeedError as e:
            if sequence != self._issued:
                logger.debug(f"Ignoring failure of superseded request #{sequence}: {e}")
                return False
            logger.error(f"Loading {self.source} (request #{sequence}) failed: {e}")
            self.status = FeedStatus.FAILED
            self.error = LOAD_ERROR_MESSAGES[self.source]
            return False

        try:
            self._ensure_current(sequence)
        except StaleResponseDiscarded as stale:
            logger.debug(str(stale))
            return False

        if self._apply(page, query):
            # The requested page is past the end; fetch the last page instead.
            return await self.load()
        return True

    def _apply(self, page: FeedPage, query: FeedQuery) -> bool:
        """Apply a response; True if the cursor moved and the rows are stale."""
        self._papers = list(page.papers)
        self.rows = self._enrich(self._papers)
        self.total_items = page.total
        self.total_pages = total_pages_for(page.total, self.page_size)
        self.displayed_query = query

        if self.total_pages >= 1 and self.current_page > self.total_pages:
            logger.warning(
                f"Page {self.current_page} no longer exists "
                f"({self.total_pages} pages); moving to the last page"
            )
            self.current_page = self.total_pages
            return True

        self.status = FeedStatus.READY
        self.error = None
        logger.debug(
            f"Showing {len(self.rows)} of {self.total_items} {self.source} rows "
            f"(page {self.current_page}/{self.total_pages})"
        )
        return False

    def _enrich(self, papers: Iterable[Paper]) -> list[FeedRow]:
        return enrich_rows(
            papers,
            self.favorites,
            all_favorites=self.source == FeedSource.FAVORITES,
        )

    # -------------------- Triggers --------------------

    async def on_filter_change(self, key: str, value: Any) -> bool:
        """Apply one filter change, go back to page 1 and reload.

        Raises:
            ValidationFailure: unknown key or invalid value
        """
        self.filters = set_field(self.filters, key, value)
        self.current_page = 1
        return await self.load()

    async def on_page_change(self, page: int) -> bool:
        self.current_page = clamp_page(page, self.total_pages)
        return await self.load()

    async def next_page(self) -> bool:
        return await self.on_page_change(self.current_page + 1)

    async def previous_page(self) -> bool:
        return await self.on_page_change(self.current_page - 1)

    async def set_favorites(self, favorites: FavoriteSet) -> bool:
        """Install a (late-arriving) favorite set and reload."""
        self.favorites = favorites
        return await self.load()

    async def apply_custom_range(
        self, date_from: date | None, date_to: date | None
    ) -> bool:
        self.filters = with_custom_range(self.filters, date_from, date_to)
        self.current_page = 1
        return await self.load()

    async def clear_date_filter(self) -> bool:
        self.filters = cleared_date_filter(self.filters)
        self.current_page = 1
        return await self.load()

    async def toggle_select_all(self, key: str) -> bool:
        """Select every catalog value of a filter group, or clear the group
        when everything is already selected."""
        field = resolve_field(key)
        catalog = self.options.for_field(field)
        selected = getattr(self.filters, field)
        value = [] if covers_all(selected, catalog) else catalog
        return await self.on_filter_change(field, value)

    # -------------------- Catalog & favorites --------------------

    async def load_filter_options(self) -> FilterOptions:
        """Fetch the filter catalog; failures leave the current options."""
        try:
            self.options = await self.client.get_filter_options()
        except ResearchFeedError as e:
            logger.error(f"Failed to load filter options: {e}")
        return self.options

    def refresh_favorites(self) -> None:
        """Re-derive ``is_favorite`` for the displayed rows without refetching."""
        self.rows = self._enrich(self._papers)

    async def toggle_favorite(self, service: FavoriteService, paper_id: str) -> bool:
        """
        Flip favorite membership of a displayed paper through ``service``.

        On the feed the rows are re-marked in place; on the favorites listing
        the current page is reloaded so a removed paper disappears. A failed
        call sets ``error`` and leaves the favorite set unchanged.

        Returns:
            True if the paper is a favorite afterwards
        """
        self.favorites = service.favorites
        try:
            now_favorite = await service.toggle(paper_id)
        except ResearchFeedError as e:
            logger.error(f"Toggling favorite {paper_id} failed: {e}")
            self.error = FAVORITE_ERROR_MESSAGE
            return service.favorites.has(paper_id)

        if self.source == FeedSource.FAVORITES:
            await self.load()
        else:
            self.refresh_favorites()
        return now_favorite

    # -------------------- Derived view state --------------------

    @property
    def page_window(self) -> list[PageToken]:
        return page_window(self.current_page, self.total_pages)

    @property
    def visible_range(self) -> tuple[int, int]:
        """1-based indices of the first and last displayed rows, (0, 0) if none."""
        if not self.rows:
            return (0, 0)
        first = (self.current_page - 1) * self.page_size + 1
        return (first, first + len(self.rows) - 1)

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages
