"""
Favorite membership cache.

The set is loaded once per session from the favorites listing and then
changed only by explicit add/remove calls against the remote favorites
resource.
"""

from collections.abc import Iterable, Iterator
import logging
from typing import TYPE_CHECKING

from research_feed.models.enums import DatePreset
from research_feed.models.filters import FilterState
from research_feed.services.query import encode_query

if TYPE_CHECKING:
    from research_feed.clients.feed_api import ResearchFeedClient

logger = logging.getLogger(__name__)

DEFAULT_FAVORITES_CAP = 1000


class FavoriteSet:
    """Set of paper ids the current user has marked as favorite."""

    def __init__(self, ids: Iterable[str] = ()):
        self._ids: set[str] = {str(paper_id) for paper_id in ids}

    def has(self, paper_id: str) -> bool:
        return paper_id in self._ids

    def add(self, paper_id: str) -> None:
        self._ids.add(paper_id)

    def discard(self, paper_id: str) -> None:
        self._ids.discard(paper_id)

    def replace(self, ids: Iterable[str]) -> None:
        self._ids = {str(paper_id) for paper_id in ids}

    def snapshot(self) -> frozenset[str]:
        return frozenset(self._ids)

    def __contains__(self, paper_id: object) -> bool:
        return paper_id in self._ids

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._ids))

    def __len__(self) -> int:
        return len(self._ids)

    def __repr__(self) -> str:
        return f"FavoriteSet({len(self._ids)} ids)"


class FavoriteService:
    """Loads the FavoriteSet and keeps it in step with the remote resource."""

    def __init__(
        self,
        client: "ResearchFeedClient",
        favorites: FavoriteSet | None = None,
        cap: int = DEFAULT_FAVORITES_CAP,
    ):
        self.client = client
        self.favorites = favorites if favorites is not None else FavoriteSet()
        self.cap = cap

    async def load(self) -> FavoriteSet:
        """
        Fetch favorite ids with a single capped request.

        Replaces the contents of ``self.favorites`` in place so every holder
        of the set sees the new members.

        Raises:
            ResearchFeedError: if the listing cannot be fetched
        """
        # Every favorite, regardless of age.
        filters = FilterState(date_preset=DatePreset.ALL)
        page = await self.client.get_favorites(encode_query(filters, 1, self.cap))

        if page.total > self.cap:
            logger.warning(
                f"User has {page.total} favorites; only the first {self.cap} "
                "are tracked"
            )

        self.favorites.replace(paper.id for paper in page.papers)
        logger.info(f"Loaded {len(self.favorites)} favorite ids")
        return self.favorites

    async def add(self, paper_id: str) -> None:
        await self.client.add_favorite(paper_id)
        self.favorites.add(paper_id)

    async def remove(self, paper_id: str) -> None:
        await self.client.remove_favorite(paper_id)
        self.favorites.discard(paper_id)

    async def toggle(self, paper_id: str) -> bool:
        """
        Flip membership of ``paper_id``.

        Returns:
            True if the paper is a favorite afterwards
        """
        if self.favorites.has(paper_id):
            await self.remove(paper_id)
            return False
        await self.add(paper_id)
        return True
