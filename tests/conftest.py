from unittest.mock import AsyncMock

import pytest

from research_feed.clients.feed_api import ResearchFeedClient
from research_feed.models.filters import FilterOptions
from research_feed.models.papers import FeedPage, Paper
from research_feed.models.preferences import PreferenceDocument


def make_page(ids: list[str], total: int | None = None) -> FeedPage:
    """FeedPage with one minimal paper per id."""
    return FeedPage(
        papers=[Paper(id=paper_id, title=f"Paper {paper_id}") for paper_id in ids],
        total=len(ids) if total is None else total,
    )


@pytest.fixture
def mock_client():
    """Fixture for ResearchFeedClient mock."""
    client = AsyncMock(spec=ResearchFeedClient)
    client.get_listing.return_value = make_page([])
    client.get_favorites.return_value = make_page([])
    client.get_filter_options.return_value = FilterOptions(
        subspecialties=["Epilepsy", "Stroke"],
        research_types=["RCT"],
        journals=["Lancet Neurology", "Neurology"],
    )
    client.get_preferences.return_value = PreferenceDocument(
        subspecialties=["stroke"],
        research_types=["rct"],
    )
    client.update_preferences.return_value = None
    return client


@pytest.fixture
def page_factory():
    return make_page
