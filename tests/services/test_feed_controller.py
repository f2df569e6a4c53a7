"""
Tests for FeedController.
"""

import asyncio
from datetime import date

import pytest

from research_feed.models.enums import DatePreset, FeedSource, FeedStatus, SortOrder
from research_feed.models.filters import FilterState
from research_feed.models.papers import Paper
from research_feed.services.favorites import FavoriteService, FavoriteSet
from research_feed.services.feed_controller import FeedController, enrich_rows
from research_feed.utils.errors import ApiStatusError, NetworkFailure, ValidationFailure


@pytest.fixture
def controller(mock_client):
    return FeedController(mock_client, page_size=15)


def test_enrichment_marks_favorites():
    papers = [Paper(id="a"), Paper(id="b")]

    rows = enrich_rows(papers, FavoriteSet(["b"]))

    assert [(row.id, row.is_favorite) for row in rows] == [("a", False), ("b", True)]


def test_enrichment_without_favorite_set_marks_nothing():
    rows = enrich_rows([Paper(id="a")], None)

    assert rows[0].is_favorite is False


def test_initial_state(controller):
    assert controller.status == FeedStatus.IDLE
    assert controller.current_page == 1
    assert controller.rows == []
    assert controller.page_window == []
    assert controller.visible_range == (0, 0)


@pytest.mark.asyncio
async def test_load_applies_rows_and_page_metadata(controller, mock_client, page_factory):
    mock_client.get_listing.return_value = page_factory(["a", "b"], total=31)

    applied = await controller.load()

    assert applied is True
    assert controller.status == FeedStatus.READY
    assert [row.id for row in controller.rows] == ["a", "b"]
    assert controller.total_items == 31
    assert controller.total_pages == 3
    assert controller.page_window == [1, 2, 3]
    source, query = mock_client.get_listing.await_args.args
    assert source == FeedSource.FEED
    assert query.values("page") == ["1"]
    assert query.values("page_size") == ["15"]
    assert controller.displayed_query == query


@pytest.mark.asyncio
async def test_rows_use_favorite_set(mock_client, page_factory):
    mock_client.get_listing.return_value = page_factory(["a", "b"])
    controller = FeedController(mock_client, FavoriteSet(["b"]))

    await controller.load()

    assert [row.is_favorite for row in controller.rows] == [False, True]


@pytest.mark.asyncio
async def test_favorites_source_marks_every_row(mock_client, page_factory):
    mock_client.get_listing.return_value = page_factory(["a", "b"])
    controller = FeedController(mock_client, source=FeedSource.FAVORITES)

    await controller.load()

    assert all(row.is_favorite for row in controller.rows)
    assert mock_client.get_listing.await_args.args[0] == FeedSource.FAVORITES


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "key, value",
    [
        ("subspecialties", ["Epilepsy"]),
        ("research_types", ["RCT"]),
        ("journals", ["Brain"]),
        ("sort", "title"),
        ("date_preset", "30d"),
    ],
)
async def test_every_filter_change_resets_page(controller, mock_client, page_factory, key, value):
    mock_client.get_listing.return_value = page_factory(["a"], total=100)
    await controller.on_page_change(5)
    assert controller.current_page == 1  # clamped: no pages known yet
    await controller.load()
    await controller.on_page_change(5)
    assert controller.current_page == 5

    await controller.on_filter_change(key, value)

    assert controller.current_page == 1
    query = mock_client.get_listing.await_args.args[1]
    assert query.values("page") == ["1"]


@pytest.mark.asyncio
async def test_preset_change_away_from_custom_drops_dates(controller, mock_client):
    await controller.apply_custom_range(date(2024, 1, 1), date(2024, 1, 31))
    query = mock_client.get_listing.await_args.args[1]
    assert query.values("date_from") == ["2024-01-01"]

    await controller.on_filter_change("datePreset", "12m")

    assert controller.filters.date_from is None
    assert controller.filters.date_to is None
    query = mock_client.get_listing.await_args.args[1]
    assert query.values("date_from") == []
    assert query.values("date_preset") == ["12m"]


@pytest.mark.asyncio
async def test_clear_date_filter(controller, mock_client):
    await controller.apply_custom_range(date(2024, 1, 1), None)

    await controller.clear_date_filter()

    assert controller.filters.date_preset == DatePreset.ALL
    assert mock_client.get_listing.await_count == 2


@pytest.mark.asyncio
async def test_invalid_filter_change_raises_and_keeps_state(controller, mock_client):
    with pytest.raises(ValidationFailure):
        await controller.on_filter_change("sort", "bogus")

    assert controller.filters.sort == SortOrder.DATE
    mock_client.get_listing.assert_not_awaited()


@pytest.mark.asyncio
async def test_page_change_is_clamped(controller, mock_client, page_factory):
    mock_client.get_listing.return_value = page_factory(["a"], total=45)
    await controller.load()

    await controller.on_page_change(99)
    assert controller.current_page == 3

    await controller.on_page_change(-4)
    assert controller.current_page == 1


@pytest.mark.asyncio
async def test_next_and_previous_page(controller, mock_client, page_factory):
    mock_client.get_listing.return_value = page_factory(["a"], total=30)
    await controller.load()

    await controller.next_page()
    assert controller.current_page == 2
    assert controller.has_next is False
    await controller.next_page()
    assert controller.current_page == 2

    await controller.previous_page()
    assert controller.current_page == 1
    assert controller.has_previous is False


@pytest.mark.asyncio
async def test_shrinking_result_moves_to_last_page(controller, mock_client, page_factory):
    mock_client.get_listing.return_value = page_factory(["a"], total=100)
    await controller.load()
    await controller.on_page_change(7)

    last_page = page_factory([str(i) for i in range(16, 21)], total=20)
    mock_client.get_listing.side_effect = [page_factory([], total=20), last_page]
    assert await controller.load() is True

    assert controller.total_pages == 2
    assert controller.current_page == 2
    assert [row.id for row in controller.rows] == ["16", "17", "18", "19", "20"]
    assert controller.displayed_query.values("page") == ["2"]
    assert controller.visible_range == (16, 20)
    assert controller.status == FeedStatus.READY


@pytest.mark.asyncio
async def test_unfavoriting_last_row_of_last_page_shows_previous_page(mock_client, page_factory):
    ids = [str(i) for i in range(1, 17)]
    service = FavoriteService(mock_client, favorites=FavoriteSet(ids))
    mock_client.get_listing.return_value = page_factory(ids, total=16)
    controller = FeedController(mock_client, source=FeedSource.FAVORITES, page_size=15)
    await controller.load()
    mock_client.get_listing.return_value = page_factory(["16"], total=16)
    await controller.on_page_change(2)

    mock_client.get_listing.side_effect = [
        page_factory([], total=15),
        page_factory(ids[:15], total=15),
    ]
    assert await controller.toggle_favorite(service, "16") is False

    assert controller.current_page == 1
    assert controller.total_pages == 1
    assert len(controller.rows) == 15
    assert controller.displayed_query.values("page") == ["1"]
    assert controller.visible_range == (1, 15)


@pytest.mark.asyncio
async def test_failure_keeps_rows_and_sets_message(controller, mock_client, page_factory):
    mock_client.get_listing.return_value = page_factory(["a", "b"])
    await controller.load()

    mock_client.get_listing.side_effect = NetworkFailure("connection refused")
    applied = await controller.next_page()

    assert applied is False
    assert controller.status == FeedStatus.FAILED
    assert controller.error == "Failed to load your feed."
    assert [row.id for row in controller.rows] == ["a", "b"]


@pytest.mark.asyncio
async def test_failure_message_on_favorites_screen(mock_client):
    mock_client.get_listing.side_effect = ApiStatusError(500)
    controller = FeedController(mock_client, source=FeedSource.FAVORITES)

    await controller.load()

    assert controller.error == "Failed to load your favorites."


@pytest.mark.asyncio
async def test_success_after_failure_clears_error(controller, mock_client, page_factory):
    mock_client.get_listing.side_effect = NetworkFailure("timeout")
    await controller.load()

    mock_client.get_listing.side_effect = None
    mock_client.get_listing.return_value = page_factory(["a"])
    await controller.load()

    assert controller.status == FeedStatus.READY
    assert controller.error is None


class GatedClient:
    """Listing client whose responses are released by the test."""

    def __init__(self):
        self.gates: list[asyncio.Event] = []
        self.responses: list = []

    async def get_listing(self, source, query):
        gate = asyncio.Event()
        index = len(self.gates)
        self.gates.append(gate)
        await gate.wait()
        response = self.responses[index]
        if isinstance(response, Exception):
            raise response
        return response


@pytest.mark.asyncio
async def test_older_response_arriving_late_is_discarded(page_factory):
    client = GatedClient()
    client.responses = [page_factory(["old"], total=1), page_factory(["new"], total=40)]
    controller = FeedController(client)

    first = asyncio.create_task(controller.load())
    await asyncio.sleep(0)
    second = asyncio.create_task(controller.on_filter_change("journals", ["Brain"]))
    await asyncio.sleep(0)

    client.gates[1].set()
    assert await second is True
    client.gates[0].set()
    assert await first is False

    assert [row.id for row in controller.rows] == ["new"]
    assert controller.total_pages == 3
    assert controller.displayed_query.values("journals") == ["Brain"]
    assert controller.status == FeedStatus.READY


@pytest.mark.asyncio
async def test_stale_failure_does_not_mark_newer_request_failed(page_factory):
    client = GatedClient()
    client.responses = [NetworkFailure("timeout"), page_factory(["new"])]
    controller = FeedController(client)

    first = asyncio.create_task(controller.load())
    await asyncio.sleep(0)
    second = asyncio.create_task(controller.next_page())
    await asyncio.sleep(0)

    client.gates[1].set()
    await second
    client.gates[0].set()
    await first

    assert controller.status == FeedStatus.READY
    assert controller.error is None
    assert controller.latest_sequence == 2


@pytest.mark.asyncio
async def test_late_favorite_set_triggers_reload(controller, mock_client, page_factory):
    mock_client.get_listing.return_value = page_factory(["a", "b"])
    await controller.load()
    assert not any(row.is_favorite for row in controller.rows)

    await controller.set_favorites(FavoriteSet(["a"]))

    assert mock_client.get_listing.await_count == 2
    assert [row.is_favorite for row in controller.rows] == [True, False]


@pytest.mark.asyncio
async def test_favorites_read_at_enrichment_time(mock_client, page_factory):
    favorites = FavoriteSet()
    mock_client.get_listing.return_value = page_factory(["a"])
    controller = FeedController(mock_client, favorites)
    await controller.load()

    favorites.add("a")
    controller.refresh_favorites()

    assert controller.rows[0].is_favorite is True
    assert mock_client.get_listing.await_count == 1


@pytest.mark.asyncio
async def test_toggle_select_all(controller, mock_client):
    await controller.load_filter_options()

    await controller.toggle_select_all("journals")
    assert controller.filters.journals == {"Lancet Neurology", "Neurology"}

    await controller.toggle_select_all("journals")
    assert controller.filters.journals == frozenset()


@pytest.mark.asyncio
async def test_filter_options_failure_is_not_fatal(controller, mock_client):
    mock_client.get_filter_options.side_effect = NetworkFailure("down")

    options = await controller.load_filter_options()

    assert options.journals == []
    assert controller.status == FeedStatus.IDLE


@pytest.mark.asyncio
async def test_visible_range(mock_client, page_factory):
    mock_client.get_listing.return_value = page_factory(
        [str(i) for i in range(15)], total=42
    )
    controller = FeedController(mock_client, page_size=15)
    await controller.load()
    await controller.on_page_change(2)
    assert controller.visible_range == (16, 30)

    mock_client.get_listing.return_value = page_factory(
        [str(i) for i in range(12)], total=42
    )
    await controller.on_page_change(3)
    assert controller.visible_range == (31, 42)


@pytest.mark.asyncio
async def test_initial_filters_are_used(mock_client):
    controller = FeedController(
        mock_client, filters=FilterState(sort=SortOrder.JOURNAL)
    )

    await controller.load()

    assert mock_client.get_listing.await_args.args[1].values("sort") == ["journal"]


@pytest.mark.asyncio
async def test_toggle_favorite_remarks_rows_without_refetch(mock_client, page_factory):
    service = FavoriteService(mock_client, favorites=FavoriteSet())
    mock_client.get_listing.return_value = page_factory(["a", "b"])
    controller = FeedController(mock_client, service.favorites)
    await controller.load()

    assert await controller.toggle_favorite(service, "b") is True

    assert [row.is_favorite for row in controller.rows] == [False, True]
    mock_client.add_favorite.assert_awaited_once_with("b")
    assert mock_client.get_listing.await_count == 1


@pytest.mark.asyncio
async def test_toggle_favorite_failure_sets_message(mock_client, page_factory):
    service = FavoriteService(mock_client, favorites=FavoriteSet(["a"]))
    mock_client.remove_favorite.side_effect = NetworkFailure("down")
    mock_client.get_listing.return_value = page_factory(["a"])
    controller = FeedController(mock_client, service.favorites)
    await controller.load()

    assert await controller.toggle_favorite(service, "a") is True

    assert controller.error == "Failed to update favorites."
    assert controller.rows[0].is_favorite is True


@pytest.mark.asyncio
async def test_unfavoriting_on_favorites_screen_reloads(mock_client, page_factory):
    service = FavoriteService(mock_client, favorites=FavoriteSet(["a", "b"]))
    mock_client.get_listing.return_value = page_factory(["a", "b"])
    controller = FeedController(mock_client, source=FeedSource.FAVORITES)
    await controller.load()

    mock_client.get_listing.return_value = page_factory(["b"])
    assert await controller.toggle_favorite(service, "a") is False

    assert [row.id for row in controller.rows] == ["b"]
    assert mock_client.get_listing.await_count == 2
