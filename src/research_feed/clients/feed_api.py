"""
Research feed API client.

Async access to the feed, favorites, filter options and preferences
endpoints of the research feed backend. Every failure is raised as a
ResearchFeedError subclass; callers never see raw httpx exceptions.
"""

import logging
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from research_feed import __version__
from research_feed.models.enums import FeedSource
from research_feed.models.filters import FilterOptions
from research_feed.models.papers import FeedPage
from research_feed.models.preferences import PreferenceDocument
from research_feed.services.query import FeedQuery
from research_feed.settings import DEFAULT_API_URL, FeedSettings
from research_feed.utils.errors import (
    ApiStatusError,
    AuthenticationError,
    ConfigurationError,
    NetworkFailure,
    ResponseFormatError,
    format_api_error,
)
from research_feed.utils.logging_config import PerformanceMonitor

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

REQUEST_TIMEOUT = 30.0

USER_AGENT = f"research-feed/{__version__}"

LISTING_PATHS = {
    FeedSource.FEED: "/feed",
    FeedSource.FAVORITES: "/favorites/",
}


class ResearchFeedClient:
    """Client for the research feed backend."""

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        token: str | None = None,
        timeout: float = REQUEST_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: API root, e.g. ``http://127.0.0.1:8001/api/v1``
            token: Session token sent as a bearer token; acquired elsewhere
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(cls, settings: FeedSettings) -> "ResearchFeedClient":
        if not settings.api_url.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"Invalid API URL '{settings.api_url}'",
                suggestion="Set RESEARCH_FEED_API_URL to an http(s) URL",
            )
        return cls(
            base_url=settings.api_url,
            token=settings.api_token or None,
            timeout=settings.request_timeout,
        )

    @property
    def headers(self) -> dict[str, str]:
        """Build request headers."""
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=self.headers,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "ResearchFeedClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # -------------------- Transport --------------------

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: list[tuple[str, str]] | None = None,
        json: Any = None,
    ) -> Any:
        client = await self._get_client()

        try:
            with PerformanceMonitor(logger, f"{method} {path}"):
                response = await client.request(method, path, params=params, json=json)
        except httpx.TimeoutException as e:
            raise NetworkFailure(f"{method} {path} timed out") from e
        except httpx.HTTPError as e:
            raise NetworkFailure(f"{method} {path} failed: {e}") from e

        if response.status_code == 401:
            raise AuthenticationError(401)
        if response.is_error:
            detail = self._error_detail(response)
            logger.warning(f"{method} {path} returned HTTP {response.status_code}")
            raise ApiStatusError(
                response.status_code,
                format_api_error(response.status_code, detail),
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ResponseFormatError(f"{method} {path} returned invalid JSON") from e

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return ""
        if isinstance(body, dict):
            detail = body.get("detail")
            if isinstance(detail, str):
                return detail
        return ""

    @staticmethod
    def _parse(model: type[ModelT], data: Any, what: str) -> ModelT:
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            raise ResponseFormatError(f"Unexpected {what} payload: {e.error_count()} error(s)") from e

    @staticmethod
    def _unwrap(data: Any) -> Any:
        # Preferences are served inside a {"data": ...} envelope.
        if isinstance(data, dict) and isinstance(data.get("data"), dict):
            return data["data"]
        return data

    # -------------------- Listings --------------------

    async def get_listing(self, source: FeedSource, query: FeedQuery) -> FeedPage:
        """Fetch one page of the feed or of the favorites listing."""
        path = LISTING_PATHS[source]
        data = await self._request("GET", path, params=list(query.params))
        return self._parse(FeedPage, data, source.value)

    async def get_feed(self, query: FeedQuery) -> FeedPage:
        return await self.get_listing(FeedSource.FEED, query)

    async def get_favorites(self, query: FeedQuery) -> FeedPage:
        return await self.get_listing(FeedSource.FAVORITES, query)

    # -------------------- Favorites --------------------

    async def add_favorite(self, paper_id: str) -> None:
        await self._request("POST", f"/favorites/{quote(paper_id, safe='')}")
        logger.info(f"Added {paper_id} to favorites")

    async def remove_favorite(self, paper_id: str) -> None:
        await self._request("DELETE", f"/favorites/{quote(paper_id, safe='')}")
        logger.info(f"Removed {paper_id} from favorites")

    # -------------------- Catalog & preferences --------------------

    async def get_filter_options(self) -> FilterOptions:
        data = await self._request("GET", "/filters")
        return self._parse(FilterOptions, data, "filter options")

    async def get_preferences(self) -> PreferenceDocument:
        data = await self._request("GET", "/me/preferences/")
        return self._parse(PreferenceDocument, self._unwrap(data), "preferences")

    async def update_preferences(
        self, document: PreferenceDocument
    ) -> PreferenceDocument | None:
        """
        Replace the remote preference document.

        Returns:
            The document echoed by the server, or None if it sent no body
        """
        data = await self._request(
            "PUT", "/me/preferences/", json=document.model_dump(mode="json")
        )
        data = self._unwrap(data)
        if not isinstance(data, dict):
            return None
        return self._parse(PreferenceDocument, data, "preferences")
