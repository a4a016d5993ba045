"""
TMDB Client

Thin async wrapper over the TMDB v3 REST API. Every call is a plain GET
with query-string parameters; non-OK responses raise `UpstreamError`
carrying the upstream status code and `status_message`.
"""

from typing import Any, Dict, List, Optional

import httpx

from ..config import get_settings
from ..core.exceptions import ConfigurationError, UpstreamError
from ..core.logging import get_logger
from ..models.media import MediaType

logger = get_logger(__name__)


class TMDbClient:
    """
    TMDB API client sharing one `httpx.AsyncClient` across requests.

    Endpoints used:
    - /search/multi, /search/{type}
    - /discover/{type}
    - /genre/{type}/list
    - /trending/{type}/{window}
    - /movie/popular, /movie/top_rated
    - /{type}/{id}, /{type}/{id}/videos
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.tmdb_api_key
        self.base_url = (base_url or settings.tmdb_base_url).rstrip("/")
        self.timeout = settings.tmdb_timeout_seconds
        self._client = http_client

        if not self.api_key:
            logger.warning("tmdb_api_key_not_set")

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def aclose(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # =========================================================================
    # LOW-LEVEL
    # =========================================================================

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        GET a TMDB path and return the decoded JSON body.

        Raises:
            ConfigurationError: no API key configured
            UpstreamError: non-OK status (forwarded) or transport failure (502)
        """
        if not self.api_key:
            raise ConfigurationError("TMDB API Key missing.")

        query = {k: v for k, v in (params or {}).items() if v is not None}
        query["api_key"] = self.api_key

        try:
            response = await self.client.get(f"{self.base_url}{path}", params=query)
        except httpx.HTTPError as e:
            logger.error("tmdb_request_failed", path=path, error=str(e))
            raise UpstreamError(502, "Failed to reach TMDb API.")

        if not response.is_success:
            raise self._error_from_response(path, response)

        return response.json()

    @staticmethod
    def _error_from_response(path: str, response: httpx.Response) -> UpstreamError:
        message = None
        try:
            body = response.json()
            if isinstance(body, dict):
                message = body.get("status_message")
        except ValueError:
            message = "Failed to parse TMDb error response."

        logger.error(
            "tmdb_error_response",
            path=path,
            status=response.status_code,
            status_message=message,
        )
        return UpstreamError(response.status_code, message)

    # =========================================================================
    # SEARCH / DISCOVER
    # =========================================================================

    async def search_multi(self, query: str, page: int = 1, language: Optional[str] = None) -> Dict[str, Any]:
        return await self.get("/search/multi", {
            "query": query,
            "page": page,
            "language": language,
            "include_adult": "false",
        })

    async def search(
        self,
        media_type: MediaType,
        query: str,
        page: int = 1,
        language: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self.get(f"/search/{MediaType(media_type).value}", {
            "query": query,
            "page": page,
            "language": language,
            "include_adult": "false",
        })

    async def discover(self, media_type: MediaType, params: Dict[str, Any]) -> Dict[str, Any]:
        return await self.get(f"/discover/{MediaType(media_type).value}", params)

    async def trending(
        self,
        media_type: MediaType,
        window: str = "week",
        language: Optional[str] = None,
        region: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self.get(f"/trending/{MediaType(media_type).value}/{window}", {
            "language": language,
            "region": region,
        })

    async def movie_list(
        self,
        list_name: str,
        language: Optional[str] = None,
        page: int = 1,
        region: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Curated movie lists: `popular`, `top_rated`."""
        return await self.get(f"/movie/{list_name}", {
            "language": language,
            "page": page,
            "region": region,
        })

    # =========================================================================
    # GENRES / ITEMS
    # =========================================================================

    async def genre_list(self, media_type: MediaType, language: Optional[str] = None) -> List[Dict[str, Any]]:
        data = await self.get(f"/genre/{MediaType(media_type).value}/list", {"language": language})
        return data.get("genres", [])

    async def details(self, media_type: MediaType, tmdb_id: int, language: Optional[str] = None) -> Dict[str, Any]:
        return await self.get(f"/{MediaType(media_type).value}/{tmdb_id}", {"language": language})

    async def videos(self, media_type: MediaType, tmdb_id: int) -> List[Dict[str, Any]]:
        data = await self.get(f"/{MediaType(media_type).value}/{tmdb_id}/videos")
        return data.get("results", [])


# Singleton
_tmdb_client: Optional[TMDbClient] = None


def get_tmdb_client() -> TMDbClient:
    global _tmdb_client
    if _tmdb_client is None:
        _tmdb_client = TMDbClient()
    return _tmdb_client
