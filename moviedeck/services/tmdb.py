# moviedeck/services/tmdb.py

from typing import Optional, Dict, List, Any

import httpx
from aiolimiter import AsyncLimiter

from moviedeck.core.clients import create_tmdb_client, create_tmdb_limiter
from moviedeck.core.config import Settings
from moviedeck.core.errors import RemoteError, TransportError
from moviedeck.core.logger import setup_logger
from moviedeck.core.models.movie import Genre, MovieDetail, MovieSummary


logger = setup_logger(__name__)

TIME_WINDOWS = ("day", "week")
DETAIL_APPEND = "credits,videos,reviews"


class MovieGateway:
    """
    Thin parameter bindings over the TMDb v3 REST API. Every call is a single
    GET; failures raise RemoteError / TransportError and are never retried.
    """

    def __init__(
        self,
        settings: Settings,
        client: Optional[httpx.AsyncClient] = None,
        limiter: Optional[AsyncLimiter] = None,
    ):
        self.settings = settings
        self.client = client or create_tmdb_client(settings)
        self.limiter = limiter or create_tmdb_limiter(settings)

    async def __aenter__(self) -> "MovieGateway":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    # ─── Core request ────────────────────────────────────────────────────────
    async def request(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Internal TMDb GET. Raises RemoteError on non-2xx status and
        TransportError when the network call cannot complete.
        """
        try:
            async with self.limiter:
                resp = await self.client.get(endpoint, params=params or {})
        except httpx.RequestError as exc:
            logger.error("[TMDB] Request error for %s: %s", endpoint, exc)
            raise TransportError(endpoint, exc) from exc

        if not resp.is_success:
            logger.error(
                "[TMDB] %s returned %d %s", endpoint, resp.status_code, resp.reason_phrase
            )
            raise RemoteError(resp.status_code, resp.reason_phrase, endpoint)

        try:
            return resp.json()
        except ValueError as exc:
            logger.error("[TMDB] Invalid JSON from %s: %s", endpoint, exc)
            raise RemoteError(resp.status_code, "Invalid JSON body", endpoint) from exc

    async def _results(self, endpoint: str, params: Dict[str, Any]) -> List[MovieSummary]:
        data = await self.request(endpoint, params)
        results = data.get("results", []) if isinstance(data, dict) else []
        movies = [MovieSummary.from_dict(r) for r in results if r.get("id") is not None]
        logger.debug("[TMDB] %s → %d result(s)", endpoint, len(movies))
        return movies

    # ─── List endpoints ──────────────────────────────────────────────────────
    async def fetch_trending_movies(self, time_window: str = "week", page: int = 1) -> List[MovieSummary]:
        if time_window not in TIME_WINDOWS:
            raise ValueError(f"time_window must be one of {TIME_WINDOWS}, got {time_window!r}")
        return await self._results(f"/trending/movie/{time_window}", {"page": page})

    async def fetch_popular_movies(self, page: int = 1) -> List[MovieSummary]:
        return await self._results("/movie/popular", {"page": page})

    async def fetch_now_playing_movies(self, page: int = 1) -> List[MovieSummary]:
        return await self._results("/movie/now_playing", {"page": page})

    async def fetch_top_rated_movies(self, page: int = 1) -> List[MovieSummary]:
        return await self._results("/movie/top_rated", {"page": page})

    async def fetch_movies_by_genre(self, genre_id: int, page: int = 1) -> List[MovieSummary]:
        return await self._results(
            "/discover/movie",
            {"with_genres": genre_id, "sort_by": "popularity.desc", "page": page},
        )

    async def search_movies(self, query: str, page: int = 1) -> List[MovieSummary]:
        logger.info("[TMDB] Searching movie: %s", query)
        return await self._results("/search/movie", {"query": query, "page": page})

    # ─── Lookup endpoints ────────────────────────────────────────────────────
    async def fetch_genres(self) -> List[Genre]:
        data = await self.request("/genre/movie/list")
        genres = data.get("genres", []) if isinstance(data, dict) else []
        return [Genre.from_dict(g) for g in genres if g.get("id") is not None]

    async def fetch_movie_details(self, movie_id: int) -> MovieDetail:
        detail = await self.request(
            f"/movie/{movie_id}", {"append_to_response": DETAIL_APPEND}
        )
        if not isinstance(detail, dict) or detail.get("id") is None:
            raise RemoteError(200, "Malformed movie detail", f"/movie/{movie_id}")
        return MovieDetail.from_dict(detail)
