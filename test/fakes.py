"""Shared fixtures: a scriptable TMDb stand-in built on httpx.MockTransport."""

import asyncio
from typing import Any, Dict, List, Optional

import httpx

from moviedeck.core.clients import create_tmdb_client
from moviedeck.core.config import Settings
from moviedeck.services.tmdb import MovieGateway

GENRES = [{"id": 28, "name": "Action"}, {"id": 35, "name": "Comedy"}, {"id": 878, "name": "Science Fiction"}]


def make_settings(**overrides: Any) -> Settings:
    values: Dict[str, Any] = {
        "tmdb_bearer_token": "test-token",
        "tmdb_base_url": "https://tmdb.test/3",
        "tmdb_image_base_url": "https://img.test/t/p/w500",
        "tmdb_rate_limit": 1000,
        "storage_path": None,
        "render_delay_seconds": 0,
        "search_delay_seconds": 0,
        "search_debounce_seconds": 0.05,
    }
    values.update(overrides)
    return Settings(**values)


def movie_json(movie_id: int, title: str = "", **extra: Any) -> Dict[str, Any]:
    data = {
        "id": movie_id,
        "title": title,
        "poster_path": f"/poster{movie_id}.jpg" if title else None,
        "release_date": "2020-05-01",
        "vote_average": 7.25,
        "vote_count": 100,
        "overview": f"Overview of {title}",
        "genre_ids": [28],
    }
    data.update(extra)
    return data


def page(*movies: Dict[str, Any]) -> Dict[str, Any]:
    return {"page": 1, "results": list(movies), "total_pages": 1, "total_results": len(movies)}


class FakeTMDb:
    """
    Maps request paths (without the /3 prefix) to a JSON body, an
    (status, body) tuple, or an exception to raise. Records every request.
    """

    def __init__(self, routes: Optional[Dict[str, Any]] = None):
        self.routes: Dict[str, Any] = {
            "/trending/movie/week": page(movie_json(1, "Trending One"), movie_json(2, "Trending Two")),
            "/genre/movie/list": {"genres": GENRES},
        }
        self.routes.update(routes or {})
        self.requests: List[httpx.Request] = []
        self.gates: Dict[str, asyncio.Event] = {}

    def calls(self, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if self._path(r) == path]

    @staticmethod
    def _path(request: httpx.Request) -> str:
        path = request.url.path
        return path[len("/3"):] if path.startswith("/3/") else path

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = self._path(request)
        gate = self.gates.get(path)
        if gate is not None:
            await gate.wait()
        route = self.routes.get(path)
        if route is None:
            return httpx.Response(404, json={"status_message": "not found"})
        if isinstance(route, Exception):
            raise route
        if callable(route):
            route = route(request)
        if isinstance(route, tuple):
            status, body = route
            if isinstance(body, (bytes, str)):
                return httpx.Response(status, content=body)
            return httpx.Response(status, json=body)
        return httpx.Response(200, json=route)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def gateway(self, settings: Optional[Settings] = None) -> MovieGateway:
        settings = settings or make_settings()
        return MovieGateway(settings, client=create_tmdb_client(settings, self.transport()))
