# moviedeck/services/controller.py
"""
Filter/search controller: turns user intent (search text, genre button,
Watch Later toggle) into exactly one displayed movie sequence.

All mutable view state lives on ``FilterController.state``. Each view load
takes a new generation number; a response whose generation is no longer the
latest is dropped instead of overwriting newer results.
"""
import asyncio
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from moviedeck.core.config import Settings
from moviedeck.core.debounce import Debouncer
from moviedeck.core.errors import RemoteError, TransportError
from moviedeck.core.logger import setup_logger
from moviedeck.core.models.enums import NotificationLevel, ViewKind
from moviedeck.core.models.movie import Genre, MovieSummary
from moviedeck.core.notifications import Notifier
from moviedeck.services.cards import DEFAULT_CONTAINER, CardRenderer, GridMessage
from moviedeck.services.tmdb import MovieGateway
from moviedeck.services.watchlist import WatchlistStore

logger = setup_logger(__name__)

ALL_GENRES = "all"
MIN_QUERY_LENGTH = 2

WATCHLIST_EMPTY = GridMessage(
    "Your Watch Later list is empty",
    "Start adding movies to your Watch Later list to see them here!",
)
STARTUP_FAILED = GridMessage(
    "Application Error",
    "Failed to load the Movie Explorer Dashboard. Check your internet connection and API key.",
    level="danger",
)

GenreChoice = Union[int, str]


@dataclass(frozen=True)
class ViewState:
    kind: ViewKind
    genre_id: Optional[int] = None
    query: Optional[str] = None

    @classmethod
    def trending(cls) -> "ViewState":
        return cls(ViewKind.TRENDING)

    @classmethod
    def genre(cls, genre_id: int) -> "ViewState":
        return cls(ViewKind.GENRE, genre_id=genre_id)

    @classmethod
    def search(cls, query: str) -> "ViewState":
        return cls(ViewKind.SEARCH, query=query)

    @classmethod
    def watchlist(cls) -> "ViewState":
        return cls(ViewKind.WATCHLIST)

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "genre_id": self.genre_id, "query": self.query}


@dataclass
class ControllerState:
    genres: List[Genre] = field(default_factory=list)
    view: ViewState = field(default_factory=ViewState.trending)
    search_text: str = ""
    active_genre: GenreChoice = ALL_GENRES
    generation: int = 0

    def genre_name(self, genre_id: int) -> str:
        for g in self.genres:
            if g.id == genre_id:
                return g.name
        return "Unknown"

    def to_dict(self) -> dict:
        return {
            "genres": [{"id": g.id, "name": g.name} for g in self.genres],
            "view": self.view.to_dict(),
            "search_text": self.search_text,
            "active_genre": self.active_genre,
            "generation": self.generation,
        }


class FilterController:
    def __init__(
        self,
        settings: Settings,
        gateway: MovieGateway,
        store: WatchlistStore,
        renderer: CardRenderer,
        notifier: Notifier,
        container_id: str = DEFAULT_CONTAINER,
    ):
        self.settings = settings
        self.gateway = gateway
        self.store = store
        self.renderer = renderer
        self.notifier = notifier
        self.container_id = container_id
        self.state = ControllerState()
        self.debouncer = Debouncer(self.search, settings.search_debounce_seconds)

    # ─── Internal helpers ────────────────────────────────────────────────────
    def _begin(self) -> int:
        self.state.generation += 1
        return self.state.generation

    def _is_current(self, generation: int) -> bool:
        if generation != self.state.generation:
            logger.debug(
                "[VIEW] Discarding stale response (generation %d, latest %d)",
                generation, self.state.generation,
            )
            return False
        return True

    def _reset_active_genre(self) -> None:
        self.state.active_genre = ALL_GENRES

    def _clear_search(self) -> None:
        self.debouncer.cancel()
        self.state.search_text = ""

    async def _apply(
        self,
        generation: int,
        view: ViewState,
        movies: Sequence[MovieSummary],
        notice: Optional[str] = None,
        level: NotificationLevel = NotificationLevel.INFO,
        empty_message: Optional[GridMessage] = None,
    ) -> bool:
        if not self._is_current(generation):
            return False
        self.state.view = view
        await self.renderer.render(movies, self.container_id, empty_message)
        if notice:
            self.notifier.notify(notice, level)
        logger.info("[VIEW] %s → %d movie(s)", view.kind.value, len(movies))
        return True

    def _failed(self, message: str, exc: Exception) -> bool:
        logger.error("[VIEW] ❌ %s: %s", message, exc)
        self.notifier.notify(message, NotificationLevel.DANGER)
        return False

    # ─── Startup ─────────────────────────────────────────────────────────────
    async def startup(self) -> bool:
        """
        Load trending movies and the genre list. Raises ConfigurationError
        before any network call when the bearer token is unusable.
        """
        self.settings.require_configured()
        logger.info("[VIEW] Initializing Movie Explorer Dashboard...")
        generation = self._begin()
        try:
            trending, genres = await asyncio.gather(
                self.gateway.fetch_trending_movies(self.settings.trending_window),
                self.gateway.fetch_genres(),
            )
        except (RemoteError, TransportError) as e:
            self.renderer.show_message(STARTUP_FAILED, self.container_id)
            return self._failed(
                "Failed to load application. Please check your internet connection and API key.", e
            )
        self.state.genres = list(genres)
        applied = await self._apply(generation, ViewState.trending(), trending)
        if applied:
            self.notifier.notify(
                "Movie Explorer Dashboard loaded successfully!", NotificationLevel.SUCCESS
            )
        return applied

    # ─── Views ───────────────────────────────────────────────────────────────
    async def load_trending(self) -> bool:
        generation = self._begin()
        try:
            movies = await self.gateway.fetch_trending_movies(self.settings.trending_window)
        except (RemoteError, TransportError) as e:
            return self._failed("Failed to load trending movies", e)
        return await self._apply(
            generation, ViewState.trending(), movies, "Showing trending movies"
        )

    def on_search_input(self, text: str) -> asyncio.Task:
        """Record keystrokes; the search fires once input settles."""
        self.state.search_text = text
        return self.debouncer.call(text)

    async def submit_search(self, text: Optional[str] = None) -> bool:
        """Form submit: skip the debounce and search right away."""
        self.debouncer.cancel()
        if text is not None:
            self.state.search_text = text
        return await self.search(self.state.search_text)

    async def search(self, text: str) -> bool:
        query = (text or "").strip()
        if len(query) == 0:
            return await self.load_trending()
        if len(query) < MIN_QUERY_LENGTH:
            logger.debug("[VIEW] Ignoring short query %r", query)
            return False

        generation = self._begin()
        self.notifier.notify("Searching movies...", NotificationLevel.INFO)
        await asyncio.sleep(self.settings.search_delay_seconds)
        if not self._is_current(generation):
            return False
        try:
            movies = await self.gateway.search_movies(query)
        except (RemoteError, TransportError) as e:
            return self._failed("Search failed. Please try again.", e)

        if movies:
            notice = f'Found {len(movies)} movie(s) for "{query}"'
            level = NotificationLevel.SUCCESS
        else:
            notice = f'No movies found for "{query}"'
            level = NotificationLevel.WARNING
        applied = await self._apply(generation, ViewState.search(query), movies, notice, level)
        if applied:
            self._reset_active_genre()
        return applied

    async def select_genre(self, genre_id: GenreChoice) -> bool:
        previous = self.state.active_genre
        choice: GenreChoice = ALL_GENRES if str(genre_id) == ALL_GENRES else int(genre_id)
        self.state.active_genre = choice
        self._clear_search()

        generation = self._begin()
        try:
            if choice == ALL_GENRES:
                movies = await self.gateway.fetch_trending_movies(self.settings.trending_window)
                view, notice = ViewState.trending(), "Showing trending movies"
            else:
                movies = await self.gateway.fetch_movies_by_genre(choice)
                view = ViewState.genre(choice)
                notice = f"Showing {self.state.genre_name(choice)} movies"
        except (RemoteError, TransportError) as e:
            if self.state.active_genre == choice:
                self.state.active_genre = previous
            return self._failed("Failed to load movies. Please try again.", e)
        return await self._apply(generation, view, movies, notice)

    async def toggle_watchlist_view(self) -> bool:
        self._reset_active_genre()
        self._clear_search()
        if self.state.view.kind is ViewKind.WATCHLIST:
            return await self.load_trending()

        generation = self._begin()
        movies = self.store.movies()
        notice = (
            f"Showing {len(movies)} movie(s) from your Watch Later list" if movies else None
        )
        return await self._apply(
            generation, ViewState.watchlist(), movies, notice, empty_message=WATCHLIST_EMPTY
        )

    async def go_home(self) -> bool:
        self._reset_active_genre()
        self._clear_search()
        return await self.load_trending()

    @property
    def in_watchlist_view(self) -> bool:
        return self.state.view.kind is ViewKind.WATCHLIST
