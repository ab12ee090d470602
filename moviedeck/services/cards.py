# moviedeck/services/cards.py
"""
Movie cards: a pure projection of movies + watchlist membership into tile
view models, and a small adapter that keeps named grid containers in sync.
"""
import asyncio
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional, Sequence, Set

from moviedeck.core.logger import setup_logger
from moviedeck.core.models.enums import GridStatus, NotificationLevel
from moviedeck.core.models.movie import MovieSummary
from moviedeck.core.notifications import Notifier
from moviedeck.services.watchlist import WatchlistStore

logger = setup_logger(__name__)

DEFAULT_CONTAINER = "movie-grid"

ADD_LABEL    = "Add to Watch Later"
REMOVE_LABEL = "Remove from Watch Later"
ADD_STYLE    = "btn-primary"
REMOVE_STYLE = "btn-danger"


@dataclass(frozen=True)
class GridMessage:
    title: str
    text: str
    level: str = "info"


LOADING_MESSAGE = GridMessage("Loading...", "")
NO_RESULTS = GridMessage(
    "No movies found",
    "Try adjusting your search criteria or browse different genres.",
)


@dataclass(frozen=True)
class TileViewModel:
    movie_id: int
    title: str
    poster_url: Optional[str]
    year_label: str
    rating_label: str
    in_watchlist: bool

    @property
    def button_label(self) -> str:
        return REMOVE_LABEL if self.in_watchlist else ADD_LABEL

    @property
    def button_style(self) -> str:
        return REMOVE_STYLE if self.in_watchlist else ADD_STYLE

    def to_dict(self) -> dict:
        return {
            "movie_id": self.movie_id,
            "title": self.title,
            "poster_url": self.poster_url,
            "year_label": self.year_label,
            "rating_label": self.rating_label,
            "in_watchlist": self.in_watchlist,
            "button_label": self.button_label,
            "button_style": self.button_style,
        }


# ─── Pure projection ─────────────────────────────────────────────────────────
def image_url(base_url: str, path: Optional[str]) -> Optional[str]:
    if not path:
        return None
    return base_url.rstrip("/") + "/" + path.lstrip("/")


def rating_label(vote_average: Optional[float]) -> str:
    return f"{vote_average:.1f}" if vote_average else "N/A"


def build_tile(movie: MovieSummary, in_watchlist: bool, image_base_url: str) -> TileViewModel:
    return TileViewModel(
        movie_id=movie.id,
        title=movie.title,
        poster_url=image_url(image_base_url, movie.poster_path),
        year_label=str(movie.year) if movie.year else "N/A",
        rating_label=rating_label(movie.vote_average),
        in_watchlist=in_watchlist,
    )


def build_tiles(
    movies: Iterable[MovieSummary],
    membership: Set[int],
    image_base_url: str,
) -> List[TileViewModel]:
    """One tile per movie that has a title or a poster; the rest are dropped."""
    return [
        build_tile(m, m.id in membership, image_base_url)
        for m in movies
        if m.is_displayable
    ]


# ─── Grid containers ─────────────────────────────────────────────────────────
@dataclass
class Grid:
    container_id: str
    status: GridStatus = GridStatus.IDLE
    tiles: List[TileViewModel] = field(default_factory=list)
    message: Optional[GridMessage] = None
    movies: Dict[int, MovieSummary] = field(default_factory=dict, repr=False)
    render_seq: int = 0

    def clear(self) -> None:
        self.tiles = []
        self.movies = {}
        self.message = None

    def to_dict(self) -> dict:
        return {
            "container_id": self.container_id,
            "status": self.status.value,
            "tiles": [t.to_dict() for t in self.tiles],
            "message": (
                {"title": self.message.title, "text": self.message.text, "level": self.message.level}
                if self.message else None
            ),
        }


class CardRenderer:
    def __init__(
        self,
        store: WatchlistStore,
        notifier: Notifier,
        image_base_url: str,
        delay: float = 0.3,
    ):
        self.store = store
        self.notifier = notifier
        self.image_base_url = image_base_url
        self.delay = delay
        self.grids: Dict[str, Grid] = {}

    def grid(self, container_id: str = DEFAULT_CONTAINER) -> Grid:
        if container_id not in self.grids:
            self.grids[container_id] = Grid(container_id=container_id)
        return self.grids[container_id]

    async def render(
        self,
        movies: Sequence[MovieSummary],
        container_id: str = DEFAULT_CONTAINER,
        empty_message: Optional[GridMessage] = None,
    ) -> Grid:
        grid = self.grid(container_id)
        grid.render_seq += 1
        seq = grid.render_seq

        grid.clear()
        grid.status = GridStatus.LOADING
        grid.message = LOADING_MESSAGE

        # short pause so the loading placeholder is visible
        await asyncio.sleep(self.delay)
        if seq != grid.render_seq:
            logger.debug("[CARDS] Render %d on %s superseded", seq, container_id)
            return grid

        grid.clear()
        if len(movies) == 0:
            grid.status = GridStatus.EMPTY
            grid.message = empty_message or NO_RESULTS
            return grid

        kept = [m for m in movies if m.is_displayable]
        grid.tiles = build_tiles(kept, self.store.ids(), self.image_base_url)
        grid.movies = {m.id: m for m in kept}
        grid.status = GridStatus.TILES
        dropped = len(movies) - len(kept)
        if dropped:
            logger.debug("[CARDS] Dropped %d movie(s) without title or poster", dropped)
        return grid

    def show_message(self, message: GridMessage, container_id: str = DEFAULT_CONTAINER) -> Grid:
        """Replace the container content with a standalone message block."""
        grid = self.grid(container_id)
        grid.render_seq += 1
        grid.clear()
        grid.status = GridStatus.MESSAGE
        grid.message = message
        return grid

    def toggle(self, movie_id: int, container_id: str = DEFAULT_CONTAINER) -> TileViewModel:
        """
        Flip Watch Later membership for one rendered tile and refresh only
        that tile. Raises KeyError when the tile is not on display.
        """
        grid = self.grid(container_id)
        movie = grid.movies[movie_id]
        now_listed = self.store.toggle(movie)

        updated: Optional[TileViewModel] = None
        for i, tile in enumerate(grid.tiles):
            if tile.movie_id == movie_id:
                updated = replace(tile, in_watchlist=now_listed)
                grid.tiles[i] = updated
        if updated is None:
            updated = build_tile(movie, now_listed, self.image_base_url)

        if now_listed:
            self.notifier.notify(
                f"{movie.title} added to Watch Later", NotificationLevel.SUCCESS, scope="tile"
            )
        else:
            self.notifier.notify(
                f"{movie.title} removed from Watch Later", NotificationLevel.DANGER, scope="tile"
            )
        return updated
