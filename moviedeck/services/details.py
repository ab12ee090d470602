# moviedeck/services/details.py

from dataclasses import asdict, dataclass, field
from typing import List, Optional

from moviedeck.core.errors import RemoteError, TransportError
from moviedeck.core.logger import setup_logger
from moviedeck.core.models.enums import DetailStatus, NotificationLevel
from moviedeck.core.models.movie import CastMember, MovieDetail, Video
from moviedeck.core.notifications import Notifier
from moviedeck.services.cards import image_url, rating_label
from moviedeck.services.tmdb import MovieGateway

logger = setup_logger(__name__)

BACKDROP_BASE = "https://image.tmdb.org/t/p/w1280"
YOUTUBE_WATCH = "https://www.youtube.com/watch?v="
TMDB_MOVIE_PAGE = "https://www.themoviedb.org/movie/"
CAST_LIMIT = 6

LOADING_TITLE = "Loading Movie Details..."
LOAD_ERROR = "We couldn't load the movie details. Please try again later."


# ─── Derivations ─────────────────────────────────────────────────────────────
def find_director(detail: MovieDetail) -> str:
    for person in detail.crew:
        if person.job == "Director" and person.name:
            return person.name
    return "N/A"


def main_cast(detail: MovieDetail, limit: int = CAST_LIMIT) -> List[CastMember]:
    return list(detail.cast[:limit])


def find_trailer(detail: MovieDetail) -> Optional[Video]:
    for video in detail.videos:
        if video.type == "Trailer" and video.site == "YouTube" and video.key:
            return video
    return None


def runtime_label(minutes: Optional[int]) -> str:
    if not minutes:
        return "N/A"
    return f"{minutes // 60}h {minutes % 60}m"


def money_label(amount: Optional[int]) -> Optional[str]:
    if not amount or amount <= 0:
        return None
    return f"${amount:,}"


@dataclass(frozen=True)
class DetailView:
    movie_id: int
    title: str
    tagline: Optional[str]
    overview: Optional[str]
    poster_url: Optional[str]
    backdrop_url: Optional[str]
    year_label: str
    rating_label: str
    runtime_label: str
    vote_count: int
    genres: List[str]
    director: str
    cast: List[str]
    trailer_url: Optional[str]
    tmdb_url: str
    budget_label: Optional[str]
    revenue_label: Optional[str]
    production_companies: List[str]

    @classmethod
    def from_detail(cls, detail: MovieDetail, image_base_url: str) -> "DetailView":
        trailer = find_trailer(detail)
        return cls(
            movie_id=detail.id,
            title=detail.title,
            tagline=detail.tagline,
            overview=detail.overview,
            poster_url=image_url(image_base_url, detail.poster_path),
            backdrop_url=image_url(BACKDROP_BASE, detail.backdrop_path),
            year_label=str(detail.year) if detail.year else "N/A",
            rating_label=rating_label(detail.vote_average),
            runtime_label=runtime_label(detail.runtime),
            vote_count=detail.vote_count or 0,
            genres=[g.name for g in detail.genres],
            director=find_director(detail),
            cast=[c.name for c in main_cast(detail)],
            trailer_url=f"{YOUTUBE_WATCH}{trailer.key}" if trailer else None,
            tmdb_url=f"{TMDB_MOVIE_PAGE}{detail.id}",
            budget_label=money_label(detail.budget),
            revenue_label=money_label(detail.revenue),
            production_companies=list(detail.production_companies),
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class DetailSurface:
    status: DetailStatus = DetailStatus.CLOSED
    movie_id: Optional[int] = None
    title: str = ""
    view: Optional[DetailView] = None
    error: Optional[str] = None
    generation: int = field(default=0, repr=False)

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "movie_id": self.movie_id,
            "title": self.title,
            "view": self.view.to_dict() if self.view else None,
            "error": self.error,
        }


class DetailViewer:
    """
    Single modal-like surface. open() shows it in a loading state at once,
    then fills it with the fetched detail or an inline error block. Errors
    never close the surface; only close() does.
    """

    def __init__(self, gateway: MovieGateway, notifier: Notifier, image_base_url: str):
        self.gateway = gateway
        self.notifier = notifier
        self.image_base_url = image_base_url
        self.surface = DetailSurface()

    async def open(self, movie_id: int) -> DetailSurface:
        generation = self.surface.generation + 1
        self.surface = DetailSurface(
            status=DetailStatus.LOADING,
            movie_id=movie_id,
            title=LOADING_TITLE,
            generation=generation,
        )
        surface = self.surface

        try:
            detail = await self.gateway.fetch_movie_details(movie_id)
        except (RemoteError, TransportError) as e:
            logger.error("[DETAIL] ❌ Error loading movie details for %s: %s", movie_id, e)
            if surface is self.surface:
                surface.status = DetailStatus.ERROR
                surface.error = LOAD_ERROR
                self.notifier.notify("Failed to load movie details", NotificationLevel.DANGER)
            return surface

        if surface is not self.surface:
            logger.debug("[DETAIL] Discarding stale detail for %s", movie_id)
            return surface

        surface.status = DetailStatus.LOADED
        surface.title = detail.title
        surface.view = DetailView.from_detail(detail, self.image_base_url)
        return surface

    def close(self) -> DetailSurface:
        self.surface = DetailSurface(generation=self.surface.generation + 1)
        return self.surface
