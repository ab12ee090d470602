# moviedeck/api/schemas.py

from pydantic import BaseModel
from typing import List, Optional

from moviedeck.core.models.movie import MovieSummary, WatchlistEntry


class MovieSummaryIn(BaseModel):
    id:           int
    title:        str = ""
    poster_path:  Optional[str] = None
    release_date: Optional[str] = None
    vote_average: Optional[float] = None
    vote_count:   Optional[int] = None
    overview:     Optional[str] = None
    genre_ids:    List[int] = []

    def to_movie(self) -> MovieSummary:
        return MovieSummary.from_dict(self.model_dump())


class MovieSummaryOut(MovieSummaryIn):
    @classmethod
    def from_movie(cls, movie: MovieSummary) -> "MovieSummaryOut":
        return cls(**movie.to_dict())


class WatchlistEntryOut(MovieSummaryOut):
    date_added: str

    @classmethod
    def from_entry(cls, entry: WatchlistEntry) -> "WatchlistEntryOut":
        return cls(**entry.movie.to_dict(), date_added=entry.date_added)


class GenreOut(BaseModel):
    id:   int
    name: str


class TileOut(BaseModel):
    movie_id:     int
    title:        str
    poster_url:   Optional[str]
    year_label:   str
    rating_label: str
    in_watchlist: bool
    button_label: str
    button_style: str


class GridMessageOut(BaseModel):
    title: str
    text:  str
    level: str


class GridOut(BaseModel):
    container_id: str
    status:       str
    tiles:        List[TileOut]
    message:      Optional[GridMessageOut]


class ViewStateOut(BaseModel):
    kind:     str
    genre_id: Optional[int]
    query:    Optional[str]


class ControllerStateOut(BaseModel):
    genres:       List[GenreOut]
    view:         ViewStateOut
    search_text:  str
    active_genre: int | str
    generation:   int


class ViewResponse(BaseModel):
    applied:         bool
    state:           ControllerStateOut
    grid:            GridOut
    watchlist_count: int


class SearchRequest(BaseModel):
    query:     str = ""
    immediate: bool = False


class SearchQueued(BaseModel):
    status: str
    query:  str


class CountResponse(BaseModel):
    count: int


class ClearResponse(BaseModel):
    status: str


class NotificationOut(BaseModel):
    message:    str
    level:      str
    scope:      str
    created_at: str
