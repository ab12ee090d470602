# moviedeck/core/models/movie.py
from dataclasses import dataclass, field, fields
from typing import Optional, Dict, Any, List, Tuple
from datetime import datetime


def _year(release_date: Optional[str]) -> Optional[int]:
    try:
        # datetime.fromisoformat handles “YYYY-MM-DD”
        return datetime.fromisoformat(release_date).year
    except (ValueError, TypeError):
        return None


def _int_list(values: Any) -> Tuple[int, ...]:
    out: List[int] = []
    for v in values or []:
        try:
            out.append(int(v))
        except (TypeError, ValueError):
            continue
    return tuple(out)


@dataclass(frozen=True)
class Genre:
    id: int
    name: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Genre":
        return cls(id=int(data["id"]), name=str(data.get("name") or ""))


@dataclass(frozen=True)
class MovieSummary:
    id: int
    title: str = ""
    poster_path: Optional[str] = None
    release_date: Optional[str] = None
    vote_average: Optional[float] = None
    vote_count: Optional[int] = None
    overview: Optional[str] = None
    genre_ids: Tuple[int, ...] = ()

    @property
    def year(self) -> Optional[int]:
        return _year(self.release_date)

    @property
    def is_displayable(self) -> bool:
        """Cards are only drawn for movies with a title or a poster."""
        return bool(self.title) or bool(self.poster_path)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MovieSummary":
        return cls(
            id=int(data["id"]),
            title=data.get("title") or "",
            poster_path=data.get("poster_path") or None,
            release_date=data.get("release_date") or None,
            vote_average=data.get("vote_average"),
            vote_count=data.get("vote_count"),
            overview=data.get("overview"),
            genre_ids=_int_list(data.get("genre_ids")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "poster_path": self.poster_path,
            "release_date": self.release_date,
            "vote_average": self.vote_average,
            "vote_count": self.vote_count,
            "overview": self.overview,
            "genre_ids": list(self.genre_ids),
        }


@dataclass(frozen=True)
class CastMember:
    name: str
    character: Optional[str] = None


@dataclass(frozen=True)
class CrewMember:
    name: str
    job: Optional[str] = None


@dataclass(frozen=True)
class Video:
    type: Optional[str]
    site: Optional[str]
    key: str
    name: Optional[str] = None


@dataclass(frozen=True)
class Review:
    author: str
    content: str


@dataclass(frozen=True)
class MovieDetail(MovieSummary):
    runtime: Optional[int] = None
    tagline: Optional[str] = None
    budget: Optional[int] = None
    revenue: Optional[int] = None
    backdrop_path: Optional[str] = None
    genres: Tuple[Genre, ...] = ()
    cast: Tuple[CastMember, ...] = ()
    crew: Tuple[CrewMember, ...] = ()
    videos: Tuple[Video, ...] = ()
    production_companies: Tuple[str, ...] = ()
    reviews: Tuple[Review, ...] = ()
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MovieDetail":
        genres = tuple(Genre.from_dict(g) for g in data.get("genres") or [] if g.get("id") is not None)
        summary = MovieSummary.from_dict(data)
        credits = data.get("credits") or {}
        base = {f.name: getattr(summary, f.name) for f in fields(MovieSummary)}
        # detail payloads carry `genres` objects instead of `genre_ids`
        if not base["genre_ids"]:
            base["genre_ids"] = tuple(g.id for g in genres)
        return cls(
            **base,
            runtime=data.get("runtime"),
            tagline=data.get("tagline") or None,
            budget=data.get("budget"),
            revenue=data.get("revenue"),
            backdrop_path=data.get("backdrop_path") or None,
            genres=genres,
            cast=tuple(
                CastMember(name=c.get("name", ""), character=c.get("character"))
                for c in credits.get("cast") or []
            ),
            crew=tuple(
                CrewMember(name=c.get("name", ""), job=c.get("job"))
                for c in credits.get("crew") or []
            ),
            videos=tuple(
                Video(type=v.get("type"), site=v.get("site"), key=v.get("key", ""), name=v.get("name"))
                for v in (data.get("videos") or {}).get("results") or []
            ),
            production_companies=tuple(
                c.get("name", "") for c in data.get("production_companies") or [] if c.get("name")
            ),
            reviews=tuple(
                Review(author=r.get("author", ""), content=r.get("content", ""))
                for r in (data.get("reviews") or {}).get("results") or []
            ),
            raw=data,
        )


@dataclass(frozen=True)
class WatchlistEntry:
    movie: MovieSummary
    date_added: str

    @property
    def id(self) -> int:
        return self.movie.id

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WatchlistEntry":
        return cls(
            movie=MovieSummary.from_dict(data),
            date_added=str(data.get("dateAdded") or ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = self.movie.to_dict()
        data["dateAdded"] = self.date_added
        return data
