from .enums import DetailStatus, GridStatus, NotificationLevel, ViewKind
from .movie import (
    CastMember,
    CrewMember,
    Genre,
    MovieDetail,
    MovieSummary,
    Review,
    Video,
    WatchlistEntry,
)

__all__ = [
    "CastMember",
    "CrewMember",
    "DetailStatus",
    "Genre",
    "GridStatus",
    "MovieDetail",
    "MovieSummary",
    "NotificationLevel",
    "Review",
    "Video",
    "ViewKind",
    "WatchlistEntry",
]
