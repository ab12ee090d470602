# moviedeck/core/models/enums.py
from enum import Enum


class ViewKind(Enum):
    TRENDING  = "trending"
    GENRE     = "genre"
    SEARCH    = "search"
    WATCHLIST = "watchlist"


class NotificationLevel(Enum):
    INFO    = "info"
    SUCCESS = "success"
    WARNING = "warning"
    DANGER  = "danger"


class GridStatus(Enum):
    IDLE    = "idle"
    LOADING = "loading"
    TILES   = "tiles"
    EMPTY   = "empty"
    MESSAGE = "message"


class DetailStatus(Enum):
    CLOSED  = "closed"
    LOADING = "loading"
    LOADED  = "loaded"
    ERROR   = "error"
