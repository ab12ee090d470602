# moviedeck/api/routers/watchlist.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from moviedeck.api.dependencies import get_context
from moviedeck.api.schemas import (
    ClearResponse,
    CountResponse,
    MovieSummaryIn,
    TileOut,
    WatchlistEntryOut,
)
from moviedeck.context import AppContext
from moviedeck.core.logger import setup_logger
from moviedeck.services.cards import DEFAULT_CONTAINER

logger = setup_logger(__name__)

router = APIRouter(tags=["Watchlist"])


def _entries(ctx: AppContext) -> List[WatchlistEntryOut]:
    return [WatchlistEntryOut.from_entry(e) for e in ctx.store.list()]


@router.get("", response_model=List[WatchlistEntryOut], name="watchlist.list")
def list_watchlist(ctx: AppContext = Depends(get_context)):
    return _entries(ctx)


@router.get("/count", response_model=CountResponse, name="watchlist.count")
def count_watchlist(ctx: AppContext = Depends(get_context)):
    return CountResponse(count=ctx.store.count())


@router.post("", response_model=List[WatchlistEntryOut], status_code=201, name="watchlist.add")
def add_movie(movie: MovieSummaryIn, ctx: AppContext = Depends(get_context)):
    """Add a movie snapshot; re-adding an existing id is a no-op."""
    ctx.store.add(movie.to_movie())
    return _entries(ctx)


@router.delete("/{movie_id}", response_model=List[WatchlistEntryOut], name="watchlist.remove")
def remove_movie(movie_id: int, ctx: AppContext = Depends(get_context)):
    ctx.store.remove(movie_id)
    return _entries(ctx)


@router.delete("", response_model=ClearResponse, name="watchlist.clear")
def clear_watchlist(ctx: AppContext = Depends(get_context)):
    ctx.store.clear()
    return ClearResponse(status="cleared")


@router.post("/{movie_id}/toggle", response_model=TileOut, name="watchlist.toggle_tile")
def toggle_tile(
    movie_id: int,
    container: str = Query(DEFAULT_CONTAINER),
    ctx: AppContext = Depends(get_context),
):
    """Card button: flip membership and return only that tile's new state."""
    try:
        tile = ctx.renderer.toggle(movie_id, container)
    except KeyError:
        raise HTTPException(404, f"Movie {movie_id} is not displayed in {container}")
    return tile.to_dict()
