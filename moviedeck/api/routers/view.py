# moviedeck/api/routers/view.py

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from moviedeck.api.dependencies import get_context, get_controller
from moviedeck.api.schemas import SearchQueued, SearchRequest, ViewResponse
from moviedeck.context import AppContext
from moviedeck.services.controller import ALL_GENRES, FilterController

router = APIRouter(tags=["View"])


def _view(ctx: AppContext, controller: FilterController, applied: bool) -> dict:
    return {
        "applied": applied,
        "state": controller.state.to_dict(),
        "grid": ctx.renderer.grid(controller.container_id).to_dict(),
        "watchlist_count": ctx.store.count(),
    }


@router.get("", response_model=ViewResponse, name="view.get")
async def current_view(
    ctx: AppContext = Depends(get_context),
    controller: FilterController = Depends(get_controller),
):
    """Controller state plus the grid as currently rendered."""
    return _view(ctx, controller, True)


@router.post("/search", name="view.search")
async def search(
    body: SearchRequest,
    ctx: AppContext = Depends(get_context),
    controller: FilterController = Depends(get_controller),
):
    """
    Keystrokes are debounced server-side; `immediate` is the form submit and
    runs the search before responding.
    """
    if body.immediate:
        applied = await controller.submit_search(body.query)
        return _view(ctx, controller, applied)
    controller.on_search_input(body.query)
    return JSONResponse(
        status_code=202,
        content=SearchQueued(status="debounced", query=body.query).model_dump(),
    )


@router.post("/genre/{genre_id}", response_model=ViewResponse, name="view.genre")
async def select_genre(
    genre_id: str,
    ctx: AppContext = Depends(get_context),
    controller: FilterController = Depends(get_controller),
):
    if genre_id != ALL_GENRES and not genre_id.isdigit():
        raise HTTPException(400, f"genre must be '{ALL_GENRES}' or a numeric id")
    applied = await controller.select_genre(genre_id)
    return _view(ctx, controller, applied)


@router.post("/watchlist/toggle", response_model=ViewResponse, name="view.toggle_watchlist")
async def toggle_watchlist(
    ctx: AppContext = Depends(get_context),
    controller: FilterController = Depends(get_controller),
):
    applied = await controller.toggle_watchlist_view()
    return _view(ctx, controller, applied)


@router.post("/home", response_model=ViewResponse, name="view.home")
async def home(
    ctx: AppContext = Depends(get_context),
    controller: FilterController = Depends(get_controller),
):
    applied = await controller.go_home()
    return _view(ctx, controller, applied)
