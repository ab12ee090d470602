# moviedeck/web_ui/routes.py

from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from moviedeck.api.dependencies import get_context, get_viewer
from moviedeck.context import AppContext
from moviedeck.core.config import PLACEHOLDER_TOKEN, config_path
from moviedeck.services.details import DetailViewer

router = APIRouter()
BASE_DIR = Path(__file__).resolve().parent
TEMPLATE_DIR = BASE_DIR / "templates"
templates = Jinja2Templates(directory=str(TEMPLATE_DIR))


@router.get("/", include_in_schema=False, response_class=HTMLResponse)
def home_page(request: Request, ctx: AppContext = Depends(get_context)):
    """
    Render the dashboard, or the setup instructions when no usable
    bearer token is configured.
    """
    if not ctx.configured:
        return templates.TemplateResponse(
            request,
            "config_required.html",
            {
                "config_path": str(config_path()),
                "placeholder": PLACEHOLDER_TOKEN,
                "error": ctx.config_error,
            },
        )
    controller = ctx.controller
    return templates.TemplateResponse(
        request,
        "home.html",
        {
            "state": controller.state,
            "grid": ctx.renderer.grid(controller.container_id),
            "watchlist_count": ctx.store.count(),
            "in_watchlist_view": controller.in_watchlist_view,
        },
    )


@router.get("/grid", include_in_schema=False, response_class=HTMLResponse)
def grid_fragment(request: Request, container: str = "movie-grid", ctx: AppContext = Depends(get_context)):
    """Card grid only; the page script swaps it in after each view change."""
    return templates.TemplateResponse(
        request,
        "_grid.html",
        {"grid": ctx.renderer.grid(container)},
    )


@router.get("/movies/{movie_id}", include_in_schema=False, response_class=HTMLResponse)
async def movie_detail(request: Request, movie_id: int, viewer: DetailViewer = Depends(get_viewer)):
    surface = await viewer.open(movie_id)
    return templates.TemplateResponse(request, "_detail.html", {"surface": surface})


@router.post("/detail/close", include_in_schema=False)
def close_detail(viewer: DetailViewer = Depends(get_viewer)):
    return viewer.close().to_dict()
