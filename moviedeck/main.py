# moviedeck/main.py

import argparse
import asyncio
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from httpx import AsyncBaseTransport

from moviedeck.api.routers import movies, notifications, view, watchlist
from moviedeck.context import AppContext, build_context
from moviedeck.core.config import Settings, get_settings
from moviedeck.core.errors import ConfigurationError, RemoteError, TransportError
from moviedeck.core.logger import set_level, setup_logger
from moviedeck.core.models.enums import NotificationLevel
from moviedeck.web_ui.routes import router as ui_router

logger = setup_logger(__name__)

STATIC_DIR = Path(__file__).parent / "web_ui" / "static"

UNEXPECTED_ERROR = "An unexpected error occurred. Please refresh the page."
BACKGROUND_ERROR = "An error occurred while loading data. Please try again."


def _install_loop_handler(ctx: AppContext) -> None:
    """Surface exceptions from un-awaited tasks (e.g. debounced searches) as toasts."""
    loop = asyncio.get_running_loop()

    def _handler(loop: asyncio.AbstractEventLoop, context: dict) -> None:
        exc = context.get("exception")
        logger.error("Unhandled background failure: %s", exc or context.get("message"))
        ctx.notifier.notify(BACKGROUND_ERROR, NotificationLevel.DANGER)

    loop.set_exception_handler(_handler)


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ConfigurationError)
    async def _configuration_error(request: Request, exc: ConfigurationError):
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    @app.exception_handler(RemoteError)
    async def _remote_error(request: Request, exc: RemoteError):
        return JSONResponse(
            status_code=502,
            content={"detail": str(exc), "status_code": exc.status_code},
        )

    @app.exception_handler(TransportError)
    async def _transport_error(request: Request, exc: TransportError):
        return JSONResponse(status_code=502, content={"detail": str(exc), "status_code": None})

    @app.exception_handler(Exception)
    async def _unexpected_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s", request.url.path)
        request.app.state.ctx.notifier.notify(UNEXPECTED_ERROR, NotificationLevel.DANGER)
        return JSONResponse(status_code=500, content={"detail": UNEXPECTED_ERROR})


def create_app(
    settings: Optional[Settings] = None,
    storage=None,
    transport: Optional[AsyncBaseTransport] = None,
) -> FastAPI:
    settings = settings or get_settings()
    set_level(settings.log_level)
    ctx = build_context(settings, storage=storage, transport=transport)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        _install_loop_handler(ctx)
        if ctx.controller is not None:
            await ctx.controller.startup()
        else:
            logger.warning("⚠️ Serving configuration instructions; no data will be fetched")
        try:
            yield
        finally:
            await ctx.aclose()

    app = FastAPI(title="MovieDeck", lifespan=lifespan)
    app.state.ctx = ctx
    _register_error_handlers(app)

    # Web UI
    app.include_router(ui_router)

    # API v1 routers
    api_v1 = APIRouter(prefix="/api/v1", tags=["API"])
    api_v1.include_router(movies.router,        prefix="/movies")
    api_v1.include_router(view.router,          prefix="/view")
    api_v1.include_router(watchlist.router,     prefix="/watchlist")
    api_v1.include_router(notifications.router, prefix="/notifications")
    app.include_router(api_v1)

    # Static files for the UI
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
    return app


def run() -> None:
    import uvicorn

    parser = argparse.ArgumentParser(prog="moviedeck", description="Movie discovery dashboard")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args()

    logger.info("Logger initialized, starting MovieDeck on %s:%d…", args.host, args.port)
    uvicorn.run(create_app(), host=args.host, port=args.port)


if __name__ == "__main__":
    run()
