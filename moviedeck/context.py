# moviedeck/context.py

from dataclasses import dataclass
from typing import Optional

from httpx import AsyncBaseTransport

from moviedeck.core.clients import create_tmdb_client
from moviedeck.core.config import Settings
from moviedeck.core.errors import ConfigurationError
from moviedeck.core.logger import setup_logger
from moviedeck.core.notifications import Notifier
from moviedeck.core.storage import JsonFileStorage, KeyValueStorage, MemoryStorage
from moviedeck.services.cards import CardRenderer
from moviedeck.services.controller import FilterController
from moviedeck.services.details import DetailViewer
from moviedeck.services.tmdb import MovieGateway
from moviedeck.services.watchlist import WatchlistStore

logger = setup_logger(__name__)


@dataclass
class AppContext:
    """Everything one running dashboard needs, wired once at startup."""
    settings: Settings
    notifier: Notifier
    store: WatchlistStore
    renderer: CardRenderer
    gateway: Optional[MovieGateway] = None
    controller: Optional[FilterController] = None
    viewer: Optional[DetailViewer] = None
    config_error: Optional[str] = None

    @property
    def configured(self) -> bool:
        return self.config_error is None

    async def aclose(self) -> None:
        if self.gateway is not None:
            await self.gateway.aclose()


def build_storage(settings: Settings) -> KeyValueStorage:
    if settings.storage_path:
        return JsonFileStorage(settings.storage_path)
    logger.warning("[STORAGE] No storage_path configured; Watch Later list is in-memory only")
    return MemoryStorage()


def build_context(
    settings: Settings,
    storage: Optional[KeyValueStorage] = None,
    transport: Optional[AsyncBaseTransport] = None,
) -> AppContext:
    """
    Wire store, renderer and notifier unconditionally. The gateway and the
    components that fetch data are only built when the credential is usable.
    """
    notifier = Notifier(history=settings.notification_history)
    store = WatchlistStore(storage or build_storage(settings), key=settings.watchlist_key)
    renderer = CardRenderer(
        store, notifier, settings.tmdb_image_base_url, delay=settings.render_delay_seconds
    )
    ctx = AppContext(settings=settings, notifier=notifier, store=store, renderer=renderer)

    try:
        settings.require_configured()
    except ConfigurationError as e:
        logger.warning("⚠️ %s", e)
        ctx.config_error = str(e)
        return ctx

    ctx.gateway = MovieGateway(settings, client=create_tmdb_client(settings, transport))
    ctx.controller = FilterController(settings, ctx.gateway, store, renderer, notifier)
    ctx.viewer = DetailViewer(ctx.gateway, notifier, settings.tmdb_image_base_url)
    return ctx
