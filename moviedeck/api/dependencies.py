# moviedeck/api/dependencies.py

from fastapi import Depends, Request

from moviedeck.context import AppContext
from moviedeck.core.errors import ConfigurationError
from moviedeck.services.controller import FilterController
from moviedeck.services.details import DetailViewer
from moviedeck.services.tmdb import MovieGateway


def get_context(request: Request) -> AppContext:
    return request.app.state.ctx


def _not_configured(ctx: AppContext) -> ConfigurationError:
    return ConfigurationError(ctx.config_error or "TMDB bearer token is not configured")


def get_gateway(ctx: AppContext = Depends(get_context)) -> MovieGateway:
    if ctx.gateway is None:
        raise _not_configured(ctx)
    return ctx.gateway


def get_controller(ctx: AppContext = Depends(get_context)) -> FilterController:
    if ctx.controller is None:
        raise _not_configured(ctx)
    return ctx.controller


def get_viewer(ctx: AppContext = Depends(get_context)) -> DetailViewer:
    if ctx.viewer is None:
        raise _not_configured(ctx)
    return ctx.viewer
