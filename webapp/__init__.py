"""Webapp: server-side rendering gateway for aiohttp."""

from webapp.assets import AssetSet, load_assets_from_stats, load_icon_stats
from webapp.config import Config, ConfigError, RenderOptions
from webapp.content import ContentError, ControlResult, PageContent
from webapp.web.handler import make_route_handler
from webapp.web.server import WebServer, register_routes

__all__ = [
    "AssetSet",
    "Config",
    "ConfigError",
    "ContentError",
    "ControlResult",
    "PageContent",
    "RenderOptions",
    "WebServer",
    "load_assets_from_stats",
    "load_icon_stats",
    "make_route_handler",
    "register_routes",
]
