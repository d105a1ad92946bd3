"""
Webapp Web Server

aiohttp application serving the configured page routes plus /sw.js.
Build manifests are read once here, at registration time.
"""

import logging
from pathlib import Path

from aiohttp import web

from webapp.assets import load_assets_from_stats, load_icon_stats
from webapp.config import Config, RenderOptions, build_render_options
from webapp.content import resolve_content
from webapp.pagelog import pagelog
from webapp.template import PageTemplate, load_page_template
from webapp.web.handler import make_route_handler

logger = logging.getLogger(__name__)


def _service_worker_handler(sw_path: Path):
    async def service_worker(request: web.Request) -> web.StreamResponse:
        if not sw_path.is_file():
            raise web.HTTPNotFound(text="Service worker not built")
        return web.FileResponse(sw_path)

    return service_worker


def register_routes(
    app: web.Application,
    config: Config,
    template: PageTemplate | None = None,
) -> RenderOptions:
    """
    Register every configured page route on the app.

    Raises:
        ConfigError: A configured path has no content.
    """
    config.validate()

    assets = load_assets_from_stats(config.stats)
    pagelog.assets(assets.js, assets.css, assets.manifest)
    icon_markup = load_icon_stats(config.icon_stats)

    options = build_render_options(config, assets, icon_markup)
    template = template or load_page_template()
    app["render_options"] = options

    app.router.add_get("/sw.js", _service_worker_handler(Path(config.service_worker)), name="sw")

    for route_path, route_cfg in config.paths.items():
        handler = make_route_handler(options, resolve_content(route_cfg.content), template)
        app.router.add_get(route_path, handler, name=route_cfg.name)
        pagelog.route(route_path)

    logger.info(f"Registered {len(config.paths)} page route(s)")
    return options


class WebServer:
    """Server-side rendering gateway for the configured page routes."""

    def __init__(self, config: Config):
        self.config = config
        self.host = config.host
        self.port = config.port
        self.app = web.Application()
        self._runner: web.AppRunner | None = None

        self.app["config"] = config
        register_routes(self.app, config)

    async def start(self) -> None:
        """Start the web server."""
        self._runner = web.AppRunner(self.app)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.host, self.port)
        await site.start()
        logger.info(f"Webapp started at http://{self.host}:{self.port}")

    async def stop(self) -> None:
        """Stop the web server."""
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
            logger.info("Webapp stopped")
