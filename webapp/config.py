"""
Webapp Configuration Loader

Loads configuration from:
1. A YAML file (WEBAPP_CONFIG env var, explicit path, or config/webapp.yaml)
2. .env file next to the config directory - deployment overrides

Every option has a default, so an empty or missing file yields a working
setup that simply registers no page routes.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from webapp.assets import AssetSet

DEFAULT_PAGE_TITLE = "Untitled Electrode Web Application"


class ConfigError(ValueError):
    """Raised when the configuration cannot be used to register routes."""


@dataclass
class DevServerConfig:
    host: str = "127.0.0.1"
    port: str = "2992"


@dataclass
class PathConfig:
    """A page route: what to render and an optional route name."""
    content: Any = None
    name: str | None = None


def _webpack_dev_from_env() -> bool:
    return os.environ.get("WEBPACK_DEV") == "true"


def _parse_flag(value: Any, name: str) -> bool:
    """Read a boolean option that may arrive as a string from YAML or env."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "yes", "on", "1"):
            return True
        if lowered in ("false", "no", "off", "0", ""):
            return False
    if isinstance(value, int):
        return bool(value)
    raise ConfigError(f"Option {name} must be a boolean, got {value!r}")


@dataclass
class Config:
    """Main configuration container."""
    page_title: str = DEFAULT_PAGE_TITLE
    webpack_dev: bool = field(default_factory=_webpack_dev_from_env)
    render_js: bool = True
    server_side_rendering: bool = True
    dev_server: DevServerConfig = field(default_factory=DevServerConfig)
    paths: dict[str, PathConfig] = field(default_factory=dict)
    stats: str = "dist/server/stats.json"
    icon_stats: str = "dist/server/iconstats.json"
    service_worker: str = "dist/sw.js"
    host: str = "0.0.0.0"
    port: int = 3000

    @classmethod
    def from_dict(cls, data: dict | None) -> "Config":
        """Build a config from a plain mapping, filling in defaults.

        Accepts both snake_case keys and the camelCase names used by
        existing webapp configs (pageTitle, webpackDev, renderJS, ...).
        """
        data = data or {}

        def pick(*keys: str, default: Any = None) -> Any:
            for key in keys:
                if key in data and data[key] is not None:
                    return data[key]
            return default

        dev_cfg = pick("dev_server", "devServer", default={})
        if not isinstance(dev_cfg, dict):
            raise ConfigError("devServer must be a mapping with host and port")
        dev_server = DevServerConfig(
            host=str(dev_cfg.get("host", "127.0.0.1")),
            port=str(dev_cfg.get("port", "2992")),
        )

        paths = {}
        for route_path, route_cfg in (pick("paths", default={}) or {}).items():
            if isinstance(route_cfg, PathConfig):
                paths[route_path] = route_cfg
                continue
            route_cfg = route_cfg or {}
            if not isinstance(route_cfg, dict):
                raise ConfigError(f"Path {route_path} must be a mapping with a 'content' entry")
            paths[route_path] = PathConfig(
                content=route_cfg.get("content"),
                name=route_cfg.get("name"),
            )

        return cls(
            page_title=pick("page_title", "pageTitle", default=DEFAULT_PAGE_TITLE),
            webpack_dev=_parse_flag(pick("webpack_dev", "webpackDev", default=_webpack_dev_from_env()), "webpackDev"),
            render_js=_parse_flag(pick("render_js", "renderJS", default=True), "renderJS"),
            server_side_rendering=_parse_flag(
                pick("server_side_rendering", "serverSideRendering", default=True), "serverSideRendering"
            ),
            dev_server=dev_server,
            paths=paths,
            stats=pick("stats", default="dist/server/stats.json"),
            icon_stats=pick("icon_stats", "iconStats", default="dist/server/iconstats.json"),
            service_worker=pick("service_worker", "serviceWorker", default="dist/sw.js"),
            host=pick("host", default="0.0.0.0"),
            port=int(pick("port", default=3000)),
        )

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Config":
        """Load configuration from a yaml file and environment variables.

        Resolution order:
        1. WEBAPP_CONFIG env var
        2. Explicit config_path argument
        3. Default: ../config/webapp.yaml
        """
        env_path = os.environ.get("WEBAPP_CONFIG")
        if env_path:
            yaml_path = Path(env_path)
        elif config_path is not None:
            yaml_path = config_path
        else:
            yaml_path = Path(__file__).parent.parent / "config" / "webapp.yaml"

        load_dotenv(yaml_path.parent / ".env", override=False)

        yaml_config = {}
        if yaml_path.exists():
            with open(yaml_path) as f:
                yaml_config = yaml.safe_load(f) or {}

        # Env vars override yaml for deployment-specific settings
        if "WEBPACK_DEV" in os.environ:
            yaml_config["webpack_dev"] = _webpack_dev_from_env()
        if os.getenv("WEBAPP_HOST"):
            yaml_config["host"] = os.environ["WEBAPP_HOST"]
        if os.getenv("WEBAPP_PORT"):
            yaml_config["port"] = os.environ["WEBAPP_PORT"]

        return cls.from_dict(yaml_config)

    def validate(self) -> None:
        """Refuse to register routes that have nothing to render."""
        for route_path, route_cfg in self.paths.items():
            if route_cfg.content is None or route_cfg.content == "":
                raise ConfigError(f"You must define content for the webapp plugin path {route_path}")


@dataclass(frozen=True)
class RenderOptions:
    """Read-only per-route settings shared by every request."""
    page_title: str
    webpack_dev: bool
    render_js: bool
    server_side_rendering: bool
    dev_server_host: str
    dev_server_port: str
    assets: AssetSet
    dev_js_bundle_url: str
    dev_css_bundle_url: str
    icon_meta_markup: str | None = None


def get_dev_bundle_urls(config: Config) -> tuple[str, str]:
    """Return the (js, css) bundle URLs served by the webpack dev server."""
    base = f"http://{config.dev_server.host}:{config.dev_server.port}/js"
    return f"{base}/bundle.dev.js", f"{base}/style.css"


def build_render_options(
    config: Config,
    assets: AssetSet,
    icon_meta_markup: str | None = None,
) -> RenderOptions:
    """Freeze the startup-time settings into RenderOptions."""
    dev_js, dev_css = get_dev_bundle_urls(config)
    return RenderOptions(
        page_title=config.page_title,
        webpack_dev=config.webpack_dev,
        render_js=config.render_js,
        server_side_rendering=config.server_side_rendering,
        dev_server_host=config.dev_server.host,
        dev_server_port=config.dev_server.port,
        assets=assets,
        dev_js_bundle_url=dev_js,
        dev_css_bundle_url=dev_css,
        icon_meta_markup=icon_meta_markup,
    )
