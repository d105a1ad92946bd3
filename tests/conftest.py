"""Shared fixtures for webapp tests."""

import json
from pathlib import Path

import pytest
from aiohttp import web

from webapp.assets import AssetSet
from webapp.config import Config, DevServerConfig, RenderOptions, build_render_options
from webapp.web.handler import make_route_handler

STATS = {
    "assetsByChunkName": {"main": ["main.abc123.js", "main.abc123.css"]},
    "assets": [
        {"name": "main.abc123.js"},
        {"name": "main.abc123.css"},
        {"name": "manifest.json"},
    ],
}

ICON_STATS = {
    "outputFilePrefix": "icons-f00/",
    "html": [
        '<link rel="icon" href="icons-f00/favicon.ico">',
        '<meta name="theme-color" content="#fff">',
    ],
}


@pytest.fixture(autouse=True)
def _no_env_overrides(monkeypatch):
    """Keep the developer's shell from leaking into config defaults."""
    for var in ("WEBPACK_DEV", "WEBAPP_CONFIG", "WEBAPP_HOST", "WEBAPP_PORT"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def write_json(tmp_path):
    """Write a JSON document under tmp_path and return its path."""
    def _write(name: str, data) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data) if not isinstance(data, str) else data)
        return path
    return _write


def make_options(assets: AssetSet | None = None, icon_meta_markup: str | None = None, **overrides) -> RenderOptions:
    """RenderOptions with test-friendly defaults (production mode, no assets)."""
    cfg = {
        "page_title": "Test Page",
        "webpack_dev": False,
        "dev_server": DevServerConfig(host="localhost", port="2992"),
    }
    cfg.update(overrides)
    return build_render_options(Config(**cfg), assets or AssetSet(), icon_meta_markup)


@pytest.fixture
def full_assets():
    return AssetSet(js="main.abc123.js", css="main.abc123.css", manifest="manifest.json")


@pytest.fixture
def page_client(aiohttp_client):
    """Build a test client serving one page route at / for the given content."""
    async def _make(content, options: RenderOptions | None = None, template=None):
        app = web.Application()
        handler = make_route_handler(options or make_options(), content, template)
        app.router.add_get("/", handler)
        return await aiohttp_client(app)
    return _make
