"""Tests for route registration and the WebServer app."""

import pytest
from aiohttp import web

from webapp.assets import AssetSet
from webapp.config import Config, ConfigError
from webapp.web.server import WebServer, register_routes

from tests.conftest import ICON_STATS, STATS


@pytest.fixture
def config(tmp_path, write_json):
    stats = write_json("stats.json", STATS)
    icons = write_json("iconstats.json", ICON_STATS)
    sw = tmp_path / "sw.js"
    sw.write_text("self.addEventListener('fetch', () => {});")
    return Config.from_dict({
        "pageTitle": "Store",
        "stats": str(stats),
        "iconStats": str(icons),
        "service_worker": str(sw),
        "paths": {
            "/": {"content": "<h1>Home</h1>", "name": "home"},
            "/account": {"content": {"status": 302, "path": "/login"}},
        },
    })


@pytest.fixture
async def client(aiohttp_client, config):
    app = web.Application()
    register_routes(app, config)
    return await aiohttp_client(app)


async def test_page_route_uses_startup_assets(client):
    resp = await client.get("/")
    body = await resp.text()

    assert resp.status == 200
    assert "<title>Store</title>" in body
    assert "<h1>Home</h1>" in body
    assert '<link rel="manifest" href="/js/manifest.json" />' in body
    assert '<script src="/js/main.abc123.js"></script>' in body
    assert 'href="/js/icons-f00/favicon.ico"' in body
    assert "serviceWorker" in body


async def test_configured_redirect(client):
    resp = await client.get("/account", allow_redirects=False)
    assert resp.status == 302
    assert resp.headers["Location"] == "/login"


async def test_service_worker_served(client):
    resp = await client.get("/sw.js")
    assert resp.status == 200
    assert "addEventListener" in await resp.text()


async def test_service_worker_missing(aiohttp_client, tmp_path):
    app = web.Application()
    register_routes(app, Config.from_dict({"service_worker": str(tmp_path / "missing.js")}))
    client = await aiohttp_client(app)
    assert (await client.get("/sw.js")).status == 404


def test_render_options_stored_on_app(config):
    app = web.Application()
    options = register_routes(app, config)

    assert app["render_options"] is options
    assert options.assets == AssetSet(js="main.abc123.js", css="main.abc123.css", manifest="manifest.json")
    assert app.router["home"].url_for().path == "/"


def test_missing_manifests_do_not_block_registration(tmp_path):
    app = web.Application()
    options = register_routes(app, Config.from_dict({
        "stats": str(tmp_path / "none.json"),
        "iconStats": str(tmp_path / "none.json"),
        "paths": {"/": {"content": "x"}},
    }))
    assert options.assets == AssetSet()
    assert options.icon_meta_markup is None


def test_path_without_content_refuses_registration():
    app = web.Application()
    with pytest.raises(ConfigError):
        register_routes(app, Config.from_dict({"paths": {"/broken": {"name": "broken"}}}))


def test_module_content_resolved(tmp_path, monkeypatch):
    (tmp_path / "webapp_server_pages.py").write_text(
        "async def render(request):\n"
        "    return {'html': '<p>from module</p>'}\n"
    )
    monkeypatch.syspath_prepend(str(tmp_path))
    app = web.Application()
    register_routes(app, Config.from_dict({
        "paths": {"/m": {"content": {"module": "webapp_server_pages:render"}}},
    }))
    assert any(r.resource.canonical == "/m" for r in app.router.routes())


def test_web_server_wires_app(config):
    server = WebServer(config)
    assert server.app["config"] is config
    assert server.port == 3000
    assert "render_options" in server.app


def test_malformed_icon_stats_do_not_block_registration(tmp_path, write_json):
    icons = write_json("iconstats.json", {"outputFilePrefix": 7, "html": ['<link href="icons/a.png">']})
    app = web.Application()
    options = register_routes(app, Config.from_dict({
        "stats": str(tmp_path / "none.json"),
        "iconStats": str(icons),
        "paths": {"/": {"content": "x"}},
    }))
    assert options.icon_meta_markup is None
