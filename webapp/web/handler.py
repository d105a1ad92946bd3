"""
Page route handler: GET <configured path>[?__mode=nojs|noss]

One handler per configured path. Per request:
- __mode=nojs  leaves the main script bundle out of the page
- __mode=noss  skips server-side rendering (empty content, producer not called)

The content producer may ask for a redirect ({"status": 302, "path": ...})
or an error status instead of a page.
"""

import logging
from typing import Any

from aiohttp import web

from webapp.config import RenderOptions
from webapp.content import (
    HTTP_ERROR_500,
    ControlResult,
    PageContent,
    RenderResult,
    invoke_content,
    make_producer,
)
from webapp.pagelog import pagelog
from webapp.template import PageTemplate, load_page_template

logger = logging.getLogger(__name__)


def _control_response(request: web.Request, result: ControlResult) -> web.StreamResponse:
    """Redirect or error reply for a control result."""
    if result.is_redirect:
        if not result.path:
            raise ValueError("Redirect result is missing a path")
        pagelog.redirect(request.path, result.path)
        raise web.HTTPFound(result.path)

    pagelog.error(request.path, result.status, result.message or "")
    if result.message:
        return web.Response(text=result.message, status=result.status)
    return web.json_response({"message": "error"}, status=result.status)


def make_route_handler(
    options: RenderOptions,
    content: Any,
    template: PageTemplate | None = None,
):
    """Create the aiohttp handler for one page route.

    Args:
        options: Startup-time render settings, shared read-only by all requests
        content: Route content (string, mapping, or function of the request)
        template: Page shell; the packaged index.html when omitted

    Returns:
        An async request handler
    """
    producer = make_producer(content)
    template = template or load_page_template()

    async def handler(request: web.Request) -> web.StreamResponse:
        mode = request.query.get("__mode", "")
        render_js = options.render_js and mode != "nojs"
        render_ss = options.server_side_rendering and mode != "noss"

        try:
            if render_ss:
                result: RenderResult = await invoke_content(producer, request)
            else:
                result = PageContent()

            if isinstance(result, ControlResult):
                return _control_response(request, result)

            html = template.render(options, result, render_js)
            pagelog.render(request.path, mode)
            return web.Response(text=html, content_type="text/html")
        except web.HTTPException:
            raise
        except Exception as e:
            status = getattr(e, "status", None) or HTTP_ERROR_500
            logger.exception(f"Failed to render {request.path}")
            pagelog.error(request.path, status, str(e))
            return web.Response(text=str(e), status=status)

    return handler
