"""
Page Content

A route's content is supplied by the application as one of:
- a string of markup
- a plain mapping, either {"html", "prefetch"} or {"status", "path"}
- a function taking the request and returning either of the above,
  directly or as an awaitable

Content is classified once when the route is registered (make_producer) and
normalized per request (invoke_content) into a PageContent or a
ControlResult. invoke_content is where producer failures turn into error
results; nothing raised by a producer gets past it.
"""

import importlib
import importlib.util
import inspect
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from aiohttp import web

logger = logging.getLogger(__name__)

HTTP_ERROR_500 = 500
HTTP_REDIRECT = 302


class ContentError(Exception):
    """An error a content producer can raise to pick the response status."""

    def __init__(self, message: str, status: int = HTTP_ERROR_500):
        super().__init__(message)
        self.status = status


@dataclass(frozen=True)
class PageContent:
    """Renderable content for the page shell."""
    html: str = ""
    prefetch: str | None = None


@dataclass(frozen=True)
class ControlResult:
    """A redirect (status 302 + path) or an error status instead of a page."""
    status: int
    path: str | None = None
    message: str | None = None

    @property
    def is_redirect(self) -> bool:
        return self.status == HTTP_REDIRECT


RenderResult = PageContent | ControlResult


def coerce_result(value: Any) -> RenderResult:
    """Map a producer's return value onto a RenderResult."""
    if isinstance(value, (PageContent, ControlResult)):
        return value
    if isinstance(value, str):
        return PageContent(html=value)
    if isinstance(value, Mapping):
        if value.get("status"):
            return ControlResult(
                status=int(value["status"]),
                path=value.get("path"),
                message=value.get("html"),
            )
        return PageContent(html=value.get("html") or "", prefetch=value.get("prefetch"))
    raise TypeError(f"Content must produce a string or a mapping, got {type(value).__name__}")


# --- producer variants ---


@dataclass(frozen=True)
class StaticHtml:
    html: str


@dataclass(frozen=True)
class StaticResult:
    result: RenderResult


@dataclass(frozen=True)
class ContentFunction:
    func: Callable[[web.Request], Any]


ContentProducer = StaticHtml | StaticResult | ContentFunction


def make_producer(content: Any) -> ContentProducer:
    """Classify route content into one of the producer variants."""
    if isinstance(content, (StaticHtml, StaticResult, ContentFunction)):
        return content
    if isinstance(content, str):
        return StaticHtml(content)
    if callable(content):
        return ContentFunction(content)
    if isinstance(content, (Mapping, PageContent, ControlResult)):
        return StaticResult(coerce_result(content))
    raise TypeError(f"Unsupported content type: {type(content).__name__}")


def error_result(err: BaseException) -> ControlResult:
    """Turn a producer failure into an error (or redirect) result.

    Any raised aiohttp redirect (301, 303, 307, ...) that carries a Location
    becomes a 302 redirect result to that location.
    """
    location = getattr(err, "location", None)
    if isinstance(err, web.HTTPRedirection) and location:
        return ControlResult(status=HTTP_REDIRECT, path=str(location))
    status = getattr(err, "status", None) or HTTP_ERROR_500
    return ControlResult(status=status, message=str(err))


async def invoke_content(producer: ContentProducer, request: web.Request) -> RenderResult:
    """
    Produce the RenderResult for one request.

    Functions are called with the request; an awaitable return value is
    awaited. Any exception, raised directly or from the awaited value,
    becomes a ControlResult carrying the exception's ``status`` (default
    500) and its message.
    """
    if isinstance(producer, StaticHtml):
        return PageContent(html=producer.html)
    if isinstance(producer, StaticResult):
        return producer.result

    try:
        value = producer.func(request)
        if inspect.isawaitable(value):
            value = await value
        return coerce_result(value)
    except Exception as e:
        logger.warning(f"Content for {request.path} failed: {e!r}")
        return error_result(e)


def resolve_content(content: Any) -> Any:
    """
    Resolve a ``{"module": ...}`` content descriptor.

    The module spec is ``"package.module"`` or ``"package.module:attr"``;
    the attribute defaults to ``content``. A value starting with ``.`` or
    ending in ``.py`` is a file path relative to the working directory.
    Anything that is not a descriptor is returned unchanged.
    """
    if not isinstance(content, Mapping) or "module" not in content:
        return content

    spec = content["module"]
    module_name, _, attr = spec.partition(":")
    attr = attr or "content"

    if module_name.startswith(".") or module_name.endswith(".py"):
        path = (Path.cwd() / module_name).resolve()
        module_spec = importlib.util.spec_from_file_location(path.stem, path)
        if module_spec is None or module_spec.loader is None:
            raise ImportError(f"Cannot load content module from {path}")
        module = importlib.util.module_from_spec(module_spec)
        module_spec.loader.exec_module(module)
    else:
        module = importlib.import_module(module_name)

    logger.debug(f"Resolved content {spec} -> {module.__name__}.{attr}")
    return getattr(module, attr)
