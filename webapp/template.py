"""
Page Shell Rendering

The page shell (web/templates/index.html) carries a fixed set of markers:

    {{SSR_CONTENT}}       server-rendered markup
    {{PAGE_TITLE}}        page title
    {{WEBAPP_BUNDLES}}    manifest / stylesheet / script links
    {{PREFETCH_BUNDLES}}  prefetch script from the content producer
    {{REGISTER_SW}}       service worker registration snippet
    {{META_TAGS}}         favicon/meta markup from the icon stats

Each marker maps to a resolver taking the per-request PageState. Markers in
the shell that have no resolver are rendered as "Unknown marker ..." so a
mismatched shell shows up in the page instead of failing the request.
"""

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path

from webapp.assets import STATIC_PREFIX
from webapp.config import RenderOptions
from webapp.content import PageContent

TEMPLATES_DIR = Path(__file__).parent / "web" / "templates"

MARKER_PATTERN = re.compile(r"{{[A-Z_]*}}")

CONTENT_MARKER = "{{SSR_CONTENT}}"
TITLE_MARKER = "{{PAGE_TITLE}}"
BUNDLE_MARKER = "{{WEBAPP_BUNDLES}}"
PREFETCH_MARKER = "{{PREFETCH_BUNDLES}}"
REGISTER_SW_MARKER = "{{REGISTER_SW}}"
META_TAGS_MARKER = "{{META_TAGS}}"

MARKERS = frozenset({
    CONTENT_MARKER,
    TITLE_MARKER,
    BUNDLE_MARKER,
    PREFETCH_MARKER,
    REGISTER_SW_MARKER,
    META_TAGS_MARKER,
})


@dataclass(frozen=True)
class PageState:
    """Everything one render of the shell depends on."""
    options: RenderOptions
    content: PageContent
    render_js: bool
    sw_snippet: str = ""


# --- bundle links ---


def bundle_css(state: PageState) -> str:
    opts = state.options
    if opts.webpack_dev:
        return opts.dev_css_bundle_url
    return f"{STATIC_PREFIX}{opts.assets.css}" if opts.assets.css else ""


def bundle_js(state: PageState) -> str:
    if not state.render_js:
        return ""
    opts = state.options
    if opts.webpack_dev:
        return opts.dev_js_bundle_url
    return f"{STATIC_PREFIX}{opts.assets.js}" if opts.assets.js else ""


def bundle_manifest(state: PageState) -> str:
    manifest = state.options.assets.manifest
    return f"{STATIC_PREFIX}{manifest}" if manifest else ""


def make_bundles(state: PageState) -> str:
    """Build the manifest, stylesheet and script tags, in that order."""
    manifest = bundle_manifest(state)
    manifest_link = f'<link rel="manifest" href="{manifest}" />' if manifest else ""
    css = bundle_css(state)
    css_link = f'<link rel="stylesheet" href="{css}" />' if css else ""
    js = bundle_js(state)
    js_link = f'<script src="{js}"></script>' if js else ""
    return f"{manifest_link}{css_link}{js_link}"


# --- marker resolvers ---


def _content(state: PageState) -> str:
    return state.content.html or ""


def _title(state: PageState) -> str:
    return state.options.page_title


def _prefetch(state: PageState) -> str:
    prefetch = state.content.prefetch
    return f"<script>{prefetch}</script>" if prefetch else ""


def _register_sw(state: PageState) -> str:
    # Only apps that ship a web manifest get a service worker
    if state.options.assets.manifest:
        return state.sw_snippet or ""
    return ""


def _meta_tags(state: PageState) -> str:
    return state.options.icon_meta_markup or ""


MARKER_RESOLVERS: dict[str, Callable[[PageState], str]] = {
    CONTENT_MARKER: _content,
    TITLE_MARKER: _title,
    BUNDLE_MARKER: make_bundles,
    PREFETCH_MARKER: _prefetch,
    REGISTER_SW_MARKER: _register_sw,
    META_TAGS_MARKER: _meta_tags,
}


class PageTemplate:
    """The HTML shell plus the resolver for each of its markers."""

    def __init__(
        self,
        shell: str,
        sw_snippet: str = "",
        resolvers: Mapping[str, Callable[[PageState], str]] = MARKER_RESOLVERS,
    ):
        missing = MARKERS - set(resolvers)
        if missing:
            raise ValueError(f"No resolver for marker(s): {', '.join(sorted(missing))}")
        self.shell = shell
        self.sw_snippet = sw_snippet
        self._resolvers = dict(resolvers)

    def render(self, options: RenderOptions, content: PageContent, render_js: bool) -> str:
        """Substitute every marker in the shell in a single pass."""
        state = PageState(
            options=options,
            content=content,
            render_js=render_js,
            sw_snippet=self.sw_snippet,
        )

        def substitute(match: re.Match) -> str:
            marker = match.group(0)
            resolver = self._resolvers.get(marker)
            if resolver is None:
                return f"Unknown marker {marker}"
            return resolver(state)

        return MARKER_PATTERN.sub(substitute, self.shell)


def load_page_template(templates_dir: Path = TEMPLATES_DIR) -> PageTemplate:
    """Read the page shell and service worker snippet from disk."""
    shell = (templates_dir / "index.html").read_text(encoding="utf-8")
    sw_path = templates_dir / "register-sw.html"
    sw_snippet = sw_path.read_text(encoding="utf-8") if sw_path.exists() else ""
    return PageTemplate(shell, sw_snippet=sw_snippet)
