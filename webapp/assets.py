"""
Build Asset Loading

Reads the two files the frontend build leaves behind:
- stats.json: bundle file names emitted for the "main" chunk
- iconstats.json: favicon/meta HTML snippets

Both are read once when routes are registered. A missing or malformed file
never fails startup; it just means nothing gets linked into the page.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

STATIC_PREFIX = "/js/"


@dataclass(frozen=True)
class AssetSet:
    """Production bundle file names (not full paths)."""

    js: str | None = None
    css: str | None = None
    manifest: str | None = None

    def __bool__(self) -> bool:
        return bool(self.js or self.css or self.manifest)


def _read_json(path: str | Path):
    with open(Path(path).resolve(), encoding="utf-8") as f:
        return json.load(f)


def load_assets_from_stats(stats_path: str | Path) -> AssetSet:
    """
    Load the bundle names for the "main" chunk from a build stats file.

    Later entries with the same extension win. The web manifest is looked up
    in the top-level ``assets`` list.

    Returns:
        The resolved AssetSet, or an empty one if the file is missing or
        does not look like a stats file.
    """
    try:
        stats = _read_json(stats_path)
        chunk = stats["assetsByChunkName"]["main"]
        if isinstance(chunk, str):
            chunk = [chunk]

        js = css = None
        for name in chunk:
            if name.endswith(".js"):
                js = name
            elif name.endswith(".css"):
                css = name

        manifest = next(
            (a["name"] for a in stats.get("assets", []) if a["name"].endswith("manifest.json")),
            None,
        )
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
        logger.debug(f"No usable bundle stats at {stats_path}: {e}")
        return AssetSet()

    return AssetSet(js=js, css=css, manifest=manifest)


def load_icon_stats(icon_stats_path: str | Path, static_prefix: str = STATIC_PREFIX) -> str | None:
    """
    Load favicon/meta markup from an icon stats file.

    Each snippet's output prefix is rewritten to live under the static mount
    so icon URLs resolve next to the JS bundles.

    Returns:
        The concatenated snippets, or None when there is nothing to inject.
    """
    try:
        icon_stats = _read_json(icon_stats_path)
    except (OSError, ValueError) as e:
        logger.debug(f"No icon stats at {icon_stats_path}: {e}")
        return None

    if not isinstance(icon_stats, dict) or not icon_stats.get("html"):
        return None

    prefix = icon_stats.get("outputFilePrefix")
    snippets = icon_stats["html"]
    if not isinstance(snippets, list) or not all(isinstance(s, str) for s in snippets):
        logger.debug(f"Ignoring icon stats at {icon_stats_path}: html must be a list of strings")
        return None
    if prefix is not None and not isinstance(prefix, str):
        logger.debug(f"Ignoring icon stats at {icon_stats_path}: outputFilePrefix must be a string")
        return None

    if prefix:
        snippets = [s.replace(prefix, f"{static_prefix}{prefix}", 1) for s in snippets]
    return "".join(snippets)
