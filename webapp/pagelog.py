"""
Webapp Page Log

A compact event log for the rendering gateway, kept apart from the regular
module loggers so request outcomes read like a running tally.

Events:
- 🧭 ROUTE: Page routes registered at startup
- 📦 ASSETS: Bundle manifest resolution
- 📄 RENDER: Pages served
- ↪️ REDIRECT: Redirects issued by content producers
- ❌ ERROR: Error replies
"""

import logging
import sys
from datetime import datetime
from enum import Enum
from pathlib import Path


class Event(Enum):
    """Event types for the page log."""
    ROUTE = "🧭 ROUTE"
    ASSETS = "📦 ASSETS"
    RENDER = "📄 RENDER"
    REDIRECT = "↪️ REDIRECT"
    ERROR = "❌ ERROR"

    START = "⚡ START"
    STOP = "⚡ STOP"


class PageLogFormatter(logging.Formatter):
    """Short single-line formatter for page events."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        event = getattr(record, "event", None)
        if event:
            prefix = event.value
        else:
            prefix = f"[{record.levelname}]"

        return f"{timestamp} {prefix} │ {record.getMessage()}"


class PageLog:
    """
    Event logger for rendered pages.

    Usage:
        from webapp.pagelog import pagelog

        pagelog.route("/")
        pagelog.render("/", mode="nojs")
        pagelog.redirect("/", "/login")
    """

    def __init__(self, name: str = "webapp.pages"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.INFO)
        self._configured = False

    def configure(self, log_file: Path | None = None, console: bool = True) -> None:
        """Configure page log outputs."""
        if self._configured:
            return

        formatter = PageLogFormatter()

        if console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

        if log_file:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

        self.logger.propagate = False
        self._configured = True

    def _log(self, event: Event, message: str) -> None:
        self.logger.info(message, extra={"event": event})

    def route(self, path: str) -> None:
        """Log a registered page route."""
        self._log(Event.ROUTE, f"GET {path}")

    def assets(self, js: str | None, css: str | None, manifest: str | None) -> None:
        """Log the resolved production bundles."""
        found = [name for name in (js, css, manifest) if name]
        self._log(Event.ASSETS, ", ".join(found) if found else "no bundles found")

    def render(self, path: str, mode: str = "") -> None:
        """Log a page served."""
        if mode:
            self._log(Event.RENDER, f"{path} (__mode={mode})")
        else:
            self._log(Event.RENDER, path)

    def redirect(self, path: str, location: str) -> None:
        """Log a redirect issued by content."""
        self._log(Event.REDIRECT, f"{path} → {location}")

    def error(self, path: str, status: int, message: str = "") -> None:
        """Log an error reply."""
        preview = message[:80] + "..." if len(message) > 80 else message
        if preview:
            self._log(Event.ERROR, f"{path} {status}: {preview}")
        else:
            self._log(Event.ERROR, f"{path} {status}")

    def start(self, component: str) -> None:
        """Log component started."""
        self._log(Event.START, component)

    def stop(self, component: str) -> None:
        """Log component stopped."""
        self._log(Event.STOP, component)


# Global page log instance
pagelog = PageLog()
