#!/usr/bin/env python3
"""
Webapp Service

Main entry point: loads the configuration, registers the page routes and
serves them until SIGINT/SIGTERM.
"""

import asyncio
import logging
import signal
from pathlib import Path

from webapp.config import Config
from webapp.pagelog import pagelog
from webapp.web.server import WebServer

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("webapp")


async def main() -> None:
    """Main application entry point."""
    pagelog.configure(log_file=Path.cwd() / "logs" / "pages.log", console=True)

    config = Config.load()
    if config.webpack_dev:
        logger.info(f"Dev mode: bundles from {config.dev_server.host}:{config.dev_server.port}")

    # Raises ConfigError for paths without content; nothing is served then
    web_server = WebServer(config)

    shutdown_event = asyncio.Event()

    def handle_shutdown(sig: signal.Signals) -> None:
        logger.info(f"Received {sig.name}, initiating shutdown...")
        shutdown_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, handle_shutdown, sig)

    try:
        await web_server.start()
        pagelog.start(f"{config.page_title} on :{config.port}")
        await shutdown_event.wait()
    except Exception as e:
        logger.exception(f"Error running webapp: {e}")
    finally:
        try:
            await asyncio.wait_for(web_server.stop(), timeout=8.0)
        except asyncio.TimeoutError:
            logger.warning("Shutdown timed out after 8s, exiting anyway")
        pagelog.stop(config.page_title)


def run() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
