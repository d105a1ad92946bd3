"""HTTP boundary: page route handlers and the aiohttp server."""
