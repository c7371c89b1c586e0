"""HTTP catalog of installable applications.

Serves ``GET /`` with a JSON array of ``{"Name": ..., "URL": ...}`` objects,
one per target in the trust repository, so a web page can render a
clickable ``conman://<name>`` gallery. Any failure answers 500 with the
error text; there is no partial listing.
"""

import asyncio

import orjson
from aiohttp import web

from conman.core.catalog import list_catalog
from conman.core.protocols import TargetRepository
from conman.exceptions import ConmanError
from conman.logger import get_logger

logger = get_logger(__name__)

REPOSITORY_KEY = web.AppKey("repository", TargetRepository)

CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}


async def handle_catalog(request: web.Request) -> web.Response:
    """List every application with its icon URL."""
    repository = request.app[REPOSITORY_KEY]
    try:
        entries = await list_catalog(repository)
    except ConmanError as e:
        logger.error("Catalog listing failed: %s", e)
        return web.Response(status=500, text=str(e), headers=CORS_HEADERS)

    return web.Response(
        body=orjson.dumps(entries),
        content_type="application/json",
        headers=CORS_HEADERS,
    )


def create_app(repository: TargetRepository) -> web.Application:
    """Build the catalog web application around a repository."""
    app = web.Application()
    app[REPOSITORY_KEY] = repository
    app.router.add_get("/", handle_catalog)
    return app


async def run_server(
    repository: TargetRepository, host: str, port: int
) -> None:
    """Serve the catalog until the task is cancelled."""
    runner = web.AppRunner(create_app(repository))
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    try:
        await site.start()
        logger.info("Serving catalog on http://%s:%d/", host, port)
        print(f"Serving catalog on http://{host}:{port}/")
        await asyncio.Event().wait()
    finally:
        await runner.cleanup()
