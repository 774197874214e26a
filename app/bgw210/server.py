"""HTTP surface for the dashboard: the page itself and the JSON it polls."""

import asyncio
from pathlib import Path

import structlog
from aiohttp import web
from bgw210.store import ChartData

log = structlog.get_logger(__name__)

STORE_KEY = web.AppKey("store", ChartData)
DASHBOARD_PATH_KEY = web.AppKey("dashboard_path", Path)

DEFAULT_DASHBOARD_PATH = Path(__file__).parent / "static" / "index.html"


async def index(request: web.Request) -> web.Response:
    # Read on every request so the page can be edited without a restart
    try:
        page = await asyncio.to_thread(request.app[DASHBOARD_PATH_KEY].read_bytes)
    except OSError as e:
        log.error("Failed to read dashboard page", error=e)
        return web.Response(status=500, text=str(e))
    return web.Response(body=page, content_type="text/html")


async def data(request: web.Request) -> web.Response:
    try:
        payload = request.app[STORE_KEY].to_json()
    except (TypeError, ValueError) as e:
        log.error("Failed to serialize chart data", error=e)
        return web.Response(status=500, text=str(e))
    return web.Response(text=payload, content_type="application/json")


def build_app(store: ChartData, dashboard_path: Path = DEFAULT_DASHBOARD_PATH) -> web.Application:
    app = web.Application()
    app[STORE_KEY] = store
    app[DASHBOARD_PATH_KEY] = Path(dashboard_path)
    app.router.add_get("/", index)
    app.router.add_get("/data", data)
    return app
