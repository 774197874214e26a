#!/usr/bin/env python3
"""
Main / entry point for the BGW210 LAN traffic monitor.

"""
import asyncio
import sys
from os import getenv

import structlog
from aiohttp import ClientError, ClientSession, ClientTimeout, web
from bgw210.scrape import update_devices, update_lan_statistics
from bgw210.server import DEFAULT_DASHBOARD_PATH, build_app
from bgw210.store import ChartData
from err.exceptions import RouterNotOkError, TableNotFoundError
from prometheus_client import start_http_server
from util.const import REQUEST_HEADERS, LogLevel

# cfg-file/arg-arse/clip is overkill for the few things that need to be configured.
##
ROUTER_BASE_URL = getenv("ROUTER_BASE_URL", "http://192.168.1.254")

HTTP_PORT = int(getenv("HTTP_PORT", "8080"))
METRICS_PORT = int(getenv("METRICS_PORT", "8210"))
POLL_INTERVAL_SECONDS = int(getenv("POLL_INTERVAL_SECONDS", "10"))
DASHBOARD_PATH = getenv("DASHBOARD_PATH", str(DEFAULT_DASHBOARD_PATH))

# The statistics page can take a few seconds; anything past this is the router being stuck
REQUEST_TIMEOUT_SECONDS = int(getenv("REQUEST_TIMEOUT_SECONDS", "30"))


if getenv("LOG_LEVEL") not in LogLevel.__members__ or getenv("LOG_LEVEL") is None:
    print(f"Defaulting to {LogLevel.INFO} log level")
    log_level = LogLevel.INFO
else:
    log_level = LogLevel[getenv("LOG_LEVEL")]  # type: ignore
    print(f"Using log level {log_level.value}")


structlog.configure(
    wrapper_class=structlog.make_filtering_bound_logger(log_level.value)
)

log = structlog.get_logger(__name__)


async def poll_lan_statistics(client: ClientSession, store: ChartData):
    """Runs until the process exits. Nothing in here is fatal."""
    while True:
        try:
            await update_lan_statistics(client, store)
        except TableNotFoundError as e:
            log.error("Caught TableNotFoundError", error=e)
        except RouterNotOkError as e:
            log.error("Caught RouterNotOkError", error=e)
        except (ClientError, asyncio.TimeoutError) as e:
            log.error("Failed to reach router", error=e)
        # pylint: disable=broad-exception-caught
        except Exception as e:
            _e = "Unforeseen exception. Treating as non-fatal."
            log.error(_e, error=e)

        log.debug(f"Sleeping {POLL_INTERVAL_SECONDS} seconds before next poll")
        await asyncio.sleep(POLL_INTERVAL_SECONDS)


async def main() -> int:
    """Main entry point."""
    log.info("Starting up")

    server, _ = start_http_server(port=METRICS_PORT)
    log.info("Metrics server started", server=server.server_address)

    log.debug("Setting up connection to router...")
    client = ClientSession(
        base_url=ROUTER_BASE_URL,
        headers=REQUEST_HEADERS,
        timeout=ClientTimeout(total=REQUEST_TIMEOUT_SECONDS),
    )
    store = ChartData()

    # Devices are only discovered once. Anything that joins the LAN later needs a restart.
    try:
        await update_devices(client, store)
    except (RouterNotOkError, ClientError, asyncio.TimeoutError) as e:
        log.error("Could not get device list. Can't continue.", error=e)
        await client.close()
        return 1

    runner = web.AppRunner(build_app(store, DASHBOARD_PATH))
    await runner.setup()
    site = web.TCPSite(runner, port=HTTP_PORT)
    await site.start()
    log.info(f"Serving request from http://localhost:{HTTP_PORT}")

    try:
        await poll_lan_statistics(client, store)
    finally:
        await runner.cleanup()
        await client.close()
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
