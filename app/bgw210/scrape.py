"""
Implementation of the scrape functions: fetch a router page, hand it to the parser, update metrics.
"""

import asyncio

import structlog
from aiohttp import ClientError, ClientSession
from bgw210 import metrics, parse
from bgw210.store import ChartData, DeviceData
from bs4 import BeautifulSoup
from err.exceptions import RouterNotOkError, TableNotFoundError
from util.const import DEVICES_ENDPOINT, LAN_STATISTICS_ENDPOINT

log = structlog.get_logger(__name__)


async def fetch_page(cs: ClientSession, endpoint: str, scrape_target: str) -> BeautifulSoup:
    """GET `endpoint` from the router and parse it.

    Raises:
        RouterNotOkError: router answered with anything but 200
        aiohttp.ClientError: transport level failure
    """
    # s_meta_scrape_time has only one label: scrape_target
    with metrics.s_meta_scrape_time.labels(scrape_target).time():
        async with cs.request(method="GET", url=endpoint) as resp:
            metrics.c_meta_scrape_result.labels(resp.status, scrape_target).inc()
            if resp.status != 200:
                _e = f"Failed to get {scrape_target}. Status={resp.status}."
                raise RouterNotOkError(_e, status_code=resp.status)
            # The router doesn't always send a charset and the device names are user supplied
            raw_html = await resp.text(errors="replace")

    log.debug("Fetched page", scrape_target=scrape_target, size=len(raw_html))
    return BeautifulSoup(raw_html, "html.parser")


async def update_devices(cs: ClientSession, store: ChartData) -> int:
    """One-shot device discovery. Any fetch failure propagates; startup can't go on without it."""
    log.info("Attempting to get device list...")
    soup = await fetch_page(cs, DEVICES_ENDPOINT, "devices")

    added = parse.extract_devices(store, soup)
    metrics.c_meta_parse_result.labels("devices", True).inc()
    metrics.g_lan_devices.set(len(store))
    return added


def _update_device_metrics(device: DeviceData) -> None:
    if device.transmit_bytes:
        metrics.g_lan_transmit_bytes.labels(
            device.mac_address, device.device_name
        ).set(device.transmit_bytes[-1])
    if device.receive_bytes:
        metrics.g_lan_receive_bytes.labels(
            device.mac_address, device.device_name
        ).set(device.receive_bytes[-1])


async def update_lan_statistics(cs: ClientSession, store: ChartData) -> list[DeviceData]:
    """One statistics poll. Always adds exactly one fetch timestamp to the store.

    Raises:
        RouterNotOkError, aiohttp.ClientError: router could not be fetched
        TableNotFoundError: page came back without the statistics table
    """
    log.debug("Attempting to get LAN statistics...")
    try:
        soup = await fetch_page(cs, LAN_STATISTICS_ENDPOINT, "lan_statistics")
    except (RouterNotOkError, ClientError, asyncio.TimeoutError):
        # No data this time but the timestamp still counts as a poll
        store.record_fetch()
        raise

    try:
        with store.batch():
            updated = parse.extract_lan_statistics(store, soup)
            for device in updated:
                _update_device_metrics(device)
    except TableNotFoundError:
        metrics.c_meta_parse_result.labels("lan_statistics", False).inc()
        raise

    metrics.c_meta_parse_result.labels("lan_statistics", True).inc()
    log.info("Updated LAN statistics", devices=len(updated))
    return updated
