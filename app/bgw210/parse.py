"""
Pull the device list and the per-device byte counters out of the router's HTML.
    Only tested against the BGW210's web interface but the Pace/Arris gateways AT&T ships all
    seem to render the same pages.

Both passes take the store lock for their whole body so a reader never sees half a pass.
"""

import re

import structlog
from bgw210.store import ChartData, DeviceData
from bgw210.tree import (
    find_descendant,
    find_followup_sibling,
    get_attribute,
    get_inner_text,
    is_tag,
)
from bs4 import BeautifulSoup
from bs4.element import PageElement
from err.exceptions import TableNotFoundError
from util.const import (
    DEVICES_TABLE_SUMMARY,
    LAN_STATISTICS_TABLE_SUMMARY,
    MAC_ADDRESS_COLUMN,
    MAC_ADDRESS_LABEL,
    RECEIVE_BYTES_COLUMN,
    TRANSMIT_BYTES_COLUMN,
)

log = structlog.get_logger(__name__)

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_is_tr = is_tag("tr")
_is_td = is_tag("td")


def parse_int(text: str) -> int | None:
    """Base 10 signed 64 bit integer, or None if `text` isn't one.

    int() alone is too forgiving for scraped text; it takes underscores, inner whitespace and
        non-ascii digits.
    """
    if _INT_RE.fullmatch(text) is None:
        return None
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        return None
    return value


def _clean(text: str) -> str:
    # html.parser leaves CRLF alone so a trailing \r is as likely as a \n
    return text.strip()


def _table_with_summary(summary: str):
    return lambda node: is_tag("table")(node) and get_attribute(node, "summary") == summary


def _is_mac_header(node: PageElement) -> bool:
    return is_tag("th")(node) and get_inner_text(node) == MAC_ADDRESS_LABEL


def extract_devices(store: ChartData, soup: BeautifulSoup) -> int:
    """Register every device listed on the devices page. Returns how many were new.

    The devices table is a flat list of <th>label</th><td>value</td> rows, one block of rows per device:
        <tr><th>MAC Address</th><td>aa:bb:cc:dd:ee:ff</td></tr>
        <tr><th>Name</th><td>laptop</td></tr>
        <tr><th>IPv4 Address</th> ...
    So we look for a MAC Address row and take the very next row as the name.
    """
    added = 0
    with store.batch():
        table = find_descendant(soup, _table_with_summary(DEVICES_TABLE_SUMMARY))
        if table is None:
            # Not an error; the router just has nothing to show us
            log.warning("Device table not found. Assuming no devices.")
            return 0

        tr = find_descendant(table, _is_tr)
        while tr is not None:
            mac_row = tr
            tr = find_followup_sibling(mac_row)

            if find_descendant(mac_row, _is_mac_header) is None:
                continue
            if (td := find_descendant(mac_row, _is_td)) is None:
                continue
            mac_address = _clean(get_inner_text(td))
            if store.resolve_device(mac_address) is not None:
                log.debug("Device already registered", mac=mac_address)
                continue

            # MAC without a name row after it; drop it
            if (name_row := tr) is None:
                log.debug("No name row after MAC address", mac=mac_address)
                continue
            tr = find_followup_sibling(name_row)
            if (td := find_descendant(name_row, _is_td)) is None:
                log.debug("Name row has no value", mac=mac_address)
                continue
            device_name = _clean(get_inner_text(td)).replace("\r", "").replace("\n", "")

            if store.upsert_device(mac_address, device_name):
                added += 1

    log.info("Device discovery done", added=added, total=len(store))
    return added


def _iter_cells(tr: PageElement):
    td = find_descendant(tr, _is_td)
    while td is not None:
        yield td
        td = find_followup_sibling(td)


def _apply_statistics_row(
    store: ChartData, tr: PageElement, row_idx: int
) -> DeviceData | None:
    device = None
    sampled = False
    for col_idx, td in enumerate(_iter_cells(tr)):
        text = _clean(get_inner_text(td))
        if col_idx == MAC_ADDRESS_COLUMN:
            if (device := store.resolve_device(text)) is None:
                log.debug("Ignoring row for unregistered device", row_idx=row_idx, mac=text)
                return None
            continue

        if col_idx == TRANSMIT_BYTES_COLUMN:
            append = store.append_transmit
        elif col_idx == RECEIVE_BYTES_COLUMN:
            append = store.append_receive
        else:
            continue

        if (value := parse_int(text)) is None:
            log.warning(
                "Failure to convert byte count to int.",
                row_idx=row_idx,
                col_idx=col_idx,
                mac=device.mac_address,
                value=text,
            )
            continue
        append(device.mac_address, value)
        sampled = True

    # Fresh copy so the caller sees this row's samples
    return store.resolve_device(device.mac_address) if sampled else None


def extract_lan_statistics(
    store: ChartData, soup: BeautifulSoup, timestamp_ms: int | None = None
) -> list[DeviceData]:
    """
    Append one transmit/receive sample per known device on the statistics page.

    The fetch timestamp goes in first, under the same lock, so it's recorded even if the
        table turns out to be missing.
    Counters are the router's running totals; no differencing happens here.

    Returns the devices that got at least one new sample.

    Raises:
        TableNotFoundError: statistics table (or its header row) is not on the page
    """
    updated = []
    with store.batch():
        store.record_fetch(timestamp_ms)

        table = find_descendant(soup, _table_with_summary(LAN_STATISTICS_TABLE_SUMMARY))
        if table is None:
            raise TableNotFoundError("LAN statistics table not found")
        if (header := find_descendant(table, _is_tr)) is None:
            raise TableNotFoundError("LAN statistics table has no rows")

        # First row is the column headings
        tr = find_followup_sibling(header)
        row_idx = 0
        while tr is not None:
            if (device := _apply_statistics_row(store, tr, row_idx)) is not None:
                updated.append(device)
            tr = find_followup_sibling(tr)
            row_idx += 1

    log.debug("LAN statistics applied", rows=row_idx, updated=len(updated))
    return updated
