import threading

import pytest
from bgw210.store import ChartData
from bs4 import BeautifulSoup
from util.const import DEVICES_TABLE_SUMMARY, LAN_STATISTICS_TABLE_SUMMARY

LAPTOP_MAC = "AA:BB:CC:DD:EE:FF"
PHONE_MAC = "11:22:33:44:55:66"

STATISTICS_HEADINGS = [
    "MAC Address",
    "Connection Type",
    "Signal Strength",
    "Tx Rate",
    "Rx Rate",
    "Tx Errors",
    "Rx Errors",
    "Tx Bytes",
    "Rx Bytes",
    "Retransmissions",
]


def device_rows(mac: str, name: str) -> str:
    # Same shape as the router renders: a block of label/value rows per device, then a divider
    return f"""
      <tr><th scope="row">MAC Address</th><td>
        {mac}
      </td></tr>
      <tr><th scope="row">Name</th><td>
        {name}
      </td></tr>
      <tr><th scope="row">IPv4 Address / Name</th><td>192.168.1.64 / {name}</td></tr>
      <tr><th scope="row">Last Activity</th><td>Mon Oct 19 10:12:44 2026</td></tr>
      <tr><td colspan="2"><hr></td></tr>
    """


def devices_page(body: str, summary: str = DEVICES_TABLE_SUMMARY) -> str:
    return f"""<!DOCTYPE html>
<html><head><title>Device List</title></head>
<body>
  <div id="content-sub">
    <table class="table75" summary="Device List Header"><tr><td>Device List</td></tr></table>
    <table class="table75" summary="{summary}">
      {body}
    </table>
  </div>
</body></html>"""


def statistics_row(mac: str, tx: str, rx: str) -> str:
    cells = [mac, "Wi-Fi 5 GHz", "-52 dBm", "866", "866", "0", "0", tx, rx, "12"]
    return "<tr>" + "".join(f"<td>\n  {c}\n</td>" for c in cells) + "</tr>\n"


def statistics_page(rows: str, summary: str = LAN_STATISTICS_TABLE_SUMMARY) -> str:
    headings = "".join(f"<th>{h}</th>" for h in STATISTICS_HEADINGS)
    return f"""<!DOCTYPE html>
<html><head><title>LAN Statistics</title></head>
<body>
  <table class="table100" summary="Ethernet Statistics Table">
    <tr><th>Port</th><th>Tx Bytes</th></tr>
    <tr><td>{LAPTOP_MAC}</td><td>999</td></tr>
  </table>
  <table class="table100" summary="{summary}">
    <tr>{headings}</tr>
    {rows}
  </table>
</body></html>"""


def soup_of(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


class SnapshotDuringPass(ChartData):
    """Store that tries a snapshot from another thread once a pass is part way through.

    The first transmit append starts the reader, waits a moment, then carries on.
    `reader_blocked` says whether the reader was still stuck on the lock at that point.
    """

    def __init__(self):
        super().__init__()
        self.reader: threading.Thread | None = None
        self.reader_blocked: bool | None = None
        self.seen: list[dict] = []

    def append_transmit(self, mac_address: str, value: int) -> bool:
        if self.reader is None:
            self.reader = threading.Thread(target=lambda: self.seen.append(self.snapshot()))
            self.reader.start()
            self.reader.join(timeout=0.2)
            self.reader_blocked = self.reader.is_alive()
        return super().append_transmit(mac_address, value)

    def wait_for_reader(self) -> dict:
        self.reader.join(timeout=5)
        assert not self.reader.is_alive()
        return self.seen[0]


@pytest.fixture
def store() -> ChartData:
    return ChartData()


@pytest.fixture
def registered_store(store: ChartData) -> ChartData:
    store.upsert_device(LAPTOP_MAC, "laptop")
    store.upsert_device(PHONE_MAC, "phone")
    return store


@pytest.fixture
def watched_store() -> SnapshotDuringPass:
    watched = SnapshotDuringPass()
    watched.upsert_device(LAPTOP_MAC, "laptop")
    watched.upsert_device(PHONE_MAC, "phone")
    return watched
