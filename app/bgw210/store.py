"""
The one bit of shared state in the process: the devices we know about and their byte counter history.

The statistics poller writes, the HTTP handlers and the metrics thread read.
Everything goes through a single re-entrant lock; a scrape pass takes it with batch() and holds it
    for the whole pass so a reader either sees all of a fetch or none of it.
"""

import json
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator

import structlog

log = structlog.get_logger(__name__)


@dataclass
class DeviceData:
    """One LAN device. The MAC address is the identity and never changes."""

    mac_address: str
    device_name: str
    transmit_bytes: list[int] = field(default_factory=list)
    receive_bytes: list[int] = field(default_factory=list)

    def as_dict(self) -> dict:
        # Key names are what the dashboard reads; don't rename them
        return {
            "DeviceName": self.device_name,
            "TransmitBytes": list(self.transmit_bytes),
            "ReceiveBytes": list(self.receive_bytes),
        }

    def copy(self) -> "DeviceData":
        return DeviceData(
            self.mac_address,
            self.device_name,
            list(self.transmit_bytes),
            list(self.receive_bytes),
        )


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class ChartData:
    """Devices keyed by MAC address plus one timestamp per statistics fetch.

    A plain dict keeps insertion order and gives O(1) lookup, so the registry and the ordered
        device list are the same object and can't drift apart.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._devices: dict[str, DeviceData] = {}
        self._fetch_milliseconds: list[int] = []

    @contextmanager
    def batch(self) -> Iterator["ChartData"]:
        """Hold the store lock across several operations."""
        with self._lock:
            yield self

    def record_fetch(self, timestamp_ms: int | None = None) -> int:
        """Append a fetch timestamp (ms since epoch). Defaults to now.

        The wall clock can step backwards (NTP); the default never goes below the last entry.
        """
        with self._lock:
            if timestamp_ms is None:
                timestamp_ms = _now_ms()
                if self._fetch_milliseconds:
                    timestamp_ms = max(timestamp_ms, self._fetch_milliseconds[-1])
            self._fetch_milliseconds.append(timestamp_ms)
        return timestamp_ms

    def upsert_device(self, mac_address: str, device_name: str) -> bool:
        """Register a device. Returns False (and changes nothing) if the MAC is already known."""
        with self._lock:
            if mac_address in self._devices:
                return False
            self._devices[mac_address] = DeviceData(mac_address, device_name)
        log.debug("Registered device", mac=mac_address, name=device_name)
        return True

    def resolve_device(self, mac_address: str) -> DeviceData | None:
        """Copy of the device record; changes to it don't reach the store."""
        with self._lock:
            if (device := self._devices.get(mac_address)) is None:
                return None
            return device.copy()

    def append_transmit(self, mac_address: str, value: int) -> bool:
        with self._lock:
            if (device := self._devices.get(mac_address)) is None:
                return False
            device.transmit_bytes.append(value)
            return True

    def append_receive(self, mac_address: str, value: int) -> bool:
        with self._lock:
            if (device := self._devices.get(mac_address)) is None:
                return False
            device.receive_bytes.append(value)
            return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._devices)

    def snapshot(self) -> dict:
        """Deep copy of the current state in the shape the dashboard expects."""
        with self._lock:
            return {
                "Devices": [device.as_dict() for device in self._devices.values()],
                "FetchMilliseconds": list(self._fetch_milliseconds),
            }

    def to_json(self) -> str:
        return json.dumps(self.snapshot())
