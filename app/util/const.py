import logging
from enum import Enum

# Unlikely that the router cares but it's easy enough to pretend to be a browser just in case
REQUEST_HEADERS = {
    "User-Agent": "Mozilla/5.0 (X11; Linux x86_64; rv:123.4) Gecko/20100101 Firefox/123.4",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Accept-Encoding": "gzip, deflate",
    "Connection": "keep-alive",
    "Pragma": "no-cache",
    "Cache-Control": "no-cache",
}

DEVICES_ENDPOINT = "/cgi-bin/devices.ha"
LAN_STATISTICS_ENDPOINT = "/cgi-bin/lanstatistics.ha"

# Neither table has an id or class; the accessibility summary is the only stable marker.
DEVICES_TABLE_SUMMARY = "This table displays info for each LAN-side device"
LAN_STATISTICS_TABLE_SUMMARY = "Wi-Fi Client Connection Statistics Table"

MAC_ADDRESS_LABEL = "MAC Address"

# Positional columns on the statistics table
MAC_ADDRESS_COLUMN = 0
TRANSMIT_BYTES_COLUMN = 7
RECEIVE_BYTES_COLUMN = 8


class LogLevel(Enum):
    """Simple enum of supported log levels for easy validation"""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL
