"""All the boiler plate / init code for defining metrics.

The JSON endpoint is what the dashboard uses; these are for keeping an eye on the scraper itself
    and for anyone that would rather graph the counters in Grafana.
"""

from prometheus_client import Counter, Gauge, Summary, disable_created_metrics

# By default, client will automatically create a "_created" meta metric for
#   each metric defined below.
# Having the unix epoch time of when the metric was created isn't that useful for us
#   so we'll disable it.
disable_created_metrics()


METRICS_NS = "bgw210"
META_NS = "meta"

##
# Meta Metrics
##
# How long is the router taking to answer?
# The statistics page in particular gets slow when the router is busy.
##
s_meta_scrape_time = Summary(
    f"{META_NS}_request_duration_seconds",
    "Time spent waiting for router to respond",
    # Only two pages are ever scraped
    labelnames=["scrape_target"],
)

c_meta_scrape_result = Counter(
    f"{META_NS}_scrape_result",
    "Count of successful vs failed scrapes",
    labelnames=["http_code", "scrape_target"],
)

c_meta_parse_result = Counter(
    f"{META_NS}_parse_result",
    "Count of successful vs failed parse attempts",
    labelnames=["parse_target", "parse_result"],
)

##
# LAN devices
##
g_lan_devices = Gauge(
    f"{METRICS_NS}_lan_devices",
    "Number of LAN devices discovered at startup",
)

# These are the router's running totals, not rates. Use rate() on the prometheus side.
# Cardinality is bounded by the device list which is fixed at startup.
g_lan_transmit_bytes = Gauge(
    f"{METRICS_NS}_lan_transmit_bytes",
    "Bytes transmitted as last reported by the router",
    labelnames=["mac_address", "device_name"],
)

g_lan_receive_bytes = Gauge(
    f"{METRICS_NS}_lan_receive_bytes",
    "Bytes received as last reported by the router",
    labelnames=["mac_address", "device_name"],
)
