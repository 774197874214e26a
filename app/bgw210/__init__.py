"""Scrapes the LAN device list and per-device byte counters from an AT&T BGW210 gateway.

The pages this relies on (devices.ha, lanstatistics.ha) look the same on the 5268AC and the
newer BGW320 from the screenshots I've seen, but I only have the BGW210 to test against.
"""
