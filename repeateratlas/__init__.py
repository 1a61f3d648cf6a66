"""Repeater catalogue tools: locators, geocoding, service models, CHIRP export, map views and form helpers."""

__version__ = "0.1.0"