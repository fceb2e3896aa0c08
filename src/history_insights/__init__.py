"""Chunked browser-history classification and daily report aggregation."""

__version__ = "0.1.0"
