"""URL and raw history item helpers."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

_DEFAULT_PORTS = {"http": 80, "https": 443, "ws": 80, "wss": 443, "ftp": 21}


def extract_origin(url: str) -> str:
    """Collapse a URL to ``scheme://host[:port]/``.

    Every path under a host maps to the same key. Strings that do not parse
    as an absolute URL with a host are returned unchanged.
    """
    try:
        parts = urlsplit(url.strip())
        port = parts.port
    except (ValueError, AttributeError):
        logger.warning("Invalid URL: %r", url)
        return url

    host = parts.hostname
    if not parts.scheme or not host:
        logger.warning("Invalid URL: %r", url)
        return url

    scheme = parts.scheme.lower()
    if ":" in host:
        host = f"[{host}]"
    if port is not None and port != _DEFAULT_PORTS.get(scheme):
        return f"{scheme}://{host}:{port}/"
    return f"{scheme}://{host}/"


def item_url_title(item: Any) -> tuple[str, str]:
    """Return ``(url, title)`` for one raw history item; missing values become ''."""
    if isinstance(item, dict):
        url = item.get("url") or ""
        title = item.get("title") or ""
        return str(url), str(title)
    if isinstance(item, str):
        return item, ""
    return str(item), ""
