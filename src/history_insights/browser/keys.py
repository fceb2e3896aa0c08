"""Storage key names.

These strings are shared with data written by earlier deployments and must
not change.
"""

from __future__ import annotations


def history_key(date: str, email: str) -> str:
    return f"browser-history:{date}:{email}"


def progress_key(date: str, email: str) -> str:
    return f"chunk-progress:{date}:{email}"


def chunk_report_key(date: str, email: str, index: int) -> str:
    return f"chunk-report:{date}:{email}:{index}"


def chunk_report_pattern(date: str, email: str) -> str:
    return f"chunk-report:{date}:{email}:*"


def daily_report_key(date: str, email: str) -> str:
    return f"daily-report:{date}:{email}"
