"""Data models for browsing history and daily reports."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

DEFAULT_CATEGORY = "General"


@dataclass
class Account:
    """The browser account a history blob belongs to."""

    email: str
    name: str = ""

    def to_dict(self) -> dict:
        return {"email": self.email, "name": self.name}

    @classmethod
    def from_dict(cls, raw: Any) -> "Account":
        if not isinstance(raw, dict):
            raise ValueError("account must be an object")
        email = raw.get("email")
        if not isinstance(email, str) or not email:
            raise ValueError("account.email must be a non-empty string")
        name = raw.get("name") or ""
        return cls(email=email, name=str(name))


@dataclass
class HistoryRecord:
    """One day of raw browsing history for one account.

    ``history`` items are kept exactly as submitted; only ``url`` and
    ``title`` are read downstream.
    """

    account: Account
    history: list[Any] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"account": self.account.to_dict(), "history": list(self.history)}

    @classmethod
    def from_dict(cls, raw: Any) -> "HistoryRecord":
        """Decode a stored document; raises ValueError when the shape is wrong."""
        if not isinstance(raw, dict):
            raise ValueError("history record must be an object")
        if not raw.get("account"):
            raise ValueError("history record has no account")
        history = raw.get("history")
        if not isinstance(history, list):
            raise ValueError("history record has no history list")
        return cls(account=Account.from_dict(raw["account"]), history=history)


@dataclass
class SiteVisit:
    """Visit count for one site, tagged with its category."""

    url: str = ""
    category: str = DEFAULT_CATEGORY
    visits: int = 0

    def to_dict(self) -> dict:
        return {"url": self.url, "category": self.category, "visits": self.visits}

    @classmethod
    def from_dict(cls, raw: Any) -> "SiteVisit":
        if not isinstance(raw, dict):
            raise ValueError("site entry must be an object")
        return cls(
            url=_as_str(raw.get("url"), "url", ""),
            category=_as_str(raw.get("category"), "category", DEFAULT_CATEGORY),
            visits=_as_count(raw.get("visits"), "visits"),
        )


@dataclass
class CategoryFrequency:
    category: str = DEFAULT_CATEGORY
    frequency: int = 0

    def to_dict(self) -> dict:
        return {"category": self.category, "frequency": self.frequency}

    @classmethod
    def from_dict(cls, raw: Any) -> "CategoryFrequency":
        if not isinstance(raw, dict):
            raise ValueError("mostFrequentCategory must be an object")
        return cls(
            category=_as_str(raw.get("category"), "category", DEFAULT_CATEGORY),
            frequency=_as_count(raw.get("frequency"), "frequency"),
        )


@dataclass
class DailyReport:
    """Category and site breakdown for a chunk or for a whole day.

    The neutral (all-zero) report is simply ``DailyReport()``.
    """

    total_visits: int = 0
    categories: dict[str, int] = field(default_factory=dict)
    most_visited_sites: list[SiteVisit] = field(default_factory=list)
    most_frequent_category: CategoryFrequency = field(default_factory=CategoryFrequency)
    most_frequent_site: SiteVisit = field(default_factory=SiteVisit)

    @classmethod
    def neutral(cls) -> "DailyReport":
        return cls()

    def to_dict(self) -> dict:
        """Serialize with the camelCase keys used in storage and over HTTP."""
        return {
            "totalVisits": self.total_visits,
            "categories": dict(self.categories),
            "mostVisitedSites": [s.to_dict() for s in self.most_visited_sites],
            "mostFrequentCategory": self.most_frequent_category.to_dict(),
            "mostFrequentSite": self.most_frequent_site.to_dict(),
        }

    @classmethod
    def from_dict(cls, raw: Any) -> "DailyReport":
        """Decode a report document.

        Missing fields take their neutral value; present fields of the wrong
        type raise ValueError.
        """
        if not isinstance(raw, dict):
            raise ValueError("report must be an object")

        categories_raw = raw.get("categories")
        if categories_raw is None:
            categories_raw = {}
        if not isinstance(categories_raw, dict):
            raise ValueError("categories must be an object")
        categories = {
            str(name): _as_count(count, f"categories[{name}]")
            for name, count in categories_raw.items()
        }

        sites_raw = raw.get("mostVisitedSites")
        if sites_raw is None:
            sites_raw = []
        if not isinstance(sites_raw, list):
            raise ValueError("mostVisitedSites must be a list")

        mfc = raw.get("mostFrequentCategory")
        mfs = raw.get("mostFrequentSite")
        return cls(
            total_visits=_as_count(raw.get("totalVisits"), "totalVisits"),
            categories=categories,
            most_visited_sites=[SiteVisit.from_dict(s) for s in sites_raw],
            most_frequent_category=(
                CategoryFrequency.from_dict(mfc) if mfc is not None else CategoryFrequency()
            ),
            most_frequent_site=SiteVisit.from_dict(mfs) if mfs is not None else SiteVisit(),
        )


def _as_count(value: Any, name: str) -> int:
    """Coerce a JSON number (or numeric string) to a non-negative int."""
    if value is None:
        return 0
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number, got {value!r}")
    if isinstance(value, int):
        count = value
    elif isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{name} must be a whole number, got {value!r}")
        count = int(value)
    elif isinstance(value, str):
        try:
            count = int(value.strip())
        except ValueError:
            raise ValueError(f"{name} must be a number, got {value!r}") from None
    else:
        raise ValueError(f"{name} must be a number, got {type(value).__name__}")
    if count < 0:
        raise ValueError(f"{name} must not be negative, got {count}")
    return count


def _as_str(value: Any, name: str, default: str) -> str:
    if value is None:
        return default
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a string, got {type(value).__name__}")
    return value
