"""Fold per-chunk reports into one daily report."""

from __future__ import annotations

from typing import Iterable

from history_insights.browser.models import CategoryFrequency, DailyReport, SiteVisit
from history_insights.browser.parser import extract_origin

TOP_SITES = 5


def aggregate_reports(reports: Iterable[DailyReport]) -> DailyReport:
    """Merge chunk reports in order.

    Sites are grouped by origin. A group's category is the one carried by
    the last contribution to it, not a majority vote. Ranking ties keep
    first-seen order, and the same holds for the most frequent category.
    """
    total_visits = 0
    categories: dict[str, int] = {}
    groups: dict[str, SiteVisit] = {}

    for report in reports:
        total_visits += report.total_visits

        for name, count in report.categories.items():
            categories[name] = categories.get(name, 0) + count

        for site in report.most_visited_sites:
            origin = extract_origin(site.url)
            group = groups.get(origin)
            if group is None:
                groups[origin] = SiteVisit(url=origin, category=site.category, visits=site.visits)
            else:
                group.visits += site.visits
                group.category = site.category

    # sorted() is stable, so equal visit counts keep first-seen order.
    top_sites = sorted(groups.values(), key=lambda s: s.visits, reverse=True)[:TOP_SITES]

    result = DailyReport(
        total_visits=total_visits,
        categories=categories,
        most_visited_sites=top_sites,
    )

    best: tuple[str, int] | None = None
    for name, count in categories.items():
        if best is None or count > best[1]:
            best = (name, count)
    if best is not None:
        result.most_frequent_category = CategoryFrequency(category=best[0], frequency=best[1])

    if top_sites:
        head = top_sites[0]
        result.most_frequent_site = SiteVisit(url=head.url, category=head.category, visits=head.visits)

    return result
