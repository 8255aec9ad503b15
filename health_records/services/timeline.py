import logging
from collections.abc import Iterable
from itertools import groupby

from health_records.schemas.timeline import DataIssue, GroupedTimeline, SortOrder, TimelineGroup, TimelineItem
from health_records.services.errors import MalformedRecord
from health_records.services.normalizer import (
    normalize_report,
    normalize_vitals,
    parse_report_records,
    parse_vitals_records,
)
from health_records.services.status_classifier import clamp_confidence, classify_vitals

logger = logging.getLogger(__name__)


def collect_items(
    reports: Iterable | None = None,
    vitals: Iterable | None = None,
) -> tuple[list[TimelineItem], list[DataIssue]]:
    """Normalize and classify both sources, reports first, skipping malformed records."""
    report_records, issues = parse_report_records(reports or [])
    vitals_records, vitals_issues = parse_vitals_records(vitals or [])
    issues.extend(vitals_issues)

    items: list[TimelineItem] = []
    for record in report_records:
        try:
            items.append(normalize_report(record))
        except MalformedRecord as exc:
            logger.warning("Dropping report %s: %s", record.id, exc.message)
            issues.append(exc.to_issue())
            continue
        if record.ai_insights is not None:
            _, issue = clamp_confidence(record.ai_insights.confidence, record.id)
            if issue:
                issues.append(issue)

    for record in vitals_records:
        status = classify_vitals(record)
        try:
            items.append(normalize_vitals(record, status))
        except MalformedRecord as exc:
            logger.warning("Dropping vitals %s: %s", record.id, exc.message)
            issues.append(exc.to_issue())
            continue
        issues.extend(status.issues)

    return items, issues


def sort_items(items: Iterable[TimelineItem], order: SortOrder | str = SortOrder.NEWEST) -> tuple[TimelineItem, ...]:
    # sorted() is stable in both directions, so equal timestamps keep their input order.
    direction = SortOrder(order)
    return tuple(sorted(items, key=lambda item: item.timestamp, reverse=direction == SortOrder.NEWEST))


def group_by_day(items: Iterable[TimelineItem], order: SortOrder | str = SortOrder.NEWEST) -> tuple[TimelineGroup, ...]:
    ordered = sort_items(items, order)
    return tuple(
        TimelineGroup(day=day, items=tuple(day_items))
        for day, day_items in groupby(ordered, key=lambda item: item.day)
    )


def build_timeline(
    reports: Iterable | None,
    vitals: Iterable | None,
    order: SortOrder | str = SortOrder.NEWEST,
) -> GroupedTimeline:
    direction = SortOrder(order)
    items, issues = collect_items(reports, vitals)
    return GroupedTimeline(order=direction, groups=group_by_day(items, direction), issues=tuple(issues))
