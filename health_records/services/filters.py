from collections.abc import Iterable
from datetime import datetime, timedelta

from health_records.schemas.records import RawReportRecord
from health_records.schemas.timeline import TimelineItem, TimelineKind

ALL = "all"
REPORT_SORT_KEYS = ("date", "name", "type")

_KIND_ALIASES = {"report": TimelineKind.REPORT, "reports": TimelineKind.REPORT, "vitals": TimelineKind.VITALS}


def _is_all(value) -> bool:
    return value is None or (isinstance(value, str) and value.strip().lower() in {"", ALL, "all time"})


def filter_by_category(items: Iterable[TimelineItem], category: str | None) -> tuple[TimelineItem, ...]:
    if _is_all(category):
        return tuple(items)
    return tuple(item for item in items if item.category == category)


def filter_by_type(items: Iterable[TimelineItem], kind: TimelineKind | str | None) -> tuple[TimelineItem, ...]:
    if _is_all(kind):
        return tuple(items)
    target = kind if isinstance(kind, TimelineKind) else _KIND_ALIASES.get(kind.strip().lower())
    if target is None:
        raise ValueError(f"Unknown item type {kind!r}")
    return tuple(item for item in items if item.kind == target)


def parse_window(days: int | str | None) -> int | None:
    """Window length in days, or None for the all-time sentinel."""
    if _is_all(days):
        return None
    window = int(days)
    if window < 0:
        raise ValueError(f"Window must not be negative, got {window}")
    return window


def filter_by_window(
    items: Iterable[TimelineItem],
    days: int | str | None,
    now: datetime | None = None,
) -> tuple[TimelineItem, ...]:
    window = parse_window(days)
    if window is None:
        return tuple(items)
    reference = (now or datetime.now()).astimezone()
    try:
        cutoff = reference - timedelta(days=window)
    except OverflowError:
        # window reaches past the earliest representable date
        return tuple(items)
    return tuple(item for item in items if item.timestamp >= cutoff)


def search_items(items: Iterable[TimelineItem], term: str | None) -> tuple[TimelineItem, ...]:
    """Case-insensitive match on the title, plus lab and doctor name for reports."""
    if not term or not term.strip():
        return tuple(items)
    needle = term.strip().lower()

    def matches(item: TimelineItem) -> bool:
        haystack = [item.title]
        if isinstance(item.raw, RawReportRecord):
            haystack.extend([item.raw.lab_name, item.raw.doctor_name])
        return any(needle in value.lower() for value in haystack if value)

    return tuple(item for item in items if matches(item))


def sort_reports(items: Iterable[TimelineItem], sort_by: str = "date") -> tuple[TimelineItem, ...]:
    if sort_by == "date":
        return tuple(sorted(items, key=lambda item: item.timestamp, reverse=True))
    if sort_by == "name":
        return tuple(sorted(items, key=lambda item: item.title.lower()))
    if sort_by == "type":
        return tuple(sorted(items, key=lambda item: item.category))
    raise ValueError(f"Unknown sort key {sort_by!r}, expected one of {', '.join(REPORT_SORT_KEYS)}")
