from datetime import datetime

import pytest

from health_records.schemas.timeline import TimelineKind
from health_records.services.filters import (
    filter_by_category,
    filter_by_type,
    filter_by_window,
    search_items,
    sort_reports,
)
from health_records.services.timeline import collect_items
from conftest import make_report, make_vitals


@pytest.fixture()
def items():
    collected, _ = collect_items(
        [
            make_report("r1", "2024-03-01", "blood-test", labName="City Lab"),
            make_report("r2", "2024-02-20", "x-ray", doctorName="Dr. Khan"),
            make_report("r3", "2024-01-01", "blood-test"),
        ],
        [make_vitals("v1", "2024-02-25"), make_vitals("v2", "2023-12-01")],
    )
    return tuple(collected)


def _ids(items):
    return [item.id for item in items]


def test_filter_by_category(items):
    assert filter_by_category(items, "all") == items
    assert filter_by_category(items, None) == items
    assert _ids(filter_by_category(items, "blood-test")) == ["r1", "r3"]
    assert _ids(filter_by_category(items, "vitals")) == ["v1", "v2"]
    assert filter_by_category(items, "mri") == ()


def test_filter_by_type(items):
    assert filter_by_type(items, "all") == items
    assert _ids(filter_by_type(items, TimelineKind.REPORT)) == ["r1", "r2", "r3"]
    assert _ids(filter_by_type(items, "reports")) == ["r1", "r2", "r3"]
    assert _ids(filter_by_type(items, "vitals")) == ["v1", "v2"]
    with pytest.raises(ValueError):
        filter_by_type(items, "images")


def test_filter_by_window_is_inclusive(items):
    now = datetime(2024, 3, 1)
    assert _ids(filter_by_window(items, 10, now=now)) == ["r1", "r2", "v1"]
    assert _ids(filter_by_window(items, "0", now=now)) == ["r1"]
    assert filter_by_window(items, "all", now=now) == items
    assert filter_by_window(items, None, now=now) == items
    assert filter_by_window(items, 10**9, now=now) == items


def test_filters_compose_by_intersection(items):
    now = datetime(2024, 3, 1)
    chained = filter_by_window(filter_by_category(filter_by_type(items, "report"), "blood-test"), 30, now=now)
    assert _ids(chained) == ["r1"]
    assert len(items) == 5


def test_search_matches_title_lab_and_doctor(items):
    assert _ids(search_items(items, "city")) == ["r1"]
    assert _ids(search_items(items, "KHAN")) == ["r2"]
    assert _ids(search_items(items, "r3.PDF")) == ["r3"]
    assert search_items(items, "  ") == items


def test_sort_reports(items):
    reports = filter_by_type(items, "report")
    assert _ids(sort_reports(reports, "date")) == ["r1", "r2", "r3"]
    assert _ids(sort_reports(reports, "type")) == ["r1", "r3", "r2"]
    assert _ids(sort_reports(reversed(reports), "name")) == ["r1", "r2", "r3"]
    with pytest.raises(ValueError):
        sort_reports(reports, "size")
