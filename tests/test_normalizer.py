from datetime import date

import pytest

from health_records.schemas.records import RawReportRecord, RawVitalsRecord
from health_records.schemas.timeline import IssueKind, ItemStatus, ReportType, TimelineKind
from health_records.services.errors import MalformedRecord
from health_records.services.normalizer import (
    normalize_report,
    normalize_vitals,
    parse_report_records,
    parse_timestamp,
    parse_vitals_records,
    report_type_label,
    resolve_report_type,
)
from conftest import make_report, make_vitals


def test_normalize_report_builds_title_description_and_category():
    record = RawReportRecord.model_validate(make_report("r1", labName="City Lab", findings=["abnormal"]))
    item = normalize_report(record)

    assert item.kind == TimelineKind.REPORT
    assert item.title == "r1.pdf"
    assert item.description == "Blood Test report from City Lab"
    assert item.category == "blood-test"
    assert item.status == ItemStatus.ATTENTION
    assert item.day == date(2024, 1, 5)
    assert item.raw is record


def test_normalize_report_without_lab_name():
    item = normalize_report(RawReportRecord.model_validate(make_report("r2", report_type="ct-scan")))
    assert item.description == "CT Scan report"
    assert item.status == ItemStatus.NORMAL


def test_report_type_is_matched_loosely():
    assert resolve_report_type("Blood Test") == ReportType.BLOOD_TEST
    assert resolve_report_type("X Ray") == ReportType.X_RAY
    assert resolve_report_type("discharge summary") == ReportType.DISCHARGE_SUMMARY
    assert resolve_report_type("astrology") is None
    assert resolve_report_type(None) is None
    assert report_type_label("mri") == "MRI"
    assert report_type_label("unknown-thing") == "Report"


def test_normalize_report_rejects_bad_date_and_type():
    with pytest.raises(MalformedRecord) as exc_info:
        normalize_report(RawReportRecord.model_validate(make_report("r3", test_date="not a date")))
    assert exc_info.value.field == "test_date"
    assert exc_info.value.to_issue().kind == IssueKind.MALFORMED_RECORD

    with pytest.raises(MalformedRecord) as exc_info:
        normalize_report(RawReportRecord.model_validate(make_report("r4", report_type="")))
    assert exc_info.value.field == "report_type"


def test_normalize_vitals_description_order_and_units():
    record = RawVitalsRecord.model_validate(
        make_vitals(
            temperature={"value": 98.6, "unit": "°F"},
            weight={"value": 70.0, "unit": "kg"},
            bloodSugar={"fasting": 95},
            heartRate={"value": 72, "unit": "bpm"},
            bloodPressure={"systolic": 120, "diastolic": 80},
        )
    )
    item = normalize_vitals(record)

    assert item.title == "Health Vitals"
    assert item.category == "vitals"
    assert item.description == "BP: 120/80, HR: 72, Sugar: 95, Weight: 70kg, Temp: 98.6°F"
    assert item.status == ItemStatus.NORMAL


def test_normalize_vitals_placeholder_and_zero_reading():
    assert normalize_vitals(RawVitalsRecord.model_validate(make_vitals(notes="felt fine"))).description == "Vitals recorded"

    zero = normalize_vitals(RawVitalsRecord.model_validate(make_vitals(heartRate={"value": 0})))
    assert zero.description == "HR: 0"
    assert zero.status == ItemStatus.ATTENTION


def test_normalize_vitals_sugar_falls_back_to_other_readings():
    record = RawVitalsRecord.model_validate(make_vitals(bloodSugar={"postPrandial": 140}, weight={"value": 150, "unit": "lbs"}))
    assert normalize_vitals(record).description == "PP Sugar: 140, Weight: 150lbs"

    random_only = RawVitalsRecord.model_validate(make_vitals(bloodSugar={"random": 180, "postPrandial": 140}))
    assert normalize_vitals(random_only).description == "Random Sugar: 180"


def test_normalize_vitals_rejects_missing_date():
    with pytest.raises(MalformedRecord):
        normalize_vitals(RawVitalsRecord.model_validate(make_vitals(date=None)))


def test_parse_timestamp_formats_share_local_day():
    assert parse_timestamp("2024-01-05").date() == date(2024, 1, 5)
    assert parse_timestamp("01/05/2024").date() == date(2024, 1, 5)
    assert parse_timestamp("01/05/24").date() == date(2024, 1, 5)
    assert parse_timestamp("2024-01-05T10:30:00").hour == 10
    assert parse_timestamp("2024-01-05T10:30:00.000Z").tzinfo is not None
    assert parse_timestamp("2024-01-05").tzinfo is not None
    assert parse_timestamp("") is None
    assert parse_timestamp("yesterday") is None
    assert parse_timestamp("9999-12-31T23:59:59-14:00") is None
    assert parse_timestamp("0001-01-01T00:00:00+14:00") is None


def test_parse_records_reports_invalid_payloads():
    records, issues = parse_report_records([make_report("r1"), {"_id": "broken", "testDate": "2024-01-01"}, "junk"])
    assert [record.id for record in records] == ["r1"]
    assert len(issues) == 2
    assert issues[0].record_id == "broken"
    assert issues[0].source == TimelineKind.REPORT

    vitals, vitals_issues = parse_vitals_records([make_vitals("v1", heartRate={"value": "fast"})])
    assert vitals == []
    assert vitals_issues[0].kind == IssueKind.MALFORMED_RECORD
