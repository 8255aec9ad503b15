import logging
import re
from collections.abc import Iterable, Mapping
from datetime import datetime

from pydantic import BaseModel, ValidationError
from rapidfuzz import fuzz

from health_records.config import settings
from health_records.schemas.records import RawReportRecord, RawVitalsRecord
from health_records.schemas.timeline import DataIssue, ReportType, TimelineItem, TimelineKind, VitalsStatus
from health_records.services.errors import MalformedRecord
from health_records.services.status_classifier import classify_report, classify_vitals

logger = logging.getLogger(__name__)

VITALS_TITLE = "Health Vitals"
VITALS_CATEGORY = "vitals"
VITALS_PLACEHOLDER = "Vitals recorded"
VITALS_SEPARATOR = ", "

REPORT_TYPE_LABELS = {
    ReportType.BLOOD_TEST: "Blood Test",
    ReportType.URINE_TEST: "Urine Test",
    ReportType.X_RAY: "X-Ray",
    ReportType.CT_SCAN: "CT Scan",
    ReportType.MRI: "MRI",
    ReportType.ULTRASOUND: "Ultrasound",
    ReportType.ECG: "ECG",
    ReportType.PRESCRIPTION: "Prescription",
    ReportType.DISCHARGE_SUMMARY: "Discharge Summary",
    ReportType.CONSULTATION: "Consultation",
    ReportType.OTHER: "Other",
}

_DATE_FORMATS = ("%m/%d/%Y", "%m/%d/%y")


def _normalize(text: str) -> str:
    return re.sub(r"[^a-z0-9]", "", text.lower())


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an API date into an aware datetime in the process-local zone.

    Date-only values are read as local midnight so they always land on the
    calendar day they name.
    """
    if not value or not value.strip():
        return None
    text = value.strip()
    if text[-1] in {"Z", "z"}:
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        parsed = None
        for fmt in _DATE_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue
    if parsed is None:
        return None
    try:
        return parsed.astimezone()
    except (OverflowError, ValueError, OSError):
        return None


def resolve_report_type(value: str | None, threshold: int | None = None) -> ReportType | None:
    if not value or not value.strip():
        return None
    try:
        return ReportType(value.strip().lower())
    except ValueError:
        pass

    score_threshold = threshold if threshold is not None else settings.report_type_fuzzy_threshold
    value_norm = _normalize(value)
    if not value_norm:
        return None

    best_score = -1.0
    best_type = None
    for report_type, label in REPORT_TYPE_LABELS.items():
        for alias in (report_type.value, label):
            score = fuzz.ratio(value_norm, _normalize(alias))
            if score > best_score:
                best_score = score
                best_type = report_type

    if best_score >= score_threshold:
        return best_type
    return None


def report_type_label(value: str | ReportType | None) -> str:
    report_type = value if isinstance(value, ReportType) else resolve_report_type(value)
    return REPORT_TYPE_LABELS[report_type] if report_type else "Report"


def _fmt_number(value: float | None) -> str:
    if value is None:
        return "-"
    return str(int(value)) if float(value).is_integer() else str(value)


def describe_vitals(record: RawVitalsRecord) -> str:
    fragments = []
    bp = record.blood_pressure
    if bp is not None and (bp.systolic is not None or bp.diastolic is not None):
        fragments.append(f"BP: {_fmt_number(bp.systolic)}/{_fmt_number(bp.diastolic)}")
    if record.heart_rate is not None and record.heart_rate.value is not None:
        fragments.append(f"HR: {_fmt_number(record.heart_rate.value)}")
    if record.blood_sugar is not None:
        readings = (
            ("Sugar", record.blood_sugar.fasting),
            ("Random Sugar", record.blood_sugar.random),
            ("PP Sugar", record.blood_sugar.post_prandial),
        )
        sugar = next(((label, reading) for label, reading in readings if reading is not None), None)
        if sugar is not None:
            fragments.append(f"{sugar[0]}: {_fmt_number(sugar[1])}")
    if record.weight is not None and record.weight.value is not None:
        fragments.append(f"Weight: {_fmt_number(record.weight.value)}{record.weight.unit or 'kg'}")
    if record.temperature is not None and record.temperature.value is not None:
        fragments.append(f"Temp: {_fmt_number(record.temperature.value)}{record.temperature.unit or '°F'}")
    return VITALS_SEPARATOR.join(fragments) if fragments else VITALS_PLACEHOLDER


def normalize_report(record: RawReportRecord) -> TimelineItem:
    timestamp = parse_timestamp(record.test_date)
    if timestamp is None:
        raise MalformedRecord(
            TimelineKind.REPORT, f"Unparseable test date {record.test_date!r}", record.id, "test_date"
        )
    report_type = resolve_report_type(record.report_type)
    if report_type is None:
        raise MalformedRecord(
            TimelineKind.REPORT, f"Unknown report type {record.report_type!r}", record.id, "report_type"
        )

    description = f"{REPORT_TYPE_LABELS[report_type]} report"
    if record.lab_name:
        description += f" from {record.lab_name}"

    return TimelineItem(
        id=record.id,
        kind=TimelineKind.REPORT,
        timestamp=timestamp,
        title=record.original_name,
        description=description,
        category=report_type.value,
        status=classify_report(record),
        raw=record,
    )


def normalize_vitals(record: RawVitalsRecord, status: VitalsStatus | None = None) -> TimelineItem:
    timestamp = parse_timestamp(record.date)
    if timestamp is None:
        raise MalformedRecord(TimelineKind.VITALS, f"Unparseable date {record.date!r}", record.id, "date")
    vitals_status = status or classify_vitals(record)
    return TimelineItem(
        id=record.id,
        kind=TimelineKind.VITALS,
        timestamp=timestamp,
        title=VITALS_TITLE,
        description=describe_vitals(record),
        category=VITALS_CATEGORY,
        status=vitals_status.status,
        raw=record,
    )


def _payload_id(payload) -> str | None:
    if isinstance(payload, Mapping):
        value = payload.get("_id", payload.get("id"))
        return str(value) if value is not None else None
    return None


def _parse_records(payloads: Iterable, model: type[BaseModel], source: TimelineKind):
    records = []
    issues: list[DataIssue] = []
    for payload in payloads or []:
        if isinstance(payload, model):
            records.append(payload)
            continue
        try:
            records.append(model.model_validate(payload))
        except ValidationError as exc:
            record_id = _payload_id(payload)
            logger.warning("Skipping malformed %s record %s: %s", source.value, record_id, exc.error_count())
            fields = sorted({".".join(str(part) for part in error["loc"]) for error in exc.errors()})
            issues.append(
                MalformedRecord(source, f"Invalid fields: {', '.join(fields) or 'payload'}", record_id).to_issue()
            )
    return records, issues


def parse_report_records(payloads: Iterable) -> tuple[list[RawReportRecord], list[DataIssue]]:
    return _parse_records(payloads, RawReportRecord, TimelineKind.REPORT)


def parse_vitals_records(payloads: Iterable) -> tuple[list[RawVitalsRecord], list[DataIssue]]:
    return _parse_records(payloads, RawVitalsRecord, TimelineKind.VITALS)
