from health_records.schemas.records import KeyFinding, Measurement, RawReportRecord, RawVitalsRecord
from health_records.schemas.timeline import BmiCategory, DataIssue, FindingSeverity, ItemStatus, TimelineKind, VitalsStatus
from health_records.services.errors import InvalidRange

HIGH_BP = "High BP"
LOW_BP = "Low BP"
HIGH_SUGAR = "High Sugar"
ABNORMAL_HR = "Abnormal HR"

SYSTOLIC_HIGH = 140
DIASTOLIC_HIGH = 90
SYSTOLIC_LOW = 90
DIASTOLIC_LOW = 60
FASTING_SUGAR_HIGH = 126
HEART_RATE_HIGH = 100
HEART_RATE_LOW = 60

ATTENTION_SEVERITIES = {FindingSeverity.ABNORMAL, FindingSeverity.CRITICAL}

_WEIGHT_TO_KG = {"kg": 1.0, "kgs": 1.0, "lb": 0.45359237, "lbs": 0.45359237}
_HEIGHT_TO_M = {"cm": 0.01, "m": 1.0, "in": 0.0254, "ft": 0.3048}


def check_range(
    value: float,
    field: str,
    source: TimelineKind,
    record_id: str | None = None,
    low: float | None = None,
    high: float | None = None,
) -> tuple[float, DataIssue | None]:
    clamped = value
    if low is not None and clamped < low:
        clamped = low
    if high is not None and clamped > high:
        clamped = high
    if clamped != value:
        return clamped, InvalidRange(source, field, value, record_id).to_issue()
    return value, None


def clamp_confidence(value: float | None, record_id: str | None = None) -> tuple[float | None, DataIssue | None]:
    if value is None:
        return None, None
    return check_range(value, "confidence", TimelineKind.REPORT, record_id, low=0.0, high=100.0)


def _blood_pressure_alerts(record: RawVitalsRecord) -> list[str]:
    bp = record.blood_pressure
    if bp is None:
        return []
    systolic, diastolic = bp.systolic, bp.diastolic
    alerts = []
    if (systolic is not None and systolic > SYSTOLIC_HIGH) or (diastolic is not None and diastolic > DIASTOLIC_HIGH):
        alerts.append(HIGH_BP)
    if (systolic is not None and systolic < SYSTOLIC_LOW) or (diastolic is not None and diastolic < DIASTOLIC_LOW):
        alerts.append(LOW_BP)
    return alerts


def _derived_alerts(record: RawVitalsRecord) -> list[str]:
    alerts = _blood_pressure_alerts(record)
    if record.blood_sugar is not None and record.blood_sugar.fasting is not None:
        if record.blood_sugar.fasting > FASTING_SUGAR_HIGH:
            alerts.append(HIGH_SUGAR)
    if record.heart_rate is not None and record.heart_rate.value is not None:
        if record.heart_rate.value > HEART_RATE_HIGH or record.heart_rate.value < HEART_RATE_LOW:
            alerts.append(ABNORMAL_HR)
    return alerts


def compute_bmi(weight: Measurement | None, height: Measurement | None) -> float | None:
    """BMI as weight(kg) / height(m)^2, or None when either reading is missing or unusable."""
    if weight is None or height is None or weight.value is None or height.value is None:
        return None
    weight_factor = _WEIGHT_TO_KG.get((weight.unit or "kg").strip().lower())
    height_factor = _HEIGHT_TO_M.get((height.unit or "cm").strip().lower())
    if weight_factor is None or height_factor is None:
        return None
    height_m = height.value * height_factor
    if height_m <= 0:
        return None
    return round((weight.value * weight_factor) / (height_m ** 2), 1)


def bmi_category(bmi: float | None) -> BmiCategory | None:
    if bmi is None or bmi <= 0:
        return None
    if bmi < 18.5:
        return BmiCategory.UNDERWEIGHT
    if bmi < 25:
        return BmiCategory.NORMAL
    if bmi < 30:
        return BmiCategory.OVERWEIGHT
    return BmiCategory.OBESE


def classify_vitals(record: RawVitalsRecord) -> VitalsStatus:
    """Derive alerts, status and BMI category from whichever readings are present."""
    alerts = _derived_alerts(record)
    for alert in record.alerts:
        if alert and alert not in alerts:
            alerts.append(alert)

    issues: list[DataIssue] = []
    bmi = record.bmi if record.bmi is not None else compute_bmi(record.weight, record.height)
    if bmi is not None:
        bmi, issue = check_range(bmi, "bmi", TimelineKind.VITALS, record.id, low=0.0)
        if issue:
            issues.append(issue)

    oxygen = None
    if record.oxygen_saturation is not None and record.oxygen_saturation.value is not None:
        oxygen, issue = check_range(
            record.oxygen_saturation.value, "oxygen_saturation", TimelineKind.VITALS, record.id, low=0.0, high=100.0
        )
        if issue:
            issues.append(issue)

    return VitalsStatus(
        status=ItemStatus.ATTENTION if alerts else ItemStatus.NORMAL,
        alerts=tuple(alerts),
        bmi=bmi,
        bmi_category=bmi_category(bmi),
        oxygen_saturation=oxygen,
        issues=tuple(issues),
    )


def classify_finding(finding: KeyFinding | str | None) -> FindingSeverity | None:
    label = finding.status if isinstance(finding, KeyFinding) else finding
    if not label:
        return None
    try:
        return FindingSeverity(label.strip().lower())
    except ValueError:
        return None


def _severities(record: RawReportRecord) -> list[FindingSeverity | None]:
    if record.ai_insights is None:
        return []
    return [classify_finding(finding) for finding in record.ai_insights.key_findings]


def report_needs_attention(record: RawReportRecord) -> bool:
    return any(severity in ATTENTION_SEVERITIES for severity in _severities(record))


def report_has_critical(record: RawReportRecord) -> bool:
    return any(severity == FindingSeverity.CRITICAL for severity in _severities(record))


def report_is_normal(record: RawReportRecord) -> bool:
    # No findings at all is indeterminate, not normal.
    severities = _severities(record)
    return bool(severities) and all(severity == FindingSeverity.NORMAL for severity in severities)


def report_follow_up(record: RawReportRecord) -> bool:
    return record.ai_insights is not None and record.ai_insights.follow_up_required


def classify_report(record: RawReportRecord) -> ItemStatus:
    return ItemStatus.ATTENTION if report_needs_attention(record) else ItemStatus.NORMAL
