import math
from collections.abc import Iterable

from health_records.schemas.summary import Summary, VitalsOverview
from health_records.schemas.timeline import DataIssue, ItemStatus, TimelineItem, TimelineKind
from health_records.services.status_classifier import (
    clamp_confidence,
    classify_vitals,
    report_follow_up,
    report_has_critical,
    report_is_normal,
    report_needs_attention,
)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def processing_rate(processed: int, total_reports: int) -> int:
    if total_reports == 0:
        return 0
    return _round_half_up(processed / total_reports * 100)


def summarize(items: Iterable[TimelineItem]) -> Summary:
    """Single-pass roll-up used by the dashboard, timeline, reports and insights panels."""
    total = report_count = vitals_count = 0
    attention = critical = follow_up = normal = processed = 0
    by_category: dict[str, int] = {}
    report_types: set[str] = set()
    confidences: list[float] = []
    issues: list[DataIssue] = []

    for item in items:
        total += 1
        by_category[item.category] = by_category.get(item.category, 0) + 1

        if item.kind == TimelineKind.VITALS:
            vitals_count += 1
            if item.status == ItemStatus.ATTENTION:
                attention += 1
            else:
                normal += 1
            continue

        report = item.raw
        report_count += 1
        report_types.add(item.category)
        if report.is_processed:
            processed += 1
        if report_needs_attention(report):
            attention += 1
        elif report_is_normal(report):
            normal += 1
        if report_has_critical(report):
            critical += 1
        if report_follow_up(report):
            follow_up += 1
        if report.ai_insights is not None:
            confidence, issue = clamp_confidence(report.ai_insights.confidence, report.id)
            if confidence is not None:
                confidences.append(confidence)
            if issue:
                issues.append(issue)

    return Summary(
        total=total,
        report_count=report_count,
        vitals_count=vitals_count,
        by_category_count=by_category,
        attention_count=attention,
        critical_count=critical,
        follow_up_count=follow_up,
        normal_count=normal,
        processed_count=processed,
        processing_rate=processing_rate(processed, report_count),
        report_type_count=len(report_types),
        average_confidence=round(sum(confidences) / len(confidences), 1) if confidences else None,
        issues=tuple(issues),
    )


def summarize_vitals(items: Iterable[TimelineItem]) -> VitalsOverview:
    total = alerts = blood_pressure = weight = 0
    latest = None
    for item in items:
        if item.kind != TimelineKind.VITALS:
            continue
        record = item.raw
        total += 1
        if item.status == ItemStatus.ATTENTION:
            alerts += 1
        if record.blood_pressure is not None:
            blood_pressure += 1
        if record.weight is not None and record.weight.value is not None:
            weight += 1
        status = classify_vitals(record)
        if status.bmi is not None and (latest is None or item.timestamp >= latest[0]):
            latest = (item.timestamp, status)

    return VitalsOverview(
        total=total,
        alert_count=alerts,
        blood_pressure_count=blood_pressure,
        weight_count=weight,
        latest_bmi=latest[1].bmi if latest else None,
        latest_bmi_category=latest[1].bmi_category if latest else None,
    )
