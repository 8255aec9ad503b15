from health_records.schemas.insight import InsightView, Language, ResolvedFinding, ResolvedRiskFactor
from health_records.schemas.records import BilingualList, BilingualText, RawReportRecord
from health_records.services.normalizer import resolve_report_type
from health_records.services.status_classifier import classify_finding, clamp_confidence

NO_SUMMARY = "No summary available"


def _language(language: Language | str | None) -> Language:
    if language is None:
        return Language.ENGLISH
    return Language(language)


def _present(text: str | None) -> bool:
    return bool(text and text.strip())


def resolve(field: BilingualText | None, language: Language | str | None, placeholder: str | None = NO_SUMMARY) -> str | None:
    """Pick the requested language variant, falling back to English, then to the placeholder."""
    if field is None:
        return placeholder
    if _language(language) == Language.URDU and _present(field.urdu):
        return field.urdu
    if _present(field.english):
        return field.english
    return placeholder


def resolve_list(field: BilingualList | None, language: Language | str | None) -> list[str]:
    if field is None:
        return []
    if _language(language) == Language.URDU and field.urdu:
        return list(field.urdu)
    return list(field.english)


def resolve_insight(record: RawReportRecord, language: Language | str | None) -> InsightView:
    lang = _language(language)
    insight = record.ai_insights
    report_type = resolve_report_type(record.report_type)
    base = {
        "report_id": record.id,
        "report_name": record.original_name,
        "report_type": report_type.value if report_type else record.report_type,
        "test_date": record.test_date,
        "language": lang,
    }
    if insight is None:
        return InsightView(summary=NO_SUMMARY, **base)

    confidence, issue = clamp_confidence(insight.confidence, record.id)
    return InsightView(
        summary=resolve(insight.summary, lang),
        key_findings=tuple(
            ResolvedFinding(
                parameter=finding.parameter,
                value=finding.value,
                status=finding.status,
                severity=classify_finding(finding),
                significance=resolve(finding.significance, lang, placeholder=None),
            )
            for finding in insight.key_findings
        ),
        recommendations=tuple(resolve_list(insight.recommendations, lang)),
        doctor_questions=tuple(resolve_list(insight.doctor_questions, lang)),
        risk_factors=tuple(
            ResolvedRiskFactor(
                factor=risk.factor,
                level=risk.level,
                description=resolve(risk.description, lang, placeholder=None),
            )
            for risk in insight.risk_factors
        ),
        follow_up_required=insight.follow_up_required,
        follow_up_timeframe=insight.follow_up_timeframe,
        confidence=confidence,
        issues=(issue,) if issue else (),
        **base,
    )
