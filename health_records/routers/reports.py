from fastapi import APIRouter, Depends, HTTPException, Query

from health_records.routers.deps import get_records_client, parse_language
from health_records.schemas.timeline import TimelineItem
from health_records.services.bilingual import resolve
from health_records.services.data_source import RecordsClient, load_records
from health_records.services.filters import filter_by_category, search_items, sort_reports
from health_records.services.normalizer import report_type_label
from health_records.services.summary import summarize
from health_records.services.timeline import collect_items

router = APIRouter(prefix="/api/reports", tags=["reports"])


def _report_row(item: TimelineItem, language) -> dict:
    report = item.raw
    insight = report.ai_insights
    return {
        "id": item.id,
        "original_name": report.original_name,
        "report_type": item.category,
        "report_type_label": report_type_label(item.category),
        "test_date": item.timestamp.isoformat(),
        "lab_name": report.lab_name,
        "doctor_name": report.doctor_name,
        "is_processed": report.is_processed,
        "status": item.status.value,
        "summary": resolve(insight.summary, language) if insight else None,
    }


@router.get("")
def list_reports(
    search: str | None = Query(default=None),
    category: str = Query(default="all"),
    sort_by: str = Query(default="date"),
    language: str | None = Query(default=None),
    client: RecordsClient = Depends(get_records_client),
):
    lang = parse_language(language)
    bundle = load_records(client)
    items, issues = collect_items(reports=bundle.reports)

    stats = summarize(items)
    visible = filter_by_category(search_items(items, search), category)
    try:
        visible = sort_reports(visible, sort_by)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    return {
        "statusCode": 200,
        "message": "Success",
        "data": {
            "reports": [_report_row(item, lang) for item in visible],
            "total": stats.report_count,
            "processed": stats.processed_count,
            "report_types": stats.report_type_count,
            "issues": [issue.model_dump(mode="json") for issue in [*bundle.issues, *issues]],
        },
    }
