from fastapi import APIRouter, Depends, Query

from health_records.config import settings
from health_records.routers.deps import get_records_client, parse_language
from health_records.schemas.timeline import SortOrder, TimelineKind
from health_records.services.bilingual import resolve_insight
from health_records.services.data_source import RecordsClient, load_records
from health_records.services.filters import filter_by_type
from health_records.services.status_classifier import classify_vitals, report_follow_up
from health_records.services.summary import summarize
from health_records.services.timeline import collect_items, sort_items

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("")
def dashboard(
    language: str | None = Query(default=None),
    client: RecordsClient = Depends(get_records_client),
):
    lang = parse_language(language)
    bundle = load_records(client)
    items, issues = collect_items(bundle.reports, bundle.vitals)
    stats = summarize(items)

    ordered = sort_items(items, SortOrder.NEWEST)
    reports = filter_by_type(ordered, TimelineKind.REPORT)
    vitals = filter_by_type(ordered, TimelineKind.VITALS)
    limit = settings.recent_items_limit

    return {
        "statusCode": 200,
        "message": "Success",
        "data": {
            "statistics": {
                "total_files": stats.report_count,
                "total_vitals": stats.vitals_count,
                "processed_files": stats.processed_count,
                "critical_insights": stats.critical_count,
                "attention_count": stats.attention_count,
                "processing_rate": stats.processing_rate,
            },
            "recent_files": [item.model_dump(mode="json") for item in reports[:limit]],
            "recent_vitals": [
                {**item.model_dump(mode="json"), "alerts": list(classify_vitals(item.raw).alerts)}
                for item in vitals[:limit]
            ],
            "follow_up_insights": [
                resolve_insight(item.raw, lang).model_dump(mode="json")
                for item in reports
                if report_follow_up(item.raw)
            ],
            "issues": [issue.model_dump(mode="json") for issue in [*bundle.issues, *issues]],
        },
    }
