from fastapi import APIRouter, Depends, Query

from health_records.routers.deps import get_records_client, parse_language
from health_records.services.bilingual import resolve_insight
from health_records.services.data_source import RecordsClient, load_records
from health_records.services.filters import filter_by_category, sort_reports
from health_records.services.summary import summarize
from health_records.services.timeline import collect_items

router = APIRouter(prefix="/api/insights", tags=["insights"])


@router.get("")
def list_insights(
    category: str = Query(default="all"),
    language: str | None = Query(default=None),
    client: RecordsClient = Depends(get_records_client),
):
    lang = parse_language(language)
    bundle = load_records(client)
    items, issues = collect_items(reports=bundle.reports)
    with_insights = [item for item in items if item.raw.ai_insights is not None]
    visible = sort_reports(filter_by_category(with_insights, category), "date")
    stats = summarize(visible)

    return {
        "statusCode": 200,
        "message": "Success",
        "data": {
            "insights": [resolve_insight(item.raw, lang).model_dump(mode="json") for item in visible],
            "attention_count": stats.attention_count,
            "follow_up_count": stats.follow_up_count,
            "normal_count": stats.normal_count,
            "average_confidence": stats.average_confidence,
            "issues": [issue.model_dump(mode="json") for issue in [*bundle.issues, *issues]],
        },
    }
