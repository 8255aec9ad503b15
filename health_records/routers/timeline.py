from fastapi import APIRouter, Depends, HTTPException, Query

from health_records.routers.deps import get_records_client, parse_days, parse_order
from health_records.services.data_source import RecordsClient, load_records
from health_records.services.filters import filter_by_category, filter_by_type, filter_by_window
from health_records.services.summary import summarize
from health_records.services.timeline import build_timeline, group_by_day

router = APIRouter(prefix="/api/timeline", tags=["timeline"])


@router.get("")
def timeline(
    order: str | None = Query(default=None),
    kind: str = Query(default="all"),
    category: str = Query(default="all"),
    days: str = Query(default="all"),
    client: RecordsClient = Depends(get_records_client),
):
    direction = parse_order(order)
    window = parse_days(days)
    bundle = load_records(client)
    built = build_timeline(bundle.reports, bundle.vitals, direction)

    try:
        items = filter_by_type(built.items, kind)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    items = filter_by_category(items, category)
    items = filter_by_window(items, window)

    groups = group_by_day(items, direction)
    issues = [issue.model_dump(mode="json") for issue in bundle.issues]
    issues.extend(issue.model_dump(mode="json") for issue in built.issues)
    return {
        "statusCode": 200,
        "message": "Success",
        "data": {
            "order": direction.value,
            "total": len(items),
            "groups": [
                {
                    "date": group.day.isoformat(),
                    "count": len(group.items),
                    "items": [item.model_dump(mode="json") for item in group.items],
                }
                for group in groups
            ],
            "summary": summarize(items).model_dump(mode="json"),
            "issues": issues,
        },
    }
