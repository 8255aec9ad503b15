from fastapi import APIRouter, Depends, Query

from health_records.config import settings
from health_records.routers.deps import get_records_client, parse_days, parse_order
from health_records.services.data_source import RecordsClient, load_records
from health_records.services.filters import filter_by_window
from health_records.services.status_classifier import classify_vitals
from health_records.services.summary import summarize_vitals
from health_records.services.timeline import collect_items, sort_items

router = APIRouter(prefix="/api/vitals", tags=["vitals"])


@router.get("")
def list_vitals(
    days: str | None = Query(default=None),
    order: str | None = Query(default=None),
    client: RecordsClient = Depends(get_records_client),
):
    window = parse_days(days) if days is not None else settings.default_window_days
    direction = parse_order(order)
    bundle = load_records(client)
    items, issues = collect_items(vitals=bundle.vitals)
    visible = sort_items(filter_by_window(items, window), direction)

    entries = []
    for item in visible:
        status = classify_vitals(item.raw)
        entries.append(
            {
                **item.model_dump(mode="json"),
                "alerts": list(status.alerts),
                "bmi": status.bmi,
                "bmi_category": status.bmi_category.value if status.bmi_category else None,
            }
        )

    return {
        "statusCode": 200,
        "message": "Success",
        "data": {
            "vitals": entries,
            "overview": summarize_vitals(visible).model_dump(mode="json"),
            "issues": [issue.model_dump(mode="json") for issue in [*bundle.issues, *issues]],
        },
    }
