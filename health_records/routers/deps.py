from fastapi import Header, HTTPException

from health_records.config import settings
from health_records.schemas.insight import Language
from health_records.schemas.timeline import SortOrder
from health_records.services.data_source import RecordsClient, SessionContext
from health_records.services.filters import parse_window


def get_records_client(authorization: str | None = Header(default=None)) -> RecordsClient:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing or invalid Authorization header")
    token = authorization.replace("Bearer ", "", 1)
    return RecordsClient(SessionContext(token=token, base_url=settings.records_api_base_url))


def parse_order(value: str | None) -> SortOrder:
    try:
        return SortOrder(value or settings.default_sort_order)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid sort order: {value}")


def parse_language(value: str | None) -> Language:
    try:
        return Language(value or settings.default_language)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unsupported language: {value}")


def parse_days(value: str | None) -> int | None:
    try:
        return parse_window(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid time window: {value}")
