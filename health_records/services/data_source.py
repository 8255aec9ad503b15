import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field

import requests

from health_records.config import settings
from health_records.schemas.timeline import DataIssue, IssueKind, TimelineKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionContext:
    token: str
    base_url: str = field(default_factory=lambda: settings.records_api_base_url)


def _unwrap(payload, key: str) -> list:
    data = payload.get("data", payload) if isinstance(payload, dict) else payload
    if isinstance(data, dict):
        data = data.get(key, [])
    if not isinstance(data, list):
        raise ValueError(f"Unexpected {key} response structure")
    return data


class RecordsClient:
    """Reads reports and vitals from the records API for one authenticated session."""

    def __init__(self, session: SessionContext, timeout: int | None = None):
        self.session = session
        self.timeout = timeout or settings.records_api_timeout_seconds

    @property
    def headers(self):
        return {"Authorization": f"Bearer {self.session.token}"}

    def _get(self, path: str):
        res = requests.get(f"{self.session.base_url.rstrip('/')}{path}", headers=self.headers, timeout=self.timeout)
        res.raise_for_status()
        return res.json()

    def fetch_reports(self) -> list:
        return _unwrap(self._get("/files"), "files")

    def fetch_vitals(self) -> list:
        return _unwrap(self._get("/vitals"), "vitals")


@dataclass
class RecordBundle:
    reports: list = field(default_factory=list)
    vitals: list = field(default_factory=list)
    issues: list[DataIssue] = field(default_factory=list)


def _join(future: Future, source: TimelineKind) -> tuple[list, DataIssue | None]:
    try:
        return list(future.result()), None
    except (requests.RequestException, ValueError) as exc:
        logger.warning("Failed to fetch %s records: %s", source.value, exc)
        return [], DataIssue(kind=IssueKind.FETCH_FAILED, source=source, message=str(exc) or "Fetch failed")


def load_records(client) -> RecordBundle:
    """Run both fetches concurrently and wait for both; a failed fetch yields an empty list."""
    with ThreadPoolExecutor(max_workers=2) as executor:
        reports_future = executor.submit(client.fetch_reports)
        vitals_future = executor.submit(client.fetch_vitals)
        reports, reports_issue = _join(reports_future, TimelineKind.REPORT)
        vitals, vitals_issue = _join(vitals_future, TimelineKind.VITALS)

    return RecordBundle(
        reports=reports,
        vitals=vitals,
        issues=[issue for issue in (reports_issue, vitals_issue) if issue],
    )
