import requests

from health_records.schemas.timeline import IssueKind, TimelineKind
from health_records.services.data_source import RecordsClient, SessionContext, load_records
from conftest import FakeRecordsClient, make_report, make_vitals


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.payload


def test_client_unwraps_envelopes_and_sends_token(monkeypatch):
    calls = []

    def fake_get(url, headers=None, timeout=None):
        calls.append((url, headers, timeout))
        if url.endswith("/files"):
            return FakeResponse({"success": True, "data": [make_report("r1")]})
        return FakeResponse({"success": True, "data": {"vitals": [make_vitals("v1")]}})

    monkeypatch.setattr("health_records.services.data_source.requests.get", fake_get)
    client = RecordsClient(SessionContext(token="abc", base_url="http://records.test/api/"), timeout=5)

    assert client.fetch_reports()[0]["_id"] == "r1"
    assert client.fetch_vitals()[0]["_id"] == "v1"
    assert calls[0] == ("http://records.test/api/files", {"Authorization": "Bearer abc"}, 5)


def test_load_records_joins_both_fetches():
    bundle = load_records(FakeRecordsClient(reports=[make_report("r1")], vitals=[make_vitals("v1")]))
    assert len(bundle.reports) == 1
    assert len(bundle.vitals) == 1
    assert bundle.issues == []


def test_failed_fetch_yields_empty_collection_and_issue():
    bundle = load_records(FakeRecordsClient(reports=[make_report("r1")], fail_vitals=True))
    assert len(bundle.reports) == 1
    assert bundle.vitals == []
    assert bundle.issues[0].kind == IssueKind.FETCH_FAILED
    assert bundle.issues[0].source == TimelineKind.VITALS


def test_http_error_is_reported(monkeypatch):
    monkeypatch.setattr(
        "health_records.services.data_source.requests.get",
        lambda url, headers=None, timeout=None: FakeResponse({}, status_code=503),
    )
    bundle = load_records(RecordsClient(SessionContext(token="abc", base_url="http://records.test")))
    assert bundle.reports == []
    assert bundle.vitals == []
    assert {issue.source for issue in bundle.issues} == {TimelineKind.REPORT, TimelineKind.VITALS}
