from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from health_records.main import app
from health_records.routers.deps import get_records_client


def make_report(report_id="r1", test_date="2024-01-05", report_type="blood-test", findings=None, **extra):
    payload = {
        "_id": report_id,
        "originalName": f"{report_id}.pdf",
        "reportType": report_type,
        "testDate": test_date,
        "isProcessed": findings is not None,
    }
    if findings is not None:
        payload["aiInsights"] = {
            "summary": {"english": "Summary", "urdu": ""},
            "keyFindings": [{"parameter": "Hb", "value": "10", "status": status} for status in findings],
        }
    payload.update(extra)
    return payload


def make_vitals(vitals_id="v1", date="2024-01-05", **readings):
    return {"_id": vitals_id, "date": date, **readings}


class FakeRecordsClient:
    def __init__(self, reports=None, vitals=None, fail_vitals=False):
        self.reports = reports or []
        self.vitals = vitals or []
        self.fail_vitals = fail_vitals

    def fetch_reports(self):
        return self.reports

    def fetch_vitals(self):
        if self.fail_vitals:
            raise ValueError("vitals service unavailable")
        return self.vitals


@pytest.fixture()
def records() -> FakeRecordsClient:
    return FakeRecordsClient(
        reports=[
            make_report("r1", "2024-01-05", findings=["critical", "normal"], labName="City Lab"),
            make_report("r2", "2024-01-03", "x-ray", findings=["normal"]),
            make_report("r3", "2024-01-02", "prescription"),
        ],
        vitals=[
            make_vitals("v1", "2024-01-05", bloodPressure={"systolic": 150, "diastolic": 95}),
            make_vitals("v2", "2024-01-04", heartRate={"value": 72}, weight={"value": 70, "unit": "kg"}, height={"value": 175, "unit": "cm"}),
        ],
    )


@pytest.fixture()
def client(records) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_records_client] = lambda: records
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
