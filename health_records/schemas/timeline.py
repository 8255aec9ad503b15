from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, computed_field

from health_records.schemas.records import RawReportRecord, RawVitalsRecord


class ReportType(str, Enum):
    BLOOD_TEST = "blood-test"
    URINE_TEST = "urine-test"
    X_RAY = "x-ray"
    CT_SCAN = "ct-scan"
    MRI = "mri"
    ULTRASOUND = "ultrasound"
    ECG = "ecg"
    PRESCRIPTION = "prescription"
    DISCHARGE_SUMMARY = "discharge-summary"
    CONSULTATION = "consultation"
    OTHER = "other"


class TimelineKind(str, Enum):
    REPORT = "report"
    VITALS = "vitals"


class ItemStatus(str, Enum):
    NORMAL = "normal"
    ATTENTION = "attention"


class SortOrder(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"


class FindingSeverity(str, Enum):
    NORMAL = "normal"
    ABNORMAL = "abnormal"
    CRITICAL = "critical"
    LOW = "low"
    HIGH = "high"


class BmiCategory(str, Enum):
    UNDERWEIGHT = "underweight"
    NORMAL = "normal"
    OVERWEIGHT = "overweight"
    OBESE = "obese"


class IssueKind(str, Enum):
    MALFORMED_RECORD = "malformed_record"
    INVALID_RANGE = "invalid_range"
    FETCH_FAILED = "fetch_failed"


class DataIssue(BaseModel):
    """Non-fatal diagnostic about upstream data the engine skipped or corrected."""
    model_config = ConfigDict(frozen=True)

    kind: IssueKind
    source: TimelineKind
    message: str
    record_id: str | None = None
    field: str | None = None


class TimelineItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    kind: TimelineKind
    timestamp: datetime
    title: str
    description: str
    category: str
    status: ItemStatus
    raw: RawReportRecord | RawVitalsRecord

    @computed_field
    @property
    def day(self) -> date:
        return self.timestamp.date()


class TimelineGroup(BaseModel):
    model_config = ConfigDict(frozen=True)

    day: date
    items: tuple[TimelineItem, ...]


class GroupedTimeline(BaseModel):
    model_config = ConfigDict(frozen=True)

    order: SortOrder
    groups: tuple[TimelineGroup, ...] = ()
    issues: tuple[DataIssue, ...] = ()

    @computed_field
    @property
    def total(self) -> int:
        return sum(len(group.items) for group in self.groups)

    @property
    def items(self) -> tuple[TimelineItem, ...]:
        return tuple(item for group in self.groups for item in group.items)


class VitalsStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: ItemStatus
    alerts: tuple[str, ...] = ()
    bmi: float | None = None
    bmi_category: BmiCategory | None = None
    oxygen_saturation: float | None = None
    issues: tuple[DataIssue, ...] = ()
