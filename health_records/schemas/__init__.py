from health_records.schemas.insight import InsightView, Language
from health_records.schemas.records import RawReportRecord, RawVitalsRecord
from health_records.schemas.summary import Summary, VitalsOverview
from health_records.schemas.timeline import (
    DataIssue,
    GroupedTimeline,
    ItemStatus,
    ReportType,
    SortOrder,
    TimelineGroup,
    TimelineItem,
    TimelineKind,
    VitalsStatus,
)

__all__ = [
    "DataIssue",
    "GroupedTimeline",
    "InsightView",
    "ItemStatus",
    "Language",
    "RawReportRecord",
    "RawVitalsRecord",
    "ReportType",
    "SortOrder",
    "Summary",
    "TimelineGroup",
    "TimelineItem",
    "TimelineKind",
    "VitalsOverview",
    "VitalsStatus",
]
