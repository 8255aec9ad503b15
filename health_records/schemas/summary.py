from pydantic import BaseModel, ConfigDict

from health_records.schemas.timeline import BmiCategory, DataIssue


class Summary(BaseModel):
    """Roll-up statistics over a filtered collection of timeline items."""
    model_config = ConfigDict(frozen=True)

    total: int = 0
    report_count: int = 0
    vitals_count: int = 0
    by_category_count: dict[str, int] = {}
    attention_count: int = 0
    critical_count: int = 0
    follow_up_count: int = 0
    normal_count: int = 0
    processed_count: int = 0
    processing_rate: int = 0
    report_type_count: int = 0
    average_confidence: float | None = None
    issues: tuple[DataIssue, ...] = ()


class VitalsOverview(BaseModel):
    model_config = ConfigDict(frozen=True)

    total: int = 0
    alert_count: int = 0
    blood_pressure_count: int = 0
    weight_count: int = 0
    latest_bmi: float | None = None
    latest_bmi_category: BmiCategory | None = None
