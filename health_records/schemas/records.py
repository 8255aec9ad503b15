from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class RecordModel(BaseModel):
    """Base for payloads coming from the records API (camelCase on the wire)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class BilingualText(RecordModel):
    english: str | None = None
    urdu: str | None = None


class BilingualList(RecordModel):
    english: list[str] = Field(default_factory=list)
    urdu: list[str] = Field(default_factory=list)

    @field_validator("english", "urdu", mode="before")
    @classmethod
    def default_lists(cls, value):
        return [] if value is None else value


class KeyFinding(RecordModel):
    """A single lab/report parameter as reported by the AI analysis."""
    parameter: str | None = None
    value: str | None = None
    status: str | None = Field(default=None, description="Severity label: normal, abnormal, critical, low, high")
    significance: BilingualText | None = None


class RiskFactor(RecordModel):
    factor: str | None = None
    level: str | None = None
    description: BilingualText | None = None


class AIInsight(RecordModel):
    summary: BilingualText | None = None
    key_findings: list[KeyFinding] = Field(default_factory=list)
    recommendations: BilingualList | None = None
    doctor_questions: BilingualList | None = None
    risk_factors: list[RiskFactor] = Field(default_factory=list)
    follow_up_required: bool = False
    follow_up_timeframe: str | None = None
    confidence: float | None = Field(default=None, description="AI certainty percentage, expected in [0, 100]")

    @field_validator("key_findings", "risk_factors", mode="before")
    @classmethod
    def default_lists(cls, value):
        return [] if value is None else value

    @field_validator("follow_up_required", mode="before")
    @classmethod
    def default_flags(cls, value):
        return False if value is None else value


class RawReportRecord(RecordModel):
    """Uploaded medical report as returned by the records API."""
    id: str = Field(alias="_id")
    original_name: str = Field(description="Original uploaded file name")
    report_type: str | None = Field(default=None, description="Report type, resolved against ReportType")
    test_date: str | None = Field(default=None, description="Date the test was taken")
    lab_name: str | None = None
    doctor_name: str | None = None
    notes: str | None = None
    is_processed: bool = False
    ai_insights: AIInsight | None = None

    @field_validator("is_processed", mode="before")
    @classmethod
    def default_flags(cls, value):
        return False if value is None else value


class BloodPressure(RecordModel):
    systolic: float | None = None
    diastolic: float | None = None
    unit: str | None = "mmHg"


class BloodSugar(RecordModel):
    fasting: float | None = None
    post_prandial: float | None = None
    random: float | None = None
    unit: str | None = "mg/dL"


class Measurement(RecordModel):
    value: float | None = None
    unit: str | None = None


class RawVitalsRecord(RecordModel):
    """Manually entered vitals. A reading of None means it was not recorded."""
    id: str = Field(alias="_id")
    date: str | None = None
    blood_pressure: BloodPressure | None = None
    heart_rate: Measurement | None = None
    blood_sugar: BloodSugar | None = None
    weight: Measurement | None = None
    height: Measurement | None = None
    temperature: Measurement | None = None
    oxygen_saturation: Measurement | None = None
    notes: str | None = None
    alerts: list[str] = Field(default_factory=list)
    bmi: float | None = None
    bmi_category: str | None = None

    @field_validator("alerts", mode="before")
    @classmethod
    def default_lists(cls, value):
        return [] if value is None else value
