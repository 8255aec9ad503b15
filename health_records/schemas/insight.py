from enum import Enum

from pydantic import BaseModel, ConfigDict

from health_records.schemas.timeline import DataIssue, FindingSeverity


class Language(str, Enum):
    ENGLISH = "en"
    URDU = "ur"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in {"english", "en"}:
                return cls.ENGLISH
            if lowered in {"urdu", "ur"}:
                return cls.URDU
        return None


class ResolvedFinding(BaseModel):
    model_config = ConfigDict(frozen=True)

    parameter: str | None
    value: str | None
    status: str | None
    severity: FindingSeverity | None
    significance: str | None


class ResolvedRiskFactor(BaseModel):
    model_config = ConfigDict(frozen=True)

    factor: str | None
    level: str | None
    description: str | None


class InsightView(BaseModel):
    """A report's AI insight with every bilingual field resolved to one language."""
    model_config = ConfigDict(frozen=True)

    report_id: str
    report_name: str
    report_type: str | None
    test_date: str | None
    language: Language
    summary: str
    key_findings: tuple[ResolvedFinding, ...] = ()
    recommendations: tuple[str, ...] = ()
    doctor_questions: tuple[str, ...] = ()
    risk_factors: tuple[ResolvedRiskFactor, ...] = ()
    follow_up_required: bool = False
    follow_up_timeframe: str | None = None
    confidence: float | None = None
    issues: tuple[DataIssue, ...] = ()
