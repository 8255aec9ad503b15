from health_records.schemas.timeline import DataIssue, IssueKind, TimelineKind


class EngineError(Exception):
    """Base class for data problems the aggregation engine recovers from."""

    def to_issue(self) -> DataIssue:
        raise NotImplementedError


class MalformedRecord(EngineError):
    """A record's date or a required discriminant field cannot be parsed."""

    def __init__(self, source: TimelineKind, message: str, record_id: str | None = None, field: str | None = None):
        super().__init__(message)
        self.source = source
        self.message = message
        self.record_id = record_id
        self.field = field

    def to_issue(self) -> DataIssue:
        return DataIssue(
            kind=IssueKind.MALFORMED_RECORD,
            source=self.source,
            message=self.message,
            record_id=self.record_id,
            field=self.field,
        )


class InvalidRange(EngineError):
    """A numeric field lies outside its plausible bounds and was clamped."""

    def __init__(self, source: TimelineKind, field: str, value: float, record_id: str | None = None):
        self.source = source
        self.field = field
        self.value = value
        self.record_id = record_id
        self.message = f"{field} value {value:g} is out of range"
        super().__init__(self.message)

    def to_issue(self) -> DataIssue:
        return DataIssue(
            kind=IssueKind.INVALID_RANGE,
            source=self.source,
            message=self.message,
            record_id=self.record_id,
            field=self.field,
        )
