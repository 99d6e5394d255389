from datetime import datetime, timezone

from pydantic import BaseModel, field_validator, model_validator


class DateRange(BaseModel):
    """Inclusive window of instants used to scope the workflow run query."""

    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def ensure_aware(cls, value: datetime) -> datetime:
        # Naive values are read as UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @model_validator(mode="after")
    def check_order(self) -> "DateRange":
        if self.start > self.end:
            raise ValueError("start must not be after end")
        return self

    def contains(self, value: datetime) -> bool:
        """Return True when value falls inside the window, bounds included."""
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return self.start <= value <= self.end
