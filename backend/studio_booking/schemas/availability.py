"""Weekly availability and slot DTOs."""

from datetime import datetime
from typing import List

from pydantic import Field, field_validator, model_validator

from ..core.timezone_utils import parse_wall_clock
from ._strict_base import StrictRequestModel
from .base import StandardizedModel


class AvailabilityRuleInput(StrictRequestModel):
    day_of_week: int = Field(..., ge=0, le=6, description="0 = Sunday .. 6 = Saturday")
    start_time: str = Field(..., description="HH:MM 24h, studio timezone")
    end_time: str = Field(..., description="HH:MM 24h, studio timezone")
    is_available: bool = True

    @field_validator("start_time", "end_time")
    @classmethod
    def _validate_wall_clock(cls, value: str) -> str:
        parse_wall_clock(value)
        return value

    @model_validator(mode="after")
    def _validate_order(self) -> "AvailabilityRuleInput":
        if parse_wall_clock(self.start_time) >= parse_wall_clock(self.end_time):
            raise ValueError("start_time must be before end_time")
        return self


class AvailabilityReplaceRequest(StrictRequestModel):
    rules: List[AvailabilityRuleInput] = Field(default_factory=list)


class AvailabilityRuleResponse(StandardizedModel):
    id: str
    day_of_week: int
    start_time: str
    end_time: str
    is_available: bool


class TimeSlotResponse(StandardizedModel):
    start: datetime
    end: datetime


class AvailableSlotsResponse(StandardizedModel):
    studio_id: str
    date: str
    duration_minutes: int
    slots: List[TimeSlotResponse]
