from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Dict, List, Optional
from datetime import date, datetime, time

from barbershop.schemas.reservation_schema import ReservationInterval


class AvailabilityRecord(BaseModel):
    date: date
    is_available: bool
    working_hours_start: time
    working_hours_end: time

    class Config:
        from_attributes = True


class AvailabilityRow(AvailabilityRecord):
    id: int
    barber_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BookingAvailabilityResponse(BaseModel):
    ok: bool = True
    availability: List[AvailabilityRecord] = []
    reservations: List[ReservationInterval] = []


class AdminAvailabilityResponse(BaseModel):
    ok: bool = True
    availability: List[AvailabilityRow] = []


class DaySummaryResponse(BaseModel):
    date: date
    weekday: str
    slot_count: int = Field(..., serialization_alias="slotCount")
    offerable: bool


class BookingDaysResponse(BaseModel):
    ok: bool = True
    barber_id: int = Field(..., serialization_alias="barberId")
    days: List[DaySummaryResponse] = []


class SlotResponse(BaseModel):
    time: str = Field(..., example="09:30")
    start_time: datetime = Field(..., serialization_alias="startTime")


class BookingSlotsResponse(BaseModel):
    ok: bool = True
    barber_id: int = Field(..., serialization_alias="barberId")
    date: date
    day_available: bool = Field(..., serialization_alias="dayAvailable")
    slots: List[SlotResponse] = []


class MarkUnavailableRequest(BaseModel):
    barber_id: int = Field(..., alias="barberId", gt=0)
    dates: List[date] = Field(..., min_length=1)
    # kept as metadata only, an unavailable day has no bookable hours
    working_hours_start: time = Field(time(9, 0), alias="workingHoursStart")
    working_hours_end: time = Field(time(17, 0), alias="workingHoursEnd")

    class Config:
        populate_by_name = True

    @model_validator(mode="after")
    def hours_must_be_ordered(self):
        if self.working_hours_end <= self.working_hours_start:
            raise ValueError("workingHoursEnd must be after workingHoursStart")
        return self


class MarkAvailableRequest(BaseModel):
    barber_id: int = Field(..., alias="barberId", gt=0)
    dates: List[date] = Field(..., min_length=1)

    class Config:
        populate_by_name = True


class WeekAvailabilityRequest(BaseModel):
    barber_id: int = Field(..., alias="barberId", gt=0)
    days: Dict[date, bool] = Field(..., description="date -> is available")
    working_hours_start: time = Field(time(9, 0), alias="workingHoursStart")
    working_hours_end: time = Field(time(17, 0), alias="workingHoursEnd")

    class Config:
        populate_by_name = True

    @field_validator("days")
    @classmethod
    def days_not_empty(cls, v):
        if not v:
            raise ValueError("At least one day is required")
        return v


class AdminActionResponse(BaseModel):
    ok: bool = True
    message: str
    affected: int = 0
