from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from typing import List, Optional
from datetime import datetime


class ReservationCreate(BaseModel):
    barber_id: int = Field(..., alias="barberId", gt=0, description="ID from the Barbers table")
    service_id: Optional[int] = Field(None, alias="serviceId", gt=0, description="Single service (legacy)")
    service_ids: Optional[List[int]] = Field(None, alias="serviceIds", description="All booked services")
    customer_name: str = Field(..., alias="customerName")
    customer_phone: str = Field(..., alias="customerPhone")
    customer_email: Optional[EmailStr] = Field(None, alias="customerEmail")
    start_time: datetime = Field(..., alias="startTime")
    end_time: datetime = Field(..., alias="endTime")
    notes: Optional[str] = None
    # shown verbatim in the notification when the client sends them
    local_date: Optional[str] = Field(None, alias="localDate", example="2025-06-10")
    local_time: Optional[str] = Field(None, alias="localTime", example="09:00")

    class Config:
        populate_by_name = True

    @field_validator("customer_name", "customer_phone")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("customer_email", mode="before")
    @classmethod
    def blank_email_is_missing(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v

    @field_validator("service_ids")
    @classmethod
    def service_ids_must_be_positive(cls, v):
        if v is not None and any(i <= 0 for i in v):
            raise ValueError("Service IDs must be positive integers")
        return v

    @model_validator(mode="after")
    def check_services_and_interval(self):
        if not self.requested_service_ids:
            raise ValueError("At least one service (serviceId or serviceIds) is required")
        if (self.start_time.tzinfo is None) != (self.end_time.tzinfo is None):
            raise ValueError("startTime and endTime must both carry a UTC offset or both omit it")
        if self.end_time <= self.start_time:
            raise ValueError("endTime must be after startTime")
        return self

    @property
    def requested_service_ids(self) -> List[int]:
        """serviceIds followed by serviceId, without duplicates, in order."""
        ids: List[int] = []
        for sid in (self.service_ids or []) + ([self.service_id] if self.service_id else []):
            if sid not in ids:
                ids.append(sid)
        return ids


class ReservationCreatedResponse(BaseModel):
    ok: bool = True
    reservation_id: int = Field(..., serialization_alias="reservationId")
    customer_id: Optional[int] = Field(None, serialization_alias="customerId")
    message: str = "Reservation created successfully"
    warning: Optional[str] = None


class ReservationInterval(BaseModel):
    start_time: datetime
    end_time: datetime

    class Config:
        from_attributes = True


class ReservationListResponse(BaseModel):
    ok: bool = True
    reservations: List[ReservationInterval] = []
    day_available: Optional[bool] = Field(None, serialization_alias="dayAvailable")
