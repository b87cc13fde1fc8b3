from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, datetime
from enum import Enum

from barbershop.schemas.service_schema import BarberResponse, ServiceResponse


class LoginRequest(BaseModel):
    password: str = ""


class AuthResponse(BaseModel):
    ok: bool = True
    authenticated: bool = False
    message: Optional[str] = None


class ScheduleView(str, Enum):
    day = "day"
    week = "week"


class ScheduleReservation(BaseModel):
    id: int
    barber_id: int
    service_id: Optional[int] = None
    service_ids: List[int] = []
    service_names: List[str] = []
    customer_name: str
    customer_phone: str
    customer_email: Optional[str] = None
    start_time: datetime
    end_time: datetime
    local_start: str = Field(..., example="09:00")
    local_end: str = Field(..., example="09:30")


class ScheduleDay(BaseModel):
    date: date
    reservations: List[ScheduleReservation] = []


class ScheduleResponse(BaseModel):
    ok: bool = True
    view: ScheduleView
    date: date
    barber: str = "all"
    barbers: List[BarberResponse] = []
    services: List[ServiceResponse] = []
    days: List[ScheduleDay] = []
