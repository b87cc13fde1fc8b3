from pydantic import BaseModel, Field
from typing import List
from enum import Enum


class ServiceSegment(str, Enum):
    haircut = "haircut"
    beard = "beard"
    combo = "combo"
    other = "other"


class ServiceResponse(BaseModel):
    id: int
    service_name: str = Field(..., example="ŠIŠANJE FADE")
    price_rsd: int = Field(..., example=1400)
    duration_minutes: int = Field(..., example=30)
    active: bool
    segment: ServiceSegment = ServiceSegment.other

    class Config:
        from_attributes = True


class ServiceListResponse(BaseModel):
    ok: bool = True
    services: List[ServiceResponse] = []


class BarberResponse(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True


class BarberListResponse(BaseModel):
    ok: bool = True
    barbers: List[BarberResponse] = []
