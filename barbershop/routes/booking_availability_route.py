from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from datetime import date, datetime
from barbershop.services.availability_crud import availability_crud
from barbershop.services.availability_engine import (
    AvailabilityPolicy,
    available_slots,
    day_bounds,
    iter_days,
    local_date,
    summarize_days,
    upcoming_weekdays,
)
from barbershop.services.reservation_crud import reservation_crud
from barbershop.services.service_crud import barber_crud
from barbershop.schemas.availability_schema import (
    AvailabilityRecord,
    BookingAvailabilityResponse,
    BookingDaysResponse,
    BookingSlotsResponse,
    DaySummaryResponse,
    SlotResponse,
)
from barbershop.schemas.reservation_schema import ReservationInterval
from barbershop.config import Settings, get_settings
from barbershop.database import get_db
from barbershop.deps import get_policy
from barbershop.utils.clock import get_now
from barbershop.logger import get_logger

booking_availability_router = APIRouter(prefix="/booking-availability")
logger = get_logger(__name__)

MAX_RANGE_DAYS = 62


def _check_range(start_date: date, end_date: date) -> None:
    if start_date > end_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="startDate must not be after endDate",
        )
    if (end_date - start_date).days + 1 > MAX_RANGE_DAYS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Date range may span at most {MAX_RANGE_DAYS} days",
        )


def _require_barber(db: Session, barber_id: int):
    barber = barber_crud.get_barber(db, barber_id)
    if not barber or not barber.active:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Barber not found")
    return barber


@booking_availability_router.get(
    "", response_model=BookingAvailabilityResponse, status_code=status.HTTP_200_OK
)
def get_booking_availability(
    barber_id: int = Query(..., alias="barberId", gt=0),
    start_date: date = Query(..., alias="startDate"),
    end_date: date = Query(..., alias="endDate"),
    db: Session = Depends(get_db),
    policy: AvailabilityPolicy = Depends(get_policy),
):
    """Raw override rows and reservation intervals for client-side slot computation"""
    _check_range(start_date, end_date)
    try:
        range_start, _ = day_bounds(start_date, policy.timezone)
        _, range_end = day_bounds(end_date, policy.timezone)
        overrides = availability_crud.get_overrides(db, barber_id, start_date, end_date)
        busy = reservation_crud.get_busy_intervals(db, barber_id, range_start, range_end)
        return BookingAvailabilityResponse(
            availability=[AvailabilityRecord.model_validate(o) for o in overrides],
            reservations=[ReservationInterval(start_time=s, end_time=e) for s, e in busy],
        )

    except Exception as e:
        logger.error(f"Error fetching booking availability: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch availability",
        )


@booking_availability_router.get(
    "/days", response_model=BookingDaysResponse, status_code=status.HTTP_200_OK
)
def get_booking_days(
    barber_id: int = Query(..., alias="barberId", gt=0),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    policy: AvailabilityPolicy = Depends(get_policy),
    settings: Settings = Depends(get_settings),
):
    """Bookable slot counts per day, defaulting to the next working days"""
    if (start_date is None) != (end_date is None):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Provide both startDate and endDate, or neither",
        )
    if start_date is None:
        days = upcoming_weekdays(local_date(now, policy.timezone), settings.booking_window_days)
    else:
        _check_range(start_date, end_date)
        days = list(iter_days(start_date, end_date))

    _require_barber(db, barber_id)
    try:
        range_start, _ = day_bounds(days[0], policy.timezone)
        _, range_end = day_bounds(days[-1], policy.timezone)
        overrides = availability_crud.overrides_by_date(db, barber_id, days[0], days[-1])
        busy = reservation_crud.get_busy_intervals(db, barber_id, range_start, range_end)
        summaries = summarize_days(days, busy, now, policy, overrides)
        return BookingDaysResponse(
            barber_id=barber_id,
            days=[
                DaySummaryResponse(
                    date=s.day,
                    weekday=s.day.strftime("%A"),
                    slot_count=s.slot_count,
                    offerable=s.offerable,
                )
                for s in summaries
            ],
        )

    except Exception as e:
        logger.error(f"Error summarizing days for barber {barber_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch availability",
        )


@booking_availability_router.get(
    "/slots", response_model=BookingSlotsResponse, status_code=status.HTTP_200_OK
)
def get_booking_slots(
    barber_id: int = Query(..., alias="barberId", gt=0),
    day: date = Query(..., alias="date"),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    policy: AvailabilityPolicy = Depends(get_policy),
):
    """Ordered free slot starts for one barber and day"""
    _require_barber(db, barber_id)
    try:
        override = availability_crud.get_override(db, barber_id, day)
        range_start, range_end = day_bounds(day, policy.timezone)
        busy = reservation_crud.get_busy_intervals(db, barber_id, range_start, range_end)
        slots = available_slots(day, busy, now, policy, override)
        return BookingSlotsResponse(
            barber_id=barber_id,
            date=day,
            day_available=override is None or override.is_available,
            slots=[SlotResponse(time=s.strftime("%H:%M"), start_time=s) for s in slots],
        )

    except Exception as e:
        logger.error(f"Error computing slots for barber {barber_id} on {day}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch availability",
        )
