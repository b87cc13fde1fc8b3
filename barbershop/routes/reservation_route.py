import re
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from datetime import date, datetime
from barbershop.services.availability_crud import availability_crud
from barbershop.services.availability_engine import AvailabilityPolicy, day_bounds
from barbershop.services.notifier import WebhookNotifier, get_notifier
from barbershop.services.reservation_crud import reservation_crud, to_instant
from barbershop.schemas.reservation_schema import (
    ReservationCreate,
    ReservationCreatedResponse,
    ReservationInterval,
    ReservationListResponse,
)
from barbershop.database import get_db
from barbershop.deps import get_policy
from barbershop.utils.clock import get_now
from barbershop.logger import get_logger

reservation_router = APIRouter()
logger = get_logger(__name__)

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@reservation_router.get(
    "/reservations",
    response_model=ReservationListResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
)
def get_reservations(
    barber_id: int = Query(..., alias="barberId", gt=0, description="Barber to list"),
    date_param: Optional[str] = Query(None, alias="date", description="Shop-local day, YYYY-MM-DD"),
    day_start: Optional[datetime] = Query(None, alias="dayStart", description="Range start (ISO)"),
    day_end: Optional[datetime] = Query(None, alias="dayEnd", description="Range end (ISO)"),
    db: Session = Depends(get_db),
    policy: AvailabilityPolicy = Depends(get_policy),
):
    """Reservation intervals for a barber on a day or in an explicit range"""
    day = None
    day_available = None
    if day_start is not None and day_end is not None:
        range_start = to_instant(day_start, policy.timezone)
        range_end = to_instant(day_end, policy.timezone)
        if range_end <= range_start:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="dayEnd must be after dayStart",
            )
    elif date_param:
        date_only = date_param[:10]
        try:
            if not _DATE_RE.match(date_only):
                raise ValueError(date_only)
            day = date.fromisoformat(date_only)
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="date must be YYYY-MM-DD"
            )
        range_start, range_end = day_bounds(day, policy.timezone)
    else:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Either date or both dayStart and dayEnd are required",
        )

    try:
        logger.info(f"Fetching reservations for barber {barber_id}")
        reservations = reservation_crud.get_reservations(db, range_start, range_end, barber_id)
        if day is not None:
            override = availability_crud.get_override(db, barber_id, day)
            day_available = override is None or override.is_available
        return ReservationListResponse(
            reservations=[ReservationInterval.model_validate(r) for r in reservations],
            day_available=day_available,
        )

    except Exception as e:
        logger.error(f"Error fetching reservations: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch reservations",
        )


@reservation_router.post(
    "/reservations",
    response_model=ReservationCreatedResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def create_reservation(
    payload: ReservationCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    policy: AvailabilityPolicy = Depends(get_policy),
    notifier: WebhookNotifier = Depends(get_notifier),
):
    """Create a reservation (public booking wizard)"""
    try:
        logger.info(
            f"Creating reservation for barber {payload.barber_id} at {payload.start_time.isoformat()}"
        )
        outcome = reservation_crud.create_reservation(db, payload, now, policy)
        background_tasks.add_task(notifier.send, outcome.notification)
        return ReservationCreatedResponse(
            reservation_id=outcome.reservation.id,
            customer_id=outcome.customer_id,
            warning=outcome.warning,
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error creating reservation: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )
