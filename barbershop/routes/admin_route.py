from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from sqlalchemy.orm import Session
from typing import Optional
from datetime import date, datetime
from barbershop.services.availability_crud import availability_crud
from barbershop.services.availability_engine import AvailabilityPolicy, local_date
from barbershop.services.schedule_service import schedule_service
from barbershop.services.service_crud import barber_crud
from barbershop.schemas.admin_schema import (
    AuthResponse,
    LoginRequest,
    ScheduleResponse,
    ScheduleView,
)
from barbershop.schemas.availability_schema import (
    AdminActionResponse,
    AdminAvailabilityResponse,
    AvailabilityRow,
    MarkAvailableRequest,
    MarkUnavailableRequest,
    WeekAvailabilityRequest,
)
from barbershop.security.session_gate import (
    SharedSecretGate,
    get_session_gate,
    is_authenticated,
    require_admin,
)
from barbershop.config import Settings, get_settings
from barbershop.database import get_db
from barbershop.deps import get_policy
from barbershop.utils.clock import get_now
from barbershop.logger import get_logger

logger = get_logger(__name__)

# Login/logout stay reachable without a session
admin_auth_router = APIRouter(prefix="/admin")
# Everything else under /admin needs the session cookie
admin_router = APIRouter(prefix="/admin", dependencies=[Depends(require_admin)])


@admin_auth_router.get("/auth", response_model=AuthResponse, status_code=status.HTTP_200_OK)
def auth_status(
    request: Request,
    gate: SharedSecretGate = Depends(get_session_gate),
    settings: Settings = Depends(get_settings),
):
    return AuthResponse(authenticated=is_authenticated(request, gate, settings))


@admin_auth_router.post("/auth", response_model=AuthResponse, status_code=status.HTTP_200_OK)
def login(
    payload: LoginRequest,
    response: Response,
    gate: SharedSecretGate = Depends(get_session_gate),
    settings: Settings = Depends(get_settings),
):
    """Exchange the shared admin password for the session cookie"""
    if not gate.verify(payload.password):
        logger.warning("Failed admin login attempt")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid password")

    response.set_cookie(
        key=settings.admin_cookie_name,
        value=gate.token,
        max_age=settings.admin_cookie_max_age,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )
    logger.info("Admin logged in")
    return AuthResponse(authenticated=True, message="Login successful")


@admin_auth_router.delete("/auth", response_model=AuthResponse, status_code=status.HTTP_200_OK)
def logout(response: Response, settings: Settings = Depends(get_settings)):
    response.delete_cookie(
        key=settings.admin_cookie_name,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )
    logger.info("Admin logged out")
    return AuthResponse(authenticated=False, message="Logged out")


def _require_barber(db: Session, barber_id: int):
    barber = barber_crud.get_barber(db, barber_id)
    if not barber:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Barber not found")
    return barber


@admin_router.get(
    "/availability", response_model=AdminAvailabilityResponse, status_code=status.HTTP_200_OK
)
def get_availability(
    barber_id: int = Query(..., alias="barberId", gt=0),
    start_date: date = Query(..., alias="startDate"),
    end_date: date = Query(..., alias="endDate"),
    db: Session = Depends(get_db),
):
    """Override rows for the admin calendar"""
    if start_date > end_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="startDate must not be after endDate",
        )
    try:
        rows = availability_crud.get_overrides(db, barber_id, start_date, end_date)
        return AdminAvailabilityResponse(
            availability=[AvailabilityRow.model_validate(r) for r in rows]
        )

    except Exception as e:
        logger.error(f"Error fetching availability for barber {barber_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Greška pri učitavanju dostupnosti",
        )


@admin_router.post(
    "/availability/unavailable",
    response_model=AdminActionResponse,
    status_code=status.HTTP_200_OK,
)
def mark_unavailable(payload: MarkUnavailableRequest, db: Session = Depends(get_db)):
    _require_barber(db, payload.barber_id)
    affected = availability_crud.mark_unavailable(
        db,
        payload.barber_id,
        payload.dates,
        payload.working_hours_start,
        payload.working_hours_end,
    )
    return AdminActionResponse(message="Dostupnost sačuvana!", affected=affected)


@admin_router.post(
    "/availability/available",
    response_model=AdminActionResponse,
    status_code=status.HTTP_200_OK,
)
def mark_available(payload: MarkAvailableRequest, db: Session = Depends(get_db)):
    _require_barber(db, payload.barber_id)
    affected = availability_crud.mark_available(db, payload.barber_id, payload.dates)
    return AdminActionResponse(message="Dostupnost obrisana!", affected=affected)


@admin_router.put(
    "/availability/week",
    response_model=AdminActionResponse,
    status_code=status.HTTP_200_OK,
)
def save_week(payload: WeekAvailabilityRequest, db: Session = Depends(get_db)):
    """Save the calendar's week of toggles"""
    _require_barber(db, payload.barber_id)
    marked, cleared = availability_crud.save_week(
        db,
        payload.barber_id,
        payload.days,
        payload.working_hours_start,
        payload.working_hours_end,
    )
    return AdminActionResponse(message="Dostupnost sačuvana!", affected=marked + cleared)


@admin_router.get("/schedule", response_model=ScheduleResponse, status_code=status.HTTP_200_OK)
def get_schedule(
    day: Optional[date] = Query(None, alias="date"),
    barber: str = Query("all"),
    view: ScheduleView = Query(ScheduleView.day),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    policy: AvailabilityPolicy = Depends(get_policy),
):
    """Day or week calendar of reservations, optionally for a single barber"""
    barber_id = None
    if barber != "all":
        if not barber.isdigit() or int(barber) < 1:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="barber must be 'all' or a barber id",
            )
        barber_id = int(barber)
        _require_barber(db, barber_id)

    anchor = day or local_date(now, policy.timezone)
    try:
        return schedule_service.build_schedule(db, anchor, view, policy, barber_id)

    except Exception as e:
        logger.error(f"Error building schedule for {anchor}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Greška pri učitavanju rasporeda",
        )
