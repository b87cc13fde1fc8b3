from dataclasses import dataclass
from fastapi import HTTPException, status
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime, tzinfo
from barbershop.models.reservation_model import OVERLAP_CONSTRAINT, Reservation
from barbershop.schemas.reservation_schema import ReservationCreate
from barbershop.services.availability_crud import availability_crud
from barbershop.services.availability_engine import (
    AvailabilityPolicy,
    BookingRejected,
    Interval,
    check_booking,
    local_date,
)
from barbershop.services.customer_crud import customer_crud
from barbershop.services.notifier import BookingNotification
from barbershop.services.service_crud import barber_crud, service_crud
from barbershop.utils.phone import normalize_phone
from barbershop.logger import get_logger

logger = get_logger(__name__)

PERMISSION_HINT = (
    'Set DATABASE_SERVICE_URL, or add a policy like: CREATE POLICY "Allow public inserts" '
    'ON "Reservations" FOR INSERT WITH CHECK (true);'
)


@dataclass
class BookingOutcome:
    reservation: Reservation
    customer_id: Optional[int]
    warning: Optional[str]
    notification: BookingNotification


def to_instant(value: datetime, tz: tzinfo) -> datetime:
    """Offset-less timestamps from the client are shop-local wall time."""
    if value.tzinfo is None:
        return value.replace(tzinfo=tz)
    return value


def _sqlstate(error: DBAPIError) -> Optional[str]:
    return getattr(error.orig, "pgcode", None) or getattr(error.orig, "sqlstate", None)


def _is_permission_error(error: DBAPIError) -> bool:
    text = str(error.orig).lower()
    return _sqlstate(error) == "42501" or "policy" in text or "permission denied" in text


def _is_overlap_violation(error: IntegrityError) -> bool:
    return _sqlstate(error) == "23P01" or OVERLAP_CONSTRAINT in str(error.orig)


class ReservationCRUD:
    @staticmethod
    def get_busy_intervals(
            db: Session, barber_id: int, range_start: datetime, range_end: datetime
    ) -> List[Interval]:
        """Reservation intervals of a barber overlapping [range_start, range_end)"""
        rows = (
            db.query(Reservation.start_time, Reservation.end_time)
            .filter(
                Reservation.barber_id == barber_id,
                Reservation.start_time < range_end,
                Reservation.end_time > range_start,
            )
            .order_by(Reservation.start_time)
            .all()
        )
        return [(row.start_time, row.end_time) for row in rows]

    @staticmethod
    def get_reservations(
            db: Session,
            range_start: datetime,
            range_end: datetime,
            barber_id: Optional[int] = None,
    ) -> List[Reservation]:
        """Reservations starting in [range_start, range_end), by start time"""
        query = db.query(Reservation).filter(
            Reservation.start_time >= range_start,
            Reservation.start_time < range_end,
        )
        if barber_id is not None:
            query = query.filter(Reservation.barber_id == barber_id)
        return query.order_by(Reservation.start_time).all()

    @staticmethod
    def create_reservation(
            db: Session,
            payload: ReservationCreate,
            now: datetime,
            policy: AvailabilityPolicy,
    ) -> BookingOutcome:
        """Validate, re-check availability and write a reservation"""
        start = to_instant(payload.start_time, policy.timezone)
        end = to_instant(payload.end_time, policy.timezone)
        service_ids = payload.requested_service_ids

        barber = barber_crud.get_barber(db, payload.barber_id)
        if not barber or not barber.active:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Barber not found or is inactive",
            )

        services = service_crud.get_services_by_ids(db, service_ids)
        found = {s.id: s for s in services if s.active}
        missing = [sid for sid in service_ids if sid not in found]
        if missing:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Service not found or is inactive: {', '.join(str(m) for m in missing)}",
            )

        # authoritative availability check, the client's view may be stale
        day = local_date(start, policy.timezone)
        override = availability_crud.get_override(db, payload.barber_id, day)
        busy = ReservationCRUD.get_busy_intervals(db, payload.barber_id, start, end)
        try:
            check_booking(start, end, busy, now, policy, override)
        except BookingRejected as e:
            logger.info(f"Booking rejected for barber {payload.barber_id} at {start.isoformat()}: {e}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

        phone = normalize_phone(payload.customer_phone)
        if phone is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid phone number format",
            )

        customer_id, warning = customer_crud.resolve_customer(
            db, payload.customer_name, phone, payload.customer_email
        )

        try:
            reservation = Reservation(
                barber_id=payload.barber_id,
                service_id=service_ids[0],
                service_ids=service_ids,
                customer_id=customer_id,
                customer_name=payload.customer_name,
                customer_phone=payload.customer_phone,
                customer_email=payload.customer_email,
                start_time=start,
                end_time=end,
            )
            db.add(reservation)
            db.commit()
            db.refresh(reservation)
            logger.info(f"Reservation created: {reservation.id} for barber {payload.barber_id}")

        except IntegrityError as e:
            db.rollback()
            if _is_overlap_violation(e):
                logger.info(f"Concurrent booking won the slot for barber {payload.barber_id}")
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="The selected time is already booked",
                )
            logger.error(f"Error creating reservation: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to create reservation",
            )
        except DBAPIError as e:
            db.rollback()
            logger.error(f"Error creating reservation: {str(e)}")
            if _is_permission_error(e):
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail={
                        "message": "Database permission denied for the Reservations table.",
                        "hint": PERMISSION_HINT,
                    },
                )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to create reservation",
            )
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error creating reservation: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to create reservation",
            )

        local_start = start.astimezone(policy.timezone)
        notification = BookingNotification(
            reservation_id=reservation.id,
            barber_name=barber.name,
            services=[found[sid].service_name for sid in service_ids],
            total_price=sum(found[sid].price_rsd for sid in service_ids),
            customer_name=payload.customer_name,
            customer_phone=payload.customer_phone,
            customer_email=payload.customer_email,
            date=payload.local_date or local_start.strftime("%Y-%m-%d"),
            time=payload.local_time or local_start.strftime("%H:%M"),
            notes=payload.notes,
        )
        return BookingOutcome(reservation, customer_id, warning, notification)


reservation_crud = ReservationCRUD()
