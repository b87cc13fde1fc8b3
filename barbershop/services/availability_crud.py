from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Dict, Iterable, List, Optional, Tuple
from datetime import date, time
from barbershop.models.availability_model import BarberAvailability
from barbershop.logger import get_logger

logger = get_logger(__name__)


class AvailabilityCRUD:
    @staticmethod
    def get_override(db: Session, barber_id: int, day: date) -> Optional[BarberAvailability]:
        return (
            db.query(BarberAvailability)
            .filter(BarberAvailability.barber_id == barber_id, BarberAvailability.date == day)
            .first()
        )

    @staticmethod
    def get_overrides(
            db: Session, barber_id: int, start: date, end: date
    ) -> List[BarberAvailability]:
        """Override rows for a barber between two dates, inclusive, by date"""
        return (
            db.query(BarberAvailability)
            .filter(
                BarberAvailability.barber_id == barber_id,
                BarberAvailability.date >= start,
                BarberAvailability.date <= end,
            )
            .order_by(BarberAvailability.date)
            .all()
        )

    @staticmethod
    def overrides_by_date(
            db: Session, barber_id: int, start: date, end: date
    ) -> Dict[date, BarberAvailability]:
        return {row.date: row for row in AvailabilityCRUD.get_overrides(db, barber_id, start, end)}

    @staticmethod
    def _upsert_unavailable(
            db: Session, barber_id: int, dates: List[date], hours_start: time, hours_end: time
    ) -> int:
        for day in dates:
            existing = AvailabilityCRUD.get_override(db, barber_id, day)
            if existing:
                existing.is_available = False
                existing.working_hours_start = hours_start
                existing.working_hours_end = hours_end
            else:
                db.add(
                    BarberAvailability(
                        barber_id=barber_id,
                        date=day,
                        is_available=False,
                        working_hours_start=hours_start,
                        working_hours_end=hours_end,
                    )
                )
        db.flush()
        return len(dates)

    @staticmethod
    def mark_unavailable(
            db: Session,
            barber_id: int,
            dates: Iterable[date],
            hours_start: time = time(9, 0),
            hours_end: time = time(17, 0),
    ) -> int:
        """Upsert one unavailable row per (barber, date); repeat calls are no-ops"""
        unique_dates = sorted(set(dates))
        # a concurrent insert of the same day trips the unique key; the retry updates it
        for attempt in (1, 2):
            try:
                count = AvailabilityCRUD._upsert_unavailable(
                    db, barber_id, unique_dates, hours_start, hours_end
                )
                db.commit()
                logger.info(f"Barber {barber_id} marked unavailable on {len(unique_dates)} day(s)")
                return count
            except IntegrityError as e:
                db.rollback()
                if attempt == 2:
                    logger.error(f"Error marking barber {barber_id} unavailable: {str(e)}")
                    raise AvailabilityCRUD._save_failed(e)
                logger.warning(f"Availability upsert raced for barber {barber_id}, retrying")
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Error marking barber {barber_id} unavailable: {str(e)}")
                raise AvailabilityCRUD._save_failed(e)

    @staticmethod
    def mark_available(db: Session, barber_id: int, dates: Iterable[date]) -> int:
        """Revert days to the default schedule by deleting their override rows"""
        unique_dates = sorted(set(dates))
        try:
            deleted = (
                db.query(BarberAvailability)
                .filter(
                    BarberAvailability.barber_id == barber_id,
                    BarberAvailability.date.in_(unique_dates),
                )
                .delete(synchronize_session=False)
            )
            db.commit()
            logger.info(f"Barber {barber_id}: removed {deleted} availability override(s)")
            return deleted
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error deleting availability for barber {barber_id}: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Greška pri brisanju: {e.__class__.__name__}",
            )

    @staticmethod
    def save_week(
            db: Session,
            barber_id: int,
            days: Dict[date, bool],
            hours_start: time = time(9, 0),
            hours_end: time = time(17, 0),
    ) -> Tuple[int, int]:
        """Apply the admin calendar's per-day toggles in one go"""
        unavailable = [d for d, is_open in days.items() if not is_open]
        available = [d for d, is_open in days.items() if is_open]
        marked = 0
        cleared = 0
        if unavailable:
            marked = AvailabilityCRUD.mark_unavailable(db, barber_id, unavailable, hours_start, hours_end)
        if available:
            cleared = AvailabilityCRUD.mark_available(db, barber_id, available)
        return marked, cleared

    @staticmethod
    def _save_failed(error: Exception) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Greška pri čuvanju: {error.__class__.__name__}",
        )


availability_crud = AvailabilityCRUD()
