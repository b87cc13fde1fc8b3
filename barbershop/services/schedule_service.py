from datetime import date, timedelta
from sqlalchemy.orm import Session
from typing import Dict, List, Optional
from barbershop.schemas.admin_schema import (
    ScheduleDay,
    ScheduleReservation,
    ScheduleResponse,
    ScheduleView,
)
from barbershop.schemas.service_schema import BarberResponse
from barbershop.services.availability_engine import (
    AvailabilityPolicy,
    day_bounds,
    iter_days,
    local_date,
)
from barbershop.services.reservation_crud import reservation_crud
from barbershop.services.service_crud import barber_crud, service_crud, service_response


def schedule_days(anchor: date, view: ScheduleView) -> List[date]:
    """The anchor day, or the Monday-to-Sunday week containing it."""
    if view == ScheduleView.day:
        return [anchor]
    monday = anchor - timedelta(days=anchor.weekday())
    return list(iter_days(monday, monday + timedelta(days=6)))


class ScheduleService:
    @staticmethod
    def build_schedule(
            db: Session,
            anchor: date,
            view: ScheduleView,
            policy: AvailabilityPolicy,
            barber_id: Optional[int] = None,
    ) -> ScheduleResponse:
        """Reservations for the admin calendar, grouped by shop-local day"""
        days = schedule_days(anchor, view)
        range_start, _ = day_bounds(days[0], policy.timezone)
        _, range_end = day_bounds(days[-1], policy.timezone)

        barbers = barber_crud.get_active_barbers(db)
        if barber_id is not None:
            barbers = [b for b in barbers if b.id == barber_id]
        services = service_crud.get_all_services(db)
        names = {s.id: s.service_name for s in services}

        grouped: Dict[date, List[ScheduleReservation]] = {d: [] for d in days}
        for r in reservation_crud.get_reservations(db, range_start, range_end, barber_id):
            start = r.start_time.astimezone(policy.timezone)
            end = r.end_time.astimezone(policy.timezone)
            ids = r.all_service_ids
            grouped.setdefault(local_date(r.start_time, policy.timezone), []).append(
                ScheduleReservation(
                    id=r.id,
                    barber_id=r.barber_id,
                    service_id=r.service_id,
                    service_ids=ids,
                    service_names=[names[sid] for sid in ids if sid in names],
                    customer_name=r.customer_name,
                    customer_phone=r.customer_phone,
                    customer_email=r.customer_email,
                    start_time=r.start_time,
                    end_time=r.end_time,
                    local_start=start.strftime("%H:%M"),
                    local_end=end.strftime("%H:%M"),
                )
            )

        return ScheduleResponse(
            view=view,
            date=anchor,
            barber=str(barber_id) if barber_id is not None else "all",
            barbers=[BarberResponse.model_validate(b) for b in barbers],
            services=[service_response(s) for s in services],
            days=[ScheduleDay(date=d, reservations=grouped[d]) for d in days],
        )


schedule_service = ScheduleService()
