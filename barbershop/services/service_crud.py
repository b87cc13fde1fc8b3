from sqlalchemy.orm import Session
from typing import Iterable, List
from barbershop.models.barber_model import Barber
from barbershop.models.service_model import Service
from barbershop.schemas.service_schema import ServiceResponse, ServiceSegment

# lower-cased name fragments, Serbian names first
_HAIRCUT_WORDS = ("šiš", "cut", "fade")
_BEARD_WORDS = ("brad", "brij", "beard", "shave")


def segment_for(service_name: str) -> ServiceSegment:
    """Display group for a service, guessed from its name."""
    name = service_name.lower()
    is_haircut = any(w in name for w in _HAIRCUT_WORDS)
    is_beard = any(w in name for w in _BEARD_WORDS)
    if "+" in name or (is_haircut and is_beard):
        return ServiceSegment.combo
    if is_haircut:
        return ServiceSegment.haircut
    if is_beard:
        return ServiceSegment.beard
    return ServiceSegment.other


def service_response(service: Service) -> ServiceResponse:
    return ServiceResponse(
        id=service.id,
        service_name=service.service_name,
        price_rsd=service.price_rsd,
        duration_minutes=service.duration_minutes,
        active=service.active,
        segment=segment_for(service.service_name),
    )


class ServiceCRUD:
    @staticmethod
    def get_active_services(db: Session) -> List[Service]:
        """Active services ordered by name (public endpoint)"""
        return (
            db.query(Service)
            .filter(Service.active == True)  # noqa: E712
            .order_by(Service.service_name.asc())
            .all()
        )

    @staticmethod
    def get_all_services(db: Session) -> List[Service]:
        """Every service, including retired ones still referenced by reservations"""
        return db.query(Service).order_by(Service.id).all()

    @staticmethod
    def get_services_by_ids(db: Session, service_ids: Iterable[int]) -> List[Service]:
        ids = list(service_ids)
        if not ids:
            return []
        return db.query(Service).filter(Service.id.in_(ids)).all()


class BarberCRUD:
    @staticmethod
    def get_active_barbers(db: Session) -> List[Barber]:
        return db.query(Barber).filter(Barber.active == True).order_by(Barber.id).all()  # noqa: E712

    @staticmethod
    def get_barber(db: Session, barber_id: int):
        return db.query(Barber).filter(Barber.id == barber_id).first()


service_crud = ServiceCRUD()
barber_crud = BarberCRUD()
