from datetime import datetime, timezone
from sqlalchemy import Column, String, ForeignKey, CheckConstraint, DDL, event
from sqlalchemy.orm import relationship
from barbershop.database import Base
from barbershop.models.types import BigIntId, IdList, UTCDateTime

OVERLAP_CONSTRAINT = "reservations_no_overlap"


class Reservation(Base):
    __tablename__ = "Reservations"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    barber_id = Column(BigIntId, ForeignKey("Barbers.id"), nullable=False, index=True)
    # legacy single-service column, always the first of service_ids
    service_id = Column(BigIntId, ForeignKey("Services.id"), nullable=True)
    service_ids = Column(IdList, nullable=True)
    customer_id = Column(BigIntId, ForeignKey("Customer.id"), nullable=True)
    customer_name = Column(String, nullable=False)
    customer_phone = Column(String, nullable=False)
    customer_email = Column(String, nullable=True)
    start_time = Column(UTCDateTime, nullable=False, index=True)
    end_time = Column(UTCDateTime, nullable=False)
    created_at = Column(UTCDateTime, default=lambda: datetime.now(timezone.utc))

    # Relationships
    barber = relationship("Barber", back_populates="reservations")
    customer = relationship("Customer", back_populates="reservations")

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="check_reservation_interval"),
    )

    @property
    def all_service_ids(self) -> list:
        if self.service_ids:
            return list(self.service_ids)
        if self.service_id is not None:
            return [self.service_id]
        return []


# Store-level double-booking guard. Only PostgreSQL can express it; the
# application check in the write path covers other backends.
event.listen(
    Base.metadata,
    "before_create",
    DDL("CREATE EXTENSION IF NOT EXISTS btree_gist").execute_if(dialect="postgresql"),
)
event.listen(
    Reservation.__table__,
    "after_create",
    DDL(
        f'ALTER TABLE "Reservations" ADD CONSTRAINT {OVERLAP_CONSTRAINT} '
        "EXCLUDE USING gist (barber_id WITH =, "
        "tstzrange(start_time, end_time, '[)') WITH &&)"
    ).execute_if(dialect="postgresql"),
)
