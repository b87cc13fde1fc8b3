from datetime import datetime, time, timezone
from sqlalchemy import Column, Boolean, Date, Time, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from barbershop.database import Base
from barbershop.models.types import BigIntId, UTCDateTime


class BarberAvailability(Base):
    """Per-day exception to a barber's default schedule.

    No row for (barber, date) means available with default hours; the admin
    calendar only ever writes unavailable rows.
    """

    __tablename__ = "barber_availability"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    barber_id = Column(BigIntId, ForeignKey("Barbers.id"), nullable=False)
    date = Column(Date, nullable=False)
    is_available = Column(Boolean, nullable=False, default=False)
    working_hours_start = Column(Time, nullable=False, default=time(9, 0))
    working_hours_end = Column(Time, nullable=False, default=time(17, 0))
    created_at = Column(UTCDateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        UTCDateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    barber = relationship("Barber", back_populates="availability")

    __table_args__ = (
        UniqueConstraint("barber_id", "date", name="uq_barber_availability_day"),
    )
