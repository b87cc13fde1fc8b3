from datetime import datetime, timezone
from sqlalchemy import Column, String, Boolean
from sqlalchemy.orm import relationship
from barbershop.database import Base
from barbershop.models.types import BigIntId, UTCDateTime


class Barber(Base):
    __tablename__ = "Barbers"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(UTCDateTime, default=lambda: datetime.now(timezone.utc))

    # Relationships
    reservations = relationship("Reservation", back_populates="barber")
    availability = relationship("BarberAvailability", back_populates="barber")
