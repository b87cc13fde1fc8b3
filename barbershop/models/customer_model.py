from datetime import datetime, timezone
from sqlalchemy import Column, String, BigInteger
from sqlalchemy.orm import relationship
from barbershop.database import Base
from barbershop.models.types import BigIntId, UTCDateTime


class Customer(Base):
    __tablename__ = "Customer"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    # digits only, the dedup key for repeat bookings
    phone = Column(BigInteger, nullable=False, unique=True, index=True)
    email = Column(String, nullable=True)
    created_at = Column(UTCDateTime, default=lambda: datetime.now(timezone.utc))

    # Relationships
    reservations = relationship("Reservation", back_populates="customer")
