from datetime import datetime, timezone
from sqlalchemy import Column, String, Boolean, Integer, BigInteger
from barbershop.database import Base
from barbershop.models.types import BigIntId, UTCDateTime


class Service(Base):
    __tablename__ = "Services"

    id = Column(BigIntId, primary_key=True, autoincrement=True)
    service_name = Column(String, nullable=False, index=True)
    # minor-unit currency (RSD)
    price_rsd = Column(BigInteger, nullable=False, default=0)
    duration_minutes = Column(Integer, nullable=False, default=30)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(UTCDateTime, default=lambda: datetime.now(timezone.utc))
