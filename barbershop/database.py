"""
Database gateway.

Every route gets its session from ``get_db``. The engine behind it is built
once from whichever credential is configured: the elevated service URL when
present (so Customer and Reservations inserts are not blocked by row-level
policies), otherwise the restricted URL. Missing both is a configuration
error and fails immediately.
"""

from functools import lru_cache
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from barbershop.config import Settings, get_settings
from barbershop.logger import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    pass


class MissingCredentialsError(RuntimeError):
    pass


def resolve_database_url(settings: Settings) -> str:
    """Pick the store credential, preferring the elevated one."""
    if settings.database_service_url:
        url = settings.database_service_url
    elif settings.database_url:
        logger.warning(
            "DATABASE_SERVICE_URL not set, using restricted credential; "
            "row-level policies may reject Customer/Reservations inserts"
        )
        url = settings.database_url
    else:
        raise MissingCredentialsError(
            "Missing database credentials. Set DATABASE_SERVICE_URL, or "
            "DATABASE_URL for restricted access."
        )
    # hosted providers hand out postgres:// URLs, SQLAlchemy wants postgresql://
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    return url


@lru_cache
def get_engine() -> Engine:
    url = resolve_database_url(get_settings())
    return create_engine(url, pool_pre_ping=True)


@lru_cache
def get_sessionmaker() -> sessionmaker:
    return sessionmaker(bind=get_engine(), autoflush=False, expire_on_commit=False)


def get_db() -> Iterator[Session]:
    db = get_sessionmaker()()
    try:
        yield db
    finally:
        db.close()


def create_schema(engine: Engine) -> None:
    # model modules register their tables (and DDL hooks) on import
    from barbershop.models import (  # noqa: F401
        availability_model,
        barber_model,
        customer_model,
        reservation_model,
        service_model,
    )

    Base.metadata.create_all(bind=engine)
