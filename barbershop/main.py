from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from barbershop.config import get_settings
from barbershop.database import create_schema, get_engine
from barbershop.middleware import add_request_id_and_process_time
from barbershop.routes.admin_route import admin_auth_router, admin_router
from barbershop.routes.booking_availability_route import booking_availability_router
from barbershop.routes.reservation_route import reservation_router
from barbershop.routes.service_route import service_router
from barbershop.logger import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_schema(get_engine())
    logger.info("Database schema ready")
    yield


app = FastAPI(
    title="Barbershop Booking API",
    version="1.0.0",
    description="Booking API for a barbershop: services, barbers, free slots, reservations and the admin calendar.",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_settings().cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(add_request_id_and_process_time)


def _field_name(loc) -> str:
    parts = [str(p) for p in loc if p not in ("body", "query", "path", "header", "cookie")]
    return ".".join(parts) or "body"


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if isinstance(exc.detail, dict):
        content = {"ok": False, **exc.detail}
    else:
        content = {"ok": False, "message": str(exc.detail)}
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if any(e.get("type") == "json_invalid" for e in errors):
        message = "Invalid JSON in request body"
    else:
        message = "Invalid request data"
    logger.info(f"Rejected invalid request to {request.url.path}: {len(errors)} error(s)")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "ok": False,
            "message": message,
            "errors": [
                {"field": _field_name(e.get("loc", ())), "message": e.get("msg", "")}
                for e in errors
            ],
        },
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"ok": False, "message": "Internal server error"},
    )


@app.get("/", status_code=200)
async def home():
    return {"ok": True, "message": "Welcome to the Barbershop Booking API"}


app.include_router(service_router, prefix="/api", tags=["Catalog"])
app.include_router(reservation_router, prefix="/api", tags=["Reservations"])
app.include_router(booking_availability_router, prefix="/api", tags=["Availability"])
app.include_router(admin_auth_router, prefix="/api", tags=["Admin"])
app.include_router(admin_router, prefix="/api", tags=["Admin"])
