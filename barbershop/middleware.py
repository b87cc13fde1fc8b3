import time
from uuid import uuid4

from fastapi import Request

from barbershop.logger import get_logger

logger = get_logger(__name__)


async def add_request_id_and_process_time(request: Request, call_next):
    """Tag each request with an id and log how long it took"""
    request_id = request.headers.get("X-Request-ID") or uuid4().hex
    started = time.perf_counter()
    response = await call_next(request)
    elapsed = time.perf_counter() - started
    response.headers["X-Request-ID"] = request_id
    response.headers["X-Process-Time"] = f"{elapsed:.4f}"
    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code} "
        f"in {elapsed * 1000:.1f}ms [{request_id}]"
    )
    return response
