import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from redis import RedisError

from .config import settings
from .errors import BookingServiceError, ErrorKind
from .redis_client import redis_client
from .routers import bookings, configs, slots
from .routers.deps import close_clients

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.BUSINESS_RULE: 400,
    ErrorKind.INTERNAL: 500,
}

@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    logger.info("Shutting down, closing collaborator clients")
    close_clients()


app = FastAPI(title="Booking Service", lifespan=lifespan)

app.include_router(slots.router)
app.include_router(bookings.router)
app.include_router(configs.router)


@app.exception_handler(BookingServiceError)
def booking_service_error_handler(request: Request, exc: BookingServiceError):
    status_code = STATUS_BY_KIND.get(exc.kind, 500)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} -> {exc}", exc_info=exc)
    else:
        logger.info(f"{request.method} {request.url.path} -> {status_code} {exc.code}")
    return JSONResponse(
        status_code=status_code,
        content={"code": exc.code, "message": str(exc)},
    )


@app.get("/health")
def health():
    try:
        redis_ok = bool(redis_client.ping())
    except RedisError:
        redis_ok = False
    return {"status": "ok", "redis": redis_ok}
