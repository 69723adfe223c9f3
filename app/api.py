from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from app.engine import get_engine, shutdown_engine
from app.routes import account, jobs, location, my_alerts, radius, refresh
from core.database import init_db
from core.proximity.errors import (
    FetchFailed,
    LocationError,
    ProximityError,
    RefreshTimeout,
    RejectedByServer,
    SinkUnavailable,
    Unauthorized,
)

_STATUS_BY_ERROR = [
    (Unauthorized, 401),
    (RejectedByServer, 422),
    (LocationError, 409),
    (FetchFailed, 502),
    (SinkUnavailable, 503),
    (RefreshTimeout, 504),
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    await run_in_threadpool(init_db)
    get_engine()
    yield
    await shutdown_engine()


app = FastAPI(lifespan=lifespan)


app.include_router(radius.router)
app.include_router(location.router)
app.include_router(refresh.router)
app.include_router(jobs.router)
app.include_router(my_alerts.router)
app.include_router(account.router)


def error_status(exc: ProximityError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 500


@app.exception_handler(ProximityError)
async def proximity_error_handler(request: Request, exc: ProximityError):
    # RejectedByServer messages are passed through verbatim.
    return JSONResponse(
        {"error": {"code": exc.code, "message": str(exc)}},
        status_code=error_status(exc),
    )


@app.get("/health")
def health():
    return {"status": "ok", "refresh_state": get_engine().coordinator.state.value}


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("X-Frame-Options", "SAMEORIGIN")
    response.headers.setdefault("Content-Security-Policy", "default-src 'none'; frame-ancestors 'none'")
    response.headers.setdefault("Cache-Control", "no-store")
    return response
