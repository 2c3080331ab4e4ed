#  Agent Dashboard - FastAPI Application
#
#  Builds the ASGI app: the DI container, a lifespan that opens the
#  database and shared HTTP client, error-to-status mapping, request ids,
#  CORS and the /api routers.
#
#  Depends on: config.py, container.py, routes/*.py, middleware/auth.py
#  Used by:    run.py

import logging
import uuid
from contextlib import AsyncExitStack, asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from dashboard.config import CORS_ORIGINS, DB_PATH, validate_config
from dashboard.container import Container
from dashboard.exceptions import DashboardError, ErrorKind
from dashboard.logging_config import set_request_id, set_user_id
from dashboard.rate_limit import limiter
from dashboard.routes.agents import router as agents_router
from dashboard.routes.auth import router as auth_router
from dashboard.routes.chat import router as chat_router
from dashboard.routes.health import router as health_router
from dashboard.routes.knowledge import router as knowledge_router
from dashboard.routes.metrics import router as metrics_router
from dashboard.routes.tasks import router as tasks_router

logger = logging.getLogger("dashboard.app")

# Create and wire the DI container
container = Container()

# HTTP status per error kind
_STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.VALIDATION: 422,
    ErrorKind.UNAVAILABLE: 503,
    ErrorKind.INTERNAL: 500,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database and HTTP client; close them and the model client, in reverse order, on exit."""
    logger.info("Agent Dashboard starting...")

    validate_config()

    db = container.db()
    http_client = container.http_client()
    llm = container.llm()

    async with AsyncExitStack() as stack:
        # A failed init leaves the handle unavailable; the app still serves
        await db.init(DB_PATH, run_migrations=True)
        stack.push_async_callback(db.close)
        if not db.available:
            logger.error("Database unavailable; data endpoints will return 503")

        # Shared httpx client, closed on shutdown
        stack.push_async_callback(http_client.aclose)
        stack.push_async_callback(llm.aclose)

        yield

    logger.info("Agent Dashboard shutting down")


app = FastAPI(
    title="Agent Dashboard",
    version="0.1.0",
    lifespan=lifespan,
)
app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={"detail": "Rate limit exceeded. Try again later.", "code": "rate_limited"},
    )


@app.exception_handler(DashboardError)
async def dashboard_error_handler(request: Request, exc: DashboardError):
    status_code = _STATUS_BY_KIND[exc.kind]
    if status_code >= 500:
        logger.warning("%s error on %s %s: %s", exc.kind.value, request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "code": exc.kind.value},
    )


@app.exception_handler(RequestValidationError)
async def validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={
            "detail": jsonable_encoder(exc.errors()),
            "code": ErrorKind.VALIDATION.value,
        },
    )


@app.exception_handler(Exception)
async def unhandled_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "code": ErrorKind.INTERNAL.value},
    )


# Request ID tracing
class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        rid = uuid.uuid4().hex[:12]
        set_request_id(rid)
        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = rid
            return response
        finally:
            set_request_id(None)
            set_user_id(None)

# Applies server.rate_limit to every route without its own @limiter.limit
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(RequestIDMiddleware)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)

# Health check (public, for liveness probes)
app.include_router(health_router, prefix="/api")

# Public read endpoints
app.include_router(agents_router, prefix="/api")
app.include_router(tasks_router, prefix="/api")
app.include_router(metrics_router, prefix="/api")
app.include_router(knowledge_router, prefix="/api")

# Per-endpoint auth: chat models are public, sessions and messages are not
app.include_router(chat_router, prefix="/api")
app.include_router(auth_router, prefix="/api")
