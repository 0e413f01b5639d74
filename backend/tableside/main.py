"""FastAPI application entry point."""

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Query, Request, WebSocket, WebSocketDisconnect, status
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text
from sqlalchemy.orm import sessionmaker
from starlette.middleware.base import BaseHTTPMiddleware

from tableside.api.routes import api_router
from tableside.core.config import settings
from tableside.core.errors import DomainError, register_exception_handlers
from tableside.core.rate_limit import limiter
from tableside.core.security import decode_access_token
from tableside.db.base import Base
from tableside.db.change_capture import change_feed
from tableside.db.session import SessionLocal, engine, get_session_factory
from tableside.services.live_views import VIEWS, LiveView

# Configure logging - use JSON format in production, human-readable in dev
root_logger = logging.getLogger()
root_logger.setLevel(getattr(logging, settings.log_level))
root_logger.handlers.clear()

if settings.debug:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
else:
    import json as _json
    import sys

    class JSONFormatter(logging.Formatter):
        def format(self, record):
            return _json.dumps({
                "ts": self.formatTime(record, self.datefmt),
                "level": record.levelname,
                "logger": record.name,
                "msg": record.getMessage(),
                "module": record.module,
                "line": record.lineno,
            })

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())

root_logger.addHandler(handler)
logger = logging.getLogger(__name__)
request_logger = logging.getLogger("requests")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging all HTTP requests and responses."""

    async def dispatch(self, request: Request, call_next):
        # Skip logging for health checks and docs
        if request.url.path in ["/health", "/health/ready", "/", "/docs", "/openapi.json"]:
            return await call_next(request)

        start_time = time.time()
        client_ip = request.client.host if request.client else "unknown"

        request_logger.info(f"Request: {request.method} {request.url.path} - Client: {client_ip}")

        try:
            response = await call_next(request)
            process_time = time.time() - start_time

            log_level = logging.WARNING if response.status_code >= 400 else logging.INFO
            request_logger.log(
                log_level,
                f"Response: {request.method} {request.url.path} - "
                f"Status: {response.status_code} - Time: {process_time:.3f}s - Client: {client_ip}"
            )
            return response
        except Exception as e:
            process_time = time.time() - start_time
            request_logger.error(
                f"Error: {request.method} {request.url.path} - "
                f"Exception: {str(e)} - Time: {process_time:.3f}s - Client: {client_ip}"
            )
            raise


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Starting Tableside ordering service")

    # Create tables if they don't exist (for SQLite dev)
    if settings.database_url.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created (SQLite mode)")

    yield

    logger.info(f"Shutting down Tableside ordering service ({change_feed.subscriber_count()} live subscriptions open)")


app = FastAPI(
    title="Tableside",
    description="Restaurant ordering backend: QR table ordering, meal bookings and admin dashboards",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# Rate limiting setup
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Domain errors -> {"detail", "error"} responses
register_exception_handlers(app)

# Request logging middleware
app.add_middleware(RequestLoggingMiddleware)

# CORS middleware - added last so it runs first
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept", "Origin", "X-Requested-With"],
    max_age=600,
)

# Include API routes
app.include_router(api_router, prefix=settings.api_v1_prefix)


@app.get("/")
def root():
    return {"name": "Tableside", "docs": "/docs" if settings.debug else None}


@app.get("/health")
def health_check():
    """Basic liveness check endpoint."""
    return {"status": "healthy", "version": "1.0.0"}


@app.get("/health/ready")
def readiness_check():
    """Readiness check with a database round trip."""
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        database = "healthy"
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        database = "unhealthy"
    finally:
        db.close()

    ready = database == "healthy"
    return {
        "status": "ready" if ready else "not_ready",
        "checks": {
            "database": database,
            "live_subscriptions": change_feed.subscriber_count(),
        },
    }


# ===== WebSocket live views =====

async def _authenticate_websocket(
    websocket: WebSocket,
    token: Optional[str],
    view_name: str,
) -> Optional[int]:
    """Authenticate a WebSocket connection. Returns user_id or None (rejected).

    Checks the ``token`` query parameter first, then the ``access_token``
    cookie. Connections without valid auth are closed with 1008.
    """
    payload = decode_access_token(token) if token else None
    if not payload:
        cookie_token = websocket.cookies.get("access_token")
        if cookie_token:
            payload = decode_access_token(cookie_token)

    if not payload or not payload.get("sub"):
        logger.warning(f"WebSocket rejected for view '{view_name}': no valid token")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return None
    return int(payload["sub"])


async def _forward_updates(websocket: WebSocket, view: LiveView, stale: asyncio.Event):
    """Refetch after each burst of changes and send the result.

    Changes that land while a fetch is running collapse into one more fetch.
    """
    while True:
        await stale.wait()
        stale.clear()
        try:
            data = await run_in_threadpool(view.current)
            await websocket.send_json({"event": "update", "view": view.name, "data": data})
        except DomainError as e:
            logger.info(f"Live view '{view.name}' can no longer be fetched: {e.detail}")
            await websocket.send_json({"event": "error", "view": view.name, "error": e.kind, "detail": e.detail})
            return
        except (WebSocketDisconnect, RuntimeError) as e:
            logger.debug(f"WebSocket send failed for view '{view.name}': {e}")
            return


@app.websocket("/ws/views/{name}")
async def websocket_live_view(
    websocket: WebSocket,
    name: str,
    token: Optional[str] = Query(None),
    order_id: Optional[int] = Query(None),
    booking_id: Optional[int] = Query(None),
    session_factory: sessionmaker = Depends(get_session_factory),
):
    """Send the named view on connect and again after every change to its tables.

    Admin views require a JWT; order and booking tracking and the customer
    menu are public.
    """
    spec = VIEWS.get(name)
    if spec is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return
    if not spec.public:
        if await _authenticate_websocket(websocket, token, name) is None:
            return

    await websocket.accept()
    loop = asyncio.get_running_loop()
    stale = asyncio.Event()
    params = {key: value for key, value in (("order_id", order_id), ("booking_id", booking_id)) if value is not None}

    def mark_stale(event) -> None:
        # Runs on the committing thread; the fetch happens in the forwarder
        loop.call_soon_threadsafe(stale.set)

    try:
        view = LiveView(name, session_factory, on_stale=mark_stale, **params)
    except DomainError as e:
        await websocket.send_json({"event": "error", "view": name, "error": e.kind, "detail": e.detail})
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    forwarder = None
    try:
        initial = await run_in_threadpool(view.current)
        await websocket.send_json({"event": "snapshot", "view": name, "data": initial})
        forwarder = asyncio.create_task(_forward_updates(websocket, view, stale))
        while True:
            message = await websocket.receive_text()
            if message == "ping":
                await websocket.send_text("pong")
    except DomainError as e:
        await websocket.send_json({"event": "error", "view": name, "error": e.kind, "detail": e.detail})
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
    except WebSocketDisconnect:
        logger.debug(f"WebSocket for view '{name}' disconnected")
    finally:
        view.close()
        if forwarder is not None:
            forwarder.cancel()
