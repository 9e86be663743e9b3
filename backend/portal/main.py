"""FastAPI application entry point."""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from portal.config import settings
from portal.database import Base, engine
from portal.errors import PortalError, StorageError

# Import routers
from portal.routers import clients, staff, event_requests

# Import all models so Base.metadata knows about them
from portal.models.client import Client                                # noqa: F401
from portal.models.staff import StaffProfile                           # noqa: F401
from portal.models.event_request import EventRequest                   # noqa: F401
from portal.models.status_history import EventRequestStatusHistory     # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Event Portal",
    description="Internal management portal for an events-planning company — clients, staff and event request review",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(clients.router, prefix="/api/clients", tags=["Clients"])
app.include_router(staff.router, prefix="/api/staff", tags=["Staff"])
app.include_router(event_requests.router, prefix="/api/event-requests", tags=["EventRequests"])


@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError):
    """Render service errors as a failed action result."""
    if isinstance(exc, StorageError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message, "code": exc.code},
    )


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
