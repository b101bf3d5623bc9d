"""FastAPI application entry point."""
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from bulky_waste.config import settings
from bulky_waste.database import Base, SessionLocal, engine
from bulky_waste.exception_handlers import register_exception_handlers
from bulky_waste.services.municipality_importer import start_import

# Import routers
from bulky_waste.routers import bookings, staff

# Import all models so Base.metadata knows about them
from bulky_waste.models.municipality import Municipality  # noqa: F401
from bulky_waste.models.reservation import Reservation    # noqa: F401
from bulky_waste.models.state_change import StateChange   # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Bulky Waste Pickup",
    description="Bulky-waste pickup bookings for municipalities: citizen and staff API",
    version="0.1.0",
)

# CORS: explicit whitelist, no credentials
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Register routers
app.include_router(bookings.router, prefix="/api/bookings", tags=["Citizen"])
app.include_router(staff.router, prefix="/api/staff/bookings", tags=["Staff"])


@app.on_event("startup")
def on_startup():
    """Create tables (SQLite dev mode) and kick off the municipality import."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)
    if settings.MUNICIPALITIES_IMPORT_ENABLED:
        start_import(SessionLocal, settings.MUNICIPALITIES_API_URL, settings.MUNICIPALITIES_TIMEOUT_MS)
    else:
        logger.info("Municipality import disabled")


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
