"""Booking listing web application."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bookingscope.core.config import settings
from bookingscope.core.database import create_db_and_tables
from bookingscope.core.exceptions import StoreQueryError, ValidationError
from bookingscope.routes import bookings

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    filename=settings.log_file or None,
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown lifecycle."""
    logger.info("Starting booking listing application")
    create_db_and_tables()
    yield
    logger.info("Booking listing application shut down")


app = FastAPI(
    title=settings.app_name,
    description="Lists the bookings a user may see as owner, attendee, seat holder or team admin",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS for external access
origins = (
    ["*"]
    if settings.allowed_origins == "*"
    else [o.strip() for o in settings.allowed_origins.split(",")]
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(bookings.router)


@app.exception_handler(StoreQueryError)
async def store_query_error_handler(request: Request, exc: StoreQueryError):
    """The store failed one of the listing queries; nothing partial is returned."""
    logger.error(f"{request.url.path}: {exc.message}")
    return JSONResponse(status_code=503, content={"detail": "Bookings are temporarily unavailable"})


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    """A stored event type blob is malformed."""
    logger.error(f"{request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=500,
        content={"detail": "Invalid event type data", "field": exc.field},
    )


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "app": settings.app_name}
