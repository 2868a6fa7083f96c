"""Hotel Booking API: FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from hotel_booking.api.v1.amenities import router as amenities_router
from hotel_booking.api.v1.auth import router as auth_router
from hotel_booking.api.v1.guests import router as guests_router
from hotel_booking.api.v1.logs import router as logs_router
from hotel_booking.api.v1.payments import router as payments_router
from hotel_booking.api.v1.reservations import router as reservations_router
from hotel_booking.api.v1.room_images import router as room_images_router
from hotel_booking.api.v1.room_types import router as room_types_router
from hotel_booking.api.v1.rooms import router as rooms_router
from hotel_booking.api.v1.users import router as users_router
from hotel_booking.config import settings
from hotel_booking.errors import register_exception_handlers

# Configure root logger so all hotel_booking.* loggers output to stderr.
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the upload directory on startup; dispose pooled connections on shutdown."""
    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
    yield
    from hotel_booking.database import engine

    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Room reservations, payments and staff administration for a single hotel.",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Routers
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(guests_router)
app.include_router(amenities_router)
app.include_router(room_types_router)
app.include_router(rooms_router)
app.include_router(room_images_router)
app.include_router(reservations_router)
app.include_router(payments_router)
app.include_router(logs_router)

# Uploaded room images.
app.mount("/uploads", StaticFiles(directory=settings.upload_dir, check_dir=False), name="uploads")


@app.get("/health", tags=["health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": settings.app_name}


@app.get("/", tags=["root"])
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("hotel_booking.main:app", host=settings.host, port=settings.port, reload=settings.debug)
