"""
Event Buddy API - Main Application Entry Point

Event creation and RSVP backend:
- Cookie sessions held server-side (memory or Redis)
- Event CRUD with creator-only updates and deletes
- Join/leave with read-back verification of every membership write
- Image uploads served from /uploads
"""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from event_buddy.core.config import get_settings
from event_buddy.core.logging import setup_logging, get_logger
from event_buddy.core.metrics import metrics_endpoint
from event_buddy.api.errors import register_exception_handlers
from event_buddy.api.router import api_router
from event_buddy.api.middleware import RequestLoggingMiddleware
from event_buddy.db.session import engine
from event_buddy.services.session_factory import get_session_store, close_session_store

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        session_backend=settings.SESSION_BACKEND,
    )

    Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
    get_session_store()

    yield

    await close_session_store()
    await engine.dispose()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Event creation and RSVP API with cookie sessions",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# The mobile client sends credentials, so origins should be listed explicitly in production
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLoggingMiddleware)

register_exception_handlers(app)

app.include_router(api_router)

app.mount(
    "/uploads",
    StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
    name="uploads",
)


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for Docker and load balancers."""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "session_backend": settings.SESSION_BACKEND,
    }


@app.get("/metrics", tags=["Health"], include_in_schema=False)
async def metrics():
    return metrics_endpoint()
