"""
FastAPI application entry point for SmartMatch.

This is the main app that:
- Initializes FastAPI with CORS
- Registers all API routers
- Provides health check endpoint
- Sets up database connection lifecycle
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from smartmatch.config import settings
from smartmatch.database import engine, Base
from smartmatch.services.status import InvalidStatusError
# Import API routers
from smartmatch.api import (
    auth,
    profiles,
    jobs,
    skills,
    applications,
    internships,
    internship_requests,
    hr,
    students,
    admin_users,
    moderation,
    analytics,
    notifications,
    ai,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    On startup: optionally create tables (local development without Alembic)
    On shutdown: Close database connections gracefully
    """
    # Startup
    logger.info("Starting SmartMatch API...")
    logger.info(f"Database: {settings.database_url.split('@')[1] if '@' in settings.database_url else 'configured'}")
    logger.info(f"Debug mode: {settings.debug}")

    if settings.create_tables_on_startup:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created")

    yield

    # Shutdown
    logger.info("Shutting down SmartMatch API...")
    await engine.dispose()


# Initialize FastAPI app
app = FastAPI(
    title="SmartMatch API",
    description="Job and internship marketplace for candidates, companies and universities",
    version="1.0.0",
    debug=settings.debug,
    lifespan=lifespan,
)

# Configure CORS
# Set ALLOWED_ORIGINS environment variable with comma-separated domains
allowed_origins = [settings.get_frontend_url()]

if settings.allowed_origins:
    allowed_origins.extend(origin.strip() for origin in settings.allowed_origins.split(',') if origin.strip())

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidStatusError)
async def invalid_status_handler(request: Request, exc: InvalidStatusError):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


# Health check endpoint
@app.get("/health")
async def health_check():
    """Simple health check endpoint."""
    return {
        "status": "healthy",
        "service": "SmartMatch API",
        "version": "1.0.0",
    }


# Root endpoint
@app.get("/")
async def root():
    """API root with basic info."""
    return {
        "message": "SmartMatch API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
    }


# Register API routers
app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(profiles.router, prefix="/api/profiles", tags=["profiles"])
app.include_router(jobs.router, prefix="/api/jobs", tags=["jobs"])
app.include_router(skills.router, prefix="/api/skills", tags=["skills"])
app.include_router(applications.router, prefix="/api/applications", tags=["applications"])
app.include_router(internships.router, prefix="/api/internships", tags=["internships"])
app.include_router(internship_requests.router, prefix="/api/internship-requests", tags=["internship-requests"])
app.include_router(hr.router, prefix="/api/hr", tags=["hr"])
app.include_router(students.router, prefix="/api/universities/students", tags=["students"])
app.include_router(admin_users.router, prefix="/api/admin/users", tags=["admin"])
app.include_router(moderation.router, prefix="/api/admin/moderation", tags=["moderation"])
app.include_router(analytics.router, prefix="/api/admin", tags=["analytics"])
app.include_router(notifications.router, prefix="/api", tags=["notifications"])
app.include_router(ai.router, prefix="/api/ai", tags=["ai"])
