"""
Haulpay - FastAPI Application Entry Point

This is the main entry point for the FastAPI application.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import init_db, close_db, check_db, async_session_maker, get_async_session
from app.middleware.security import setup_security_middleware
from app.utils.error_handling import setup_exception_handlers

# Configure logging
logging.basicConfig(
    level=logging.INFO if not settings.debug else logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


async def seed_root_admin():
    """
    Seed the root admin account on startup.
    This ensures there's always an administrator able to log in.
    """
    from app.services.auth_service import AuthService

    async with async_session_maker() as session:
        service = AuthService(session)
        try:
            root_admin = await service.get_or_create_root_admin()
            logger.info(f"Root admin ready: {root_admin.email}")
        except SQLAlchemyError as e:
            logger.warning(f"Could not seed root admin: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI.
    Handles startup and shutdown events.
    """
    # Startup
    logger.info(f"Starting {settings.app_name}...")
    logger.info(f"Environment: {settings.app_env}")

    # Initialize database (dev only - use migrations in production)
    if settings.is_development:
        try:
            await init_db()
            logger.info("Database tables initialized")
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"Database initialization skipped: {e}")

    try:
        await seed_root_admin()
    except OSError as e:
        logger.warning(f"Root admin seeding skipped: {e}")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.app_name}...")
    await close_db()
    logger.info("Database connections closed")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="Payroll management for haulage drivers and staff",
    version="0.1.0",
    docs_url="/api/docs" if settings.is_development else None,
    redoc_url="/api/redoc" if settings.is_development else None,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Security headers and request logging
setup_security_middleware(app, development_mode=not settings.is_production)

# Setup exception handlers
setup_exception_handlers(app)

# Mount static files
app.mount("/static", StaticFiles(directory="static"), name="static")


@app.get("/api")
async def api_info():
    """API information endpoint."""
    return {
        "name": settings.app_name,
        "version": "0.1.0",
        "status": "running",
        "environment": settings.app_env,
        "api_docs": "/api/docs" if settings.is_development else "disabled",
    }


@app.get("/api/health")
async def health_check(db: AsyncSession = Depends(get_async_session)):
    """Health check endpoint. Reports 503 when the database is unreachable."""
    timestamp = datetime.now(timezone.utc).isoformat()
    try:
        await check_db(db)
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "unhealthy",
                "database": "disconnected",
                "timestamp": timestamp,
            },
        )

    return {
        "status": "healthy",
        "database": "connected",
        "timestamp": timestamp,
    }


# ===========================================
# INCLUDE ROUTERS
# ===========================================

from app.routers import auth, admin_employees, admin_payroll, employee_payroll, views

# HTML pages (login, dashboards, payslips)
app.include_router(views.router, tags=["Views"])

# Authentication
app.include_router(auth.router, prefix="/api", tags=["Authentication"])

# Admin: employees and payroll
app.include_router(admin_employees.router, prefix="/api/admin", tags=["Admin Employees"])
app.include_router(admin_payroll.router, prefix="/api/admin", tags=["Admin Payroll"])

# Employee self-service
app.include_router(employee_payroll.router, prefix="/api/employee", tags=["Employee Payroll"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
    )
