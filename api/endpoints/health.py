"""
RecipeShare Health Check Endpoints
System health monitoring and diagnostics
"""

from fastapi import APIRouter, HTTPException, status
import asyncio
import platform
import time

import fastapi
from sqlalchemy import func, select

from core.database import DatabaseHealthCheck, get_db_session
from core.config import settings
from models import Category, Feedback, Ingredient, Recipe, User

router = APIRouter()


@router.get("/")
async def health_check():
    """Basic health check endpoint"""
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.VERSION,
        "timestamp": time.time()
    }


@router.get("/live")
async def liveness_check():
    """Kubernetes liveness probe endpoint"""
    return {"status": "alive"}


@router.get("/ready")
async def readiness_check():
    """
    Kubernetes readiness probe endpoint
    Checks the database connection
    """
    try:
        db_healthy = await asyncio.wait_for(DatabaseHealthCheck.check_connection(), timeout=5.0)
    except asyncio.TimeoutError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"status": "not_ready", "error": "Health check timeout"}
        )

    if not db_healthy:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"status": "not_ready", "database": "disconnected"}
        )

    return {
        "status": "ready",
        "database": "connected",
        "timestamp": time.time()
    }


@router.get("/detailed")
async def detailed_health_check():
    """
    Detailed health check with connection pool information
    Only available in development environment
    """
    if not settings.is_development:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Endpoint not available in production"
        )

    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "timestamp": time.time(),
        "components": {
            "database": await DatabaseHealthCheck.get_connection_info(),
        },
        "row_counts": await _row_counts(),
        "configuration": {
            "debug": settings.DEBUG,
            "max_page_size": settings.MAX_PAGE_SIZE,
            "max_request_size": settings.MAX_REQUEST_SIZE,
        }
    }


@router.get("/version")
async def version_info():
    """Application version information"""
    return {
        "service": settings.APP_NAME,
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "python_version": platform.python_version(),
        "fastapi_version": fastapi.__version__,
    }


async def _row_counts() -> dict:
    async with get_db_session() as session:
        return {
            model.__tablename__: await session.scalar(select(func.count()).select_from(model))
            for model in (User, Recipe, Ingredient, Category, Feedback)
        }
