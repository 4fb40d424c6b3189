"""Health check endpoints."""

from fastapi import APIRouter, Depends

from smartremit import __version__
from smartremit.api.dependencies import Services, get_services

router = APIRouter()


@router.get("/health")
async def health_check():
    """Basic health check endpoint."""
    return {"status": "healthy", "service": "smartremit"}


@router.get("/health/detailed")
async def detailed_health(services: Services = Depends(get_services)):
    """Detailed health check with configuration info."""
    return {
        "status": "healthy",
        "service": "smartremit",
        "version": __version__,
        "config": services.settings.get_safe_dict(),
    }
