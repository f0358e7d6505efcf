"""
Health endpoint.
"""

from fastapi import APIRouter

from imager.dependencies import ImagerService

router = APIRouter()


@router.get("/health")
async def health_check(imager: ImagerService):
    """
    Service health check endpoint.

    Reports the configured backends and the current public base URI
    (remote backends may only know it after their first call).
    """
    return {
        "status": "ok",
        "backends": [backend.name for backend in imager.backends],
        "baseUri": imager.base_uri(),
    }
