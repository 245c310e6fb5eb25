# imageflow/routers/health_routers.py
"""
Service health HTTP endpoint.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from .. import __version__
from ..config import Settings, get_settings
from ..services.transform_pipeline import available_engines

router = APIRouter(tags=["health"])


@router.get("/health", response_model=Dict[str, Any])
def health_check(settings: Settings = Depends(get_settings)) -> Dict[str, Any]:
    """Report the configured and the locally available image engines."""
    engines = available_engines()
    return {
        "status": "healthy" if engines else "degraded",
        "version": __version__,
        "configured_engine": settings.image_engine,
        "engine_preference": settings.engine_preference_list,
        "available_engines": engines,
    }
