from __future__ import annotations

from fastapi import APIRouter
from core.config import get_settings

router = APIRouter(tags=["health"])

@router.get("/health", summary="Health check")
def health():
    """
    Health endpoint minimale.
    """
    settings = get_settings()
    return {
        "status": "ok",
        "api_base_url": settings.api_football_base_url,
        "squad_default_season": settings.squad_default_season,
        "prometheus_enabled": settings.enable_prometheus_exporter,
    }
