from __future__ import annotations

from fastapi import APIRouter, HTTPException, Response
from prometheus_client import CONTENT_TYPE_LATEST

from core.config import get_settings
from monitoring.prometheus_exporter import generate_prometheus_text

router = APIRouter(tags=["metrics"])


@router.get("/metrics", summary="Metriche Prometheus delle aggregazioni")
def get_metrics():
    """
    Esposizione testuale Prometheus.
    Se l'exporter è disabilitato -> 404.
    """
    if not get_settings().enable_prometheus_exporter:
        raise HTTPException(status_code=404, detail="prometheus exporter disabled")
    return Response(content=generate_prometheus_text(), media_type=CONTENT_TYPE_LATEST)
