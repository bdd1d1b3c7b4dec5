from __future__ import annotations

from providers.api_football.base import FootballGateway
from providers.api_football.gateway import ApiFootballGateway


def get_gateway() -> FootballGateway:
    """Dependency FastAPI: nuovo gateway per richiesta (sovrascrivibile nei test)."""
    return ApiFootballGateway()
