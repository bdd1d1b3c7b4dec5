from __future__ import annotations

from typing import Any, Dict, Optional

from core.logging import get_logger
from .base import FootballGateway
from .http_client import AsyncApiFootballHttpClient, get_http_client
from .models import ApiResponse

log = get_logger(__name__)


class ApiFootballGateway(FootballGateway):
    """
    Gateway concreto su API-Football (api-sports v3).
    - Usa AsyncApiFootballHttpClient (httpx + retry)
    - Non normalizza i record: restituisce l'involucro ``ApiResponse``
    - Non interpreta ``errors``: è compito degli aggregatori
    """

    def __init__(self, client: Optional[AsyncApiFootballHttpClient] = None) -> None:
        self._client = client or get_http_client()

    async def _get(self, path: str, params: Dict[str, Any]) -> ApiResponse:
        raw = await self._client.api_get(path, params=params)
        response = ApiResponse.from_json(raw)
        if response.errors:
            log.warning("API-Football errors endpoint=%s: %s", path, response.errors)
        return response

    async def fetch_fixture_by_id(self, fixture_id: int) -> ApiResponse:
        return await self._get("/fixtures", {"id": fixture_id})

    async def fetch_lineups(self, fixture_id: int) -> ApiResponse:
        return await self._get("/fixtures/lineups", {"fixture": fixture_id})

    async def fetch_statistics(self, fixture_id: int, team_id: Optional[int] = None) -> ApiResponse:
        return await self._get("/fixtures/statistics", {"fixture": fixture_id, "team": team_id})

    async def fetch_events(self, fixture_id: int) -> ApiResponse:
        return await self._get("/fixtures/events", {"fixture": fixture_id})

    async def fetch_team_profile(self, team_id: int) -> ApiResponse:
        return await self._get("/teams", {"id": team_id})

    async def fetch_team_statistics(self, league_id: int, season: int, team_id: int) -> ApiResponse:
        return await self._get(
            "/teams/statistics",
            {"league": league_id, "season": season, "team": team_id},
        )

    async def fetch_team_squad(self, team_id: int, season: Optional[int] = None) -> ApiResponse:
        return await self._get("/players/squads", {"team": team_id, "season": season})

    async def fetch_standings(
        self,
        league_id: int,
        season: int,
        team_id: Optional[int] = None,
    ) -> ApiResponse:
        return await self._get("/standings", {"league": league_id, "season": season, "team": team_id})

    def get_last_stats(self) -> Dict[str, Any]:
        return self._client.get_stats()


__all__ = ["ApiFootballGateway"]
