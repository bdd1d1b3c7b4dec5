from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from .models import ApiResponse


class FootballGateway(ABC):
    """
    Interfaccia astratta verso l'API remota (fixtures, formazioni, statistiche,
    eventi, squadre, rose, classifiche).

    Ogni metodo è una coroutine che ritorna un ``ApiResponse`` oppure solleva
    in caso di errore di trasporto/HTTP. Gli errori applicativi (campo
    ``errors`` non vuoto) NON sollevano: vanno interpretati dal chiamante.
    """

    @abstractmethod
    async def fetch_fixture_by_id(self, fixture_id: int) -> ApiResponse:
        raise NotImplementedError

    @abstractmethod
    async def fetch_lineups(self, fixture_id: int) -> ApiResponse:
        raise NotImplementedError

    @abstractmethod
    async def fetch_statistics(self, fixture_id: int, team_id: Optional[int] = None) -> ApiResponse:
        raise NotImplementedError

    @abstractmethod
    async def fetch_events(self, fixture_id: int) -> ApiResponse:
        raise NotImplementedError

    @abstractmethod
    async def fetch_team_profile(self, team_id: int) -> ApiResponse:
        raise NotImplementedError

    @abstractmethod
    async def fetch_team_statistics(self, league_id: int, season: int, team_id: int) -> ApiResponse:
        raise NotImplementedError

    @abstractmethod
    async def fetch_team_squad(self, team_id: int, season: Optional[int] = None) -> ApiResponse:
        raise NotImplementedError

    @abstractmethod
    async def fetch_standings(
        self,
        league_id: int,
        season: int,
        team_id: Optional[int] = None,
    ) -> ApiResponse:
        raise NotImplementedError
