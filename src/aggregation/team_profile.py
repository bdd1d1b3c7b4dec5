from __future__ import annotations

from functools import partial
from typing import AsyncIterator, Optional

from core.bundles import TeamProfileDetails
from core.config import get_settings
from core.logging import get_logger
from core.resource import Resource
from providers.api_football.base import FootballGateway
from providers.api_football.models import ApiResponse
from .common import guarded, run_all, single_shot
from .errors import TeamProfileNotFoundError

log = get_logger("aggregation.team_profile")

OP_PROFILE = "team_profile"
OP_BASIC = "team_profile_basic"

PROFILE_FALLBACK = "Errore sconosciuto durante il caricamento del profilo squadra."
BASIC_FALLBACK = "Errore sconosciuto durante il caricamento delle informazioni di base della squadra."


def _first_profile(response: ApiResponse, team_id: int):
    profile = response.first()
    if profile is None:
        raise TeamProfileNotFoundError(team_id)
    return profile


class TeamProfileAggregator:
    """
    Profilo squadra: anagrafica (obbligatoria), statistiche stagionali
    (solo con league + season) e rosa, tutte in parallelo.

    NB: la rosa viene chiesta SEMPRE per ``squad_season`` (SQUAD_DEFAULT_SEASON,
    default 2024) e non per la ``season`` del chiamante. Comportamento
    mantenuto volutamente, in attesa di conferma lato prodotto.
    """

    def __init__(self, gateway: FootballGateway, squad_season: Optional[int] = None) -> None:
        self._gateway = gateway
        self._squad_season = squad_season if squad_season is not None else get_settings().squad_default_season

    def fetch_profile(
        self,
        team_id: int,
        season: Optional[int] = None,
        league: Optional[int] = None,
    ) -> AsyncIterator[Resource[TeamProfileDetails]]:
        return single_shot(
            OP_PROFILE,
            partial(self._load_profile, team_id, season, league),
            PROFILE_FALLBACK,
            team_id=team_id,
        )

    def fetch_basic_profile(self, team_id: int) -> AsyncIterator[Resource[TeamProfileDetails]]:
        return single_shot(
            OP_BASIC,
            partial(self._load_basic, team_id),
            BASIC_FALLBACK,
            team_id=team_id,
        )

    async def _load_profile(
        self,
        team_id: int,
        season: Optional[int],
        league: Optional[int],
    ) -> TeamProfileDetails:
        gw = self._gateway
        wants_statistics = league is not None and season is not None

        if season is not None and season != self._squad_season:
            log.info(
                "Rosa richiesta per stagione fissa %s (season chiamante=%s)",
                self._squad_season,
                season,
                extra={"team_id": team_id},
            )

        branches = [
            gw.fetch_team_profile(team_id),
            guarded(
                partial(gw.fetch_team_squad, team_id, self._squad_season),
                operation=OP_PROFILE,
                branch="squad",
                failure_label="Caricamento rosa non riuscito",
            ),
        ]
        if wants_statistics:
            branches.append(
                guarded(
                    partial(gw.fetch_team_statistics, league, season, team_id),
                    operation=OP_PROFILE,
                    branch="statistics",
                    failure_label="Caricamento statistiche squadra non riuscito",
                )
            )

        results = await run_all(*branches)
        profile_response: ApiResponse = results[0]
        squad_response: Optional[ApiResponse] = results[1].unwrap_or(None)
        statistics_response: Optional[ApiResponse] = results[2].unwrap_or(None) if wants_statistics else None

        team_profile = _first_profile(profile_response, team_id)
        squad = squad_response.first() if squad_response is not None else None
        statistics = statistics_response.first() if statistics_response is not None else None

        log.debug(
            "Rosa caricata: %s giocatori",
            len((squad or {}).get("players") or []),
            extra={"team_id": team_id},
        )
        return TeamProfileDetails(team_profile=team_profile, statistics=statistics, squad=squad)

    async def _load_basic(self, team_id: int) -> TeamProfileDetails:
        response = await self._gateway.fetch_team_profile(team_id)
        return TeamProfileDetails(team_profile=_first_profile(response, team_id))


__all__ = ["TeamProfileAggregator"]
