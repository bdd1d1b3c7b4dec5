from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query

from aggregation.team_profile import TeamProfileAggregator
from api.deps import get_gateway
from providers.api_football.base import FootballGateway
from .streaming import envelope_response

router = APIRouter(prefix="/teams", tags=["teams"])


@router.get("/{team_id}/profile", summary="Profilo squadra con statistiche e rosa")
async def get_team_profile(
    team_id: int = Path(..., gt=0),
    season: Optional[int] = Query(None),
    league: Optional[int] = Query(None),
    gateway: FootballGateway = Depends(get_gateway),
):
    aggregator = TeamProfileAggregator(gateway)
    return await envelope_response(aggregator.fetch_profile(team_id, season=season, league=league))


@router.get("/{team_id}/basic", summary="Solo anagrafica squadra")
async def get_team_basic(
    team_id: int = Path(..., gt=0),
    gateway: FootballGateway = Depends(get_gateway),
):
    return await envelope_response(TeamProfileAggregator(gateway).fetch_basic_profile(team_id))
